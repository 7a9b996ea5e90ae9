"""Unit tests for BonusEngine - weekly threshold bonus rules.

Test Categories:
- Activity and category matching
- min_count / max_count comparisons
- Multiple rules and totals
"""

from __future__ import annotations

from budgetgame import const
from budgetgame.engines.bonus_engine import BonusEngine
from budgetgame.type_defs import BonusRule
from tests.helpers import ACTIVITY_DELIVERY, ACTIVITY_STUDY, make_summary

STUDY_RULE = BonusRule(
    rule_id="grad_school_study_blocks",
    name="Grad School Alarm",
    match_type=const.BONUS_MATCH_ACTIVITY,
    match_value=ACTIVITY_STUDY,
    comparison=const.BONUS_COMPARISON_MIN_COUNT,
    threshold=5,
    bonus_points=2,
)
HEALTH_RULE = BonusRule(
    rule_id="health_week",
    name="Healthy Week",
    match_type=const.BONUS_MATCH_CATEGORY,
    match_value=const.CATEGORY_HEALTH,
    comparison=const.BONUS_COMPARISON_MIN_COUNT,
    threshold=3,
    bonus_points=4,
)
NO_DELIVERY_RULE = BonusRule(
    rule_id="no_delivery",
    name="Cooked Every Night",
    match_type=const.BONUS_MATCH_ACTIVITY,
    match_value=ACTIVITY_DELIVERY,
    comparison=const.BONUS_COMPARISON_MAX_COUNT,
    threshold=0,
    bonus_points=3,
)


class TestRuleMatching:
    """Rules count activities or categories."""

    def test_activity_rule_fires_at_threshold(self) -> None:
        """Five study blocks fire the study rule."""
        summary = make_summary(activity_counts={ACTIVITY_STUDY: 5})

        awards = BonusEngine.evaluate(summary, [STUDY_RULE])

        assert awards == [
            {
                "rule_id": "grad_school_study_blocks",
                "name": "Grad School Alarm",
                "count": 5,
                "threshold": 5,
                "bonus_points": 2,
            }
        ]

    def test_activity_rule_below_threshold(self) -> None:
        """Four study blocks do not fire the rule."""
        summary = make_summary(activity_counts={ACTIVITY_STUDY: 4})

        assert BonusEngine.evaluate(summary, [STUDY_RULE]) == []

    def test_category_rule(self) -> None:
        """Category rules count the category bucket."""
        summary = make_summary(category_counts={const.CATEGORY_HEALTH: 3})

        awards = BonusEngine.evaluate(summary, [HEALTH_RULE])

        assert [award["rule_id"] for award in awards] == ["health_week"]

    def test_max_count_rule(self) -> None:
        """max_count rules fire at or under the threshold."""
        assert BonusEngine.evaluate(make_summary(), [NO_DELIVERY_RULE])
        assert not BonusEngine.evaluate(
            make_summary(activity_counts={ACTIVITY_DELIVERY: 1}), [NO_DELIVERY_RULE]
        )


class TestTotals:
    """Rules fire independently and their bonuses sum."""

    def test_total_bonus(self) -> None:
        """Every fired rule contributes its points."""
        summary = make_summary(
            activity_counts={ACTIVITY_STUDY: 6},
            category_counts={const.CATEGORY_HEALTH: 1},
        )

        awards = BonusEngine.evaluate(
            summary, [STUDY_RULE, HEALTH_RULE, NO_DELIVERY_RULE]
        )

        assert [award["rule_id"] for award in awards] == [
            "grad_school_study_blocks",
            "no_delivery",
        ]
        assert BonusEngine.total_bonus(awards) == 5

    def test_no_rules(self) -> None:
        """No rules means no bonus."""
        assert BonusEngine.total_bonus(BonusEngine.evaluate(make_summary(), [])) == 0
