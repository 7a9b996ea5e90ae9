"""Bonus Engine - Pure logic for weekly threshold bonus rules.

A threshold rule counts how often a category or a specific activity appears
in a week's summary and awards flat bonus points when the count meets the
rule's comparison (at least N, or at most N). Rules fire independently and
their bonuses sum.

ARCHITECTURE: Pure logic engine, static methods only. Rule validation lives
in helpers/settings_helpers.py; this engine receives validated BonusRules.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .. import const
from ..type_defs import BonusAward, BonusRule, Summary


class BonusEngine:
    """Pure logic engine for threshold bonuses."""

    @staticmethod
    def rule_count(rule: BonusRule, summary: Summary) -> int:
        """Return the count a rule compares against."""
        if rule.match_type == const.BONUS_MATCH_CATEGORY:
            return summary.category_counts.get(rule.match_value, 0)
        return summary.activity_counts.get(rule.match_value, 0)

    @staticmethod
    def rule_met(rule: BonusRule, count: int) -> bool:
        """Apply the rule's comparison to a count."""
        if rule.comparison == const.BONUS_COMPARISON_MAX_COUNT:
            return count <= rule.threshold
        return count >= rule.threshold

    @staticmethod
    def evaluate(summary: Summary, rules: Iterable[BonusRule]) -> list[BonusAward]:
        """Evaluate every rule against a week's summary.

        Args:
            summary: Summary of exactly one week
            rules: Validated threshold rules

        Returns:
            One award per rule that fired, in rule order
        """
        awards: list[BonusAward] = []
        for rule in rules:
            count = BonusEngine.rule_count(rule, summary)
            if not BonusEngine.rule_met(rule, count):
                continue
            const.LOGGER.debug(
                "Threshold rule '%s' fired: count=%d threshold=%d (+%d)",
                rule.name,
                count,
                rule.threshold,
                rule.bonus_points,
            )
            awards.append(
                {
                    "rule_id": rule.rule_id,
                    "name": rule.name,
                    "count": count,
                    "threshold": rule.threshold,
                    "bonus_points": rule.bonus_points,
                }
            )
        return awards

    @staticmethod
    def total_bonus(awards: Sequence[BonusAward]) -> int:
        """Sum the bonus points of fired rules."""
        return sum(award["bonus_points"] for award in awards)
