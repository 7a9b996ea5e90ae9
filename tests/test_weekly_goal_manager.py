"""Tests for WeeklyGoalManager - generation, evaluation and finalization.

Test Categories:
- Goal generation from the previous week's ledger
- Mid-week evaluation (evaluate-weekly-goals entry point)
- Week finalization (finalize-week entry point), idempotency
- Household goals pooled over member keys
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any

from freezegun import freeze_time
import pytest

from budgetgame import BudgetGameCoordinator, const
from budgetgame.type_defs import (
    CategoryCountParams,
    NegativeLimitParams,
    StreakMaintainParams,
)
from tests.helpers import (
    ACTIVITY_DELIVERY,
    ACTIVITY_EXERCISE,
    ACTIVITY_REVIEW_BUDGET,
    ACTIVITY_STUDY,
    FakeGoalStore,
    FakeLedgerStore,
    FakeSettingsStore,
    make_event,
)

WEEK_START = date(2025, 1, 12)
WEEK_END = date(2025, 1, 18)


def _previous_week(actor_key: str = "alice") -> list:
    """Exercise Jan 9-11 (active streak), two deliveries (20 negative points)."""
    return [
        make_event("2025-01-09", ACTIVITY_EXERCISE, actor_key=actor_key),
        make_event("2025-01-10", ACTIVITY_EXERCISE, actor_key=actor_key),
        make_event("2025-01-11", ACTIVITY_EXERCISE, actor_key=actor_key),
        make_event("2025-01-06", ACTIVITY_DELIVERY, actor_key=actor_key),
        make_event("2025-01-08", ACTIVITY_DELIVERY, actor_key=actor_key),
    ]


def _successful_week() -> list:
    """A week that meets every generated goal and the study bonus rule."""
    events = [
        make_event(WEEK_START + timedelta(days=offset), ACTIVITY_EXERCISE)
        for offset in range(7)
    ]
    events += [
        make_event(WEEK_START + timedelta(days=offset), ACTIVITY_REVIEW_BUDGET)
        for offset in range(3)
    ]
    events += [
        make_event(WEEK_START + timedelta(days=offset), ACTIVITY_STUDY)
        for offset in range(5)
    ]
    events.append(make_event("2025-01-13", ACTIVITY_DELIVERY))
    return events


@pytest.fixture
def seeded_ledger(ledger: FakeLedgerStore) -> FakeLedgerStore:
    """Ledger holding the previous week's history."""
    ledger.events.extend(_previous_week())
    return ledger


# =============================================================================
# Test: Generation
# =============================================================================


class TestGenerateWeeklyGoals:
    """Tests for WeeklyGoalManager.generate_weekly_goals()."""

    def test_goals_from_previous_week(
        self,
        coordinator: BudgetGameCoordinator,
        seeded_ledger: FakeLedgerStore,
        goal_store: FakeGoalStore,
    ) -> None:
        """Last week's behavior shapes this week's three goals."""
        goals = coordinator.weekly_goal_manager.generate_weekly_goals(
            "alice", WEEK_START
        )

        assert [goal.goal_type for goal in goals] == [
            const.WEEKLY_GOAL_TYPE_CATEGORY_COUNT,
            const.WEEKLY_GOAL_TYPE_NEGATIVE_LIMIT,
            const.WEEKLY_GOAL_TYPE_STREAK_MAINTAIN,
        ]
        category, negative, streak = (goal.params for goal in goals)
        assert isinstance(category, CategoryCountParams)
        assert category.category == const.CATEGORY_FINANCIAL_PLANNING
        assert category.target == 3
        assert isinstance(negative, NegativeLimitParams)
        assert negative.baseline == 20
        assert negative.target == 16
        assert isinstance(streak, StreakMaintainParams)
        assert streak.activity_name == ACTIVITY_EXERCISE
        assert streak.starting_streak == 3
        assert streak.target == 10
        assert goal_store.get_weekly_goals("alice", WEEK_START) == goals

    def test_existing_goals_returned(
        self,
        coordinator: BudgetGameCoordinator,
        seeded_ledger: FakeLedgerStore,
        goal_store: FakeGoalStore,
    ) -> None:
        """A week is only generated once."""
        first = coordinator.weekly_goal_manager.generate_weekly_goals(
            "alice", WEEK_START
        )
        second = coordinator.weekly_goal_manager.generate_weekly_goals(
            "alice", date(2025, 1, 15)
        )

        assert second == first
        assert goal_store.weekly_save_count == 1

    def test_generated_event(
        self,
        coordinator: BudgetGameCoordinator,
        seeded_ledger: FakeLedgerStore,
        captured_events: dict[str, list[Any]],
    ) -> None:
        """WEEKLY_GOALS_GENERATED lists the new goal ids."""
        goals = coordinator.weekly_goal_manager.generate_weekly_goals(
            "alice", WEEK_START
        )

        payload = captured_events[const.SIGNAL_SUFFIX_WEEKLY_GOALS_GENERATED][0]
        assert payload["week_start"] == "2025-01-12"
        assert payload["goal_ids"] == [goal.goal_id for goal in goals]

    def test_no_history(self, coordinator: BudgetGameCoordinator) -> None:
        """A new actor gets a category goal, a no-spend goal and a streak start."""
        goals = coordinator.weekly_goal_manager.generate_weekly_goals(
            "alice", WEEK_START
        )

        assert [goal.goal_type for goal in goals] == [
            const.WEEKLY_GOAL_TYPE_CATEGORY_COUNT,
            const.WEEKLY_GOAL_TYPE_ACTIVITY_COUNT,
            const.WEEKLY_GOAL_TYPE_STREAK_START,
        ]

    @freeze_time("2025-01-15 12:00:00", tz_offset=0)
    def test_defaults_to_current_week(self, coordinator: BudgetGameCoordinator) -> None:
        """Without a day the current week is used."""
        goals = coordinator.weekly_goal_manager.generate_weekly_goals("alice")

        assert all(goal.week_start == WEEK_START for goal in goals)


# =============================================================================
# Test: Evaluation
# =============================================================================


class TestEvaluateWeeklyGoals:
    """Tests for the evaluate-weekly-goals entry point."""

    def test_mid_week_progress(
        self,
        coordinator: BudgetGameCoordinator,
        seeded_ledger: FakeLedgerStore,
    ) -> None:
        """Progress reflects the week so far."""
        coordinator.weekly_goal_manager.generate_weekly_goals("alice", WEEK_START)
        seeded_ledger.events.extend(
            [
                *[
                    make_event(day, ACTIVITY_EXERCISE)
                    for day in ("2025-01-12", "2025-01-13", "2025-01-14", "2025-01-15")
                ],
                make_event("2025-01-13", ACTIVITY_REVIEW_BUDGET),
                make_event("2025-01-13", ACTIVITY_DELIVERY),
            ]
        )

        results = coordinator.evaluate_weekly_goals("alice", as_of=date(2025, 1, 15))

        by_type = {item["goal"].goal_type: item for item in results}
        assert all(
            item["state"] == const.WEEKLY_GOAL_STATE_ACTIVE for item in results
        )
        category = by_type[const.WEEKLY_GOAL_TYPE_CATEGORY_COUNT]["progress"]
        assert category["current"] == 1
        assert category["met"] is False
        negative = by_type[const.WEEKLY_GOAL_TYPE_NEGATIVE_LIMIT]["progress"]
        assert negative["current"] == 10
        assert negative["met"] is True
        streak = by_type[const.WEEKLY_GOAL_TYPE_STREAK_MAINTAIN]["progress"]
        assert streak["current"] == 7
        assert streak["met"] is False

    def test_no_goals(self, coordinator: BudgetGameCoordinator) -> None:
        """A week without goals evaluates to an empty list."""
        assert coordinator.evaluate_weekly_goals("alice", as_of=WEEK_START) == []


# =============================================================================
# Test: Finalization
# =============================================================================


class TestFinalizeWeek:
    """Tests for the finalize-week entry point."""

    def test_all_goals_and_threshold_bonus(
        self,
        coordinator: BudgetGameCoordinator,
        seeded_ledger: FakeLedgerStore,
        goal_store: FakeGoalStore,
        captured_events: dict[str, list[Any]],
    ) -> None:
        """Met goals complete and the study rule fires."""
        coordinator.weekly_goal_manager.generate_weekly_goals("alice", WEEK_START)
        seeded_ledger.events.extend(_successful_week())

        result = coordinator.finalize_week("alice", WEEK_START)

        # 7 x 3 exercise + 3 x 2 review + 5 x 2 study - 10 delivery
        assert result["activity_points"] == 27
        assert result["goal_bonus_points"] == 15
        assert result["threshold_bonus_points"] == 2
        assert result["week_total"] == 44
        assert len(result["newly_completed_goal_ids"]) == 3
        assert all(
            goal.completed for goal in goal_store.get_weekly_goals("alice", WEEK_START)
        )
        assert len(captured_events[const.SIGNAL_SUFFIX_WEEKLY_GOAL_COMPLETED]) == 3
        finalized = captured_events[const.SIGNAL_SUFFIX_WEEK_FINALIZED]
        assert finalized[0]["week_total"] == 44

    def test_idempotent(
        self,
        coordinator: BudgetGameCoordinator,
        seeded_ledger: FakeLedgerStore,
        goal_store: FakeGoalStore,
        captured_events: dict[str, list[Any]],
    ) -> None:
        """Running finalization twice gives the same total, no new completions."""
        coordinator.weekly_goal_manager.generate_weekly_goals("alice", WEEK_START)
        seeded_ledger.events.extend(_successful_week())

        first = coordinator.finalize_week("alice", WEEK_START)
        saves = goal_store.weekly_save_count
        second = coordinator.finalize_week("alice", date(2025, 1, 16))

        assert second["week_total"] == first["week_total"]
        assert second["newly_completed_goal_ids"] == []
        assert goal_store.weekly_save_count == saves
        assert len(captured_events[const.SIGNAL_SUFFIX_WEEKLY_GOAL_COMPLETED]) == 3
        assert len(captured_events[const.SIGNAL_SUFFIX_WEEK_FINALIZED]) == 2

    def test_unmet_goals_stay_open(
        self,
        coordinator: BudgetGameCoordinator,
        seeded_ledger: FakeLedgerStore,
    ) -> None:
        """A quiet week completes only the negative limit goal."""
        coordinator.weekly_goal_manager.generate_weekly_goals("alice", WEEK_START)

        result = coordinator.finalize_week("alice", WEEK_START)

        assert result["activity_points"] == 0
        assert result["goal_bonus_points"] == 5
        assert result["threshold_bonus_points"] == 0
        assert result["week_total"] == 5

    def test_rules_from_settings(
        self,
        coordinator: BudgetGameCoordinator,
        ledger: FakeLedgerStore,
        settings_store: FakeSettingsStore,
    ) -> None:
        """Configured threshold rules replace the defaults."""
        settings_store.settings = {
            "bonus_rules": [
                {
                    "rule_id": "healthy",
                    "match_type": "category",
                    "match_value": const.CATEGORY_HEALTH,
                    "threshold": 2,
                    "bonus_points": 4,
                }
            ]
        }
        ledger.events.extend(
            [
                make_event("2025-01-13", ACTIVITY_EXERCISE),
                make_event("2025-01-15", ACTIVITY_EXERCISE),
            ]
        )

        result = coordinator.finalize_week("alice", WEEK_START)

        assert [award["rule_id"] for award in result["threshold_awards"]] == [
            "healthy"
        ]
        assert result["week_total"] == 6 + 4


# =============================================================================
# Test: Household Goals
# =============================================================================


class TestHouseholdGoals:
    """Goals for a household key count every member's events."""

    def test_members_pooled(
        self,
        coordinator: BudgetGameCoordinator,
        ledger: FakeLedgerStore,
    ) -> None:
        """Events from all members count toward household goals."""
        ledger.events.extend(_previous_week("alice"))
        goals = coordinator.weekly_goal_manager.generate_weekly_goals(
            "home", WEEK_START, members=["alice", "bob"]
        )
        ledger.events.extend(
            [
                make_event("2025-01-13", ACTIVITY_REVIEW_BUDGET, actor_key="alice"),
                make_event("2025-01-14", ACTIVITY_REVIEW_BUDGET, actor_key="bob"),
                make_event("2025-01-15", ACTIVITY_REVIEW_BUDGET, actor_key="bob"),
            ]
        )

        results = coordinator.evaluate_weekly_goals(
            "home", as_of=date(2025, 1, 15), members=["alice", "bob"]
        )

        assert goals[0].actor_key == "home"
        category = results[0]["progress"]
        assert category["current"] == 3
        assert category["met"] is True
