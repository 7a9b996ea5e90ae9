"""Tests for FinancialGoalManager - household goals through the coordinator.

Test Categories:
- Goal creation (input schema, persistence)
- Status changes
- Update-goal-amounts entry point (persistence, events, cascade)
- Household overview and summary
"""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest

from budgetgame import BudgetGameCoordinator, const
from budgetgame.engines.financial_goal_engine import GoalValidationError
from budgetgame.type_defs import FinancialGoal
from tests.helpers import FakeGoalStore

TODAY = date(2025, 6, 15)


def _create(
    coordinator: BudgetGameCoordinator, **user_input: Any
) -> FinancialGoal:
    user_input.setdefault("start_date", "2025-01-01")
    return coordinator.financial_goal_manager.create_goal("home", user_input)


# =============================================================================
# Test: Creation
# =============================================================================


class TestCreateGoal:
    """Tests for FinancialGoalManager.create_goal()."""

    def test_create_and_persist(
        self, coordinator: BudgetGameCoordinator, goal_store: FakeGoalStore
    ) -> None:
        """Valid input creates and stores a goal."""
        goal = _create(
            coordinator,
            goal_name="Emergency Fund",
            goal_type="savings",
            target_amount="1000",
            start_date="2025-01-31",
        )

        assert goal.target_amount == 1000.0
        assert goal.start_date == date(2025, 1, 31)
        assert goal.target_date == date(2026, 1, 31)
        assert goal_store.financial[goal.goal_id] == goal

    def test_explicit_target_date(self, coordinator: BudgetGameCoordinator) -> None:
        """A given target date is kept; US date format is accepted."""
        goal = _create(
            coordinator,
            goal_name="Car loan",
            goal_type="debt",
            target_amount=5000,
            current_amount=5000,
            target_date="12/31/2026",
        )

        assert goal.target_date == date(2026, 12, 31)
        assert goal.current_amount == 5000.0

    @pytest.mark.parametrize(
        ("user_input", "field"),
        [
            ({"goal_type": "savings", "target_amount": 100}, "goal_name"),
            (
                {"goal_name": "Fund", "goal_type": "stocks", "target_amount": 100},
                "goal_type",
            ),
            (
                {"goal_name": "Fund", "goal_type": "savings", "target_amount": "x"},
                "target_amount",
            ),
            (
                {
                    "goal_name": "Fund",
                    "goal_type": "savings",
                    "target_amount": 100,
                    "target_date": "someday",
                },
                "target_date",
            ),
        ],
    )
    def test_invalid_input(
        self,
        coordinator: BudgetGameCoordinator,
        user_input: dict[str, Any],
        field: str,
    ) -> None:
        """Schema failures surface as GoalValidationError on the field."""
        with pytest.raises(GoalValidationError) as excinfo:
            _create(coordinator, **user_input)

        assert excinfo.value.field == field

    def test_zero_target_rejected(self, coordinator: BudgetGameCoordinator) -> None:
        """Creation rules still apply after the schema."""
        with pytest.raises(GoalValidationError) as excinfo:
            _create(
                coordinator, goal_name="Fund", goal_type="savings", target_amount=0
            )

        assert excinfo.value.field == "target_amount"


# =============================================================================
# Test: Status Changes
# =============================================================================


class TestSetGoalStatus:
    """Tests for FinancialGoalManager.set_goal_status()."""

    def test_pause_and_resume(self, coordinator: BudgetGameCoordinator) -> None:
        """A paused goal reaching its target completes when resumed."""
        manager = coordinator.financial_goal_manager
        goal = _create(
            coordinator, goal_name="Fund", goal_type="savings", target_amount=100
        )

        manager.set_goal_status("home", goal.goal_id, const.GOAL_STATUS_PAUSED)
        coordinator.update_goal_amounts(
            "home", [{"goal_id": goal.goal_id, "new_amount": 150}]
        )
        paused = manager.get_goals("home")[0]
        assert paused.status == const.GOAL_STATUS_PAUSED

        resumed = manager.set_goal_status(
            "home", goal.goal_id, const.GOAL_STATUS_ACTIVE
        )

        assert resumed.status == const.GOAL_STATUS_COMPLETED

    def test_completed_cannot_be_set(self, coordinator: BudgetGameCoordinator) -> None:
        """Completion only follows from amounts."""
        goal = _create(
            coordinator, goal_name="Fund", goal_type="savings", target_amount=100
        )

        with pytest.raises(GoalValidationError, match="status"):
            coordinator.financial_goal_manager.set_goal_status(
                "home", goal.goal_id, const.GOAL_STATUS_COMPLETED
            )

    def test_unknown_goal(self, coordinator: BudgetGameCoordinator) -> None:
        """Unknown ids are rejected."""
        with pytest.raises(GoalValidationError, match="goal_id"):
            coordinator.financial_goal_manager.set_goal_status(
                "home", "goal_missing", const.GOAL_STATUS_PAUSED
            )


# =============================================================================
# Test: Update Goal Amounts
# =============================================================================


class TestUpdateGoalAmounts:
    """Tests for the update-goal-amounts entry point."""

    def test_cascade(
        self,
        coordinator: BudgetGameCoordinator,
        goal_store: FakeGoalStore,
        captured_events: dict[str, list[Any]],
    ) -> None:
        """Completing savings persists, emits, and activates the vacation fund."""
        savings = _create(
            coordinator,
            goal_name="Emergency Fund",
            goal_type="savings",
            target_amount=1000,
        )
        vacation = _create(
            coordinator,
            goal_name="Hawaii",
            goal_type="vacation_fund",
            target_amount=500,
            linked_goal_id=savings.goal_id,
        )

        result = coordinator.update_goal_amounts(
            "home", [{"goal_id": savings.goal_id, "new_amount": 1100}]
        )

        assert result.success is True
        assert goal_store.financial[savings.goal_id].status == (
            const.GOAL_STATUS_COMPLETED
        )
        completed = captured_events[const.SIGNAL_SUFFIX_FINANCIAL_GOAL_COMPLETED]
        assert completed == [
            {
                "household_id": "home",
                "goal_id": savings.goal_id,
                "goal_type": const.GOAL_TYPE_SAVINGS,
            }
        ]
        activated = captured_events[const.SIGNAL_SUFFIX_VACATION_FUND_ACTIVATED]
        assert activated == [
            {
                "household_id": "home",
                "savings_goal_id": savings.goal_id,
                "vacation_goal_id": vacation.goal_id,
                "vacation_goal_name": "Hawaii",
                "progress": 20.0,
            }
        ]

        overview = coordinator.financial_goal_manager.household_overview(
            "home", TODAY
        )
        hawaii = overview["active_goals"][0]
        assert hawaii["display_status"] == const.VACATION_FUND_ACTIVE
        assert hawaii["progress"] == 20.0

    def test_other_household_not_found(
        self, coordinator: BudgetGameCoordinator, goal_store: FakeGoalStore
    ) -> None:
        """Goals of another household cannot be updated."""
        goal = coordinator.financial_goal_manager.create_goal(
            "away",
            {"goal_name": "Fund", "goal_type": "savings", "target_amount": 100},
        )

        result = coordinator.update_goal_amounts(
            "home", [{"goal_id": goal.goal_id, "new_amount": 50}]
        )

        assert result.success is False
        assert result.errors[0].error == const.GOAL_ERROR_NOT_FOUND
        assert goal_store.financial[goal.goal_id].current_amount == 0.0

    def test_partial_batch_persists_valid_updates(
        self, coordinator: BudgetGameCoordinator, goal_store: FakeGoalStore
    ) -> None:
        """Invalid updates do not block valid ones."""
        goal = _create(
            coordinator, goal_name="Fund", goal_type="savings", target_amount=100
        )

        result = coordinator.update_goal_amounts(
            "home",
            [
                {"goal_id": goal.goal_id, "new_amount": -1},
                {"goal_id": goal.goal_id, "new_amount": 40},
            ],
        )

        assert result.success is False
        assert len(result.errors) == 1
        assert goal_store.financial[goal.goal_id].current_amount == 40.0


# =============================================================================
# Test: Overview
# =============================================================================


class TestOverview:
    """Household overview and compact summary."""

    def test_summary(self, coordinator: BudgetGameCoordinator) -> None:
        """The summary counts active and critical goals."""
        _create(
            coordinator,
            goal_name="Card",
            goal_type="debt",
            target_amount=2000,
            current_amount=500,
            target_date="2025-05-01",
        )
        _create(
            coordinator, goal_name="Fund", goal_type="savings", target_amount=1000
        )

        summary = coordinator.financial_goal_manager.goal_summary("home", TODAY)

        assert summary["total_active_goals"] == 2
        assert summary["critical_goals_count"] == 1
        assert summary["top_goals"][0]["goal_name"] == "Card"
        assert summary["total_progress"] == 38
