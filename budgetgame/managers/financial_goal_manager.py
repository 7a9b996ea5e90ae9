"""Financial Goal Manager - Household savings, debt and vacation-fund goals.

This manager handles:
- Goal creation (voluptuous input schema + FinancialGoalEngine rules)
- Status changes (pause, resume, cancel)
- The update-goal-amounts entry point, including the vacation-fund cascade
- Household overview and compact summary
- Event emission for goal completion and vacation-fund activation

ARCHITECTURE:
- FinancialGoalManager = STATEFUL orchestration over the GoalStore
- FinancialGoalEngine = STATELESS progress, cascade and validation logic
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import replace
from datetime import date
from typing import TYPE_CHECKING, Any

import voluptuous as vol

from .. import const
from ..engines.financial_goal_engine import FinancialGoalEngine, GoalValidationError
from ..utils import dt_utils
from .base_manager import BaseManager

if TYPE_CHECKING:
    from ..type_defs import FinancialGoal, GoalUpdateResult, HouseholdGoalOverview


# Re-export exception for external use
__all__ = ["FinancialGoalManager", "GoalValidationError"]


def _as_date(value: Any) -> date:
    """voluptuous validator: accept a date or a parseable date string."""
    if isinstance(value, date):
        return value
    parsed = dt_utils.dt_parse_date(value)
    if parsed is None:
        raise vol.Invalid(f"Invalid date: {value!r}")
    return parsed


CREATE_GOAL_SCHEMA = vol.Schema(
    {
        vol.Required("goal_name"): vol.All(str, vol.Strip, vol.Length(min=1)),
        vol.Required("goal_type"): vol.In(const.GOAL_TYPES),
        vol.Required("target_amount"): vol.All(vol.Coerce(float), vol.Range(min=0)),
        vol.Optional("current_amount", default=0.0): vol.All(
            vol.Coerce(float), vol.Range(min=0)
        ),
        vol.Optional("start_date"): _as_date,
        vol.Optional("target_date"): _as_date,
        vol.Optional("linked_goal_id"): vol.Any(None, str),
    }
)


class FinancialGoalManager(BaseManager):
    """Manager for household financial goals.

    Responsibilities:
    - Create goals and change their status
    - Apply amount updates and persist the changed goals
    - Emit FINANCIAL_GOAL_COMPLETED and VACATION_FUND_ACTIVATED events

    NOT responsible for:
    - Household membership (caller resolves household ids)
    """

    def setup(self) -> None:
        """No subscriptions: goal changes arrive through the coordinator."""

    def get_goals(self, household_id: str) -> list[FinancialGoal]:
        """Return a snapshot of a household's goals."""
        return list(self.coordinator.goal_store.get_financial_goals(household_id))

    def create_goal(
        self, household_id: str, user_input: Mapping[str, Any]
    ) -> FinancialGoal:
        """Validate input, build the goal and persist it.

        Raises:
            GoalValidationError: If the input or the creation rules fail
        """
        try:
            data = CREATE_GOAL_SCHEMA(dict(user_input))
        except vol.Invalid as err:
            path = err.path[0] if getattr(err, "path", None) else "input"
            raise GoalValidationError(str(path), err.msg) from err

        goal = FinancialGoalEngine.create_goal(
            household_id=household_id,
            goal_name=data["goal_name"],
            goal_type=data["goal_type"],
            target_amount=data["target_amount"],
            existing_goals=self.get_goals(household_id),
            current_amount=data["current_amount"],
            start_date=data.get("start_date"),
            target_date=data.get("target_date"),
            linked_goal_id=data.get("linked_goal_id"),
        )
        self.coordinator.goal_store.save_financial_goal(goal)
        const.LOGGER.info(
            "Created %s goal '%s' for household %s",
            goal.goal_type,
            goal.goal_name,
            household_id,
        )
        return goal

    def set_goal_status(
        self, household_id: str, goal_id: str, status: str
    ) -> FinancialGoal:
        """Pause, resume or cancel a goal.

        Completion is never set here; it follows from amount updates.

        Raises:
            GoalValidationError: If the goal is unknown or the status invalid
        """
        if status not in (
            const.GOAL_STATUS_ACTIVE,
            const.GOAL_STATUS_PAUSED,
            const.GOAL_STATUS_CANCELLED,
        ):
            raise GoalValidationError("status", f"cannot be set to '{status}'")
        goal = next(
            (goal for goal in self.get_goals(household_id) if goal.goal_id == goal_id),
            None,
        )
        if goal is None:
            raise GoalValidationError("goal_id", f"'{goal_id}' not found")

        updated = replace(goal, status=status)
        if status == const.GOAL_STATUS_ACTIVE:
            # Resuming re-checks completion against the current amount
            updated = FinancialGoalEngine.apply_amount(
                updated, updated.current_amount
            )
        self.coordinator.goal_store.save_financial_goal(updated)
        const.LOGGER.info(
            "Goal %s status: %s → %s", goal_id, goal.status, updated.status
        )
        return updated

    def update_goal_amounts(
        self, household_id: str, updates: Iterable[Mapping[str, Any]]
    ) -> GoalUpdateResult:
        """Apply a batch of amount updates for one household.

        Goals of other households are reported as not found.
        """
        result = FinancialGoalEngine.update_goal_amounts(
            self.get_goals(household_id), list(updates)
        )

        for goal in result.updated_goals:
            self.coordinator.goal_store.save_financial_goal(goal)

        for goal in result.completed_goals:
            const.LOGGER.info(
                "Financial goal '%s' completed for household %s",
                goal.goal_name,
                household_id,
            )
            self.emit(
                const.SIGNAL_SUFFIX_FINANCIAL_GOAL_COMPLETED,
                household_id=household_id,
                goal_id=goal.goal_id,
                goal_type=goal.goal_type,
            )
        for activation in result.activated_vacation_funds:
            self.emit(
                const.SIGNAL_SUFFIX_VACATION_FUND_ACTIVATED,
                household_id=household_id,
                **activation,
            )
        return result

    def household_overview(
        self, household_id: str, today: date | None = None
    ) -> HouseholdGoalOverview:
        """Active, completed and critical goals with progress."""
        return FinancialGoalEngine.calculate_household_goals(
            self.get_goals(household_id), today
        )

    def goal_summary(
        self, household_id: str, today: date | None = None
    ) -> dict[str, Any]:
        """Compact household goal summary."""
        return FinancialGoalEngine.goal_summary(self.get_goals(household_id), today)
