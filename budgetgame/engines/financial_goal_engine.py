"""Financial Goal Engine - Pure logic for savings, debt and vacation-fund goals.

This engine provides stateless functions for:
- Goal creation rules (required fields, known type, household limit)
- Progress and amount-remaining per goal type
- Status recomputation when an amount changes
- The savings → vacation-fund cascade
- Batch amount updates with structured per-update failures
- Household overview (active, completed, critical, months remaining)

Progress:
- debt: (target − current) / target × 100, where target is the starting
  balance and current is what is still owed
- savings / vacation_fund: current / target × 100
- completed goals always report 100

Cascade: a vacation fund stays WAITING (progress 0, no ETA) until its linked
savings goal completes. After that its progress comes from the savings
excess: min(100, max(0, savings.current − savings.target) / target × 100).

ARCHITECTURE: Pure logic engine, static methods only. Persistence and
signals belong in FinancialGoalManager.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from datetime import date
import math
from typing import Any
import uuid

from .. import const
from ..type_defs import (
    FinancialGoal,
    GoalUpdateFailure,
    GoalUpdateResult,
    GoalView,
    HouseholdGoalOverview,
    VacationActivation,
)
from ..utils import dt_utils
from ..utils.math_utils import clamp, round_points


class GoalValidationError(Exception):
    """Raised when a new goal fails the creation rules.

    Attributes:
        field: The offending field (or "household" for the goal limit)
        reason: Human-readable explanation
    """

    def __init__(self, field: str, reason: str) -> None:
        """Initialize GoalValidationError.

        Args:
            field: The offending field
            reason: Human-readable explanation
        """
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid goal {field}: {reason}")


class FinancialGoalEngine:
    """Pure logic engine for household financial goals."""

    # =========================================================================
    # Creation
    # =========================================================================

    @staticmethod
    def generate_goal_id() -> str:
        """Return a new unique financial goal id ("goal_<hex>")."""
        return f"goal_{uuid.uuid4().hex[:16]}"

    @staticmethod
    def create_goal(
        household_id: str,
        goal_name: str,
        goal_type: str,
        target_amount: float,
        existing_goals: Sequence[FinancialGoal] = (),
        current_amount: float = 0.0,
        start_date: date | None = None,
        target_date: date | None = None,
        linked_goal_id: str | None = None,
    ) -> FinancialGoal:
        """Build a new active goal after applying the creation rules.

        The target date defaults to twelve months after the start date.

        Raises:
            GoalValidationError: On a missing name or household, unknown type,
                non-positive target, negative amount, invalid link, or when
                the household already has the maximum number of goals
        """
        if not str(household_id or "").strip():
            raise GoalValidationError("household_id", "is required")
        if not str(goal_name or "").strip():
            raise GoalValidationError("goal_name", "is required")
        if goal_type not in const.GOAL_TYPES:
            raise GoalValidationError(
                "goal_type", f"must be one of {', '.join(const.GOAL_TYPES)}"
            )
        if target_amount <= 0:
            raise GoalValidationError("target_amount", "must be greater than 0")
        if current_amount < 0:
            raise GoalValidationError("current_amount", "cannot be negative")

        household_goals = [
            goal
            for goal in existing_goals
            if goal.household_id == household_id
            and goal.status != const.GOAL_STATUS_CANCELLED
        ]
        if len(household_goals) >= const.MAX_GOALS_PER_HOUSEHOLD:
            raise GoalValidationError(
                "household",
                f"already has the maximum of {const.MAX_GOALS_PER_HOUSEHOLD} goals",
            )

        if linked_goal_id is not None:
            if goal_type != const.GOAL_TYPE_VACATION_FUND:
                raise GoalValidationError(
                    "linked_goal_id", "only vacation fund goals can be linked"
                )
            if not any(
                goal.goal_id == linked_goal_id
                and goal.goal_type == const.GOAL_TYPE_SAVINGS
                for goal in household_goals
            ):
                raise GoalValidationError(
                    "linked_goal_id", "must reference a savings goal in the household"
                )

        start = start_date or dt_utils.dt_today_local()
        return FinancialGoal(
            goal_id=FinancialGoalEngine.generate_goal_id(),
            household_id=household_id,
            goal_name=goal_name.strip(),
            goal_type=goal_type,
            target_amount=float(target_amount),
            current_amount=float(current_amount),
            start_date=start,
            target_date=target_date
            or dt_utils.add_months(start, const.DEFAULT_GOAL_DURATION_MONTHS),
            status=const.GOAL_STATUS_ACTIVE,
            linked_goal_id=linked_goal_id,
        )

    # =========================================================================
    # Progress
    # =========================================================================

    @staticmethod
    def calculate_progress(goal: FinancialGoal) -> float:
        """Return progress percent (0-100) for a goal on its own amounts."""
        if goal.status == const.GOAL_STATUS_COMPLETED:
            return 100.0

        if goal.goal_type == const.GOAL_TYPE_DEBT:
            if goal.target_amount <= 0:
                return 100.0
            paid = goal.target_amount - goal.current_amount
            return round_points(clamp(paid / goal.target_amount * 100, 0.0, 100.0))

        if goal.goal_type in (const.GOAL_TYPE_SAVINGS, const.GOAL_TYPE_VACATION_FUND):
            if goal.target_amount <= 0:
                return 0.0
            return round_points(
                clamp(goal.current_amount / goal.target_amount * 100, 0.0, 100.0)
            )

        const.LOGGER.warning(
            "Unknown financial goal type '%s' for goal %s", goal.goal_type, goal.goal_id
        )
        return 0.0

    @staticmethod
    def meets_target(goal: FinancialGoal, amount: float) -> bool:
        """Return True when ``amount`` completes the goal."""
        if goal.goal_type == const.GOAL_TYPE_DEBT:
            return amount <= 0
        return amount >= goal.target_amount

    @staticmethod
    def apply_amount(goal: FinancialGoal, new_amount: float) -> FinancialGoal:
        """Return the goal with a new amount and recomputed status.

        Active goals complete when the amount reaches the target; completed
        goals that no longer qualify return to active. Paused and cancelled
        goals keep their status.
        """
        status = goal.status
        if status in (const.GOAL_STATUS_ACTIVE, const.GOAL_STATUS_COMPLETED):
            status = (
                const.GOAL_STATUS_COMPLETED
                if FinancialGoalEngine.meets_target(goal, new_amount)
                else const.GOAL_STATUS_ACTIVE
            )
        return replace(goal, current_amount=new_amount, status=status)

    @staticmethod
    def months_remaining(goal: FinancialGoal, today: date | None = None) -> int | None:
        """Whole months until the target date, floored at 0; None without one."""
        if goal.target_date is None:
            return None
        return dt_utils.months_between(
            today or dt_utils.dt_today_local(), goal.target_date
        )

    # =========================================================================
    # Vacation Fund Cascade
    # =========================================================================

    @staticmethod
    def resolve_linked_savings(
        vacation_goal: FinancialGoal, goals: Iterable[FinancialGoal]
    ) -> FinancialGoal | None:
        """Find the savings goal a vacation fund waits on.

        An explicit ``linked_goal_id`` wins. Without one, the legacy name
        heuristic applies: either goal's name mentions vacation/travel, or the
        savings name appears inside the vacation goal's name.
        """
        savings_goals = [
            goal
            for goal in goals
            if goal.goal_type == const.GOAL_TYPE_SAVINGS
            and goal.household_id == vacation_goal.household_id
            and goal.status != const.GOAL_STATUS_CANCELLED
        ]

        if vacation_goal.linked_goal_id is not None:
            for goal in savings_goals:
                if goal.goal_id == vacation_goal.linked_goal_id:
                    return goal
            const.LOGGER.warning(
                "Vacation goal %s links to missing savings goal %s",
                vacation_goal.goal_id,
                vacation_goal.linked_goal_id,
            )
            return None

        keywords = const.VACATION_NAME_KEYWORDS
        vacation_name = vacation_goal.goal_name.lower()
        vacation_named = any(keyword in vacation_name for keyword in keywords)
        for goal in savings_goals:
            savings_name = goal.goal_name.lower()
            if (
                vacation_named
                or any(keyword in savings_name for keyword in keywords)
                or savings_name in vacation_name
            ):
                const.LOGGER.debug(
                    "Vacation goal %s linked to savings goal %s by name",
                    vacation_goal.goal_id,
                    goal.goal_id,
                )
                return goal
        return None

    @staticmethod
    def savings_complete(savings_goal: FinancialGoal) -> bool:
        """Return True when a savings goal has reached its target."""
        return (
            savings_goal.status == const.GOAL_STATUS_COMPLETED
            or savings_goal.current_amount >= savings_goal.target_amount
        )

    @staticmethod
    def vacation_excess(savings_goal: FinancialGoal) -> float:
        """Savings above the savings target, available to the vacation fund."""
        return max(0.0, savings_goal.current_amount - savings_goal.target_amount)

    @staticmethod
    def vacation_progress(
        savings_goal: FinancialGoal, vacation_goal: FinancialGoal
    ) -> float:
        """Progress of an active vacation fund from the savings excess."""
        if vacation_goal.target_amount <= 0:
            return 0.0
        excess = FinancialGoalEngine.vacation_excess(savings_goal)
        return round_points(min(100.0, excess / vacation_goal.target_amount * 100))

    @staticmethod
    def vacation_status(
        vacation_goal: FinancialGoal, goals: Iterable[FinancialGoal]
    ) -> tuple[str, float, FinancialGoal | None]:
        """Return (display status, progress, linked savings goal)."""
        savings = FinancialGoalEngine.resolve_linked_savings(vacation_goal, goals)
        if savings is None or not FinancialGoalEngine.savings_complete(savings):
            return const.VACATION_FUND_WAITING, 0.0, savings
        return (
            const.VACATION_FUND_ACTIVE,
            FinancialGoalEngine.vacation_progress(savings, vacation_goal),
            savings,
        )

    # =========================================================================
    # Batch Amount Updates
    # =========================================================================

    @staticmethod
    def update_goal_amounts(
        goals: Sequence[FinancialGoal],
        updates: Iterable[Mapping[str, Any]],
    ) -> GoalUpdateResult:
        """Apply a batch of amount updates.

        Each update is handled on its own: unknown goal ids and invalid
        amounts become structured failures while the rest are applied. When a
        savings goal completes in this batch, every vacation fund linked to it
        is reported as activated.

        Args:
            goals: Current goals (any households)
            updates: Mappings with ``goal_id`` and ``new_amount``

        Returns:
            GoalUpdateResult; ``success`` is False when any update failed
        """
        by_id = {goal.goal_id: goal for goal in goals}
        result = GoalUpdateResult()
        completed_savings: list[FinancialGoal] = []

        for update in updates:
            goal_id = str(update.get("goal_id") or "")
            goal = by_id.get(goal_id)
            if goal is None:
                result.errors.append(
                    GoalUpdateFailure(
                        goal_id, const.GOAL_ERROR_NOT_FOUND, "Goal not found"
                    )
                )
                continue

            failure = FinancialGoalEngine._check_update(goal, update.get("new_amount"))
            if failure is not None:
                result.errors.append(failure)
                continue

            updated = FinancialGoalEngine.apply_amount(
                goal, float(update["new_amount"])
            )
            by_id[goal_id] = updated
            result.updated_goals.append(updated)

            if (
                updated.status == const.GOAL_STATUS_COMPLETED
                and goal.status != const.GOAL_STATUS_COMPLETED
            ):
                result.completed_goals.append(updated)
                if updated.goal_type == const.GOAL_TYPE_SAVINGS:
                    completed_savings.append(updated)

        current_goals = list(by_id.values())
        for savings in completed_savings:
            result.activated_vacation_funds.extend(
                FinancialGoalEngine._activations_for(savings, current_goals)
            )

        for failure in result.errors:
            const.LOGGER.warning(
                "Goal update failed for %s: %s (%s)",
                failure.goal_id,
                failure.error,
                failure.message,
            )
        result.success = not result.errors
        return result

    @staticmethod
    def _check_update(goal: FinancialGoal, raw_amount: Any) -> GoalUpdateFailure | None:
        """Validate one requested amount; None when it can be applied."""
        if goal.status == const.GOAL_STATUS_CANCELLED:
            return GoalUpdateFailure(
                goal.goal_id,
                const.GOAL_ERROR_INVALID_UPDATE,
                "Cancelled goals cannot be updated",
            )
        if isinstance(raw_amount, bool):
            amount = math.nan
        else:
            try:
                amount = float(raw_amount)
            except (TypeError, ValueError):
                amount = math.nan
        if not math.isfinite(amount):
            return GoalUpdateFailure(
                goal.goal_id,
                const.GOAL_ERROR_INVALID_UPDATE,
                f"Amount must be a number, got {raw_amount!r}",
            )
        if amount < 0:
            return GoalUpdateFailure(
                goal.goal_id,
                const.GOAL_ERROR_INVALID_UPDATE,
                "Amount cannot be negative",
            )
        return None

    @staticmethod
    def _activations_for(
        savings: FinancialGoal, goals: Sequence[FinancialGoal]
    ) -> list[VacationActivation]:
        """Vacation funds in the savings goal's household that link to it."""
        activations: list[VacationActivation] = []
        for goal in goals:
            if (
                goal.goal_type != const.GOAL_TYPE_VACATION_FUND
                or goal.household_id != savings.household_id
                or goal.status == const.GOAL_STATUS_CANCELLED
            ):
                continue
            linked = FinancialGoalEngine.resolve_linked_savings(goal, goals)
            if linked is None or linked.goal_id != savings.goal_id:
                continue
            progress = FinancialGoalEngine.vacation_progress(savings, goal)
            const.LOGGER.info(
                "Vacation fund '%s' activated by savings goal '%s' (%.2f%%)",
                goal.goal_name,
                savings.goal_name,
                progress,
            )
            activations.append(
                {
                    "savings_goal_id": savings.goal_id,
                    "vacation_goal_id": goal.goal_id,
                    "vacation_goal_name": goal.goal_name,
                    "progress": progress,
                }
            )
        return activations

    # =========================================================================
    # Household Overview
    # =========================================================================

    @staticmethod
    def calculate_household_goals(
        goals: Sequence[FinancialGoal], today: date | None = None
    ) -> HouseholdGoalOverview:
        """Build the household overview.

        Active goals are sorted critical-first (past their target date), then
        by progress descending. ``total_progress`` averages active goals.
        Paused and cancelled goals are left out.
        """
        today = today or dt_utils.dt_today_local()
        active: list[GoalView] = []
        completed: list[GoalView] = []

        for goal in goals:
            if goal.status == const.GOAL_STATUS_COMPLETED:
                completed.append(
                    FinancialGoalEngine._make_view(
                        goal, goal.status, 100.0, 0.0, None, False
                    )
                )
                continue
            if goal.status != const.GOAL_STATUS_ACTIVE:
                continue

            if goal.goal_type == const.GOAL_TYPE_VACATION_FUND:
                display, progress, savings = FinancialGoalEngine.vacation_status(
                    goal, goals
                )
                if display == const.VACATION_FUND_WAITING or savings is None:
                    active.append(
                        FinancialGoalEngine._make_view(
                            goal,
                            display,
                            0.0,
                            goal.target_amount,
                            None,
                            False,
                            current_amount=0.0,
                        )
                    )
                    continue
                excess = FinancialGoalEngine.vacation_excess(savings)
                active.append(
                    FinancialGoalEngine._make_view(
                        goal,
                        display,
                        progress,
                        max(0.0, goal.target_amount - excess),
                        FinancialGoalEngine.months_remaining(goal, today),
                        FinancialGoalEngine._is_critical(goal, today),
                        current_amount=excess,
                    )
                )
                continue

            progress = FinancialGoalEngine.calculate_progress(goal)
            view = FinancialGoalEngine._make_view(
                goal,
                goal.status,
                progress,
                FinancialGoalEngine.amount_remaining(goal),
                FinancialGoalEngine.months_remaining(goal, today),
                FinancialGoalEngine._is_critical(goal, today),
            )
            if goal.goal_type == const.GOAL_TYPE_SAVINGS and progress >= 100:
                completed.append(view)
            else:
                active.append(view)

        active.sort(key=lambda view: (not view["critical"], -view["progress"]))
        total_progress = (
            round_points(sum(view["progress"] for view in active) / len(active))
            if active
            else 0.0
        )
        return {
            "active_goals": active,
            "completed_goals": completed,
            "critical_goals": [view for view in active if view["critical"]],
            "total_progress": total_progress,
        }

    @staticmethod
    def goal_summary(
        goals: Sequence[FinancialGoal], today: date | None = None
    ) -> dict[str, Any]:
        """Compact overview: counts, rounded progress, top goals, recent completions."""
        overview = FinancialGoalEngine.calculate_household_goals(goals, today)
        return {
            "total_active_goals": len(overview["active_goals"]),
            "total_completed_goals": len(overview["completed_goals"]),
            "critical_goals_count": len(overview["critical_goals"]),
            "total_progress": round(overview["total_progress"]),
            "vacation_fund_active": any(
                view["display_status"] == const.VACATION_FUND_ACTIVE
                for view in overview["active_goals"]
            ),
            "top_goals": overview["active_goals"][: const.GOAL_SUMMARY_TOP_COUNT],
            "recent_completions": overview["completed_goals"][
                -const.GOAL_SUMMARY_RECENT_COMPLETED_COUNT :
            ],
        }

    @staticmethod
    def amount_remaining(goal: FinancialGoal) -> float:
        """Amount still to go: owed balance for debt, shortfall otherwise."""
        if goal.goal_type == const.GOAL_TYPE_DEBT:
            return round_points(max(0.0, goal.current_amount))
        return round_points(max(0.0, goal.target_amount - goal.current_amount))

    @staticmethod
    def _is_critical(goal: FinancialGoal, today: date) -> bool:
        return goal.target_date is not None and goal.target_date < today

    @staticmethod
    def _make_view(
        goal: FinancialGoal,
        display_status: str,
        progress: float,
        amount_remaining: float,
        months_remaining: int | None,
        critical: bool,
        current_amount: float | None = None,
    ) -> GoalView:
        """Create a standardized GoalView.

        ``current_amount`` defaults to the stored amount; vacation funds pass
        the savings excess that funds them.
        """
        if current_amount is None:
            current_amount = goal.current_amount
        return {
            "goal_id": goal.goal_id,
            "goal_name": goal.goal_name,
            "goal_type": goal.goal_type,
            "status": goal.status,
            "display_status": display_status,
            "progress": progress,
            "current_amount": round_points(current_amount),
            "amount_remaining": round_points(amount_remaining),
            "months_remaining": months_remaining,
            "critical": critical,
        }
