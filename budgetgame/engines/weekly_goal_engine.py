"""Weekly Goal Engine - Pure logic for weekly goal generation and evaluation.

This engine provides stateless functions for:
- Generating up to three personalized goals from the previous week's summary
- Measuring progress toward each goal type
- Deriving the goal lifecycle state (pending → active → completed | expired)
- Finalizing a week: marking met goals completed and totaling bonuses

Goal Types:
- category_count: perform N activities in a category
- negative_limit: keep negative points at or under a reduced target
- streak_maintain: extend an existing streak by a week
- streak_start: reach a 3-day streak on anything
- activity_count: perform a specific activity N times

ARCHITECTURE: Pure logic engine. All data arrives through the evaluation
context built by WeeklyGoalManager. Progress handlers are dispatched through
a registry keyed by goal type.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import replace
from datetime import date
import uuid

from .. import const
from ..type_defs import (
    ActivityCountParams,
    ActivityDefinition,
    BonusAward,
    CategoryCountParams,
    GoalEvaluationContext,
    GoalProgress,
    NegativeLimitParams,
    StreakMaintainParams,
    StreakStartParams,
    StreakState,
    Summary,
    WeekFinalization,
    WeeklyGoal,
    WeeklyGoalParams,
)
from ..utils import dt_utils
from ..utils.math_utils import calculate_percentage, clamp, round_points

# Handler signature: (goal, context) -> GoalProgress
ProgressHandler = Callable[[WeeklyGoal, GoalEvaluationContext], GoalProgress]


class WeeklyGoalEngine:
    """Pure logic engine for weekly goals."""

    # =========================================================================
    # PROGRESS HANDLER REGISTRY
    # =========================================================================

    _PROGRESS_HANDLERS: dict[str, ProgressHandler] = {}

    @classmethod
    def _register_handlers(cls) -> None:
        """Populate _PROGRESS_HANDLERS once."""
        if cls._PROGRESS_HANDLERS:
            return

        cls._PROGRESS_HANDLERS = {
            const.WEEKLY_GOAL_TYPE_CATEGORY_COUNT: cls._progress_category_count,
            const.WEEKLY_GOAL_TYPE_NEGATIVE_LIMIT: cls._progress_negative_limit,
            const.WEEKLY_GOAL_TYPE_STREAK_MAINTAIN: cls._progress_streak_maintain,
            const.WEEKLY_GOAL_TYPE_STREAK_START: cls._progress_streak_start,
            const.WEEKLY_GOAL_TYPE_ACTIVITY_COUNT: cls._progress_activity_count,
        }

    # =========================================================================
    # GENERATION
    # =========================================================================

    @classmethod
    def generate_goals(
        cls,
        actor_key: str,
        week_start_day: date,
        previous_summary: Summary,
        catalog: Mapping[str, ActivityDefinition],
        longest_streak: StreakState | None = None,
        negative_reduction: float = const.DEFAULT_NEGATIVE_REDUCTION,
    ) -> list[WeeklyGoal]:
        """Build the week's goals from the previous week's behavior.

        Args:
            actor_key: Actor the goals belong to
            week_start_day: Sunday the goal week starts on
            previous_summary: Summary of the week before
            catalog: Activity definitions (used to find a no-spend activity)
            longest_streak: Actor's longest current streak, if any
            negative_reduction: Fraction to cut negative points by, kept
                within 15-25%

        Returns:
            At most three goals, in generation order
        """
        start = dt_utils.week_start(week_start_day)
        params_list: list[WeeklyGoalParams] = [
            cls._category_goal_params(previous_summary)
        ]

        if previous_summary.negative_points > const.NEGATIVE_NOISE_THRESHOLD:
            params_list.append(
                cls._negative_goal_params(previous_summary, negative_reduction)
            )
        else:
            activity_params = cls._activity_goal_params(previous_summary, catalog)
            if activity_params is not None:
                params_list.append(activity_params)

        if (
            longest_streak is not None
            and longest_streak.streak_class == const.STREAK_CLASS_ACTIVE
        ):
            params_list.append(
                StreakMaintainParams(
                    activity_name=longest_streak.activity_name,
                    starting_streak=longest_streak.length,
                    target=longest_streak.length + const.STREAK_MAINTAIN_EXTENSION,
                )
            )
        else:
            params_list.append(StreakStartParams())

        goals = [
            cls._make_goal(actor_key, start, params)
            for params in params_list[: const.MAX_WEEKLY_GOALS]
        ]
        const.LOGGER.debug(
            "Generated %d weekly goals for %s (week of %s): %s",
            len(goals),
            actor_key,
            start,
            [goal.goal_type for goal in goals],
        )
        return goals

    @staticmethod
    def _category_goal_params(previous_summary: Summary) -> CategoryCountParams:
        """Target the least active positive category (ties: configured order)."""
        category = min(
            const.POSITIVE_GOAL_CATEGORIES,
            key=lambda name: previous_summary.category_counts.get(name, 0),
        )
        prior = previous_summary.category_counts.get(category, 0)
        return CategoryCountParams(
            category=category,
            target=max(
                const.CATEGORY_GOAL_MIN_TARGET, prior + const.CATEGORY_GOAL_INCREMENT
            ),
        )

    @staticmethod
    def _negative_goal_params(
        previous_summary: Summary, reduction: float
    ) -> NegativeLimitParams:
        """Cut last week's negative points by the reduction percentage."""
        percent = round(
            clamp(
                reduction, const.NEGATIVE_REDUCTION_MIN, const.NEGATIVE_REDUCTION_MAX
            )
            * 100
        )
        baseline = previous_summary.negative_points
        return NegativeLimitParams(
            baseline=baseline,
            target=max(0, baseline * (100 - percent) // 100),
        )

    @staticmethod
    def _activity_goal_params(
        previous_summary: Summary, catalog: Mapping[str, ActivityDefinition]
    ) -> ActivityCountParams | None:
        """Pick a no-spend style activity from the catalog, if one exists."""
        for definition in catalog.values():
            lowered = definition.name.lower()
            if definition.base_points >= 0 and any(
                keyword in lowered for keyword in const.NO_SPEND_ACTIVITY_KEYWORDS
            ):
                prior = previous_summary.activity_counts.get(definition.name, 0)
                return ActivityCountParams(
                    activity_name=definition.name,
                    target=max(
                        const.ACTIVITY_GOAL_MIN_TARGET,
                        prior + const.ACTIVITY_GOAL_INCREMENT,
                    ),
                )
        return None

    @staticmethod
    def _make_goal(
        actor_key: str, start: date, params: WeeklyGoalParams
    ) -> WeeklyGoal:
        """Wrap parameters into a WeeklyGoal with display text and bonus."""
        if isinstance(params, CategoryCountParams):
            name = f"{params.category} Focus"
            description = (
                f"Log at least {params.target} {params.category} activities this week"
            )
        elif isinstance(params, NegativeLimitParams):
            name = "Cut Back"
            description = (
                f"Keep negative points at or under {params.target} "
                f"(last week: {params.baseline})"
            )
        elif isinstance(params, StreakMaintainParams):
            name = "Keep the Streak"
            description = (
                f"Extend your {params.activity_name} streak to {params.target} days"
            )
        elif isinstance(params, StreakStartParams):
            name = "Start a Streak"
            description = f"Do any activity {params.target} days in a row"
        else:
            name = "No-Spend Challenge"
            description = f"Log '{params.activity_name}' {params.target} times"

        return WeeklyGoal(
            goal_id=str(uuid.uuid4()),
            actor_key=actor_key,
            name=name,
            description=description,
            params=params,
            bonus_points=const.WEEKLY_GOAL_BONUS_POINTS[params.goal_type],
            week_start=start,
            week_end=dt_utils.week_end(start),
        )

    # =========================================================================
    # EVALUATION
    # =========================================================================

    @classmethod
    def evaluate_goal(
        cls, goal: WeeklyGoal, context: GoalEvaluationContext
    ) -> GoalProgress:
        """Measure progress for one goal.

        Completed goals always report met at 100%.
        """
        cls._register_handlers()

        handler = cls._PROGRESS_HANDLERS.get(goal.goal_type)
        if handler is None:
            const.LOGGER.warning(
                "Unknown weekly goal type: %s for goal %s",
                goal.goal_type,
                goal.goal_id,
            )
            return cls._make_progress(goal, 0, 0, 0.0, False, "Unknown goal type")

        progress = handler(goal, context)
        if goal.completed and not progress["met"]:
            progress = cls._make_progress(
                goal,
                progress["current"],
                progress["target"],
                100.0,
                True,
                "Completed at finalization",
            )
        return progress

    @classmethod
    def evaluate_goals(
        cls, goals: Iterable[WeeklyGoal], context: GoalEvaluationContext
    ) -> list[GoalProgress]:
        """Measure progress for each goal, preserving order."""
        return [cls.evaluate_goal(goal, context) for goal in goals]

    @staticmethod
    def goal_state(goal: WeeklyGoal, as_of: date | None = None) -> str:
        """Derive the lifecycle state of a goal on ``as_of``.

        pending before the week starts, active during it, expired after it
        unless completed. Completed is terminal.
        """
        if goal.completed:
            return const.WEEKLY_GOAL_STATE_COMPLETED
        today = as_of or dt_utils.dt_today_local()
        if today < goal.week_start:
            return const.WEEKLY_GOAL_STATE_PENDING
        if today > goal.week_end:
            return const.WEEKLY_GOAL_STATE_EXPIRED
        return const.WEEKLY_GOAL_STATE_ACTIVE

    # =========================================================================
    # FINALIZATION
    # =========================================================================

    @classmethod
    def finalize_week(
        cls,
        actor_key: str,
        week_start_day: date,
        goals: Sequence[WeeklyGoal],
        context: GoalEvaluationContext,
        threshold_awards: Sequence[BonusAward] = (),
    ) -> WeekFinalization:
        """Mark met goals completed and total the week.

        Idempotent: goals already completed stay completed and their bonus is
        counted exactly once, so re-running yields the same total.

        week_total = activity points + completed goal bonuses + threshold bonuses
        """
        finalized: list[WeeklyGoal] = []
        newly_completed: list[str] = []

        for goal in goals:
            if goal.completed:
                finalized.append(goal)
                continue
            if cls.evaluate_goal(goal, context)["met"]:
                finalized.append(replace(goal, completed=True))
                newly_completed.append(goal.goal_id)
                const.LOGGER.info(
                    "Weekly goal '%s' completed by %s (+%d)",
                    goal.name,
                    actor_key,
                    goal.bonus_points,
                )
            else:
                finalized.append(goal)

        completed = [goal for goal in finalized if goal.completed]
        goal_bonus = sum(goal.bonus_points for goal in completed)
        threshold_bonus = sum(award["bonus_points"] for award in threshold_awards)
        activity_points = context["summary"].total

        return {
            "actor_key": actor_key,
            "week_start": dt_utils.week_start(week_start_day),
            "activity_points": activity_points,
            "goal_bonus_points": goal_bonus,
            "threshold_bonus_points": threshold_bonus,
            "week_total": activity_points + goal_bonus + threshold_bonus,
            "completed_goal_ids": [goal.goal_id for goal in completed],
            "newly_completed_goal_ids": newly_completed,
            "threshold_awards": list(threshold_awards),
            "goals": finalized,
        }

    # =========================================================================
    # PROGRESS HANDLERS
    # =========================================================================

    @classmethod
    def _progress_category_count(
        cls, goal: WeeklyGoal, context: GoalEvaluationContext
    ) -> GoalProgress:
        params = goal.params
        if not isinstance(params, CategoryCountParams):
            return cls._params_mismatch(goal)
        current = context["summary"].category_counts.get(params.category, 0)
        return cls._count_progress(goal, current, params.target)

    @classmethod
    def _progress_activity_count(
        cls, goal: WeeklyGoal, context: GoalEvaluationContext
    ) -> GoalProgress:
        params = goal.params
        if not isinstance(params, ActivityCountParams):
            return cls._params_mismatch(goal)
        current = context["summary"].activity_counts.get(params.activity_name, 0)
        return cls._count_progress(goal, current, params.target)

    @classmethod
    def _progress_streak_maintain(
        cls, goal: WeeklyGoal, context: GoalEvaluationContext
    ) -> GoalProgress:
        params = goal.params
        if not isinstance(params, StreakMaintainParams):
            return cls._params_mismatch(goal)
        streak = context["streaks"].get(params.activity_name)
        current = streak.length if streak else 0
        return cls._count_progress(goal, current, params.target)

    @classmethod
    def _progress_streak_start(
        cls, goal: WeeklyGoal, context: GoalEvaluationContext
    ) -> GoalProgress:
        params = goal.params
        if not isinstance(params, StreakStartParams):
            return cls._params_mismatch(goal)
        current = max(
            (streak.length for streak in context["streaks"].values()), default=0
        )
        return cls._count_progress(goal, current, params.target)

    @classmethod
    def _progress_negative_limit(
        cls, goal: WeeklyGoal, context: GoalEvaluationContext
    ) -> GoalProgress:
        """Percent is the reduction achieved over the reduction required.

        Zero negative points always meets the goal.
        """
        params = goal.params
        if not isinstance(params, NegativeLimitParams):
            return cls._params_mismatch(goal)
        current = context["summary"].negative_points
        met = current == 0 or current <= params.target

        required = params.baseline - params.target
        if met:
            percent = 100.0
        elif required <= 0:
            percent = 0.0
        else:
            achieved = params.baseline - current
            percent = round_points(clamp(achieved / required * 100, 0.0, 100.0))

        return cls._make_progress(
            goal,
            current,
            params.target,
            percent,
            met,
            f"{current} negative points (limit {params.target})",
        )

    @classmethod
    def _params_mismatch(cls, goal: WeeklyGoal) -> GoalProgress:
        const.LOGGER.warning(
            "Weekly goal %s has %s params for type %s",
            goal.goal_id,
            type(goal.params).__name__,
            goal.goal_type,
        )
        return cls._make_progress(goal, 0, 0, 0.0, False, "Mismatched goal params")

    @classmethod
    def _count_progress(
        cls, goal: WeeklyGoal, current: int, target: int
    ) -> GoalProgress:
        met = current >= target
        return cls._make_progress(
            goal,
            current,
            target,
            calculate_percentage(current, target),
            met,
            f"{current}/{target}",
        )

    @staticmethod
    def _make_progress(
        goal: WeeklyGoal,
        current: int,
        target: int,
        percent: float,
        met: bool,
        reason: str = "",
    ) -> GoalProgress:
        """Create a standardized GoalProgress."""
        return {
            "goal_id": goal.goal_id,
            "goal_type": goal.goal_type,
            "current": current,
            "target": target,
            "percent": percent,
            "met": met,
            "reason": reason,
        }
