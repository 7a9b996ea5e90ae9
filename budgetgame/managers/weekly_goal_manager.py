"""Weekly Goal Manager - Generation, evaluation and finalization of weekly goals.

This manager handles:
- Generating goals for a new week from the previous week's ledger
- Evaluating progress mid-week (evaluate-weekly-goals entry point)
- Finalizing a week: completing met goals, firing threshold bonus rules,
  and emitting WEEKLY_GOAL_COMPLETED / WEEK_FINALIZED (finalize-week entry point)

Goals belong to one actor key. For household goals pass the member keys whose
events should count toward them.

ARCHITECTURE:
- WeeklyGoalManager = STATEFUL orchestration over the goal and ledger stores
- WeeklyGoalEngine / BonusEngine / StreakEngine = STATELESS logic
"""

from __future__ import annotations

from collections.abc import Collection
from datetime import date, timedelta
from typing import TYPE_CHECKING, Any

from .. import const
from ..engines.bonus_engine import BonusEngine
from ..engines.statistics_engine import StatisticsEngine
from ..engines.streak_engine import StreakEngine
from ..engines.weekly_goal_engine import WeeklyGoalEngine
from ..utils import dt_utils
from .base_manager import BaseManager

if TYPE_CHECKING:
    from ..type_defs import GoalEvaluationContext, WeekFinalization, WeeklyGoal


class WeeklyGoalManager(BaseManager):
    """Manager for weekly goals.

    Responsibilities:
    - Persist generated and finalized goals through the GoalStore
    - Build evaluation contexts (summary + streaks) from the ledger
    - Emit goal lifecycle events

    NOT responsible for:
    - Scheduling generation or finalization (caller)
    - Guarding against concurrent finalization (caller; finalization is
      idempotent so a repeat is harmless)
    """

    def setup(self) -> None:
        """No subscriptions: goal work is driven by the coordinator."""

    # =========================================================================
    # Generation
    # =========================================================================

    def generate_weekly_goals(
        self,
        actor_key: str,
        week_start_day: date | None = None,
        members: Collection[str] | None = None,
    ) -> list[WeeklyGoal]:
        """Create the goals for a week unless that week already has goals.

        Args:
            actor_key: Actor (user or household) the goals belong to
            week_start_day: Any day in the target week (defaults to this week)
            members: Actor keys whose events count (defaults to ``actor_key``)

        Returns:
            The week's goals, newly generated or already stored
        """
        week_start = dt_utils.week_start(week_start_day or dt_utils.dt_today_local())
        goal_store = self.coordinator.goal_store
        existing = list(goal_store.get_weekly_goals(actor_key, week_start))
        if existing:
            const.LOGGER.debug(
                "Weekly goals for %s (week of %s) already exist", actor_key, week_start
            )
            return existing

        actor_keys = list(members or [actor_key])
        catalog = self.coordinator.catalog.get()
        previous_start = week_start - timedelta(days=dt_utils.DAYS_PER_WEEK)
        previous_end = week_start - timedelta(days=1)
        events = self.coordinator.ledger.query_events(
            actor_keys,
            start=dt_utils.start_of_local_day(
                previous_end - timedelta(days=const.STREAK_LOOKBACK_DAYS)
            ),
            end=dt_utils.start_of_local_day(week_start),
        )

        previous_summary = StatisticsEngine.summarize_week(events, previous_start)
        longest = StreakEngine.longest_streak(
            events, actor_keys, catalog, as_of=previous_end
        )
        goals = WeeklyGoalEngine.generate_goals(
            actor_key, week_start, previous_summary, catalog, longest
        )

        goal_store.save_weekly_goals(actor_key, week_start, goals)
        self.emit(
            const.SIGNAL_SUFFIX_WEEKLY_GOALS_GENERATED,
            actor_key=actor_key,
            week_start=week_start.isoformat(),
            goal_ids=[goal.goal_id for goal in goals],
        )
        return goals

    # =========================================================================
    # Evaluation
    # =========================================================================

    def evaluate_weekly_goals(
        self,
        actor_key: str,
        as_of: date | None = None,
        members: Collection[str] | None = None,
    ) -> list[dict[str, Any]]:
        """Report state and progress for the current week's goals.

        Returns:
            One dict per goal with ``goal``, ``state`` and ``progress``
        """
        today = as_of or dt_utils.dt_today_local()
        week_start = dt_utils.week_start(today)
        goals = self.coordinator.goal_store.get_weekly_goals(actor_key, week_start)
        if not goals:
            return []

        context = self._build_context(
            list(members or [actor_key]), week_start, today
        )
        return [
            {
                "goal": goal,
                "state": WeeklyGoalEngine.goal_state(goal, today),
                "progress": WeeklyGoalEngine.evaluate_goal(goal, context),
            }
            for goal in goals
        ]

    # =========================================================================
    # Finalization
    # =========================================================================

    def finalize_week(
        self,
        actor_key: str,
        week_start_day: date,
        members: Collection[str] | None = None,
    ) -> WeekFinalization:
        """Close a week: complete met goals and apply threshold bonuses.

        Safe to re-run: goals completed earlier stay completed, their bonus
        counts once and no completion event is emitted twice.
        """
        week_start = dt_utils.week_start(week_start_day)
        week_end = dt_utils.week_end(week_start)
        goal_store = self.coordinator.goal_store
        goals = list(goal_store.get_weekly_goals(actor_key, week_start))
        context = self._build_context(
            list(members or [actor_key]), week_start, week_end
        )

        awards = BonusEngine.evaluate(
            context["summary"], self.coordinator.bonus_rules()
        )
        result = WeeklyGoalEngine.finalize_week(
            actor_key, week_start, goals, context, awards
        )

        if result["newly_completed_goal_ids"]:
            goal_store.save_weekly_goals(
                actor_key, week_start, result["goals"]
            )
        for goal in result["goals"]:
            if goal.goal_id in result["newly_completed_goal_ids"]:
                self.emit(
                    const.SIGNAL_SUFFIX_WEEKLY_GOAL_COMPLETED,
                    actor_key=actor_key,
                    goal_id=goal.goal_id,
                    goal_type=goal.goal_type,
                    bonus_points=goal.bonus_points,
                )

        const.LOGGER.info(
            "Finalized week of %s for %s: total %d "
            "(activities %d, goals %d, bonuses %d)",
            week_start,
            actor_key,
            result["week_total"],
            result["activity_points"],
            result["goal_bonus_points"],
            result["threshold_bonus_points"],
        )
        self.emit(
            const.SIGNAL_SUFFIX_WEEK_FINALIZED,
            actor_key=actor_key,
            week_start=week_start.isoformat(),
            week_total=result["week_total"],
            completed_goal_ids=result["completed_goal_ids"],
        )
        return result

    def _build_context(
        self, actor_keys: list[str], week_start: date, as_of: date
    ) -> GoalEvaluationContext:
        """Summary of the week through ``as_of`` plus streaks as of that day."""
        catalog = self.coordinator.catalog.get()
        window_end = dt_utils.start_of_local_day(
            min(as_of, dt_utils.week_end(week_start)) + timedelta(days=1)
        )
        events = self.coordinator.ledger.query_events(
            actor_keys,
            start=dt_utils.start_of_local_day(
                min(week_start, as_of) - timedelta(days=const.STREAK_LOOKBACK_DAYS)
            ),
            end=window_end,
        )
        return {
            "summary": StatisticsEngine.summarize(
                events, dt_utils.start_of_local_day(week_start), window_end
            ),
            "streaks": StreakEngine.all_streaks(events, actor_keys, catalog, as_of),
        }
