"""Statistics Manager - Ledger-backed summaries and weekly overviews.

Reads events for one actor (or a household's member keys) from the ledger
store and delegates every calculation to StatisticsEngine.
"""

from __future__ import annotations

from collections.abc import Collection
from datetime import date, timedelta
from typing import Any

from ..engines.statistics_engine import StatisticsEngine
from ..type_defs import GoalAchievementHistory, Summary
from ..utils import dt_utils
from .base_manager import BaseManager


class StatisticsManager(BaseManager):
    """Manager for read-only aggregate views."""

    def setup(self) -> None:
        """No subscriptions: views are computed on demand."""

    def summarize_week(
        self, actor_keys: Collection[str], week_start_day: date
    ) -> Summary:
        """Summary of the Sunday-start week containing ``week_start_day``."""
        start, end = dt_utils.week_bounds(week_start_day)
        events = self.coordinator.ledger.query_events(actor_keys, start=start, end=end)
        return StatisticsEngine.summarize(events, start, end)

    def week_overview(
        self, actor_keys: Collection[str], as_of: date | None = None
    ) -> dict[str, Any]:
        """Running week summary, week-over-week goals and averages."""
        today = as_of or dt_utils.dt_today_local()
        events = self.coordinator.ledger.query_events(actor_keys)
        start, end = dt_utils.week_bounds(today)
        return {
            "summary": StatisticsEngine.summarize(events, start, end),
            "comparison": StatisticsEngine.compare_weeks(events, today),
            "averages": StatisticsEngine.week_averages(events, today),
        }

    def goal_achievement_history(
        self, actor_keys: Collection[str]
    ) -> GoalAchievementHistory:
        """Weeks that beat or doubled the week before."""
        return StatisticsEngine.goal_achievement_history(
            self.coordinator.ledger.query_events(actor_keys)
        )

    def moving_averages(
        self,
        actor_keys: Collection[str],
        days: int,
        window: int,
        as_of: date | None = None,
    ) -> list[tuple[date, float | None]]:
        """Trailing averages over the last ``days`` days ending ``as_of``."""
        end_day = as_of or dt_utils.dt_today_local()
        start_day = end_day - timedelta(days=max(1, days) - 1)
        events = self.coordinator.ledger.query_events(
            actor_keys,
            start=dt_utils.start_of_local_day(start_day),
            end=dt_utils.start_of_local_day(end_day + timedelta(days=1)),
        )
        series = StatisticsEngine.daily_series(events, start_day, end_day)
        return StatisticsEngine.moving_averages(series, window)
