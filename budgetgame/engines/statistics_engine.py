"""Statistics Engine - Pure aggregation over ledger events.

Provides the Aggregator views:
- summarize: totals, counts, top activity, per-category/per-activity counts
- daily_totals / weekly_totals: point sums per local day / Sunday-start week
- compare_weeks: running week against the previous week with data
- goal_achievement_history: weeks that beat or doubled the week before
- daily_series / moving_averages: chart-ready trailing averages
- week_averages: daily average so far this week, average of past weeks

ARCHITECTURE: Pure logic engine, static methods only. All data is passed in;
events may arrive in any order.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta
from typing import Any

from .. import const
from ..type_defs import (
    ActivityEvent,
    ComparisonGoal,
    GoalAchievementHistory,
    Summary,
    WeekAverages,
    WeekComparison,
)
from ..utils import dt_utils
from ..utils.math_utils import calculate_percentage, safe_average


class StatisticsEngine:
    """Pure logic engine for ledger aggregation."""

    # =========================================================================
    # Summary
    # =========================================================================

    @staticmethod
    def summarize(
        events: Iterable[ActivityEvent],
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> Summary:
        """Summarize events inside the half-open window [start, end).

        Positive vs negative counts follow the sign of the base points, so a
        streak bonus never turns a penalty into a positive entry; zero counts
        as positive. ``total`` sums awarded points. ``top_activity`` is the
        most frequent activity; ties go to the one first reached in
        chronological order. Only configured categories are counted.

        Args:
            events: Ledger events
            start: Inclusive window start (None = unbounded)
            end: Exclusive window end (None = unbounded)

        Returns:
            Summary for the window
        """
        window = sorted(
            (
                event
                for event in events
                if (start is None or event.timestamp >= start)
                and (end is None or event.timestamp < end)
            ),
            key=lambda event: event.timestamp,
        )

        summary = Summary(
            category_counts={category: 0 for category in const.CATEGORIES}
        )
        activity_counts: Counter[str] = Counter()

        for event in window:
            summary.total += event.awarded_points
            if event.base_points >= 0:
                summary.positive_count += 1
            else:
                summary.negative_count += 1
                summary.negative_points += abs(event.awarded_points)

            if event.category in summary.category_counts:
                summary.category_counts[event.category] += 1
            else:
                const.LOGGER.debug(
                    "Not counting category '%s' for '%s' (not configured)",
                    event.category,
                    event.activity_name,
                )

            activity_counts[event.activity_name] += 1
            # Strictly greater keeps the first activity to reach the max
            if activity_counts[event.activity_name] > summary.top_activity_count:
                summary.top_activity = event.activity_name
                summary.top_activity_count = activity_counts[event.activity_name]

        summary.activity_counts = dict(activity_counts)
        return summary

    @staticmethod
    def summarize_week(
        events: Iterable[ActivityEvent], week_start_day: date
    ) -> Summary:
        """Summarize the Sunday-start week beginning ``week_start_day``."""
        start, end = dt_utils.week_bounds(week_start_day)
        return StatisticsEngine.summarize(events, start, end)

    # =========================================================================
    # Totals
    # =========================================================================

    @staticmethod
    def daily_totals(events: Iterable[ActivityEvent]) -> dict[date, int]:
        """Sum awarded points per local calendar day (sorted by day)."""
        totals: dict[date, int] = defaultdict(int)
        for event in events:
            totals[dt_utils.local_date(event.timestamp)] += event.awarded_points
        return dict(sorted(totals.items()))

    @staticmethod
    def weekly_totals(events: Iterable[ActivityEvent]) -> dict[date, int]:
        """Sum awarded points per Sunday-start week, keyed by week start."""
        totals: dict[date, int] = defaultdict(int)
        for day, points in StatisticsEngine.daily_totals(events).items():
            totals[dt_utils.week_start(day)] += points
        return dict(sorted(totals.items()))

    # =========================================================================
    # Week-over-Week Goals
    # =========================================================================

    @staticmethod
    def compare_weeks(
        events: Iterable[ActivityEvent], as_of: date | None = None
    ) -> WeekComparison:
        """Compare the running week against the previous week that has data.

        Goals:
        - higher_than_previous: current total > previous total
        - double_previous: current >= 2 x previous (previous > 0), or any
          positive total when the previous week was zero or negative

        Without a previous week both goals report the current total and are
        not achieved.
        """
        today = as_of or dt_utils.dt_today_local()
        current_start = dt_utils.week_start(today)
        totals = StatisticsEngine.weekly_totals(events)

        current_total = totals.get(current_start, 0)
        previous_weeks = [week for week in totals if week < current_start]
        if not previous_weeks:
            const.LOGGER.debug(
                "No previous week before %s to compare against", current_start
            )
            return {
                "current_week_total": current_total,
                "previous_week_total": 0,
                "has_previous_week": False,
                "goals": [
                    StatisticsEngine._comparison_goal(
                        const.COMPARISON_GOAL_HIGHER, False, 0.0, current_total, 0
                    ),
                    StatisticsEngine._comparison_goal(
                        const.COMPARISON_GOAL_DOUBLE, False, 0.0, current_total, 0
                    ),
                ],
            }

        previous_total = totals[previous_weeks[-1]]
        double_target = previous_total * 2
        return {
            "current_week_total": current_total,
            "previous_week_total": previous_total,
            "has_previous_week": True,
            "goals": [
                StatisticsEngine._comparison_goal(
                    const.COMPARISON_GOAL_HIGHER,
                    StatisticsEngine.beats_previous(current_total, previous_total),
                    calculate_percentage(current_total, previous_total, 0),
                    current_total,
                    previous_total,
                ),
                StatisticsEngine._comparison_goal(
                    const.COMPARISON_GOAL_DOUBLE,
                    StatisticsEngine.doubles_previous(current_total, previous_total),
                    calculate_percentage(current_total, double_target, 0),
                    current_total,
                    double_target,
                ),
            ],
        }

    @staticmethod
    def beats_previous(current: int, previous: int) -> bool:
        """Return True when a week total is strictly higher than the previous."""
        return current > previous

    @staticmethod
    def doubles_previous(current: int, previous: int) -> bool:
        """Return True when a week total doubles the previous one."""
        if previous > 0:
            return current >= previous * 2
        return current > 0

    @staticmethod
    def goal_achievement_history(
        events: Iterable[ActivityEvent],
    ) -> GoalAchievementHistory:
        """Count weeks that beat or doubled the week with data before them."""
        totals = list(StatisticsEngine.weekly_totals(events).items())
        weeks: list[dict[str, Any]] = []
        higher_count = 0
        double_count = 0

        for (_, previous), (week, total) in zip(totals, totals[1:]):
            higher = StatisticsEngine.beats_previous(total, previous)
            double = StatisticsEngine.doubles_previous(total, previous)
            higher_count += higher
            double_count += double
            weeks.append(
                {
                    "week_start": week,
                    "total": total,
                    "previous_total": previous,
                    "higher_than_previous": higher,
                    "double_previous": double,
                }
            )

        return {
            "weeks": weeks,
            "higher_achieved_count": higher_count,
            "double_achieved_count": double_count,
        }

    # =========================================================================
    # Series and Averages
    # =========================================================================

    @staticmethod
    def daily_series(
        events: Iterable[ActivityEvent], start_day: date, end_day: date
    ) -> list[tuple[date, int]]:
        """Dense (day, points) series from start_day to end_day inclusive."""
        totals = StatisticsEngine.daily_totals(events)
        series: list[tuple[date, int]] = []
        for offset in range(max(0, (end_day - start_day).days + 1)):
            day = start_day + timedelta(days=offset)
            series.append((day, totals.get(day, 0)))
        return series

    @staticmethod
    def moving_averages(
        series: Sequence[tuple[date, int]],
        window: int = const.MOVING_AVERAGE_DEFAULT_WINDOW,
    ) -> list[tuple[date, float | None]]:
        """Trailing moving average over a daily series.

        Entries before the window fills have a None average. Averages are
        rounded to one decimal.
        """
        window = max(1, int(window))
        averages: list[tuple[date, float | None]] = []
        for index, (day, _) in enumerate(series):
            if index < window - 1:
                averages.append((day, None))
                continue
            points = [value for _, value in series[index - window + 1 : index + 1]]
            averages.append((day, safe_average(points)))
        return averages

    @staticmethod
    def week_averages(
        events: Iterable[ActivityEvent], as_of: date | None = None
    ) -> WeekAverages:
        """Daily average so far this week and the average of earlier weeks."""
        today = as_of or dt_utils.dt_today_local()
        current_start = dt_utils.week_start(today)
        totals = StatisticsEngine.weekly_totals(events)
        weekly_total = totals.get(current_start, 0)
        days_passed = (today - current_start).days + 1
        past = [total for week, total in totals.items() if week < current_start]
        return {
            "weekly_total": weekly_total,
            "days_passed": days_passed,
            "daily_average": round(weekly_total / days_passed, 1),
            "weekly_average": safe_average(past),
        }

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _comparison_goal(
        goal: str, achieved: bool, percent: float, current: int, target: int
    ) -> ComparisonGoal:
        return {
            "goal": goal,
            "achieved": achieved,
            "percent": percent,
            "current": current,
            "target": target,
        }
