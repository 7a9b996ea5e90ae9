"""Streak Engine - Pure logic for per-activity consecutive-day streaks.

A streak is a run of consecutive local calendar days on which an actor
performed a given positive activity. Only activities that exist in the catalog
with positive base points are eligible; each day counts once no matter how
many times the activity was logged.

Classification:
- active: length >= 3
- building: length == 2 and the run ended yesterday
- none: everything else

A run whose most recent day is older than yesterday is broken and reports
length 0: the streak resets the day after a missed day.

ARCHITECTURE: Pure logic engine, static methods only. Streaks are derived on
demand from the ledger and never stored.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Collection, Iterable, Mapping
from datetime import date, datetime, timedelta

from .. import const
from ..type_defs import ActivityDefinition, ActivityEvent, StreakState
from ..utils import dt_utils


class StreakEngine:
    """Pure logic engine for streak detection."""

    @staticmethod
    def streak_for(
        events: Iterable[ActivityEvent],
        actor_key: str | Collection[str],
        activity_name: str,
        catalog: Mapping[str, ActivityDefinition],
        as_of: date | None = None,
    ) -> StreakState:
        """Compute the streak for one (actor, activity) pair.

        Args:
            events: Ledger events (any order, may include other actors)
            actor_key: One actor key, or a collection of keys pooled together
                (household streaks)
            activity_name: Activity to evaluate
            catalog: Activity definitions keyed by name
            as_of: Reference day (defaults to today in local timezone)

        Returns:
            StreakState for the pair
        """
        today = as_of or dt_utils.dt_today_local()
        days = StreakEngine._eligible_days(events, actor_key, catalog, today)
        return StreakEngine._classify(
            activity_name, days.get(activity_name, set()), today
        )

    @staticmethod
    def all_streaks(
        events: Iterable[ActivityEvent],
        actor_key: str | Collection[str],
        catalog: Mapping[str, ActivityDefinition],
        as_of: date | None = None,
    ) -> dict[str, StreakState]:
        """Compute streaks for every eligible activity the actor logged.

        Activities whose run is broken are included with length 0.
        """
        today = as_of or dt_utils.dt_today_local()
        days = StreakEngine._eligible_days(events, actor_key, catalog, today)
        return {
            name: StreakEngine._classify(name, activity_days, today)
            for name, activity_days in sorted(days.items())
        }

    @staticmethod
    def longest_streak(
        events: Iterable[ActivityEvent],
        actor_key: str | Collection[str],
        catalog: Mapping[str, ActivityDefinition],
        as_of: date | None = None,
    ) -> StreakState | None:
        """Return the longest active or building streak, or None.

        Ties go to the activity name that sorts first.
        """
        best: StreakState | None = None
        for state in StreakEngine.all_streaks(
            events, actor_key, catalog, as_of
        ).values():
            if state.streak_class == const.STREAK_CLASS_NONE:
                continue
            if best is None or state.length > best.length:
                best = state
        return best

    # =========================================================================
    # Internals
    # =========================================================================

    @staticmethod
    def _eligible_days(
        events: Iterable[ActivityEvent],
        actor_key: str | Collection[str],
        catalog: Mapping[str, ActivityDefinition],
        today: date,
    ) -> dict[str, set[date]]:
        """Group distinct local days per eligible activity within the lookback."""
        actors = {actor_key} if isinstance(actor_key, str) else set(actor_key)
        window_start = today - timedelta(days=const.STREAK_LOOKBACK_DAYS - 1)
        days: dict[str, set[date]] = defaultdict(set)

        for event in events:
            if event.actor_key not in actors:
                continue
            if not isinstance(event.timestamp, datetime):
                const.LOGGER.warning(
                    "Skipping history entry '%s' for %s: invalid timestamp %r",
                    event.activity_name,
                    event.actor_key,
                    event.timestamp,
                )
                continue
            if event.unknown or event.base_points <= 0:
                continue
            definition = catalog.get(event.activity_name)
            if definition is None or definition.base_points <= 0:
                continue
            day = dt_utils.local_date(event.timestamp)
            if window_start <= day <= today:
                days[event.activity_name].add(day)

        return days

    @staticmethod
    def _classify(activity_name: str, days: set[date], today: date) -> StreakState:
        """Walk back from the most recent day and classify the run."""
        if not days:
            return StreakState(activity_name=activity_name)

        ordered = sorted(days, reverse=True)
        end_day = ordered[0]
        yesterday = today - timedelta(days=1)
        if end_day < yesterday:
            return StreakState(activity_name=activity_name)

        length = 1
        for previous, current in zip(ordered, ordered[1:]):
            if previous - current != timedelta(days=1):
                break
            length += 1

        if length >= const.STREAK_ACTIVE_MIN_LENGTH:
            streak_class = const.STREAK_CLASS_ACTIVE
        elif length == const.STREAK_BUILDING_LENGTH and end_day == yesterday:
            streak_class = const.STREAK_CLASS_BUILDING
        else:
            streak_class = const.STREAK_CLASS_NONE

        return StreakState(
            activity_name=activity_name,
            length=length,
            streak_class=streak_class,
            end_day=end_day,
        )
