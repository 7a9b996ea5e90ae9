"""Activity Manager - Submission intake, pricing and ledger appends.

This manager handles the submit-activity entry point:
- Load the catalog (through the TTL cache)
- Normalize the submission into events (LedgerEngine)
- Price each positive event with its streak (StreakEngine + RewardEngine)
- Append priced events to the ledger
- Emit ACTIVITY_LOGGED / UNKNOWN_ACTIVITY events

It also imports legacy display-string history rows once, for migration.

ARCHITECTURE:
- ActivityManager = STATEFUL orchestration over the ledger store
- LedgerEngine / StreakEngine / RewardEngine = STATELESS logic
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from .. import const
from ..engines.ledger_engine import LedgerEngine
from ..engines.reward_engine import RewardEngine
from ..engines.streak_engine import StreakEngine
from ..utils import dt_utils
from .base_manager import BaseManager

if TYPE_CHECKING:
    from ..type_defs import ActivityEvent, SubmissionResult, UnknownActivityWarning


class ActivityManager(BaseManager):
    """Manager for activity submissions and the ledger.

    Responsibilities:
    - Turn submissions into priced, appended ledger events
    - Report unknown activities without rejecting the submission
    - Import legacy history rows

    NOT responsible for:
    - Weekly goals or threshold bonuses (WeeklyGoalManager)
    - Serializing concurrent submissions for the same actor (caller)
    """

    def setup(self) -> None:
        """No subscriptions: submissions arrive through the coordinator."""

    def submit_activity(self, submission: Mapping[str, Any]) -> SubmissionResult:
        """Price and record one submission.

        Args:
            submission: Raw submission (timestamp, actor_key, activities,
                optional skipped)

        Returns:
            SubmissionResult; ``success`` is False when the submission
            contained nothing to record
        """
        catalog = self.coordinator.catalog.get()
        settings = self.coordinator.streak_settings()

        try:
            events = LedgerEngine.normalize(submission, catalog, self._on_unknown)
        except ValueError as err:
            const.LOGGER.warning("Rejected submission: %s", err)
            return self._make_result(False, [], 0, str(err))

        if not events:
            return self._make_result(False, [], 0, "No activities submitted")

        actor_key = events[0].actor_key
        submitted_day = dt_utils.local_date(events[0].timestamp)
        history_start = dt_utils.start_of_local_day(
            submitted_day - timedelta(days=const.STREAK_LOOKBACK_DAYS)
        )
        history = list(
            self.coordinator.ledger.query_events([actor_key], start=history_start)
        )

        priced: list[ActivityEvent] = []
        for event in events:
            if event.unknown or event.base_points <= 0:
                priced.append(event)
                continue
            # The run includes the day being submitted
            streak = StreakEngine.streak_for(
                [*history, *priced, event],
                actor_key,
                event.activity_name,
                catalog,
                as_of=submitted_day,
            )
            priced.append(RewardEngine.price_event(event, streak, settings))

        for event in priced:
            self.coordinator.ledger.append_event(event)

        points = sum(event.awarded_points for event in priced)
        week_start, week_end = dt_utils.week_bounds(submitted_day)
        weekly_total = sum(
            event.awarded_points
            for event in [*history, *priced]
            if week_start <= event.timestamp < week_end
        )

        const.LOGGER.info(
            "Recorded %d activities for %s: %+d points (week total %d)",
            len(priced),
            actor_key,
            points,
            weekly_total,
        )
        self.emit(
            const.SIGNAL_SUFFIX_ACTIVITY_LOGGED,
            actor_key=actor_key,
            points=points,
            weekly_total=weekly_total,
            activities=[event.activity_name for event in priced],
        )
        return self._make_result(
            True,
            priced,
            weekly_total,
            f"Recorded {len(priced)} activities for {points:+d} points",
        )

    def import_legacy_rows(self, rows: Iterable[Mapping[str, Any]]) -> int:
        """Convert legacy display-string rows into ledger events.

        Each row carries ``date``, ``actor_key`` and ``activities``. Malformed
        rows and entries are skipped. Returns the number of events appended.
        """
        catalog = self.coordinator.catalog.get()
        imported = 0
        for row in rows:
            for event in LedgerEngine.parse_legacy_row(
                row.get("date"),
                str(row.get(const.SUBMISSION_ACTOR_KEY) or ""),
                str(row.get(const.SUBMISSION_ACTIVITIES) or ""),
                catalog,
            ):
                self.coordinator.ledger.append_event(event)
                imported += 1
        const.LOGGER.info("Imported %d legacy history events", imported)
        return imported

    def _on_unknown(self, warning: UnknownActivityWarning) -> None:
        self.emit(
            const.SIGNAL_SUFFIX_UNKNOWN_ACTIVITY,
            actor_key=warning.actor_key,
            activity_name=warning.activity_name,
            timestamp=warning.timestamp.isoformat(),
        )

    @staticmethod
    def _make_result(
        success: bool,
        events: list[ActivityEvent],
        weekly_total: int,
        message: str,
    ) -> SubmissionResult:
        return {
            "success": success,
            "points": sum(event.awarded_points for event in events),
            "weekly_total": weekly_total,
            "events": events,
            "message": message,
        }
