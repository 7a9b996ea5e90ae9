# File: store.py
"""Storage interfaces consumed by the Budget Game coordinator.

The engine ships no persistence. Callers provide objects that satisfy these
protocols (a spreadsheet adapter, a database layer, or the in-memory fakes used
in tests). Reads return snapshots; the managers never hold store data between
entry point calls.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping, Sequence
from datetime import date, datetime
from typing import Any, Protocol

from .type_defs import ActivityEvent, FinancialGoal, WeeklyGoal


class ActivityCatalogStore(Protocol):
    """Source of the activity catalog (name, points, category, required)."""

    def get_activity_definitions(self) -> Iterable[Mapping[str, Any]]:
        """Return the definitions as stored, one mapping per catalog row.

        Rows are validated into ActivityDefinitions by
        LedgerEngine.build_catalog when the catalog cache loads them.
        """


class LedgerStore(Protocol):
    """Append-only ledger of activity events."""

    def query_events(
        self,
        actor_keys: Collection[str],
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> Sequence[ActivityEvent]:
        """Return events for the actors inside [start, end)."""

    def append_event(self, event: ActivityEvent) -> None:
        """Append one priced event."""


class GoalStore(Protocol):
    """Weekly and financial goal persistence."""

    def get_weekly_goals(
        self, actor_key: str, week_start: date
    ) -> Sequence[WeeklyGoal]:
        """Return the goals of one actor for one week."""

    def save_weekly_goals(
        self, actor_key: str, week_start: date, goals: Sequence[WeeklyGoal]
    ) -> None:
        """Replace the goals of one actor for one week."""

    def get_financial_goals(self, household_id: str) -> Sequence[FinancialGoal]:
        """Return every financial goal of a household."""

    def save_financial_goal(self, goal: FinancialGoal) -> None:
        """Insert or replace one financial goal by id."""


class SettingsStore(Protocol):
    """Runtime settings, re-read on every entry point call."""

    def get_settings(self) -> Mapping[str, Any] | None:
        """Return the raw settings mapping, or None when nothing is configured."""
