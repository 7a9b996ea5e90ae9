# File: coordinator.py
"""Coordinator for the Budget Game rewards engine.

The coordinator is the composition root: it owns the injected stores, the
catalog cache and the event dispatcher, builds the managers, and exposes the
four entry points:

- submit_activity: price and record one submission
- evaluate_weekly_goals: mid-week goal state and progress
- finalize_week: complete met goals, apply threshold bonuses
- update_goal_amounts: batch financial goal updates with the cascade

Settings are read from the SettingsStore on every call, so changes take
effect without a restart.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Collection, Iterable, Mapping
from datetime import date
from typing import Any

from . import const
from .helpers.catalog_helpers import ActivityCatalogCache
from .helpers.settings_helpers import load_bonus_rules, load_streak_settings
from .managers import (
    ActivityManager,
    FinancialGoalManager,
    StatisticsManager,
    WeeklyGoalManager,
)
from .store import ActivityCatalogStore, GoalStore, LedgerStore, SettingsStore
from .type_defs import (
    BonusRule,
    GoalUpdateResult,
    StreakSettings,
    SubmissionResult,
    WeekFinalization,
)

Listener = Callable[[dict[str, Any]], Any]


class BudgetGameCoordinator:
    """Wires stores, settings, dispatcher and managers together."""

    def __init__(
        self,
        catalog_store: ActivityCatalogStore,
        ledger: LedgerStore,
        goal_store: GoalStore,
        settings_store: SettingsStore,
        catalog_ttl_seconds: float = const.CATALOG_CACHE_TTL_SECONDS,
    ) -> None:
        """Initialize the coordinator and set up its managers.

        Args:
            catalog_store: Source of activity catalog rows
            ledger: Append-only event store
            goal_store: Weekly and financial goal store
            settings_store: Runtime settings source
            catalog_ttl_seconds: Freshness window of the catalog cache
        """
        self.ledger = ledger
        self.goal_store = goal_store
        self.settings_store = settings_store
        self.catalog = ActivityCatalogCache(catalog_store, catalog_ttl_seconds)
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

        self.activity_manager = ActivityManager(self)
        self.statistics_manager = StatisticsManager(self)
        self.weekly_goal_manager = WeeklyGoalManager(self)
        self.financial_goal_manager = FinancialGoalManager(self)
        for manager in (
            self.activity_manager,
            self.statistics_manager,
            self.weekly_goal_manager,
            self.financial_goal_manager,
        ):
            manager.setup()

    # =========================================================================
    # Settings (re-read on every call)
    # =========================================================================

    def streak_settings(self) -> StreakSettings:
        """Current streak settings, or defaults when missing or invalid."""
        return load_streak_settings(self.settings_store.get_settings())

    def bonus_rules(self) -> list[BonusRule]:
        """Current threshold rules, or the built-in defaults."""
        return load_bonus_rules(self.settings_store.get_settings())

    # =========================================================================
    # Dispatcher
    # =========================================================================

    def connect(self, suffix: str, callback: Listener) -> Callable[[], None]:
        """Register a listener for an event suffix.

        Returns:
            A callable that removes the listener
        """
        self._listeners[suffix].append(callback)

        def _unsubscribe() -> None:
            if callback in self._listeners[suffix]:
                self._listeners[suffix].remove(callback)

        return _unsubscribe

    def dispatch(self, suffix: str, payload: dict[str, Any]) -> None:
        """Deliver a payload to every listener of ``suffix``.

        A failing listener is logged and does not stop the others or the
        entry point that emitted the event.
        """
        for callback in list(self._listeners.get(suffix, [])):
            try:
                callback(payload)
            except Exception:  # noqa: BLE001
                const.LOGGER.exception(
                    "Listener %r failed for event '%s'", callback, suffix
                )

    # =========================================================================
    # Entry Points
    # =========================================================================

    def submit_activity(self, submission: Mapping[str, Any]) -> SubmissionResult:
        """Price and record one activity submission."""
        return self.activity_manager.submit_activity(submission)

    def evaluate_weekly_goals(
        self,
        actor_key: str,
        as_of: date | None = None,
        members: Collection[str] | None = None,
    ) -> list[dict[str, Any]]:
        """Report the current week's goals with state and progress."""
        return self.weekly_goal_manager.evaluate_weekly_goals(
            actor_key, as_of, members
        )

    def finalize_week(
        self,
        actor_key: str,
        week_start_day: date,
        members: Collection[str] | None = None,
    ) -> WeekFinalization:
        """Finalize one actor's week (idempotent)."""
        return self.weekly_goal_manager.finalize_week(
            actor_key, week_start_day, members
        )

    def update_goal_amounts(
        self, household_id: str, updates: Iterable[Mapping[str, Any]]
    ) -> GoalUpdateResult:
        """Apply a batch of financial goal amount updates."""
        return self.financial_goal_manager.update_goal_amounts(household_id, updates)
