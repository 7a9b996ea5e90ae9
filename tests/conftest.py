"""Shared fixtures for Budget Game tests."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any
from zoneinfo import ZoneInfo

import pytest

from budgetgame import BudgetGameCoordinator, const
from budgetgame.utils import dt_utils
from tests.helpers import (
    CATALOG_ROWS,
    FakeCatalogStore,
    FakeGoalStore,
    FakeLedgerStore,
    FakeSettingsStore,
)


@pytest.fixture(autouse=True)
def utc_default_timezone() -> Iterator[None]:
    """Run every test with UTC as the local timezone."""
    dt_utils.set_default_timezone(ZoneInfo("UTC"))
    yield
    dt_utils.set_default_timezone(ZoneInfo("UTC"))


@pytest.fixture
def catalog_store() -> FakeCatalogStore:
    """Catalog store seeded with the standard test activities."""
    return FakeCatalogStore(CATALOG_ROWS)


@pytest.fixture
def ledger() -> FakeLedgerStore:
    """Empty ledger."""
    return FakeLedgerStore()


@pytest.fixture
def goal_store() -> FakeGoalStore:
    """Empty goal store."""
    return FakeGoalStore()


@pytest.fixture
def settings_store() -> FakeSettingsStore:
    """Settings store with nothing configured (defaults apply)."""
    return FakeSettingsStore()


@pytest.fixture
def coordinator(
    catalog_store: FakeCatalogStore,
    ledger: FakeLedgerStore,
    goal_store: FakeGoalStore,
    settings_store: FakeSettingsStore,
) -> BudgetGameCoordinator:
    """Coordinator wired to the in-memory stores."""
    return BudgetGameCoordinator(catalog_store, ledger, goal_store, settings_store)


@pytest.fixture
def captured_events(coordinator: BudgetGameCoordinator) -> dict[str, list[Any]]:
    """Record every payload dispatched for the known event suffixes."""
    captured: dict[str, list[Any]] = {}
    for suffix in (
        const.SIGNAL_SUFFIX_ACTIVITY_LOGGED,
        const.SIGNAL_SUFFIX_UNKNOWN_ACTIVITY,
        const.SIGNAL_SUFFIX_WEEKLY_GOALS_GENERATED,
        const.SIGNAL_SUFFIX_WEEKLY_GOAL_COMPLETED,
        const.SIGNAL_SUFFIX_WEEK_FINALIZED,
        const.SIGNAL_SUFFIX_FINANCIAL_GOAL_COMPLETED,
        const.SIGNAL_SUFFIX_VACATION_FUND_ACTIVATED,
    ):
        captured[suffix] = []
        coordinator.connect(suffix, captured[suffix].append)
    return captured
