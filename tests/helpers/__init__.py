"""Test helpers for Budget Game tests.

This module re-exports all helpers for convenient imports:

    from tests.helpers import (
        # Builders
        make_catalog, make_event, make_summary, at_noon,

        # In-memory stores
        FakeCatalogStore, FakeLedgerStore, FakeGoalStore, FakeSettingsStore,
    )

See individual modules for full documentation:
- builders.py: Catalog, event and summary factories
- fakes.py: In-memory implementations of the store protocols
"""

from tests.helpers.builders import (
    ACTIVITY_COOK,
    ACTIVITY_DELIVERY,
    ACTIVITY_EXERCISE,
    ACTIVITY_IMPULSE,
    ACTIVITY_NO_SPEND,
    ACTIVITY_REVIEW_BUDGET,
    ACTIVITY_STUDY,
    CATALOG_ROWS,
    at_noon,
    make_catalog,
    make_event,
    make_summary,
)
from tests.helpers.fakes import (
    FakeCatalogStore,
    FakeGoalStore,
    FakeLedgerStore,
    FakeSettingsStore,
)

__all__ = [
    "ACTIVITY_COOK",
    "ACTIVITY_DELIVERY",
    "ACTIVITY_EXERCISE",
    "ACTIVITY_IMPULSE",
    "ACTIVITY_NO_SPEND",
    "ACTIVITY_REVIEW_BUDGET",
    "ACTIVITY_STUDY",
    "CATALOG_ROWS",
    "FakeCatalogStore",
    "FakeGoalStore",
    "FakeLedgerStore",
    "FakeSettingsStore",
    "at_noon",
    "make_catalog",
    "make_event",
    "make_summary",
]
