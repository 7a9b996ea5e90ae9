# File: helpers/catalog_helpers.py
"""Activity catalog loading with a read-through TTL cache.

The catalog changes rarely but is read on every submission. The cache keeps
the last validated catalog for ``ttl_seconds`` and is invalidated explicitly
whenever an admin edits the catalog. The clock is injectable for tests.
"""

from __future__ import annotations

from collections.abc import Callable
import time

from .. import const
from ..engines.ledger_engine import LedgerEngine
from ..store import ActivityCatalogStore
from ..type_defs import ActivityDefinition


class ActivityCatalogCache:
    """Read-through cache in front of an ActivityCatalogStore."""

    def __init__(
        self,
        store: ActivityCatalogStore,
        ttl_seconds: float = const.CATALOG_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            store: Source of raw catalog rows
            ttl_seconds: How long a loaded catalog stays fresh
            clock: Monotonic time source (seconds)
        """
        self._store = store
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._catalog: dict[str, ActivityDefinition] | None = None
        self._loaded_at = 0.0

    def get(self) -> dict[str, ActivityDefinition]:
        """Return the catalog, reloading from the store once stale."""
        now = self._clock()
        if self._catalog is None or now - self._loaded_at >= self._ttl_seconds:
            rows = self._store.get_activity_definitions()
            self._catalog = LedgerEngine.build_catalog(rows)
            self._loaded_at = now
            const.LOGGER.debug(
                "Loaded activity catalog: %d activities", len(self._catalog)
            )
        return self._catalog

    def invalidate(self) -> None:
        """Drop the cached catalog so the next read reloads it."""
        const.LOGGER.debug("Activity catalog cache invalidated")
        self._catalog = None
