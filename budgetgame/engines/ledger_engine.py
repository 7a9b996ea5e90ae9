"""Ledger Engine - Pure logic for turning raw input into typed ledger events.

This engine provides stateless, pure Python functions for:
- Normalizing a raw submission into ActivityEvents (Ledger Reader)
- Penalizing skipped required activities
- Validating catalog rows into ActivityDefinitions
- One-way import of legacy display-string history rows

ARCHITECTURE: This is a pure logic engine. All functions are static methods
that operate on passed-in data. Loading the catalog and appending events
belongs in ActivityManager.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from datetime import date, datetime
import re
from typing import Any

from .. import const
from ..type_defs import ActivityDefinition, ActivityEvent, UnknownActivityWarning
from ..utils import dt_utils

# "➕ Exercise for 30 minutes (🔥3) (+4)"; higher tiers repeat the flame ("🔥🔥7")
_LEGACY_ENTRY_RE = re.compile(
    rf"^[{const.LEGACY_MARKER_POSITIVE}{const.LEGACY_MARKER_NEGATIVE}]\s"
    rf"(?P<name>.*?)\s*"
    rf"(?:\({const.LEGACY_STREAK_MARKER}+(?P<streak>\d+)\))?\s*"
    r"\((?P<points>[+-]?\d+)\)$"
)

WarningCallback = Callable[[UnknownActivityWarning], None]


class LedgerEngine:
    """Pure logic engine for ledger intake.

    All methods are static - no instance state.
    """

    # =========================================================================
    # Submission Normalization
    # =========================================================================

    @staticmethod
    def normalize(
        submission: Mapping[str, Any],
        catalog: Mapping[str, ActivityDefinition],
        on_warning: WarningCallback | None = None,
    ) -> list[ActivityEvent]:
        """Turn one raw submission into ledger events.

        Unknown activity names never abort the submission: they produce a
        zero-point event flagged ``unknown`` and a warning through
        ``on_warning``. Skipped activities that the catalog marks required
        produce a penalty event worth ``-abs(base_points)``.

        Args:
            submission: Mapping with ``timestamp``, ``actor_key``,
                ``activities`` (list of names or comma-separated string) and
                optional ``skipped`` (same shapes)
            catalog: Activity definitions keyed by name
            on_warning: Called once per unknown activity name

        Returns:
            Events in submission order, skipped-required penalties last.
            ``awarded_points`` equals ``base_points`` (unpriced).

        Raises:
            ValueError: If the timestamp or actor key is missing or invalid
        """
        timestamp = dt_utils.dt_parse(submission.get(const.SUBMISSION_TIMESTAMP))
        if timestamp is None:
            raise ValueError(
                f"Submission has invalid timestamp: "
                f"{submission.get(const.SUBMISSION_TIMESTAMP)!r}"
            )
        actor_key = str(submission.get(const.SUBMISSION_ACTOR_KEY) or "").strip()
        if not actor_key:
            raise ValueError("Submission has no actor key")

        events: list[ActivityEvent] = []
        for name in LedgerEngine.split_activity_names(
            submission.get(const.SUBMISSION_ACTIVITIES)
        ):
            definition = catalog.get(name)
            if definition is None:
                const.LOGGER.warning(
                    "Unknown activity '%s' submitted by %s, recorded with 0 points",
                    name,
                    actor_key,
                )
                if on_warning is not None:
                    on_warning(UnknownActivityWarning(actor_key, name, timestamp))
                events.append(
                    ActivityEvent(
                        timestamp=timestamp,
                        actor_key=actor_key,
                        activity_name=name,
                        base_points=0,
                        awarded_points=0,
                        category=const.CATEGORY_UNCATEGORIZED,
                        unknown=True,
                    )
                )
                continue

            events.append(
                ActivityEvent(
                    timestamp=timestamp,
                    actor_key=actor_key,
                    activity_name=definition.name,
                    base_points=definition.base_points,
                    awarded_points=definition.base_points,
                    category=definition.category,
                )
            )

        events.extend(
            LedgerEngine.skipped_required_events(
                submission.get(const.SUBMISSION_SKIPPED), catalog, actor_key, timestamp
            )
        )
        return events

    @staticmethod
    def skipped_required_events(
        skipped: Any,
        catalog: Mapping[str, ActivityDefinition],
        actor_key: str,
        timestamp: datetime,
    ) -> list[ActivityEvent]:
        """Build penalty events for skipped activities marked required.

        Names that are unknown or not required are ignored.
        """
        events: list[ActivityEvent] = []
        for name in LedgerEngine.split_activity_names(skipped):
            definition = catalog.get(name)
            if definition is None or not definition.required:
                const.LOGGER.debug(
                    "Ignoring skipped activity '%s' (unknown or not required)", name
                )
                continue
            penalty = -abs(definition.base_points)
            events.append(
                ActivityEvent(
                    timestamp=timestamp,
                    actor_key=actor_key,
                    activity_name=definition.name,
                    base_points=penalty,
                    awarded_points=penalty,
                    category=definition.category,
                )
            )
        return events

    @staticmethod
    def split_activity_names(raw: Any) -> list[str]:
        """Normalize a list or comma-separated string of names.

        Blank names are dropped. Order is preserved.
        """
        if not raw:
            return []
        if isinstance(raw, str):
            parts: Iterable[Any] = raw.split(const.SUBMISSION_ACTIVITY_SEPARATOR)
        else:
            parts = raw
        return [str(part).strip() for part in parts if str(part).strip()]

    # =========================================================================
    # Catalog Rows
    # =========================================================================

    @staticmethod
    def build_catalog(
        rows: Iterable[Mapping[str, Any]],
    ) -> dict[str, ActivityDefinition]:
        """Validate raw catalog rows into definitions keyed by name.

        Rows with a blank name, blank category or non-integer points are
        skipped. Duplicate names keep the first occurrence.
        """
        catalog: dict[str, ActivityDefinition] = {}
        for index, row in enumerate(rows):
            name = str(row.get(const.CATALOG_NAME) or "").strip()
            category = str(row.get(const.CATALOG_CATEGORY) or "").strip()
            raw_points = row.get(const.CATALOG_POINTS)
            try:
                points = int(raw_points)  # type: ignore[arg-type]
            except (TypeError, ValueError):
                const.LOGGER.warning(
                    "Skipping catalog row %d: invalid points %r", index, raw_points
                )
                continue
            if not name or not category:
                const.LOGGER.warning(
                    "Skipping catalog row %d: missing name or category", index
                )
                continue
            if name in catalog:
                const.LOGGER.warning(
                    "Duplicate catalog activity '%s' at row %d, keeping first",
                    name,
                    index,
                )
                continue
            catalog[name] = ActivityDefinition(
                name=name,
                base_points=points,
                category=category,
                required=bool(row.get(const.CATALOG_REQUIRED, False)),
            )
        return catalog

    # =========================================================================
    # Legacy History Import (one-way)
    # =========================================================================

    @staticmethod
    def parse_legacy_row(
        row_date: date | datetime | str | None,
        actor_key: str,
        activities: str,
        catalog: Mapping[str, ActivityDefinition],
    ) -> list[ActivityEvent]:
        """Convert one legacy dashboard row into structured events.

        Legacy rows store activities as display strings, for example
        ``"➕ Exercise for 30 minutes (🔥3) (+4), ➖ Order food for delivery (-10)"``.
        The awarded points come from the string; base points and category
        from the catalog when the name is known.

        Rows with an invalid date, and entries that do not match the display
        format, are skipped and logged.
        """
        timestamp = dt_utils.dt_parse(row_date)
        if timestamp is None:
            const.LOGGER.warning(
                "Skipping legacy history row for %s: invalid date %r",
                actor_key,
                row_date,
            )
            return []

        events: list[ActivityEvent] = []
        for entry in (activities or "").split(", "):
            entry = entry.strip()
            if not entry:
                continue
            match = _LEGACY_ENTRY_RE.match(entry)
            if match is None:
                const.LOGGER.warning(
                    "Skipping malformed legacy history entry %r on %s",
                    entry,
                    timestamp.date().isoformat(),
                )
                continue

            name = match.group("name").strip()
            awarded = int(match.group("points"))
            streak = int(match.group("streak") or 0)
            definition = catalog.get(name)
            events.append(
                ActivityEvent(
                    timestamp=timestamp,
                    actor_key=actor_key,
                    activity_name=name,
                    base_points=definition.base_points if definition else awarded,
                    awarded_points=awarded,
                    category=(
                        definition.category
                        if definition
                        else const.CATEGORY_UNCATEGORIZED
                    ),
                    streak_length=streak,
                    unknown=definition is None,
                )
            )
        return events
