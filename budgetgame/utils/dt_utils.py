# File: utils/dt_utils.py
"""Date and time utilities for Budget Game.

Pure Python date/time functions. Uses standard library datetime, zoneinfo
and dateutil.

Functions:
    - dt_today_local: Get today's date in local timezone
    - dt_now_local: Get current datetime in local timezone
    - dt_now_utc: Get current datetime in UTC
    - as_local: Convert a datetime to local timezone
    - local_date: Local calendar day of a datetime
    - start_of_local_day: Local midnight for a datetime
    - dt_parse_date: Parse date strings
    - dt_parse: Normalize datetime inputs to aware datetimes
    - week_start / week_end / previous_week_start: Sunday-start week bounds
    - add_months / months_between: Month arithmetic for goal horizons
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
import logging
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from dateutil.relativedelta import SU, relativedelta

if TYPE_CHECKING:
    from datetime import tzinfo

# Module-level logger
_LOGGER = logging.getLogger(__name__)

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")

# Days in a reporting week (Sunday 00:00 through Saturday 23:59:59)
DAYS_PER_WEEK = 7


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone for all dt_utils functions.

    Call this once at startup with the household's timezone. Calendar days
    for streaks and weekly windows are derived in this timezone.

    Args:
        tz: ZoneInfo object representing the default timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone."""
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_today_local(tz: ZoneInfo | None = None) -> date:
    """Return today's date in local timezone as a `datetime.date`.

    Args:
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Example:
        datetime.date(2025, 4, 7)
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info).date()


def dt_now_local(tz: ZoneInfo | None = None) -> datetime:
    """Return the current datetime in local timezone (timezone-aware)."""
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info)


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware)."""
    return datetime.now(UTC)


# ==============================================================================
# Timezone Conversion
# ==============================================================================


def as_local(dt_obj: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Convert a datetime to local timezone.

    Naive datetimes are assumed to already be local wall-clock time.

    Args:
        dt_obj: Datetime object
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Datetime in local timezone
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    if dt_obj.tzinfo is None:
        return dt_obj.replace(tzinfo=tz_info)
    return dt_obj.astimezone(tz_info)


def local_date(dt_obj: datetime, tz: ZoneInfo | None = None) -> date:
    """Return the local calendar day a datetime falls on."""
    return as_local(dt_obj, tz).date()


def start_of_local_day(
    day: date | datetime, tz: ZoneInfo | None = None
) -> datetime:
    """Get local midnight (00:00:00) for a date or datetime.

    Args:
        day: A date, or a datetime in any timezone
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Datetime at 00:00:00 in local timezone (timezone-aware)
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    if isinstance(day, datetime):
        day = local_date(day, tz_info)
    return datetime.combine(day, datetime.min.time(), tzinfo=tz_info)


# ==============================================================================
# Date/Time Parsing
# ==============================================================================


def dt_parse_date(date_str: str | None) -> date | None:
    """Safely parse a date string into a `datetime.date`.

    Accepts formats:
    - "2025-04-07" (ISO format)
    - "04/07/2025" (US format)
    - "2025/04/07"

    Returns:
        datetime.date or None if parsing fails.
    """
    if not date_str or not isinstance(date_str, str):
        return None

    try:
        return date.fromisoformat(date_str.strip())
    except ValueError:
        pass

    for fmt in ("%m/%d/%Y", "%Y/%m/%d"):
        try:
            return datetime.strptime(date_str.strip(), fmt).date()
        except ValueError:
            continue

    return None


def dt_parse(
    dt_input: str | date | datetime | None,
    default_tzinfo: tzinfo | None = None,
) -> datetime | None:
    """Normalize string, date or datetime input to an aware datetime.

    Naive inputs are interpreted in ``default_tzinfo`` (DEFAULT_TIME_ZONE if
    None). Dates become local midnight.

    Returns:
        Timezone-aware datetime, or None if the input could not be parsed.

    Example:
        >>> dt_parse("2025-04-15")
        datetime.datetime(2025, 4, 15, 0, 0, tzinfo=ZoneInfo('UTC'))
    """
    if not dt_input:
        return None

    tz_info = default_tzinfo or DEFAULT_TIME_ZONE
    result: datetime | None = None

    if isinstance(dt_input, str):
        try:
            result = datetime.fromisoformat(dt_input.strip())
        except ValueError:
            parsed_date = dt_parse_date(dt_input)
            if parsed_date is None:
                _LOGGER.debug("Unparseable datetime input: %r", dt_input)
                return None
            result = datetime.combine(parsed_date, datetime.min.time())

    elif isinstance(dt_input, datetime):
        result = dt_input

    elif isinstance(dt_input, date):
        result = datetime.combine(dt_input, datetime.min.time())

    else:
        return None

    if result.tzinfo is None:
        result = result.replace(tzinfo=tz_info)
    return result


# ==============================================================================
# Week Windows
# ==============================================================================


def week_start(day: date) -> date:
    """Return the Sunday that starts the week containing ``day``.

    Examples:
        week_start(date(2025, 1, 15)) → date(2025, 1, 12)  # Wed → Sun
        week_start(date(2025, 1, 12)) → date(2025, 1, 12)  # Sun → itself
    """
    return day + relativedelta(weekday=SU(-1))


def week_end(day: date) -> date:
    """Return the Saturday that ends the week containing ``day``."""
    return week_start(day) + timedelta(days=DAYS_PER_WEEK - 1)


def previous_week_start(day: date) -> date:
    """Return the Sunday that starts the week before the one containing ``day``."""
    return week_start(day) - timedelta(days=DAYS_PER_WEEK)


def week_bounds(day: date, tz: ZoneInfo | None = None) -> tuple[datetime, datetime]:
    """Return the [start, end) local datetimes of the week containing ``day``."""
    start = start_of_local_day(week_start(day), tz)
    end = start_of_local_day(week_start(day) + timedelta(days=DAYS_PER_WEEK), tz)
    return start, end


# ==============================================================================
# Month Arithmetic
# ==============================================================================


def add_months(day: date, months: int) -> date:
    """Add calendar months, clamping to the end of shorter months.

    Example:
        add_months(date(2025, 1, 31), 1) → date(2025, 2, 28)
    """
    return day + relativedelta(months=months)


def months_between(start: date, end: date) -> int:
    """Whole calendar months from ``start`` to ``end`` by year/month difference.

    Day of month is ignored; negative spans are floored at 0.

    Example:
        months_between(date(2025, 1, 31), date(2025, 3, 1)) → 2
    """
    months = (end.year - start.year) * 12 + (end.month - start.month)
    return max(0, months)
