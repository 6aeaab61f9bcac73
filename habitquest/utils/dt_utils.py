# File: utils/dt_utils.py
"""Date and time utilities for HabitQuest.

Pure date/time functions shared by the engines and managers.
Uses standard library datetime/zoneinfo plus dateutil.

Functions:
    - set_default_timezone / get_default_timezone: Process-wide local timezone
    - dt_now_utc: Current datetime in UTC (default clock)
    - as_utc: UTC conversion (naive input is treated as UTC)
    - dt_parse: Normalize timestamp inputs to an aware datetime
    - dt_local_date: Calendar date of a timestamp in the local timezone
    - dt_start_of_week: Monday of the week containing a date
    - dt_week_days: The seven dates of a week, Monday first
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
import logging
import math
from zoneinfo import ZoneInfo

# Third-party date utilities
from dateutil import parser as dt_parser
from dateutil.relativedelta import MO, relativedelta

# Module-level logger
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# ==============================================================================

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")

DAYS_PER_WEEK = 7


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone for all dt_utils functions.

    Call this once during setup to configure the user's timezone. Changing it
    while the process runs changes how naive timestamps map to calendar days.

    Args:
        tz: ZoneInfo object representing the default timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone.

    Returns:
        The configured default timezone (ZoneInfo object)
    """
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware).

    Returns:
        Current UTC datetime.
    """
    return datetime.now(UTC)


def as_utc(dt_obj: datetime) -> datetime:
    """Convert a datetime to UTC. Naive datetimes are assumed to be UTC."""
    if dt_obj.tzinfo is None:
        return dt_obj.replace(tzinfo=UTC)
    return dt_obj.astimezone(UTC)


# ==============================================================================
# Parsing
# ==============================================================================


def dt_parse(
    dt_input: str | date | datetime | float | None,
    default_tzinfo: ZoneInfo | None = None,
) -> datetime | None:
    """Normalize various timestamp inputs to a timezone-aware datetime.

    Accepts:
    - datetime: naive values get `default_tzinfo` attached
    - date: midnight of that day in `default_tzinfo`
    - str: any ISO 8601 date or datetime (parsed with dateutil's isoparse)
    - int/float: POSIX epoch seconds

    Args:
        dt_input: Value to normalize, or None
        default_tzinfo: Timezone to use if the input is naive
                        (defaults to DEFAULT_TIME_ZONE if None)

    Returns:
        Aware datetime, or None if the input could not be parsed.

    Example:
        >>> dt_parse("2025-04-15", default_tzinfo=ZoneInfo("Europe/Berlin"))
        datetime.datetime(2025, 4, 15, 0, 0, tzinfo=zoneinfo.ZoneInfo(key='Europe/Berlin'))
    """
    if dt_input is None or isinstance(dt_input, bool):
        return None

    tz_info = default_tzinfo or DEFAULT_TIME_ZONE
    result: datetime

    if isinstance(dt_input, datetime):
        result = dt_input

    elif isinstance(dt_input, date):
        result = datetime.combine(dt_input, datetime.min.time())

    elif isinstance(dt_input, str):
        if not dt_input.strip():
            return None
        try:
            result = dt_parser.isoparse(dt_input.strip())
        except (ValueError, OverflowError):
            _LOGGER.debug("Unparseable timestamp string: %s", dt_input)
            return None

    elif isinstance(dt_input, int | float):
        if not math.isfinite(dt_input):
            return None
        try:
            result = datetime.fromtimestamp(dt_input, tz=UTC)
        except (OverflowError, OSError, ValueError):
            _LOGGER.debug("Epoch timestamp out of range: %s", dt_input)
            return None

    else:
        # Unsupported input type
        return None

    # Ensure timezone awareness
    if result.tzinfo is None:
        result = result.replace(tzinfo=tz_info)

    return result


def dt_local_date(dt_input: datetime, tz: ZoneInfo | None = None) -> date:
    """Return the calendar date of an aware datetime in the local timezone."""
    return dt_input.astimezone(tz or DEFAULT_TIME_ZONE).date()


# ==============================================================================
# Week Arithmetic
# ==============================================================================


def dt_start_of_week(day: date) -> date:
    """Return the Monday of the ISO week containing `day`.

    Example:
        dt_start_of_week(date(2024, 3, 7)) → date(2024, 3, 4)
    """
    return day + relativedelta(weekday=MO(-1))


def dt_week_days(monday: date) -> list[date]:
    """Return the seven dates of the week starting at `monday`."""
    return [monday + timedelta(days=offset) for offset in range(DAYS_PER_WEEK)]
