"""Calendar Engine - Pure mapping from timestamps to week and day keys.

This engine provides stateless functions for:
- Mapping any timestamp to its ISO week key ("2024-W10")
- Listing the seven day keys of that week, Monday first ("2024-03-04" ...)
- Parsing week keys back to their Monday and to a linear week index

ARCHITECTURE: All methods are static and operate only on passed-in values.
The local timezone comes from the caller (or dt_utils' default timezone), so
the same timestamp always yields the same keys for the process lifetime.
"""

from __future__ import annotations

from datetime import date
import re
from typing import TYPE_CHECKING, Any, Final

from .. import const
from ..exceptions import InvalidInputError
from ..utils import dt_utils

if TYPE_CHECKING:
    from zoneinfo import ZoneInfo

    from ..type_defs import DayKey, WeekKey, WeekRange

# Monday of ISO week 1970-W02; week indexes count whole weeks from here
ISO_EPOCH_MONDAY: Final = date(1970, 1, 5)

_WEEK_KEY_RE: Final = re.compile(const.WEEK_KEY_PATTERN)


class CalendarEngine:
    """Pure logic engine for calendar week mapping.

    All methods are static - no instance state.
    """

    @staticmethod
    def get_week_range(timestamp: Any, tz: ZoneInfo | None = None) -> WeekRange:
        """Map a timestamp to its week key and ordered day keys.

        Args:
            timestamp: datetime, date, ISO 8601 string or POSIX epoch seconds.
                       Naive values are interpreted in `tz`.
            tz: Local timezone (defaults to dt_utils' default timezone)

        Returns:
            WeekRange with week_key and the seven day keys, Monday first

        Raises:
            InvalidInputError: If the timestamp is missing or cannot be parsed
        """
        parsed = dt_utils.dt_parse(timestamp, default_tzinfo=tz)
        if parsed is None:
            raise InvalidInputError(f"Invalid timestamp: {timestamp!r}")

        try:
            local_day = dt_utils.dt_local_date(parsed, tz)
            monday = dt_utils.dt_start_of_week(local_day)
            day_keys = CalendarEngine.day_keys_for_monday(monday)
        except (OverflowError, ValueError) as err:
            # First/last week of the supported calendar has days outside it
            raise InvalidInputError(
                f"Timestamp outside the supported calendar range: {timestamp!r}"
            ) from err

        return {
            "week_key": CalendarEngine.week_key_for_date(local_day),
            "day_keys": day_keys,
        }

    @staticmethod
    def week_key_for_date(day: date) -> WeekKey:
        """Return the ISO week key of a calendar date.

        Uses the ISO year, so 2024-12-30 maps to "2025-W01".
        """
        iso = day.isocalendar()
        return const.WEEK_KEY_FORMAT.format(year=iso.year, week=iso.week)

    @staticmethod
    def day_keys_for_monday(monday: date) -> list[DayKey]:
        """Return the seven ISO day keys of the week starting at `monday`."""
        return [day.isoformat() for day in dt_utils.dt_week_days(monday)]

    @staticmethod
    def parse_week_key(week_key: Any) -> date:
        """Return the Monday of the week identified by `week_key`.

        Raises:
            InvalidInputError: If the key is empty, malformed, or names a
                week that does not exist (e.g. W53 of a 52-week ISO year)
        """
        if not isinstance(week_key, str) or not week_key:
            raise InvalidInputError(f"Week key must be a non-empty string: {week_key!r}")

        match = _WEEK_KEY_RE.fullmatch(week_key)
        if match is None:
            raise InvalidInputError(f"Malformed week key: {week_key}")

        year, week = int(match.group(1)), int(match.group(2))
        try:
            return date.fromisocalendar(year, week, 1)
        except ValueError as err:
            raise InvalidInputError(f"Week does not exist: {week_key}") from err

    @staticmethod
    def week_index(week_key: WeekKey) -> int:
        """Return the number of whole weeks between the ISO epoch Monday and the week.

        Consecutive weeks have consecutive indexes; weeks before 1970 are negative.
        """
        monday = CalendarEngine.parse_week_key(week_key)
        return (monday - ISO_EPOCH_MONDAY).days // const.DAYS_PER_WEEK

    @staticmethod
    def weeks_between(start_week_key: WeekKey, end_week_key: WeekKey) -> int:
        """Return the signed number of weeks from `start_week_key` to `end_week_key`."""
        return CalendarEngine.week_index(end_week_key) - CalendarEngine.week_index(
            start_week_key
        )

    @staticmethod
    def day_keys_for_week(week_key: WeekKey) -> list[DayKey]:
        """Return the seven day keys of the week identified by `week_key`."""
        monday = CalendarEngine.parse_week_key(week_key)
        try:
            return CalendarEngine.day_keys_for_monday(monday)
        except OverflowError as err:
            raise InvalidInputError(
                f"Week extends past the supported calendar range: {week_key}"
            ) from err

