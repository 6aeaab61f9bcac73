"""Unit tests for CalendarEngine - timestamp to week/day key mapping.

Test Categories:
- Week range for every instant of a week
- ISO year boundaries
- Timezone handling (naive vs aware input)
- Accepted input types and InvalidInputError cases
- Week key parsing, week index arithmetic
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

import pytest

from habitquest.engines.calendar_engine import CalendarEngine
from habitquest.exceptions import InvalidInputError
from tests.helpers import WEEK_DAYS, WEEK_KEY

BERLIN = ZoneInfo("Europe/Berlin")


class TestGetWeekRange:
    """Tests for get_week_range."""

    def test_scenario_week(self) -> None:
        """A Wednesday maps to its ISO week with Monday-first day keys."""
        result = CalendarEngine.get_week_range(datetime(2024, 3, 6, 12, tzinfo=UTC))

        assert result["week_key"] == WEEK_KEY
        assert result["day_keys"] == WEEK_DAYS

    def test_every_instant_of_week_maps_to_same_range(self) -> None:
        """Monday 00:00 through Sunday 23:59 yield identical keys."""
        start = datetime(2024, 3, 4, 0, 0, tzinfo=UTC)
        expected = CalendarEngine.get_week_range(start)

        for hours in range(0, 7 * 24, 5):
            instant = start + timedelta(hours=hours)
            assert CalendarEngine.get_week_range(instant) == expected

        last_minute = datetime(2024, 3, 10, 23, 59, tzinfo=UTC)
        assert CalendarEngine.get_week_range(last_minute) == expected

    def test_next_monday_is_next_week(self) -> None:
        """The following Monday starts a new week."""
        result = CalendarEngine.get_week_range(datetime(2024, 3, 11, tzinfo=UTC))

        assert result["week_key"] == "2024-W11"
        assert result["day_keys"][0] == "2024-03-11"

    def test_always_seven_consecutive_days(self) -> None:
        """day_keys spans exactly one week in order."""
        result = CalendarEngine.get_week_range(date(2024, 2, 29))
        days = [date.fromisoformat(key) for key in result["day_keys"]]

        assert len(days) == 7
        assert days[0].weekday() == 0
        assert all(b - a == timedelta(days=1) for a, b in zip(days, days[1:]))
        assert date(2024, 2, 29) in days

    def test_iso_year_boundary_forward(self) -> None:
        """2024-12-30 belongs to ISO week 1 of 2025."""
        result = CalendarEngine.get_week_range(date(2024, 12, 30))

        assert result["week_key"] == "2025-W01"
        assert result["day_keys"][0] == "2024-12-30"
        assert result["day_keys"][-1] == "2025-01-05"

    def test_iso_year_boundary_backward(self) -> None:
        """2021-01-03 (Sunday) belongs to ISO week 53 of 2020."""
        result = CalendarEngine.get_week_range(date(2021, 1, 3))

        assert result["week_key"] == "2020-W53"
        assert result["day_keys"][0] == "2020-12-28"

    def test_aware_timestamp_converted_to_local_zone(self) -> None:
        """Sunday 23:30 UTC is already Monday in Berlin."""
        instant = datetime(2024, 3, 10, 23, 30, tzinfo=UTC)

        assert CalendarEngine.get_week_range(instant)["week_key"] == "2024-W10"
        assert CalendarEngine.get_week_range(instant, BERLIN)["week_key"] == "2024-W11"

    def test_naive_timestamp_interpreted_in_local_zone(self) -> None:
        """Naive datetimes are wall-clock time in the given zone."""
        naive = datetime(2024, 3, 10, 23, 30)

        assert CalendarEngine.get_week_range(naive, BERLIN)["week_key"] == "2024-W10"

    @pytest.mark.parametrize(
        "timestamp",
        [
            "2024-03-06",
            "2024-03-06T12:00:00",
            "2024-03-06T12:00:00+00:00",
            date(2024, 3, 6),
            datetime(2024, 3, 6, 12, tzinfo=UTC).timestamp(),
            int(datetime(2024, 3, 6, 12, tzinfo=UTC).timestamp()),
        ],
    )
    def test_accepted_input_types(self, timestamp: Any) -> None:
        """Strings, dates and epoch seconds are all accepted."""
        assert CalendarEngine.get_week_range(timestamp)["week_key"] == WEEK_KEY

    @pytest.mark.parametrize(
        "timestamp",
        [None, "", "   ", "not a date", "2024-13-45", True, object(), float("nan"), []],
    )
    def test_invalid_timestamps_raise(self, timestamp: Any) -> None:
        """Missing or unparseable timestamps raise InvalidInputError."""
        with pytest.raises(InvalidInputError):
            CalendarEngine.get_week_range(timestamp)

    @pytest.mark.parametrize(
        "timestamp", [date(9999, 12, 31), "9999-12-27", datetime(9999, 12, 29, tzinfo=UTC)]
    )
    def test_last_calendar_week_raises_invalid_input(self, timestamp: Any) -> None:
        """A week running past date.max is rejected as invalid input."""
        with pytest.raises(InvalidInputError):
            CalendarEngine.get_week_range(timestamp)

    def test_invalid_input_is_value_error(self) -> None:
        """InvalidInputError can be caught as ValueError."""
        with pytest.raises(ValueError):
            CalendarEngine.get_week_range("garbage")


class TestParseWeekKey:
    """Tests for parse_week_key and week arithmetic."""

    def test_returns_monday(self) -> None:
        """A week key parses to its Monday."""
        assert CalendarEngine.parse_week_key(WEEK_KEY) == date(2024, 3, 4)

    def test_week_53_in_long_year(self) -> None:
        """W53 exists in 2020."""
        assert CalendarEngine.parse_week_key("2020-W53") == date(2020, 12, 28)

    @pytest.mark.parametrize(
        "week_key",
        ["", None, 2024, "2024-10", "2024-W1", "2024-W00", "2021-W53", "2024-W10\n", "x"],
    )
    def test_malformed_keys_raise(self, week_key: Any) -> None:
        """Empty, malformed or nonexistent week keys raise InvalidInputError."""
        with pytest.raises(InvalidInputError):
            CalendarEngine.parse_week_key(week_key)

    def test_round_trip_with_week_key_for_date(self) -> None:
        """week_key_for_date of the parsed Monday yields the same key."""
        monday = CalendarEngine.parse_week_key("2025-W01")
        assert CalendarEngine.week_key_for_date(monday) == "2025-W01"

    def test_week_index_origin(self) -> None:
        """1970-W02 (Monday 1970-01-05) is index 0."""
        assert CalendarEngine.week_index("1970-W02") == 0
        assert CalendarEngine.week_index("1970-W03") == 1
        assert CalendarEngine.week_index("1970-W01") == -1

    def test_weeks_between(self) -> None:
        """Week differences are linear, across ISO years too."""
        assert CalendarEngine.weeks_between("2024-W01", WEEK_KEY) == 9
        assert CalendarEngine.weeks_between("2024-W52", "2025-W01") == 1
        assert CalendarEngine.weeks_between(WEEK_KEY, "2024-W01") == -9

    def test_day_keys_for_week(self) -> None:
        """Day keys can be derived from a week key."""
        assert CalendarEngine.day_keys_for_week(WEEK_KEY) == WEEK_DAYS

    def test_day_keys_for_last_calendar_week_raises(self) -> None:
        """9999-W52 runs past date.max."""
        with pytest.raises(InvalidInputError):
            CalendarEngine.day_keys_for_week("9999-W52")
