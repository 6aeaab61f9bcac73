# File: config.py
"""Configuration and input validation for the HabitQuest engine.

Options are validated with voluptuous schemas and frozen into EngineConfig.
The same module owns the schemas for caller-supplied data (per-day activity
records and event references) so every engine validates input the same way.

vol.Invalid never escapes this module: it is re-raised as InvalidInputError.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
import math
import re
from typing import TYPE_CHECKING, Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import voluptuous as vol

from . import const
from .exceptions import InvalidInputError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .type_defs import ActivityRecords, EventRef

# ==============================================================================
# Validators
# ==============================================================================


def _time_zone(value: Any) -> str:
    """Validate an IANA time zone name."""
    if not isinstance(value, str) or not value:
        raise vol.Invalid("time zone must be a non-empty string")
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as err:
        raise vol.Invalid(f"unknown time zone: {value}") from err
    return value


def _metric_value(value: Any) -> bool | int | float | None:
    """Validate a per-day metric value (bool, non-negative finite number, None)."""
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        if not math.isfinite(value) or value < 0:
            raise vol.Invalid(f"metric value must be finite and >= 0: {value}")
        return value
    raise vol.Invalid(f"unsupported metric value type: {type(value).__name__}")


def _non_negative_int(value: Any) -> int:
    """Validate an int >= 0 (bool rejected)."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise vol.Invalid(f"expected an integer >= 0: {value!r}")
    return value


def _day_key(value: Any) -> str:
    """Validate a day key: an ISO calendar date "YYYY-MM-DD"."""
    if not isinstance(value, str) or not re.fullmatch(const.DAY_KEY_PATTERN, value):
        raise vol.Invalid(f"malformed day key: {value!r}")
    try:
        date.fromisoformat(value)
    except ValueError as err:
        raise vol.Invalid(f"invalid calendar date: {value}") from err
    return value


CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional(
            const.CONF_TIME_ZONE, default=const.DEFAULT_TIME_ZONE_NAME
        ): _time_zone,
        vol.Optional(const.CONF_LOCALE, default=const.DEFAULT_LOCALE): vol.All(
            str, vol.Length(min=1)
        ),
        vol.Optional(
            const.CONF_EVENTS_ENABLED, default=const.DEFAULT_EVENTS_ENABLED
        ): bool,
        vol.Optional(
            const.CONF_MAX_LEDGER_ENTRIES, default=const.DEFAULT_MAX_LEDGER_ENTRIES
        ): vol.All(int, vol.Range(min=1)),
        vol.Optional(
            const.CONF_LEDGER_RETENTION_DAYS, default=const.DEFAULT_LEDGER_RETENTION_DAYS
        ): _non_negative_int,
    }
)

DAY_RECORD_SCHEMA = vol.Schema({str: _metric_value})

ACTIVITY_RECORDS_SCHEMA = vol.Schema({_day_key: DAY_RECORD_SCHEMA})

EVENT_REF_SCHEMA = vol.Schema(
    {
        vol.Required(const.DATA_EVENT_REF_ID): vol.All(str, vol.Length(min=1)),
        vol.Required(const.DATA_EVENT_REF_XP): _non_negative_int,
    },
    extra=vol.ALLOW_EXTRA,
)


# ==============================================================================
# Engine Configuration
# ==============================================================================


@dataclass(frozen=True)
class EngineConfig:
    """Validated engine options.

    Attributes:
        time_zone: IANA name of the user's time zone (maps instants to days)
        locale: Locale code forwarded to localized titles/descriptions
        events_enabled: Whether weekly events are shown and auto-completed
        max_ledger_entries: Maximum experience ledger entries kept in state
        ledger_retention_days: Age limit in days for ledger entries (0 = no limit)
    """

    time_zone: str = const.DEFAULT_TIME_ZONE_NAME
    locale: str = const.DEFAULT_LOCALE
    events_enabled: bool = const.DEFAULT_EVENTS_ENABLED
    max_ledger_entries: int = const.DEFAULT_MAX_LEDGER_ENTRIES
    ledger_retention_days: int = const.DEFAULT_LEDGER_RETENTION_DAYS

    @property
    def tzinfo(self) -> ZoneInfo:
        """Return the configured time zone as a ZoneInfo."""
        return ZoneInfo(self.time_zone)


def validate_config(options: Mapping[str, Any] | None = None) -> EngineConfig:
    """Validate an options mapping and return an EngineConfig.

    Args:
        options: Raw options (missing keys take their defaults)

    Returns:
        Frozen EngineConfig

    Raises:
        InvalidInputError: If any option is invalid or unknown
    """
    try:
        validated = CONFIG_SCHEMA(dict(options or {}))
    except vol.Invalid as err:
        raise InvalidInputError(f"Invalid engine configuration: {err}") from err

    return EngineConfig(
        time_zone=validated[const.CONF_TIME_ZONE],
        locale=validated[const.CONF_LOCALE],
        events_enabled=validated[const.CONF_EVENTS_ENABLED],
        max_ledger_entries=validated[const.CONF_MAX_LEDGER_ENTRIES],
        ledger_retention_days=validated[const.CONF_LEDGER_RETENTION_DAYS],
    )


# ==============================================================================
# Input Validation Helpers
# ==============================================================================


def validate_activity_records(days: Any) -> ActivityRecords:
    """Validate the activity record mapping (day key -> metric dict).

    Raises:
        InvalidInputError: If the mapping, a day key or a metric value is malformed
    """
    if not isinstance(days, dict):
        raise InvalidInputError(
            f"Activity records must be a mapping, got {type(days).__name__}"
        )
    try:
        return ACTIVITY_RECORDS_SCHEMA(days)
    except vol.Invalid as err:
        raise InvalidInputError(f"Malformed activity record: {err}") from err


def validate_event_ref(event_ref: Any) -> EventRef:
    """Validate an event reference ({"id": str, "xp": int >= 0}).

    Raises:
        InvalidInputError: If the reference is malformed
    """
    try:
        return EVENT_REF_SCHEMA(event_ref)
    except vol.Invalid as err:
        raise InvalidInputError(f"Malformed event reference: {err}") from err

