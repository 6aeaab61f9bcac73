"""Builders and constants shared by HabitQuest tests."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from habitquest import const
from habitquest.catalog import (
    CatalogVersion,
    EventCatalog,
    EventRule,
    WeeklyEventDefinition,
)

# ISO week 2024-W10: Monday 2024-03-04 .. Sunday 2024-03-10
WEEK_KEY = "2024-W10"
WEEK_DAYS = [
    "2024-03-04",
    "2024-03-05",
    "2024-03-06",
    "2024-03-07",
    "2024-03-08",
    "2024-03-09",
    "2024-03-10",
]
MON, TUE, WED, THU, FRI, SAT, SUN = WEEK_DAYS

FIXED_NOW = datetime(2024, 3, 6, 12, 0, tzinfo=UTC)


def make_event(
    *,
    event_id: str = "event-1",
    rule_type: str = const.EVENT_RULE_DAYS_ACTIVE,
    threshold: float = 3,
    metric: str | None = None,
    min_value: float = 1,
    xp: int = 50,
    bonus_percent: float = 0.1,
) -> WeeklyEventDefinition:
    """Build a minimal weekly event definition."""
    return WeeklyEventDefinition(
        event_id=event_id,
        titles={"de": f"Titel {event_id}", "en": f"Title {event_id}"},
        descriptions={"de": "Beschreibung", "en": "Description"},
        xp=xp,
        bonus_percent=bonus_percent,
        rule=EventRule(rule_type, threshold=threshold, metric=metric, min_value=min_value),
    )


def make_catalog(
    count: int = 4, effective_from: str = "2024-W01", version: int = 1
) -> EventCatalog:
    """Build a single-version catalog with `count` events e0..e{count-1}."""
    return EventCatalog(
        (
            CatalogVersion(
                version=version,
                effective_from=effective_from,
                events=tuple(make_event(event_id=f"e{i}") for i in range(count)),
            ),
        )
    )


def make_state(
    *,
    days: dict[str, dict[str, Any]] | None = None,
    event_history: dict[str, Any] | None = None,
    xp: int = 0,
    counters: dict[str, int] | None = None,
    events_enabled: bool = True,
) -> dict[str, Any]:
    """Build a minimal state snapshot."""
    return {
        const.DATA_DAYS: days or {},
        const.DATA_EVENT_HISTORY: event_history or {},
        const.DATA_XP: xp,
        const.DATA_XP_LEDGER: [],
        const.DATA_COUNTERS: counters or {},
        const.DATA_EVENTS_ENABLED: events_enabled,
    }

