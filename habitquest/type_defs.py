"""Type definitions for HabitQuest data structures.

TypedDict is used for STATIC structures (fixed keys known at design time):
results returned by the engines and entries persisted in the state snapshot.
Activity records keep dynamic metric names, so they stay `dict[str, Any]`-like
aliases.

NOTE: TypedDict is STATIC ANALYSIS ONLY. Runtime validation of caller data
happens in config.py (voluptuous schemas) and in the engines.

IMPORTANT: This file must NOT import from engines or managers to avoid
circular dependencies.
"""

from typing import NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

WeekKey = str  # ISO week "2024-W10"
DayKey = str  # ISO date "2024-03-04"
EventId = str
ChainId = str
ISODatetime = str  # ISO 8601 datetime string "2026-01-18T12:30:00+00:00"

MetricValue = bool | int | float | None
DayRecord = dict[str, MetricValue]  # metric name -> value for one day
ActivityRecords = dict[DayKey, DayRecord]


# =============================================================================
# Calendar
# =============================================================================


class WeekRange(TypedDict):
    """Canonical week key plus its seven day keys, Monday first."""

    week_key: WeekKey
    day_keys: list[DayKey]


# =============================================================================
# Weekly Events
# =============================================================================


class EventRef(TypedDict):
    """Event reference passed to complete_event."""

    id: EventId
    xp: int


class EventProgress(TypedDict):
    """Derived progress of the active weekly event (never persisted)."""

    percent: int
    completed: bool


class EventHistoryEntry(TypedDict):
    """Persisted, immutable record of a completed week."""

    event_id: EventId
    xp_awarded: int
    completed_at: ISODatetime
    completed: bool


class ArchiveItem(TypedDict):
    """One row of the event archive view."""

    week_key: WeekKey
    event_id: EventId
    title: str
    xp_awarded: int
    completed_at: ISODatetime


# =============================================================================
# Chains
# =============================================================================


class ChainProgress(TypedDict):
    """Derived progress of one achievement chain."""

    chain_id: ChainId
    title: str
    completed: int
    total: int
    next_percent: float
    next_title: str | None


class ConditionResult(TypedDict):
    """Result of evaluating one chain step condition."""

    met: bool
    current_value: float
    target: float
    percent: float


# =============================================================================
# Experience / Levels
# =============================================================================


class LedgerEntry(TypedDict):
    """Experience ledger entry."""

    timestamp: ISODatetime
    amount: int
    balance_after: int
    source: str
    reference_id: str | None


class LevelProgress(TypedDict):
    """Level plus progress toward the next level threshold."""

    level: int
    xp: int
    current_threshold: int
    next_threshold: int | None
    percent: float


class RewardMilestone(TypedDict):
    """Level-gated reward."""

    level: int
    title: str


# =============================================================================
# State Snapshot
# =============================================================================


class AppState(TypedDict):
    """Snapshot of application state consumed (and mutated) by the engine."""

    days: ActivityRecords
    event_history: dict[WeekKey, EventHistoryEntry]
    xp: int
    xp_ledger: NotRequired[list[LedgerEntry]]
    counters: NotRequired[dict[str, int]]
    events_enabled: NotRequired[bool]


# =============================================================================
# Dashboard
# =============================================================================


class DashboardSummary(TypedDict):
    """Everything the home screen reads from one refresh."""

    week_key: WeekKey
    day_keys: list[DayKey]
    events_enabled: bool
    event_id: EventId
    event_title: str
    event_description: str
    event_xp: int
    bonus_percent: float
    percent: int
    completed: bool
    newly_completed: bool
    catalog_mismatch: bool
    xp: int
    level: int
    next_reward: RewardMilestone | None
    top_chain: ChainProgress | None
