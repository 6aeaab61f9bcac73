# File: coordinator.py
"""Progress coordinator for the HabitQuest engine.

Wires the engines and managers together for one state snapshot:
clock → CalendarEngine → EventEngine (select + progress) →
EventHistoryManager (record once) → LevelEngine, with ChainEngine evaluated
independently over the same snapshot.

The coordinator never notifies anyone. Callers watch `newly_completed` in the
summary returned by refresh() and trigger their own notification/haptics.
Callers must serialize refresh() calls that share one snapshot.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime
from typing import TYPE_CHECKING

from . import const
from .catalog import DEFAULT_CATALOG, DEFAULT_CHAINS
from .config import EngineConfig
from .engines.calendar_engine import CalendarEngine
from .engines.chain_engine import ChainEngine
from .engines.event_engine import EventEngine
from .engines.level_engine import LevelEngine
from .managers.event_history_manager import EventHistoryManager
from .managers.experience_manager import ExperienceManager
from .utils import dt_utils

if TYPE_CHECKING:
    from .catalog import ChainDefinition, EventCatalog, WeeklyEventDefinition
    from .type_defs import (
        AppState,
        ChainProgress,
        DashboardSummary,
        EventProgress,
        WeekRange,
    )


class ProgressCoordinator:
    """Compute dashboard progress for one state snapshot."""

    def __init__(
        self,
        state: AppState,
        catalog: EventCatalog = DEFAULT_CATALOG,
        chains: Sequence[ChainDefinition] = DEFAULT_CHAINS,
        config: EngineConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            state: Mutable state snapshot loaded by the caller's store
            catalog: Weekly event catalog
            chains: Achievement chain definitions
            config: Validated engine options (defaults if None)
            clock: Returns the current datetime (injectable for tests)
        """
        self.state = state
        self.catalog = catalog
        self.chain_definitions = chains
        self.config = config or EngineConfig()
        self._clock = clock or dt_utils.dt_now_utc

        self.experience = ExperienceManager(
            state,
            self.config.max_ledger_entries,
            clock=self._clock,
            ledger_retention_days=self.config.ledger_retention_days,
        )
        self.history = EventHistoryManager(
            state, clock=self._clock, experience=self.experience
        )

    @property
    def events_enabled(self) -> bool:
        """Return whether weekly events are enabled (state overrides config)."""
        return bool(self.state.get(const.DATA_EVENTS_ENABLED, self.config.events_enabled))

    # =========================================================================
    # WEEKLY EVENT
    # =========================================================================

    def current_week(self) -> WeekRange:
        """Return the week range for the clock's current time."""
        return CalendarEngine.get_week_range(self._clock(), self.config.tzinfo)

    def current_event(self) -> WeeklyEventDefinition:
        """Return this week's event definition."""
        return EventEngine.select_event(self.current_week()["week_key"], self.catalog)

    def event_progress(self) -> EventProgress:
        """Return this week's event progress from the activity records."""
        week = self.current_week()
        event = EventEngine.select_event(week["week_key"], self.catalog)
        return EventEngine.compute_event_progress(
            week["day_keys"], self.state.get(const.DATA_DAYS) or {}, event
        )

    # =========================================================================
    # CHAINS
    # =========================================================================

    def chains(self) -> list[ChainProgress]:
        """Return progress for every chain, in catalog order."""
        return ChainEngine.compute_chains(
            self.state, self.chain_definitions, self.config.locale
        )

    # =========================================================================
    # DASHBOARD
    # =========================================================================

    def refresh(self) -> DashboardSummary:
        """Compute the dashboard summary, recording a newly completed event.

        When events are enabled and this week's progress is complete with no
        history entry yet, the completion is recorded (awarding XP once) and
        `newly_completed` is True for this call only.
        """
        week = self.current_week()
        week_key = week["week_key"]
        event = EventEngine.select_event(week_key, self.catalog)
        progress = EventEngine.compute_event_progress(
            week["day_keys"], self.state.get(const.DATA_DAYS) or {}, event
        )

        events_enabled = self.events_enabled
        newly_completed = False
        if events_enabled and progress["completed"] and not self.history.get_entry(week_key):
            newly_completed = self.history.complete_event(
                week_key,
                {const.DATA_EVENT_REF_ID: event.event_id, const.DATA_EVENT_REF_XP: event.xp},
            )

        recorded = self.history.is_completed(week_key)
        mismatch = self.history.check_catalog_mismatch(week_key, event)

        chain_progress = self.chains()
        xp = self.experience.xp
        level = LevelEngine.resolve_level(xp)
        locale = self.config.locale

        const.LOGGER.debug(
            "DEBUG: Dashboard Refresh - Week '%s' event '%s' %s%% (recorded=%s, new=%s)",
            week_key,
            event.event_id,
            progress["percent"],
            recorded,
            newly_completed,
        )

        return {
            "week_key": week_key,
            "day_keys": week["day_keys"],
            "events_enabled": events_enabled,
            "event_id": event.event_id,
            "event_title": event.title(locale),
            "event_description": event.description(locale),
            "event_xp": event.xp,
            "bonus_percent": event.bonus_percent,
            "percent": progress["percent"],
            "completed": progress["completed"] or recorded,
            "newly_completed": newly_completed,
            "catalog_mismatch": mismatch is not None,
            "xp": xp,
            "level": level,
            "next_reward": LevelEngine.next_reward(level),
            "top_chain": ChainEngine.top_chain(chain_progress),
        }

    def award_activity_xp(self, base_xp: int, reference_id: str | None = None) -> int:
        """Deposit XP from logged activity, applying this week's event bonus.

        The bonus only applies while weekly events are enabled.

        Returns:
            The new experience total
        """
        if not self.events_enabled:
            return self.experience.deposit(base_xp, const.XP_SOURCE_ACTIVITY, reference_id)
        return self.experience.deposit_with_event_bonus(
            base_xp, self.current_event(), const.XP_SOURCE_ACTIVITY, reference_id
        )
