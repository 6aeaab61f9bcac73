"""Event History Manager - Records weekly event completions once per week.

The ledger lives in state["event_history"], keyed by week key. The first
writer for a week wins: the entry is inserted with a single dict.setdefault
check-and-set, and experience is deposited only by the call whose entry was
inserted. Re-completion with a different id or xp (e.g. after a catalog
change) is a no-op.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any

from .. import const
from ..config import validate_event_ref
from ..engines.calendar_engine import CalendarEngine
from ..exceptions import CatalogMismatch, InvalidStateError
from ..utils import dt_utils
from .experience_manager import ExperienceManager

if TYPE_CHECKING:
    from ..catalog import EventCatalog, WeeklyEventDefinition
    from ..type_defs import AppState, ArchiveItem, EventHistoryEntry, WeekKey


class EventHistoryManager:
    """Manage the per-week event completion ledger for one state snapshot."""

    def __init__(
        self,
        state: AppState,
        clock: Callable[[], datetime] | None = None,
        experience: ExperienceManager | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            state: Mutable state snapshot (previously loaded by the caller)
            clock: Returns the current UTC datetime (injectable for tests)
            experience: ExperienceManager used for awarding; one is created
                        for `state` if not given
        """
        self._state = state
        self._clock = clock or dt_utils.dt_now_utc
        self._experience = experience or ExperienceManager(state, clock=self._clock)

    @property
    def history(self) -> dict[WeekKey, EventHistoryEntry]:
        """Return the event history mapping, creating it if missing or null.

        Raises:
            InvalidStateError: If the stored history is not a mapping
        """
        self._check_history()
        if self._state.get(const.DATA_EVENT_HISTORY) is None:
            self._state[const.DATA_EVENT_HISTORY] = {}
        return self._state[const.DATA_EVENT_HISTORY]

    def _check_history(self) -> None:
        history: Any = self._state.get(const.DATA_EVENT_HISTORY)
        if history is not None and not isinstance(history, dict):
            raise InvalidStateError(
                f"Event history must be a mapping, got {type(history).__name__}"
            )

    def _read_history(self) -> dict[WeekKey, EventHistoryEntry]:
        self._check_history()
        return self._state.get(const.DATA_EVENT_HISTORY) or {}

    # =========================================================================
    # COMPLETION
    # =========================================================================

    def complete_event(self, week_key: WeekKey, event_ref: dict[str, Any]) -> bool:
        """Record that the week's event was completed and award its experience.

        Idempotent per week key: if an entry exists, nothing is appended and
        no experience is awarded, even if `event_ref` differs from the
        original call.

        Args:
            week_key: Week identifier ("2024-W10")
            event_ref: {"id": event id, "xp": experience to award}

        Returns:
            True if this call recorded the entry, False if one already existed

        Raises:
            InvalidInputError: If week_key or event_ref is malformed
            InvalidStateError: If the stored history, total or ledger is invalid
        """
        # Validate everything before mutating so the call is all-or-nothing
        CalendarEngine.parse_week_key(week_key)
        ref = validate_event_ref(event_ref)
        self._check_history()
        self._experience.check_state()

        entry: EventHistoryEntry = {
            const.DATA_HISTORY_EVENT_ID: ref[const.DATA_EVENT_REF_ID],
            const.DATA_HISTORY_XP_AWARDED: ref[const.DATA_EVENT_REF_XP],
            const.DATA_HISTORY_COMPLETED_AT: self._clock().isoformat(),
            const.DATA_HISTORY_COMPLETED: True,
        }  # type: ignore[misc]

        stored = self.history.setdefault(week_key, entry)
        if stored is not entry:
            const.LOGGER.debug(
                "DEBUG: Event Completion - Week '%s' already recorded (event '%s'), "
                "ignoring '%s'",
                week_key,
                stored.get(const.DATA_HISTORY_EVENT_ID),
                ref[const.DATA_EVENT_REF_ID],
            )
            return False

        self._experience.deposit(
            entry[const.DATA_HISTORY_XP_AWARDED],
            const.XP_SOURCE_WEEKLY_EVENT,
            reference_id=week_key,
        )
        const.LOGGER.info(
            "Weekly event '%s' completed for week %s (+%s XP)",
            entry[const.DATA_HISTORY_EVENT_ID],
            week_key,
            entry[const.DATA_HISTORY_XP_AWARDED],
        )
        return True

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get_entry(self, week_key: WeekKey) -> EventHistoryEntry | None:
        """Return the history entry for a week, or None."""
        return self._read_history().get(week_key)

    def is_completed(self, week_key: WeekKey) -> bool:
        """Return True if the week has a completed history entry."""
        entry = self.get_entry(week_key)
        return bool(entry and entry.get(const.DATA_HISTORY_COMPLETED, True))

    def check_catalog_mismatch(
        self, week_key: WeekKey, selected_event: WeeklyEventDefinition
    ) -> CatalogMismatch | None:
        """Report whether a recorded week differs from the currently selected event.

        The stored entry always wins; this only reports the difference.

        Returns:
            CatalogMismatch if the recorded id differs, else None
        """
        entry = self.get_entry(week_key)
        if entry is None:
            return None

        recorded_id = entry.get(const.DATA_HISTORY_EVENT_ID, "")
        if recorded_id == selected_event.event_id:
            return None

        mismatch = CatalogMismatch(week_key, recorded_id, selected_event.event_id)
        const.LOGGER.info("%s (stored entry kept)", mismatch)
        return mismatch

    def list_history(
        self, catalog: EventCatalog, locale: str | None = None
    ) -> list[ArchiveItem]:
        """Return the event archive, newest week first.

        Titles come from the catalog; entries whose event id the catalog no
        longer knows fall back to the stored id and xp.
        """
        items: list[ArchiveItem] = []
        history = self._read_history()

        for week_key in sorted(history, reverse=True):
            entry = history[week_key]
            event_id = entry.get(const.DATA_HISTORY_EVENT_ID, "")
            event = catalog.get(event_id)
            if event is None:
                const.LOGGER.warning(
                    "Event history for week %s references unknown event '%s'",
                    week_key,
                    event_id,
                )
                title = event_id
            else:
                title = event.title(locale)

            items.append(
                {
                    "week_key": week_key,
                    "event_id": event_id,
                    "title": title,
                    "xp_awarded": entry.get(const.DATA_HISTORY_XP_AWARDED, 0),
                    "completed_at": entry.get(const.DATA_HISTORY_COMPLETED_AT, ""),
                }
            )
        return items

    def total_event_xp(self) -> int:
        """Return the experience awarded by all recorded weekly events."""
        history = self._read_history()
        return sum(
            entry.get(const.DATA_HISTORY_XP_AWARDED, 0) for entry in history.values()
        )
