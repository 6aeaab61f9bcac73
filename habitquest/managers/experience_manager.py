"""Experience Manager - Applies experience deposits to the state snapshot.

The manager owns the only write path for state["xp"] and state["xp_ledger"].
Validation happens before any mutation, so a deposit either fully applies
(xp incremented, ledger entry appended, ledger pruned) or raises without
touching state.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any

from .. import const
from ..engines.economy_engine import EconomyEngine
from ..engines.event_engine import EventEngine
from ..engines.level_engine import LevelEngine
from ..exceptions import InvalidInputError, InvalidStateError
from ..utils import dt_utils

if TYPE_CHECKING:
    from ..catalog import WeeklyEventDefinition
    from ..type_defs import AppState, LedgerEntry


class ExperienceManager:
    """Manage the experience total and its ledger for one state snapshot."""

    def __init__(
        self,
        state: AppState,
        max_ledger_entries: int = const.DEFAULT_MAX_LEDGER_ENTRIES,
        clock: Callable[[], datetime] | None = None,
        ledger_retention_days: int = const.DEFAULT_LEDGER_RETENTION_DAYS,
    ) -> None:
        """Initialize the manager.

        Args:
            state: Mutable state snapshot (previously loaded by the caller)
            max_ledger_entries: Ledger entries kept after each deposit
            clock: Returns the current UTC datetime (injectable for tests)
            ledger_retention_days: Drop ledger entries older than this many
                                   days on each deposit (0 keeps all ages)
        """
        self._state = state
        self._max_ledger_entries = max_ledger_entries
        self._clock = clock or dt_utils.dt_now_utc
        self._ledger_retention_days = ledger_retention_days

    @property
    def xp(self) -> int:
        """Return the current experience total.

        Raises:
            InvalidStateError: If the stored total is negative or not an integer
        """
        return LevelEngine.validate_xp(self._state.get(const.DATA_XP, const.DEFAULT_ZERO))

    def check_state(self) -> int:
        """Validate the stored total and ledger without mutating them.

        A missing or null ledger is fine (it is created on the first deposit).

        Returns:
            The current experience total

        Raises:
            InvalidStateError: If the total or the ledger is malformed
        """
        ledger: Any = self._state.get(const.DATA_XP_LEDGER)
        if ledger is not None and not isinstance(ledger, list):
            raise InvalidStateError(
                f"Experience ledger must be a list, got {type(ledger).__name__}"
            )
        return self.xp

    def _ensure_ledger(self) -> list[LedgerEntry]:
        """Return the ledger list, creating it if missing or null."""
        if self._state.get(const.DATA_XP_LEDGER) is None:
            self._state[const.DATA_XP_LEDGER] = []
        return self._state[const.DATA_XP_LEDGER]

    def deposit(self, amount: int, source: str, reference_id: str | None = None) -> int:
        """Add experience and record a ledger entry.

        Args:
            amount: Experience to add (integer >= 0)
            source: Transaction source (XP_SOURCE_* constant)
            reference_id: Optional related entity id (week key, event id)

        Returns:
            The new experience total

        Raises:
            InvalidInputError: If amount is negative or not an integer
            InvalidStateError: If the stored total or ledger is invalid
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            raise InvalidInputError(f"Experience amount must be an integer >= 0: {amount!r}")

        current = self.check_state()
        now_utc = self._clock()
        entry = EconomyEngine.create_ledger_entry(
            current, amount, source, reference_id, now_utc=now_utc
        )
        new_balance = entry[const.DATA_LEDGER_BALANCE_AFTER]

        self._state[const.DATA_XP] = new_balance
        ledger = self._ensure_ledger()
        ledger.append(entry)
        EconomyEngine.prune_ledger(
            ledger,
            max_entries=self._max_ledger_entries,
            max_age_days=self._ledger_retention_days,
            now_utc=now_utc,
        )

        const.LOGGER.debug(
            "DEBUG: Experience Deposit - +%s XP from '%s' (ref=%s), total %s",
            amount,
            source,
            reference_id,
            new_balance,
        )
        return new_balance

    def deposit_with_event_bonus(
        self,
        base_xp: int,
        event: WeeklyEventDefinition,
        source: str = const.XP_SOURCE_ACTIVITY,
        reference_id: str | None = None,
    ) -> int:
        """Deposit XP earned during an event's week with the event bonus applied.

        Returns:
            The new experience total
        """
        if isinstance(base_xp, bool) or not isinstance(base_xp, int) or base_xp < 0:
            raise InvalidInputError(f"Experience amount must be an integer >= 0: {base_xp!r}")
        return self.deposit(EventEngine.apply_bonus(base_xp, event), source, reference_id)
