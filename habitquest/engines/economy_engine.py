"""Economy Engine - Pure logic for experience transactions and ledger management.

This engine provides stateless, pure Python functions for:
- Experience balance arithmetic
- Ledger entry creation and pruning

ARCHITECTURE: All functions are static methods that operate on passed-in data.
State management belongs in ExperienceManager.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from .. import const
from ..utils import dt_utils

if TYPE_CHECKING:
    from ..type_defs import LedgerEntry


class EconomyEngine:
    """Pure logic engine for experience calculations and ledger operations.

    Transaction Sources (for ledger entries):
        - XP_SOURCE_WEEKLY_EVENT: Weekly event completion
        - XP_SOURCE_ACTIVITY: XP earned from logging activity
        - XP_SOURCE_MANUAL: Manual adjustment

    Reference IDs provide additional context (week key, event id, etc.).
    """

    DEFAULT_MAX_LEDGER_ENTRIES: int = const.DEFAULT_MAX_LEDGER_ENTRIES

    @staticmethod
    def calculate_new_balance(current_balance: int, delta: int) -> int:
        """Calculate the experience total after applying `delta`."""
        return current_balance + delta

    @staticmethod
    def create_ledger_entry(
        current_balance: int,
        delta: int,
        source: str,
        reference_id: str | None = None,
        now_utc: datetime | None = None,
    ) -> LedgerEntry:
        """Create an immutable ledger entry for a transaction.

        Args:
            current_balance: Experience BEFORE the transaction
            delta: Amount added
            source: Transaction source (XP_SOURCE_* constant)
            reference_id: Optional ID of the related entity (week key, event id)
            now_utc: Optional timestamp override for deterministic tests

        Returns:
            LedgerEntry TypedDict with transaction details
        """
        timestamp = (now_utc or dt_utils.dt_now_utc()).isoformat()
        return {
            const.DATA_LEDGER_TIMESTAMP: timestamp,
            const.DATA_LEDGER_AMOUNT: delta,
            const.DATA_LEDGER_BALANCE_AFTER: EconomyEngine.calculate_new_balance(
                current_balance, delta
            ),
            const.DATA_LEDGER_SOURCE: source,
            const.DATA_LEDGER_REFERENCE_ID: reference_id,
        }  # type: ignore[misc]

    @staticmethod
    def prune_ledger(
        ledger: list[LedgerEntry],
        max_entries: int = DEFAULT_MAX_LEDGER_ENTRIES,
        max_age_days: int | None = None,
        now_utc: datetime | None = None,
    ) -> list[LedgerEntry]:
        """Trim ledger to maximum entries, keeping most recent.

        Modifies the list in place and returns it for convenience.
        Newest entries are at the END of the list (append order).

        Args:
            ledger: List of ledger entries to prune
            max_entries: Maximum entries to keep
            max_age_days: Optional age-based retention window in days
            now_utc: Optional current time override for deterministic tests

        Returns:
            The pruned ledger list (same object, modified in place)
        """
        if max_age_days is not None and max_age_days > 0:
            current_time = now_utc or dt_utils.dt_now_utc()
            cutoff = current_time - timedelta(days=max_age_days)

            retained_entries: list[LedgerEntry] = []
            for entry in ledger:
                parsed = dt_utils.dt_parse(entry.get(const.DATA_LEDGER_TIMESTAMP))
                # Entries with unreadable timestamps are kept
                if parsed is None or dt_utils.as_utc(parsed) >= cutoff:
                    retained_entries.append(entry)

            if len(retained_entries) != len(ledger):
                ledger[:] = retained_entries

        if len(ledger) > max_entries:
            # Remove oldest entries (beginning of list)
            del ledger[: len(ledger) - max_entries]
        return ledger
