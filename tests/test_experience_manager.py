"""Tests for ExperienceManager - the write path for experience."""

from __future__ import annotations

import copy
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

import pytest

from habitquest import const
from habitquest.exceptions import InvalidInputError, InvalidStateError
from habitquest.managers.experience_manager import ExperienceManager
from tests.helpers import FIXED_NOW, make_event, make_state


class TestDeposit:
    """Tests for deposit."""

    def test_deposit_updates_xp_and_ledger(
        self, state: dict[str, Any], fixed_clock: Callable[[], datetime]
    ) -> None:
        """A deposit increments xp and appends one ledger entry."""
        manager = ExperienceManager(state, clock=fixed_clock)

        total = manager.deposit(40, const.XP_SOURCE_MANUAL, "bonus")

        assert total == 40
        assert state[const.DATA_XP] == 40
        assert len(state[const.DATA_XP_LEDGER]) == 1
        entry = state[const.DATA_XP_LEDGER][0]
        assert entry[const.DATA_LEDGER_BALANCE_AFTER] == 40
        assert entry[const.DATA_LEDGER_TIMESTAMP] == FIXED_NOW.isoformat()

    def test_ledger_pruned_to_limit(self, fixed_clock: Callable[[], datetime]) -> None:
        """The ledger never exceeds max_ledger_entries."""
        state = make_state()
        manager = ExperienceManager(state, max_ledger_entries=3, clock=fixed_clock)

        for _ in range(5):
            manager.deposit(10, const.XP_SOURCE_ACTIVITY)

        assert state[const.DATA_XP] == 50
        assert len(state[const.DATA_XP_LEDGER]) == 3
        assert state[const.DATA_XP_LEDGER][-1][const.DATA_LEDGER_BALANCE_AFTER] == 50

    def test_missing_ledger_created(self, fixed_clock: Callable[[], datetime]) -> None:
        """A state without xp or ledger keys starts at zero."""
        state: dict[str, Any] = {}

        ExperienceManager(state, clock=fixed_clock).deposit(5, const.XP_SOURCE_ACTIVITY)

        assert state[const.DATA_XP] == 5
        assert len(state[const.DATA_XP_LEDGER]) == 1

    @pytest.mark.parametrize("amount", [-1, 2.5, True, "10"])
    def test_invalid_amount_leaves_state_untouched(
        self, amount: Any, fixed_clock: Callable[[], datetime]
    ) -> None:
        """Invalid amounts raise before any mutation."""
        state = make_state(xp=20)
        before = copy.deepcopy(state)

        with pytest.raises(InvalidInputError):
            ExperienceManager(state, clock=fixed_clock).deposit(amount, const.XP_SOURCE_MANUAL)

        assert state == before

    def test_negative_stored_xp_raises(self, fixed_clock: Callable[[], datetime]) -> None:
        """A corrupt stored total is reported, not silently fixed."""
        state = make_state(xp=-10)

        with pytest.raises(InvalidStateError):
            ExperienceManager(state, clock=fixed_clock).deposit(5, const.XP_SOURCE_MANUAL)

        assert state[const.DATA_XP] == -10
        assert state[const.DATA_XP_LEDGER] == []

    @pytest.mark.parametrize("stored_xp", [-1, 2.5, True, "10", None])
    def test_invalid_stored_xp_rejected(
        self, stored_xp: Any, fixed_clock: Callable[[], datetime]
    ) -> None:
        """The stored total follows the same rule as level resolution."""
        state = make_state()
        state[const.DATA_XP] = stored_xp

        with pytest.raises(InvalidStateError):
            _ = ExperienceManager(state, clock=fixed_clock).xp

    def test_null_ledger_treated_as_empty(self, fixed_clock: Callable[[], datetime]) -> None:
        """A ledger persisted as null is recreated on deposit."""
        state = make_state(xp=10)
        state[const.DATA_XP_LEDGER] = None

        ExperienceManager(state, clock=fixed_clock).deposit(5, const.XP_SOURCE_ACTIVITY)

        assert state[const.DATA_XP] == 15
        assert len(state[const.DATA_XP_LEDGER]) == 1

    def test_malformed_ledger_leaves_state_untouched(
        self, fixed_clock: Callable[[], datetime]
    ) -> None:
        """A ledger that is not a list raises before xp changes."""
        state = make_state(xp=10)
        state[const.DATA_XP_LEDGER] = {"not": "a list"}

        with pytest.raises(InvalidStateError):
            ExperienceManager(state, clock=fixed_clock).deposit(5, const.XP_SOURCE_ACTIVITY)

        assert state[const.DATA_XP] == 10
        assert state[const.DATA_XP_LEDGER] == {"not": "a list"}


class TestLedgerRetention:
    """Tests for age-based ledger retention."""

    def _old_entry(self) -> dict[str, Any]:
        return {
            const.DATA_LEDGER_TIMESTAMP: (FIXED_NOW - timedelta(days=40)).isoformat(),
            const.DATA_LEDGER_AMOUNT: 10,
            const.DATA_LEDGER_BALANCE_AFTER: 10,
            const.DATA_LEDGER_SOURCE: const.XP_SOURCE_MANUAL,
            const.DATA_LEDGER_REFERENCE_ID: "old",
        }

    def test_entries_past_retention_dropped(
        self, fixed_clock: Callable[[], datetime]
    ) -> None:
        """Entries older than ledger_retention_days go on the next deposit."""
        state = make_state(xp=10)
        state[const.DATA_XP_LEDGER] = [self._old_entry()]
        manager = ExperienceManager(state, clock=fixed_clock, ledger_retention_days=30)

        manager.deposit(5, const.XP_SOURCE_ACTIVITY, "new")

        refs = [e[const.DATA_LEDGER_REFERENCE_ID] for e in state[const.DATA_XP_LEDGER]]
        assert refs == ["new"]
        assert state[const.DATA_XP] == 15

    def test_zero_retention_keeps_all_ages(
        self, fixed_clock: Callable[[], datetime]
    ) -> None:
        """The default keeps old entries (count limit only)."""
        state = make_state(xp=10)
        state[const.DATA_XP_LEDGER] = [self._old_entry()]

        ExperienceManager(state, clock=fixed_clock).deposit(5, const.XP_SOURCE_ACTIVITY)

        assert len(state[const.DATA_XP_LEDGER]) == 2


class TestDepositWithEventBonus:
    """Tests for deposit_with_event_bonus."""

    def test_bonus_applied(
        self, state: dict[str, Any], fixed_clock: Callable[[], datetime]
    ) -> None:
        """A 10% bonus turns 100 into 110."""
        manager = ExperienceManager(state, clock=fixed_clock)

        total = manager.deposit_with_event_bonus(100, make_event(bonus_percent=0.1))

        assert total == 110
        assert state[const.DATA_XP_LEDGER][0][const.DATA_LEDGER_SOURCE] == (
            const.XP_SOURCE_ACTIVITY
        )

    def test_negative_base_rejected(
        self, state: dict[str, Any], fixed_clock: Callable[[], datetime]
    ) -> None:
        """Negative base experience is rejected."""
        with pytest.raises(InvalidInputError):
            ExperienceManager(state, clock=fixed_clock).deposit_with_event_bonus(
                -5, make_event()
            )
