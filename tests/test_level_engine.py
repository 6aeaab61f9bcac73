"""Unit tests for LevelEngine - experience to level mapping."""

from __future__ import annotations

from typing import Any

import pytest

from habitquest import const
from habitquest.engines.level_engine import LevelEngine
from habitquest.exceptions import InvalidStateError


class TestResolveLevel:
    """Tests for resolve_level."""

    @pytest.mark.parametrize(
        ("xp", "expected"),
        [(0, 1), (99, 1), (100, 2), (209, 2), (210, 3), (329, 3), (330, 4)],
    )
    def test_threshold_boundaries(self, xp: int, expected: int) -> None:
        """Levels change exactly at their thresholds."""
        assert LevelEngine.resolve_level(xp) == expected

    def test_thresholds_strictly_increasing(self) -> None:
        """Every level needs more experience than the previous one."""
        thresholds = const.LEVEL_THRESHOLDS

        assert thresholds[0] == 0
        assert len(thresholds) == const.MAX_LEVEL
        assert all(a < b for a, b in zip(thresholds, thresholds[1:]))

    def test_monotonic_in_xp(self) -> None:
        """More experience never lowers the level."""
        levels = [LevelEngine.resolve_level(xp) for xp in range(0, 5000, 37)]

        assert levels == sorted(levels)

    def test_capped_at_max_level(self) -> None:
        """Huge totals resolve to MAX_LEVEL."""
        assert LevelEngine.resolve_level(10**9) == const.MAX_LEVEL
        assert LevelEngine.resolve_level(const.LEVEL_THRESHOLDS[-1]) == const.MAX_LEVEL

    @pytest.mark.parametrize("xp", [-1, 1.5, "100", None, True])
    def test_invalid_xp_raises(self, xp: Any) -> None:
        """Negative or non-integer experience is a state error."""
        with pytest.raises(InvalidStateError):
            LevelEngine.resolve_level(xp)


class TestLevelProgress:
    """Tests for level_progress."""

    def test_progress_within_level(self) -> None:
        """Percent is measured between the current and next threshold."""
        progress = LevelEngine.level_progress(155)

        assert progress["level"] == 2
        assert progress["current_threshold"] == 100
        assert progress["next_threshold"] == 210
        assert progress["percent"] == 50.0

    def test_progress_at_max_level(self) -> None:
        """At MAX_LEVEL there is no next threshold."""
        progress = LevelEngine.level_progress(10**9)

        assert progress["level"] == const.MAX_LEVEL
        assert progress["next_threshold"] is None
        assert progress["percent"] == 100.0


class TestNextReward:
    """Tests for next_reward."""

    def test_first_milestone(self) -> None:
        """Level 1 points at the level 10 reward."""
        reward = LevelEngine.next_reward(1)

        assert reward is not None
        assert reward["level"] == 10

    def test_reaching_milestone_moves_to_next(self) -> None:
        """A reached milestone is no longer next."""
        reward = LevelEngine.next_reward(10)

        assert reward is not None
        assert reward["level"] == 25

    def test_all_unlocked(self) -> None:
        """No reward remains at MAX_LEVEL."""
        assert LevelEngine.next_reward(const.MAX_LEVEL) is None
