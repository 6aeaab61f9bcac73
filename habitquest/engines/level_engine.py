"""Level Engine - Pure mapping from accumulated experience to level."""

from __future__ import annotations

from bisect import bisect_right
from typing import TYPE_CHECKING, Any

from .. import const
from ..exceptions import InvalidStateError
from ..utils.math_utils import calculate_percentage

if TYPE_CHECKING:
    from ..type_defs import LevelProgress, RewardMilestone


class LevelEngine:
    """Resolve levels from const.LEVEL_THRESHOLDS.

    Level n is reached at LEVEL_THRESHOLDS[n - 1] experience; level 1 starts
    at 0 and MAX_LEVEL is the cap. Thresholds are strictly increasing, so the
    level never decreases as experience grows.
    """

    @staticmethod
    def validate_xp(xp: Any) -> int:
        """Return xp if it is a non-negative int, else raise InvalidStateError."""
        if isinstance(xp, bool) or not isinstance(xp, int):
            raise InvalidStateError(f"Experience must be an integer, got {xp!r}")
        if xp < 0:
            raise InvalidStateError(f"Experience must not be negative, got {xp}")
        return xp

    @staticmethod
    def resolve_level(xp: int) -> int:
        """Return the level for an experience total.

        Examples:
            resolve_level(0) → 1
            resolve_level(99) → 1
            resolve_level(100) → 2

        Raises:
            InvalidStateError: If xp is negative or not an integer
        """
        xp = LevelEngine.validate_xp(xp)
        return bisect_right(const.LEVEL_THRESHOLDS, xp)

    @staticmethod
    def level_progress(xp: int) -> LevelProgress:
        """Return the level plus progress toward the next level.

        At MAX_LEVEL, next_threshold is None and percent is 100.
        """
        level = LevelEngine.resolve_level(xp)
        current_threshold = const.LEVEL_THRESHOLDS[level - 1]

        if level >= const.MAX_LEVEL:
            return {
                "level": level,
                "xp": xp,
                "current_threshold": current_threshold,
                "next_threshold": None,
                "percent": 100.0,
            }

        next_threshold = const.LEVEL_THRESHOLDS[level]
        return {
            "level": level,
            "xp": xp,
            "current_threshold": current_threshold,
            "next_threshold": next_threshold,
            "percent": calculate_percentage(
                xp - current_threshold, next_threshold - current_threshold
            ),
        }

    @staticmethod
    def next_reward(level: int) -> RewardMilestone | None:
        """Return the first reward milestone above `level`, or None if all are unlocked."""
        for milestone in const.REWARD_MILESTONES:
            if level < milestone[const.DATA_REWARD_LEVEL]:
                return {
                    "level": milestone[const.DATA_REWARD_LEVEL],
                    "title": milestone[const.DATA_REWARD_TITLE],
                }
        return None
