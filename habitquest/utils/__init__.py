# File: utils/__init__.py
"""Pure Python utilities for HabitQuest.

Functions here carry no engine state and can be unit tested in isolation.

Submodules:
    - dt_utils: Date/time parsing, timezone handling, week arithmetic
    - math_utils: Rounding, percentages, metric normalization

Usage:
    from . import dt_utils
    from .math_utils import calculate_percentage
"""

from . import dt_utils, math_utils

__all__ = ["dt_utils", "math_utils"]
