# File: utils/math_utils.py
"""Math and calculation utilities for HabitQuest.

Functions:
    - round_points: Consistent rounding to configured precision
    - calculate_percentage: Progress percentage calculations
    - clamp: Bound a value to a range
    - metric_as_number: Normalize a per-day metric value to a number
"""

from __future__ import annotations

# ==============================================================================
# Constants (local copies to avoid circular imports)
# ==============================================================================

# Default float precision for rounding
DATA_FLOAT_PRECISION = 2


def round_points(value: float, precision: int = DATA_FLOAT_PRECISION) -> float:
    """Round a value to the configured precision.

    Prevents Python float arithmetic drift (e.g., 27.499999999999996 → 27.5).

    Examples:
        round_points(10.456) → 10.46
        round_points(10.0) → 10.0
    """
    return round(value, precision)


def calculate_percentage(
    current: float,
    target: float,
    precision: int = DATA_FLOAT_PRECISION,
) -> float:
    """Calculate progress percentage, capped to 0-100, with proper rounding.

    Args:
        current: Current progress value
        target: Target value
        precision: Number of decimal places for rounding

    Returns:
        Percentage (0-100). A target of 0 or less counts as reached (100.0).

    Examples:
        calculate_percentage(50, 100) → 50.0
        calculate_percentage(1, 3) → 33.33
        calculate_percentage(5, 3) → 100.0
        calculate_percentage(0, 0) → 100.0
    """
    if target <= 0:
        return 100.0
    return round_points(clamp((current / target) * 100, 0.0, 100.0), precision)


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between minimum and maximum bounds.

    Examples:
        clamp(150, 0, 100) → 100
        clamp(-10, 0, 100) → 0
    """
    return max(min_val, min(value, max_val))


def metric_as_number(value: bool | float | None) -> float:
    """Normalize a per-day metric value to a number.

    Booleans count as 1/0, missing values as 0.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    return float(value)
