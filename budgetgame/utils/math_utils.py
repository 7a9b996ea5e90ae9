# File: utils/math_utils.py
"""Math and calculation utilities for Budget Game.

Functions:
    - round_points: Consistent rounding to configured precision
    - calculate_percentage: Progress percentage calculations (clamped 0-100)
    - clamp: Bound a value to a range
    - safe_average: Mean of a sequence with empty protection
"""

from __future__ import annotations

from collections.abc import Sequence
import logging

# Module-level logger
_LOGGER = logging.getLogger(__name__)

# Default float precision for rounding
DATA_FLOAT_PRECISION = 2


def round_points(value: float, precision: int = DATA_FLOAT_PRECISION) -> float:
    """Round a point or money value to the configured precision.

    Examples:
        round_points(10.456) → 10.46
        round_points(10.0) → 10.0
    """
    return round(value, precision)


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between minimum and maximum bounds.

    Examples:
        clamp(150, 0, 100) → 100
        clamp(-10, 0, 100) → 0
    """
    return max(min_val, min(value, max_val))


def calculate_percentage(
    current: float,
    target: float,
    precision: int = DATA_FLOAT_PRECISION,
) -> float:
    """Calculate progress percentage, clamped to 0-100.

    A non-positive target counts as met once there is any progress at all.

    Examples:
        calculate_percentage(50, 100) → 50.0
        calculate_percentage(1, 3) → 33.33
        calculate_percentage(150, 100) → 100.0
        calculate_percentage(5, 0) → 100.0
        calculate_percentage(0, 0) → 0.0
    """
    if target <= 0:
        return 100.0 if current > 0 else 0.0
    return round_points(clamp((current / target) * 100, 0.0, 100.0), precision)


def safe_average(values: Sequence[float], precision: int = 1) -> float:
    """Mean of ``values`` rounded to ``precision``; 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return round(sum(values) / len(values), precision)
