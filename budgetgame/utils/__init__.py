"""Pure Python utilities for Budget Game.

Submodules:
    - dt_utils: Date/time parsing, local days, Sunday-start week windows
    - math_utils: Rounding, percentages, averages

Usage:
    from . import dt_utils
    from .math_utils import round_points
"""

from . import dt_utils, math_utils

__all__ = ["dt_utils", "math_utils"]
