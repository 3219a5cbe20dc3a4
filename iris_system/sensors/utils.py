"""
Shared sensor helpers
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional


def round_half_up(value: Optional[float], decimals: int = 2) -> Optional[float]:
    """
    Round for display the way a person would (2.345 -> 2.35)

    Goes through the shortest decimal repr of the float so binary
    representation error does not round 2.345 down.

    Args:
        value: Value to round, or None
        decimals: Number of decimal places

    Returns:
        Rounded float, or the value unchanged if it is None or not finite
    """
    if value is None or not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))
