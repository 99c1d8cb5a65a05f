"""
Percentage helpers shared by the compliance engine.

Ratios are rounded half-up to two decimals so that a value such as
``12.345`` reports as ``12.35`` regardless of binary float representation.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext


def _quantize(value: Decimal, places: int) -> Decimal:
    # quantize needs every integer digit plus the decimals to fit the precision
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + places + 2)
        return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def round_half_up(value: float, places: int = 2) -> float:
    """Round *value* to *places* decimals, ties away from zero."""
    if not math.isfinite(value):
        return value
    return float(_quantize(Decimal(str(value)), places))


def percent_of(numerator: float, denominator: float) -> float:
    """
    Return ``100 * numerator / denominator`` rounded to two decimals.

    A zero denominator yields ``0.0`` instead of raising. The quotient is
    taken in ``Decimal`` so extreme magnitudes never overflow mid-way.
    """
    if denominator == 0:
        return 0.0
    quotient = Decimal(str(numerator)) * 100 / Decimal(str(denominator))
    return float(_quantize(quotient, 2))
