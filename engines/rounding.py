"""Half-up rounding shared by the chart builders.

Rounding works on the exact binary value of the float, so ``0.35`` (stored as
0.34999...) rounds to ``0.3`` the way a browser's ``toFixed(1)`` does.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, localcontext

# enough digits for any finite float quantized to tenths
_PRECISION = 400


def _quantize(value: float, exponent: Decimal) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""

    return int(_quantize(value, Decimal("1")))


def round_tenths(value: float) -> float:
    """Round to one decimal place, halves away from zero."""

    return float(_quantize(value, Decimal("0.1")))


__all__ = ["round_half_up", "round_tenths"]
