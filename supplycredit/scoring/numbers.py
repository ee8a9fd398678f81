"""Numeric helpers shared by the scorers."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

__all__ = ["half_up"]


def half_up(value: float | Decimal, places: int = 0) -> Decimal:
    """Round *value* with halves away from zero instead of banker's rounding."""

    exponent = Decimal(1).scaleb(-places)
    return Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)
