"""Rounding helpers for hours and money."""

from decimal import Decimal, ROUND_HALF_UP


def round_half_up(value: float, places: int = 2) -> float:
    """Round half away from zero, unlike the built-in banker's rounding."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
