"""Shared utility functions."""

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

CENT = Decimal("0.01")


def to_float(value: Any, default: float | None = 0.0) -> float | None:
    """Coerce a loosely typed numeric value to float.

    Accepts ints, floats, Decimals and numeric strings. Booleans, blanks,
    non-finite numbers and anything unparseable yield ``default``.

    Args:
        value: Raw value (JSON scalar, Decimal column, ...).
        default: Returned when the value cannot be interpreted as a number.

    Returns:
        The value as float, or ``default``.
    """
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, int | float | Decimal):
        result = float(value)
    elif isinstance(value, str) and value.strip():
        try:
            result = float(Decimal(value.strip()))
        except InvalidOperation:
            return default
    else:
        return default

    return result if math.isfinite(result) else default


def to_money(value: float | int | Decimal) -> Decimal:
    """Convert an amount to a Decimal rounded to cents (half-up)."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)
