from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENTS = Decimal("0.01")


def to_decimal(value) -> Decimal:
    """Convert user/driver input into Decimal.

    Floats go through ``str`` so 0.1 stays 0.1. ``None`` and "" count as zero.
    """

    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Not a number: {value!r}")
    if not result.is_finite():
        raise ValueError(f"Not a number: {value!r}")
    return result


def round_money(value: Decimal) -> Decimal:
    """Quantize to cents (HALF_UP), the scale of every money column."""
    try:
        return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Out of range: {value!r}")
