from __future__ import annotations

import re
from decimal import Decimal
from typing import Optional

from ..core.exceptions import ValidationError
from .money import round_money, to_decimal

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _fail(field_name: str, message: str) -> ValidationError:
    return ValidationError(message, errors={field_name: message})


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise _fail(field_name, f"{field_name} is required")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise _fail(field_name, f"{field_name} must be at least {min_len} characters")
    return value


def require_max_length(value: Optional[str], field_name: str, max_len: int) -> Optional[str]:
    if value is not None and len(value) > max_len:
        raise _fail(field_name, f"{field_name} must be at most {max_len} characters")
    return value


def require_pattern(value: str, field_name: str, pattern: str, message: str) -> str:
    if not re.fullmatch(pattern, value):
        raise _fail(field_name, message)
    return value


def require_email(value: str, field_name: str = "email") -> str:
    value = (value or "").strip()
    if not _EMAIL_RE.match(value):
        raise _fail(field_name, "Please enter a valid email address")
    return value


def require_int_range(value, field_name: str, low: int, high: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise _fail(field_name, f"{field_name} must be a whole number")
    # int() truncates 6.9 and accepts True; neither is a whole number input.
    if isinstance(value, bool) or (not isinstance(value, str) and number != value):
        raise _fail(field_name, f"{field_name} must be a whole number")
    if number < low or number > high:
        raise _fail(field_name, f"{field_name} must be between {low} and {high}")
    return number


def require_amount(value, field_name: str, *, maximum: Optional[Decimal] = None) -> Decimal:
    """Parse a non-negative money/quantity value, rounded to cents."""
    try:
        amount = to_decimal(value)
    except ValueError:
        raise _fail(field_name, f"{field_name} must be a number")
    if amount < 0:
        raise _fail(field_name, f"{field_name} must be positive")
    if maximum is not None and amount > maximum:
        raise _fail(field_name, f"{field_name} cannot exceed {maximum:,}")
    try:
        return round_money(amount)
    except ValueError:
        raise _fail(field_name, f"{field_name} is too large")


def optional_text(value: Optional[str]) -> Optional[str]:
    """Blank strings become None (form fields submitted empty)."""
    v = (value or "").strip()
    return v or None
