"""Partial update support.

Every patch field is either ``UNSET`` (keep the stored value) or a value, which may be
``None`` to clear an optional column.
"""

from __future__ import annotations

from typing import Any, TypeVar, Union

T = TypeVar("T")


class Unset:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = Unset()

Maybe = Union[T, Unset]


def is_set(value: Any) -> bool:
    return value is not UNSET


def pick(value: Any, current: Any) -> Any:
    """Return ``value`` if supplied, otherwise ``current``."""
    return current if value is UNSET else value
