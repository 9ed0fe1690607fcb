from __future__ import annotations

from datetime import date, datetime
from typing import Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    v = (value or "").strip()
    return parse_iso_date(v) if v else None


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def current_period(today: Optional[date] = None) -> tuple[int, int]:
    """(month, year) of ``today``; defaults to the current date."""
    today = today or now_local().date()
    return today.month, today.year
