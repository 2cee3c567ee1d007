"""Clock and calendar helpers for logroll.

Policies read the current date through ``today()`` / ``now()`` on this module
so tests can move the clock by monkeypatching them.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional


def now() -> datetime:
    """Return the current local time."""
    return datetime.now()


def today() -> date:
    """Return the current local date."""
    return now().date()


def date_from_timestamp(timestamp: Optional[float]) -> Optional[date]:
    """Convert an ``st_mtime`` style timestamp into a local date."""
    if timestamp is None:
        return None
    try:
        return datetime.fromtimestamp(timestamp).date()
    except (OverflowError, OSError, ValueError):
        return None


def end_of_week(day: date) -> date:
    """Return the Sunday closing the ISO week that contains ``day``."""
    return day + timedelta(days=7 - day.isoweekday())


def week_key(day: date) -> tuple[int, int]:
    iso = day.isocalendar()
    return (iso[0], iso[1])


def month_key(day: date) -> tuple[int, int]:
    return (day.year, day.month)
