"""Calendar-boundary rotation: daily, weekly or monthly archives."""

from __future__ import annotations

from datetime import date
from typing import Tuple

from logroll.policies.base import RotationPolicy
from logroll.utils import time as clock
from logroll.utils.identity import path_mtime

ROLL_PERIODS = ("daily", "weekly", "monthly")


class DateRollingPolicy(RotationPolicy):
    """
    Roll the file when the calendar period it belongs to has ended.

    The file's period starts out as the date of its modification time, so a
    process started after a boundary (cron jobs, CLI tools) still notices
    that the previous period is over. Archive names come from the period
    that is ending:

    * daily   -> ``<path>.YYYY-MM-DD``
    * weekly  -> ``<path>.week-of-YYYY-MM-DD`` (the Sunday ending the week)
    * monthly -> ``<path>.YYYY-MM``
    """

    def __init__(self, path: str, roll: str = "daily") -> None:
        super().__init__(path)
        period = (roll or "").strip().lower()
        if period not in ROLL_PERIODS:
            raise ValueError(f"Invalid roll period {roll!r}. Must be one of: {list(ROLL_PERIODS)}")
        self.roll = period
        self._file_date: date = clock.date_from_timestamp(path_mtime(self.path)) or clock.today()

    @property
    def file_date(self) -> date:
        """Date of the period the current file belongs to."""
        mtime_date = clock.date_from_timestamp(path_mtime(self.path))
        if mtime_date is not None and mtime_date > self._file_date:
            # A newer generation (e.g. rolled by another process) is in place.
            return mtime_date
        return self._file_date

    def should_roll(self) -> bool:
        return self._period(clock.today()) > self._period(self.file_date)

    def archive_file_name(self) -> str:
        return f"{self.path}.{self._suffix(self.file_date)}"

    def after_roll(self) -> None:
        self._file_date = clock.today()

    def _period(self, day: date) -> Tuple[int, ...]:
        if self.roll == "weekly":
            return clock.week_key(day)
        if self.roll == "monthly":
            return clock.month_key(day)
        return (day.year, day.month, day.day)

    def _suffix(self, day: date) -> str:
        if self.roll == "weekly":
            return clock.end_of_week(day).strftime("week-of-%Y-%m-%d")
        if self.roll == "monthly":
            return day.strftime("%Y-%m")
        return day.strftime("%Y-%m-%d")

    def __repr__(self) -> str:
        return f"DateRollingPolicy(path={self.path!r}, roll={self.roll!r})"


def daily(path: str) -> DateRollingPolicy:
    return DateRollingPolicy(path, "daily")


def weekly(path: str) -> DateRollingPolicy:
    return DateRollingPolicy(path, "weekly")


def monthly(path: str) -> DateRollingPolicy:
    return DateRollingPolicy(path, "monthly")
