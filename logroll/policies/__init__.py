"""Rotation policies."""

from .base import RotationPolicy
from .date_rolling import ROLL_PERIODS, DateRollingPolicy, daily, monthly, weekly
from .size_rolling import SizeRollingPolicy, parse_size

__all__ = [
    "ROLL_PERIODS",
    "DateRollingPolicy",
    "RotationPolicy",
    "SizeRollingPolicy",
    "daily",
    "monthly",
    "parse_size",
    "weekly",
]
