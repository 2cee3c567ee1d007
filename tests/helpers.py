"""Shared test helpers (importable from spawned worker processes too)."""

from __future__ import annotations

import os
from datetime import date, datetime
from pathlib import Path
from typing import List

from logroll.engine import RollingFileEngine
from logroll.policies.base import RotationPolicy
from logroll.policies.date_rolling import DateRollingPolicy
from logroll.writer import LogWriter


def set_mtime(path: Path, day: date) -> None:
    """Backdate ``path`` to noon on ``day``."""
    stamp = datetime(day.year, day.month, day.day, 12, 0, 0).timestamp()
    os.utime(path, (stamp, stamp))


def read_lines(*paths: Path) -> List[str]:
    lines: List[str] = []
    for path in paths:
        if path.exists():
            lines.extend(path.read_text(encoding="utf-8").splitlines())
    return lines


class StubPolicy(RotationPolicy):
    """Policy with a fixed answer that records how the engine used it."""

    def __init__(self, path, roll=True, archive_suffix="old"):
        super().__init__(str(path))
        self.roll = roll
        self.archive_suffix = archive_suffix
        self.should_roll_calls = 0
        self.after_roll_calls = 0

    def should_roll(self) -> bool:
        self.should_roll_calls += 1
        return self.roll

    def archive_file_name(self) -> str:
        return f"{self.path}.{self.archive_suffix}"

    def after_roll(self) -> None:
        self.after_roll_calls += 1
        self.roll = False


def daily_writer_process(path: str, label: str, count: int, barrier) -> None:
    """Worker: wait for the others, then append ``count`` labelled lines."""
    engine = RollingFileEngine(path, DateRollingPolicy(path, "daily"))
    writer = LogWriter(engine, buffer_size=0)
    barrier.wait()
    for index in range(count):
        writer.write(f"{label}-{index}")
    writer.close()


def try_lock_from_child(path: str, queue) -> None:
    """Worker: report whether an exclusive lock on ``path`` is free right now."""
    import portalocker

    with open(path, "a", encoding="utf-8") as stream:
        try:
            portalocker.lock(stream, portalocker.LOCK_EX | portalocker.LOCK_NB)
        except portalocker.LockException:
            queue.put("locked")
        else:
            portalocker.unlock(stream)
            queue.put("free")
