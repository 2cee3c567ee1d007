"""Inode identity helpers.

Every helper here is best-effort: a failed syscall yields ``None`` and the
caller branches on that instead of handling an exception.
"""

from __future__ import annotations

import os
from typing import IO, Any, Optional


def path_stat(path: str) -> Optional[os.stat_result]:
    """Stat ``path`` (following symlinks) or return ``None`` if it is gone."""
    try:
        return os.stat(path)
    except OSError:
        return None


def path_inode(path: str) -> Optional[int]:
    """Return the inode ``path`` currently resolves to."""
    stat = path_stat(path)
    if stat is None:
        return None
    return stat.st_ino


def path_mtime(path: str) -> Optional[float]:
    stat = path_stat(path)
    if stat is None:
        return None
    return stat.st_mtime


def path_size(path: str) -> Optional[int]:
    stat = path_stat(path)
    if stat is None:
        return None
    return stat.st_size


def handle_stat(stream: IO[Any]) -> Optional[os.stat_result]:
    """Stat an open handle; closed or invalid handles yield ``None``."""
    try:
        return os.fstat(stream.fileno())
    except (OSError, ValueError):
        return None


def handle_inode(stream: IO[Any]) -> Optional[int]:
    """Return the inode of the file ``stream`` was opened against."""
    stat = handle_stat(stream)
    if stat is None:
        return None
    return stat.st_ino
