"""Utility helpers."""

from .identity import handle_inode, path_inode, path_mtime, path_size, path_stat
from .locking import ExclusionLock, LockUnavailableError

__all__ = [
    "ExclusionLock",
    "LockUnavailableError",
    "handle_inode",
    "path_inode",
    "path_mtime",
    "path_size",
    "path_stat",
]
