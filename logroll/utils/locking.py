"""Advisory exclusive locking scoped to an open file handle."""

from __future__ import annotations

import logging
import threading
from typing import IO, Any, Dict, List, Optional, Tuple

import portalocker

from logroll.utils.identity import handle_stat

lock_logger = logging.getLogger(__name__)

# flock/lockf do not exclude threads that share one open file description
# (lockf does not even exclude separate descriptions in one process), so
# threads are serialized per physical file before the OS lock is taken.
_registry_guard = threading.Lock()
_thread_locks: Dict[Tuple[int, int], List[Any]] = {}


class LockUnavailableError(RuntimeError):
    """Raised when the handle to lock is closed or otherwise invalid."""


def _checkout_thread_lock(key: Tuple[int, int]) -> threading.Lock:
    with _registry_guard:
        entry = _thread_locks.get(key)
        if entry is None:
            entry = [threading.Lock(), 0]
            _thread_locks[key] = entry
        entry[1] += 1
        return entry[0]


def _return_thread_lock(key: Tuple[int, int]) -> None:
    with _registry_guard:
        entry = _thread_locks.get(key)
        if entry is None:
            return
        entry[1] -= 1
        if entry[1] <= 0:
            del _thread_locks[key]


class ExclusionLock:
    """
    Cross-process mutual exclusion on one open file handle.

    The lock is advisory: only participants that lock the same physical
    file through this class (or another flock user) are excluded. It blocks
    without a timeout; a closed or invalid handle fails fast with
    ``LockUnavailableError``.

    Usage::

        with ExclusionLock(stream):
            ...  # critical section
    """

    def __init__(self, stream: IO[Any]) -> None:
        self.stream = stream
        self._key: Optional[Tuple[int, int]] = None
        self._thread_lock: Optional[threading.Lock] = None
        self._held = False

    @property
    def held(self) -> bool:
        return self._held

    def acquire(self) -> None:
        """Block until the lock is held; raise ``LockUnavailableError`` on a dead handle."""
        if self._held:
            return
        stat = handle_stat(self.stream)
        if stat is None:
            raise LockUnavailableError("cannot lock a closed or invalid file handle")

        self._key = (stat.st_dev, stat.st_ino)
        self._thread_lock = _checkout_thread_lock(self._key)
        self._thread_lock.acquire()
        try:
            portalocker.lock(self.stream, portalocker.LOCK_EX)
        except (portalocker.LockException, OSError, ValueError) as exc:
            self._drop_thread_lock()
            raise LockUnavailableError(f"could not lock file handle: {exc}") from exc
        self._held = True

    def release(self) -> None:
        """Release the lock. Never raises."""
        if not self._held:
            return
        self._held = False
        try:
            portalocker.unlock(self.stream)
        except Exception as exc:  # closing the handle already dropped the OS lock
            lock_logger.debug("Ignoring unlock failure: %s", exc)
        finally:
            self._drop_thread_lock()

    def _drop_thread_lock(self) -> None:
        if self._thread_lock is not None:
            self._thread_lock.release()
            self._thread_lock = None
        if self._key is not None:
            _return_thread_lock(self._key)
            self._key = None

    def __enter__(self) -> "ExclusionLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
