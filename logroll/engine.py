"""Rolling file engine: owns the live log handle and rolls it safely.

Several threads and several processes may append to the same log path. The
engine checks the path before every flush cycle:

* if the path no longer resolves to the inode we have open, someone else
  rolled (or deleted) the file, so we simply reopen the path;
* otherwise we ask the policy whether it is time to roll and, if so, rename
  the file under an exclusive lock after re-verifying that it is still the
  same non-empty generation.

Nothing in here raises into the caller's write path. Failures are sent to
the diagnostic sink and the engine keeps a usable stream.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from typing import IO, Optional

from logroll.config.settings import settings
from logroll.diagnostics import DiagnosticSink, get_diagnostic_sink
from logroll.policies.base import RotationPolicy
from logroll.utils.identity import handle_inode, path_inode, path_stat
from logroll.utils.locking import ExclusionLock, LockUnavailableError

engine_logger = logging.getLogger(__name__)


@dataclass
class LogFileHandle:
    """The engine's current view of the file on disk."""

    path: str
    stream: IO[str]
    inode: Optional[int]


class RollingFileEngine:
    """Appends to ``path`` and archives it whenever ``policy`` says so."""

    def __init__(
        self,
        path: str,
        policy: RotationPolicy,
        *,
        encoding: Optional[str] = None,
        diagnostics: Optional[DiagnosticSink] = None,
    ) -> None:
        self.policy = policy
        self.encoding = encoding or settings.encoding
        self._diagnostics = diagnostics
        self._lock = threading.RLock()
        self._closed = False

        absolute = os.path.abspath(os.fspath(path))
        stream = self._open(absolute)
        self._handle = LogFileHandle(path=absolute, stream=stream, inode=handle_inode(stream))

    @property
    def path(self) -> str:
        return self._handle.path

    @property
    def stream(self) -> IO[str]:
        return self._handle.stream

    @property
    def inode(self) -> Optional[int]:
        return self._handle.inode

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def diagnostics(self) -> DiagnosticSink:
        return self._diagnostics or get_diagnostic_sink()

    def prepare_for_write(self) -> None:
        """Follow external rotations and roll the file when the policy asks.

        Call immediately before appending buffered content; afterwards write
        to ``self.stream``, which may have been replaced.
        """
        with self._lock:
            if self._closed:
                return
            try:
                observed_inode = path_inode(self.path)
                if observed_inode != self._handle.inode:
                    engine_logger.debug(
                        "Log file %s changed underneath us (inode %s -> %s); reopening",
                        self.path,
                        self._handle.inode,
                        observed_inode,
                    )
                    self._reopen()
                    return
                if self.policy.should_roll():
                    self._rotate()
            except Exception as exc:
                self.diagnostics.report(self.path, exc)
                self._ensure_stream()

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._close_stream(self._handle.stream)

    def _rotate(self) -> None:
        try:
            with ExclusionLock(self._handle.stream):
                self._roll_locked()
        except LockUnavailableError as exc:
            engine_logger.debug("Skipping roll of %s: %s", self.path, exc)
        finally:
            self._reopen()

    def _roll_locked(self) -> None:
        current = path_stat(self.path)
        if current is None or current.st_ino != self._handle.inode:
            engine_logger.debug("%s was already rolled by another process", self.path)
            return
        if current.st_size == 0:
            # Empty files are treated as freshly rolled and left alone.
            engine_logger.debug("%s is empty; nothing to roll", self.path)
            return

        self._handle.stream.flush()
        archive = self.policy.archive_file_name()
        if os.path.exists(archive):
            engine_logger.debug("Archive %s already exists; not rolling %s", archive, self.path)
            return

        try:
            os.rename(self.path, archive)
        except FileExistsError as exc:
            engine_logger.debug("Lost rename race for %s -> %s: %s", self.path, archive, exc)
            return
        except FileNotFoundError as exc:
            if path_stat(self.path) is None:
                engine_logger.debug("%s vanished before it could be renamed: %s", self.path, exc)
                return
            engine_logger.warning("Could not rename %s to %s: %s", self.path, archive, exc)
            self.diagnostics.report(self.path, exc)
            return
        except OSError as exc:
            engine_logger.warning("Could not rename %s to %s: %s", self.path, archive, exc)
            self.diagnostics.report(self.path, exc)
            return

        self.policy.after_roll()
        engine_logger.info("Rolled %s to %s", self.path, archive)

    def _open(self, path: str) -> IO[str]:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        return open(path, "a", encoding=self.encoding, buffering=1)

    def _reopen(self) -> None:
        old_stream = self._handle.stream
        stream = self._open(self.path)
        self._handle = LogFileHandle(path=self.path, stream=stream, inode=handle_inode(stream))
        self._close_stream(old_stream)

    def _ensure_stream(self) -> None:
        """After a failure, make sure a live stream is still held."""
        if not self._handle.stream.closed:
            return
        try:
            self._reopen()
        except OSError as exc:
            self.diagnostics.report(self.path, exc)

    @staticmethod
    def _close_stream(stream: IO[str]) -> None:
        try:
            stream.close()
        except (OSError, ValueError) as exc:
            engine_logger.debug("Ignoring error while closing old log stream: %s", exc)

    def __enter__(self) -> "RollingFileEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"RollingFileEngine(path={self.path!r}, policy={self.policy!r})"
