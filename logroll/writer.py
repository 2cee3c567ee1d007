"""Buffered writer that feeds messages into a rolling file engine."""

from __future__ import annotations

import threading
from typing import List, Optional

from logroll.config.settings import settings
from logroll.engine import RollingFileEngine

LINE_SEPARATOR = "\n"


class LogWriter:
    """
    Accumulates messages and flushes them through ``device``.

    Every flush first calls ``device.prepare_for_write()`` (which may roll or
    reopen the file) and then writes the whole buffer to ``device.stream``.
    The lock is held across both steps so no thread writes into a stream
    that another thread is replacing.

    Args:
        device: The engine owning the log file.
        buffer_size: Number of messages to hold before flushing. ``0`` flushes
            on every write.
    """

    def __init__(self, device: RollingFileEngine, buffer_size: Optional[int] = None) -> None:
        self.device = device
        self.buffer_size = settings.buffer_size if buffer_size is None else max(0, int(buffer_size))
        self._buffer: List[str] = []
        self._lock = threading.RLock()

    def write(self, message: str) -> None:
        line = message if message.endswith(LINE_SEPARATOR) else message + LINE_SEPARATOR
        with self._lock:
            self._buffer.append(line)
            if len(self._buffer) >= max(1, self.buffer_size):
                self.flush()

    def flush(self) -> None:
        with self._lock:
            if not self._buffer:
                return
            self.device.prepare_for_write()
            stream = self.device.stream
            stream.write("".join(self._buffer))
            stream.flush()
            self._buffer = []

    def close(self) -> None:
        with self._lock:
            try:
                self.flush()
            finally:
                self.device.close()

    @property
    def pending(self) -> int:
        return len(self._buffer)

    def __enter__(self) -> "LogWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
