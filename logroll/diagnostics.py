"""Process-wide sink for rotation failures.

Rotation never raises into the code that is logging, so anything that goes
wrong while rolling ends up here instead: one message naming the file and the
error, followed by the traceback. The destination defaults to ``sys.stderr``
(looked up at write time) and can be pointed at another stream or at a file
through ``LOGROLL_DIAGNOSTIC_LOG``.
"""

from __future__ import annotations

import logging
import sys
import threading
import traceback
from pathlib import Path
from typing import IO, Any, Optional, Union

from logroll.config.settings import settings

diagnostic_logger = logging.getLogger(__name__)


class DiagnosticSink:
    """Writes rotation failure reports to a stream or an append-only file."""

    def __init__(self, stream: Optional[IO[str]] = None, path: Optional[Union[str, Path]] = None) -> None:
        self._stream = stream
        self._path = Path(path) if path else None
        self._lock = threading.Lock()

    @property
    def destination(self) -> str:
        if self._path is not None:
            return str(self._path)
        if self._stream is not None:
            return getattr(self._stream, "name", repr(self._stream))
        return "<stderr>"

    def format_report(self, path: str, error: BaseException) -> str:
        trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        return f"Failed to roll file {path}: {error!r}\n{trace.rstrip()}\n"

    def report(self, path: str, error: BaseException) -> None:
        """Emit a failure report. Never raises."""
        message = self.format_report(path, error)
        diagnostic_logger.debug("Rotation failure for %s reported to %s", path, self.destination)
        with self._lock:
            try:
                if self._path is not None:
                    self._path.parent.mkdir(parents=True, exist_ok=True)
                    with self._path.open("a", encoding="utf-8") as handle:
                        handle.write(message)
                    return
                stream = self._stream if self._stream is not None else sys.stderr
                stream.write(message)
                stream.flush()
            except (OSError, ValueError) as exc:
                diagnostic_logger.error("Could not write rotation failure for %s: %s", path, exc)


_default_sink = DiagnosticSink(path=settings.diagnostic_log)


def get_diagnostic_sink() -> DiagnosticSink:
    return _default_sink


def set_diagnostic_sink(sink: Optional[DiagnosticSink] = None, **kwargs: Any) -> DiagnosticSink:
    """Replace the process-wide sink; ``set_diagnostic_sink(stream=f)`` is a shorthand."""
    global _default_sink
    _default_sink = sink if sink is not None else DiagnosticSink(**kwargs)
    return _default_sink
