"""``logging`` integration: a handler that writes through a rolling engine."""

from __future__ import annotations

import logging
from typing import Optional, Union

from logroll.engine import RollingFileEngine
from logroll.policies.base import RotationPolicy
from logroll.policies.date_rolling import DateRollingPolicy


class RollingFileHandler(logging.Handler):
    """Log handler that is safe to share across processes writing one file.

    Before each record is written the engine checks whether the file was
    rolled elsewhere or needs rolling now. Formatting is left to the
    standard ``logging.Formatter`` machinery.
    """

    terminator = "\n"

    def __init__(
        self,
        filename: str,
        policy: Optional[Union[RotationPolicy, str]] = None,
        encoding: Optional[str] = None,
        level: int = logging.NOTSET,
    ) -> None:
        super().__init__(level)
        if policy is None or isinstance(policy, str):
            policy = DateRollingPolicy(filename, policy or "daily")
        self.engine = RollingFileEngine(filename, policy, encoding=encoding)

    @property
    def baseFilename(self) -> str:
        return self.engine.path

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            self.acquire()
            try:
                self.engine.prepare_for_write()
                stream = self.engine.stream
                stream.write(msg + self.terminator)
                stream.flush()
            finally:
                self.release()
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)

    def flush(self) -> None:
        self.acquire()
        try:
            if not self.engine.closed:
                self.engine.stream.flush()
        finally:
            self.release()

    def close(self) -> None:
        self.acquire()
        try:
            self.engine.close()
        finally:
            self.release()
            super().close()
