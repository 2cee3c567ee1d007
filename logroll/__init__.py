"""logroll: crash-safe, multi-process-safe log file rotation."""

from .config.rotation_config import (
    RotationConfig,
    RotationConfigError,
    build_policy,
    load_rotation_config,
    open_rolling_log,
)
from .diagnostics import DiagnosticSink, get_diagnostic_sink, set_diagnostic_sink
from .engine import LogFileHandle, RollingFileEngine
from .handler import RollingFileHandler
from .policies import DateRollingPolicy, RotationPolicy, SizeRollingPolicy, parse_size
from .utils.locking import ExclusionLock, LockUnavailableError
from .writer import LogWriter

__version__ = "0.1.0"

__all__ = [
    "DateRollingPolicy",
    "DiagnosticSink",
    "ExclusionLock",
    "LockUnavailableError",
    "LogFileHandle",
    "LogWriter",
    "RollingFileEngine",
    "RollingFileHandler",
    "RotationConfig",
    "RotationConfigError",
    "RotationPolicy",
    "SizeRollingPolicy",
    "build_policy",
    "get_diagnostic_sink",
    "load_rotation_config",
    "open_rolling_log",
    "parse_size",
    "set_diagnostic_sink",
]
