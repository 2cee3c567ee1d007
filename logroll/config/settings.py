"""Runtime configuration helpers for logroll."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()  # no-op when no .env file is present


@dataclass(frozen=True)
class Settings:
    """Process-wide defaults resolved from the environment."""

    encoding: str
    default_roll: str
    default_max_size: Optional[str]
    buffer_size: int
    diagnostic_log: Optional[Path]

    @classmethod
    def load(cls) -> "Settings":
        encoding = os.environ.get("LOGROLL_ENCODING", "utf-8").strip() or "utf-8"
        default_roll = os.environ.get("LOGROLL_DEFAULT_ROLL", "daily").strip().lower() or "daily"
        default_max_size = os.environ.get("LOGROLL_MAX_SIZE", "").strip() or None
        buffer_size = max(0, _int_env("LOGROLL_BUFFER_SIZE", 0))

        diagnostic_raw = os.environ.get("LOGROLL_DIAGNOSTIC_LOG", "").strip()
        diagnostic_log = None
        if diagnostic_raw and diagnostic_raw.lower() not in {"stderr", "-"}:
            diagnostic_log = Path(diagnostic_raw).expanduser()

        return cls(
            encoding=encoding,
            default_roll=default_roll,
            default_max_size=default_max_size,
            buffer_size=buffer_size,
            diagnostic_log=diagnostic_log,
        )


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


settings = Settings.load()
