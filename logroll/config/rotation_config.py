"""Rotation configuration: which file rolls, how, and how it is buffered.

A rolling log can be described in code, from a dict, or in a YAML file::

    path: logs/app.log
    roll: weekly          # daily | weekly | monthly
    # max_size: 10M       # size-based rolling instead of a calendar period
    buffer_size: 0
    encoding: utf-8
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from logroll.config.settings import settings
from logroll.engine import RollingFileEngine
from logroll.policies.base import RotationPolicy
from logroll.policies.date_rolling import ROLL_PERIODS, DateRollingPolicy
from logroll.policies.size_rolling import SizeRollingPolicy, parse_size
from logroll.writer import LogWriter

rotation_config_logger = logging.getLogger(__name__)


class RotationConfigError(ValueError):
    """Raised when a rotation configuration is invalid."""


@dataclass
class RotationConfig:
    """Describes one rolling log file."""

    path: Path
    roll: Optional[str] = None
    max_size: Optional[Union[int, str]] = None
    buffer_size: int = 0
    encoding: Optional[str] = None

    def __post_init__(self) -> None:
        self.path = Path(self.path).expanduser()
        if self.roll is not None and self.max_size is not None:
            raise RotationConfigError("Cannot specify both roll and max_size")
        if self.max_size is None and self.roll is None:
            if settings.default_max_size:
                self.max_size = settings.default_max_size
            else:
                self.roll = settings.default_roll
        if self.roll is not None:
            self.roll = str(self.roll).strip().lower()
            if self.roll not in ROLL_PERIODS:
                raise RotationConfigError(
                    f"Invalid roll {self.roll!r}. Must be one of: {list(ROLL_PERIODS)}"
                )
        if self.max_size is not None:
            try:
                parse_size(self.max_size)
            except ValueError as exc:
                raise RotationConfigError(f"Invalid max_size: {exc}") from exc
        try:
            self.buffer_size = int(self.buffer_size)
        except (TypeError, ValueError) as exc:
            raise RotationConfigError(f"Invalid buffer_size: {self.buffer_size!r}") from exc
        if self.buffer_size < 0:
            raise RotationConfigError("buffer_size must not be negative")

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> "RotationConfig":
        """Create a config from dictionary data; relative paths resolve against ``base_dir``."""
        if not isinstance(data, dict):
            raise RotationConfigError("Rotation config must be a mapping")
        raw_path = data.get("path")
        if not raw_path:
            raise RotationConfigError("Rotation config requires a path")
        path = Path(raw_path).expanduser()
        if base_dir is not None and not path.is_absolute():
            path = base_dir / path

        return cls(
            path=path,
            roll=data.get("roll"),
            max_size=data.get("max_size"),
            buffer_size=data.get("buffer_size", settings.buffer_size),
            encoding=data.get("encoding"),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "path": str(self.path),
            "buffer_size": self.buffer_size,
        }
        if self.roll is not None:
            result["roll"] = self.roll
        if self.max_size is not None:
            result["max_size"] = self.max_size
        if self.encoding:
            result["encoding"] = self.encoding
        return result

    def build_policy(self) -> RotationPolicy:
        return build_policy(str(self.path), roll=self.roll, max_size=self.max_size)


def build_policy(
    path: str,
    roll: Optional[str] = None,
    max_size: Optional[Union[int, str]] = None,
) -> RotationPolicy:
    """Return the policy matching ``roll`` or ``max_size`` for ``path``."""
    if roll is not None and max_size is not None:
        raise RotationConfigError("Cannot specify both roll and max_size")
    if max_size is not None:
        try:
            return SizeRollingPolicy(path, max_size)
        except ValueError as exc:
            raise RotationConfigError(str(exc)) from exc
    try:
        return DateRollingPolicy(path, roll or settings.default_roll)
    except ValueError as exc:
        raise RotationConfigError(str(exc)) from exc


def load_rotation_config(config_path: Union[str, Path]) -> RotationConfig:
    """Load a rotation config from a YAML file."""
    config_path = Path(config_path).expanduser()
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError as exc:
        raise RotationConfigError(f"Rotation config not found: {config_path}") from exc
    except yaml.YAMLError as exc:
        raise RotationConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    rotation_config_logger.debug("Loaded rotation config from %s", config_path)
    return RotationConfig.from_dict(data, base_dir=config_path.resolve().parent)


def open_rolling_log(config: RotationConfig) -> LogWriter:
    """Build the engine and buffered writer described by ``config``."""
    engine = RollingFileEngine(str(config.path), config.build_policy(), encoding=config.encoding)
    return LogWriter(engine, buffer_size=config.buffer_size)
