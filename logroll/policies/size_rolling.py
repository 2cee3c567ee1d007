"""Size-threshold rotation with numbered archives."""

from __future__ import annotations

import glob
import re
from typing import Union

from logroll.policies.base import RotationPolicy
from logroll.utils.identity import path_size

_SIZE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([KMG])?B?\s*$", re.IGNORECASE)
_UNITS = {"": 1, "K": 1024, "M": 1024 ** 2, "G": 1024 ** 3}


def parse_size(value: Union[int, float, str]) -> int:
    """Convert ``10M`` / ``512K`` / ``1.5G`` / plain numbers into bytes."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid size: {value!r}")
    if isinstance(value, (int, float)):
        size = int(value)
    else:
        match = _SIZE_PATTERN.match(str(value))
        if not match:
            raise ValueError(f"Invalid size: {value!r}. Expected a number with an optional K, M or G suffix")
        size = int(float(match.group(1)) * _UNITS[(match.group(2) or "").upper()])
    if size <= 0:
        raise ValueError(f"Size must be greater than 0, got {value!r}")
    return size


class SizeRollingPolicy(RotationPolicy):
    """Roll once the file grows past ``max_size`` bytes.

    Archives are numbered ``<path>.1``, ``<path>.2``, ... with the next free
    number after the highest one already on disk.
    """

    def __init__(self, path: str, max_size: Union[int, float, str]) -> None:
        super().__init__(path)
        self.max_size = parse_size(max_size)

    def should_roll(self) -> bool:
        size = path_size(self.path)
        return size is not None and size > self.max_size

    def archive_file_name(self) -> str:
        return f"{self.path}.{self.next_archive_number()}"

    def next_archive_number(self) -> int:
        highest = 0
        for candidate in glob.glob(f"{glob.escape(self.path)}.*"):
            suffix = candidate.rsplit(".", 1)[-1]
            if suffix.isdigit():
                highest = max(highest, int(suffix))
        return highest + 1

    def __repr__(self) -> str:
        return f"SizeRollingPolicy(path={self.path!r}, max_size={self.max_size})"
