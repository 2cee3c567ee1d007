"""Rotation policy capability shared by every rolling variant."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod


class RotationPolicy(ABC):
    """Decides when a log file rolls and what it is renamed to.

    A policy is bound to one log path. The engine only ever calls the three
    operations below; any period or counter state stays inside the policy.
    """

    def __init__(self, path: str) -> None:
        self.path = os.path.abspath(path)

    @abstractmethod
    def should_roll(self) -> bool:
        """Return ``True`` if the file at ``path`` should be rolled now."""

    @abstractmethod
    def archive_file_name(self) -> str:
        """Return the path the current file is renamed to when it rolls.

        The archive must live on the same filesystem as ``path`` and the name
        must change once the file has rolled.
        """

    def after_roll(self) -> None:
        """Reset internal state after a successful roll."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.path!r})"
