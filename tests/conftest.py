import io
import os
import sys
from datetime import date, datetime, timedelta
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

for _name in ("LOGROLL_DIAGNOSTIC_LOG", "LOGROLL_MAX_SIZE", "LOGROLL_BUFFER_SIZE", "LOGROLL_ENCODING"):
    os.environ.pop(_name, None)
os.environ.setdefault("LOGROLL_DEFAULT_ROLL", "daily")

from logroll import diagnostics as diagnostics_module  # noqa: E402
from logroll.utils import time as clock  # noqa: E402


class FakeClock:
    """Shifts ``logroll.utils.time.now`` by a fixed offset from the real clock."""

    def __init__(self, monkeypatch: pytest.MonkeyPatch) -> None:
        self.offset = timedelta(0)
        monkeypatch.setattr(clock, "now", self.now)

    def now(self) -> datetime:
        return datetime.now() + self.offset

    def today(self) -> date:
        return self.now().date()

    def advance(self, days: int) -> None:
        self.offset += timedelta(days=days)

    def set_today(self, day: date) -> None:
        self.offset = timedelta(days=(day - datetime.now().date()).days)


@pytest.fixture
def fake_clock(monkeypatch):
    return FakeClock(monkeypatch)


@pytest.fixture
def log_path(tmp_path: Path) -> Path:
    return tmp_path / "app.log"


@pytest.fixture
def diagnostic_stream(monkeypatch):
    """Route rotation failure reports into a StringIO for the test."""
    stream = io.StringIO()
    monkeypatch.setattr(diagnostics_module, "_default_sink", diagnostics_module.DiagnosticSink(stream=stream))
    return stream
