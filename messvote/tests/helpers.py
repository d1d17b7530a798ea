"""Shared test fixtures: a settable clock and a context on a temp directory."""
import tempfile
import shutil
from datetime import datetime, timedelta

from messvote.api.deps import build_context

TODAY = datetime(2026, 3, 2, 9, 0)


class FixedClock:
    def __init__(self, now: datetime = TODAY):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, hour: int, minute: int = 0, second: int = 0):
        self.now = self.now.replace(hour=hour, minute=minute, second=second, microsecond=0)

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


class ContextTestMixin:
    """Gives each test a fresh AppContext on its own temp dir, clock at 09:00."""

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp(prefix="messvote_test_")
        self.clock = FixedClock()
        self.sleeps = []
        self.ctx = build_context(self.tmp_dir, self.clock, sleep=self.sleeps.append)

    def tearDown(self):
        shutil.rmtree(self.tmp_dir, ignore_errors=True)
