import os
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

TZ = ZoneInfo("America/New_York")


def _dt_local(y, m, d, hh=0, mm=0, ss=0):
    return datetime(y, m, d, hh, mm, ss, tzinfo=TZ)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class FakeTicker:
    def __init__(self):
        self.active = False
        self.starts = 0

    def start(self) -> None:
        if self.active:
            raise AssertionError("ticker started twice without stop")
        self.active = True
        self.starts += 1

    def stop(self) -> None:
        self.active = False

    def is_active(self) -> bool:
        return self.active


@pytest.fixture
def clock():
    return FakeClock(_dt_local(2026, 1, 14, 10, 0))


@pytest.fixture
def ticker():
    return FakeTicker()


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtWidgets import QApplication
    app = QApplication.instance() or QApplication([])
    yield app
