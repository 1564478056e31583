from datetime import datetime, time, timezone
from zoneinfo import ZoneInfo

import pytest

import timecalc.periods as periods


TZ = ZoneInfo("America/New_York")


def _dt_local(y, m, d, hh=0, mm=0, ss=0, us=0):
    return datetime(y, m, d, hh, mm, ss, us, tzinfo=TZ)


def test_threshold_datetime_same_day_and_tz():
    dt = _dt_local(2026, 1, 14, 14, 50)
    assert periods.threshold_datetime(dt, time(15, 0)) == _dt_local(2026, 1, 14, 15, 0)


def test_threshold_datetime_requires_aware():
    with pytest.raises(ValueError):
        periods.threshold_datetime(datetime(2026, 1, 14, 10, 0), time(15, 0))


def test_now_local_is_aware(monkeypatch):
    monkeypatch.setattr(periods, "local_tz", lambda: TZ)
    assert periods.now_local().tzinfo is TZ


def test_whole_minutes_between_truncates():
    a = _dt_local(2026, 1, 14, 15, 0)
    b = _dt_local(2026, 1, 14, 15, 10, 59)
    assert periods.whole_minutes_between(a, b) == 10


def test_ms_until_next_minute():
    assert periods.ms_until_next_minute(_dt_local(2026, 1, 14, 10, 0, 0)) == 60_000
    assert periods.ms_until_next_minute(_dt_local(2026, 1, 14, 10, 0, 45, 500_000)) == 14_500

