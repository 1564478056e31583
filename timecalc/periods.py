from __future__ import annotations
from datetime import datetime, timedelta, time, timezone, tzinfo


def local_tz() -> tzinfo:
    return datetime.now().astimezone().tzinfo  # type: ignore


def now_local() -> datetime:
    return datetime.now(timezone.utc).astimezone(local_tz())


def add_minutes(dt: datetime, minutes: int) -> datetime:
    return dt + timedelta(minutes=minutes)


def threshold_datetime(dt_local: datetime, time_of_day: time) -> datetime:
    """The given time of day on the same calendar date (and tz) as dt_local."""
    if dt_local.tzinfo is None:
        raise ValueError("dt_local must be timezone-aware")
    return datetime.combine(dt_local.date(), time_of_day, tzinfo=dt_local.tzinfo)


def whole_minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, truncated toward zero."""
    return int((end - start).total_seconds() / 60)


def ms_until_next_minute(dt: datetime) -> int:
    """Delay that lines a minute tick up with the wall clock."""
    ms = (60 - dt.second) * 1000 - dt.microsecond // 1000
    return max(1, ms)
