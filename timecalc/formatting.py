from __future__ import annotations
from datetime import datetime, time
from typing import Optional, Union

from .models import CountdownPhase, CountdownState, ScheduleState

NO_TARGET = "--:--"


def format_duration(minutes: int) -> str:
    if minutes < 60:
        return f"{minutes} min"
    hrs, mins = divmod(minutes, 60)
    return f"{hrs} hr" + (f" {mins} min" if mins > 0 else "")


def format_clock(dt: Union[datetime, time], with_zone: bool = False) -> str:
    """12-hour clock, e.g. "3:07 PM" or "3:07 PM EST"."""
    hour = dt.hour % 12 or 12
    text = f"{hour}:{dt.minute:02d} {'AM' if dt.hour < 12 else 'PM'}"
    if with_zone:
        zone = dt.tzname()
        if zone:
            text += f" {zone}"
    return text


def format_remaining(seconds: Optional[int]) -> str:
    if seconds is None or seconds < 0:
        return NO_TARGET
    mins, secs = divmod(int(seconds), 60)
    return f"{mins}:{secs:02d}"


# ---------- Status lines ----------

def interval_label(position: int) -> str:
    return f"Interval {position} (MM / HMM):"


def current_time_text(now: datetime) -> str:
    return f"Current Time: {format_clock(now, with_zone=True)}"


def result_text(state: ScheduleState) -> str:
    if state.error is not None:
        return f"Invalid input at Interval {state.error.position}, check the field"
    assert state.projected_time is not None and state.total_minutes is not None
    return f"Resulting Time: {format_clock(state.projected_time)} (Added {format_duration(state.total_minutes)})"


def warning_text(state: ScheduleState) -> str:
    v = state.violation
    if state.error is not None or v is None:
        return ""
    return f"Warning: exceeds {v.threshold_name} at Interval {v.index} by {format_duration(v.minutes_past)}"


def eta_text(state: CountdownState) -> str:
    if state.phase == CountdownPhase.RUNNING:
        return f"Next order change in: {format_remaining(state.remaining_seconds)}"
    if state.status:
        return state.status
    return f"Next order change in: {NO_TARGET}"


def changed_at_text(state: CountdownState) -> str:
    if state.last_changed_at is None:
        return ""
    return f"Order changed at: {format_clock(state.last_changed_at)}"
