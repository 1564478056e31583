from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, time
from enum import Enum
from typing import Optional, Tuple

from .errors import ParseError


@dataclass(frozen=True)
class Interval:
    raw_text: str
    position: int  # 1-based, contiguous

    minutes: Optional[int] = None  # None for a blank slot
    valid: bool = True


@dataclass(frozen=True)
class CutoffThreshold:
    name: str
    time_of_day: time


DEFAULT_THRESHOLDS: Tuple[CutoffThreshold, ...] = (
    CutoffThreshold("3:00 PM", time(15, 0)),
    CutoffThreshold("5:00 PM", time(17, 0)),
    CutoffThreshold("7:00 PM", time(19, 0)),
)


@dataclass(frozen=True)
class Violation:
    index: int  # 1-based interval position of the first crossing
    threshold: CutoffThreshold
    minutes_past: int

    @property
    def threshold_name(self) -> str:
        return self.threshold.name


@dataclass(frozen=True)
class ScheduleState:
    computed_at: datetime

    total_minutes: Optional[int]
    projected_time: Optional[datetime]

    violation: Optional[Violation] = None

    # cumulative finish time per slot, None for blank slots
    interval_etas: Tuple[Optional[datetime], ...] = ()

    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def minutes_past_threshold(self) -> int:
        return self.violation.minutes_past if self.violation else 0


class CountdownPhase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    EXPIRED = "expired_transitioning"


@dataclass(frozen=True)
class CountdownState:
    phase: CountdownPhase
    target_time: Optional[datetime] = None
    initial_minutes: int = 0
    remaining_seconds: Optional[int] = None

    original_text: Optional[str] = None  # interval #1 text before the countdown took it over
    last_changed_at: Optional[datetime] = None
    status: str = ""

    @property
    def active(self) -> bool:
        return self.phase != CountdownPhase.IDLE


@dataclass(frozen=True)
class AppSettings:
    thresholds: Tuple[CutoffThreshold, ...] = DEFAULT_THRESHOLDS
    countdown_interval_ms: int = 1_000
    clock_refresh_ms: int = 60_000
    cascade: bool = True  # keep counting down through the following intervals
