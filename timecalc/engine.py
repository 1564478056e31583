from __future__ import annotations
import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from .cutoffs import CutoffEvaluator
from .errors import InvalidIntervalText, ParseError
from .models import Interval, ScheduleState
from .parsing import parse_interval
from .periods import add_minutes, now_local

LOGGER = logging.getLogger(__name__)

StateListener = Callable[[ScheduleState], None]


def make_interval(text: str, position: int) -> Interval:
    try:
        minutes = parse_interval(text)
    except InvalidIntervalText:
        return Interval(raw_text=text, position=position, minutes=None, valid=False)
    return Interval(raw_text=text, position=position, minutes=minutes, valid=True)


def compute_schedule(intervals: Sequence[Interval], now: datetime, evaluator: CutoffEvaluator) -> ScheduleState:
    """
    Single source of truth for:
    - total minutes and projected finish time
    - the cutoff warning

    Raises ParseError on the first invalid interval; no partial totals.
    """
    total = 0
    cumulative: List[Optional[int]] = []

    for it in intervals:
        if not it.valid:
            raise ParseError(it.position, it.raw_text)
        if it.minutes is None:
            cumulative.append(None)
            continue
        total += it.minutes
        cumulative.append(total)

    etas = tuple(add_minutes(now, c) if c is not None else None for c in cumulative)

    return ScheduleState(
        computed_at=now,
        total_minutes=total,
        projected_time=add_minutes(now, total),
        violation=evaluator.evaluate(cumulative, now),
        interval_etas=etas,
    )


class ScheduleEngine:
    """Owns the ordered interval list. Every mutation recomputes and notifies subscribers."""

    def __init__(self, evaluator: Optional[CutoffEvaluator] = None, clock: Callable[[], datetime] = now_local):
        self.evaluator = evaluator or CutoffEvaluator()
        self.clock = clock
        self._intervals: List[Interval] = [make_interval("", 1)]
        self._listeners: List[StateListener] = []

        self.state: Optional[ScheduleState] = None
        self.last_valid_state: Optional[ScheduleState] = None

    # ---------- Observers ----------
    def subscribe(self, listener: StateListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ---------- Queries ----------
    @property
    def intervals(self) -> List[Interval]:
        return list(self._intervals)

    def interval(self, position: int) -> Interval:
        if not 1 <= position <= len(self._intervals):
            raise IndexError(position)
        return self._intervals[position - 1]

    def texts(self) -> List[str]:
        return [it.raw_text for it in self._intervals]

    # ---------- Edits ----------
    def set_text(self, position: int, text: str) -> ScheduleState:
        self.interval(position)  # bounds check
        self._intervals[position - 1] = make_interval(text, position)
        return self.recompute()

    def add_interval(self) -> List[Interval]:
        self._intervals.append(make_interval("", len(self._intervals) + 1))
        self._renumber()
        LOGGER.debug("Interval added, now %d", len(self._intervals))
        self.recompute()
        return self.intervals

    def remove_last(self) -> List[Interval]:
        if len(self._intervals) > 1:
            self._intervals.pop()
            LOGGER.debug("Last interval removed, now %d", len(self._intervals))
            self.recompute()
        return self.intervals

    def remove_at(self, position: int) -> List[Interval]:
        self.interval(position)
        if len(self._intervals) > 1:
            del self._intervals[position - 1]
            self._renumber()
            LOGGER.debug("Interval %d removed, now %d", position, len(self._intervals))
            self.recompute()
        return self.intervals

    def shift(self) -> List[Interval]:
        """Drop the first interval and move the rest up. Never leaves the list empty."""
        dropped = self._intervals.pop(0)
        if not self._intervals:
            self._intervals.append(make_interval("", 1))
        self._renumber()
        LOGGER.debug("Shifted out interval %r, %d remaining", dropped.raw_text, len(self._intervals))
        self.recompute()
        return self.intervals

    def _renumber(self) -> None:
        self._intervals = [
            it if it.position == i else replace(it, position=i)
            for i, it in enumerate(self._intervals, start=1)
        ]

    # ---------- Recompute ----------
    def recompute(self, now: Optional[datetime] = None) -> ScheduleState:
        now = now or self.clock()
        try:
            state = compute_schedule(self._intervals, now, self.evaluator)
        except ParseError as e:
            LOGGER.debug("Recompute stopped: %s", e)
            state = ScheduleState(computed_at=now, total_minutes=None, projected_time=None, error=e)
        else:
            self.last_valid_state = state

        self.state = state
        for listener in list(self._listeners):
            listener(state)
        return state
