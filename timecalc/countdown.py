from __future__ import annotations
import logging
from datetime import datetime
from typing import Callable, List, Optional, Protocol

from .engine import ScheduleEngine
from .errors import InvalidIntervalText, NoActiveInterval
from .models import CountdownPhase, CountdownState
from .parsing import parse_interval
from .periods import add_minutes, now_local

LOGGER = logging.getLogger(__name__)

NOTHING_TO_COUNT_DOWN = "Nothing to count down"

CountdownListener = Callable[[CountdownState], None]


class TickSource(Protocol):
    def start(self) -> None: ...
    def stop(self) -> None: ...
    def is_active(self) -> bool: ...


class CountdownController:
    """
    Counts interval #1 down to zero, writing the remaining minutes back into
    its text. On expiry the engine shifts and, with cascade on, the countdown
    continues on the new interval #1 until the list runs out.
    """

    def __init__(
        self,
        engine: ScheduleEngine,
        ticker: TickSource,
        clock: Optional[Callable[[], datetime]] = None,
        cascade: bool = True,
    ):
        self.engine = engine
        self.ticker = ticker
        self.clock = clock or engine.clock or now_local
        self.cascade = cascade

        self.phase = CountdownPhase.IDLE
        self.target_time: Optional[datetime] = None
        self.initial_minutes = 0
        self.remaining_seconds: Optional[int] = None
        self.original_text: Optional[str] = None
        self.status = ""

        # history of "order changed at" moments
        self.changes: List[datetime] = []

        self._listeners: List[CountdownListener] = []

    def subscribe(self, listener: CountdownListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    @property
    def state(self) -> CountdownState:
        return CountdownState(
            phase=self.phase,
            target_time=self.target_time,
            initial_minutes=self.initial_minutes,
            remaining_seconds=self.remaining_seconds,
            original_text=self.original_text,
            last_changed_at=self.changes[-1] if self.changes else None,
            status=self.status,
        )

    # ---------- Commands ----------
    def start(self) -> bool:
        # never stack timers
        self.ticker.stop()
        now = self.clock()
        try:
            self._arm(now)
        except NoActiveInterval:
            LOGGER.debug("Countdown not started: interval 1 is blank or invalid")
            self._reset(NOTHING_TO_COUNT_DOWN)
            return False

        self.ticker.start()
        LOGGER.debug("Countdown started: %d min, target %s", self.initial_minutes, self.target_time)
        self._notify()
        return True

    def stop(self) -> None:
        self.ticker.stop()
        if self.phase == CountdownPhase.IDLE:
            return
        original = self.original_text
        self._reset("")
        if original is not None:
            self.engine.set_text(1, original)
        LOGGER.debug("Countdown stopped, interval 1 restored to %r", original)

    def tick(self, now: Optional[datetime] = None) -> None:
        if self.phase != CountdownPhase.RUNNING or self.target_time is None:
            return

        now = now or self.clock()
        remaining = int((self.target_time - now).total_seconds())

        if remaining > 0:
            self.remaining_seconds = remaining
            shown = str(remaining // 60)
            if self.engine.interval(1).raw_text != shown:
                self.engine.set_text(1, shown)
            self._notify()
            return

        self._expire(now)

    # ---------- Internals ----------
    def _arm(self, now: datetime) -> None:
        """Derive a fresh target from interval #1. Raises NoActiveInterval."""
        text = self.engine.interval(1).raw_text
        try:
            minutes = parse_interval(text)
        except InvalidIntervalText:
            minutes = None
        if not minutes:
            raise NoActiveInterval()

        self.original_text = text
        self.initial_minutes = minutes
        self.target_time = add_minutes(now, minutes)
        self.remaining_seconds = minutes * 60
        self.status = ""
        self.phase = CountdownPhase.RUNNING
        if text != str(minutes):
            self.engine.set_text(1, str(minutes))

    def _expire(self, now: datetime) -> None:
        assert self.target_time is not None
        changed_at = self.target_time
        self.phase = CountdownPhase.EXPIRED
        self.remaining_seconds = 0
        self.changes.append(changed_at)
        LOGGER.debug("Interval 1 expired at %s", changed_at)
        self._notify()

        self.engine.shift()

        if not self.cascade:
            self.ticker.stop()
            self._reset("")
            return

        try:
            self._arm(now)
        except NoActiveInterval:
            LOGGER.debug("No intervals left, countdown finished")
            self.ticker.stop()
            self._reset("")
            return

        self.ticker.stop()
        self.ticker.start()
        self._notify()

    def _reset(self, status: str) -> None:
        self.phase = CountdownPhase.IDLE
        self.target_time = None
        self.initial_minutes = 0
        self.remaining_seconds = None
        self.original_text = None
        self.status = status
        self._notify()

    def _notify(self) -> None:
        state = self.state
        for listener in list(self._listeners):
            listener(state)
