from __future__ import annotations
import logging
import sqlite3
from datetime import time
from typing import List, Optional, Sequence, Tuple

from .formatting import format_clock
from .models import AppSettings, CutoffThreshold, DEFAULT_THRESHOLDS

LOGGER = logging.getLogger(__name__)

# a 0 ms QTimer fires on every event loop pass
MIN_TICK_MS = 100


def _parse_hhmm(s: str) -> Optional[time]:
    try:
        hh, mm = s.strip().split(":")
        return time(int(hh), int(mm))
    except ValueError:
        return None


def parse_cutoffs(s: str) -> Tuple[CutoffThreshold, ...]:
    out: List[CutoffThreshold] = []
    for part in s.split(","):
        if not part.strip():
            continue
        t = _parse_hhmm(part)
        if t is None:
            raise ValueError(f"bad cutoff time: {part!r}")
        out.append(CutoffThreshold(name=format_clock(t), time_of_day=t))
    return tuple(sorted(out, key=lambda c: c.time_of_day))


def cutoffs_to_csv(thresholds: Sequence[CutoffThreshold]) -> str:
    return ",".join(f"{c.time_of_day.hour:02d}:{c.time_of_day.minute:02d}" for c in thresholds)


class SettingsRepository:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def get_settings(self) -> AppSettings:
        defaults = AppSettings()

        raw_cutoffs = self._get_setting("cutoffs", cutoffs_to_csv(DEFAULT_THRESHOLDS))
        try:
            thresholds = parse_cutoffs(raw_cutoffs)
        except ValueError:
            LOGGER.warning("Ignoring invalid cutoffs setting %r", raw_cutoffs)
            thresholds = defaults.thresholds

        return AppSettings(
            thresholds=thresholds,
            countdown_interval_ms=self._get_int("countdown_interval_ms", defaults.countdown_interval_ms, MIN_TICK_MS),
            clock_refresh_ms=self._get_int("clock_refresh_ms", defaults.clock_refresh_ms, MIN_TICK_MS),
            cascade=self._get_int("cascade", 1) == 1,
        )

    def set_cutoffs(self, thresholds: Sequence[CutoffThreshold]) -> None:
        self._set_setting("cutoffs", cutoffs_to_csv(thresholds))

    def set_cascade(self, enabled: bool) -> None:
        self._set_setting("cascade", "1" if enabled else "0")

    def _get_int(self, key: str, default: int, minimum: int = 0) -> int:
        raw = self._get_setting(key, str(default))
        try:
            value = int(raw)
        except ValueError:
            LOGGER.warning("Ignoring invalid %s setting %r", key, raw)
            return default
        if value < minimum:
            LOGGER.warning("Ignoring %s setting %r below %d", key, raw, minimum)
            return default
        return value

    def _get_setting(self, key: str, default: str) -> str:
        row = self.conn.execute("SELECT value FROM settings WHERE key=?", (key,)).fetchone()
        return row["value"] if row else default

    def _set_setting(self, key: str, value: str) -> None:
        self.conn.execute(
            "INSERT INTO settings(key,value) VALUES(?,?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value",
            (key, value),
        )
        self.conn.commit()
