from __future__ import annotations
import logging
import signal
import sys

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import QTimer

from .countdown import CountdownController
from .cutoffs import CutoffEvaluator
from .db import connect, data_dir, migrate
from .engine import ScheduleEngine
from .periods import ms_until_next_minute, now_local
from .repository import SettingsRepository
from .scheduler import Ticker
from .ui.calculator import CalculatorWindow

LOGGER = logging.getLogger("timecalc")


def setup_logging(log_path: str) -> None:
    LOGGER.setLevel(logging.DEBUG)
    handler = logging.FileHandler(log_path, encoding="utf-8")
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(message)s")
    handler.setFormatter(formatter)
    LOGGER.addHandler(handler)
    LOGGER.propagate = False


def log_unhandled_exception(exc_type, exc, tb) -> None:
    LOGGER.error("Unhandled exception", exc_info=(exc_type, exc, tb))


def main() -> int:
    setup_logging(str(data_dir() / "debug.log"))
    sys.excepthook = log_unhandled_exception

    app = QApplication(sys.argv)

    # Ctrl-C only reaches Python while the event loop is pumped
    signal.signal(signal.SIGINT, signal.SIG_DFL)
    _sig_timer = QTimer()
    _sig_timer.start(250)
    _sig_timer.timeout.connect(lambda: None)

    conn = connect()
    migrate(conn)
    settings_repo = SettingsRepository(conn)
    settings = settings_repo.get_settings()
    LOGGER.info(
        "Starting with cutoffs %s",
        ", ".join(t.name for t in settings.thresholds) or "none",
    )

    engine = ScheduleEngine(CutoffEvaluator(settings.thresholds), clock=now_local)

    countdown_ticker = Ticker(settings.countdown_interval_ms)
    countdown = CountdownController(engine, countdown_ticker, cascade=settings.cascade)
    countdown_ticker.ticked.connect(countdown.tick)

    clock_ticker = Ticker(settings.clock_refresh_ms)

    window = CalculatorWindow(engine, countdown, clock_ticker, settings_repo)
    clock_ticker.start(initial_delay_ms=ms_until_next_minute(now_local()))

    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
