from __future__ import annotations
from typing import Optional
from PySide6.QtCore import QObject, QTimer, Signal


class Ticker(QObject):
    """Cancellable periodic tick. start() always cancels a pending tick first."""

    ticked = Signal()

    def __init__(self, interval_ms: int, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.interval_ms = interval_ms
        self.timer = QTimer(self)
        self.timer.setInterval(interval_ms)
        self.timer.timeout.connect(self._on_timeout)

    def start(self, initial_delay_ms: Optional[int] = None) -> None:
        self.timer.stop()
        # first shot may be shorter, e.g. to line up with the wall-clock minute
        self.timer.setInterval(initial_delay_ms if initial_delay_ms is not None else self.interval_ms)
        self.timer.start()

    def stop(self) -> None:
        self.timer.stop()

    def is_active(self) -> bool:
        return self.timer.isActive()

    def _on_timeout(self) -> None:
        if self.timer.interval() != self.interval_ms:
            self.timer.setInterval(self.interval_ms)
        self.ticked.emit()
