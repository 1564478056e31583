from __future__ import annotations
from typing import List, Optional

from PySide6.QtCore import QEvent, QObject, Qt
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel, QLineEdit, QPushButton
)

from ..countdown import CountdownController
from ..cutoffs import CutoffEvaluator
from ..engine import ScheduleEngine
from ..formatting import (
    changed_at_text, current_time_text, eta_text, format_clock, interval_label, result_text, warning_text
)
from ..models import AppSettings, CountdownState, ScheduleState
from ..repository import SettingsRepository
from ..scheduler import Ticker
from .settings import SettingsDialog


class CalculatorWindow(QWidget):
    def __init__(
        self,
        engine: ScheduleEngine,
        countdown: CountdownController,
        clock_ticker: Ticker,
        settings_repo: Optional[SettingsRepository] = None,
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self.engine = engine
        self.countdown = countdown
        self.clock_ticker = clock_ticker
        self.settings_repo = settings_repo

        self.setWindowTitle("Time Calculator")
        self.setMinimumSize(360, 600)

        self.layout = QVBoxLayout(self)

        self.current_time = QLabel()
        self.current_time.setAlignment(Qt.AlignCenter)
        self.current_time.setToolTip("Time is synced with your computer's system clock.")
        self.layout.addWidget(self.current_time)

        self.intervals_grid = QGridLayout()
        self.layout.addLayout(self.intervals_grid)
        self.labels: List[QLabel] = []
        self.fields: List[QLineEdit] = []
        self.remove_buttons: List[QPushButton] = []

        # --- Interval controls row ---
        controls = QHBoxLayout()

        self.btn_add = QPushButton("+")
        self.btn_add.setToolTip("Add new interval (press Tab to add)")
        self.btn_add.installEventFilter(self)
        self.btn_add.clicked.connect(self.add_interval)
        controls.addWidget(self.btn_add)

        self.btn_remove = QPushButton("-")
        self.btn_remove.setToolTip("Remove last interval")
        self.btn_remove.clicked.connect(self.remove_last)
        controls.addWidget(self.btn_remove)

        self.btn_stop = QPushButton("Stop")
        self.btn_stop.clicked.connect(self.countdown.stop)
        controls.addWidget(self.btn_stop)

        self.layout.addLayout(controls)

        self.last_change = QLabel(" ")
        self.last_change.setStyleSheet("QLabel { color: #1a3fa6; font-weight: bold; }")
        self.layout.addWidget(self.last_change)

        self.eta = QLabel()
        self.eta.setStyleSheet("QLabel { color: #1a3fa6; font-weight: bold; }")
        self.layout.addWidget(self.eta)

        self.btn_calc = QPushButton("Calculate")
        self.btn_calc.setFocusPolicy(Qt.NoFocus)
        self.btn_calc.clicked.connect(self.calculate)
        self.layout.addWidget(self.btn_calc)

        self.result = QLabel("Resulting Time: ")
        self.layout.addWidget(self.result)

        self.warning = QLabel(" ")
        self.warning.setStyleSheet("QLabel { color: red; }")
        self.layout.addWidget(self.warning)

        if self.settings_repo is not None:
            self.btn_settings = QPushButton("Settings…")
            self.btn_settings.setFocusPolicy(Qt.NoFocus)
            self.btn_settings.clicked.connect(self.open_settings)
            self.layout.addWidget(self.btn_settings)

        self.layout.addStretch(1)

        self.engine.subscribe(self.on_schedule)
        self.countdown.subscribe(self.on_countdown)
        self.clock_ticker.ticked.connect(self.refresh_clock)

        self._sync_rows()
        self.refresh_clock()
        self.on_countdown(self.countdown.state)
        if self.fields:
            self.fields[0].setFocus()

    # ---------- Actions ----------
    def add_interval(self) -> None:
        self.engine.add_interval()
        self._sync_rows()
        self.fields[-1].setFocus()

    def remove_last(self) -> None:
        self.engine.remove_last()
        self._sync_rows()

    def remove_at(self, position: int) -> None:
        self.engine.remove_at(position)
        self._sync_rows()

    def calculate(self) -> None:
        self.engine.recompute()
        self.countdown.start()

    def refresh_clock(self) -> None:
        now = self.engine.clock()
        self.current_time.setText(current_time_text(now))
        self.engine.recompute(now)

    def open_settings(self) -> None:
        dlg = SettingsDialog(self.settings_repo, parent=self)
        if dlg.exec():
            self.apply_settings(self.settings_repo.get_settings())

    def apply_settings(self, settings: AppSettings) -> None:
        self.engine.evaluator = CutoffEvaluator(settings.thresholds)
        self.countdown.cascade = settings.cascade
        self.engine.recompute()

    def eventFilter(self, obj: QObject, event: QEvent) -> bool:
        if event.type() != QEvent.KeyPress:
            return super().eventFilter(obj, event)

        key = event.key()
        if obj is self.btn_add:
            if key in (Qt.Key_Tab, Qt.Key_Return, Qt.Key_Enter):
                self.add_interval()
                return True
            if key == Qt.Key_Backtab and self.fields:
                self.fields[-1].setFocus()
                return True
        elif obj in self.fields and key == Qt.Key_Tab:
            self.btn_add.setFocus()
            return True

        return super().eventFilter(obj, event)

    def _on_field_edited(self, position: int, text: str) -> None:
        self.engine.set_text(position, text)

    # ---------- Engine -> widgets ----------
    def on_schedule(self, state: ScheduleState) -> None:
        self._sync_rows()
        if state.ok:
            self.result.setText(result_text(state))
            self.warning.setText(warning_text(state) or " ")
        else:
            self.result.setText(f"<font color='red'>{result_text(state)}</font>")
            self.warning.setText(" ")

        for field, eta in zip(self.fields, state.interval_etas):
            field.setToolTip(f"ETA: {format_clock(eta)}" if eta else "")

    def on_countdown(self, state: CountdownState) -> None:
        self.eta.setText(eta_text(state))
        self.last_change.setText(changed_at_text(state) or " ")
        self.btn_stop.setEnabled(state.active)
        self.btn_stop.setToolTip(
            "Stop countdown and edit Interval 1" if state.active else "Countdown is not running"
        )

    def _sync_rows(self) -> None:
        """Match widget rows to the engine's interval list."""
        intervals = self.engine.intervals

        while len(self.fields) < len(intervals):
            position = len(self.fields) + 1
            lbl = QLabel(interval_label(position))
            field = QLineEdit()
            field.setAlignment(Qt.AlignRight)
            field.setFixedWidth(120)
            field.textEdited.connect(lambda text, p=position: self._on_field_edited(p, text))
            field.installEventFilter(self)
            btn = QPushButton("X")
            btn.setFocusPolicy(Qt.NoFocus)
            btn.setToolTip(f"Remove interval {position}")
            btn.clicked.connect(lambda checked=False, p=position: self.remove_at(p))
            self.intervals_grid.addWidget(lbl, position - 1, 0)
            self.intervals_grid.addWidget(field, position - 1, 1)
            self.intervals_grid.addWidget(btn, position - 1, 2)
            self.labels.append(lbl)
            self.fields.append(field)
            self.remove_buttons.append(btn)

        while len(self.fields) > len(intervals):
            lbl = self.labels.pop()
            field = self.fields.pop()
            btn = self.remove_buttons.pop()
            for w in (lbl, field, btn):
                self.intervals_grid.removeWidget(w)
                w.deleteLater()

        for it, field in zip(intervals, self.fields):
            if field.text() != it.raw_text:
                # textEdited only fires on user input, so no feedback loop here
                field.setText(it.raw_text)

        self.btn_remove.setVisible(len(intervals) > 1)
        for btn in self.remove_buttons:
            btn.setVisible(len(intervals) > 1)
