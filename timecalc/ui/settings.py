from __future__ import annotations
from PySide6.QtWidgets import QDialog, QVBoxLayout, QLabel, QCheckBox, QHBoxLayout, QPushButton, QLineEdit

from ..repository import SettingsRepository, cutoffs_to_csv, parse_cutoffs


class SettingsDialog(QDialog):
    def __init__(self, repo: SettingsRepository, parent=None):
        super().__init__(parent)
        self.repo = repo
        self.setWindowTitle("Settings")
        self.setMinimumWidth(360)

        current = self.repo.get_settings()
        layout = QVBoxLayout(self)

        layout.addWidget(QLabel("Cutoff times (HH:MM, comma separated)"))
        self.cutoffs = QLineEdit(cutoffs_to_csv(current.thresholds))
        layout.addWidget(self.cutoffs)

        self.cascade = QCheckBox("Continue countdown with the next interval")
        self.cascade.setChecked(current.cascade)
        layout.addWidget(self.cascade)

        self.error = QLabel("")
        self.error.setStyleSheet("QLabel { color: red; }")
        layout.addWidget(self.error)

        btns = QHBoxLayout()
        save = QPushButton("Save")
        save.clicked.connect(self.save)
        btns.addWidget(save)

        cancel = QPushButton("Cancel")
        cancel.clicked.connect(self.reject)
        btns.addWidget(cancel)

        layout.addLayout(btns)

    def save(self) -> None:
        try:
            thresholds = parse_cutoffs(self.cutoffs.text())
        except ValueError:
            self.error.setText("Cutoffs must look like 15:00,17:00")
            return

        self.repo.set_cutoffs(thresholds)
        self.repo.set_cascade(self.cascade.isChecked())

        self.accept()
