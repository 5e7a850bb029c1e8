"""Settings dialog for the time tracker: the three log table headers."""

from PySide6.QtCore import Qt
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QLineEdit,
    QVBoxLayout,
)

# (persisted key, label, tooltip, placeholder)
_FIELDS = (
    ("dateHeader", "Date Header:",
     "Header for the date column in the time tracking table", "Enter date header"),
    ("durationHeader", "Duration Header:",
     "Header for the duration column in the time tracking table", "Enter duration header"),
    ("logSectionHeader", "Log Section Header:",
     "Header for the log section in the markdown file", "Enter log section header"),
)

# Every edit is pushed to `on_change(key, value)` as it happens, so there is nothing to apply on close.
class SettingsDialog(QDialog):

    def __init__(self, parent, settings, on_change):
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.setModal(True)
        self._on_change = on_change

        current = {
            "dateHeader": settings.date_header,
            "durationHeader": settings.duration_header,
            "logSectionHeader": settings.log_section_header,
        }

        outer = QVBoxLayout(self)
        title = QLabel("Settings for Time Tracker")
        title.setFont(QFont("Calibri", 14, QFont.Bold))
        outer.addWidget(title)

        form = QFormLayout()
        form.setLabelAlignment(Qt.AlignLeft)
        self.inputs = {}
        for key, label, tooltip, placeholder in _FIELDS:
            lbl = QLabel(label)
            lbl.setFont(QFont("Calibri", 12, QFont.Bold))
            lbl.setToolTip(tooltip)
            edit = QLineEdit(current[key])
            edit.setPlaceholderText(placeholder)
            edit.setToolTip(tooltip)
            edit.setMinimumWidth(240)
            edit.textChanged.connect(lambda value, k=key: self._on_change(k, value))
            form.addRow(lbl, edit)
            self.inputs[key] = edit
        outer.addLayout(form)

        buttons = QDialogButtonBox(QDialogButtonBox.Close)
        buttons.rejected.connect(self.reject)
        outer.addWidget(buttons)
