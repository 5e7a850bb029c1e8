import sys
from pathlib import Path
from PySide6.QtCore import QTimer
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QPushButton,
    QStackedWidget,
    QTextBrowser,
)
from tt.common.logger import log
from tt.core import config
from tt.core.controller import TimeTrackerController
from tt.ui.dialogs.settings import SettingsDialog

_NOTICE_MS = 4000

_SHORTCUTS = {
    "start-tracking-time": "Ctrl+Shift+S",
    "stop-tracking-time": "Ctrl+Shift+X",
}

_BUTTON_STYLE = """
QPushButton#startButton { color: #1b7f3b; font-weight: bold; }
QPushButton#stopButton { color: #b3261e; font-weight: bold; }
QPushButton:disabled { color: #9a9a9a; }
"""


def _format_total(ms):
    seconds = max(0, int(ms // 1000))
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"


# Wraps the source editor so the controller only ever sees text() and insert_at_cursor().
class _EditorAdapter:

    def __init__(self, editor):
        self._editor = editor

    def text(self):
        return self._editor.toPlainText()

    # Inserts at the cursor position only. A selection is collapsed first so selected text is never replaced.
    def insert_at_cursor(self, text):
        cursor = self._editor.textCursor()
        cursor.clearSelection()
        cursor.insertText(text)
        self._editor.setTextCursor(cursor)


# ---------------------------------------------------------------------------
# Main window
# ---------------------------------------------------------------------------

# A bare-bones markdown notes window: one open note, a source/reading mode toggle, and the tracking buttons in
# the status bar. It also acts as the host the controller talks to.
class MainWindow(QMainWindow):

    def __init__(self):
        super().__init__()
        self.setWindowTitle("Note Time Tracker")
        self.resize(820, 640)

        self.note_path = None
        self._closing = False

        # -- Views --
        self._editor = QPlainTextEdit()
        self._preview = QTextBrowser()
        self._preview.setOpenExternalLinks(True)
        self._views = QStackedWidget()
        self._views.addWidget(self._editor)
        self._views.addWidget(self._preview)
        self.setCentralWidget(self._views)
        self._editor.document().modificationChanged.connect(self._update_title)

        # -- Core --
        self.controller = TimeTrackerController(self, save=self._save_later)
        self.controller.load()

        self._build_menus()
        self._build_status_bar()
        self._update_title()

        # -- Status tick (1 s) --
        self._timer = QTimer(self)
        self._timer.timeout.connect(self._update_status)
        self._timer.start(1000)

    # ------------------------------------------------------------------ #
    #  Host interface                                                      #
    # ------------------------------------------------------------------ #

    def active_document(self):
        return str(self.note_path) if self.note_path else None

    def active_editor(self):
        if self.note_path is None or self._views.currentWidget() is not self._editor:
            return None
        return _EditorAdapter(self._editor)

    def notify(self, message):
        self.statusBar().showMessage(message, _NOTICE_MS)

    # Disk writes are pushed to the next event loop turn so commands never wait on them. While closing there is
    # no next turn, so the write happens inline.
    def _save_later(self, state):
        if self._closing:
            self._save_now(state)
        else:
            QTimer.singleShot(0, lambda: self._save_now(state))

    def _save_now(self, state):
        try:
            config.save_state(state)
        except OSError as e:
            log.exception("Failed to save state")
            if self._closing:
                QMessageBox.warning(self, "Save Error",
                                    f"Failed to save state:\n{e}")
            else:
                self.notify("Failed to save time tracking state")

    # ------------------------------------------------------------------ #
    #  Building                                                            #
    # ------------------------------------------------------------------ #

    def _build_menus(self):
        file_menu = self.menuBar().addMenu("&File")
        open_act = QAction("&Open Note...", self)
        open_act.setShortcut(QKeySequence.StandardKey.Open)
        open_act.triggered.connect(self._on_open)
        file_menu.addAction(open_act)
        save_act = QAction("&Save Note", self)
        save_act.setShortcut(QKeySequence.StandardKey.Save)
        save_act.triggered.connect(self._on_save_note)
        file_menu.addAction(save_act)
        file_menu.addSeparator()
        settings_act = QAction("Se&ttings...", self)
        settings_act.triggered.connect(self._on_settings)
        file_menu.addAction(settings_act)

        view_menu = self.menuBar().addMenu("&View")
        self._reading_act = QAction("&Reading Mode", self)
        self._reading_act.setCheckable(True)
        self._reading_act.setShortcut("Ctrl+E")
        self._reading_act.toggled.connect(self._on_reading_toggled)
        view_menu.addAction(self._reading_act)

        # Controller commands get registered as plain menu actions
        self._commands = {c.id: c for c in self.controller.commands()}
        commands_menu = self.menuBar().addMenu("&Commands")
        for command in self._commands.values():
            act = QAction(command.name, self)
            if command.id in _SHORTCUTS:
                act.setShortcut(_SHORTCUTS[command.id])
            act.triggered.connect(lambda checked=False, c=command: self._run_command(c))
            commands_menu.addAction(act)

    def _build_status_bar(self):
        bar = self.statusBar()
        bar.setStyleSheet(_BUTTON_STYLE)

        self._status_lbl = QLabel()
        bar.addPermanentWidget(self._status_lbl)

        self._start_btn = QPushButton("Start Tracking")
        self._start_btn.setObjectName("startButton")
        self._start_btn.clicked.connect(self._on_start)
        bar.addPermanentWidget(self._start_btn)

        self._stop_btn = QPushButton("Stop Tracking")
        self._stop_btn.setObjectName("stopButton")
        self._stop_btn.clicked.connect(self._on_stop)
        bar.addPermanentWidget(self._stop_btn)

        self._update_status()

    # ------------------------------------------------------------------ #
    #  Handlers                                                            #
    # ------------------------------------------------------------------ #

    def _run_command(self, command):
        command.callback()
        self._update_status()

    def _on_start(self):
        self._run_command(self._commands["start-tracking-time"])

    def _on_stop(self):
        self._run_command(self._commands["stop-tracking-time"])

    def _on_open(self):
        if not self._confirm_discard():
            return
        path, _ = QFileDialog.getOpenFileName(
            self, "Open Note", str(self.note_path.parent if self.note_path else Path.home()),
            "Markdown (*.md *.markdown);;All files (*)")
        if not path:
            return
        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            log.warning(f"Could not open note '{path}'", exc_info=True)
            QMessageBox.warning(self, "Open Error", f"Failed to open note:\n{e}")
            return
        self.note_path = Path(path)
        self._editor.setPlainText(text)
        self._editor.document().setModified(False)
        if self._reading_act.isChecked():
            self._preview.setMarkdown(text)
        log.info(f"Opened note '{self.note_path}'")
        self._update_title()
        self._update_status()

    def _on_save_note(self):
        if self.note_path is None:
            self.notify("No note open")
            return
        try:
            self.note_path.write_text(self._editor.toPlainText(), encoding="utf-8")
        except OSError as e:
            log.warning(f"Could not save note '{self.note_path}'", exc_info=True)
            QMessageBox.warning(self, "Save Error", f"Failed to save note:\n{e}")
            return
        self._editor.document().setModified(False)
        self.notify(f"Saved {self.note_path.name}")

    def _on_reading_toggled(self, reading):
        if reading:
            self._preview.setMarkdown(self._editor.toPlainText())
            self._views.setCurrentWidget(self._preview)
        else:
            self._views.setCurrentWidget(self._editor)

    def _on_settings(self):
        dlg = SettingsDialog(self, self.controller.settings, on_change=self.controller.update_setting)
        dlg.exec()

    def _confirm_discard(self):
        if not self._editor.document().isModified():
            return True
        return QMessageBox.question(
            self, "Unsaved Changes",
            "Discard unsaved changes to the current note?"
        ) == QMessageBox.Yes

    # ------------------------------------------------------------------ #
    #  Display                                                             #
    # ------------------------------------------------------------------ #

    def _update_title(self, *_):
        name = self.note_path.name if self.note_path else "No note"
        dirty = "*" if self._editor.document().isModified() else ""
        self.setWindowTitle(f"{dirty}{name} - Note Time Tracker")

    def _update_status(self):
        tracker = self.controller.tracker
        doc = self.active_document()
        parts = []
        if doc is not None:
            parts.append(f"Total: {_format_total(tracker.total_ms(doc))}")
        if tracker.active:
            tracked_name = Path(tracker.document_id).name
            parts.append(f"Tracking {tracked_name}: {_format_total(tracker.elapsed_ms())}")
        self._status_lbl.setText("  |  ".join(parts))
        self._start_btn.setEnabled(not tracker.active)
        self._stop_btn.setEnabled(tracker.active)

    # ------------------------------------------------------------------ #
    #  Window close                                                        #
    # ------------------------------------------------------------------ #

    def closeEvent(self, event):
        if not self._confirm_discard():
            event.ignore()
            return
        self._closing = True
        self._timer.stop()
        self.controller.unload()
        event.accept()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    sys.exit(app.exec())
