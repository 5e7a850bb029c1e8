"""Command layer between the host application and the tracking core.

The host supplies three things: ``active_document()`` (a document id or
None), ``active_editor()`` (an object with ``text()`` and
``insert_at_cursor(text)``, or None when the focused view can't be edited)
and ``notify(message)``. Saving goes through the ``save`` callable, which
receives the full state dict and whose result is ignored.
"""

import dataclasses
from dataclasses import dataclass
from collections.abc import Callable
from tt.common.logger import log
from tt.core import config
from tt.core.errors import NoActiveDocument, NoActiveSession, NoEditableView
from tt.core.formatter import build_log_entry
from tt.core.tracker import SessionTracker


@dataclass(frozen=True)
class Command:
    id: str
    name: str
    callback: Callable[[], None]


# Maps the persisted camelCase header keys onto LogSettings fields.
_SETTING_FIELDS = {
    "dateHeader": "date_header",
    "durationHeader": "duration_header",
    "logSectionHeader": "log_section_header",
}


class TimeTrackerController:

    def __init__(self, host, save=None, clock=None):
        self.host = host
        self._save = save or config.save_state
        self._clock = clock
        self.settings = config.LogSettings()
        self.tracker = SessionTracker(clock=clock)

    # ------------------------------------------------------------------ #
    #  Lifecycle                                                           #
    # ------------------------------------------------------------------ #

    def load(self, state=None):
        log.info("Loading Time Tracker")
        state = state if state is not None else config.load_state()
        self.settings = config.LogSettings.from_state(state)
        tracking = config.tracking_from_state(state)
        self.tracker = SessionTracker(tracking, clock=self._clock)
        if tracking.active:
            log.info(f"Resuming tracking session on '{tracking.document_id}' started at {tracking.start_time}")

    def unload(self):
        log.info("Unloading Time Tracker")
        self.save()

    def state_dict(self):
        return config.build_state_dict(self.settings, self.tracker.state)

    def save(self):
        self._save(self.state_dict())

    def commands(self):
        return [
            Command("start-tracking-time", "Start Tracking Time", self.start_tracking),
            Command("stop-tracking-time", "Stop Tracking Time", self.stop_tracking),
        ]

    # ------------------------------------------------------------------ #
    #  Commands                                                            #
    # ------------------------------------------------------------------ #

    def start_tracking(self):
        try:
            document_id = self.host.active_document()
            if not document_id:
                raise NoActiveDocument()
            self.tracker.start(document_id)
        except NoActiveDocument as e:
            log.info(f"Refused to start tracking: {e.notice}")
            self.host.notify(e.notice)
            return False
        self.save()
        self.host.notify("Time tracking started")
        log.info(f"Time tracking started on '{document_id}'")
        return True

    def stop_tracking(self):
        try:
            stopped = self.tracker.stop()
        except NoActiveSession as e:
            log.info(f"Refused to stop tracking: {e.notice}")
            self.host.notify(e.notice)
            return None

        log.info(f"Time tracking stopped on '{stopped.document_id}' after {stopped.elapsed_ms} ms")
        try:
            self._log_to_editor(stopped.elapsed_ms)
        except NoEditableView as e:
            log.info(f"Recorded {stopped.elapsed_ms} ms for '{stopped.document_id}' but skipped the log entry: {e.notice}")
            self.host.notify(e.notice)
        finally:
            self.save()
        return stopped

    def _log_to_editor(self, elapsed_ms):
        if not self.host.active_document():
            raise NoEditableView("No active file to log time")
        editor = self.host.active_editor()
        if editor is None:
            raise NoEditableView()
        entry = build_log_entry(elapsed_ms, editor.text(), self.settings)
        editor.insert_at_cursor(entry.inserted_text)
        self.host.notify("Time logged successfully")
        log.debug(f"Inserted log row {entry.row.strip()!r}")

    # ------------------------------------------------------------------ #
    #  Settings                                                            #
    # ------------------------------------------------------------------ #

    # Replaces one header (by its persisted key, e.g. "dateHeader") and saves straight away.
    def update_setting(self, key, value):
        if key not in _SETTING_FIELDS:
            raise KeyError(f"Unknown setting '{key}'")
        self.settings = dataclasses.replace(self.settings, **{_SETTING_FIELDS[key]: value})
        self.save()
        log.debug(f"Updated setting '{key}' to {value!r}")
