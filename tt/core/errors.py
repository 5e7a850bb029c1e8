"""Recoverable tracking errors. Each carries the notice shown to the user."""


class TrackingError(Exception):
    notice = "Time tracking failed"

    def __init__(self, notice=None):
        super().__init__(notice or self.notice)
        if notice:
            self.notice = notice


class NoActiveDocument(TrackingError):
    notice = "No active file to start tracking time"


class NoActiveSession(TrackingError):
    notice = "No tracking session in progress"


class NoEditableView(TrackingError):
    notice = "No active Markdown file to log time"
