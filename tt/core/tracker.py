from dataclasses import dataclass, field
from tt.common.logger import log
from tt.core.errors import NoActiveDocument, NoActiveSession
from tt.util import now_ms


# Runtime tracking state: the (optional) running session plus the per-document ledger of tracked milliseconds.
# start_time and document_id are only ever set or cleared together.
@dataclass
class TrackingState:
    start_time: int | None = None
    document_id: str | None = None
    ledger: dict[str, int] = field(default_factory=dict)

    @property
    def active(self):
        return self.start_time is not None and self.document_id is not None


# Result of a single stop(): which document, and how long this one session lasted (not the ledger total).
@dataclass(frozen=True)
class StoppedSession:
    document_id: str
    elapsed_ms: int


# This object owns the TrackingState and is the only thing that mutates it. One session at a time; starting a
# new one throws away whatever was running before.
class SessionTracker:

    def __init__(self, state=None, clock=None):
        self.state = state if state is not None else TrackingState()
        self._clock = clock or now_ms

    @property
    def active(self):
        return self.state.active

    @property
    def document_id(self):
        return self.state.document_id

    # Elapsed milliseconds of the running session, 0 if nothing is running.
    def elapsed_ms(self):
        if not self.state.active:
            return 0
        return max(0, int(self._clock() - self.state.start_time))

    # Total tracked milliseconds recorded for the given document.
    def total_ms(self, document_id):
        return self.state.ledger.get(document_id, 0)

    def start(self, document_id):
        if not document_id:
            raise NoActiveDocument()
        if self.state.active:
            log.debug(f"Discarding unfinished session on '{self.state.document_id}' ({self.elapsed_ms()} ms) in favor of '{document_id}'")
        self.state.start_time = self._clock()
        self.state.document_id = document_id
        log.debug(f"Started tracking '{document_id}' at {self.state.start_time}")

    def stop(self):
        if not self.state.active:
            raise NoActiveSession()

        document_id = self.state.document_id
        # A clock adjustment can put "now" before the start, which counts as nothing tracked.
        elapsed = self.elapsed_ms()
        self.state.ledger[document_id] = self.state.ledger.get(document_id, 0) + elapsed

        self.state.start_time = None
        self.state.document_id = None
        log.debug(f"Stopped tracking '{document_id}' after {elapsed} ms, total now {self.state.ledger[document_id]} ms")
        return StoppedSession(document_id=document_id, elapsed_ms=elapsed)
