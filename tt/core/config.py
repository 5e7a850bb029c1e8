import json
import math
from dataclasses import dataclass
from tt.common.logger import log
from tt.common.setup import PATHS
from tt.core.tracker import TrackingState

#region === Helpers and Paths ===

STATE_PATH = PATHS.current / "state.json"

# Default values for the user-editable part of the state dict.
_SETTINGS_DEFAULTS = {
    "dateHeader": "Starting date",
    "durationHeader": "Overall duration",
    "logSectionHeader": "Time Tracking Log",
}

# Helper to return a truly fresh, default state.
def build_default_state():
    return {
        "startTime": None,
        "currentNote": None,
        **_SETTINGS_DEFAULTS,
        "timeTracking": {},
    }

# The three table/section headers used when writing a log entry. Swapped out wholesale on edit, never mutated.
@dataclass(frozen=True)
class LogSettings:
    date_header: str = _SETTINGS_DEFAULTS["dateHeader"]
    duration_header: str = _SETTINGS_DEFAULTS["durationHeader"]
    log_section_header: str = _SETTINGS_DEFAULTS["logSectionHeader"]

    @staticmethod
    def from_state(state):
        return LogSettings(
            date_header = state["dateHeader"],
            duration_header = state["durationHeader"],
            log_section_header = state["logSectionHeader"],
        )

def tracking_from_state(state):
    return TrackingState(
        start_time = state["startTime"],
        document_id = state["currentNote"],
        ledger = dict(state["timeTracking"]),
    )

# Flattens the in-memory settings + tracking state back into the persisted dict layout.
def build_state_dict(settings, tracking):
    return {
        "startTime": tracking.start_time,
        "currentNote": tracking.document_id,
        "dateHeader": settings.date_header,
        "durationHeader": settings.duration_header,
        "logSectionHeader": settings.log_section_header,
        "timeTracking": dict(tracking.ledger),
    }

# json.load happily returns NaN and Infinity, which can never be a timestamp or a duration.
def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)

#endregion === Helpers and Paths ===

#region === Saving and Loading State ===

# Loads state.json from PATHS.current, merging it over the defaults. Anything missing or of the wrong type is
# defaulted (and logged), so callers can always index every key.
def load_state():
    try:
        if not STATE_PATH.exists():
            log.info("No existing state.json found in `current`, loading fresh state dict.")
            return build_default_state()

        with open(STATE_PATH, "r", encoding="utf-8") as f:
            loaded = json.load(f)
        if not isinstance(loaded, dict):
            raise TypeError(f"Expected a JSON object in '{STATE_PATH}', got {type(loaded).__name__}")

        state = build_default_state()
        defaulted_values = set()

        # Header strings
        for key in _SETTINGS_DEFAULTS:
            if key in loaded and isinstance(loaded[key], str):
                state[key] = loaded[key]
            else:
                defaulted_values.add(key)

        # Running session
        start_time = loaded.get("startTime")
        if start_time is None or _is_number(start_time):
            state["startTime"] = None if start_time is None else int(start_time)
        else:
            defaulted_values.add("startTime")
        current_note = loaded.get("currentNote")
        if current_note is None or isinstance(current_note, str):
            state["currentNote"] = current_note or None
        else:
            defaulted_values.add("currentNote")
        # A half-present session can't be resumed, so both halves get dropped.
        if (state["startTime"] is None) != (state["currentNote"] is None):
            log.warning(f"Found an incomplete tracking session in '{STATE_PATH}' (startTime={state['startTime']}, currentNote={state['currentNote']}), discarding it.")
            state["startTime"] = None
            state["currentNote"] = None

        # Ledger
        if "timeTracking" not in loaded or not isinstance(loaded["timeTracking"], dict):
            defaulted_values.add("timeTracking")
        else:
            for path, total in loaded["timeTracking"].items():
                if _is_number(total) and total >= 0:
                    state["timeTracking"][path] = int(total)
                else:
                    defaulted_values.add(f"timeTracking.{path}")

        if defaulted_values:
            log.warning(f"Successfully loaded current state dict from '{STATE_PATH}', but with missing values that were defaulted: {', '.join(sorted(defaulted_values))}")
        else:
            log.info(f"Successfully loaded current state dict from '{STATE_PATH}'.")
        return state
    # Fall back to a fresh state dict in case of error, but warn in log
    except (json.JSONDecodeError, OSError, TypeError):
        log.warning("Ran into an error while trying to load state.json, falling back to loading a fresh state dict.",exc_info=True)
        return build_default_state()

# Write the given state to disk under PATHS.current / state.json
def save_state(state):
    STATE_PATH.parent.mkdir(parents=True, exist_ok=True)
    with open(STATE_PATH, "w", encoding="utf-8") as f:
        json.dump(state, f, indent=2)
    log.info(f"Successfully saved state to '{STATE_PATH}'")

#endregion === Saving and Loading State ===
