import os
import sys
from pathlib import Path
from dataclasses import dataclass

# Lil helper function to create missing directories if missing, and optionally error out when a path
# doesn't exist.
def ensure_directory(path: Path,must_exist=False):
    if must_exist:
        if not path.exists():
            raise FileNotFoundError(f"Required directory is missing: {path}")
        if not path.is_dir():
            raise NotADirectoryError(f"Expected a directory, got a file: {path}")
    else:
        path.mkdir(parents=True,exist_ok=True)
    return path

# Picks the per-user data folder. TIMETRACKER_HOME always wins, otherwise we follow the platform convention
# (APPDATA on Windows, XDG data home everywhere else).
def _resolve_data_dir() -> Path:
    override = os.getenv("TIMETRACKER_HOME")
    if override:
        return Path(override).expanduser()

    if sys.platform.startswith("win"):
        appdata = os.getenv("APPDATA")
        if not appdata:
            raise RuntimeError("Missing APPDATA environment variable, cannot determine data directories.")
        return Path(appdata) / "NoteTimeTracker"

    xdg = os.getenv("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(xdg) / "note-time-tracker"

# Dataclass for accessing paths across program.
@dataclass(frozen=False)
class ProjectPaths:

    data: Path
    logs: Path
    current: Path

    @staticmethod
    def build():
        # Folder for all user-specific state and logs
        data = ensure_directory(_resolve_data_dir())

        # Folders within the data folder
        logs = ensure_directory(data / "logs")
        current = ensure_directory(data / "current")

        return ProjectPaths(
            data = data,
            logs = logs,
            current = current,
        )
PATHS = ProjectPaths.build()
