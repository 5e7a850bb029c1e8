import logging
import os
from pathlib import Path
from logging.handlers import RotatingFileHandler
from tt.common.setup import PATHS
from datetime import datetime

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Environment overrides for the shared `log` instance, e.g. TIMETRACKER_LOG_LEVEL=INFO TIMETRACKER_LOG_CONSOLE=1
LEVEL_ENV = "TIMETRACKER_LOG_LEVEL"
CONSOLE_ENV = "TIMETRACKER_LOG_CONSOLE"

# Reads a level name ("debug", "INFO", ...) from the environment, falling back to `default` when unset or unknown.
def level_from_env(default=logging.DEBUG, env=None):
    env = os.environ if env is None else env
    raw = env.get(LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(raw) if raw else default
    return level if isinstance(level, int) else default

def console_from_env(env=None):
    env = os.environ if env is None else env
    return env.get(CONSOLE_ENV, "").strip().lower() in ("1", "true", "yes", "on")

# Deletes all but the newest `keep` per-run debug logs for `name` in `debug_dir`. Returns how many were removed.
def prune_debug_runs(debug_dir: Path, name, keep):
    runs = sorted(debug_dir.glob(f"{name}_*.log"),key=lambda p: p.stat().st_mtime,reverse=True)
    removed = 0
    for run in runs[keep:]:
        try:
            run.unlink()
            removed += 1
        except OSError:
            pass
    return removed

# Attaches the handler built by `factory` under `handler_name`, unless the logger already carries one by that name.
def _attach(logger, handler_name, factory, level, fmt):
    if any(h.get_name() == handler_name for h in logger.handlers):
        return False
    handler = factory()
    handler.setLevel(level)
    handler.setFormatter(fmt)
    handler.set_name(handler_name)
    logger.addHandler(handler)
    return True

def get_logger(
        name = "timetracker",
        level = logging.INFO,
        log_dir: Path | None = None,
        max_bytes = 5 * 1024 * 1024,
        backup_count = 5,
        persistent = True,
        console = False,
        historical_debugs: int = 10
) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(min(level, logging.DEBUG) if historical_debugs > 0 else level)

    log_dir = log_dir or PATHS.logs
    log_dir.mkdir(parents=True,exist_ok=True)
    fmt = logging.Formatter(LOG_FORMAT,LOG_DATE_FORMAT)

    # Rotating log that survives across runs
    if persistent:
        _attach(logger, f"{name}:persistent", lambda: RotatingFileHandler(
            filename=log_dir / f"{name}.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        ), level, fmt)

    # latest.log only ever holds the current run
    _attach(logger, f"{name}:latest", lambda: logging.FileHandler(
        filename=log_dir / "latest.log", mode="w", encoding="utf-8"), level, fmt)

    # One full debug log per run, keeping only the newest `historical_debugs` of them
    if historical_debugs > 0:
        debug_dir = log_dir / "debug"
        debug_dir.mkdir(parents=True,exist_ok=True)
        this_run_path = debug_dir / f"{name}_{datetime.now():%Y-%m-%d_%H-%M-%S}.log"
        if _attach(logger, f"{name}:historical_debug", lambda: logging.FileHandler(
                filename=this_run_path, encoding="utf-8"), logging.DEBUG, fmt):
            prune_debug_runs(debug_dir, name, historical_debugs)

    if console:
        _attach(logger, f"{name}:console", logging.StreamHandler, level, fmt)

    return logger

log = get_logger(level=level_from_env(),console=console_from_env(),historical_debugs=10)
