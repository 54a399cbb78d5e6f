"""
Logging configuration — central setup for the bring-up entrypoint.

Called once at startup by main.py, after arguments are validated. Every
module that does ``logger = logging.getLogger(__name__)`` inherits this
config.

Console level is resolved in precedence order:
    --debug flag  >  GPU_BRINGUP_LOG_LEVEL env var  >  INFO (default)

The log file duplicates everything shown on the console, in append mode,
plus DEBUG-level command transcripts.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from gpu_bringup.core.context import get_stage

# ── Format strings ──────────────────────────────────────────────

# INFO level — stage-labelled, no timestamps (callers add their own)
_FMT_CONSOLE = "[%(stage)s] %(message)s"

# DEBUG level — full diagnostic with file:line
_FMT_DEBUG = "%(asctime)s %(levelname)-5s [%(stage)s] %(name)s:%(lineno)d — %(message)s"
_DATEFMT_DEBUG = "%H:%M:%S"

# File output — always full detail
_FMT_FILE = "%(asctime)s %(levelname)-5s [%(stage)s] %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"


class StageFilter(logging.Filter):
    """Stamp every record with the pipeline stage that produced it."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "stage"):
            record.stage = get_stage()
        return True


def setup_logging(
    level: str = "INFO",
    log_file: str | Path | None = None,
) -> None:
    """Configure Python logging for the entire process.

    Args:
        level: Console log level name (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional path to the append-mode log file. Missing
            parent directories are created. The file always records
            DEBUG so it carries the command transcripts.
    """
    numeric_level = _parse_level(level, default=logging.INFO)
    stage_filter = StageFilter()

    # ── Console handler (stderr) ────────────────────────────────
    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT_DEBUG
    else:
        fmt, datefmt = _FMT_CONSOLE, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    console.addFilter(stage_filter)

    # ── Root logger ─────────────────────────────────────────────
    root = logging.getLogger()
    for handler in root.handlers:
        if isinstance(handler, logging.FileHandler):
            handler.close()
    root.handlers.clear()
    root.addHandler(console)

    # File records DEBUG, so the root must pass DEBUG when there is one
    effective_level = numeric_level

    # ── File handler (optional) ─────────────────────────────────
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        effective_level = logging.DEBUG

        fh = logging.FileHandler(path, mode="a", encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        fh.addFilter(stage_filter)
        root.addHandler(fh)

    root.setLevel(effective_level)

    # Don't propagate exceptions from logging itself
    logging.raiseExceptions = False


def _parse_level(level: str | None, default: int = logging.WARNING) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return default
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return default
    return numeric
