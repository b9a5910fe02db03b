"""
tilekinds logging setup.

Classification runs over millions of features, so log lines carry the
feature they are about. Pass context through `extra`:

    logger = get_logger(__name__)
    logger.warning("Area calculation failed", extra={"feature_id": 123, "layer": "water"})

Console lines get the context appended as `[feature_id=123, layer=water]`;
the optional log file gets one JSON object per record.

Level comes from TILEKINDS_LOG_LEVEL (default INFO). Nothing is configured
on import; applications call `ensure_logging()` once.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union


DEFAULT_LOG_LEVEL = os.environ.get("TILEKINDS_LOG_LEVEL", "INFO").upper()

# Record attributes reported when a caller passes them in `extra`
CONTEXT_KEYS = ("feature_id", "layer", "source", "source_layer")

# Third-party loggers that are only interesting when something breaks
QUIET_LOGGERS = ("pyproj", "shapely")


def record_context(record: logging.LogRecord) -> dict:
    return {key: getattr(record, key) for key in CONTEXT_KEYS if hasattr(record, key)}


class TilekindsFormatter(logging.Formatter):
    """Console formatter: timestamp, level, logger, message, then context."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        super().__init__(
            fmt="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = record_context(record)
        if context:
            line += " [" + ", ".join(f"{k}={v}" for k, v in context.items()) + "]"

        color = self.LEVEL_COLORS.get(record.levelno) if self.use_colors else None
        return f"{color}{line}{self.RESET}" if color else line


class FileFormatter(logging.Formatter):
    """One JSON object per line, for grepping and loading into dataframes."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_context(record),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(
    level: str = DEFAULT_LOG_LEVEL,
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    """
    Configure the root logger.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ...)
        log_file: Also write every record, at DEBUG, to this file
    """
    root = logging.getLogger()
    console_level = getattr(logging, level.upper(), logging.INFO)

    root.handlers.clear()

    # stderr, so `classify --json` output on stdout stays parseable
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(TilekindsFormatter())
    console.setLevel(console_level)
    root.addHandler(console)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(FileFormatter())
        file_handler.setLevel(logging.DEBUG)
        root.addHandler(file_handler)
        root.setLevel(logging.DEBUG)
    else:
        root.setLevel(console_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


_configured = False


def ensure_logging(level: Optional[str] = None, log_file: Optional[Union[str, Path]] = None) -> None:
    """Configure logging on first call; later calls do nothing."""
    global _configured
    if _configured:
        return
    setup_logging(level or DEFAULT_LOG_LEVEL, log_file)
    _configured = True
