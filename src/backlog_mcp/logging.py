"""Structured JSON logging for backlog-mcp.

Writes JSONL to ``<log_dir>/backlog-mcp.log`` with rotation (5MB, 3 backups),
or to stderr when no directory is configured.  stdout is never used: it
carries the MCP stdio transport.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

LOGGER_NAME = "backlog_mcp"
_LOG_FILENAME = "backlog-mcp.log"
_setup_lock = threading.Lock()
_MAX_BYTES = 5 * 1024 * 1024  # 5MB
_BACKUP_COUNT = 3
_EXTRA_FIELDS = (
    ("tool", "tool"),
    ("args_data", "args"),
    ("duration_ms", "duration_ms"),
    ("uri", "uri"),
    ("prompt", "prompt"),
    ("error", "error"),
)


class _JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for attr, key in _EXTRA_FIELDS:
            if hasattr(record, attr):
                entry[key] = getattr(record, attr)
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = str(record.exc_info[1])
        return json.dumps(entry, default=str)


def _is_stderr_handler(handler: logging.Handler) -> bool:
    return type(handler) is logging.StreamHandler and getattr(handler, "stream", None) is sys.stderr


def setup_logging(log_dir: Path | None = None, *, level: int = logging.INFO) -> logging.Logger:
    """Attach a JSON handler to the ``backlog_mcp`` logger and return it.

    Idempotent: repeated calls with the same target reuse the existing
    handler; switching targets replaces it.
    """
    logger = logging.getLogger(LOGGER_NAME)

    with _setup_lock:
        if log_dir is None:
            for h in logger.handlers[:]:
                if _is_stderr_handler(h):
                    return logger
                logger.removeHandler(h)
                h.close()
            handler: logging.Handler = logging.StreamHandler(sys.stderr)
        else:
            target_filename = os.path.abspath(str(log_dir / _LOG_FILENAME))
            for h in logger.handlers[:]:
                if isinstance(h, RotatingFileHandler) and h.baseFilename == target_filename:
                    return logger
                # Different target: drop the stale handler.
                logger.removeHandler(h)
                h.close()
            log_dir.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                target_filename,
                maxBytes=_MAX_BYTES,
                backupCount=_BACKUP_COUNT,
            )

        handler.setFormatter(_JsonFormatter())
        logger.addHandler(handler)
        logger.setLevel(level)
    return logger
