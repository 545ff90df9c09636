# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Structured JSON logger for binship.

Every log entry is one JSON object on one line: timestamp, level, logger name,
message, plus whatever structured context the caller passes through `extra`.
A release run leaves a machine-readable trail (which target was built, which
package was published with which command) that CI can grep or ingest.

How this works:
  - All loggers live under the "binship" namespace. Module loggers obtained
    through get_logger() carry no handlers of their own and propagate up to
    the "binship" logger, which owns the single stdout handler (and an
    optional file handler).
  - set_log_level() changes the threshold for the whole namespace at once,
    which is how the CLI's --log-level reaches loggers created at import time.

The JSON structure looks like:
  {"ts": "2026-...", "level": "INFO", "module": "binship.build.orchestrator", "msg": "Build finished", ...}
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "binship"

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

# LogRecord attributes that are bookkeeping, not caller context.
_STANDARD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "relativeCreated",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "pathname",
        "filename",
        "module",
        "levelno",
        "levelname",
        "processName",
        "process",
        "threadName",
        "thread",
        "message",
        "msecs",
        "taskName",
    }
)


class JsonFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Mandatory fields: ts (ISO 8601 UTC), level, module (logger name), msg.
    Anything passed via `extra=` is merged in as additional keys. When the
    record carries an exception, its formatted traceback goes under "exc".
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                entry[key] = value

        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class _StdoutHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """
    Stream handler bound to whatever sys.stdout is at emit time.

    A plain StreamHandler captures sys.stdout once at construction, which goes
    stale when stdout is swapped later (pytest's capsys, redirect_stdout).
    """

    @property  # type: ignore[override]
    def stream(self):  # type: ignore[no-untyped-def]
        return sys.stdout

    @stream.setter
    def stream(self, value) -> None:  # type: ignore[no-untyped-def]
        pass


def _resolve_log_level(level_name: str) -> int:
    """Turn a level name string into the corresponding logging constant."""
    upper = level_name.upper()
    if upper not in _VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level '{level_name}'. Must be one of: {', '.join(sorted(_VALID_LOG_LEVELS))}"
        )
    return getattr(logging, upper)


def _root_logger() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not any(isinstance(h, _StdoutHandler) for h in root.handlers):
        handler = _StdoutHandler()
        handler.setFormatter(JsonFormatter())
        root.addHandler(handler)
        root.setLevel(logging.INFO)
        # Don't propagate to the interpreter's root logger, we own the output.
        root.propagate = False
    return root


def set_log_level(log_level: str, log_file: Optional[Path] = None) -> None:
    """
    Set the threshold for every binship logger and optionally tee to a file.

    Args:
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
        log_file: If given, JSON lines are also appended to this file.

    Raises:
        ValueError: For an unknown level name.
    """
    level = _resolve_log_level(log_level)
    root = _root_logger()
    root.setLevel(level)

    if log_file is not None:
        target = str(log_file.resolve())
        already = any(
            isinstance(h, logging.FileHandler) and h.baseFilename == target
            for h in root.handlers
        )
        if not already:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(target, encoding="utf-8")
            file_handler.setFormatter(JsonFormatter())
            root.addHandler(file_handler)


def get_logger(name: str, log_level: Optional[str] = None) -> logging.Logger:
    """
    Return a structured JSON logger in the binship namespace.

    This is the only sanctioned way to get a logger in binship. Modules call
    it once at import time with __name__. Names outside the namespace are
    nested under it so their output still goes through the JSON handler.

    Args:
        name: Logger name, typically __name__ of the calling module.
        log_level: Optional level for the whole namespace (see set_log_level).

    Returns:
        A logging.Logger that outputs structured JSON.
    """
    _root_logger()
    if log_level is not None:
        set_log_level(log_level)

    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
