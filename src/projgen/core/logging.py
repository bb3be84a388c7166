"""
projgen Logging Infrastructure.

Two output styles for the ``projgen`` logger hierarchy:
- Console: human readable, colored unless NO_COLOR is set or stderr is not a TTY
- JSONL (--log-json): one JSON object per line for machine consumption

Log records go to stderr so command output on stdout (JSON/YAML) stays
parseable. Structured data travels in the ``context`` extra:

    log_with_context(logger, logging.INFO, "Starting command", command="generate")
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import UTC, datetime
from typing import Any

ROOT_LOGGER = "projgen"

# --log-level values -> stdlib levels
LOG_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
}


# =============================================================================
# Terminal Colors (respects NO_COLOR)
# =============================================================================


def _use_color() -> bool:
    return not os.environ.get("NO_COLOR") and sys.stderr.isatty()


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    DIM = "\033[2m"

    DEBUG = "\033[36m"  # Cyan
    INFO = "\033[32m"  # Green
    WARNING = "\033[33m"  # Yellow
    ERROR = "\033[31m"  # Red
    CRITICAL = "\033[35m"  # Magenta


# =============================================================================
# Formatters
# =============================================================================


class JSONLFormatter(logging.Formatter):
    """
    Formats log records as JSON Lines.

    Each entry contains:
    - timestamp: ISO 8601 (UTC)
    - level: DEBUG, INFO, WARNING, ERROR, CRITICAL
    - logger: Logger name
    - message: The log message
    - context: Structured data (optional)
    - source: file/line/function (when caller info is enabled)

    Example output:
    {"timestamp":"2026-01-15T10:30:45.123000Z","level":"INFO","logger":"projgen.cli","message":"Starting command","context":{"command":"generate"}}
    """

    def __init__(self, include_caller: bool = False):
        super().__init__()
        self.include_caller = include_caller

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = getattr(record, "context", None)
        if context:
            entry["context"] = context

        if self.include_caller:
            entry["source"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info and record.exc_info[0]:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
            }

        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for console output."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.DEBUG,
        logging.INFO: Colors.INFO,
        logging.WARNING: Colors.WARNING,
        logging.ERROR: Colors.ERROR,
        logging.CRITICAL: Colors.CRITICAL,
    }

    def __init__(self, include_caller: bool = False, color: bool | None = None):
        super().__init__()
        self.include_caller = include_caller
        self.color = _use_color() if color is None else color

    def format(self, record: logging.LogRecord) -> str:
        level_name = record.levelname
        if self.color:
            level_name = f"{self.LEVEL_COLORS.get(record.levelno, '')}{level_name}{Colors.RESET}"

        prefix = f"{level_name}:"
        if self.include_caller:
            caller = f"{os.path.basename(record.pathname)}:{record.lineno}"
            if self.color:
                caller = f"{Colors.DIM}{caller}{Colors.RESET}"
            prefix = f"{prefix} {caller}"

        message = f"{prefix} {record.getMessage()}"

        context = getattr(record, "context", None)
        if context:
            pairs = " ".join(f"{key}={value}" for key, value in context.items())
            message = f"{message} ({pairs})"

        return message


# =============================================================================
# Logger Setup
# =============================================================================


class StderrHandler(logging.StreamHandler):
    """StreamHandler bound to whatever sys.stderr currently is."""

    def __init__(self) -> None:
        super().__init__(sys.stderr)

    @property  # type: ignore[override]
    def stream(self) -> Any:
        return sys.stderr

    @stream.setter
    def stream(self, value: Any) -> None:
        pass


def configure_logging(
    level: str = "info", json_output: bool = False, caller: bool = False
) -> logging.Logger:
    """
    Configure the ``projgen`` logger for this invocation.

    Replaces any handler installed by a previous call, so repeated CLI
    invocations in one process (tests) do not stack handlers.

    Args:
        level: One of debug, info, warn, error, fatal
        json_output: Emit JSON lines instead of console text
        caller: Include source file/line in each record

    Returns:
        The configured root projgen logger
    """
    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(LOG_LEVELS.get(level, logging.INFO))

    for handler in list(root_logger.handlers):
        if getattr(handler, "_projgen_handler", False):
            root_logger.removeHandler(handler)

    handler = StderrHandler()
    if json_output:
        handler.setFormatter(JSONLFormatter(include_caller=caller))
    else:
        handler.setFormatter(ConsoleFormatter(include_caller=caller))
    handler._projgen_handler = True  # type: ignore[attr-defined]
    root_logger.addHandler(handler)

    return root_logger


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    context: dict[str, Any] | None = None,
    **kwargs: Any,
) -> None:
    """
    Log a message with structured context data.

    Args:
        logger: Logger instance
        level: Logging level (logging.INFO, logging.ERROR, etc.)
        message: Human-readable message
        context: Structured context data (included in JSONL output)
        **kwargs: Additional context items
    """
    extra = {"context": {**(context or {}), **kwargs}} if (context or kwargs) else {}
    logger.log(level, message, extra=extra)
