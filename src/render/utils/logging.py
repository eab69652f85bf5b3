"""Logging for the render CLI.

Everything is logged through the ``render`` logger to stderr; stdout is
left to rendered templates, variables and configuration. Line formats:

    human     [WARNING] message
    verbose   [DEBUG][14:03:07] message
    json      {"level": "ERROR", "ts": "...", "logger": "render.config", "msg": "..."}

Core modules only log at DEBUG. The CLI reports failures once, at ERROR.
"""

import json
import logging
import sys
from collections.abc import Callable
from datetime import UTC, datetime
from enum import Enum
from typing import Any, TextIO

LOGGER_NAME = "render"

_RESET = "\033[0m"
_LEVEL_ANSI = {
    logging.DEBUG: "\033[90m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[31m",
}


class LogMode(Enum):
    """Log line format."""

    HUMAN = "human"
    VERBOSE = "verbose"
    JSON = "json"


def _is_tty(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class HumanFormatter(logging.Formatter):
    """``[LEVEL] message``, with the level tag colored on terminals."""

    timestamps = False

    def __init__(self, colors: bool = False) -> None:
        super().__init__()
        self.colors = colors

    def tag(self, record: logging.LogRecord) -> str:
        tag = f"[{record.levelname}]"
        if self.timestamps:
            tag += datetime.fromtimestamp(record.created).strftime("[%H:%M:%S]")
        if not self.colors:
            return tag
        return f"{_LEVEL_ANSI.get(record.levelno, _RESET)}{tag}{_RESET}"

    def format(self, record: logging.LogRecord) -> str:
        text = f"{self.tag(record)} {record.getMessage()}"
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


class VerboseFormatter(HumanFormatter):
    """``[LEVEL][HH:MM:SS] message``."""

    timestamps = True


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for CI logs."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "level": record.levelname,
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry)


_FORMATTERS: dict[LogMode, Callable[[bool], logging.Formatter]] = {
    LogMode.HUMAN: HumanFormatter,
    LogMode.VERBOSE: VerboseFormatter,
    LogMode.JSON: lambda colors: JSONFormatter(),
}


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Get the package logger or one of its children (``render.config``)."""
    return logging.getLogger(name)


def setup_logging(
    mode: LogMode = LogMode.HUMAN,
    level: int = logging.INFO,
    stream: TextIO | None = None,
) -> None:
    """Send the package logger's records to a single stream handler.

    Calling it again replaces the previous handler.

    Args:
        mode: Line format
        level: Minimum level
        stream: Destination, stderr when omitted
    """
    stream = stream or sys.stderr
    handler = logging.StreamHandler(stream)
    handler.setFormatter(_FORMATTERS[mode](_is_tty(stream)))

    logger = get_logger()
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


def configure_from_cli(
    verbose: bool = False,
    quiet: bool = False,
    ci: bool = False,
) -> None:
    """Set up logging from the ``--verbose``, ``--quiet`` and ``--ci`` flags.

    ``--ci`` picks JSON lines and ``--verbose`` adds timestamps.
    ``--quiet`` wins over ``--verbose`` for the level: only errors are shown.
    """
    mode = LogMode.JSON if ci else LogMode.VERBOSE if verbose else LogMode.HUMAN
    if quiet:
        level = logging.ERROR
    else:
        level = logging.DEBUG if verbose else logging.WARNING
    setup_logging(mode=mode, level=level)
