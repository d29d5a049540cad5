from __future__ import annotations
import logging
import sys
import json
from typing import Any, Dict, Optional, TextIO
from datetime import datetime, timezone
from pathlib import Path

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
CONSOLE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Chatty third-party loggers pinned to WARNING
QUIET_LOGGERS = ("urllib3", "requests")

# Attributes every LogRecord carries; anything else arrived via ``extra=``
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with ``extra=`` fields merged in."""

    def __init__(self, service_name: str = "docdesk"):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, timezone.utc)
        entry: Dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        entry.update(
            (key, value) for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class ColoredFormatter(logging.Formatter):
    """Pipe-separated console lines, tinted by level when colors are on."""

    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',
        logging.INFO: '\033[32m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
        logging.CRITICAL: '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True):
        super().__init__(CONSOLE_FORMAT, CONSOLE_DATEFMT)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelno) if self.use_colors else None
        if not color:
            return line
        # Tint the header line only; tracebacks stay plain
        head, sep, tail = line.partition("\n")
        return f"{color}{head}{self.RESET}{sep}{tail}"


def _console_handler(stream: TextIO, level: int, service_name: str,
                     use_json: bool, use_colors: Optional[bool]) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    if use_json:
        handler.setFormatter(JSONFormatter(service_name))
    else:
        if use_colors is None:
            use_colors = hasattr(stream, "isatty") and stream.isatty()
        handler.setFormatter(ColoredFormatter(use_colors))
    return handler


def setup_logging(
    level: str = "INFO",
    service_name: str = "docdesk",
    log_file: Optional[str] = None,
    use_json: bool = False,
    use_colors: Optional[bool] = None
) -> None:
    """Configure the root logger for the server process.

    Console output goes to stderr, never stdout: when serving over stdio,
    stdout carries nothing but JSON-RPC responses.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        service_name: ``service`` field of JSON records
        log_file: Optional path that additionally receives JSON records
        use_json: JSON records on the console instead of colored lines
        use_colors: Force colors on or off; by default only on a tty
    """
    numeric_level = logging.getLevelName(str(level).upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handlers = [_console_handler(sys.stderr, numeric_level, service_name, use_json, use_colors)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(JSONFormatter(service_name))
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(numeric_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
