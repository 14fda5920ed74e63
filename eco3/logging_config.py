"""
eco3 Logging Configuration

Every eco3 logger is a child of the ``eco3`` logger, which owns the single
stdout handler. Context passed as keyword arguments ends up as JSON keys
(or ``key=value`` pairs in text mode).
"""
import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Dict, Optional

LOG_LEVEL = os.environ.get("ECO3_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.environ.get("ECO3_LOG_FORMAT", "json")  # json or text

ROOT_LOGGER = "eco3"


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================
# FORMATTERS
# ============================================================

class StructuredFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": _now().isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(getattr(record, "context", {}))
        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Readable single-line output, colored when writing to a terminal."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, color: bool = False):
        super().__init__()
        self.color = color

    def _paint(self, code: str, text: str) -> str:
        return f"{code}{text}{self.RESET}" if self.color else text

    def format(self, record: logging.LogRecord) -> str:
        head = self._paint(
            self.COLORS.get(record.levelname, ""),
            f"[{_now().strftime('%H:%M:%S')}] [{record.levelname}]",
        )
        line = f"{head} {record.name}: {record.getMessage()}"

        context = getattr(record, "context", {})
        pairs = " ".join(f"{k}={v}" for k, v in context.items() if k != "traceback")
        if pairs:
            line += " " + self._paint("\033[90m", f"({pairs})")
        return line


def configure_logging(level: str = LOG_LEVEL, fmt: str = LOG_FORMAT) -> logging.Logger:
    """Attach the stdout handler to the ``eco3`` logger, replacing any earlier one."""
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.propagate = False

    handler = logging.StreamHandler(sys.stdout)
    if fmt == "json":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(TextFormatter(color=sys.stdout.isatty()))
    root.handlers = [handler]
    return root


# ============================================================
# STRUCTURED LOGGER
# ============================================================

class StructuredLogger:
    """Thin wrapper taking context as keyword arguments."""

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(name)

    def _log(self, level: int, message: str, context: Dict):
        if self.logger.isEnabledFor(level):
            self.logger.log(level, message, extra={"context": context})

    def debug(self, message: str, **context):
        self._log(logging.DEBUG, message, context)

    def info(self, message: str, **context):
        self._log(logging.INFO, message, context)

    def warning(self, message: str, **context):
        self._log(logging.WARNING, message, context)

    def error(self, message: str, error: Optional[BaseException] = None, **context):
        if error is not None:
            context["error_type"] = type(error).__name__
            context["error_message"] = str(error)
            context["traceback"] = "".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            )
        self._log(logging.ERROR, message, context)


configure_logging()

_loggers: Dict[str, StructuredLogger] = {}


def get_logger(name: str) -> StructuredLogger:
    """Logger ``eco3.<name>``, created once per name."""
    full_name = f"{ROOT_LOGGER}.{name}"
    if full_name not in _loggers:
        _loggers[full_name] = StructuredLogger(full_name)
    return _loggers[full_name]


api_logger = get_logger("api")
auth_logger = get_logger("auth")
db_logger = get_logger("db")
events_logger = get_logger("events")
