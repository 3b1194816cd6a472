"""
LTL Core Logging and Monitoring - Structured Logging

This module configures the standard library logging for the command line
and the HTTP service: a coloured console formatter, a JSON formatter for
machine-readable logs, and a timing context manager used around the
conversion stages.
"""

from __future__ import annotations
import sys
import json
import time
import logging
from pathlib import Path
from typing import Dict, Optional, Any, Union, Iterator
from datetime import datetime
from enum import Enum
from contextlib import contextmanager


class LogLevel(Enum):
    """Log levels"""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def from_name(cls, name: Union[str, int]) -> "LogLevel":
        """Resolve a level from its name or numeric value"""
        if isinstance(name, int):
            return cls(name)
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown log level: {name}")


class StructuredFormatter(logging.Formatter):
    """Formatter for structured JSON logging"""

    def __init__(self, include_context: bool = True):
        super().__init__()
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON"""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info)
            }

        if self.include_context and hasattr(record, "context"):
            log_data["context"] = record.context

        if hasattr(record, "duration_ms"):
            log_data["duration_ms"] = record.duration_ms

        return json.dumps(log_data)


class ConsoleFormatter(logging.Formatter):
    """Formatter for console output with colors"""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
        "RESET": "\033[0m"
    }

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for console"""
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname

        if self.use_colors:
            color = self.COLORS.get(level, "")
            reset = self.COLORS["RESET"]
            level_str = f"{color}{level:8}{reset}"
        else:
            level_str = f"{level:8}"

        message = f"{timestamp} | {level_str} | {record.name} | {record.getMessage()}"

        if hasattr(record, "duration_ms"):
            message += f" ({record.duration_ms:.1f} ms)"

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message


def setup_logging(
    level: Union[str, int] = "INFO",
    json_format: bool = False,
    log_file: Optional[Union[str, Path]] = None
) -> logging.Logger:
    """Install console (and optional file) handlers on the root logger"""
    root = logging.getLogger()
    root.setLevel(LogLevel.from_name(level).value)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    formatter: logging.Formatter = StructuredFormatter() if json_format else ConsoleFormatter()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(StructuredFormatter())
        root.addHandler(file_handler)

    return root


@contextmanager
def timed(
    operation: str,
    log: Optional[logging.Logger] = None,
    level: LogLevel = LogLevel.DEBUG
) -> Iterator[Dict[str, float]]:
    """
    Context manager for timing operations.

    Yields a dictionary that receives ``duration_ms`` when the block exits,
    so callers can report the timing themselves.
    """
    log = log or logging.getLogger(__name__)
    timing: Dict[str, float] = {}
    start_time = time.perf_counter()
    log.log(level.value, f"Starting: {operation}")

    try:
        yield timing
    except Exception as e:
        timing["duration_ms"] = (time.perf_counter() - start_time) * 1000
        log.error(
            f"Failed: {operation} - {e}",
            extra={"duration_ms": timing["duration_ms"]}
        )
        raise

    timing["duration_ms"] = (time.perf_counter() - start_time) * 1000
    log.log(
        level.value,
        f"Completed: {operation}",
        extra={"duration_ms": timing["duration_ms"]}
    )
