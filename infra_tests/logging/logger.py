"""Lifecycle event logging for acceptance runs.

Every Terraform step and every test case emits a named event (for example
``terraform.apply`` or ``case.completed``) with a small data payload. Events
go to the console while developing and to a JSON-lines file when cases run
in parallel under pytest-xdist, where console output would interleave.
"""

import json
import os
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from infra_tests.config import Settings


class LogLevel(str, Enum):
    """Log severity levels."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return list(LogLevel).index(self)


@dataclass
class EventRecord:
    """One emitted event."""
    level: LogLevel
    event: str
    message: str = ""
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)
    # pytest-xdist sets this in every worker process (gw0, gw1, ...)
    worker: Optional[str] = field(default_factory=lambda: os.environ.get("PYTEST_XDIST_WORKER"))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary."""
        entry = {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.value,
            "event": self.event,
            "message": self.message,
        }
        if self.worker:
            entry["worker"] = self.worker
        if self.data:
            entry["data"] = self.data
        return entry


class Logger(ABC):
    """Base class for event loggers; filters by level, subclasses emit."""

    def __init__(self, min_level: LogLevel = LogLevel.INFO):
        self.min_level = min_level

    def log(
        self,
        level: LogLevel,
        event: str,
        message: str = "",
        data: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Log an event with optional data.

        Args:
            level: Log severity level
            event: Dotted event name (e.g. "terraform.destroy")
            message: Human-readable message
            data: Optional metadata dictionary
        """
        if level.rank < self.min_level.rank:
            return
        self.emit(EventRecord(level=level, event=event, message=message, data=dict(data or {})))

    @abstractmethod
    def emit(self, record: EventRecord) -> None:
        """Write a record that passed the level filter."""

    def debug(self, event: str, message: str = "", data: Optional[Dict[str, Any]] = None) -> None:
        self.log(LogLevel.DEBUG, event, message, data)

    def info(self, event: str, message: str = "", data: Optional[Dict[str, Any]] = None) -> None:
        self.log(LogLevel.INFO, event, message, data)

    def warning(self, event: str, message: str = "", data: Optional[Dict[str, Any]] = None) -> None:
        self.log(LogLevel.WARNING, event, message, data)

    def error(self, event: str, message: str = "", data: Optional[Dict[str, Any]] = None) -> None:
        self.log(LogLevel.ERROR, event, message, data)

    def critical(self, event: str, message: str = "", data: Optional[Dict[str, Any]] = None) -> None:
        self.log(LogLevel.CRITICAL, event, message, data)


class ConsoleLogger(Logger):
    """Console logger; case boundaries are framed, everything else is one line."""

    COLORS = {
        LogLevel.DEBUG: "\033[36m",
        LogLevel.INFO: "\033[32m",
        LogLevel.WARNING: "\033[33m",
        LogLevel.ERROR: "\033[31m",
        LogLevel.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    ICONS = {
        "terraform.init": "📦",
        "terraform.apply": "🚀",
        "terraform.retry": "🔄",
        "terraform.destroy": "🧹",
        "cleanup.skipped": "⏭️",
        "cleanup.failed": "⚠️",
    }

    # Shown in this order after the message
    SUMMARY_KEYS = ("module", "attempt", "max_retries", "duration_seconds", "success")

    RULE_WIDTH = 70

    def __init__(
        self,
        min_level: LogLevel = LogLevel.INFO,
        colored: bool = True,
        show_timestamp: bool = False,
        show_data: bool = True,
        stream=None,
    ):
        """
        Initialize console logger.

        Args:
            min_level: Minimum log level to display
            colored: Use ANSI colors (only honored on a TTY)
            show_timestamp: Prefix lines with the time of day
            show_data: Append the summary keys of the event data
            stream: Output stream (defaults to stdout)
        """
        super().__init__(min_level)
        self.stream = stream or sys.stdout
        self.colored = colored and hasattr(self.stream, "isatty") and self.stream.isatty()
        self.show_timestamp = show_timestamp
        self.show_data = show_data

    def emit(self, record: EventRecord) -> None:
        if record.event == "case.started":
            self._case_started(record)
        elif record.event == "case.completed":
            self._case_completed(record)
        elif record.event in ("run.started", "run.completed"):
            self._run_banner(record)
        else:
            self._write(self._line(record))

    def _style(self, text: str, *codes: str) -> str:
        if not self.colored or not codes:
            return text
        return "".join(codes) + text + self.RESET

    def _prefix(self, record: EventRecord) -> str:
        parts = []
        if self.show_timestamp:
            parts.append(self._style(record.timestamp.strftime("%H:%M:%S"), self.DIM))
        if record.worker:
            parts.append(self._style(f"[{record.worker}]", self.DIM))
        return " ".join(parts)

    def _line(self, record: EventRecord) -> str:
        parts = [self.ICONS.get(record.event, "•")]
        parts.append(self._style(record.message or record.event, self.COLORS[record.level]))

        summary = ", ".join(f"{k}={record.data[k]}" for k in self.SUMMARY_KEYS if k in record.data)
        if summary and self.show_data:
            parts.append(self._style(f"({summary})", self.DIM))

        prefix = self._prefix(record)
        return "  " + (prefix + " " if prefix else "") + " ".join(parts)

    def _case_started(self, record: EventRecord) -> None:
        case = record.data.get("case", "unknown")
        module = record.data.get("module", "")
        title = f"🔨 {self._style(case, self.BOLD)} {self._style(f'[{module}]', self.DIM)}"
        prefix = self._prefix(record)

        self._write()
        self._write("─" * self.RULE_WIDTH)
        self._write((prefix + " " if prefix else "") + title)
        self._write("─" * self.RULE_WIDTH)

    def _case_completed(self, record: EventRecord) -> None:
        if record.data.get("passed", False):
            label = self._style("✅ PASSED", self.COLORS[LogLevel.INFO])
        else:
            label = self._style("❌ FAILED", self.COLORS[LogLevel.ERROR])
        case = record.data.get("case")
        self._write()
        self._write(f"{label} {case}" if case else label)

    def _run_banner(self, record: EventRecord) -> None:
        title = "🚀 Acceptance run" if record.event == "run.started" else "✅ Acceptance run finished"
        self._write()
        self._write("=" * self.RULE_WIDTH)
        self._write(self._style(title, self.BOLD))
        if record.message:
            self._write(f"   {record.message}")
        self._write("=" * self.RULE_WIDTH)

    def _write(self, line: str = "") -> None:
        print(line, file=self.stream)


class NullLogger(Logger):
    """Discards every event."""

    def emit(self, record: EventRecord) -> None:
        pass


class FileLogger(Logger):
    """Appends events to a file as JSON lines."""

    def __init__(self, file_path: str, min_level: LogLevel = LogLevel.INFO):
        """
        Initialize file logger.

        Args:
            file_path: Path to log file; created on first event
            min_level: Minimum log level to write
        """
        super().__init__(min_level)
        self.file_path = file_path

    def emit(self, record: EventRecord) -> None:
        # One short append per event keeps lines from different workers whole
        with open(self.file_path, 'a') as f:
            f.write(json.dumps(record.to_dict(), default=str) + '\n')


def create_logger(settings: "Settings") -> Logger:
    """
    Pick the logger implementation for the given settings.

    A configured log file wins over the console.
    """
    level = LogLevel(settings.log_level)
    if settings.log_file:
        return FileLogger(settings.log_file, min_level=level)
    return ConsoleLogger(min_level=level)
