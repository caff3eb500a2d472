"""Event logging for acceptance runs."""

from .logger import (
    EventRecord,
    Logger,
    LogLevel,
    ConsoleLogger,
    NullLogger,
    FileLogger,
    create_logger,
)

__all__ = [
    "EventRecord",
    "Logger",
    "LogLevel",
    "ConsoleLogger",
    "NullLogger",
    "FileLogger",
    "create_logger",
]
