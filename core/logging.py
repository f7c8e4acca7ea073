"""
Retro Micro-OS System Logging
Centralized in-memory log similar to syslog/journald.
"""

import time
import threading
from dataclasses import dataclass
from typing import List, Optional, TextIO
from enum import Enum


class LogLevel(Enum):
    """System log levels (compatible with syslog)."""
    EMERG = 0    # System is unusable
    ALERT = 1    # Action must be taken immediately
    CRIT = 2     # Critical conditions
    ERR = 3      # Error conditions
    WARNING = 4  # Warning conditions
    NOTICE = 5   # Normal but significant
    INFO = 6     # Informational
    DEBUG = 7    # Debug-level messages


class LogFacility(Enum):
    """Log facilities."""
    KERN = 0
    USER = 1
    SHELL = 2
    EDITOR = 3
    STORAGE = 4


@dataclass
class LogEntry:
    """Represents a single log entry."""
    timestamp: float
    level: LogLevel
    facility: LogFacility
    process_name: str
    message: str
    hostname: str = "retroos"

    def to_syslog_format(self) -> str:
        """Format as traditional syslog message."""
        timestr = time.strftime("%b %d %H:%M:%S", time.localtime(self.timestamp))
        priority = self.facility.value * 8 + self.level.value
        return f"<{priority}>{timestr} {self.hostname} {self.process_name}: {self.message}"

    def to_readable_format(self) -> str:
        """Format as human-readable message."""
        timestr = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(self.timestamp))
        return f"{timestr} {self.level.name:8} {self.process_name}: {self.message}"


class SystemLogger:
    """Central system logging service."""

    def __init__(self, max_entries: int = 10000, log_level: LogLevel = LogLevel.INFO):
        self.entries: List[LogEntry] = []
        self.max_entries = max_entries
        self._lock = threading.Lock()
        self.log_level = log_level
        self.output_streams: List[TextIO] = []

    def log(self, level: LogLevel, facility: LogFacility, message: str,
            process_name: str = "system") -> None:
        """Add a log entry."""
        if level.value > self.log_level.value:
            return

        entry = LogEntry(
            timestamp=time.time(),
            level=level,
            facility=facility,
            process_name=process_name,
            message=message,
        )

        with self._lock:
            self.entries.append(entry)
            if len(self.entries) > self.max_entries:
                self.entries.pop(0)

            formatted = entry.to_readable_format()
            for stream in self.output_streams:
                try:
                    stream.write(formatted + "\n")
                    stream.flush()
                except (OSError, ValueError):
                    # Closed or broken stream; keep logging to the rest
                    pass

    def add_output(self, stream: TextIO) -> None:
        """Add an output stream for real-time logging."""
        with self._lock:
            if stream not in self.output_streams:
                self.output_streams.append(stream)

    def remove_output(self, stream: TextIO) -> None:
        """Remove an output stream."""
        with self._lock:
            if stream in self.output_streams:
                self.output_streams.remove(stream)

    def query(self, level: Optional[LogLevel] = None,
              facility: Optional[LogFacility] = None,
              process_name: Optional[str] = None,
              since: Optional[float] = None,
              limit: Optional[int] = None) -> List[LogEntry]:
        """Query log entries with filters."""
        with self._lock:
            results = list(self.entries)

        if level is not None:
            results = [e for e in results if e.level.value <= level.value]
        if facility is not None:
            results = [e for e in results if e.facility == facility]
        if process_name is not None:
            results = [e for e in results if e.process_name == process_name]
        if since is not None:
            results = [e for e in results if e.timestamp >= since]

        if limit is not None:
            results = results[-limit:]

        return results

    def clear(self) -> None:
        """Clear all log entries."""
        with self._lock:
            self.entries.clear()


# Convenience logging functions
def log_shell(logger: Optional[SystemLogger], level: LogLevel, message: str) -> None:
    """Log a shell message."""
    if logger is not None:
        logger.log(level, LogFacility.SHELL, message, "shell")


def log_editor(logger: Optional[SystemLogger], level: LogLevel, message: str) -> None:
    """Log an editor message."""
    if logger is not None:
        logger.log(level, LogFacility.EDITOR, message, "editor")


def log_storage(logger: Optional[SystemLogger], level: LogLevel, message: str) -> None:
    """Log a storage message."""
    if logger is not None:
        logger.log(level, LogFacility.STORAGE, message, "vfs")
