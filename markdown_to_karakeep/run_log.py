from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Protocol


@dataclass(frozen=True)
class LogEntry:
    '''One timestamped line of run output'''

    timestamp: str
    message: str
    is_error: bool = False

    def render(self) -> str:
        return f"[{self.timestamp}] {self.message}"


class LogSink(Protocol):
    def emit(self, entry: LogEntry) -> None:
        ...

    def clear(self) -> None:
        ...


class MemoryLogSink:
    """Keep entries in a list. Used by tests and by callers embedding the importer."""

    def __init__(self) -> None:
        self.entries: List[LogEntry] = []

    def emit(self, entry: LogEntry) -> None:
        self.entries.append(entry)

    def clear(self) -> None:
        self.entries.clear()

    @property
    def messages(self) -> List[str]:
        return [entry.message for entry in self.entries]

    @property
    def errors(self) -> List[str]:
        return [entry.message for entry in self.entries if entry.is_error]


class ConsoleLogSink:
    """Print entries to the terminal and mirror them into a file logger.

    Errors go to stderr, everything else to stdout. The optional logger receives
    the bare message at ERROR or INFO level so the log file keeps its own
    timestamps.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger

    def emit(self, entry: LogEntry) -> None:
        stream = sys.stderr if entry.is_error else sys.stdout
        print(entry.render(), file=stream)
        if self.logger:
            level = logging.ERROR if entry.is_error else logging.INFO
            self.logger.log(level, "%s", entry.message.strip())

    def clear(self) -> None:
        """Nothing to do: lines already printed stay on the terminal."""


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a trailing Z."""

    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class RunContext:
    '''Per-run state handed to the importer instead of page-global UI state'''

    sink: LogSink = field(default_factory=MemoryLogSink)
    entries: List[LogEntry] = field(default_factory=list)

    def log(self, message: str, is_error: bool = False) -> LogEntry:
        entry = LogEntry(timestamp=utc_timestamp(), message=message, is_error=is_error)
        self.entries.append(entry)
        self.sink.emit(entry)
        return entry

    def error(self, message: str) -> LogEntry:
        return self.log(message, is_error=True)

    def clear(self) -> None:
        self.entries.clear()
        self.sink.clear()
        self.log("Log cleared.")
