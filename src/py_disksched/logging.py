"""Simulation event log.

Every run, playback transition and rejected input is recorded as a
structured entry, so the shell's ``log`` command (and the tests) can
see what the simulator did and in what order:

- **LogLevel** — severity levels ordered for filtering (DEBUG < ERROR).
- **LogEntry** — a single record (level, message, source, step).
- **Logger** — a bounded in-memory buffer with filtering and clearing.

The buffer keeps at most ``capacity`` entries; once full, the oldest
entry is dropped for each new one, like a kernel ring buffer.
"""

from collections import deque
from dataclasses import dataclass
from enum import IntEnum

DEFAULT_LOG_CAPACITY = 500


class LogLevel(IntEnum):
    """Severity levels for log entries."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3

    @classmethod
    def parse(cls, name: str) -> "LogLevel":
        """Look up a level by (case-insensitive) name.

        Raises:
            ValueError: If the name is not a known level.

        """
        try:
            return cls[name.strip().upper()]
        except KeyError:
            msg = f"Unknown log level '{name}'"
            raise ValueError(msg) from None


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: The component that generated the event (e.g. "playback").
        step: Playback cursor at the time, when the event relates to one.

    """

    level: LogLevel
    message: str
    source: str
    step: int | None = None

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message``."""
        return f"[{self.level.name}] {self.source}: {self.message}"


class Logger:
    """Bounded log buffer with filtering."""

    def __init__(self, *, capacity: int = DEFAULT_LOG_CAPACITY) -> None:
        """Create an empty logger holding at most *capacity* entries.

        Raises:
            ValueError: If the capacity is not positive.

        """
        if capacity <= 0:
            msg = f"Log capacity must be positive, got {capacity}"
            raise ValueError(msg)
        self._entries: deque[LogEntry] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        """Return the maximum number of retained entries."""
        return self._entries.maxlen or 0

    @property
    def entries(self) -> list[LogEntry]:
        """Return all retained entries in chronological order."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        step: int | None = None,
    ) -> None:
        """Append a new entry to the log.

        Args:
            level: Severity of the event.
            message: Human-readable event description.
            source: Component that generated the event.
            step: Playback cursor associated with the event, if any.

        """
        self._entries.append(LogEntry(level=level, message=message, source=source, step=step))

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return entries matching the given criteria.

        Args:
            min_level: If set, only return entries at or above this level.
            source: If set, only return entries from this source.

        Returns:
            A filtered list of log entries.

        """
        result = list(self._entries)
        if min_level is not None:
            result = [e for e in result if e.level >= min_level]
        if source is not None:
            result = [e for e in result if e.source == source]
        return result

    def clear(self) -> None:
        """Remove all log entries."""
        self._entries.clear()
