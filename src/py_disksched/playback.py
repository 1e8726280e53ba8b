"""Playback controller — step through a finished schedule.

A ``ScheduleResult`` is computed all at once, but it is watched one
head move at a time.  The controller keeps a **cursor** into the
sequence and exposes the *animated prefix* — the positions revealed so
far — for whatever is drawing the head.

State machine::

    IDLE ──play──▶ PLAYING ──pause──▶ PAUSED
                     │  ▲               │
                     │  └─────play──────┘
                     ▼
                 FINISHED ──prev──▶ PAUSED

The state is derived, not stored: it follows from the cursor, the
sequence length, and whether auto-advance is on.  A cursor of zero
always reads as IDLE, so stepping back from FINISHED on a one-position
sequence lands on IDLE rather than PAUSED.

While playing, a periodic timer from a ``TickSource`` advances the
cursor.  The controller owns that timer's handle: ``pause()``,
``load()`` and reaching the end all cancel it.  Each tick also checks
that it belongs to the handle currently armed, so a tick that was
already queued when the timer was replaced is dropped.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from py_disksched.logging import Logger, LogLevel

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from py_disksched.timer import TickSource, TimerHandle

DEFAULT_INTERVAL_MS = 300


class PlaybackState(StrEnum):
    """Where the controller is in its life cycle."""

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"


@dataclass(frozen=True)
class PlaybackSnapshot:
    """A read-only view of the controller at one moment."""

    state: PlaybackState
    cursor: int
    length: int
    animated_prefix: tuple[int, ...]

    @property
    def current_position(self) -> int | None:
        """Return the most recently revealed head position, if any."""
        return self.animated_prefix[-1] if self.animated_prefix else None

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation."""
        return {
            "state": self.state.value,
            "cursor": self.cursor,
            "length": self.length,
            "animated_prefix": list(self.animated_prefix),
            "current_position": self.current_position,
            "is_playing": self.state is PlaybackState.PLAYING,
            "is_finished": self.state is PlaybackState.FINISHED,
        }


class PlaybackController:
    """Cursor over a schedule sequence with timer-driven auto-advance.

    The controller is not thread-safe.  Callers that drive it from
    more than one thread must serialise access themselves (for example
    by sharing a lock with a ``ThreadingTickSource``).
    """

    def __init__(
        self,
        tick_source: TickSource,
        *,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        logger: Logger | None = None,
        on_change: Callable[[PlaybackSnapshot], None] | None = None,
    ) -> None:
        """Create an idle controller with an empty sequence.

        Args:
            tick_source: Where auto-advance ticks come from.
            interval_ms: Milliseconds between auto-advance steps.
            logger: Optional event log for state transitions.
            on_change: Called with a fresh snapshot after every change.

        Raises:
            ValueError: If the interval is not positive.

        """
        if interval_ms <= 0:
            msg = f"Interval must be positive, got {interval_ms}"
            raise ValueError(msg)
        self._ticks = tick_source
        self._interval_ms = interval_ms
        self._logger = logger
        self._on_change = on_change
        self._sequence: tuple[int, ...] = ()
        self._cursor = 0
        self._playing = False
        self._timer: TimerHandle | None = None

    # -- read accessors -----------------------------------------------------

    @property
    def sequence(self) -> tuple[int, ...]:
        """Return the loaded sequence."""
        return self._sequence

    @property
    def interval_ms(self) -> int:
        """Return the auto-advance period in milliseconds."""
        return self._interval_ms

    @property
    def cursor(self) -> int:
        """Return the number of positions revealed so far."""
        return self._cursor

    @property
    def animated_prefix(self) -> tuple[int, ...]:
        """Return the positions revealed so far."""
        return self._sequence[: self._cursor]

    @property
    def current_position(self) -> int | None:
        """Return the latest revealed head position, or None before the first step."""
        return self._sequence[self._cursor - 1] if self._cursor else None

    @property
    def is_playing(self) -> bool:
        """Return True while auto-advance is running."""
        return self._playing

    @property
    def is_finished(self) -> bool:
        """Return True once every position has been revealed."""
        return bool(self._sequence) and self._cursor == len(self._sequence)

    @property
    def state(self) -> PlaybackState:
        """Return the current life-cycle state.

        FINISHED takes precedence, then PLAYING; a stopped controller is
        IDLE at cursor zero and PAUSED anywhere else.
        """
        if self.is_finished:
            return PlaybackState.FINISHED
        if self._playing:
            return PlaybackState.PLAYING
        if self._cursor == 0:
            return PlaybackState.IDLE
        return PlaybackState.PAUSED

    def snapshot(self) -> PlaybackSnapshot:
        """Return an immutable view of the current state."""
        return PlaybackSnapshot(
            state=self.state,
            cursor=self._cursor,
            length=len(self._sequence),
            animated_prefix=self.animated_prefix,
        )

    # -- operations ---------------------------------------------------------

    def load(self, sequence: Iterable[int]) -> None:
        """Replace the sequence and return to IDLE, cancelling any ticks."""
        self._stop_timer()
        self._sequence = tuple(sequence)
        self._cursor = 0
        self._playing = False
        self._log(LogLevel.DEBUG, f"loaded {len(self._sequence)} positions")
        self._changed()

    def play(self) -> None:
        """Start auto-advance.  Does nothing when finished or already playing."""
        if self._playing or self._cursor >= len(self._sequence):
            return
        self._playing = True
        handle = self._ticks.schedule_periodic(self._interval_ms, lambda: self._tick(handle))
        self._timer = handle
        self._log(LogLevel.INFO, f"play from step {self._cursor}")
        self._changed()

    def pause(self) -> None:
        """Stop auto-advance, keeping the cursor.  Always safe."""
        if not self._playing:
            return
        self._stop_timer()
        self._playing = False
        self._log(LogLevel.INFO, f"paused at step {self._cursor}")
        self._changed()

    def next_step(self) -> None:
        """Reveal one more position; stops auto-advance at the end."""
        self._move_to(self._cursor + 1)

    def prev_step(self) -> None:
        """Hide the most recent position.  Leaves auto-advance as it is."""
        self._move_to(self._cursor - 1)

    def seek(self, step: int) -> None:
        """Jump to *step*, clamped to the sequence bounds."""
        self._move_to(step)

    def reset(self) -> None:
        """Stop and rewind to the start of the loaded sequence."""
        self._stop_timer()
        self._playing = False
        self._cursor = 0
        self._changed()

    # -- internals ----------------------------------------------------------

    def _move_to(self, step: int) -> None:
        target = max(0, min(step, len(self._sequence)))
        if target == self._cursor:
            return
        self._cursor = target
        if self._playing and self._cursor >= len(self._sequence):
            self._stop_timer()
            self._playing = False
        if self.is_finished:
            self._log(LogLevel.INFO, f"finished after {self._cursor} positions")
        self._changed()

    def _tick(self, handle: TimerHandle) -> None:
        if handle is not self._timer or not handle.active:
            return
        self.next_step()

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _log(self, level: LogLevel, message: str) -> None:
        if self._logger is not None:
            self._logger.log(level, message, source="playback", step=self._cursor)

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(self.snapshot())
