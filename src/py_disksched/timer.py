"""Interval timers — the tick sources that drive playback.

The playback controller advances one step per timer tick while it is
playing.  Where those ticks come from is pluggable:

    - ``ManualTickSource`` — a virtual clock.  Nothing happens until
      the caller calls ``advance(ms)``, which fires every tick that
      falls due in that window, in order.  Fully deterministic, so the
      shell and the tests use it.
    - ``ThreadingTickSource`` — real wall-clock ticks from
      ``threading.Timer``, re-armed after each period.  The web app
      uses it for live playback.

Both return a ``TimerHandle`` from ``schedule_periodic``.  Cancelling a
handle is final: once ``cancel()`` returns, its callback never runs
again, even if a tick was already on its way.
"""

from __future__ import annotations

import contextlib
import threading
from typing import TYPE_CHECKING, Protocol, TypeAlias

if TYPE_CHECKING:
    from collections.abc import Callable

    TickCallback: TypeAlias = Callable[[], None]


def _check_interval(interval_ms: int) -> None:
    if interval_ms <= 0:
        msg = f"Interval must be positive, got {interval_ms}"
        raise ValueError(msg)


class TimerHandle:
    """A cancellable reference to a periodic timer."""

    def __init__(self, on_cancel: Callable[[], None] | None = None) -> None:
        """Create an active handle with an optional cancel hook."""
        self._active = True
        self._on_cancel = on_cancel

    @property
    def active(self) -> bool:
        """Return True until the timer has been cancelled."""
        return self._active

    def cancel(self) -> None:
        """Stop the timer.  Safe to call more than once."""
        if not self._active:
            return
        self._active = False
        if self._on_cancel is not None:
            self._on_cancel()


class TickSource(Protocol):
    """Anything that can call a function at a fixed period."""

    def schedule_periodic(self, interval_ms: int, callback: TickCallback) -> TimerHandle:
        """Call *callback* every *interval_ms* until the handle is cancelled."""
        ...  # pragma: no cover


class _ManualTimer:
    """Book-keeping for one periodic timer on the virtual clock."""

    def __init__(self, handle: TimerHandle, interval_ms: int, due_ms: int, callback: TickCallback) -> None:
        self.handle = handle
        self.interval_ms = interval_ms
        self.due_ms = due_ms
        self.callback = callback


class ManualTickSource:
    """A virtual clock that only moves when told to.

    Ticks are fired from inside ``advance()``, so everything runs on
    the caller's thread and the order of events is exactly reproducible.
    """

    def __init__(self) -> None:
        """Create a clock at time zero with no timers."""
        self._now_ms = 0
        self._timers: list[_ManualTimer] = []
        self._fired = 0

    @property
    def now_ms(self) -> int:
        """Return the current virtual time in milliseconds."""
        return self._now_ms

    @property
    def pending(self) -> int:
        """Return the number of timers that are still active."""
        return sum(1 for t in self._timers if t.handle.active)

    @property
    def fired(self) -> int:
        """Return the total number of ticks fired since creation."""
        return self._fired

    def schedule_periodic(self, interval_ms: int, callback: TickCallback) -> TimerHandle:
        """Register a timer whose first tick is one interval from now.

        Raises:
            ValueError: If the interval is not positive.

        """
        _check_interval(interval_ms)
        handle = TimerHandle()
        self._timers.append(_ManualTimer(handle, interval_ms, self._now_ms + interval_ms, callback))
        return handle

    def advance(self, ms: int) -> int:
        """Move the clock forward *ms* milliseconds, firing due ticks.

        Ticks fire in due-time order; timers due at the same moment fire
        in the order they were scheduled.  A callback may cancel its own
        or another timer, and the cancelled timer fires no further ticks.

        Args:
            ms: How far to move the clock (must not be negative).

        Returns:
            The number of ticks fired.

        Raises:
            ValueError: If *ms* is negative.

        """
        if ms < 0:
            msg = f"Cannot move the clock backwards ({ms} ms)"
            raise ValueError(msg)
        target = self._now_ms + ms
        fired = 0
        while True:
            self._timers = [t for t in self._timers if t.handle.active]
            due = [t for t in self._timers if t.due_ms <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due_ms)
            self._now_ms = timer.due_ms
            timer.due_ms += timer.interval_ms
            timer.callback()
            fired += 1
        self._now_ms = target
        self._fired += fired
        return fired


class ThreadingTickSource:
    """Wall-clock ticks backed by ``threading.Timer``.

    Each tick runs on a timer thread.  Pass a *lock* to have every
    callback run while holding it; the caller then takes the same lock
    around its own calls so the two never interleave.
    """

    def __init__(self, *, lock: contextlib.AbstractContextManager[bool] | None = None) -> None:
        """Create a tick source, optionally serialised by *lock*."""
        self._lock = lock

    def schedule_periodic(self, interval_ms: int, callback: TickCallback) -> TimerHandle:
        """Start a repeating timer thread.

        Raises:
            ValueError: If the interval is not positive.

        """
        _check_interval(interval_ms)
        current: list[threading.Timer] = []

        def cancel_thread() -> None:
            if current:
                current[0].cancel()

        handle = TimerHandle(on_cancel=cancel_thread)

        def fire() -> None:
            guard = self._lock if self._lock is not None else contextlib.nullcontext(enter_result=True)
            with guard:
                if not handle.active:
                    return
                callback()
                if handle.active:
                    arm()

        def arm() -> None:
            timer = threading.Timer(interval_ms / 1000, fire)
            timer.daemon = True
            current[:] = [timer]
            timer.start()

        arm()
        return handle
