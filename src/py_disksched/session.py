"""Disk scheduler session — ties the engine, playback and log together.

The engine is a set of pure functions and the controller only knows
about a sequence of numbers.  Something has to hold the *inputs* the
user is editing (head position, request queue, policy, direction),
run the engine when asked, and hand the result to the controller.
That is the ``DiskScheduler``.

A run either succeeds completely or changes nothing: the inputs are
validated first, and only a finished ``ScheduleResult`` replaces the
previous one and reloads the controller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from py_disksched.config import SimulatorConfig
from py_disksched.disk import Algorithm, Direction, ScheduleError, ScheduleResult, compute_schedule
from py_disksched.logging import Logger, LogLevel
from py_disksched.playback import PlaybackController
from py_disksched.timer import ManualTickSource

if TYPE_CHECKING:
    from collections.abc import Iterable

    from py_disksched.timer import TickSource


class DiskScheduler:
    """One simulation: editable inputs, the latest result, and its playback.

    The previous head position is stored and reported but no policy
    reads it; it only describes where the head came from.
    """

    def __init__(
        self,
        *,
        config: SimulatorConfig | None = None,
        tick_source: TickSource | None = None,
        logger: Logger | None = None,
    ) -> None:
        """Create a session seeded from *config* defaults.

        Args:
            config: Simulator settings (defaults used when omitted).
            tick_source: Drives playback; a ``ManualTickSource`` if omitted.
            logger: Event log; a new one sized from *config* if omitted.

        """
        self._config = config or SimulatorConfig()
        self._logger = logger or Logger(capacity=self._config.log_capacity)
        self._controller = PlaybackController(
            tick_source or ManualTickSource(),
            interval_ms=self._config.tick_interval_ms,
            logger=self._logger,
        )
        self._head = self._config.default_head
        self._previous = self._config.default_previous
        self._queue: list[int] = list(self._config.default_requests)
        self._algorithm = self._config.default_algorithm
        self._direction = self._config.default_direction
        self._last_result: ScheduleResult | None = None

    # -- configuration and collaborators -------------------------------------

    @property
    def config(self) -> SimulatorConfig:
        """Return the simulator settings."""
        return self._config

    @property
    def num_tracks(self) -> int:
        """Return the number of tracks on the simulated disk."""
        return self._config.num_tracks

    @property
    def logger(self) -> Logger:
        """Return the session event log."""
        return self._logger

    @property
    def controller(self) -> PlaybackController:
        """Return the playback controller for the latest result."""
        return self._controller

    @property
    def last_result(self) -> ScheduleResult | None:
        """Return the most recent successful result, if any."""
        return self._last_result

    # -- head state -----------------------------------------------------------

    @property
    def head(self) -> int:
        """Return the current head position."""
        return self._head

    @property
    def previous_head(self) -> int:
        """Return the previous head position."""
        return self._previous

    def set_head(self, position: int, previous: int | None = None) -> None:
        """Move the head (and optionally record where it came from).

        Raises:
            ScheduleError: If either position is outside the disk.

        """
        self._check_track(position, "Head position")
        if previous is not None:
            self._check_track(previous, "Previous position")
            self._previous = previous
        self._head = position

    # -- policy ---------------------------------------------------------------

    @property
    def algorithm(self) -> Algorithm:
        """Return the selected scheduling policy."""
        return self._algorithm

    @algorithm.setter
    def algorithm(self, value: Algorithm) -> None:
        """Select a scheduling policy (Strategy pattern)."""
        self._algorithm = Algorithm(value)

    @property
    def direction(self) -> Direction:
        """Return the initial sweep direction."""
        return self._direction

    @direction.setter
    def direction(self, value: Direction) -> None:
        """Set the initial sweep direction."""
        self._direction = Direction(value)

    # -- request queue ----------------------------------------------------------

    @property
    def pending(self) -> list[int]:
        """Return a copy of the request queue."""
        return list(self._queue)

    def add_request(self, track: int) -> None:
        """Append one I/O request for *track*.

        Raises:
            ScheduleError: If the track is outside the disk.

        """
        self._check_track(track, "Request")
        self._queue.append(track)

    def set_requests(self, tracks: Iterable[int]) -> None:
        """Replace the whole queue.  Nothing changes if any track is invalid.

        Raises:
            ScheduleError: If any track is outside the disk.

        """
        new_queue = list(tracks)
        for track in new_queue:
            self._check_track(track, "Request")
        self._queue = new_queue

    def clear_requests(self) -> None:
        """Empty the request queue."""
        self._queue.clear()

    # -- running ----------------------------------------------------------------

    def run(self) -> ScheduleResult:
        """Schedule the current queue and load the result for playback.

        The queue is kept, so the same input can be replayed under a
        different policy.

        Raises:
            ScheduleError: If the inputs are invalid; the previous
                result and playback are left untouched.

        """
        try:
            result = compute_schedule(
                self._algorithm,
                self._queue,
                self._head,
                self._direction,
                self._config.num_tracks,
            )
        except ScheduleError as e:
            self._logger.log(LogLevel.ERROR, str(e), source="scheduler")
            raise
        self._last_result = result
        self._controller.load(result.sequence)
        how = f"{result.algorithm.label} ({self._direction})" if result.algorithm.uses_direction else result.algorithm.label
        self._logger.log(
            LogLevel.INFO,
            f"{how}: {len(self._queue)} requests from {self._head}, total movement {result.total_movement}",
            source="scheduler",
        )
        return result

    def compare(self) -> dict[Algorithm, ScheduleResult]:
        """Run every policy on the current inputs without touching playback.

        Raises:
            ScheduleError: If the inputs are invalid.

        """
        results = {
            algorithm: compute_schedule(
                algorithm,
                self._queue,
                self._head,
                self._direction,
                self._config.num_tracks,
            )
            for algorithm in Algorithm
        }
        best = min(results.values(), key=lambda r: r.total_movement)
        self._logger.log(
            LogLevel.INFO,
            f"compared {len(results)} policies, best {best.algorithm.label} ({best.total_movement})",
            source="scheduler",
        )
        return results

    def _check_track(self, value: int, what: str) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < self.num_tracks:
            msg = f"{what} {value!r} is outside the disk (valid tracks: 0-{self.num_tracks - 1})"
            raise ScheduleError(msg)
