"""Disk scheduling algorithms — minimising seek time for I/O requests.

When multiple processes request disk I/O, the disk head must move
between tracks to service them.  The dominant cost is **seek time** —
how far the head travels.  Disk scheduling algorithms decide the
*order* in which requests are serviced to minimise this.

Think of a disk head like an elevator in a building:
    - **FCFS** — stop at every floor in the order people pressed buttons.
    - **SSTF** — always go to the nearest requested floor (greedy).
    - **SCAN** — go all the way up, then all the way down (elevator).
    - **C-SCAN** — go all the way up, jump back to the bottom, go up again.
    - **LOOK** — like SCAN, but turn around at the last request instead
      of riding to the top floor.
    - **C-LOOK** — like C-SCAN, but jump from the last request straight
      to the furthest request on the other side.

Every policy returns a ``ScheduleResult``: the head position at each
step (starting with the current position) and the total distance
travelled.  The four sweep policies share one routine,
``directional_sweep``, and differ only in two switches:

    ============  ==========  ========
    policy        add_bounds  circular
    ============  ==========  ========
    SCAN          yes         no
    C-SCAN        yes         yes
    LOOK          no          no
    C-LOOK        no          yes
    ============  ==========  ========

All policies implement the ``DiskPolicy`` protocol — the Strategy
pattern.  Policies are pure: the same input always yields the same
result and the caller's request list is never modified.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

DEFAULT_NUM_TRACKS = 200


class Algorithm(StrEnum):
    """The six supported disk scheduling policies."""

    FCFS = "FCFS"
    SSTF = "SSTF"
    SCAN = "SCAN"
    CSCAN = "CSCAN"
    LOOK = "LOOK"
    CLOOK = "CLOOK"

    @property
    def label(self) -> str:
        """Return the conventional display name (e.g. ``C-SCAN``)."""
        return _LABELS[self]

    @property
    def uses_direction(self) -> bool:
        """Return True for the sweep policies that honour a direction."""
        return self not in {Algorithm.FCFS, Algorithm.SSTF}

    @classmethod
    def parse(cls, name: str) -> Algorithm:
        """Look up an algorithm by name, ignoring case and dashes.

        Raises:
            ScheduleError: If the name matches no algorithm.

        """
        key = name.strip().upper().replace("-", "").replace("_", "")
        try:
            return cls(key)
        except ValueError:
            choices = ", ".join(a.value for a in cls)
            msg = f"Unknown algorithm '{name}' (choose from {choices})"
            raise ScheduleError(msg) from None


_LABELS = {
    Algorithm.FCFS: "FCFS",
    Algorithm.SSTF: "SSTF",
    Algorithm.SCAN: "SCAN",
    Algorithm.CSCAN: "C-SCAN",
    Algorithm.LOOK: "LOOK",
    Algorithm.CLOOK: "C-LOOK",
}


class Direction(StrEnum):
    """Initial sweep direction: towards the last track or towards 0."""

    UP = "up"
    DOWN = "down"

    @classmethod
    def parse(cls, name: str) -> Direction:
        """Look up a direction by name, ignoring case.

        Raises:
            ScheduleError: If the name is neither ``up`` nor ``down``.

        """
        try:
            return cls(name.strip().lower())
        except ValueError:
            msg = f"Unknown direction '{name}' (choose from up, down)"
            raise ScheduleError(msg) from None


class ScheduleError(ValueError):
    """Raised when the engine is handed input outside its contract."""


@dataclass(frozen=True)
class ScheduleResult:
    """The outcome of one scheduling run.

    Attributes:
        algorithm: The policy that produced this result.
        sequence: Head position at every step; ``sequence[0]`` is the
            starting position.
        total_movement: Sum of absolute distances between consecutive
            positions in ``sequence``.

    """

    algorithm: Algorithm
    sequence: tuple[int, ...]
    total_movement: int

    @property
    def steps(self) -> int:
        """Return the number of head moves (one less than the positions)."""
        return len(self.sequence) - 1

    @property
    def average_seek(self) -> float:
        """Return the mean distance per move, or 0.0 with no moves."""
        if self.steps <= 0:
            return 0.0
        return self.total_movement / self.steps

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation."""
        return {
            "algorithm": self.algorithm.value,
            "sequence": list(self.sequence),
            "total_movement": self.total_movement,
            "average_seek": round(self.average_seek, 2),
            "steps": self.steps,
        }


def total_movement(sequence: Sequence[int]) -> int:
    """Return the total head travel along *sequence*."""
    return sum(abs(b - a) for a, b in zip(sequence, sequence[1:], strict=False))


def _check_track(value: object, num_tracks: int, what: str) -> int:
    """Return *value* if it is an int in ``[0, num_tracks)``, else raise."""
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{what} must be an integer, got {value!r}"
        raise ScheduleError(msg)
    if not 0 <= value < num_tracks:
        msg = f"{what} {value} is outside the disk (valid tracks: 0-{num_tracks - 1})"
        raise ScheduleError(msg)
    return value


def validate_inputs(requests: Iterable[int], head: int, num_tracks: int) -> list[int]:
    """Check engine preconditions and return the requests as a new list.

    Raises:
        ScheduleError: If ``num_tracks`` is not a positive integer, or
            the head or any request is not an integer inside the disk.

    """
    if isinstance(num_tracks, bool) or not isinstance(num_tracks, int) or num_tracks <= 0:
        msg = f"Track count must be a positive integer, got {num_tracks!r}"
        raise ScheduleError(msg)
    _check_track(head, num_tracks, "Head position")
    return [_check_track(r, num_tracks, "Request") for r in requests]


def coerce_algorithm(value: Algorithm | str) -> Algorithm:
    """Return *value* as an ``Algorithm``, accepting names as ``parse`` does.

    Raises:
        ScheduleError: If *value* names no algorithm.

    """
    if not isinstance(value, str):
        msg = f"Algorithm must be a name, got {value!r}"
        raise ScheduleError(msg)
    return Algorithm.parse(value)


def coerce_direction(value: Direction | str) -> Direction:
    """Return *value* as a ``Direction``, accepting ``up`` or ``down`` in any case.

    Raises:
        ScheduleError: If *value* is not a direction.

    """
    if not isinstance(value, str):
        msg = f"Direction must be 'up' or 'down', got {value!r}"
        raise ScheduleError(msg)
    return Direction.parse(value)


def _result(algorithm: Algorithm, sequence: list[int]) -> ScheduleResult:
    return ScheduleResult(
        algorithm=algorithm,
        sequence=tuple(sequence),
        total_movement=total_movement(sequence),
    )


class DiskPolicy(Protocol):
    """Protocol for disk scheduling policies (Strategy pattern)."""

    algorithm: Algorithm

    def schedule(self, requests: Sequence[int], *, head: int) -> ScheduleResult:
        """Return the head's path when servicing *requests* from *head*.

        Args:
            requests: Track numbers to visit, in arrival order.
            head: Current position of the disk head.

        Returns:
            The visiting sequence (starting at *head*) and its total
            movement.

        """
        ...  # pragma: no cover


class FCFSPolicy:
    """First Come, First Served — service in arrival order.

    The simplest policy.  Fair (no starvation), but the head zigzags
    wildly across the disk, producing high total seek time.  No sorting
    and no direction: the policy models the literal queue order.
    """

    algorithm = Algorithm.FCFS

    def __init__(self, *, num_tracks: int = DEFAULT_NUM_TRACKS) -> None:
        """Create an FCFS policy for a disk of *num_tracks* tracks."""
        self._num_tracks = num_tracks

    def schedule(self, requests: Sequence[int], *, head: int) -> ScheduleResult:
        """Return the head path visiting requests in their original order."""
        pending = validate_inputs(requests, head, self._num_tracks)
        return _result(self.algorithm, [head, *pending])


class SSTFPolicy:
    """Shortest Seek Time First — always go to the nearest request.

    A greedy algorithm that minimises immediate seek time.  Produces
    better total movement than FCFS, but can **starve** distant
    requests if new requests keep arriving near the head.

    Ties are broken by position in the remaining queue: of two equally
    near requests, the one that arrived first wins.  Duplicate tracks
    are independent requests and are each visited once.
    """

    algorithm = Algorithm.SSTF

    def __init__(self, *, num_tracks: int = DEFAULT_NUM_TRACKS) -> None:
        """Create an SSTF policy for a disk of *num_tracks* tracks."""
        self._num_tracks = num_tracks

    def schedule(self, requests: Sequence[int], *, head: int) -> ScheduleResult:
        """Return the head path visiting the nearest request each step."""
        remaining = validate_inputs(requests, head, self._num_tracks)
        sequence = [head]
        current = head
        while remaining:
            # min() keeps the first of equal keys, which gives the FIFO tie-break.
            index = min(range(len(remaining)), key=lambda i: abs(remaining[i] - current))
            current = remaining.pop(index)
            sequence.append(current)
        return _result(self.algorithm, sequence)


def directional_sweep(
    requests: Sequence[int],
    head: int,
    direction: Direction,
    num_tracks: int,
    *,
    add_bounds: bool,
    circular: bool,
) -> list[int]:
    """Return the head path for a sweep starting in *direction*.

    Requests below the head form the ``left`` side (nearest first,
    descending); requests at or above the head form the ``right`` side
    (nearest first, ascending).  The head services its own side, then:

    - with ``add_bounds`` it rides on to the disk edge before turning,
      but only when there is something on the other side to turn for;
    - with ``circular`` it jumps to the opposite edge (touching it only
      with ``add_bounds``) and sweeps the same way again; otherwise it
      simply reverses.

    Args:
        requests: Validated track numbers.
        head: Starting head position.
        direction: Which way the first sweep goes.
        num_tracks: Disk size; the last track is ``num_tracks - 1``.
        add_bounds: Whether to touch the disk edge (SCAN family).
        circular: Whether to wrap instead of reversing (C- variants).

    Returns:
        The visiting sequence, starting with *head*.

    """
    last_track = num_tracks - 1
    left = sorted((r for r in requests if r < head), reverse=True)
    right = sorted(r for r in requests if r >= head)

    if direction is Direction.UP:
        near, far, edge, opposite_edge = right, left, last_track, 0
    else:
        near, far, edge, opposite_edge = left, right, 0, last_track

    sequence = [head, *near]
    if add_bounds and far and (not near or near[-1] != edge):
        sequence.append(edge)
    if circular:
        if far:
            if add_bounds:
                sequence.append(opposite_edge)
            sequence.extend(reversed(far))
    else:
        sequence.extend(far)
    return sequence


class _SweepPolicy:
    """Shared construction for the four sweep policies."""

    algorithm: Algorithm
    _add_bounds: bool
    _circular: bool

    def __init__(
        self,
        *,
        direction: Direction | str = Direction.UP,
        num_tracks: int = DEFAULT_NUM_TRACKS,
    ) -> None:
        """Create a sweep policy with an initial direction and disk size.

        Raises:
            ScheduleError: If *direction* is neither up nor down.

        """
        self._direction = coerce_direction(direction)
        self._num_tracks = num_tracks

    @property
    def direction(self) -> Direction:
        """Return the initial sweep direction."""
        return self._direction

    @property
    def num_tracks(self) -> int:
        """Return the number of tracks on the disk."""
        return self._num_tracks

    def schedule(self, requests: Sequence[int], *, head: int) -> ScheduleResult:
        """Return the head path for this sweep variant."""
        pending = validate_inputs(requests, head, self._num_tracks)
        sequence = directional_sweep(
            pending,
            head,
            self._direction,
            self._num_tracks,
            add_bounds=self._add_bounds,
            circular=self._circular,
        )
        return _result(self.algorithm, sequence)


class SCANPolicy(_SweepPolicy):
    """SCAN (Elevator algorithm) — sweep to the edge, then reverse.

    The head moves in one direction, servicing all requests along the
    way, rides on to the edge of the disk, then reverses and services
    the requests behind it.  No request waits more than two sweeps.
    """

    algorithm = Algorithm.SCAN
    _add_bounds = True
    _circular = False


class CSCANPolicy(_SweepPolicy):
    """Circular SCAN — sweep to the edge, jump to the other edge, sweep again.

    Unlike SCAN, C-SCAN only services requests in one direction.  With
    regular SCAN, tracks in the middle of the disk are favoured (the
    head passes them twice per cycle); treating the disk as a ring
    gives more uniform wait times.
    """

    algorithm = Algorithm.CSCAN
    _add_bounds = True
    _circular = True


class LOOKPolicy(_SweepPolicy):
    """LOOK — SCAN that turns around at the last request, not the edge."""

    algorithm = Algorithm.LOOK
    _add_bounds = False
    _circular = False


class CLOOKPolicy(_SweepPolicy):
    """Circular LOOK — jump from the last request to the furthest one behind."""

    algorithm = Algorithm.CLOOK
    _add_bounds = False
    _circular = True


def get_policy(
    algorithm: Algorithm | str,
    *,
    direction: Direction | str = Direction.UP,
    num_tracks: int = DEFAULT_NUM_TRACKS,
) -> DiskPolicy:
    """Return a configured policy instance for *algorithm*.

    Raises:
        ScheduleError: If *algorithm* or *direction* is not recognised.

    """
    match coerce_algorithm(algorithm):
        case Algorithm.FCFS:
            return FCFSPolicy(num_tracks=num_tracks)
        case Algorithm.SSTF:
            return SSTFPolicy(num_tracks=num_tracks)
        case Algorithm.SCAN:
            return SCANPolicy(direction=direction, num_tracks=num_tracks)
        case Algorithm.CSCAN:
            return CSCANPolicy(direction=direction, num_tracks=num_tracks)
        case Algorithm.LOOK:
            return LOOKPolicy(direction=direction, num_tracks=num_tracks)
        case Algorithm.CLOOK:
            return CLOOKPolicy(direction=direction, num_tracks=num_tracks)


def compute_schedule(
    algorithm: Algorithm | str,
    requests: Iterable[int],
    current_pos: int,
    direction: Direction | str = Direction.UP,
    num_tracks: int = DEFAULT_NUM_TRACKS,
) -> ScheduleResult:
    """Run *algorithm* over *requests* starting from *current_pos*.

    This is the single entry point into the engine.  Direction and track
    count only matter to the sweep policies but are always validated.

    Raises:
        ScheduleError: If any input is outside the engine's contract.

    """
    algorithm = coerce_algorithm(algorithm)
    direction = coerce_direction(direction)
    pending = validate_inputs(requests, current_pos, num_tracks)
    policy = get_policy(algorithm, direction=direction, num_tracks=num_tracks)
    return policy.schedule(pending, head=current_pos)
