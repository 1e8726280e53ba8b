"""Plain-text views of schedules for the shell.

These helpers are pure: they take results and return strings, so the
shell stays testable and the REPL only has to print.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from py_disksched.disk import Algorithm, ScheduleResult

DEFAULT_STRIP_WIDTH = 50
_ARROW = " -> "


def format_sequence(sequence: Sequence[int]) -> str:
    """Join head positions with arrows."""
    return _ARROW.join(str(p) for p in sequence)


def format_result(result: ScheduleResult) -> str:
    """Summarise a result: policy, path, total and average seek."""
    return "\n".join(
        [
            f"Algorithm: {result.algorithm.label}",
            f"Sequence: {format_sequence(result.sequence)}",
            f"Total head movement: {result.total_movement}",
            f"Average seek: {result.average_seek:.2f}",
        ]
    )


def format_table(result: ScheduleResult) -> str:
    """Show every move with its seek distance."""
    lines = ["STEP  FROM  TO    SEEK"]
    for step, (start, end) in enumerate(zip(result.sequence, result.sequence[1:], strict=False), start=1):
        lines.append(f"{step:<5} {start:<5} {end:<5} {abs(end - start)}")
    lines.append(f"TOTAL{'':13}{result.total_movement}")
    return "\n".join(lines)


def _column(track: int, num_tracks: int, width: int) -> int:
    if num_tracks <= 1:
        return 0
    return round(track * (width - 1) / (num_tracks - 1))


def format_track(
    num_tracks: int,
    requests: Sequence[int],
    head: int | None,
    *,
    width: int = DEFAULT_STRIP_WIDTH,
) -> str:
    """Draw the disk as a strip with request marks and the head.

    Requests are drawn as ``o`` on the strip; the head is a ``^`` under
    it labelled with its track.  Tracks are scaled to *width* columns,
    so nearby requests can share a column.
    """
    strip = ["-"] * width
    for track in requests:
        strip[_column(track, num_tracks, width)] = "o"
    lines = ["|" + "".join(strip) + "|"]
    if head is not None:
        col = _column(head, num_tracks, width)
        lines.append(" " * (col + 1) + f"^ {head}")
    last = str(num_tracks - 1)
    lines.append("0" + " " * (width + 1 - len(last)) + last)
    return "\n".join(lines)


def format_comparison(results: Mapping[Algorithm, ScheduleResult]) -> str:
    """Tabulate several results, best (lowest movement) first."""
    lines = ["ALGORITHM  MOVEMENT  STEPS  AVG SEEK"]
    ranked = sorted(results.values(), key=lambda r: r.total_movement)
    lines.extend(
        f"{r.algorithm.label:<10} {r.total_movement:<9} {r.steps:<6} {r.average_seek:.2f}" for r in ranked
    )
    return "\n".join(lines)
