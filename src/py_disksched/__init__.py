"""Disk scheduling simulator — policies, playback, and a shell around them.

Re-exports the core symbols so callers can write::

    from py_disksched import Algorithm, compute_schedule
"""

from py_disksched.disk import (
    DEFAULT_NUM_TRACKS,
    Algorithm,
    CLOOKPolicy,
    CSCANPolicy,
    DiskPolicy,
    Direction,
    FCFSPolicy,
    LOOKPolicy,
    SCANPolicy,
    ScheduleError,
    ScheduleResult,
    SSTFPolicy,
    compute_schedule,
    directional_sweep,
    get_policy,
    total_movement,
)
from py_disksched.playback import PlaybackController, PlaybackSnapshot, PlaybackState
from py_disksched.session import DiskScheduler
from py_disksched.timer import ManualTickSource, ThreadingTickSource, TickSource, TimerHandle

__all__ = [
    "DEFAULT_NUM_TRACKS",
    "Algorithm",
    "CLOOKPolicy",
    "CSCANPolicy",
    "Direction",
    "DiskPolicy",
    "DiskScheduler",
    "FCFSPolicy",
    "LOOKPolicy",
    "ManualTickSource",
    "PlaybackController",
    "PlaybackSnapshot",
    "PlaybackState",
    "SCANPolicy",
    "SSTFPolicy",
    "ScheduleError",
    "ScheduleResult",
    "ThreadingTickSource",
    "TickSource",
    "TimerHandle",
    "compute_schedule",
    "directional_sweep",
    "get_policy",
    "total_movement",
]
