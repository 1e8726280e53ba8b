"""Simulator configuration — defaults plus environment overrides.

Every tunable lives on one frozen ``SimulatorConfig``.  The defaults
reproduce the classic textbook setup (a 200-track disk, head at 53,
eight pending requests).  ``load_config`` layers ``DISKSCHED_*``
environment variables on top, the same way a Unix process picks up
its settings from ``KEY=VALUE`` pairs inherited from its parent:

    ========================  =================================
    variable                  field
    ========================  =================================
    DISKSCHED_NUM_TRACKS      num_tracks
    DISKSCHED_TICK_MS         tick_interval_ms
    DISKSCHED_HEAD            default_head
    DISKSCHED_PREVIOUS        default_previous
    DISKSCHED_REQUESTS        default_requests (comma separated)
    DISKSCHED_ALGORITHM       default_algorithm
    DISKSCHED_DIRECTION       default_direction
    DISKSCHED_LOG_CAPACITY    log_capacity
    ========================  =================================
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from py_disksched.disk import DEFAULT_NUM_TRACKS, Algorithm, Direction, ScheduleError
from py_disksched.logging import DEFAULT_LOG_CAPACITY
from py_disksched.playback import DEFAULT_INTERVAL_MS
from py_disksched.requests import RequestParseError, parse_requests

if TYPE_CHECKING:
    from collections.abc import Mapping

_ENV_PREFIX = "DISKSCHED_"

_TEXTBOOK_REQUESTS = (98, 183, 37, 122, 14, 124, 65, 67)


@dataclass(frozen=True)
class SimulatorConfig:
    """All simulator settings, validated on construction.

    Raises:
        ValueError: If any setting is out of range.

    """

    num_tracks: int = DEFAULT_NUM_TRACKS
    tick_interval_ms: int = DEFAULT_INTERVAL_MS
    default_head: int = 53
    default_previous: int = 30
    default_requests: tuple[int, ...] = _TEXTBOOK_REQUESTS
    default_algorithm: Algorithm = Algorithm.FCFS
    default_direction: Direction = Direction.UP
    log_capacity: int = DEFAULT_LOG_CAPACITY

    def __post_init__(self) -> None:
        """Reject settings the simulator cannot work with."""
        if self.num_tracks <= 0:
            msg = f"num_tracks must be positive, got {self.num_tracks}"
            raise ValueError(msg)
        if self.tick_interval_ms <= 0:
            msg = f"tick_interval_ms must be positive, got {self.tick_interval_ms}"
            raise ValueError(msg)
        if self.log_capacity <= 0:
            msg = f"log_capacity must be positive, got {self.log_capacity}"
            raise ValueError(msg)
        for name in ("default_head", "default_previous"):
            value = getattr(self, name)
            if not 0 <= value < self.num_tracks:
                msg = f"{name} {value} is outside the disk (0-{self.num_tracks - 1})"
                raise ValueError(msg)
        outside = [r for r in self.default_requests if not 0 <= r < self.num_tracks]
        if outside:
            msg = f"default_requests outside the disk: {outside}"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation."""
        data = dataclasses.asdict(self)
        data["default_requests"] = list(self.default_requests)
        data["default_algorithm"] = self.default_algorithm.value
        data["default_direction"] = self.default_direction.value
        return data


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(_ENV_PREFIX + name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        msg = f"{_ENV_PREFIX}{name} must be an integer, got {raw!r}"
        raise ValueError(msg) from None


def load_config(environ: Mapping[str, str] | None = None) -> SimulatorConfig:
    """Build a configuration from defaults and ``DISKSCHED_*`` variables.

    Args:
        environ: Variables to read; defaults to ``os.environ``.

    Raises:
        ValueError: If a variable cannot be parsed or the resulting
            configuration is invalid.

    """
    env = os.environ if environ is None else environ
    base = SimulatorConfig()
    num_tracks = _env_int(env, "NUM_TRACKS", base.num_tracks)

    # Built-in defaults shrink with the disk; explicit values must fit.
    last_track = num_tracks - 1
    head = _env_int(env, "HEAD", min(base.default_head, last_track))
    previous = _env_int(env, "PREVIOUS", min(base.default_previous, last_track))
    requests = tuple(r for r in base.default_requests if r < num_tracks)
    raw_requests = env.get(_ENV_PREFIX + "REQUESTS")
    if raw_requests is not None:
        try:
            requests = tuple(parse_requests(raw_requests, num_tracks, strict=True))
        except RequestParseError as e:
            msg = f"{_ENV_PREFIX}REQUESTS: {e}"
            raise ValueError(msg) from None

    try:
        algorithm = Algorithm.parse(env.get(_ENV_PREFIX + "ALGORITHM", base.default_algorithm.value))
        direction = Direction.parse(env.get(_ENV_PREFIX + "DIRECTION", base.default_direction.value))
    except ScheduleError as e:
        msg = f"Invalid {_ENV_PREFIX}* setting: {e}"
        raise ValueError(msg) from None

    return SimulatorConfig(
        num_tracks=num_tracks,
        tick_interval_ms=_env_int(env, "TICK_MS", base.tick_interval_ms),
        default_head=head,
        default_previous=previous,
        default_requests=requests,
        default_algorithm=algorithm,
        default_direction=direction,
        log_capacity=_env_int(env, "LOG_CAPACITY", base.log_capacity),
    )
