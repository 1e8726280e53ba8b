"""Request-queue parsing — turning user text into track numbers.

The engine only accepts clean integers inside the disk.  This module
sits in front of it and turns what a person types (``"98, 183, 37"``)
into that clean list.

Two modes:
    - **lenient** (default) — silently drop anything that is not a
      whole number inside ``[0, num_tracks)``.  This is how the
      interactive simulator behaves: a stray comma or a typo just
      disappears from the queue.
    - **strict** — refuse the whole input and name every bad token.

Tokens may be separated by commas, whitespace, or both.  Duplicates are
kept: two requests for the same track are two requests.
"""

import re

from py_disksched.disk import DEFAULT_NUM_TRACKS

_SEPARATORS = re.compile(r"[,\s]+")
_INTEGER = re.compile(r"[+-]?\d+")


class RequestParseError(ValueError):
    """Raised when user-supplied simulator input cannot be used."""


def _parse_int(token: str) -> int | None:
    if not _INTEGER.fullmatch(token):
        return None
    return int(token)


def parse_requests(
    text: str,
    num_tracks: int = DEFAULT_NUM_TRACKS,
    *,
    strict: bool = False,
) -> list[int]:
    """Parse a comma/space separated request queue.

    Args:
        text: Raw user input such as ``"98, 183, 37"``.
        num_tracks: Disk size; valid tracks are ``0`` to ``num_tracks - 1``.
        strict: Raise on bad tokens instead of dropping them.

    Returns:
        The requests in input order, duplicates included.

    Raises:
        RequestParseError: In strict mode, if any token is not an
            integer inside the disk.

    """
    requests: list[int] = []
    rejected: list[str] = []
    for token in _SEPARATORS.split(text.strip()):
        if not token:
            continue
        value = _parse_int(token)
        if value is None or not 0 <= value < num_tracks:
            rejected.append(token)
            continue
        requests.append(value)
    if strict and rejected:
        msg = f"Invalid requests (must be whole numbers 0-{num_tracks - 1}): {', '.join(rejected)}"
        raise RequestParseError(msg)
    return requests


def coerce_requests(
    value: object,
    num_tracks: int = DEFAULT_NUM_TRACKS,
    *,
    strict: bool = True,
) -> list[int]:
    """Accept either a text queue or a list of numbers.

    Lists may hold ints or integer strings; anything else is bad input.

    Raises:
        RequestParseError: If *value* is neither a string nor a list, or
            (in strict mode) holds an unusable entry.

    """
    if isinstance(value, str):
        return parse_requests(value, num_tracks, strict=strict)
    if not isinstance(value, list | tuple):
        msg = f"Requests must be a list or a string, got {type(value).__name__}"
        raise RequestParseError(msg)
    requests: list[int] = []
    rejected: list[str] = []
    for item in value:
        number = None
        if isinstance(item, str):
            number = _parse_int(item.strip())
        elif isinstance(item, int) and not isinstance(item, bool):
            number = item
        if number is None or not 0 <= number < num_tracks:
            rejected.append(repr(item))
            continue
        requests.append(number)
    if strict and rejected:
        msg = f"Invalid requests (must be whole numbers 0-{num_tracks - 1}): {', '.join(rejected)}"
        raise RequestParseError(msg)
    return requests


def validate_num_tracks(value: object) -> int:
    """Return *value* as a positive track count.

    Raises:
        RequestParseError: If it is not a positive whole number.

    """
    number = _parse_int(str(value).strip()) if not isinstance(value, bool) else None
    if number is None or number <= 0:
        msg = f"Track count must be a positive whole number, got {value!r}"
        raise RequestParseError(msg)
    return number


def validate_position(value: object, num_tracks: int = DEFAULT_NUM_TRACKS, *, what: str = "Head position") -> int:
    """Return *value* as a track number inside the disk.

    Raises:
        RequestParseError: If it is not a whole number in ``[0, num_tracks)``.

    """
    number = _parse_int(str(value).strip()) if not isinstance(value, bool) else None
    if number is None:
        msg = f"{what} must be a whole number, got {value!r}"
        raise RequestParseError(msg)
    if not 0 <= number < num_tracks:
        msg = f"{what} {number} is outside the disk (valid tracks: 0-{num_tracks - 1})"
        raise RequestParseError(msg)
    return number
