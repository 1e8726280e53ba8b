"""Tab completer for the simulator shell.

The completer separates **what to complete** (pure logic, fully
testable) from **how to wire it** (readline integration in the REPL).

The ``complete(text, state)`` method is the readline callback.  It
delegates to ``completions(text, line)`` which looks at the input so
far and returns a list of candidate strings.
"""

from __future__ import annotations

import readline
from typing import TYPE_CHECKING

from py_disksched.disk import Algorithm, Direction
from py_disksched.logging import LogLevel

if TYPE_CHECKING:
    from py_disksched.shell import Shell

# Commands whose first argument comes from a fixed vocabulary.
_ARGUMENTS: dict[str, list[str]] = {
    "algo": [a.value.lower() for a in Algorithm],
    "direction": [d.value for d in Direction],
    "log": [level.name.lower() for level in LogLevel],
}


class Completer:
    """Context-aware tab completer for the simulator shell."""

    def __init__(self, shell: Shell) -> None:
        """Create a completer attached to a shell instance."""
        self._shell = shell

    def complete(self, text: str, state: int) -> str | None:
        """Readline callback — return the *state*-th candidate for *text*.

        Args:
            text: The partial word being completed.
            state: Index into the candidate list (0, 1, 2, …).

        Returns:
            The candidate at *state*, or ``None`` when exhausted.

        """
        line = readline.get_line_buffer()
        candidates = self.completions(text, line)
        if state < len(candidates):
            return candidates[state]
        return None

    def completions(self, text: str, line: str) -> list[str]:
        """Return completion candidates based on context.

        Args:
            text: The partial word under the cursor.
            line: The full input line so far.

        Returns:
            Sorted list of matching candidates.

        """
        words = line.lstrip().split()

        # No words yet, or still typing the first word → command completion
        if not words or (len(words) == 1 and not line.endswith(" ")):
            return [name for name in self._shell.command_names if name.startswith(text)]

        # Only the first argument has a vocabulary.
        typing_first_arg = len(words) == 1 or (len(words) == 2 and not line.endswith(" "))  # noqa: PLR2004
        if not typing_first_arg:
            return []
        options = _ARGUMENTS.get(words[0].lower(), [])
        return sorted(o for o in options if o.startswith(text.lower()))
