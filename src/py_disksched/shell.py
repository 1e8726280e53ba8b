"""The shell — command interpreter for the disk scheduling simulator.

The shell reads a command string, splits it into a command name and
arguments, dispatches to the matching handler, and returns a string.

Design choices:
    - **Returns strings, not prints.**  This keeps the shell fully
      testable and separates concerns (the REPL decides how to display
      output).
    - **Command dispatch via a dict.**  Adding a new command means
      writing a method and adding one dict entry.
    - **Errors are output, not exceptions.**  Bad input produces a line
      starting with ``Error:`` and leaves the session as it was.
    - **Virtual time.**  Playback runs on a ``ManualTickSource``;
      ``tick`` moves the clock so auto-advance can be watched one
      interval at a time.
"""

from collections.abc import Callable
from typing import TypeAlias

from py_disksched.config import SimulatorConfig
from py_disksched.disk import Algorithm, Direction, ScheduleError
from py_disksched.logging import LogLevel
from py_disksched.render import format_comparison, format_result, format_sequence, format_table, format_track
from py_disksched.requests import RequestParseError, parse_requests, validate_position
from py_disksched.session import DiskScheduler
from py_disksched.timer import ManualTickSource

# Type alias for a command handler: takes a list of args, returns output.
_Handler: TypeAlias = Callable[[list[str]], str]


class Shell:
    """Command interpreter that owns one simulation session."""

    EXIT_SENTINEL = "__EXIT__"

    def __init__(self, *, config: SimulatorConfig | None = None) -> None:
        """Create a shell with a fresh session.

        Args:
            config: Simulator settings (defaults used when omitted).

        """
        self._ticks = ManualTickSource()
        self._scheduler = DiskScheduler(config=config, tick_source=self._ticks)
        self._history: list[str] = []

        # Command dispatch table: maps command names to handler methods.
        self._commands: dict[str, _Handler] = {
            "help": self._cmd_help,
            "algo": self._cmd_algo,
            "direction": self._cmd_direction,
            "head": self._cmd_head,
            "requests": self._cmd_requests,
            "add": self._cmd_add,
            "clear": self._cmd_clear,
            "run": self._cmd_run,
            "compare": self._cmd_compare,
            "table": self._cmd_table,
            "show": self._cmd_show,
            "play": self._cmd_play,
            "pause": self._cmd_pause,
            "next": self._cmd_next,
            "prev": self._cmd_prev,
            "seek": self._cmd_seek,
            "reset": self._cmd_reset,
            "tick": self._cmd_tick,
            "status": self._cmd_status,
            "log": self._cmd_log,
            "config": self._cmd_config,
            "history": self._cmd_history,
            "exit": self._cmd_exit,
        }

    @property
    def scheduler(self) -> DiskScheduler:
        """Return the session this shell drives."""
        return self._scheduler

    @property
    def ticks(self) -> ManualTickSource:
        """Return the virtual clock behind playback."""
        return self._ticks

    @property
    def command_names(self) -> list[str]:
        """Return all command names, sorted."""
        return sorted(self._commands)

    def execute(self, command: str) -> str:
        """Parse and execute a single command.

        Args:
            command: The raw command string (e.g. "algo sstf").

        Returns:
            The command output, an ``Error:`` line, or ``EXIT_SENTINEL``.

        """
        stripped = command.strip()
        if not stripped:
            return ""
        self._history.append(stripped)
        name, *args = stripped.split()
        handler = self._commands.get(name.lower())
        if handler is None:
            return f"Unknown command: {name}"
        try:
            return handler(args)
        except (ScheduleError, RequestParseError) as e:
            self._scheduler.logger.log(LogLevel.WARNING, f"{name}: {e}", source="shell")
            return f"Error: {e}"

    # -- help and inputs -------------------------------------------------------

    def _cmd_help(self, _args: list[str]) -> str:
        """List available commands."""
        return "Available commands: " + ", ".join(self.command_names)

    def _cmd_algo(self, args: list[str]) -> str:
        """Show or select the scheduling policy."""
        if not args:
            return f"Current algorithm: {self._scheduler.algorithm.label}"
        algorithm = Algorithm.parse(args[0])
        self._scheduler.algorithm = algorithm
        return f"Algorithm set to {algorithm.label}"

    def _cmd_direction(self, args: list[str]) -> str:
        """Show or set the initial sweep direction."""
        if not args:
            return f"Current direction: {self._scheduler.direction}"
        direction = Direction.parse(args[0])
        self._scheduler.direction = direction
        return f"Direction set to {direction}"

    def _cmd_head(self, args: list[str]) -> str:
        """Show or move the head: ``head <pos> [previous]``."""
        scheduler = self._scheduler
        if args:
            position = validate_position(args[0], scheduler.num_tracks)
            previous = None
            if len(args) > 1:
                previous = validate_position(args[1], scheduler.num_tracks, what="Previous position")
            scheduler.set_head(position, previous)
        return f"Head: {scheduler.head} (previous: {scheduler.previous_head})"

    def _cmd_requests(self, args: list[str]) -> str:
        """Show or replace the request queue."""
        scheduler = self._scheduler
        if args:
            scheduler.set_requests(parse_requests(" ".join(args), scheduler.num_tracks, strict=True))
        pending = scheduler.pending
        if not pending:
            return "Requests: (none)"
        return "Requests: " + ", ".join(str(r) for r in pending)

    def _cmd_add(self, args: list[str]) -> str:
        """Append requests to the queue."""
        if not args:
            return "Usage: add <track> [track...]"
        tracks = parse_requests(" ".join(args), self._scheduler.num_tracks, strict=True)
        for track in tracks:
            self._scheduler.add_request(track)
        return f"Added {len(tracks)} request(s); {len(self._scheduler.pending)} pending"

    def _cmd_clear(self, _args: list[str]) -> str:
        """Empty the request queue."""
        self._scheduler.clear_requests()
        return "Request queue cleared"

    # -- results -----------------------------------------------------------------

    def _cmd_run(self, _args: list[str]) -> str:
        """Schedule the queue with the selected policy."""
        return format_result(self._scheduler.run())

    def _cmd_compare(self, _args: list[str]) -> str:
        """Run every policy on the same input."""
        return format_comparison(self._scheduler.compare())

    def _cmd_table(self, _args: list[str]) -> str:
        """Show each move of the last result."""
        result = self._scheduler.last_result
        if result is None:
            return "No schedule yet. Type 'run' first."
        return format_table(result)

    def _cmd_show(self, _args: list[str]) -> str:
        """Draw the disk with the head at its current playback position."""
        scheduler = self._scheduler
        position = scheduler.controller.current_position
        head = scheduler.head if position is None else position
        strip = format_track(scheduler.num_tracks, scheduler.pending, head)
        return strip + "\n" + self._status_line()

    # -- playback ----------------------------------------------------------------

    def _cmd_play(self, _args: list[str]) -> str:
        """Start auto-advance."""
        if self._scheduler.last_result is None:
            return "No schedule yet. Type 'run' first."
        self._scheduler.controller.play()
        return self._status_line()

    def _cmd_pause(self, _args: list[str]) -> str:
        """Stop auto-advance."""
        self._scheduler.controller.pause()
        return self._status_line()

    def _cmd_next(self, _args: list[str]) -> str:
        """Reveal the next head position."""
        self._scheduler.controller.next_step()
        return self._status_line()

    def _cmd_prev(self, _args: list[str]) -> str:
        """Hide the latest head position."""
        self._scheduler.controller.prev_step()
        return self._status_line()

    def _cmd_seek(self, args: list[str]) -> str:
        """Jump to a step: ``seek <n>``."""
        if not args:
            return "Usage: seek <step>"
        try:
            step = int(args[0])
        except ValueError:
            return f"Error: invalid step '{args[0]}'"
        self._scheduler.controller.seek(step)
        return self._status_line()

    def _cmd_reset(self, _args: list[str]) -> str:
        """Rewind playback to the start."""
        self._scheduler.controller.reset()
        return self._status_line()

    def _cmd_tick(self, args: list[str]) -> str:
        """Advance the virtual clock: ``tick [ms]`` (default one interval)."""
        ms = self._scheduler.controller.interval_ms
        if args:
            try:
                ms = int(args[0])
            except ValueError:
                return f"Error: invalid duration '{args[0]}'"
            if ms < 0:
                return f"Error: duration must not be negative, got {ms}"
        fired = self._ticks.advance(ms)
        return f"Advanced {ms} ms ({fired} tick(s))\n" + self._status_line()

    def _cmd_status(self, _args: list[str]) -> str:
        """Show inputs and playback state."""
        scheduler = self._scheduler
        lines = [
            f"Algorithm: {scheduler.algorithm.label}  Direction: {scheduler.direction}",
            f"Head: {scheduler.head} (previous: {scheduler.previous_head})  Tracks: {scheduler.num_tracks}",
            f"Pending requests: {len(scheduler.pending)}",
        ]
        result = scheduler.last_result
        if result is not None:
            lines.append(f"Last run: {result.algorithm.label}, total movement {result.total_movement}")
        lines.append(self._status_line())
        return "\n".join(lines)

    def _status_line(self) -> str:
        snap = self._scheduler.controller.snapshot()
        line = f"Playback: {snap.state} (step {snap.cursor}/{snap.length})"
        if snap.animated_prefix:
            line += f"\nRevealed: {format_sequence(snap.animated_prefix)}"
        return line

    # -- housekeeping --------------------------------------------------------------

    def _cmd_log(self, args: list[str]) -> str:
        """Show the event log: ``log [min-level]``."""
        min_level = None
        if args:
            try:
                min_level = LogLevel.parse(args[0])
            except ValueError as e:
                return f"Error: {e}"
        entries = self._scheduler.logger.filter(min_level=min_level)
        if not entries:
            return "Log is empty."
        return "\n".join(str(e) for e in entries)

    def _cmd_config(self, _args: list[str]) -> str:
        """Show the simulator settings."""
        return "\n".join(f"{key} = {value}" for key, value in self._scheduler.config.to_dict().items())

    def _cmd_history(self, _args: list[str]) -> str:
        """Show previously entered commands."""
        return "\n".join(f"{i:>4}  {cmd}" for i, cmd in enumerate(self._history, start=1))

    def _cmd_exit(self, _args: list[str]) -> str:
        """Stop playback and signal the REPL to quit."""
        self._scheduler.controller.pause()
        return self.EXIT_SENTINEL
