"""Tests for the simulator shell.

The shell returns strings rather than printing, so every command can be
checked directly.  Playback runs on the shell's virtual clock, which the
``tick`` command advances.
"""

from py_disksched.config import SimulatorConfig
from py_disksched.shell import Shell

SEQUENCE_LENGTH = 9  # textbook head + 8 requests


class TestBasics:
    """Dispatch, help and exit."""

    def test_help_lists_commands(self) -> None:
        """help names every command."""
        output = Shell().execute("help")
        for name in ("run", "play", "tick", "compare", "exit"):
            assert name in output

    def test_unknown_command(self) -> None:
        """Unknown commands are reported, not raised."""
        assert Shell().execute("defrag") == "Unknown command: defrag"

    def test_blank_line(self) -> None:
        """A blank line produces no output."""
        assert Shell().execute("   ") == ""

    def test_exit_returns_sentinel(self) -> None:
        """exit signals the REPL to stop."""
        assert Shell().execute("exit") == Shell.EXIT_SENTINEL

    def test_history(self) -> None:
        """Commands are numbered in the history."""
        shell = Shell()
        shell.execute("algo")
        shell.execute("head")
        assert shell.execute("history").splitlines() == ["   1  algo", "   2  head", "   3  history"]

    def test_commands_are_case_insensitive(self) -> None:
        """Command names ignore case."""
        assert Shell().execute("ALGO").startswith("Current algorithm")


class TestInputs:
    """Commands that edit the simulation inputs."""

    def test_algo(self) -> None:
        """algo shows and sets the policy."""
        shell = Shell()
        assert shell.execute("algo") == "Current algorithm: FCFS"
        assert shell.execute("algo c-scan") == "Algorithm set to C-SCAN"
        assert shell.scheduler.algorithm == "CSCAN"

    def test_algo_unknown(self) -> None:
        """Unknown policies are errors."""
        assert Shell().execute("algo elevator").startswith("Error: Unknown algorithm")

    def test_direction(self) -> None:
        """direction shows and sets the sweep direction."""
        shell = Shell()
        assert shell.execute("direction") == "Current direction: up"
        assert shell.execute("direction down") == "Direction set to down"
        assert shell.execute("direction left").startswith("Error:")

    def test_head(self) -> None:
        """head moves the head and records the previous position."""
        shell = Shell()
        assert shell.execute("head") == "Head: 53 (previous: 30)"
        assert shell.execute("head 100 90") == "Head: 100 (previous: 90)"

    def test_head_invalid(self) -> None:
        """Positions off the disk are errors and change nothing."""
        shell = Shell()
        assert shell.execute("head 200").startswith("Error:")
        assert shell.execute("head abc").startswith("Error:")
        assert shell.scheduler.head == 53

    def test_requests(self) -> None:
        """requests shows or replaces the queue."""
        shell = Shell()
        assert shell.execute("requests 10, 20 30") == "Requests: 10, 20, 30"
        assert shell.execute("requests") == "Requests: 10, 20, 30"

    def test_requests_invalid(self) -> None:
        """A bad token rejects the whole new queue."""
        shell = Shell()
        assert shell.execute("requests 10 300").startswith("Error:")
        assert shell.scheduler.pending == [98, 183, 37, 122, 14, 124, 65, 67]

    def test_add_and_clear(self) -> None:
        """add appends; clear empties."""
        shell = Shell()
        shell.execute("clear")
        assert shell.execute("requests") == "Requests: (none)"
        assert shell.execute("add 5 6") == "Added 2 request(s); 2 pending"
        assert shell.execute("add") == "Usage: add <track> [track...]"


class TestResults:
    """run, compare, table and show."""

    def test_run_default(self) -> None:
        """The default run is FCFS on the textbook queue."""
        output = Shell().execute("run")
        assert "Sequence: 53 -> 98 -> 183" in output
        assert "Total head movement: 640" in output

    def test_run_sstf(self) -> None:
        """Switching policy changes the result."""
        shell = Shell()
        shell.execute("algo sstf")
        assert "Total head movement: 236" in shell.execute("run")

    def test_run_empty_queue(self) -> None:
        """An empty queue yields just the head."""
        shell = Shell()
        shell.execute("clear")
        output = shell.execute("run")
        assert "Sequence: 53\n" in output
        assert "Total head movement: 0" in output

    def test_compare(self) -> None:
        """compare ranks every policy."""
        lines = Shell().execute("compare").splitlines()
        assert lines[1].startswith("SSTF")
        assert len(lines) == 7

    def test_table_needs_run(self) -> None:
        """table explains itself before the first run."""
        shell = Shell()
        assert shell.execute("table") == "No schedule yet. Type 'run' first."
        shell.execute("run")
        assert shell.execute("table").startswith("STEP")

    def test_show(self) -> None:
        """show draws the strip with the head."""
        output = Shell().execute("show")
        assert output.startswith("|")
        assert "^ 53" in output
        assert "Playback: idle (step 0/0)" in output

    def test_config(self) -> None:
        """config lists the settings."""
        output = Shell(config=SimulatorConfig(num_tracks=300)).execute("config")
        assert "num_tracks = 300" in output


class TestPlayback:
    """Playback commands on the virtual clock."""

    def test_play_needs_run(self) -> None:
        """Nothing to play before run."""
        assert Shell().execute("play") == "No schedule yet. Type 'run' first."

    def test_play_and_tick(self) -> None:
        """Each tick of the default interval reveals one position."""
        shell = Shell()
        shell.execute("run")
        assert shell.execute("play").startswith("Playback: playing (step 0/9)")
        output = shell.execute("tick")
        assert output.startswith("Advanced 300 ms (1 tick(s))")
        assert "Revealed: 53" in output

    def test_tick_to_the_end(self) -> None:
        """A long tick finishes playback and stops the timer."""
        shell = Shell()
        shell.execute("run")
        shell.execute("play")
        output = shell.execute("tick 10000")
        assert f"({SEQUENCE_LENGTH} tick(s))" in output
        assert f"Playback: finished (step {SEQUENCE_LENGTH}/{SEQUENCE_LENGTH})" in output
        assert shell.ticks.pending == 0

    def test_pause(self) -> None:
        """Ticks after pause change nothing."""
        shell = Shell()
        shell.execute("run")
        shell.execute("play")
        shell.execute("tick")
        shell.execute("pause")
        assert "paused (step 1/9)" in shell.execute("tick 3000")

    def test_next_prev_seek_reset(self) -> None:
        """Manual stepping commands."""
        shell = Shell()
        shell.execute("run")
        assert "step 1/9" in shell.execute("next")
        assert "step 0/9" in shell.execute("prev")
        assert "finished (step 9/9)" in shell.execute("seek 50")
        assert "idle (step 0/9)" in shell.execute("reset")

    def test_bad_arguments(self) -> None:
        """Non-numeric arguments are errors."""
        shell = Shell()
        assert shell.execute("seek") == "Usage: seek <step>"
        assert shell.execute("seek x").startswith("Error:")
        assert shell.execute("tick soon").startswith("Error:")
        assert shell.execute("tick -5").startswith("Error:")

    def test_status(self) -> None:
        """status summarises inputs and the last run."""
        shell = Shell()
        shell.execute("algo look")
        shell.execute("run")
        output = shell.execute("status")
        assert "Algorithm: LOOK  Direction: up" in output
        assert "Last run: LOOK, total movement 299" in output

    def test_exit_pauses(self) -> None:
        """exit stops any running playback."""
        shell = Shell()
        shell.execute("run")
        shell.execute("play")
        shell.execute("exit")
        assert not shell.scheduler.controller.is_playing
