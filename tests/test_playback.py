"""Tests for the playback controller.

The controller reveals a finished schedule one head position at a time,
either manually (next/prev/seek) or on a fixed-period timer.  These
tests drive it with the deterministic ``ManualTickSource``.
"""

import pytest

from py_disksched.logging import Logger, LogLevel
from py_disksched.playback import PlaybackController, PlaybackSnapshot, PlaybackState
from py_disksched.timer import ManualTickSource, TimerHandle

INTERVAL = 300
SEQUENCE = (53, 65, 67, 37, 14)
LENGTH = len(SEQUENCE)


def _controller(sequence: tuple[int, ...] = SEQUENCE) -> tuple[PlaybackController, ManualTickSource]:
    """Create a controller loaded with *sequence* on a virtual clock."""
    ticks = ManualTickSource()
    controller = PlaybackController(ticks, interval_ms=INTERVAL)
    controller.load(sequence)
    return controller, ticks


class _LeakyTickSource:
    """Tick source whose callbacks survive cancellation (a late timer thread)."""

    def __init__(self) -> None:
        self.callbacks: list[tuple[TimerHandle, object]] = []

    def schedule_periodic(self, interval_ms: int, callback: object) -> TimerHandle:  # noqa: ARG002
        handle = TimerHandle()
        self.callbacks.append((handle, callback))
        return handle


class TestInitialState:
    """A freshly loaded controller is idle with nothing revealed."""

    def test_empty_controller(self) -> None:
        """Before any load the controller is idle and not finished."""
        controller = PlaybackController(ManualTickSource())
        assert controller.state is PlaybackState.IDLE
        assert controller.animated_prefix == ()
        assert not controller.is_finished
        assert controller.current_position is None

    def test_loaded_is_idle(self) -> None:
        """Loading a sequence leaves the cursor at zero."""
        controller, _ticks = _controller()
        assert controller.state is PlaybackState.IDLE
        assert controller.cursor == 0
        assert controller.sequence == SEQUENCE

    def test_bad_interval(self) -> None:
        """The auto-advance period must be positive."""
        with pytest.raises(ValueError, match="positive"):
            PlaybackController(ManualTickSource(), interval_ms=0)


class TestManualStepping:
    """next/prev/seek move the cursor within bounds."""

    def test_next_reveals_prefix(self) -> None:
        """Each next_step reveals one more position."""
        controller, _ticks = _controller()
        controller.next_step()
        assert controller.animated_prefix == (53,)
        assert controller.state is PlaybackState.PAUSED
        controller.next_step()
        assert controller.animated_prefix == (53, 65)
        assert controller.current_position == 65

    def test_next_past_end_is_noop(self) -> None:
        """Stepping beyond the end stays finished."""
        controller, _ticks = _controller()
        for _ in range(LENGTH + 3):
            controller.next_step()
        assert controller.cursor == LENGTH
        assert controller.is_finished
        assert controller.state is PlaybackState.FINISHED

    def test_prev_at_start_is_noop(self) -> None:
        """Stepping back from zero stays at zero."""
        controller, _ticks = _controller()
        controller.prev_step()
        assert controller.cursor == 0

    def test_prev_leaves_finished(self) -> None:
        """From FINISHED, prev_step returns to PAUSED."""
        controller, _ticks = _controller()
        controller.seek(LENGTH)
        controller.prev_step()
        assert controller.cursor == LENGTH - 1
        assert controller.state is PlaybackState.PAUSED

    def test_prev_from_finished_single_position(self) -> None:
        """With one position, stepping back from FINISHED lands on IDLE at zero."""
        controller = PlaybackController(ManualTickSource())
        controller.load([53])
        controller.next_step()
        assert controller.state is PlaybackState.FINISHED
        controller.prev_step()
        assert controller.cursor == 0
        assert controller.state is PlaybackState.IDLE

    def test_seek_clamps(self) -> None:
        """seek clamps to the sequence bounds."""
        controller, _ticks = _controller()
        controller.seek(99)
        assert controller.cursor == LENGTH
        controller.seek(-4)
        assert controller.cursor == 0

    def test_prefix_length_matches_cursor(self) -> None:
        """The animated prefix always has cursor elements."""
        controller, _ticks = _controller()
        for _ in range(LENGTH + 1):
            controller.next_step()
            assert len(controller.animated_prefix) == controller.cursor
        for _ in range(LENGTH + 1):
            controller.prev_step()
            assert len(controller.animated_prefix) == controller.cursor


class TestAutoAdvance:
    """play() advances one step per tick until the end."""

    def test_play_advances_on_ticks(self) -> None:
        """Each interval reveals one position."""
        controller, ticks = _controller()
        controller.play()
        assert controller.state is PlaybackState.PLAYING
        ticks.advance(INTERVAL - 1)
        assert controller.cursor == 0
        ticks.advance(1)
        assert controller.cursor == 1

    def test_cursor_is_monotonic_while_playing(self) -> None:
        """Auto-advance never moves the cursor backwards."""
        controller, ticks = _controller()
        controller.play()
        seen = [controller.cursor]
        for _ in range(LENGTH + 2):
            ticks.advance(INTERVAL)
            seen.append(controller.cursor)
        assert seen == sorted(seen)
        assert seen[-1] == LENGTH

    def test_finishing_stops_timer(self) -> None:
        """Reaching the end stops auto-advance and cancels the timer."""
        controller, ticks = _controller()
        controller.play()
        fired = ticks.advance(INTERVAL * 20)
        assert fired == LENGTH
        assert controller.is_finished
        assert not controller.is_playing
        assert ticks.pending == 0

    def test_play_when_finished_is_noop(self) -> None:
        """A finished controller cannot be played."""
        controller, ticks = _controller()
        controller.seek(LENGTH)
        controller.play()
        assert not controller.is_playing
        assert ticks.pending == 0

    def test_play_twice_arms_one_timer(self) -> None:
        """Calling play while playing does not double the speed."""
        controller, ticks = _controller()
        controller.play()
        controller.play()
        assert ticks.pending == 1
        ticks.advance(INTERVAL)
        assert controller.cursor == 1

    def test_play_empty_sequence_is_noop(self) -> None:
        """There is nothing to play in an empty sequence."""
        controller, ticks = _controller(())
        controller.play()
        assert not controller.is_playing
        assert ticks.pending == 0

    def test_prev_while_playing_keeps_playing(self) -> None:
        """Stepping back does not stop auto-advance."""
        controller, ticks = _controller()
        controller.play()
        ticks.advance(INTERVAL * 2)
        controller.prev_step()
        assert controller.cursor == 1
        assert controller.is_playing
        ticks.advance(INTERVAL)
        assert controller.cursor == 2


class TestCancellation:
    """Pause and reload must stop every pending tick."""

    def test_pause_stops_ticks(self) -> None:
        """No advance happens after pause."""
        controller, ticks = _controller()
        controller.play()
        ticks.advance(INTERVAL)
        controller.pause()
        ticks.advance(INTERVAL * 10)
        assert controller.cursor == 1
        assert controller.state is PlaybackState.PAUSED
        assert ticks.pending == 0

    def test_pause_is_idempotent(self) -> None:
        """Pausing twice, or while idle, is harmless."""
        controller, _ticks = _controller()
        controller.pause()
        controller.pause()
        assert controller.state is PlaybackState.IDLE

    def test_load_cancels_playback(self) -> None:
        """Loading a new sequence resets and silences the old timer."""
        controller, ticks = _controller()
        controller.play()
        ticks.advance(INTERVAL)
        controller.load((1, 2, 3))
        ticks.advance(INTERVAL * 10)
        assert controller.cursor == 0
        assert controller.state is PlaybackState.IDLE
        assert ticks.pending == 0

    def test_reset_rewinds(self) -> None:
        """reset stops playback and returns to the start."""
        controller, ticks = _controller()
        controller.play()
        ticks.advance(INTERVAL * 3)
        controller.reset()
        assert controller.cursor == 0
        assert not controller.is_playing
        assert ticks.pending == 0

    def test_stale_tick_is_ignored(self) -> None:
        """A tick from a cancelled timer that still fires changes nothing."""
        source = _LeakyTickSource()
        controller = PlaybackController(source, interval_ms=INTERVAL)  # type: ignore[arg-type]
        controller.load(SEQUENCE)
        controller.play()
        controller.pause()
        controller.play()
        (old_handle, old_tick), (_new_handle, new_tick) = source.callbacks
        assert not old_handle.active
        old_tick()  # type: ignore[operator]
        assert controller.cursor == 0
        new_tick()  # type: ignore[operator]
        assert controller.cursor == 1


class TestObservers:
    """Change notifications and logging."""

    def test_on_change_receives_snapshots(self) -> None:
        """Every change is reported with a snapshot."""
        snapshots: list[PlaybackSnapshot] = []
        controller = PlaybackController(ManualTickSource(), on_change=snapshots.append)
        controller.load(SEQUENCE)
        controller.next_step()
        controller.next_step()
        assert [s.cursor for s in snapshots] == [0, 1, 2]
        assert snapshots[-1].animated_prefix == (53, 65)

    def test_snapshot_to_dict(self) -> None:
        """The snapshot dict carries state flags."""
        controller, _ticks = _controller()
        controller.seek(LENGTH)
        data = controller.snapshot().to_dict()
        assert data["state"] == "finished"
        assert data["is_finished"] is True
        assert data["current_position"] == SEQUENCE[-1]

    def test_logs_transitions(self) -> None:
        """Play, pause and finish are logged under 'playback'."""
        logger = Logger()
        ticks = ManualTickSource()
        controller = PlaybackController(ticks, interval_ms=INTERVAL, logger=logger)
        controller.load(SEQUENCE)
        controller.play()
        ticks.advance(INTERVAL * LENGTH)
        messages = [e.message for e in logger.filter(min_level=LogLevel.INFO, source="playback")]
        assert messages[0] == "play from step 0"
        assert messages[-1] == f"finished after {LENGTH} positions"
