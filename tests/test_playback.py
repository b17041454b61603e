"""Tests for the playback state machine and its controller."""

import pytest

from bar_race.race import (
    ManualFrameScheduler,
    MonotonicFrameScheduler,
    PlaybackController,
    PlaybackMode,
    initial_state,
    pause,
    seek,
    tick,
    toggle_play,
)

INTERVAL_MS = 100


class TestTransitions:
    """Pure state transitions, no scheduler involved."""

    def test_initial_state_is_playing_first_frame(self):
        state = initial_state(5, now=0)

        assert state.index == 0
        assert state.playing
        assert state.clock_mark == 0

    def test_initial_state_requires_frames(self):
        with pytest.raises(ValueError):
            initial_state(0, now=0)

    def test_tick_waits_for_strictly_more_than_interval(self):
        state = initial_state(5, now=0)

        result = tick(state, INTERVAL_MS, 5, INTERVAL_MS)

        assert not result.advanced
        assert result.reschedule
        assert result.state == state

    def test_tick_advances_one_frame_and_resets_clock(self):
        state = initial_state(5, now=0)

        result = tick(state, 250, 5, INTERVAL_MS)

        assert result.advanced
        assert result.state.index == 1
        assert result.state.clock_mark == 250

    def test_tick_wraps_after_last_frame(self):
        state = seek(initial_state(3, now=0), 2, now=0)

        result = tick(state, 101, 3, INTERVAL_MS)

        assert result.state.index == 0

    def test_tick_while_paused_stops_the_loop(self):
        state = pause(initial_state(3, now=0))

        result = tick(state, 1000, 3, INTERVAL_MS)

        assert not result.advanced
        assert not result.reschedule
        assert result.state.index == 0

    def test_toggle_play_keeps_clock_mark(self):
        state = initial_state(3, now=10)

        paused = toggle_play(state)
        resumed = toggle_play(paused)

        assert paused.mode is PlaybackMode.PAUSED
        assert resumed.mode is PlaybackMode.PLAYING
        assert resumed.clock_mark == 10

    def test_seek_resets_clock_and_optionally_pauses(self):
        state = initial_state(10, now=0)

        moved = seek(state, 4, now=40)
        stopped = seek(state, 4, now=40, pause=True)

        assert moved.index == 4 and moved.clock_mark == 40 and moved.playing
        assert stopped.index == 4 and not stopped.playing


def test_autoplay_advances_and_wraps_over_full_sequence():
    """Periods 1950..2020 step once per interval and wrap back to the first one."""
    frame_count = len(range(1950, 2021))
    scheduler = ManualFrameScheduler()
    controller = PlaybackController(frame_count, scheduler, INTERVAL_MS)

    scheduler.advance_by(50)
    assert controller.index == 0

    scheduler.advance_by(51)
    assert controller.index == 1

    for _ in range(frame_count - 1):
        scheduler.advance_by(INTERVAL_MS + 1)

    assert controller.index == 0
    assert controller.steps == frame_count


def test_at_most_one_step_per_callback():
    scheduler = ManualFrameScheduler()
    controller = PlaybackController(10, scheduler, INTERVAL_MS)

    scheduler.advance_to(10_000)

    assert controller.index == 1


def test_pause_cancels_pending_callback():
    scheduler = ManualFrameScheduler()
    controller = PlaybackController(10, scheduler, INTERVAL_MS)
    assert controller.is_scheduled

    controller.pause()
    scheduler.advance_by(1000)

    assert not controller.is_scheduled
    assert scheduler.pending_count == 0
    assert controller.index == 0


def test_toggle_resumes_scheduling():
    scheduler = ManualFrameScheduler()
    controller = PlaybackController(10, scheduler, INTERVAL_MS, autoplay=False)
    assert not controller.is_scheduled

    controller.toggle_play()
    scheduler.advance_by(200)

    assert controller.playing
    assert controller.index == 1


def test_close_cancels_and_ignores_later_play():
    scheduler = ManualFrameScheduler()
    controller = PlaybackController(10, scheduler, INTERVAL_MS)

    controller.close()
    controller.toggle_play()
    controller.toggle_play()

    assert scheduler.pending_count == 0


def test_seek_out_of_range():
    controller = PlaybackController(3, ManualFrameScheduler(), INTERVAL_MS)

    with pytest.raises(IndexError):
        controller.seek(3)


def test_listeners_receive_index_changes():
    scheduler = ManualFrameScheduler()
    controller = PlaybackController(5, scheduler, INTERVAL_MS)
    seen: list[int] = []
    controller.subscribe(seen.append)

    scheduler.advance_by(101)
    controller.seek(3, pause=True)
    controller.seek(3)

    assert seen == [1, 3]


def test_scheduler_rejects_backwards_clock():
    scheduler = ManualFrameScheduler(start_ms=100)

    with pytest.raises(ValueError):
        scheduler.advance_to(50)


def test_callback_cancelled_during_same_batch_is_skipped():
    scheduler = ManualFrameScheduler()
    fired: list[str] = []
    second = 0

    def first_callback(_timestamp):
        fired.append("first")
        scheduler.cancel_frame(second)

    scheduler.request_frame(first_callback)
    second = scheduler.request_frame(lambda _timestamp: fired.append("second"))
    scheduler.advance_to(10)

    assert fired == ["first"]


def test_closing_controller_from_another_listener_stops_it_this_batch():
    scheduler = ManualFrameScheduler()
    leader = PlaybackController(5, scheduler, INTERVAL_MS)
    follower = PlaybackController(5, scheduler, INTERVAL_MS)
    leader.subscribe(lambda _index: follower.close())

    scheduler.advance_to(101)

    assert leader.index == 1
    assert follower.index == 0
    assert follower.steps == 0


def test_monotonic_scheduler_runs_controller_on_wall_clock():
    scheduler = MonotonicFrameScheduler(refresh_hz=200)
    controller = PlaybackController(5, scheduler, interval_ms=10)

    scheduler.run_for(150)

    assert controller.steps >= 1
    assert controller.is_scheduled
    assert scheduler.now() >= 150
