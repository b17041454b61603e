"""Tests for timeline scrubbing."""

from bar_race.data import Frame
from bar_race.race import (
    ManualFrameScheduler,
    PlaybackController,
    TimelineScrubber,
    build_time_scale,
)


def make_scrubber(periods, autoplay=True):
    frames = [Frame(period=period, entities=()) for period in periods]
    controller = PlaybackController(len(frames), ManualFrameScheduler(), 100, autoplay=autoplay)
    return TimelineScrubber(frames, build_time_scale(frames), controller), controller


def test_click_at_midpoint_selects_matching_period_and_pauses():
    scrubber, controller = make_scrubber(range(1950, 2021))

    scrubber.click(695)

    assert controller.index == 1985 - 1950
    assert not controller.playing


def test_click_without_exact_period_is_ignored():
    scrubber, controller = make_scrubber([1950, 1960, 2020])

    scrubber.click(695)

    assert controller.index == 0
    assert controller.playing


def test_drag_resolves_to_latest_period_at_or_before_pointer():
    scrubber, _ = make_scrubber([1950, 1960, 2020])

    assert scrubber.resolve_drag(695) == 1
    assert scrubber.resolve_drag(110) == 0
    assert scrubber.resolve_drag(1280) == 2


def test_drag_clamps_pointer_outside_timeline():
    scrubber, _ = make_scrubber([1950, 1960, 2020])

    assert scrubber.resolve_drag(-500) == 0
    assert scrubber.resolve_drag(5000) == 2


def test_drag_is_monotonic_in_pointer_position():
    scrubber, _ = make_scrubber([1950, 1953, 1970, 1999, 2000, 2020])

    indices = [scrubber.resolve_drag(x) for x in range(100, 1300, 7)]

    assert indices == sorted(indices)


def test_drag_start_pauses_and_drag_seeks():
    scrubber, controller = make_scrubber(range(1950, 2021))

    scrubber.drag_start()
    scrubber.drag(1280)

    assert not controller.playing
    assert controller.index == 70


def test_pointer_follows_current_period():
    scrubber, _ = make_scrubber([1950, 2020])

    assert scrubber.pointer_x(0) == 110
    assert scrubber.pointer_x(1) == 1280


def test_half_period_rounds_up():
    """A pointer exactly between two periods resolves to the later one."""
    scrubber, controller = make_scrubber([1950, 1951, 1952])

    assert scrubber.period_at(402.5) == 1951
    scrubber.click(402.5)

    assert controller.index == 1
    assert not controller.playing
