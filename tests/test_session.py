"""Tests for the interactive race session."""

import pytest

from bar_race.config import RaceConfig
from bar_race.data import Category, EmptyDatasetError, Entity, Frame
from bar_race.race import ManualFrameScheduler, RaceSession


def make_frames() -> list[Frame]:
    table = {
        2000: [("Nauru", 10), ("Tuvalu", 30), ("Palau", 20)],
        2001: [("Nauru", 40), ("Tuvalu", 30), ("Palau", 20)],
        2002: [("Nauru", 40), ("Tuvalu", 50), ("Fiji", 60)],
    }
    return [
        Frame(
            period=period,
            entities=tuple(
                Entity(name=name, value=value, category=Category.fallback(name), period=period)
                for name, value in rows
            ),
        )
        for period, rows in table.items()
    ]


def test_session_requires_frames():
    with pytest.raises(EmptyDatasetError):
        RaceSession([], ManualFrameScheduler())


def test_session_starts_playing_first_frame():
    session = RaceSession(make_frames(), ManualFrameScheduler())

    scene = session.scene()

    assert session.playing
    assert scene.period == 2000
    assert scene.total_label == "Total: 60"


def test_top_k_limits_bars():
    config = RaceConfig(top_k=2)
    session = RaceSession(make_frames(), ManualFrameScheduler(), config, autoplay=False)

    scene = session.scene(1000)

    assert [bar.key for bar in scene.bars] == ["Tuvalu", "Palau"]
    assert scene.total == 50


def test_autonomous_step_reconciles_bars():
    scheduler = ManualFrameScheduler()
    session = RaceSession(make_frames(), scheduler, RaceConfig(top_k=2))

    scheduler.advance_to(101)
    scheduler.advance_to(202)

    assert session.index == 2
    assert session.last_diff is not None
    assert session.last_diff.entering == ("Fiji",)
    assert session.last_diff.exiting == ("Nauru",)


def test_click_pauses_on_exact_period():
    session = RaceSession(make_frames(), ManualFrameScheduler())

    session.click(1280)

    assert session.index == 2
    assert not session.playing


def test_paused_render_is_idempotent():
    scheduler = ManualFrameScheduler()
    session = RaceSession(make_frames(), scheduler, autoplay=False)
    scheduler.advance_to(500)
    first = session.scene()

    session.render()
    session.render()

    assert session.scene() == first


def test_close_stops_playback():
    scheduler = ManualFrameScheduler()
    session = RaceSession(make_frames(), scheduler)

    session.close()
    scheduler.advance_to(1000)

    assert session.index == 0
