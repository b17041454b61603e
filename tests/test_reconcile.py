"""Tests for keyed diffing and bar transitions."""

import pytest

from bar_race.race import BarGeometry, BarTransitions, diff_keyed
from bar_race.race.reconcile import ease_cubic_in_out

DURATION_MS = 90
OFFSCREEN_Y = 500.0


def bar(key: str, y: float, length: float = 100.0, value: int = 1) -> BarGeometry:
    return BarGeometry(key=key, value=value, y=y, length=length, color=(10, 20, 30))


def test_diff_keyed_returns_disjoint_sets():
    previous = {"A": 1, "B": 2, "C": 3}
    current = {"D": 4, "B": 5, "A": 1}

    diff = diff_keyed(previous, current)

    assert diff.entering == ("D",)
    assert diff.persisting == ("B", "A")
    assert diff.exiting == ("C",)
    assert diff.changes == {"B": (2, 5), "A": (1, 1)}


def test_diff_keyed_identical_snapshots():
    diff = diff_keyed({"A": 1}, {"A": 1})

    assert diff.entering == () and diff.exiting == ()
    assert diff.persisting == ("A",)


def test_easing_endpoints():
    assert ease_cubic_in_out(0.0) == 0.0
    assert ease_cubic_in_out(0.5) == pytest.approx(0.5)
    assert ease_cubic_in_out(1.0) == 1.0


def test_entering_bar_grows_from_offscreen():
    transitions = BarTransitions(DURATION_MS, OFFSCREEN_Y)

    diff = transitions.apply([bar("A", 30)], now=0)
    start = transitions.sample(0)[0]
    end = transitions.sample(DURATION_MS)[0]

    assert diff.entering == ("A",)
    assert start.y == OFFSCREEN_Y and start.length == 0
    assert end == bar("A", 30)


def test_update_moves_from_current_position():
    transitions = BarTransitions(DURATION_MS, OFFSCREEN_Y)
    transitions.apply([bar("A", 30), bar("B", 72)], now=0)

    diff = transitions.apply([bar("B", 30), bar("A", 72)], now=200)
    halfway = {g.key: g for g in transitions.sample(200 + DURATION_MS / 2)}

    assert diff.persisting == ("B", "A")
    assert halfway["A"].y == pytest.approx(51)
    assert halfway["B"].y == pytest.approx(51)


def test_exiting_bar_slides_out_then_disappears():
    transitions = BarTransitions(DURATION_MS, OFFSCREEN_Y)
    transitions.apply([bar("A", 30), bar("B", 72)], now=0)

    diff = transitions.apply([bar("A", 30)], now=200)

    assert diff.exiting == ("B",)
    assert {g.key for g in transitions.sample(220)} == {"A", "B"}
    assert transitions.visible_keys() == ("A",)
    assert [g.key for g in transitions.sample(200 + DURATION_MS)] == ["A"]


def test_reentering_bar_resumes_from_current_geometry():
    transitions = BarTransitions(DURATION_MS, OFFSCREEN_Y)
    transitions.apply([bar("A", 30)], now=0)
    transitions.apply([], now=100)
    midway = transitions.sample(100 + DURATION_MS / 2)[0]

    diff = transitions.apply([bar("A", 30)], now=100 + DURATION_MS / 2)
    restart = transitions.sample(100 + DURATION_MS / 2)[0]

    assert diff.entering == ("A",)
    assert restart.y == pytest.approx(midway.y)


def test_reapplying_same_targets_is_idempotent():
    transitions = BarTransitions(DURATION_MS, OFFSCREEN_Y)
    targets = [bar("A", 30), bar("B", 72)]
    transitions.apply(targets, now=0)
    settled = transitions.sample(1000)

    transitions.apply(targets, now=1000)
    transitions.apply(targets, now=2000)

    assert transitions.sample(2000) == settled
    assert transitions.settled(2000 + DURATION_MS)


def test_text_value_switches_immediately():
    transitions = BarTransitions(DURATION_MS, OFFSCREEN_Y)
    transitions.apply([bar("A", 30, value=1)], now=0)

    transitions.apply([bar("A", 30, value=9)], now=500)

    assert transitions.sample(501)[0].value == 9
