"""Tests for top-K selection."""

from bar_race.data import Category, Entity, Frame
from bar_race.race import select_top_k, visible_total


def make_frame(*values: tuple[str, int]) -> Frame:
    return Frame(
        period=2000,
        entities=tuple(
            Entity(name=name, value=value, category=Category.fallback(name), period=2000)
            for name, value in values
        ),
    )


def test_selection_is_descending_and_capped():
    frame = make_frame(("A", 1), ("B", 5), ("C", 3), ("D", 4))

    selection = select_top_k(frame, 3)

    assert [e.name for e in selection] == ["B", "D", "C"]


def test_ties_keep_input_order():
    frame = make_frame(("A", 2), ("B", 7), ("C", 2), ("D", 7), ("E", 2))

    selection = select_top_k(frame, 10)

    assert [e.name for e in selection] == ["B", "D", "A", "C", "E"]


def test_fewer_entities_than_k():
    frame = make_frame(("A", 1), ("B", 2))

    assert len(select_top_k(frame, 10)) == 2


def test_non_positive_k_selects_nothing():
    assert select_top_k(make_frame(("A", 1)), 0) == ()


def test_selection_leaves_frame_untouched():
    frame = make_frame(("A", 1), ("B", 2))

    select_top_k(frame, 1)

    assert [e.name for e in frame.entities] == ["A", "B"]


def test_visible_total_sums_selection_only():
    frame = make_frame(("A", 1), ("B", 5), ("C", 3))

    assert visible_total(select_top_k(frame, 2)) == 8
