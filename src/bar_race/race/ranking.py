"""Top-K selection for one frame."""

from ..data.records import Entity, Frame


def select_top_k(frame: Frame, k: int) -> tuple[Entity, ...]:
    """
    Rank a frame's entities by value and keep the first k.

    Python's sort is stable, so equal values keep their input order.

    Args:
        frame: Frame to rank (left untouched)
        k: Maximum number of entities to return

    Returns:
        At most k entities, descending by value
    """
    if k <= 0:
        return ()
    ranked = sorted(frame.entities, key=lambda entity: entity.value, reverse=True)
    return tuple(ranked[:k])


def visible_total(selection: tuple[Entity, ...]) -> int:
    """Sum of the values currently on screen."""
    return sum(entity.value for entity in selection)
