"""SVG-specific animation frame generators built on top of Animator timelines."""

from typing import Iterator

from .animator import Animator
from .scene import ChartScene


def generate_svg_timeline_frames(
    animator: Animator, max_frames: int | None = None
) -> Iterator[ChartScene]:
    """Scene snapshots are already immutable, so the SVG encoder consumes them directly."""
    yield from animator.iter_scene_timeline(max_frames=max_frames)
