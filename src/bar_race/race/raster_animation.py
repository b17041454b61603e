"""Raster (Pillow) animation frame generators built on top of Animator timelines."""

from typing import Iterator

from PIL import Image

from .animator import Animator
from .decorations import DecorationCache
from .renderer import Renderer


def generate_raster_frames(
    animator: Animator,
    max_frames: int | None = None,
    decorations: DecorationCache | None = None,
) -> Iterator[Image.Image]:
    """Render raster frame payloads from an animator timeline."""
    renderer = Renderer(decorations)
    for scene in animator.iter_scene_timeline(max_frames=max_frames):
        yield renderer.render_frame(scene)
