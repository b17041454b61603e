"""Shared animation orchestration used by the CLI."""

from pathlib import Path
from typing import Any, Iterator, Sequence

from .config import RaceConfig
from .data.records import Frame
from .output import resolve_output_provider, resolve_output_spec
from .output.base import OutputProvider
from .race.animator import Animator
from .race.decorations import DecorationCache
from .race.raster_animation import generate_raster_frames
from .race.svg_animation import generate_svg_timeline_frames


def build_frame_stream(
    animator: Animator,
    output_path: str,
    max_frames: int | None,
    decorations: DecorationCache | None = None,
) -> Iterator[Any]:
    """Build the frame stream matching the target output format."""
    if resolve_output_spec(output_path).vector:
        return generate_svg_timeline_frames(animator, max_frames)
    return generate_raster_frames(animator, max_frames, decorations)


def encode_animation(
    frames: Sequence[Frame],
    output_path: str,
    *,
    config: RaceConfig,
    max_frames: int | None = None,
    decoration_dir: str | Path | None = None,
    provider: OutputProvider[Any] | None = None,
) -> bytes:
    """Encode animation bytes for the given frames and output path."""
    target_provider = provider or resolve_output_provider(output_path)
    animator = Animator(frames, config)
    decorations = DecorationCache(decoration_dir)
    frame_stream = build_frame_stream(animator, output_path, max_frames, decorations)
    return target_provider.encode(frame_stream, frame_duration=config.frame_duration)
