"""Tests for output providers."""

from dataclasses import replace

from PIL import Image
import pytest
from bar_race.data import Category, Entity, Frame
from bar_race.output import (
    GifOutputProvider,
    SvgOutputProvider,
    WebPOutputProvider,
    resolve_output_provider,
    resolve_output_spec,
)
from bar_race.race import Animator
from bar_race.race.scene import ChartScene


def create_test_frame(color="red"):
    """Helper to create a test frame."""
    img = Image.new("RGB", (10, 10), color)
    return img


def create_test_scenes(count: int = 8) -> list[ChartScene]:
    frames = [
        Frame(
            period=period,
            entities=(
                Entity(name="Nauru & co", value=10 * period, category=Category.fallback("Nauru"), period=period),
                Entity(name="Tuvalu", value=period, category=Category.fallback("Tuvalu"), period=period),
            ),
        )
        for period in (2000, 2001)
    ]
    return list(Animator(frames).iter_scene_timeline(max_frames=count))


def test_gif_provider_encodes_frames():
    """GifOutputProvider should encode frames to GIF format."""
    provider = GifOutputProvider("test_output.gif")
    frames = [create_test_frame("red"), create_test_frame("blue")]

    result = provider.encode(iter(frames), frame_duration=100)

    assert result.startswith(b"GIF89")
    assert len(result) > 0


def test_gif_provider_empty_frames():
    """GifOutputProvider should handle empty frame list."""
    provider = GifOutputProvider("test_output.gif")
    result = provider.encode(iter([]), frame_duration=100)

    # Empty result for empty frames
    assert result == b""


def test_webp_provider_encodes_frames():
    """WebPOutputProvider should encode frames to WebP format."""
    provider = WebPOutputProvider("test_output.webp")
    frames = [create_test_frame("red"), create_test_frame("blue")]

    result = provider.encode(iter(frames), frame_duration=100)

    # WebP files start with RIFF....WEBP
    assert result.startswith(b"RIFF")
    assert b"WEBP" in result


def test_webp_provider_empty_frames():
    """WebPOutputProvider should handle empty frame list."""
    provider = WebPOutputProvider("test_output.webp")
    result = provider.encode(iter([]), frame_duration=100)

    assert result == b""


def test_svg_provider_empty_frames():
    """SvgOutputProvider should handle empty frame list."""
    provider = SvgOutputProvider()
    result = provider.encode(iter([]), frame_duration=100)

    assert result == b""


def test_svg_provider_encodes_scenes():
    """SvgOutputProvider should encode scene snapshots to animated SVG."""
    provider = SvgOutputProvider()

    result = provider.encode(iter(create_test_scenes()), frame_duration=25)

    assert result.startswith(b"<?xml")
    assert b"<animate" in result
    assert b'dur="200ms"' in result
    assert b"Nauru &amp; co" in result
    assert b">2000<" in result
    assert b"Region" in result


def test_svg_provider_clamps_non_positive_frame_duration():
    """SvgOutputProvider should clamp frame duration to at least 1ms."""
    provider = SvgOutputProvider()
    scenes = create_test_scenes(2)

    result = provider.encode(iter(scenes), frame_duration=0)

    assert b'dur="0ms"' not in result


def test_svg_provider_raises_on_mixed_dimensions():
    """SvgOutputProvider should reject mixed-size scene sequences."""
    provider = SvgOutputProvider()
    first, second = create_test_scenes(2)
    frames = [first, replace(second, width=11)]

    with pytest.raises(ValueError, match="All SVG timeline frames must have the same dimensions"):
        provider.encode(iter(frames), frame_duration=100)


def test_svg_provider_rejects_non_scene_frames():
    """SvgOutputProvider should reject non-scene frame payloads."""
    provider = SvgOutputProvider()
    frames = [object()]  # type: ignore[list-item]

    with pytest.raises(TypeError, match="SVG output only supports chart scenes"):
        provider.encode(iter(frames), frame_duration=100)


def test_resolve_gif_provider():
    """resolve_output_provider should return GifOutputProvider for .gif files."""
    provider = resolve_output_provider("output.gif")
    assert isinstance(provider, GifOutputProvider)


def test_resolve_webp_provider():
    """resolve_output_provider should return WebPOutputProvider for .webp files."""
    provider = resolve_output_provider("output.WEBP")
    assert isinstance(provider, WebPOutputProvider)


def test_resolve_svg_provider():
    """resolve_output_provider should return SvgOutputProvider for .svg files."""
    assert isinstance(resolve_output_provider("output.svg"), SvgOutputProvider)
    assert resolve_output_spec("output.svg").vector


def test_resolve_unsupported_format():
    """resolve_output_provider should raise ValueError for unsupported formats."""
    with pytest.raises(ValueError, match="Unsupported output format"):
        resolve_output_provider("output.mp4")


def test_provider_write_requires_path():
    with pytest.raises(ValueError, match="Output path not set"):
        SvgOutputProvider().write(b"")


def test_provider_writes_file(tmp_path):
    path = tmp_path / "out.gif"
    provider = GifOutputProvider(str(path))

    provider.write(b"GIF89a")

    assert path.read_bytes() == b"GIF89a"
