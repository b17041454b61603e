"""Timeline/object-based SVG encoder for race scenes."""

from typing import Callable, Hashable, TypeVar
from xml.sax.saxutils import escape, quoteattr

from ..constants import (
    AXIS_DOMAIN_COLOR,
    AXIS_GRID_COLOR,
    AXIS_TEXT_COLOR,
    BACKGROUND_COLOR,
    BADGE_STROKE_COLOR,
    CANVAS_WIDTH,
    LABEL_COLOR,
    LABEL_RIGHT,
    LEGEND_TITLE,
    MARGIN_LEFT,
    MARGIN_RIGHT,
    MARGIN_TOP,
    PERIOD_LABEL_SIZE,
    PERIOD_LABEL_Y,
    PLAY_BUTTON_BOTTOM,
    PLAY_BUTTON_COLOR,
    PLAY_BUTTON_LEFT,
    PLAY_BUTTON_SIZE,
    SUMMARY_LABEL_COLOR,
    TIMELINE_BASELINE_OFFSET,
    TIMELINE_COLOR,
    TIMELINE_LABEL_COLOR,
    TIMELINE_MAJOR_TICK,
    TIMELINE_MINOR_TICK,
    TIMELINE_POINTER_SIZE,
    TOTAL_LABEL_SIZE,
    TOTAL_LABEL_Y,
)
from ..race.renderer import badge_radius
from ..race.scene import LEGEND, BarState, ChartScene
from ._svg_tracks import (
    _tl_fill_gaps,
    _tl_hex,
    _tl_linear_animate,
    _tl_num,
    _tl_step_animate,
    _tl_visibility,
)

_Key = TypeVar("_Key", bound=Hashable)

FONT_FAMILY = "Arial, sans-serif"


def encode_svg_timeline_sequence(frames: list[ChartScene], frame_duration: int) -> bytes:
    """Encode scene snapshots into one looping animated SVG.

    Pipeline:
    1. Normalize scene times to a timeline starting at 0.
    2. Build per-object tracks (axis, bars, labels, pointer, play state).
    3. Emit static chrome (background, timeline ticks, legend) once.
    """
    width, height = _tl_resolve_timeline_dimensions(frames)
    origin = frames[0].time_ms
    times = [frame.time_ms - origin for frame in frames]
    total_duration_ms = max(1, times[-1] + frame_duration)

    parts: list[str] = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}" font-family="{FONT_FAMILY}">',
        "<defs>",
        *_tl_badge_clip_defs(frames),
        "</defs>",
        f'<rect width="{width}" height="{height}" fill="{_tl_hex(BACKGROUND_COLOR)}"/>',
    ]
    parts.extend(_tl_axis_elements(frames, times, total_duration_ms))
    parts.extend(_tl_bar_elements(frames, times, total_duration_ms))
    parts.extend(
        _tl_keyed_text_elements(
            frames,
            times,
            total_duration_ms,
            key=lambda frame: str(frame.period),
            attrs=(
                f'x="{LABEL_RIGHT}" y="{PERIOD_LABEL_Y}" text-anchor="end" '
                f'font-size="{PERIOD_LABEL_SIZE}px" font-weight="600" '
                f'fill="{_tl_hex(SUMMARY_LABEL_COLOR)}"'
            ),
        )
    )
    parts.extend(
        _tl_keyed_text_elements(
            frames,
            times,
            total_duration_ms,
            key=lambda frame: frame.total_label,
            attrs=(
                f'x="{LABEL_RIGHT}" y="{TOTAL_LABEL_Y}" text-anchor="end" '
                f'font-size="{TOTAL_LABEL_SIZE}px" fill="{_tl_hex(SUMMARY_LABEL_COLOR)}"'
            ),
        )
    )
    parts.extend(_tl_timeline_elements(frames, times, total_duration_ms))
    parts.extend(_tl_play_button_elements(frames, times, total_duration_ms))
    parts.extend(_tl_legend_elements())
    parts.append("</svg>")
    return "".join(parts).encode("utf-8")


def _tl_resolve_timeline_dimensions(frames: list[ChartScene]) -> tuple[int, int]:
    width = frames[0].width
    height = frames[0].height
    for frame in frames[1:]:
        if frame.width != width or frame.height != height:
            raise ValueError("All SVG timeline frames must have the same dimensions")
    return width, height


def _tl_group_runs(
    frames: list[ChartScene], key: Callable[[ChartScene], _Key]
) -> dict[_Key, list[bool]]:
    """For every distinct key, a per-frame flag telling where it is shown."""
    runs: dict[_Key, list[bool]] = {}
    for index, frame in enumerate(frames):
        flags = runs.setdefault(key(frame), [False] * len(frames))
        flags[index] = True
    return runs


def _tl_visible_group(
    inner: str, times: list[int], present: list[bool], total_duration_ms: int, attrs: str = ""
) -> str:
    initial, animate = _tl_visibility(times, present, total_duration_ms)
    opacity = "" if initial == "1" and not animate else f' opacity="{initial}"'
    spacer = f" {attrs}" if attrs else ""
    return f"<g{opacity}{spacer}>{animate}{inner}</g>"


def _tl_axis_elements(
    frames: list[ChartScene], times: list[int], total_duration_ms: int
) -> list[str]:
    """One group per distinct axis layout, shown while that layout is current."""
    runs = _tl_group_runs(frames, key=lambda frame: (frame.axis_ticks, frame.grid_height))
    elements: list[str] = []
    for (ticks, grid_height), present in runs.items():
        bottom = MARGIN_TOP + grid_height
        inner = "".join(
            f'<line x1="{_tl_num(tick.x)}" x2="{_tl_num(tick.x)}" y1="{MARGIN_TOP}" '
            f'y2="{_tl_num(bottom)}" stroke="{_tl_hex(AXIS_GRID_COLOR)}"/>'
            f'<text x="{_tl_num(tick.x)}" y="{MARGIN_TOP - 9}" text-anchor="middle" '
            f'font-size="12px" fill="{_tl_hex(AXIS_TEXT_COLOR)}">{escape(tick.label)}</text>'
            for tick in ticks
        )
        elements.append(_tl_visible_group(inner, times, present, total_duration_ms))
    elements.append(
        f'<line x1="{MARGIN_LEFT}" x2="{CANVAS_WIDTH - MARGIN_RIGHT}" y1="{MARGIN_TOP}" '
        f'y2="{MARGIN_TOP}" stroke="{_tl_hex(AXIS_DOMAIN_COLOR)}"/>'
    )
    return elements


def _tl_collect_bar_tracks(frames: list[ChartScene]) -> dict[str, list[BarState | None]]:
    tracks: dict[str, list[BarState | None]] = {}
    for index, frame in enumerate(frames):
        for bar in frame.bars:
            tracks.setdefault(bar.key, [None] * len(frames))[index] = bar
    return tracks


def _tl_bar_elements(
    frames: list[ChartScene], times: list[int], total_duration_ms: int
) -> list[str]:
    return [
        _tl_render_bar_track(key, samples, times, total_duration_ms)
        for key, samples in _tl_collect_bar_tracks(frames).items()
    ]


def _tl_render_bar_track(
    key: str, samples: list[BarState | None], times: list[int], total_duration_ms: int
) -> str:
    present = [sample is not None for sample in samples]
    bars = _tl_fill_gaps(samples)
    first = bars[0]
    ys = [bar.y for bar in bars]
    lengths = [bar.length for bar in bars]
    value_xs = [MARGIN_LEFT + bar.length + 8 for bar in bars]
    colors = [_tl_hex(bar.color) for bar in bars]
    radius = badge_radius(first)
    badge_xs = [MARGIN_LEFT + bar.length - radius - 4 for bar in bars]
    middle = first.height / 2

    translate = _tl_linear_animate(
        "transform", times, ys, total_duration_ms, transform="translate", template="0 {}"
    )
    fill = _tl_step_animate("fill", times, colors, total_duration_ms)
    rect = (
        f'<rect x="{MARGIN_LEFT}" width="{_tl_num(first.length)}" '
        f'height="{_tl_num(first.height)}" fill="{colors[0]}">'
        f'{_tl_linear_animate("width", times, lengths, total_duration_ms)}{fill}</rect>'
    )
    name_label = (
        f'<text x="{MARGIN_LEFT - 10}" y="{_tl_num(middle)}" dominant-baseline="central" '
        f'text-anchor="end" font-size="14px" fill="{_tl_hex(LABEL_COLOR)}">{escape(key)}</text>'
    )

    value_labels = []
    for label, label_present in _tl_group_runs_for_values(bars).items():
        value_labels.append(
            _tl_visible_group(
                f"<text>{escape(label)}</text>", times, label_present, total_duration_ms
            )
        )
    value_motion = _tl_linear_animate(
        "transform", times, value_xs, total_duration_ms, transform="translate",
        template="{} " + _tl_num(middle),
    )
    value_group = (
        f'<g transform="translate({_tl_num(value_xs[0])} {_tl_num(middle)})" '
        f'dominant-baseline="central" font-size="14px" fill="{_tl_hex(LABEL_COLOR)}">'
        f"{value_motion}"
        f'{"".join(value_labels)}</g>'
    )

    badge = ""
    if radius > 0:
        badge_motion = _tl_linear_animate(
            "transform", times, badge_xs, total_duration_ms, transform="translate",
            template="{} " + _tl_num(radius + 2),
        )
        image = ""
        if first.decoration:
            image = (
                f'<image href={quoteattr(first.decoration)} x="{_tl_num(-radius)}" '
                f'y="{_tl_num(-radius)}" width="{_tl_num(radius * 2)}" '
                f'height="{_tl_num(radius * 2)}" clip-path="url(#{_tl_clip_id(radius)})" '
                f'preserveAspectRatio="xMidYMid slice"/>'
            )
        badge = (
            f'<g transform="translate({_tl_num(badge_xs[0])} {_tl_num(radius + 2)})">'
            f"{badge_motion}"
            f'<circle r="{_tl_num(radius)}" fill="{colors[0]}">{fill}</circle>{image}'
            f'<circle r="{_tl_num(radius)}" fill="none" stroke="{_tl_hex(BADGE_STROKE_COLOR)}" '
            f'stroke-width="2"/></g>'
        )

    inner = f"{translate}{rect}{value_group}{name_label}{badge}"
    return _tl_visible_group(
        inner, times, present, total_duration_ms, attrs=f'transform="translate(0 {_tl_num(ys[0])})"'
    )


def _tl_group_runs_for_values(bars: list[BarState]) -> dict[str, list[bool]]:
    runs: dict[str, list[bool]] = {}
    for index, bar in enumerate(bars):
        runs.setdefault(bar.value_label, [False] * len(bars))[index] = True
    return runs


def _tl_clip_id(radius: float) -> str:
    return "c" + _tl_num(radius).replace(".", "_")


def _tl_badge_clip_defs(frames: list[ChartScene]) -> list[str]:
    radii = sorted({badge_radius(bar) for frame in frames for bar in frame.bars})
    return [
        f'<clipPath id="{_tl_clip_id(radius)}"><circle r="{_tl_num(radius)}"/></clipPath>'
        for radius in radii
        if radius > 0
    ]


def _tl_keyed_text_elements(
    frames: list[ChartScene],
    times: list[int],
    total_duration_ms: int,
    key: Callable[[ChartScene], str],
    attrs: str,
) -> list[str]:
    return [
        _tl_visible_group(f"<text {attrs}>{escape(text)}</text>", times, present, total_duration_ms)
        for text, present in _tl_group_runs(frames, key).items()
    ]


def _tl_timeline_elements(
    frames: list[ChartScene], times: list[int], total_duration_ms: int
) -> list[str]:
    base_y = frames[0].height - TIMELINE_BASELINE_OFFSET
    stroke = _tl_hex(TIMELINE_COLOR)
    elements = [
        f'<line x1="{MARGIN_LEFT}" x2="{CANVAS_WIDTH - MARGIN_RIGHT}" y1="{base_y}" '
        f'y2="{base_y}" stroke="{stroke}"/>'
    ]
    for tick in frames[0].timeline_ticks:
        length = TIMELINE_MAJOR_TICK if tick.major else TIMELINE_MINOR_TICK
        elements.append(
            f'<line x1="{_tl_num(tick.x)}" x2="{_tl_num(tick.x)}" y1="{base_y}" '
            f'y2="{base_y + length}" stroke="{stroke}"/>'
        )
        if tick.major:
            elements.append(
                f'<text x="{_tl_num(tick.x)}" y="{base_y + TIMELINE_MINOR_TICK + 20}" '
                f'text-anchor="middle" font-size="11px" '
                f'fill="{_tl_hex(TIMELINE_LABEL_COLOR)}">{tick.period}</text>'
            )

    size = TIMELINE_POINTER_SIZE
    pointer_xs = [frame.pointer_x for frame in frames]
    pointer_motion = _tl_linear_animate(
        "transform", times, pointer_xs, total_duration_ms, transform="translate", template="{} 0"
    )
    elements.append(
        f'<g transform="translate({_tl_num(pointer_xs[0])} 0)">'
        f"{pointer_motion}"
        f'<path d="M{-size} {base_y - 8}L{size} {base_y - 8}L0 {base_y}Z" fill="{stroke}"/></g>'
    )
    return elements


def _tl_play_button_elements(
    frames: list[ChartScene], times: list[int], total_duration_ms: int
) -> list[str]:
    radius = PLAY_BUTTON_SIZE / 2
    cx = PLAY_BUTTON_LEFT + radius
    cy = frames[0].height - PLAY_BUTTON_BOTTOM - radius
    playing = [frame.playing for frame in frames]
    pause_glyph = (
        f'<rect x="{_tl_num(cx - 7)}" y="{_tl_num(cy - 8)}" width="4" height="16"/>'
        f'<rect x="{_tl_num(cx + 3)}" y="{_tl_num(cy - 8)}" width="4" height="16"/>'
    )
    play_glyph = (
        f'<path d="M{_tl_num(cx - 5)} {_tl_num(cy - 9)}L{_tl_num(cx - 5)} {_tl_num(cy + 9)}'
        f'L{_tl_num(cx + 9)} {_tl_num(cy)}Z"/>'
    )
    elements = [
        f'<circle cx="{_tl_num(cx)}" cy="{_tl_num(cy)}" r="{_tl_num(radius)}" '
        f'fill="{_tl_hex(PLAY_BUTTON_COLOR)}"/>'
    ]
    if any(playing):
        elements.append(
            _tl_visible_group(pause_glyph, times, playing, total_duration_ms, attrs='fill="#fff"')
        )
    if not all(playing):
        elements.append(
            _tl_visible_group(
                play_glyph, times, [not flag for flag in playing], total_duration_ms, attrs='fill="#fff"'
            )
        )
    return elements


def _tl_legend_elements() -> list[str]:
    x = CANVAS_WIDTH - MARGIN_RIGHT + 40
    y = MARGIN_TOP
    elements = [
        f'<text x="{x}" y="{y}" dominant-baseline="text-before-edge" font-size="16px" '
        f'font-weight="bold">{LEGEND_TITLE}</text>'
    ]
    for entry in LEGEND:
        y += 22
        elements.append(
            f'<rect x="{x}" y="{y + 2}" width="12" height="12" fill="{_tl_hex(entry.color)}"/>'
            f'<text x="{x + 18}" y="{y}" dominant-baseline="text-before-edge" '
            f'font-size="13px">{escape(entry.label)}</text>'
        )
    return elements
