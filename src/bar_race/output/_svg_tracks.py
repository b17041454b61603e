"""Keyframe track helpers for SVG output."""

from functools import lru_cache
from typing import Sequence, TypeVar

_TrackValue = TypeVar("_TrackValue")


@lru_cache(maxsize=256)
def _tl_hex(rgb: tuple[int, int, int]) -> str:
    text = f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"
    if text[1] == text[2] and text[3] == text[4] and text[5] == text[6]:
        return f"#{text[1]}{text[3]}{text[5]}"
    return text


def _tl_format(value: float, digits: int) -> str:
    if isinstance(value, int):
        return str(value)
    if abs(value - round(value)) < 1e-9:
        return str(int(round(value)))
    text = f"{value:.{digits}f}".rstrip("0").rstrip(".")
    if text.startswith("0.") and len(text) > 2:
        text = text[1:]
    if text.startswith("-0.") and len(text) > 3:
        text = "-" + text[2:]
    return text or "0"


@lru_cache(maxsize=8192)
def _tl_num(value: float) -> str:
    return _tl_format(value, 2)


@lru_cache(maxsize=8192)
def _tl_num_key_time(value: float) -> str:
    return _tl_format(value, 5)


def _tl_fill_gaps(values: Sequence[_TrackValue | None]) -> list[_TrackValue]:
    """Hold the last known value across gaps; leading gaps take the first known one."""
    known = next((value for value in values if value is not None), None)
    if known is None:
        raise ValueError("Track has no samples")
    filled: list[_TrackValue] = []
    for value in values:
        if value is not None:
            known = value
        filled.append(known)
    return filled


def _tl_compress_steps(
    times: list[int], values: list[_TrackValue]
) -> tuple[list[int], list[_TrackValue]]:
    """Keep only the samples where a discrete value changes."""
    if not times or len(times) != len(values):
        raise ValueError("Step track requires matched time/value samples")
    compact_times = [times[0]]
    compact_values = [values[0]]
    for time_ms, value in zip(times[1:], values[1:]):
        if time_ms == compact_times[-1]:
            compact_values[-1] = value
        elif value != compact_values[-1]:
            compact_times.append(time_ms)
            compact_values.append(value)
    return compact_times, compact_values


def _tl_compress_linear(
    times: list[int], values: list[float], eps: float = 1e-6
) -> tuple[list[int], list[float]]:
    """Drop samples lying on the straight line through their neighbours."""
    if len(times) != len(values):
        raise ValueError("Linear track requires matched time/value samples")
    if len(times) <= 2:
        return list(times), list(values)

    keep = [0]
    for i in range(1, len(values) - 1):
        t0, t1, t2 = times[i - 1], times[i], times[i + 1]
        if t1 == t0 or t2 == t1:
            keep.append(i)
            continue
        slope_in = (values[i] - values[i - 1]) / (t1 - t0)
        slope_out = (values[i + 1] - values[i]) / (t2 - t1)
        if abs(slope_in - slope_out) > eps:
            keep.append(i)
    keep.append(len(values) - 1)
    return [times[i] for i in keep], [values[i] for i in keep]


def _tl_pad_track(
    times: list[int], values: list[_TrackValue], duration_ms: int
) -> tuple[list[int], list[_TrackValue]]:
    """Extend a track so it starts at 0 and ends exactly at duration_ms."""
    padded_times = list(times)
    padded_values = list(values)
    if padded_times[0] > 0:
        padded_times.insert(0, 0)
        padded_values.insert(0, padded_values[0])
    if padded_times[-1] < duration_ms:
        padded_times.append(duration_ms)
        padded_values.append(padded_values[-1])
    return padded_times, padded_values


def _tl_key_times_attr(times: list[int], total_duration_ms: int) -> str:
    if len(times) == 2 and times[0] == 0 and times[1] == total_duration_ms:
        return ""
    key_times = ";".join(_tl_num_key_time(time / total_duration_ms) for time in times)
    return f'keyTimes="{key_times}"'


def _tl_animate(
    attribute_name: str,
    times: list[int],
    values: list[str],
    total_duration_ms: int,
    *,
    discrete: bool = False,
    transform: str | None = None,
) -> str:
    """Build an ``<animate>`` (or ``<animateTransform>``) element; empty when values never change."""
    if not values or all(value == values[0] for value in values[1:]):
        return ""
    tag = "animateTransform" if transform else "animate"
    attrs = [f'attributeName="{attribute_name}"']
    if transform:
        attrs.append(f'type="{transform}"')
    attrs.append(f'values="{";".join(values)}"')
    key_times_attr = _tl_key_times_attr(times, total_duration_ms)
    if key_times_attr:
        attrs.append(key_times_attr)
    attrs.extend([f'dur="{total_duration_ms}ms"', 'repeatCount="indefinite"'])
    if discrete:
        attrs.append('calcMode="discrete"')
    return f'<{tag} {" ".join(attrs)}/>'


def _tl_linear_animate(
    attribute_name: str,
    times: list[int],
    values: list[float],
    total_duration_ms: int,
    *,
    transform: str | None = None,
    template: str = "{}",
) -> str:
    compact_times, compact_values = _tl_compress_linear(times, values)
    compact_times, compact_values = _tl_pad_track(compact_times, compact_values, total_duration_ms)
    rendered = [template.format(_tl_num(value)) for value in compact_values]
    return _tl_animate(
        attribute_name, compact_times, rendered, total_duration_ms, transform=transform
    )


def _tl_step_animate(
    attribute_name: str,
    times: list[int],
    values: list[str],
    total_duration_ms: int,
) -> str:
    compact_times, compact_values = _tl_compress_steps(times, values)
    compact_times, compact_values = _tl_pad_track(compact_times, compact_values, total_duration_ms)
    return _tl_animate(
        attribute_name, compact_times, compact_values, total_duration_ms, discrete=True
    )


def _tl_visibility(times: list[int], present: list[bool], total_duration_ms: int) -> tuple[str, str]:
    """Initial opacity attribute value and the discrete animation toggling it."""
    values = ["1" if flag else "0" for flag in present]
    return values[0], _tl_step_animate("opacity", times, values, total_duration_ms)
