"""Scale bindings mapping data values to canvas pixels."""

import math
from dataclasses import dataclass
from typing import Sequence

from ..constants import (
    BAND_PADDING,
    BAR_HEIGHT,
    CANVAS_WIDTH,
    MARGIN_LEFT,
    MARGIN_RIGHT,
    MARGIN_TOP,
)
from ..data.records import Entity, Frame

HORIZONTAL_RANGE = (float(MARGIN_LEFT), float(CANVAS_WIDTH - MARGIN_RIGHT))

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


@dataclass(frozen=True)
class LinearScale:
    """Linear mapping from a numeric domain to a pixel range."""

    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return (r0 + r1) / 2
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, pixel: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r1 == r0 or d1 == d0:
            return d0
        return d0 + (pixel - r0) / (r1 - r0) * (d1 - d0)

    def clamp_pixel(self, pixel: float) -> float:
        low, high = sorted(self.range)
        return max(low, min(high, pixel))

    def ticks(self, count: int) -> list[float]:
        """Return round tick values (1, 2 or 5 times a power of ten) inside the domain."""
        start, stop = sorted(self.domain)
        if count <= 0 or stop == start:
            return [start]
        step = (stop - start) / count
        power = math.floor(math.log10(step))
        error = step / 10**power
        factor = 10 if error >= _E10 else 5 if error >= _E5 else 2 if error >= _E2 else 1
        if power >= 0:
            increment = factor * 10**power
            first, last = math.ceil(start / increment), math.floor(stop / increment)
            return [i * increment for i in range(first, last + 1)]
        # Divide for negative powers so 0.2 stays 0.2 instead of 0.20000000000000004
        inverse = 10 ** (-power) / factor
        first, last = math.ceil(start * inverse), math.floor(stop * inverse)
        return [i / inverse for i in range(first, last + 1)]


@dataclass(frozen=True)
class BandScale:
    """Ordinal mapping from keys to equally sized, padded pixel bands."""

    keys: tuple[str, ...]
    range: tuple[float, float]
    padding: float = BAND_PADDING

    @property
    def step(self) -> float:
        start, stop = self.range
        return (stop - start) / max(1.0, len(self.keys) - self.padding + 2 * self.padding)

    @property
    def bandwidth(self) -> float:
        return self.step * (1 - self.padding)

    def __call__(self, key: str) -> float | None:
        try:
            index = self.keys.index(key)
        except ValueError:
            return None
        start, stop = self.range
        offset = (stop - start - self.step * (len(self.keys) - self.padding)) / 2
        return start + offset + self.step * index


def build_value_scale(selection: Sequence[Entity]) -> LinearScale:
    """Map ``[0, max value]`` onto the horizontal bar range."""
    peak = max((entity.value for entity in selection), default=0)
    return LinearScale(domain=(0.0, float(peak or 1)), range=HORIZONTAL_RANGE)


def build_category_band(selection: Sequence[Entity]) -> BandScale:
    """Assign each selected entity a vertical slot, in ranking order."""
    keys = tuple(entity.name for entity in selection)
    return BandScale(
        keys=keys,
        range=(float(MARGIN_TOP), float(MARGIN_TOP + BAR_HEIGHT * len(keys))),
    )


def build_time_scale(frames: Sequence[Frame]) -> LinearScale:
    """Map ``[first period, last period]`` onto the timeline; built once per dataset."""
    if not frames:
        raise ValueError("Time scale requires at least one frame")
    return LinearScale(
        domain=(float(frames[0].period), float(frames[-1].period)),
        range=HORIZONTAL_RANGE,
    )


@dataclass(frozen=True)
class TimelineTick:
    period: int
    x: float
    major: bool


def timeline_ticks(time_scale: LinearScale, step: int) -> tuple[TimelineTick, ...]:
    """Tick every integer period, marking multiples of ``step`` as major."""
    first, last = (int(bound) for bound in time_scale.domain)
    return tuple(
        TimelineTick(period=period, x=time_scale(period), major=period % step == 0)
        for period in range(first, last + 1)
    )


def format_count(value: float) -> str:
    """Format a number with thousands separators (``6000`` -> ``6,000``)."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,}"
