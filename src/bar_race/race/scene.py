"""Immutable scene snapshots consumed by the raster and SVG painters."""

from dataclasses import dataclass
from typing import Sequence

from ..constants import (
    AXIS_TICK_COUNT,
    BAR_HEIGHT,
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    MARGIN_LEFT,
    REGION_COLORS,
)
from ..data.records import Entity, Frame
from .ranking import select_top_k, visible_total
from .reconcile import RGB, BarGeometry
from .scales import (
    BandScale,
    LinearScale,
    TimelineTick,
    build_category_band,
    build_value_scale,
    format_count,
)


@dataclass(frozen=True)
class RankedView:
    """Top-K selection of one frame plus the scales derived from it."""

    frame: Frame
    selection: tuple[Entity, ...]
    value_scale: LinearScale
    band: BandScale

    @property
    def total(self) -> int:
        return visible_total(self.selection)

    def bar_targets(self) -> list[BarGeometry]:
        """Resting geometry of every selected bar."""
        targets = []
        for entity in self.selection:
            y = self.band(entity.name)
            targets.append(
                BarGeometry(
                    key=entity.name,
                    value=entity.value,
                    y=y if y is not None else 0.0,
                    length=self.value_scale(entity.value) - MARGIN_LEFT,
                    color=entity.category.color,
                    decoration=entity.decoration,
                )
            )
        return targets


def rank_frame(frame: Frame, k: int) -> RankedView:
    selection = select_top_k(frame, k)
    return RankedView(
        frame=frame,
        selection=selection,
        value_scale=build_value_scale(selection),
        band=build_category_band(selection),
    )


@dataclass(frozen=True)
class BarState:
    key: str
    value: int
    y: float
    length: float
    height: float
    color: RGB
    decoration: str

    @property
    def value_label(self) -> str:
        return format_count(self.value)


@dataclass(frozen=True)
class AxisTick:
    value: float
    x: float
    label: str


@dataclass(frozen=True)
class LegendEntry:
    label: str
    color: RGB


@dataclass(frozen=True)
class ChartScene:
    """Everything painted for one output frame."""

    width: int
    height: int
    time_ms: int
    index: int
    period: int
    total: int
    playing: bool
    bars: tuple[BarState, ...]
    axis_ticks: tuple[AxisTick, ...]
    grid_height: float
    timeline_ticks: tuple[TimelineTick, ...]
    pointer_x: float

    @property
    def total_label(self) -> str:
        return f"Total: {format_count(self.total)}"


LEGEND: tuple[LegendEntry, ...] = tuple(
    LegendEntry(label=label, color=color) for label, color in REGION_COLORS.items()
)


def build_scene(
    view: RankedView,
    bars: Sequence[BarGeometry],
    *,
    index: int,
    time_ms: int,
    playing: bool,
    timeline_ticks: tuple[TimelineTick, ...],
    pointer_x: float,
) -> ChartScene:
    """Assemble a snapshot from the current view and interpolated bars."""
    bar_height = view.band.bandwidth
    return ChartScene(
        width=CANVAS_WIDTH,
        height=CANVAS_HEIGHT,
        time_ms=time_ms,
        index=index,
        period=view.frame.period,
        total=view.total,
        playing=playing,
        bars=tuple(
            BarState(
                key=bar.key,
                value=bar.value,
                y=bar.y,
                length=max(0.0, bar.length),
                height=bar_height,
                color=bar.color,
                decoration=bar.decoration,
            )
            for bar in bars
        ),
        axis_ticks=tuple(
            AxisTick(value=value, x=view.value_scale(value), label=format_count(value))
            for value in view.value_scale.ticks(AXIS_TICK_COUNT)
        ),
        grid_height=BAR_HEIGHT * len(view.selection),
        timeline_ticks=timeline_ticks,
        pointer_x=pointer_x,
    )
