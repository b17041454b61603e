"""Race engine: ranking, playback, scrubbing and bar reconciliation."""

from .animator import Animator
from .decorations import DecorationCache
from .playback import (
    PlaybackController,
    PlaybackMode,
    PlaybackState,
    TickResult,
    initial_state,
    pause,
    seek,
    tick,
    toggle_play,
)
from .ranking import select_top_k, visible_total
from .raster_animation import generate_raster_frames
from .reconcile import BarGeometry, BarTransitions, KeyedDiff, diff_keyed
from .renderer import Renderer
from .scales import (
    BandScale,
    LinearScale,
    build_category_band,
    build_time_scale,
    build_value_scale,
)
from .scene import ChartScene, RankedView, rank_frame
from .scheduler import FrameScheduler, ManualFrameScheduler, MonotonicFrameScheduler
from .scrubber import TimelineScrubber
from .session import RaceSession
from .svg_animation import generate_svg_timeline_frames

__all__ = [
    "Animator",
    "BandScale",
    "BarGeometry",
    "BarTransitions",
    "ChartScene",
    "DecorationCache",
    "FrameScheduler",
    "KeyedDiff",
    "LinearScale",
    "ManualFrameScheduler",
    "MonotonicFrameScheduler",
    "PlaybackController",
    "PlaybackMode",
    "PlaybackState",
    "RaceSession",
    "RankedView",
    "Renderer",
    "TickResult",
    "TimelineScrubber",
    "build_category_band",
    "build_time_scale",
    "build_value_scale",
    "diff_keyed",
    "generate_raster_frames",
    "generate_svg_timeline_frames",
    "initial_state",
    "pause",
    "rank_frame",
    "seek",
    "select_top_k",
    "tick",
    "toggle_play",
    "visible_total",
]
