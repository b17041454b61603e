"""Interactive race session: playback, scrubbing and reconciliation wired together."""

import logging
from typing import Sequence

from ..config import RaceConfig
from ..constants import CANVAS_HEIGHT
from ..data.frame_builder import EmptyDatasetError
from ..data.records import Frame
from .playback import PlaybackController
from .reconcile import BarTransitions, KeyedDiff, BarGeometry
from .scales import build_time_scale, timeline_ticks
from .scene import ChartScene, RankedView, build_scene, rank_frame
from .scheduler import FrameScheduler
from .scrubber import TimelineScrubber

logger = logging.getLogger(__name__)


class RaceSession:
    """Host-facing race component.

    The host forwards pointer and toggle input and reads ``scene()`` whenever
    it repaints. Every index change, autonomous or manual, reconciles the bars
    at the scheduler's current time.
    """

    def __init__(
        self,
        frames: Sequence[Frame],
        scheduler: FrameScheduler,
        config: RaceConfig | None = None,
        autoplay: bool = True,
    ) -> None:
        """
        Initialize the session on a loaded frame sequence.

        Args:
            frames: Frames sorted ascending by period
            scheduler: Per-display-frame callback primitive of the host
            config: Playback and layout settings
            autoplay: Start playing immediately

        Raises:
            EmptyDatasetError: If frames is empty (nothing is loaded yet)
        """
        if not frames:
            raise EmptyDatasetError("No usable frames: nothing to render")
        self.frames = tuple(frames)
        self.config = config or RaceConfig()
        self.scheduler = scheduler
        self.time_scale = build_time_scale(self.frames)
        self.timeline_ticks = timeline_ticks(self.time_scale, self.config.timeline_step)
        self.transitions = BarTransitions(self.config.transition_ms, offscreen_y=CANVAS_HEIGHT)
        self.controller = PlaybackController(
            len(self.frames),
            scheduler,
            interval_ms=self.config.interval_ms,
            autoplay=autoplay,
        )
        self.scrubber = TimelineScrubber(self.frames, self.time_scale, self.controller)
        self.view: RankedView = rank_frame(self.frames[0], self.config.top_k)
        self.last_diff: KeyedDiff[str, BarGeometry] | None = None
        self.controller.subscribe(self._on_index_change)
        self.render()

    @property
    def index(self) -> int:
        return self.controller.index

    @property
    def playing(self) -> bool:
        return self.controller.playing

    @property
    def current_frame(self) -> Frame:
        return self.frames[self.controller.index]

    def toggle_play(self) -> None:
        self.controller.toggle_play()

    def pointer_down(self) -> None:
        """Pointer pressed on the timeline pointer glyph: start dragging."""
        self.scrubber.drag_start()

    def drag_to(self, x: float) -> None:
        self.scrubber.drag(x)

    def click(self, x: float) -> None:
        self.scrubber.click(x)

    def render(self) -> None:
        """Re-rank the current frame and reconcile bars towards it."""
        self.view = rank_frame(self.current_frame, self.config.top_k)
        self.last_diff = self.transitions.apply(self.view.bar_targets(), self.scheduler.now())
        logger.debug(
            "Period %d: %d entering, %d exiting",
            self.view.frame.period,
            len(self.last_diff.entering),
            len(self.last_diff.exiting),
        )

    def scene(self, now: float | None = None) -> ChartScene:
        """Snapshot of what is on screen at time now (defaults to the scheduler clock)."""
        timestamp = self.scheduler.now() if now is None else now
        return build_scene(
            self.view,
            self.transitions.sample(timestamp),
            index=self.controller.index,
            time_ms=int(timestamp),
            playing=self.controller.playing,
            timeline_ticks=self.timeline_ticks,
            pointer_x=self.scrubber.pointer_x(self.controller.index),
        )

    def close(self) -> None:
        self.controller.close()

    def _on_index_change(self, index: int) -> None:
        del index
        self.render()
