"""Timeline scrubber: pixel position <-> period, with drag and click input."""

import math
from bisect import bisect_right
from typing import Sequence

from ..data.records import Frame
from .playback import PlaybackController
from .scales import LinearScale


class TimelineScrubber:
    """Resolves pointer input on the timeline to frame indices."""

    def __init__(
        self,
        frames: Sequence[Frame],
        time_scale: LinearScale,
        controller: PlaybackController,
    ) -> None:
        """
        Initialize the scrubber.

        Args:
            frames: Frame sequence, sorted ascending by period
            time_scale: Fixed period -> pixel mapping for the whole session
            controller: Playback controller whose index the input drives
        """
        self.periods = [frame.period for frame in frames]
        self.time_scale = time_scale
        self.controller = controller

    def clamp_x(self, x: float) -> float:
        return self.time_scale.clamp_pixel(x)

    def period_at(self, x: float) -> int:
        """Period under the (clamped) pointer, halves rounded up."""
        return math.floor(self.time_scale.invert(self.clamp_x(x)) + 0.5)

    def pointer_x(self, index: int) -> float:
        return self.time_scale(self.periods[index])

    def resolve_drag(self, x: float) -> int:
        """Latest frame whose period is at or below the pointer's period."""
        index = bisect_right(self.periods, self.period_at(x)) - 1
        return max(0, min(len(self.periods) - 1, index))

    def resolve_click(self, x: float) -> int | None:
        """Frame whose period equals the clicked period exactly, if any."""
        period = self.period_at(x)
        index = bisect_right(self.periods, period) - 1
        if index >= 0 and self.periods[index] == period:
            return index
        return None

    def drag_start(self) -> None:
        self.controller.pause()

    def drag(self, x: float) -> None:
        index = self.resolve_drag(x)
        if index != self.controller.index:
            self.controller.seek(index)

    def click(self, x: float) -> None:
        index = self.resolve_click(x)
        if index is None or index == self.controller.index:
            return
        self.controller.seek(index, pause=True)
