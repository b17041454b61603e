"""Animator for generating race timelines from a frame sequence."""

from typing import Iterator, Sequence

from ..config import RaceConfig
from ..data.records import Frame
from .scene import ChartScene
from .scheduler import ManualFrameScheduler
from .session import RaceSession


class Animator:
    """Plays a race once on a simulated display clock."""

    def __init__(
        self,
        frames: Sequence[Frame],
        config: RaceConfig | None = None,
        loops: int = 1,
    ):
        """
        Initialize animator.

        Args:
            frames: The frame sequence to play
            config: Playback settings; fps sets the simulated refresh rate
            loops: Number of full passes over the frames before stopping
        """
        self.frames = tuple(frames)
        self.config = config or RaceConfig()
        self.loops = loops
        self.frame_duration = self.config.frame_duration

    def create_session(self) -> tuple[RaceSession, ManualFrameScheduler]:
        scheduler = ManualFrameScheduler()
        return RaceSession(self.frames, scheduler, self.config), scheduler

    def iter_scene_timeline(self, max_frames: int | None = None) -> Iterator[ChartScene]:
        """
        Yield one scene per output frame until playback wraps around.

        Stops just before the step that would wrap back to the first frame.

        Args:
            max_frames: Optional cap on the number of yielded scenes
        """
        session, scheduler = self.create_session()
        target_steps = len(self.frames) * self.loops
        rendered = 0
        elapsed_ms = 0
        try:
            while max_frames is None or rendered < max_frames:
                scheduler.advance_to(elapsed_ms)
                if session.controller.steps >= target_steps:
                    break
                yield session.scene(elapsed_ms)
                rendered += 1
                elapsed_ms += self.frame_duration
        finally:
            session.close()
