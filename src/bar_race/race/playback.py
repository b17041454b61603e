"""Playback state machine and the controller that drives it from a frame clock."""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable

from .scheduler import FrameScheduler

logger = logging.getLogger(__name__)

IndexListener = Callable[[int], None]


class PlaybackMode(Enum):
    PLAYING = "playing"
    PAUSED = "paused"


@dataclass(frozen=True, slots=True)
class PlaybackState:
    """Current frame index, play/pause mode and the last step timestamp."""

    index: int
    mode: PlaybackMode
    clock_mark: float

    @property
    def playing(self) -> bool:
        return self.mode is PlaybackMode.PLAYING


@dataclass(frozen=True, slots=True)
class TickResult:
    state: PlaybackState
    advanced: bool
    reschedule: bool


def initial_state(frame_count: int, now: float) -> PlaybackState:
    """Playing from the first frame once frames are available."""
    if frame_count <= 0:
        raise ValueError("Playback requires at least one frame")
    return PlaybackState(index=0, mode=PlaybackMode.PLAYING, clock_mark=now)


def toggle_play(state: PlaybackState) -> PlaybackState:
    mode = PlaybackMode.PAUSED if state.playing else PlaybackMode.PLAYING
    return replace(state, mode=mode)


def pause(state: PlaybackState) -> PlaybackState:
    """Pointer-down on the scrubber pauses from any state."""
    return replace(state, mode=PlaybackMode.PAUSED)


def seek(state: PlaybackState, index: int, now: float, *, pause: bool = False) -> PlaybackState:
    """Jump to index and restart the step clock, optionally pausing."""
    mode = PlaybackMode.PAUSED if pause else state.mode
    return PlaybackState(index=index, mode=mode, clock_mark=now)


def tick(state: PlaybackState, now: float, frame_count: int, interval_ms: float) -> TickResult:
    """
    Evaluate one display-frame callback.

    Advances at most one frame, and only once more than interval_ms has
    passed since the last step or seek.

    Args:
        state: Current playback state
        now: Callback timestamp in milliseconds
        frame_count: Number of frames in the sequence
        interval_ms: Minimum time between autonomous steps

    Returns:
        The next state, whether it advanced, and whether to keep scheduling
    """
    if not state.playing:
        return TickResult(state=state, advanced=False, reschedule=False)
    if now - state.clock_mark > interval_ms:
        next_state = PlaybackState(
            index=(state.index + 1) % frame_count,
            mode=state.mode,
            clock_mark=now,
        )
        return TickResult(state=next_state, advanced=True, reschedule=True)
    return TickResult(state=state, advanced=False, reschedule=True)


class PlaybackController:
    """Owns PlaybackState and embeds tick() in a frame scheduler."""

    def __init__(
        self,
        frame_count: int,
        scheduler: FrameScheduler,
        interval_ms: float,
        autoplay: bool = True,
    ) -> None:
        """
        Initialize the controller and start the callback chain when playing.

        Args:
            frame_count: Number of frames; must be positive
            scheduler: Host per-display-frame callback primitive
            interval_ms: Minimum time between autonomous steps
            autoplay: Start in the playing state
        """
        self.frame_count = frame_count
        self.scheduler = scheduler
        self.interval_ms = interval_ms
        self.steps = 0
        self._state = initial_state(frame_count, scheduler.now())
        if not autoplay:
            self._state = pause(self._state)
        self._handle: int | None = None
        self._listeners: list[IndexListener] = []
        self._closed = False
        self._ensure_scheduled()

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def index(self) -> int:
        return self._state.index

    @property
    def playing(self) -> bool:
        return self._state.playing

    @property
    def is_scheduled(self) -> bool:
        return self._handle is not None

    def subscribe(self, listener: IndexListener) -> None:
        """Register a callback invoked with the new index after every change."""
        self._listeners.append(listener)

    def toggle_play(self) -> None:
        self._apply(toggle_play(self._state))

    def pause(self) -> None:
        self._apply(pause(self._state))

    def seek(self, index: int, *, pause: bool = False) -> None:
        """Set the current index directly (scrubber input)."""
        if not 0 <= index < self.frame_count:
            raise IndexError(f"Frame index {index} out of range 0..{self.frame_count - 1}")
        self._apply(seek(self._state, index, self.scheduler.now(), pause=pause))

    def close(self) -> None:
        """Cancel the pending callback; the controller stays inert afterwards."""
        self._closed = True
        self._cancel()

    def _apply(self, state: PlaybackState) -> None:
        previous = self._state
        self._state = state
        if state.playing:
            self._ensure_scheduled()
        else:
            self._cancel()
        if state.index != previous.index:
            self._notify(state.index)

    def _on_frame(self, timestamp: float) -> None:
        self._handle = None
        previous = self._state
        result = tick(previous, timestamp, self.frame_count, self.interval_ms)
        self._state = result.state
        if result.advanced:
            self.steps += 1
            if result.state.index != previous.index:
                self._notify(result.state.index)
        if result.reschedule and self._state.playing:
            self._ensure_scheduled()

    def _ensure_scheduled(self) -> None:
        if self._closed or self._handle is not None or not self._state.playing:
            return
        self._handle = self.scheduler.request_frame(self._on_frame)

    def _cancel(self) -> None:
        if self._handle is None:
            return
        self.scheduler.cancel_frame(self._handle)
        self._handle = None
        logger.debug("Playback callback cancelled at index %d", self._state.index)

    def _notify(self, index: int) -> None:
        for listener in list(self._listeners):
            listener(index)
