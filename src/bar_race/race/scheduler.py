"""Per-display-frame callback scheduling."""

import time
from abc import ABC, abstractmethod
from typing import Callable

FrameCallback = Callable[[float], None]


class FrameScheduler(ABC):
    """Host primitive invoking a callback about once per display refresh."""

    @abstractmethod
    def now(self) -> float:
        """Monotonic clock in milliseconds."""
        raise NotImplementedError

    @abstractmethod
    def request_frame(self, callback: FrameCallback) -> int:
        """
        Schedule callback for the next display frame.

        Args:
            callback: Called once with the frame timestamp in milliseconds

        Returns:
            Handle usable with cancel_frame
        """
        raise NotImplementedError

    @abstractmethod
    def cancel_frame(self, handle: int) -> None:
        """Cancel a pending callback; unknown or fired handles are ignored."""
        raise NotImplementedError


class ManualFrameScheduler(FrameScheduler):
    """Scheduler driven by explicit clock advances (tests and offline rendering)."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self._now = start_ms
        self._next_handle = 1
        self._pending: dict[int, FrameCallback] = {}
        self._firing: dict[int, FrameCallback] = {}

    def now(self) -> float:
        return self._now

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)
        self._firing.pop(handle, None)

    def advance_to(self, timestamp_ms: float) -> None:
        """Move the clock forward and fire callbacks pending at that moment.

        Callbacks requested while firing wait for the next advance, like a
        real display-frame primitive. Callbacks cancelled while firing are
        skipped.
        """
        if timestamp_ms < self._now:
            raise ValueError("Clock cannot move backwards")
        self._now = timestamp_ms
        self._firing = self._pending
        self._pending = {}
        try:
            for handle in sorted(self._firing):
                callback = self._firing.pop(handle, None)
                if callback is not None:
                    callback(timestamp_ms)
        finally:
            self._firing = {}

    def advance_by(self, delta_ms: float) -> None:
        self.advance_to(self._now + delta_ms)


class MonotonicFrameScheduler(ManualFrameScheduler):
    """Wall-clock scheduler pumping callbacks at a fixed refresh rate."""

    def __init__(self, refresh_hz: float = 60.0) -> None:
        self._origin = time.monotonic()
        super().__init__(start_ms=0.0)
        self.refresh_ms = 1000.0 / refresh_hz

    def _wall_ms(self) -> float:
        return (time.monotonic() - self._origin) * 1000.0

    def now(self) -> float:
        return max(self._now, self._wall_ms())

    def run_for(self, duration_ms: float) -> None:
        """Block, firing pending callbacks once per refresh, for duration_ms."""
        deadline = self._wall_ms() + duration_ms
        while self._wall_ms() < deadline:
            self.advance_to(self._wall_ms())
            time.sleep(self.refresh_ms / 1000.0)
