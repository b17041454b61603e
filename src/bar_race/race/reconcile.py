"""Enter/update/exit reconciliation between successive visible selections."""

from dataclasses import dataclass, field, replace
from typing import Generic, Hashable, Mapping, Sequence, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

RGB = tuple[int, int, int]


@dataclass(frozen=True)
class KeyedDiff(Generic[K, V]):
    """Disjoint key sets between two keyed snapshots."""

    entering: tuple[K, ...]
    persisting: tuple[K, ...]
    exiting: tuple[K, ...]
    changes: dict[K, tuple[V, V]] = field(default_factory=dict)


def diff_keyed(previous: Mapping[K, V], current: Mapping[K, V]) -> KeyedDiff[K, V]:
    """
    Diff two ordered key -> value mappings.

    Args:
        previous: What was visible before
        current: What should be visible now

    Returns:
        Entering and persisting keys in current order, exiting keys in previous
        order, and (old, new) values for every persisting key
    """
    entering = tuple(key for key in current if key not in previous)
    persisting = tuple(key for key in current if key in previous)
    exiting = tuple(key for key in previous if key not in current)
    changes = {key: (previous[key], current[key]) for key in persisting}
    return KeyedDiff(entering=entering, persisting=persisting, exiting=exiting, changes=changes)


def ease_cubic_in_out(t: float) -> float:
    t *= 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


@dataclass(frozen=True, slots=True)
class BarGeometry:
    """Visual attributes of one bar group."""

    key: str
    value: int
    y: float
    length: float
    color: RGB
    decoration: str = ""

    def interpolate(self, target: "BarGeometry", t: float) -> "BarGeometry":
        """Blend position, length and color; text values switch to the target at once."""
        return BarGeometry(
            key=target.key,
            value=target.value,
            y=_lerp(self.y, target.y, t),
            length=_lerp(self.length, target.length, t),
            color=tuple(round(_lerp(a, b, t)) for a, b in zip(self.color, target.color)),  # type: ignore[arg-type]
            decoration=target.decoration,
        )


@dataclass(frozen=True, slots=True)
class BarTrack:
    """One bar's running transition."""

    start: BarGeometry
    end: BarGeometry
    started_at: float
    exiting: bool = False

    def progress(self, now: float, duration_ms: float) -> float:
        if duration_ms <= 0:
            return 1.0
        return max(0.0, min(1.0, (now - self.started_at) / duration_ms))

    def sample(self, now: float, duration_ms: float) -> BarGeometry:
        t = self.progress(now, duration_ms)
        if t >= 1.0:
            return self.end
        return self.start.interpolate(self.end, ease_cubic_in_out(t))

    def finished(self, now: float, duration_ms: float) -> bool:
        return self.progress(now, duration_ms) >= 1.0


class BarTransitions:
    """Keyed bar transitions sharing one fixed duration."""

    def __init__(self, duration_ms: float, offscreen_y: float) -> None:
        """
        Initialize an empty set of bars.

        Args:
            duration_ms: Duration of every enter, update and exit transition
            offscreen_y: Vertical position outside the visible area
        """
        self.duration_ms = duration_ms
        self.offscreen_y = offscreen_y
        self.tracks: dict[str, BarTrack] = {}

    def visible_keys(self) -> tuple[str, ...]:
        return tuple(key for key, track in self.tracks.items() if not track.exiting)

    def apply(self, targets: Sequence[BarGeometry], now: float) -> KeyedDiff[str, BarGeometry]:
        """Start transitions from the current picture towards targets."""
        self._prune(now)
        displayed = {
            key: track.end for key, track in self.tracks.items() if not track.exiting
        }
        wanted = {target.key: target for target in targets}
        diff = diff_keyed(displayed, wanted)

        tracks: dict[str, BarTrack] = {}
        for key in diff.exiting:
            current = self.tracks[key].sample(now, self.duration_ms)
            tracks[key] = BarTrack(
                start=current,
                end=replace(current, y=self.offscreen_y),
                started_at=now,
                exiting=True,
            )
        # Bars still sliding out keep exiting unless their key comes back.
        for key, track in self.tracks.items():
            if track.exiting and key not in wanted:
                tracks[key] = track
        for target in targets:
            previous = self.tracks.get(target.key)
            if previous is not None:
                start = previous.sample(now, self.duration_ms)
            else:
                start = replace(target, y=self.offscreen_y, length=0.0)
            tracks[target.key] = BarTrack(start=start, end=target, started_at=now)
        self.tracks = tracks
        return diff

    def sample(self, now: float) -> tuple[BarGeometry, ...]:
        """Interpolated geometry of every bar on screen at time now."""
        return tuple(
            track.sample(now, self.duration_ms)
            for track in self.tracks.values()
            if not (track.exiting and track.finished(now, self.duration_ms))
        )

    def settled(self, now: float) -> bool:
        return all(track.finished(now, self.duration_ms) for track in self.tracks.values())

    def _prune(self, now: float) -> None:
        self.tracks = {
            key: track
            for key, track in self.tracks.items()
            if not (track.exiting and track.finished(now, self.duration_ms))
        }
