"""Run configuration with environment overrides."""

import os
from dataclasses import dataclass, replace
from typing import Any, Mapping

from dotenv import load_dotenv

from .constants import (
    AUTO_ADVANCE_INTERVAL_MS,
    BAR_TRANSITION_MS,
    DEFAULT_FPS,
    MAX_BARS,
    TIMELINE_STEP,
)
from .data.records import CategoryFallback

ENV_PREFIX = "BAR_RACE_"


@dataclass(frozen=True)
class RaceConfig:
    """Tunable playback and layout settings for one race."""

    top_k: int = MAX_BARS
    interval_ms: int = AUTO_ADVANCE_INTERVAL_MS
    transition_ms: int = BAR_TRANSITION_MS
    fps: int = DEFAULT_FPS
    timeline_step: int = TIMELINE_STEP
    category_fallback: CategoryFallback = CategoryFallback.ENTITY

    def __post_init__(self) -> None:
        for name in ("top_k", "fps", "timeline_step"):
            if getattr(self, name) <= 0:
                raise ValueError(f"'{name}' must be positive, got {getattr(self, name)}")
        for name in ("interval_ms", "transition_ms"):
            if getattr(self, name) < 0:
                raise ValueError(f"'{name}' must not be negative, got {getattr(self, name)}")

    @property
    def frame_duration(self) -> int:
        """Milliseconds between two rendered output frames."""
        return max(1, 1000 // self.fps)

    def with_overrides(self, **overrides: Any) -> "RaceConfig":
        """Return a copy with every non-None override applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        if "category_fallback" in values:
            values["category_fallback"] = _parse_fallback(values["category_fallback"])
        return replace(self, **values)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "RaceConfig":
        """
        Build a config from ``BAR_RACE_*`` environment variables.

        A ``.env`` file is loaded first when reading the process environment.

        Args:
            environ: Mapping to read instead of os.environ

        Raises:
            ValueError: If a variable holds an invalid value
        """
        if environ is None:
            load_dotenv()
            environ = os.environ
        values: dict[str, Any] = {}
        for name in ("top_k", "interval_ms", "transition_ms", "fps", "timeline_step"):
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is None or not raw.strip():
                continue
            try:
                values[name] = int(raw)
            except ValueError as e:
                raise ValueError(f"{ENV_PREFIX}{name.upper()} must be an integer: {e}") from e
        fallback = environ.get(ENV_PREFIX + "CATEGORY_FALLBACK")
        if fallback:
            values["category_fallback"] = _parse_fallback(fallback)
        return cls(**values)


def _parse_fallback(value: str | CategoryFallback) -> CategoryFallback:
    if isinstance(value, CategoryFallback):
        return value
    try:
        return CategoryFallback(value.strip().lower())
    except ValueError:
        available = ", ".join(policy.value for policy in CategoryFallback)
        raise ValueError(f"Unknown category fallback '{value}'. Available: {available}")
