"""Decoration image loading (flags, logos) with a per-process cache."""

import logging
from io import BytesIO
from pathlib import Path

import requests
from PIL import Image, ImageDraw

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 10


class DecorationCache:
    """Loads decoration references once and hands out circular thumbnails."""

    def __init__(self, base_dir: str | Path | None = None, session: requests.Session | None = None):
        """
        Initialize the cache.

        Args:
            base_dir: Directory relative paths are resolved against
            session: HTTP session used for ``http(s)`` references
        """
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
        self.session = session or requests.Session()
        self._sources: dict[str, Image.Image | None] = {}
        self._thumbnails: dict[tuple[str, int], Image.Image | None] = {}

    def thumbnail(self, reference: str, diameter: int) -> Image.Image | None:
        """Return an RGBA circle of the given diameter, or None if unavailable."""
        if not reference or diameter <= 0:
            return None
        key = (reference, diameter)
        if key not in self._thumbnails:
            source = self._source(reference)
            self._thumbnails[key] = _circular(source, diameter) if source is not None else None
        return self._thumbnails[key]

    def _source(self, reference: str) -> Image.Image | None:
        if reference not in self._sources:
            try:
                self._sources[reference] = self._load(reference)
            except (OSError, requests.RequestException) as e:
                logger.warning("Cannot load decoration '%s': %s", reference, e)
                self._sources[reference] = None
        return self._sources[reference]

    def _load(self, reference: str) -> Image.Image:
        if reference.startswith(("http://", "https://")):
            response = self.session.get(reference, timeout=REQUEST_TIMEOUT_SECONDS)
            response.raise_for_status()
            with Image.open(BytesIO(response.content)) as img:
                return img.convert("RGBA")
        path = Path(reference)
        if not path.is_absolute():
            path = self.base_dir / path
        with Image.open(path) as img:
            return img.convert("RGBA")


def _circular(source: Image.Image, diameter: int) -> Image.Image:
    """Center-crop to a square, resize and cut out a circle."""
    side = min(source.size)
    left = (source.width - side) // 2
    top = (source.height - side) // 2
    square = source.crop((left, top, left + side, top + side))
    square = square.resize((diameter, diameter), Image.Resampling.BILINEAR)

    mask = Image.new("L", (diameter, diameter), 0)
    ImageDraw.Draw(mask).ellipse((0, 0, diameter - 1, diameter - 1), fill=255)
    alpha = Image.composite(square.getchannel("A"), mask, mask)
    square.putalpha(alpha)
    return square
