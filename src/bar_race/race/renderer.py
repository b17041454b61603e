"""Renderer for drawing race scenes using Pillow."""

from functools import lru_cache

from PIL import Image, ImageDraw, ImageFont

from ..constants import (
    AXIS_DOMAIN_COLOR,
    AXIS_GRID_COLOR,
    AXIS_TEXT_COLOR,
    BACKGROUND_COLOR,
    BADGE_STROKE_COLOR,
    CANVAS_WIDTH,
    LABEL_COLOR,
    LABEL_RIGHT,
    LEGEND_TITLE,
    MARGIN_LEFT,
    MARGIN_RIGHT,
    MARGIN_TOP,
    PERIOD_LABEL_SIZE,
    PERIOD_LABEL_Y,
    PLAY_BUTTON_BOTTOM,
    PLAY_BUTTON_COLOR,
    PLAY_BUTTON_LEFT,
    PLAY_BUTTON_SIZE,
    SUMMARY_LABEL_COLOR,
    TIMELINE_BASELINE_OFFSET,
    TIMELINE_COLOR,
    TIMELINE_LABEL_COLOR,
    TIMELINE_MAJOR_TICK,
    TIMELINE_MINOR_TICK,
    TIMELINE_POINTER_SIZE,
    TOTAL_LABEL_SIZE,
    TOTAL_LABEL_Y,
)
from .decorations import DecorationCache
from .scene import LEGEND, BarState, ChartScene


@lru_cache(maxsize=16)
def _font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    return ImageFont.load_default(size=size)


def badge_radius(bar: BarState) -> float:
    return bar.height / 2 - 2


class Renderer:
    """Renders race scenes as PIL Images."""

    def __init__(self, decorations: DecorationCache | None = None):
        """
        Initialize renderer.

        Args:
            decorations: Image source for bar badges; badges are plain circles without it
        """
        self.decorations = decorations

    def render_frame(self, scene: ChartScene) -> Image.Image:
        """
        Render a scene as an image.

        Returns:
            PIL Image of the scene
        """
        img = Image.new("RGBA", (scene.width, scene.height), BACKGROUND_COLOR + (255,))
        draw = ImageDraw.Draw(img, "RGBA")

        self._draw_axis(draw, scene)
        for bar in scene.bars:
            self._draw_bar(img, draw, bar)
        self._draw_summary(draw, scene)
        self._draw_timeline(draw, scene)
        self._draw_play_button(draw, scene)
        self._draw_legend(draw)

        return img.convert("RGB").convert("P", palette=Image.Palette.ADAPTIVE)

    def _draw_axis(self, draw: ImageDraw.ImageDraw, scene: ChartScene) -> None:
        """Top axis: domain line, gridlines as tall as the bar stack, grouped labels."""
        font = _font(12)
        bottom = MARGIN_TOP + scene.grid_height
        for tick in scene.axis_ticks:
            draw.line([(tick.x, MARGIN_TOP), (tick.x, bottom)], fill=AXIS_GRID_COLOR)
            draw.text((tick.x, MARGIN_TOP - 9), tick.label, font=font, fill=AXIS_TEXT_COLOR, anchor="ms")
        draw.line(
            [(MARGIN_LEFT, MARGIN_TOP), (CANVAS_WIDTH - MARGIN_RIGHT, MARGIN_TOP)],
            fill=AXIS_DOMAIN_COLOR,
        )

    def _draw_bar(self, img: Image.Image, draw: ImageDraw.ImageDraw, bar: BarState) -> None:
        font = _font(14)
        top = bar.y
        bottom = bar.y + bar.height
        middle = (top + bottom) / 2
        right = MARGIN_LEFT + bar.length
        if bar.length > 0:
            draw.rectangle([MARGIN_LEFT, top, right, bottom], fill=bar.color)
        draw.text((right + 8, middle), bar.value_label, font=font, fill=LABEL_COLOR, anchor="lm")
        draw.text((MARGIN_LEFT - 10, middle), bar.key, font=font, fill=LABEL_COLOR, anchor="rm")

        radius = badge_radius(bar)
        if radius <= 0:
            return
        cx = right - radius - 4
        cy = top + radius + 2
        box = [cx - radius, cy - radius, cx + radius, cy + radius]
        draw.ellipse(box, fill=bar.color)
        thumbnail = None
        if self.decorations is not None:
            thumbnail = self.decorations.thumbnail(bar.decoration, int(radius * 2))
        if thumbnail is not None:
            img.alpha_composite(thumbnail, (int(cx - radius), int(cy - radius)))
        draw.ellipse(box, outline=BADGE_STROKE_COLOR, width=2)

    def _draw_summary(self, draw: ImageDraw.ImageDraw, scene: ChartScene) -> None:
        """Large period label with the running total of visible bars below it."""
        draw.text(
            (LABEL_RIGHT, PERIOD_LABEL_Y),
            str(scene.period),
            font=_font(PERIOD_LABEL_SIZE),
            fill=SUMMARY_LABEL_COLOR,
            anchor="rs",
        )
        draw.text(
            (LABEL_RIGHT, TOTAL_LABEL_Y),
            scene.total_label,
            font=_font(TOTAL_LABEL_SIZE),
            fill=SUMMARY_LABEL_COLOR,
            anchor="rs",
        )

    def _draw_timeline(self, draw: ImageDraw.ImageDraw, scene: ChartScene) -> None:
        font = _font(11)
        base_y = scene.height - TIMELINE_BASELINE_OFFSET
        draw.line(
            [(MARGIN_LEFT, base_y), (CANVAS_WIDTH - MARGIN_RIGHT, base_y)], fill=TIMELINE_COLOR
        )
        for tick in scene.timeline_ticks:
            length = TIMELINE_MAJOR_TICK if tick.major else TIMELINE_MINOR_TICK
            draw.line([(tick.x, base_y), (tick.x, base_y + length)], fill=TIMELINE_COLOR)
            if tick.major:
                draw.text(
                    (tick.x, base_y + TIMELINE_MINOR_TICK + 20),
                    str(tick.period),
                    font=font,
                    fill=TIMELINE_LABEL_COLOR,
                    anchor="ms",
                )

        size = TIMELINE_POINTER_SIZE
        cx = scene.pointer_x
        draw.polygon(
            [(cx - size, base_y - 8), (cx + size, base_y - 8), (cx, base_y)],
            fill=TIMELINE_COLOR,
        )

    def _draw_play_button(self, draw: ImageDraw.ImageDraw, scene: ChartScene) -> None:
        """Round toggle showing pause bars while playing and a play triangle while paused."""
        radius = PLAY_BUTTON_SIZE / 2
        cx = PLAY_BUTTON_LEFT + radius
        cy = scene.height - PLAY_BUTTON_BOTTOM - radius
        draw.ellipse([cx - radius, cy - radius, cx + radius, cy + radius], fill=PLAY_BUTTON_COLOR)
        white = (255, 255, 255)
        if scene.playing:
            draw.rectangle([cx - 7, cy - 8, cx - 3, cy + 8], fill=white)
            draw.rectangle([cx + 3, cy - 8, cx + 7, cy + 8], fill=white)
        else:
            draw.polygon([(cx - 5, cy - 9), (cx - 5, cy + 9), (cx + 9, cy)], fill=white)

    def _draw_legend(self, draw: ImageDraw.ImageDraw) -> None:
        x = CANVAS_WIDTH - MARGIN_RIGHT + 40
        y = MARGIN_TOP
        draw.text((x, y), LEGEND_TITLE, font=_font(16), fill=(0, 0, 0))
        font = _font(13)
        for entry in LEGEND:
            y += 22
            draw.rectangle([x, y + 2, x + 12, y + 14], fill=entry.color)
            draw.text((x + 18, y), entry.label, font=font, fill=(0, 0, 0))
