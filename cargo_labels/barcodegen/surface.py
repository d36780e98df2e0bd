"""
Raster drawing surfaces for label rendering.

The barcode and QR renderers only talk to :class:`RasterSurface`; the
Pillow-backed :class:`PillowSurface` is the default implementation and
tests plug in their own factories to exercise fallback paths.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Callable, Final, Optional, Protocol, Tuple, Union

from PIL import Image, ImageDraw, ImageFont
from PIL.ImageFont import FreeTypeFont
from PIL.ImageFont import ImageFont as PILImageFont

logger = logging.getLogger(__name__)

__all__ = [
    "RasterSurface",
    "SurfaceFactory",
    "PillowSurface",
    "DEFAULT_FONT_CANDIDATES",
]

DEFAULT_FONT_CANDIDATES: Final[Tuple[str, ...]] = (
    "arial.ttf",
    "Arial.ttf",
    "DejaVuSans.ttf",
    "LiberationSans-Regular.ttf",
)

Box = Tuple[float, float, float, float]


class RasterSurface(Protocol):
    """Minimal 2D drawing capability needed by label renderers."""

    width: int
    height: int

    def fill_rect(self, box: Box, color: str) -> None: ...

    def stroke_rect(self, box: Box, color: str, line_width: int = 1) -> None: ...

    def draw_text_centered(
        self, text: str, center_x: float, baseline_y: float, font_size: int, color: str
    ) -> None: ...

    def to_png(self) -> bytes: ...


SurfaceFactory = Callable[[int, int, str], RasterSurface]


def _load_font(font_size: int, font_path: Optional[str]) -> Union[FreeTypeFont, PILImageFont]:
    candidates = (font_path,) if font_path else DEFAULT_FONT_CANDIDATES
    for path in candidates:
        try:
            return ImageFont.truetype(path, font_size)
        except OSError:
            continue
    logger.debug("No TrueType font found for size %d; using default font", font_size)
    return ImageFont.load_default()


class PillowSurface:
    """RGB Pillow image with rectangle and text primitives.

    Args:
        width: Surface width in pixels.
        height: Surface height in pixels.
        background: Initial fill color (any Pillow color string).
        font_path: Optional TrueType font for captions.
    """

    def __init__(
        self,
        width: int,
        height: int,
        background: str = "#FFFFFF",
        font_path: Optional[str] = None,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface size must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.font_path = font_path
        self.image = Image.new("RGB", (self.width, self.height), color=background)
        self._draw = ImageDraw.Draw(self.image)

    @staticmethod
    def _pixel_box(box: Box) -> Tuple[int, int, int, int]:
        # Pillow boxes are inclusive on both ends.
        x0, y0, x1, y1 = (int(round(v)) for v in box)
        return x0, y0, max(x0, x1 - 1), max(y0, y1 - 1)

    def fill_rect(self, box: Box, color: str) -> None:
        self._draw.rectangle(self._pixel_box(box), fill=color)

    def stroke_rect(self, box: Box, color: str, line_width: int = 1) -> None:
        self._draw.rectangle(self._pixel_box(box), outline=color, width=line_width)

    def draw_text_centered(
        self, text: str, center_x: float, baseline_y: float, font_size: int, color: str
    ) -> None:
        """Draw ``text`` horizontally centered with its bottom at ``baseline_y``."""
        if not text:
            return
        font = _load_font(font_size, self.font_path)
        left, top, right, bottom = self._draw.textbbox((0, 0), text, font=font)
        x = center_x - (right - left) / 2 - left
        y = baseline_y - bottom
        self._draw.text((x, y), text, font=font, fill=color)

    def to_image(self) -> Image.Image:
        return self.image.copy()

    def to_png(self) -> bytes:
        buf = BytesIO()
        self.image.save(buf, format="PNG")
        buf.seek(0)
        return buf.read()
