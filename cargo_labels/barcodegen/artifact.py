"""
Label rendering configuration and the immutable artifact every renderer returns.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import asdict, dataclass, fields, replace
from io import BytesIO
from typing import Any, Dict, Final, Mapping, Optional, TypedDict

from PIL import Image

from cargo_labels.barcodegen.encoding import BarcodeGenError
from cargo_labels.model.enums import RenderTier, Symbology

logger = logging.getLogger(__name__)

__all__ = [
    "BarcodeConfig",
    "BarcodeOverrides",
    "BarcodeArtifact",
    "DEFAULT_BARCODE_CONFIG",
    "BLANK_PNG",
    "BLANK_PNG_DATA_URL",
    "CAPTION_GAP",
]

# Pixels between the bottom of the bars and the caption line.
CAPTION_GAP: Final[int] = 5

BLANK_PNG_DATA_URL: Final[str] = (
    "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhf"
    "DwAChwGA60e6kgAAAABJRU5ErkJggg=="
)
BLANK_PNG: Final[bytes] = base64.b64decode(BLANK_PNG_DATA_URL.split(",", 1)[1])


class BarcodeOverrides(TypedDict, total=False):
    """Partial :class:`BarcodeConfig` accepted by the generate_* helpers."""

    width: int
    height: int
    font_size: int
    margin: int
    background_color: str
    foreground_color: str
    show_text: bool


@dataclass(frozen=True)
class BarcodeConfig:
    """Pixel geometry and colors of a rendered label barcode."""

    width: int = 300
    height: int = 100
    font_size: int = 12
    margin: int = 10
    background_color: str = "#FFFFFF"
    foreground_color: str = "#000000"
    show_text: bool = True

    @property
    def interior_width(self) -> int:
        return self.width - 2 * self.margin

    @property
    def bar_height(self) -> int:
        """Height of the bars, leaving room for the caption when shown."""
        if self.show_text:
            return self.height - self.margin - self.font_size - CAPTION_GAP
        return self.height - 2 * self.margin

    def validate(self) -> None:
        """
        Raises:
            BarcodeGenError: non-positive size or margins leaving no drawable area.
        """
        if self.width <= 0 or self.height <= 0:
            raise BarcodeGenError(
                f"Barcode size must be positive, got {self.width}x{self.height}"
            )
        if self.margin < 0 or self.font_size <= 0:
            raise BarcodeGenError(
                f"Invalid margin/font size: margin={self.margin} font_size={self.font_size}"
            )
        if self.interior_width <= 0 or self.bar_height <= 0:
            raise BarcodeGenError(
                f"Margins leave no drawable area in {self.width}x{self.height}"
            )

    def merged(self, overrides: Optional[Mapping[str, Any]] = None) -> "BarcodeConfig":
        """Copy with ``overrides`` applied; unknown keys are ignored with a warning."""
        if not overrides:
            return self
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            logger.warning("Ignoring unknown barcode options: %s", sorted(unknown))
        return replace(self, **{k: v for k, v in overrides.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_BARCODE_CONFIG: Final[BarcodeConfig] = BarcodeConfig()


@dataclass(frozen=True)
class BarcodeArtifact:
    """PNG image of a label barcode plus the modules it was drawn from.

    ``tier`` tells a perfect barcode apart from the placeholder/blank
    fallbacks; ``lossy`` flags identifiers that lost characters in encoding.
    """

    png: bytes
    pattern: str
    text: str
    encoded_text: str
    tier: RenderTier
    width: int
    height: int
    symbology: Symbology = Symbology.SIMPLIFIED
    lossy: bool = False

    @property
    def is_fallback(self) -> bool:
        return self.tier is not RenderTier.BARCODE

    @property
    def data_url(self) -> str:
        return "data:image/png;base64," + base64.b64encode(self.png).decode("ascii")

    def to_image(self) -> Image.Image:
        img = Image.open(BytesIO(self.png))
        img.load()
        return img

    def __str__(self) -> str:
        shown = self.text[:16] + ("..." if len(self.text) > 16 else "")
        return f"BarcodeArtifact({self.tier.value}, {self.width}x{self.height}, text={shown})"
