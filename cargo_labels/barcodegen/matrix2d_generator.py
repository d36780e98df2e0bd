"""
RU: QR-коды для этикеток (через qrcode) с подписью идентификатора.
EN: QR label codes (via qrcode) drawn on a raster surface with an identifier caption.

Requirements: qrcode, Pillow
"""

from __future__ import annotations

import logging
from typing import Final, List, Optional

import qrcode
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q

from cargo_labels.barcodegen.artifact import (
    DEFAULT_BARCODE_CONFIG,
    BarcodeArtifact,
    BarcodeConfig,
)
from cargo_labels.barcodegen.encoding import BarcodeGenError, EncodedPattern
from cargo_labels.barcodegen.surface import PillowSurface, SurfaceFactory
from cargo_labels.model.enums import RenderTier, Symbology

logger = logging.getLogger(__name__)

__all__ = [
    "QrLabelGenerator",
    "QR_ERROR_LEVELS",
]

QR_ERROR_LEVELS: Final = {
    "L": ERROR_CORRECT_L,
    "M": ERROR_CORRECT_M,
    "Q": ERROR_CORRECT_Q,
    "H": ERROR_CORRECT_H,
}

# Quiet zone in modules; 4 is the minimum scanners expect.
DEFAULT_QR_BORDER: Final[int] = 4


class QrLabelGenerator:
    """QR code renderer sharing :class:`BarcodeConfig` geometry with 1D labels.

    The symbol is drawn as a square centered in the bar area; the caption
    (when enabled) goes below it exactly as for 1D barcodes.

    Args:
        text: Payload to encode.
        config: Label geometry and colors.
        surface_factory: Surface constructor, PillowSurface by default.
        error_correction: One of "L", "M", "Q", "H".
        border: Quiet zone width in modules.
    """

    def __init__(
        self,
        text: str,
        config: Optional[BarcodeConfig] = None,
        surface_factory: Optional[SurfaceFactory] = None,
        error_correction: str = "M",
        border: int = DEFAULT_QR_BORDER,
    ) -> None:
        if error_correction not in QR_ERROR_LEVELS:
            raise ValueError(f"Unknown QR error correction level: {error_correction!r}")
        self.text = text
        self.config = config or DEFAULT_BARCODE_CONFIG
        self.surface_factory: SurfaceFactory = surface_factory or PillowSurface
        self.error_correction = error_correction
        self.border = border

    def matrix(self) -> List[List[bool]]:
        """Module matrix including the quiet zone (True = dark)."""
        if not isinstance(self.text, str) or not self.text:
            raise BarcodeGenError("QR data must be non-empty string")
        try:
            qr = qrcode.QRCode(
                version=None,
                error_correction=QR_ERROR_LEVELS[self.error_correction],
                box_size=1,
                border=self.border,
            )
            qr.add_data(self.text)
            qr.make(fit=True)
            return qr.get_matrix()
        except Exception as e:
            raise BarcodeGenError(f"QR encoding failed for {self.text!r}") from e

    def encode(self) -> EncodedPattern:
        """Matrix rows as '1'/'0' strings joined by newlines."""
        rows = self.matrix()
        pattern = "\n".join("".join("1" if cell else "0" for cell in row) for row in rows)
        return EncodedPattern(pattern, self.text, self.text)

    def render(self) -> BarcodeArtifact:
        """
        Raises:
            BarcodeGenError: invalid config or payload; surface errors propagate.
        """
        cfg = self.config
        cfg.validate()
        rows = self.matrix()
        side = min(cfg.interior_width, cfg.bar_height)
        module = side / len(rows)
        x0 = cfg.margin + (cfg.interior_width - side) / 2
        y0 = cfg.margin

        surface = self.surface_factory(cfg.width, cfg.height, cfg.background_color)
        for r, row in enumerate(rows):
            for c, dark in enumerate(row):
                if dark:
                    x = x0 + c * module
                    y = y0 + r * module
                    surface.fill_rect((x, y, x + module, y + module), cfg.foreground_color)
        if cfg.show_text:
            surface.draw_text_centered(
                self.text,
                cfg.width / 2,
                cfg.height - cfg.margin,
                cfg.font_size,
                cfg.foreground_color,
            )
        logger.debug("QR %r rendered: %d modules per side", self.text, len(rows))
        pattern = "\n".join("".join("1" if cell else "0" for cell in row) for row in rows)
        return BarcodeArtifact(
            png=surface.to_png(),
            pattern=pattern,
            text=self.text,
            encoded_text=self.text,
            tier=RenderTier.BARCODE,
            width=cfg.width,
            height=cfg.height,
            symbology=Symbology.QR,
        )
