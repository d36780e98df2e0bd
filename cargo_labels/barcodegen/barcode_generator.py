"""
RU: Растеризация штрихкодов для этикеток посылок, отправлений и склада.
EN: Label barcode rasterizer for packages, shipments and warehouse bins.

Rendering degrades through three tiers and never raises in the default
(non-strict) mode:

1. the barcode itself;
2. a branded placeholder card carrying the identifier as plain text;
3. a fixed 1x1 blank PNG.

The returned :class:`BarcodeArtifact` records which tier was produced.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Final, Mapping, Optional, Union

from cargo_labels.barcodegen.artifact import (
    BLANK_PNG,
    DEFAULT_BARCODE_CONFIG,
    BarcodeArtifact,
    BarcodeConfig,
    BarcodeOverrides,
)
from cargo_labels.barcodegen.encoding import (
    BarcodeGenError,
    EncodedPattern,
    encode_code128,
    encode_simplified,
)
from cargo_labels.barcodegen.matrix2d_generator import QrLabelGenerator
from cargo_labels.barcodegen.surface import PillowSurface, RasterSurface, SurfaceFactory
from cargo_labels.model.enums import EntityType, RenderTier, Symbology

logger = logging.getLogger(__name__)

__all__ = [
    "BarcodeGenerator",
    "BarcodeGenError",
    "DEFAULT_BUSINESS_NAME",
    "PACKAGE_PRESET",
    "SHIPMENT_PRESET",
    "WAREHOUSE_PRESET",
    "PLACEHOLDER_SIZE",
    "WAREHOUSE_PREFIX",
    "generate_tracking_barcode",
    "generate_package_barcode",
    "generate_shipment_barcode",
    "generate_warehouse_label_barcode",
    "get_barcode_dimensions",
]

DEFAULT_BUSINESS_NAME: Final[str] = "VANGUARD CARGO"

# Presets win over caller overrides for the keys they set.
PACKAGE_PRESET: Final[BarcodeOverrides] = {"width": 250, "height": 80}
SHIPMENT_PRESET: Final[BarcodeOverrides] = {"width": 300, "height": 100}
WAREHOUSE_PRESET: Final[BarcodeOverrides] = {"width": 200, "height": 60, "font_size": 10}

WAREHOUSE_PREFIX: Final[str] = "WH-"

PLACEHOLDER_SIZE: Final = (300, 100)


class BarcodeGenerator:
    """
    Renders one identifier into a PNG label barcode.

    Args:
        text: Identifier to encode (tracking number, package/shipment ID).
        config: Geometry and colors; defaults to 300x100 with caption.
        symbology: SIMPLIFIED (legacy label table), CODE128 or QR.
        surface_factory: ``(width, height, background) -> RasterSurface``.
        business_name: Heading drawn on the placeholder card.

    Examples:
        >>> art = BarcodeGenerator("VC-2024-001").render()
        >>> art.tier is RenderTier.BARCODE
        True
    """

    def __init__(
        self,
        text: str,
        config: Optional[BarcodeConfig] = None,
        symbology: Union[Symbology, str] = Symbology.SIMPLIFIED,
        surface_factory: Optional[SurfaceFactory] = None,
        business_name: str = DEFAULT_BUSINESS_NAME,
    ) -> None:
        try:
            self.symbology = Symbology(symbology)
        except ValueError as e:
            raise TypeError(f"Unsupported symbology: {symbology!r}") from e
        self.text = text
        self.config = config or DEFAULT_BARCODE_CONFIG
        self.surface_factory: SurfaceFactory = surface_factory or PillowSurface
        self.business_name = business_name

    def encode(self) -> EncodedPattern:
        """Bar/space modules for ``text``; raises BarcodeGenError on bad input."""
        if not isinstance(self.text, str):
            raise BarcodeGenError(f"Barcode data must be a string, got {type(self.text)!r}")
        if self.symbology is Symbology.CODE128:
            return encode_code128(self.text)
        if self.symbology is Symbology.QR:
            return QrLabelGenerator(self.text, self.config, self.surface_factory).encode()
        return encode_simplified(self.text)

    def render(self, strict: bool = False) -> BarcodeArtifact:
        """
        Render the barcode, falling back to the placeholder and blank tiers.

        Args:
            strict: Raise BarcodeGenError instead of falling back.

        Returns:
            BarcodeArtifact; ``artifact.tier`` tells which tier was produced.
        """
        logger.debug(
            "Rendering barcode [%s] text=%r size=%dx%d",
            self.symbology.value,
            self.text,
            self.config.width,
            self.config.height,
        )
        try:
            if self.symbology is Symbology.QR:
                return QrLabelGenerator(self.text, self.config, self.surface_factory).render()
            return self._render_bars()
        except Exception as e:
            msg = f"Barcode generation failed for {self.text!r}: {e}"
            if strict:
                if isinstance(e, BarcodeGenError):
                    raise
                raise BarcodeGenError(msg) from e
            logger.warning(f"{msg}; returning placeholder")
        return self.render_placeholder()

    def render_bytes(self) -> bytes:
        return self.render().png

    def _render_bars(self) -> BarcodeArtifact:
        cfg = self.config
        cfg.validate()
        encoded = self.encode()
        surface = self.surface_factory(cfg.width, cfg.height, cfg.background_color)
        bar_width = cfg.interior_width / len(encoded.pattern)
        bar_height = cfg.bar_height
        for i, module in enumerate(encoded.pattern):
            if module == "1":
                x = cfg.margin + i * bar_width
                surface.fill_rect(
                    (x, cfg.margin, x + bar_width, cfg.margin + bar_height),
                    cfg.foreground_color,
                )
        if cfg.show_text:
            surface.draw_text_centered(
                self.text,
                cfg.width / 2,
                cfg.height - cfg.margin,
                cfg.font_size,
                cfg.foreground_color,
            )
        return BarcodeArtifact(
            png=surface.to_png(),
            pattern=encoded.pattern,
            text=self.text,
            encoded_text=encoded.encoded_text,
            tier=RenderTier.BARCODE,
            width=cfg.width,
            height=cfg.height,
            symbology=self.symbology,
            lossy=encoded.lossy,
        )

    def render_placeholder(self) -> BarcodeArtifact:
        """Branded 300x100 card with the identifier as text, or the blank PNG."""
        text = self.text if isinstance(self.text, str) else str(self.text)
        width, height = PLACEHOLDER_SIZE
        try:
            surface = self.surface_factory(width, height, "#FFFFFF")
            _draw_placeholder(surface, text, self.business_name)
            png = surface.to_png()
        except Exception as e:
            logger.error(
                "Placeholder generation failed for %r: %s; returning blank image", text, e
            )
            return BarcodeArtifact(
                png=BLANK_PNG,
                pattern="",
                text=text,
                encoded_text="",
                tier=RenderTier.BLANK,
                width=1,
                height=1,
                symbology=self.symbology,
            )
        return BarcodeArtifact(
            png=png,
            pattern="",
            text=text,
            encoded_text="",
            tier=RenderTier.PLACEHOLDER,
            width=width,
            height=height,
            symbology=self.symbology,
        )


def _draw_placeholder(surface: RasterSurface, text: str, business_name: str) -> None:
    w, h = surface.width, surface.height
    surface.stroke_rect((5, 5, w - 5, h - 5), "#000000", line_width=2)
    center = w / 2
    surface.draw_text_centered(business_name, center, 30, 16, "#000000")
    surface.draw_text_centered(text, center, 55, 12, "#000000")
    surface.draw_text_centered("Tracking ID", center, 80, 12, "#000000")


def _coerce_symbology(symbology: Union[Symbology, str]) -> Symbology:
    try:
        return Symbology(symbology)
    except ValueError:
        logger.warning(
            f"Unsupported symbology {symbology!r}; using {Symbology.SIMPLIFIED.value}"
        )
        return Symbology.SIMPLIFIED


def _with_preset(
    custom_config: Optional[Mapping[str, Any]], preset: Optional[Mapping[str, Any]] = None
) -> BarcodeConfig:
    merged: Dict[str, Any] = dict(custom_config or {})
    merged.update(preset or {})
    return DEFAULT_BARCODE_CONFIG.merged(merged)


def generate_tracking_barcode(
    tracking_id: str,
    custom_config: Optional[BarcodeOverrides] = None,
    symbology: Union[Symbology, str] = Symbology.SIMPLIFIED,
    surface_factory: Optional[SurfaceFactory] = None,
    business_name: str = DEFAULT_BUSINESS_NAME,
) -> BarcodeArtifact:
    """Render ``tracking_id`` with defaults overlaid by ``custom_config``.

    Never raises: an unsupported symbology logs a warning and renders SIMPLIFIED.
    """
    return BarcodeGenerator(
        tracking_id,
        _with_preset(custom_config),
        symbology=_coerce_symbology(symbology),
        surface_factory=surface_factory,
        business_name=business_name,
    ).render()


def _generate_with_preset(
    text: str,
    preset: Mapping[str, Any],
    custom_config: Optional[BarcodeOverrides],
    **kwargs: Any,
) -> BarcodeArtifact:
    if "symbology" in kwargs:
        kwargs["symbology"] = _coerce_symbology(kwargs["symbology"])
    return BarcodeGenerator(text, _with_preset(custom_config, preset), **kwargs).render()


def generate_package_barcode(
    package_id: str, custom_config: Optional[BarcodeOverrides] = None, **kwargs: Any
) -> BarcodeArtifact:
    """``PKG-<id>`` on a 250x80 label; preset size wins over ``custom_config``."""
    return _generate_with_preset(
        f"{EntityType.PACKAGE.barcode_prefix}{package_id}",
        PACKAGE_PRESET,
        custom_config,
        **kwargs,
    )


def generate_shipment_barcode(
    shipment_id: str, custom_config: Optional[BarcodeOverrides] = None, **kwargs: Any
) -> BarcodeArtifact:
    return _generate_with_preset(
        f"{EntityType.SHIPMENT.barcode_prefix}{shipment_id}",
        SHIPMENT_PRESET,
        custom_config,
        **kwargs,
    )


def generate_warehouse_label_barcode(
    label_id: str, custom_config: Optional[BarcodeOverrides] = None, **kwargs: Any
) -> BarcodeArtifact:
    """``WH-<id>`` on a compact 200x60 bin label with a 10pt caption."""
    return _generate_with_preset(
        f"{WAREHOUSE_PREFIX}{label_id}",
        WAREHOUSE_PRESET,
        custom_config,
        **kwargs,
    )


def get_barcode_dimensions(custom_config: Optional[BarcodeOverrides] = None) -> Dict[str, int]:
    cfg = _with_preset(custom_config)
    return {"width": cfg.width, "height": cfg.height}
