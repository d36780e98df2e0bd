"""
Explicit labeling context: configuration plus the label operations bound to it.

Create one per application (or per test) and pass it where labels are made;
there is no module-level instance.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Union, cast

from cargo_labels import _DEFAULT_CONFIG, _sanitize_config, load_config
from cargo_labels.barcodegen.artifact import (
    DEFAULT_BARCODE_CONFIG,
    BarcodeArtifact,
    BarcodeConfig,
    BarcodeOverrides,
)
from cargo_labels.barcodegen.barcode_generator import (
    generate_package_barcode,
    generate_shipment_barcode,
    generate_tracking_barcode,
    generate_warehouse_label_barcode,
)
from cargo_labels.barcodegen.label_output import download_barcode, print_barcode
from cargo_labels.barcodegen.surface import SurfaceFactory
from cargo_labels.model.enums import Symbology

logger = logging.getLogger(__name__)

__all__ = ["LabelContext"]


def _defaults() -> Dict[str, Any]:
    return {k: (dict(v) if isinstance(v, dict) else v) for k, v in _DEFAULT_CONFIG.items()}


class LabelContext:
    """
    Label settings (business name, print header, barcode geometry, symbology)
    and the operations that use them.

    Args:
        config: Mapping shaped like :func:`cargo_labels.load_config` output;
            loaded from file when None. Missing keys take package defaults.
            Values of the wrong type are replaced by defaults with a warning.
        surface_factory: Raster surface constructor passed to renderers.
    """

    def __init__(
        self,
        config: Optional[Mapping[str, Any]] = None,
        surface_factory: Optional[SurfaceFactory] = None,
    ) -> None:
        base = load_config() if config is None else _sanitize_config({**_defaults(), **config})
        self.config: Dict[str, Any] = base
        self.surface_factory = surface_factory
        self.business_name: str = base["business_name"]
        self.print_header: str = base["print_header"]
        self.warehouse_address: str = base["warehouse_address"]
        self.output_dir = Path(base["output_dir"])
        self.barcode_overrides: Dict[str, Any] = dict(base["barcode"])
        try:
            self.symbology = Symbology(base["symbology"])
        except ValueError:
            logger.warning(
                "Unknown symbology %r in config; using %s",
                base["symbology"],
                Symbology.SIMPLIFIED.value,
            )
            self.symbology = Symbology.SIMPLIFIED

    @property
    def barcode_config(self) -> BarcodeConfig:
        return DEFAULT_BARCODE_CONFIG.merged(self.barcode_overrides)

    def _options(self, overrides: Optional[Mapping[str, Any]]) -> BarcodeOverrides:
        return cast(BarcodeOverrides, {**self.barcode_overrides, **(overrides or {})})

    def _render_kwargs(self) -> Dict[str, Any]:
        return {
            "symbology": self.symbology,
            "surface_factory": self.surface_factory,
            "business_name": self.business_name,
        }

    def tracking_barcode(
        self, tracking_id: str, overrides: Optional[Mapping[str, Any]] = None
    ) -> BarcodeArtifact:
        return generate_tracking_barcode(
            tracking_id, self._options(overrides), **self._render_kwargs()
        )

    def package_barcode(
        self, package_id: str, overrides: Optional[Mapping[str, Any]] = None
    ) -> BarcodeArtifact:
        return generate_package_barcode(
            package_id, self._options(overrides), **self._render_kwargs()
        )

    def shipment_barcode(
        self, shipment_id: str, overrides: Optional[Mapping[str, Any]] = None
    ) -> BarcodeArtifact:
        return generate_shipment_barcode(
            shipment_id, self._options(overrides), **self._render_kwargs()
        )

    def warehouse_barcode(
        self, label_id: str, overrides: Optional[Mapping[str, Any]] = None
    ) -> BarcodeArtifact:
        return generate_warehouse_label_barcode(
            label_id, self._options(overrides), **self._render_kwargs()
        )

    def save_label(
        self,
        artifact: BarcodeArtifact,
        filename: Optional[str] = None,
        directory: Union[str, Path, None] = None,
    ) -> Optional[Path]:
        """Save under ``output_dir`` as ``<filename or artifact text>.png``."""
        return download_barcode(
            artifact, filename or artifact.text, directory or self.output_dir
        )

    def print_label(
        self,
        artifact: BarcodeArtifact,
        title: str,
        additional_info: Optional[Mapping[str, str]] = None,
        opener: Optional[Callable[[str], bool]] = None,
    ) -> Optional[Path]:
        kwargs: Dict[str, Any] = {
            "header": self.print_header,
            "address": self.warehouse_address,
        }
        if opener is not None:
            kwargs["opener"] = opener
        return print_barcode(artifact, title, additional_info, **kwargs)

