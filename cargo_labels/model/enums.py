"""
model/enums.py

Domain enums for Vanguard Cargo labels and lifecycle statuses.
NO rendering logic here!

- Entity types (package/shipment) and their canonical statuses.
- Badge color palette used by status displays.
- Barcode symbologies and render tiers of the label rasterizer.
- Warehouse user roles used by the status workflow.

Canonical status values must match the CHECK constraints of the
``packages`` / ``shipments`` tables.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Final, FrozenSet, Literal, Optional, Type, Union

_logger: Final[logging.Logger] = logging.getLogger(__name__)


class EntityType(str, Enum):
    PACKAGE = "package"
    SHIPMENT = "shipment"

    @property
    def barcode_prefix(self) -> str:
        return "PKG-" if self is EntityType.PACKAGE else "SHP-"


class StatusColor(str, Enum):
    GRAY = "gray"
    BLUE = "blue"
    YELLOW = "yellow"
    GREEN = "green"
    INDIGO = "indigo"
    RED = "red"
    ORANGE = "orange"
    PURPLE = "purple"


class PackageStatus(str, Enum):
    PENDING = "pending"  # Awaiting arrival at US warehouse
    RECEIVED = "received"  # Arrived at US warehouse
    PROCESSING = "processing"  # Being processed at US warehouse
    SHIPPED = "shipped"  # Shipped from US to Ghana
    ARRIVED = "arrived"  # Arrived in Ghana
    DELIVERED = "delivered"  # Delivered to customer in Ghana


class ShipmentStatus(str, Enum):
    PENDING = "pending"  # Being prepared for shipment
    PROCESSING = "processing"  # In processing at warehouse
    SHIPPED = "shipped"  # Shipped from US warehouse
    IN_TRANSIT = "in_transit"  # In transit to Ghana
    ARRIVED = "arrived"
    DELIVERED = "delivered"


StatusEnum = Union[PackageStatus, ShipmentStatus]


class Symbology(str, Enum):
    """Bar pattern sources understood by the label rasterizer."""

    SIMPLIFIED = "simplified"  # legacy table, no checksum; labels only
    CODE128 = "code128"  # python-barcode, checksummed
    QR = "qr"

    @property
    def is_scanner_compliant(self) -> bool:
        return self is not Symbology.SIMPLIFIED

    def localized_name(self, lang: Literal["ru", "en"] = "en") -> str:
        names_ru = {
            self.SIMPLIFIED: "Упрощённый Code 128 (без контрольной суммы)",
            self.CODE128: "Code 128",
            self.QR: "QR-код",
        }
        names_en = {
            self.SIMPLIFIED: "Simplified Code 128 (no checksum)",
            self.CODE128: "Code 128",
            self.QR: "QR Code",
        }
        return names_ru[self] if lang == "ru" else names_en[self]


class RenderTier(str, Enum):
    BARCODE = "barcode"
    PLACEHOLDER = "placeholder"
    BLANK = "blank"


class UserRole(str, Enum):
    CLIENT = "client"
    WAREHOUSE_ADMIN = "warehouse_admin"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"

    @property
    def is_staff(self) -> bool:
        return self is not UserRole.CLIENT


# === DEFAULTS ===
DEFAULT_PACKAGE_STATUS: Final[PackageStatus] = PackageStatus.PENDING
DEFAULT_SHIPMENT_STATUS: Final[ShipmentStatus] = ShipmentStatus.PENDING
DEFAULT_STATUS_COLOR: Final[StatusColor] = StatusColor.GRAY
DEFAULT_SYMBOLOGY: Final[Symbology] = Symbology.SIMPLIFIED

FINAL_STATUS_VALUES: Final[FrozenSet[str]] = frozenset({"delivered"})


def coerce_entity_type(entity_type: Union[str, EntityType]) -> Optional[EntityType]:
    """Return the EntityType for a string or enum, or None when unrecognised."""
    if isinstance(entity_type, EntityType):
        return entity_type
    try:
        return EntityType(entity_type)
    except ValueError:
        _logger.debug("Unknown entity type %r", entity_type)
        return None


def status_enum_for(entity_type: EntityType) -> Type[StatusEnum]:
    if entity_type is EntityType.PACKAGE:
        return PackageStatus
    return ShipmentStatus


__all__ = [
    "EntityType",
    "StatusColor",
    "PackageStatus",
    "ShipmentStatus",
    "StatusEnum",
    "Symbology",
    "RenderTier",
    "UserRole",
    "DEFAULT_PACKAGE_STATUS",
    "DEFAULT_SHIPMENT_STATUS",
    "DEFAULT_STATUS_COLOR",
    "DEFAULT_SYMBOLOGY",
    "FINAL_STATUS_VALUES",
    "coerce_entity_type",
    "status_enum_for",
]
