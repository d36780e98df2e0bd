# RU: Таксономия статусов посылок/отправок: канонические значения, метаданные отображения, миграция устаревших значений.
# EN: Package/shipment status taxonomy: canonical values, display metadata, legacy-value migration and badge tokens.

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Final, List, Mapping, Optional, Tuple, Union

from .enums import (
    EntityType,
    PackageStatus,
    ShipmentStatus,
    StatusColor,
    coerce_entity_type,
)

logger = logging.getLogger(__name__)

__all__ = [
    "StatusConfig",
    "StatusError",
    "StatusResolution",
    "ResolutionKind",
    "PACKAGE_STATUS_CONFIG",
    "SHIPMENT_STATUS_CONFIG",
    "LEGACY_STATUS_MAPPING",
    "DEFAULT_FALLBACK_STATUS",
    "is_valid_status",
    "get_status_config",
    "get_all_statuses",
    "get_status_values",
    "convert_legacy_status",
    "normalize_status",
    "require_status",
    "get_status_badge_classes",
]

EntityLike = Union[str, EntityType]


class StatusError(Exception):
    """Status value could not be resolved to a canonical status."""


@dataclass(frozen=True)
class StatusConfig:
    """Display metadata for one canonical status."""

    value: str
    label: str
    color: StatusColor
    description: str


PACKAGE_STATUS_CONFIG: Final[Tuple[StatusConfig, ...]] = (
    StatusConfig(
        PackageStatus.PENDING.value,
        "Pending Arrival",
        StatusColor.GRAY,
        "Awaiting arrival at US warehouse",
    ),
    StatusConfig(
        PackageStatus.RECEIVED.value,
        "Received",
        StatusColor.BLUE,
        "Arrived at US warehouse",
    ),
    StatusConfig(
        PackageStatus.PROCESSING.value,
        "Processing",
        StatusColor.YELLOW,
        "Being processed at US warehouse",
    ),
    StatusConfig(
        PackageStatus.SHIPPED.value,
        "Shipped",
        StatusColor.INDIGO,
        "Shipped from US to Ghana",
    ),
    StatusConfig(
        PackageStatus.ARRIVED.value,
        "Arrived",
        StatusColor.GREEN,
        "Arrived in Ghana",
    ),
    StatusConfig(
        PackageStatus.DELIVERED.value,
        "Delivered",
        StatusColor.GREEN,
        "Delivered to customer in Ghana",
    ),
)

SHIPMENT_STATUS_CONFIG: Final[Tuple[StatusConfig, ...]] = (
    StatusConfig(
        ShipmentStatus.PENDING.value,
        "Pending",
        StatusColor.YELLOW,
        "Being prepared for shipment",
    ),
    StatusConfig(
        ShipmentStatus.PROCESSING.value,
        "Processing",
        StatusColor.BLUE,
        "In processing at warehouse",
    ),
    StatusConfig(
        ShipmentStatus.SHIPPED.value,
        "Shipped",
        StatusColor.INDIGO,
        "Shipped from US warehouse",
    ),
    StatusConfig(
        ShipmentStatus.IN_TRANSIT.value,
        "In Transit",
        StatusColor.BLUE,
        "In transit to Ghana",
    ),
    StatusConfig(
        ShipmentStatus.ARRIVED.value,
        "Arrived",
        StatusColor.GREEN,
        "Arrived in Ghana",
    ),
    StatusConfig(
        ShipmentStatus.DELIVERED.value,
        "Delivered",
        StatusColor.GREEN,
        "Delivered to customer",
    ),
)

_CONFIG_BY_ENTITY: Final[Dict[EntityType, Tuple[StatusConfig, ...]]] = {
    EntityType.PACKAGE: PACKAGE_STATUS_CONFIG,
    EntityType.SHIPMENT: SHIPMENT_STATUS_CONFIG,
}

# Old status strings from both tables, mapped onto the current workflow.
LEGACY_STATUS_MAPPING: Final[Mapping[str, str]] = {
    # packages
    "pending_arrival": "pending",
    "inspected": "processing",
    "ready_for_shipment": "processing",
    "consolidated": "processing",
    "customs_clearance": "in_transit",
    "returned": "delivered",
    "lost": "delivered",
    # shipments
    "awaiting_quote": "pending",
    "quote_ready": "pending",
    "payment_pending": "pending",
    "out_for_delivery": "in_transit",
    "cancelled": "pending",
}

# Legacy targets that are not canonical for packages.
_PACKAGE_EQUIVALENTS: Final[Mapping[str, str]] = {
    ShipmentStatus.IN_TRANSIT.value: PackageStatus.SHIPPED.value,
}

DEFAULT_FALLBACK_STATUS: Final[str] = "pending"

_BADGE_BASE_CLASSES: Final[str] = "px-2 py-1 rounded-full text-xs font-medium"


class ResolutionKind(str, Enum):
    CANONICAL = "canonical"
    LEGACY = "legacy"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class StatusResolution:
    """Outcome of resolving a raw status string.

    ``status`` always holds a canonical value (the fail-open default for
    unknown input), ``kind`` tells callers whether that value is genuine.
    """

    raw: str
    status: str
    kind: ResolutionKind
    entity_type: Optional[EntityType]

    @property
    def is_unknown(self) -> bool:
        return self.kind is ResolutionKind.UNKNOWN

    @property
    def was_migrated(self) -> bool:
        return self.kind is ResolutionKind.LEGACY


def _configs_for(entity_type: EntityLike) -> Tuple[StatusConfig, ...]:
    entity = coerce_entity_type(entity_type)
    if entity is None:
        return ()
    return _CONFIG_BY_ENTITY[entity]


def get_all_statuses(entity_type: EntityLike) -> List[StatusConfig]:
    """All canonical status records for an entity type, in workflow order."""
    return list(_configs_for(entity_type))


def get_status_values(entity_type: EntityLike) -> List[str]:
    return [cfg.value for cfg in _configs_for(entity_type)]


def is_valid_status(candidate: str, entity_type: EntityLike) -> bool:
    """True iff ``candidate`` is exactly a canonical value (case-sensitive)."""
    if not isinstance(candidate, str):
        return False
    return any(cfg.value == candidate for cfg in _configs_for(entity_type))


def get_status_config(candidate: str, entity_type: EntityLike) -> Optional[StatusConfig]:
    """Display metadata for a canonical value, or None when not found."""
    for cfg in _configs_for(entity_type):
        if cfg.value == candidate:
            return cfg
    return None


def _fit_to_entity(status: str, entity_type: EntityLike) -> str:
    if is_valid_status(status, entity_type):
        return status
    equivalent = _PACKAGE_EQUIVALENTS.get(status)
    if equivalent is not None and is_valid_status(equivalent, entity_type):
        return equivalent
    return DEFAULT_FALLBACK_STATUS


def normalize_status(value: str, entity_type: EntityLike) -> StatusResolution:
    """Resolve a raw status, reporting whether it was canonical, legacy or unknown."""
    entity = coerce_entity_type(entity_type)
    if entity is not None and is_valid_status(value, entity):
        return StatusResolution(value, value, ResolutionKind.CANONICAL, entity)

    mapped = LEGACY_STATUS_MAPPING.get(value) if isinstance(value, str) else None
    if entity is not None and mapped is not None:
        status = _fit_to_entity(mapped, entity)
        logger.debug("Legacy %s status %r migrated to %r", entity.value, value, status)
        return StatusResolution(value, status, ResolutionKind.LEGACY, entity)

    logger.warning(
        "Unknown %s status %r; falling back to %r",
        entity.value if entity is not None else entity_type,
        value,
        DEFAULT_FALLBACK_STATUS,
    )
    return StatusResolution(
        value, DEFAULT_FALLBACK_STATUS, ResolutionKind.UNKNOWN, entity
    )


def convert_legacy_status(value: str, entity_type: EntityLike) -> str:
    """Canonical value for ``value``; unknown input degrades to ``"pending"``.

    Use :func:`normalize_status` or :func:`require_status` where a typo
    must not pass as pending.
    """
    return normalize_status(value, entity_type).status


def require_status(value: str, entity_type: EntityLike) -> str:
    """Strict variant of :func:`convert_legacy_status`.

    Raises:
        StatusError: unknown entity type or unresolvable status value.
    """
    resolution = normalize_status(value, entity_type)
    if resolution.entity_type is None:
        raise StatusError(f"Unknown entity type: {entity_type!r}")
    if resolution.is_unknown:
        raise StatusError(
            f"Unknown {resolution.entity_type.value} status: {value!r}"
        )
    return resolution.status


def get_status_badge_classes(color: Union[str, StatusColor]) -> str:
    """Presentation token for a status color; unknown colors render gray."""
    key = color.value if isinstance(color, StatusColor) else color
    try:
        shade = StatusColor(key)
    except ValueError:
        shade = StatusColor.GRAY
    return f"{_BADGE_BASE_CLASSES} bg-{shade.value}-100 text-{shade.value}-800"
