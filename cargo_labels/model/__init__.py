"""
model

Domain layer: entity/status enums, the status taxonomy and workflow rules.
No rendering here; see ``cargo_labels.barcodegen`` for labels.
"""

from cargo_labels.model.enums import (
    EntityType,
    PackageStatus,
    RenderTier,
    ShipmentStatus,
    StatusColor,
    Symbology,
    UserRole,
)
from cargo_labels.model.status import (
    LEGACY_STATUS_MAPPING,
    PACKAGE_STATUS_CONFIG,
    SHIPMENT_STATUS_CONFIG,
    StatusConfig,
    StatusError,
    StatusResolution,
    convert_legacy_status,
    get_status_badge_classes,
    get_status_config,
    is_valid_status,
    normalize_status,
    require_status,
)
from cargo_labels.model.workflow import (
    TrackingProgress,
    TransitionContext,
    WorkflowValidationResult,
    can_set_status,
    get_tracking_progress,
    get_valid_next_statuses,
    sync_package_status,
    validate_transition,
)

__all__ = [
    "EntityType",
    "PackageStatus",
    "RenderTier",
    "ShipmentStatus",
    "StatusColor",
    "Symbology",
    "UserRole",
    "LEGACY_STATUS_MAPPING",
    "PACKAGE_STATUS_CONFIG",
    "SHIPMENT_STATUS_CONFIG",
    "StatusConfig",
    "StatusError",
    "StatusResolution",
    "convert_legacy_status",
    "get_status_badge_classes",
    "get_status_config",
    "is_valid_status",
    "normalize_status",
    "require_status",
    "TrackingProgress",
    "TransitionContext",
    "WorkflowValidationResult",
    "can_set_status",
    "get_tracking_progress",
    "get_valid_next_statuses",
    "sync_package_status",
    "validate_transition",
]
