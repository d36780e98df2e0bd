"""
Status workflow rules for packages and shipments.

Forward-only progression over the canonical statuses, role permissions for
setting a status, expected dwell times, tracking progress and the
shipment-to-package status sync applied when a shipment moves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Final, FrozenSet, List, Mapping, Optional, Tuple, Union

from .enums import (
    FINAL_STATUS_VALUES,
    EntityType,
    PackageStatus,
    ShipmentStatus,
    UserRole,
    coerce_entity_type,
)
from .status import is_valid_status

logger = logging.getLogger(__name__)

__all__ = [
    "PACKAGE_PROGRESSION",
    "SHIPMENT_PROGRESSION",
    "TransitionContext",
    "WorkflowValidationResult",
    "TrackingProgress",
    "get_progression",
    "get_valid_next_statuses",
    "is_valid_transition",
    "is_final_status",
    "can_set_status",
    "validate_transition",
    "get_expected_duration",
    "is_status_overdue",
    "get_tracking_progress",
    "sync_package_status",
]

EntityLike = Union[str, EntityType]
RoleLike = Union[str, UserRole, None]

PACKAGE_PROGRESSION: Final[Tuple[str, ...]] = tuple(s.value for s in PackageStatus)
SHIPMENT_PROGRESSION: Final[Tuple[str, ...]] = tuple(s.value for s in ShipmentStatus)

_PROGRESSIONS: Final[Dict[EntityType, Tuple[str, ...]]] = {
    EntityType.PACKAGE: PACKAGE_PROGRESSION,
    EntityType.SHIPMENT: SHIPMENT_PROGRESSION,
}

_WAREHOUSE_ADMIN_STATUSES: Final[Dict[EntityType, FrozenSet[str]]] = {
    EntityType.PACKAGE: frozenset(
        {
            PackageStatus.RECEIVED.value,
            PackageStatus.PROCESSING.value,
            PackageStatus.SHIPPED.value,
        }
    ),
    EntityType.SHIPMENT: frozenset(
        {
            ShipmentStatus.PROCESSING.value,
            ShipmentStatus.SHIPPED.value,
            ShipmentStatus.ARRIVED.value,
        }
    ),
}

# Hours a status is expected to last; None for final statuses.
_EXPECTED_DURATIONS: Final[Dict[EntityType, Mapping[str, Optional[int]]]] = {
    EntityType.PACKAGE: {
        PackageStatus.PENDING.value: 72,
        PackageStatus.RECEIVED.value: 24,
        PackageStatus.PROCESSING.value: 48,
        PackageStatus.SHIPPED.value: 168,
        PackageStatus.ARRIVED.value: 72,
        PackageStatus.DELIVERED.value: None,
    },
    EntityType.SHIPMENT: {
        ShipmentStatus.PENDING.value: 48,
        ShipmentStatus.PROCESSING.value: 48,
        ShipmentStatus.SHIPPED.value: 168,
        ShipmentStatus.IN_TRANSIT.value: 240,
        ShipmentStatus.ARRIVED.value: 24,
        ShipmentStatus.DELIVERED.value: None,
    },
}

_SUGGESTED_ACTIONS: Final[Dict[EntityType, Mapping[str, Tuple[str, ...]]]] = {
    EntityType.PACKAGE: {
        PackageStatus.RECEIVED.value: (
            "Scan package barcode",
            "Verify package condition",
            "Update inventory system",
        ),
        PackageStatus.PROCESSING.value: (
            "Document package contents",
            "Prepare for consolidation",
        ),
        PackageStatus.SHIPPED.value: (
            "Print shipment label",
            "Notify customer",
        ),
    },
    EntityType.SHIPMENT: {
        ShipmentStatus.PROCESSING.value: (
            "Consolidate packages",
            "Calculate final costs",
            "Prepare shipping labels",
        ),
        ShipmentStatus.SHIPPED.value: (
            "Dispatch to carrier",
            "Send customer notification",
        ),
        ShipmentStatus.ARRIVED.value: (
            "Confirm arrival location",
            "Update tracking system",
        ),
    },
}


@dataclass
class TransitionContext:
    entity_id: str
    entity_type: EntityLike
    current_status: str
    new_status: str
    user_role: RoleLike = None
    user_id: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class WorkflowValidationResult:
    is_valid: bool
    error: Optional[str] = None
    suggested_actions: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class TrackingProgress:
    current_step: int
    total_steps: int
    percentage: int


def get_progression(entity_type: EntityLike) -> Tuple[str, ...]:
    entity = coerce_entity_type(entity_type)
    return _PROGRESSIONS[entity] if entity is not None else ()


def get_valid_next_statuses(current_status: str, entity_type: EntityLike) -> List[str]:
    """Statuses reachable in one step; empty for final or unknown statuses."""
    steps = get_progression(entity_type)
    if current_status not in steps:
        return []
    idx = steps.index(current_status)
    return list(steps[idx + 1 : idx + 2])


def is_valid_transition(current_status: str, new_status: str, entity_type: EntityLike) -> bool:
    return new_status in get_valid_next_statuses(current_status, entity_type)


def is_final_status(status: str, entity_type: EntityLike) -> bool:
    return is_valid_status(status, entity_type) and status in FINAL_STATUS_VALUES


def can_set_status(role: RoleLike, status: str, entity_type: EntityLike) -> bool:
    entity = coerce_entity_type(entity_type)
    if entity is None or role is None or not is_valid_status(status, entity):
        return False
    try:
        user_role = UserRole(role)
    except ValueError:
        return False
    if user_role in (UserRole.ADMIN, UserRole.SUPERADMIN):
        return True
    if user_role is UserRole.WAREHOUSE_ADMIN:
        return status in _WAREHOUSE_ADMIN_STATUSES[entity]
    return False


def validate_transition(context: TransitionContext) -> WorkflowValidationResult:
    """Check a requested status change against progression and role rules."""
    entity = coerce_entity_type(context.entity_type)
    if entity is None:
        return WorkflowValidationResult(
            False, f"Unknown entity type: {context.entity_type!r}"
        )

    if not is_valid_transition(context.current_status, context.new_status, entity):
        allowed = get_valid_next_statuses(context.current_status, entity)
        hint = ", ".join(allowed) if allowed else "none"
        logger.info(
            "Rejected %s %s transition %r -> %r",
            entity.value,
            context.entity_id,
            context.current_status,
            context.new_status,
        )
        return WorkflowValidationResult(
            False,
            f"Invalid transition from '{context.current_status}' to '{context.new_status}'",
            [f"Valid next statuses: {hint}"],
        )

    if context.user_role is None:
        return WorkflowValidationResult(
            False, "User role is required for status transitions"
        )
    if not can_set_status(context.user_role, context.new_status, entity):
        role = getattr(context.user_role, "value", context.user_role)
        return WorkflowValidationResult(
            False,
            f"Role '{role}' is not authorized to set status '{context.new_status}'",
            [f"Contact an administrator for status changes to '{context.new_status}'"],
        )

    actions = _SUGGESTED_ACTIONS[entity].get(context.new_status, ())
    return WorkflowValidationResult(True, None, list(actions))


def get_expected_duration(status: str, entity_type: EntityLike) -> Optional[int]:
    entity = coerce_entity_type(entity_type)
    if entity is None:
        return None
    return _EXPECTED_DURATIONS[entity].get(status)


def is_status_overdue(
    status: str,
    changed_at: datetime,
    entity_type: EntityLike,
    now: Optional[datetime] = None,
) -> bool:
    """True when a status has lasted longer than its expected duration.

    Naive datetimes are treated as UTC. Final statuses are never overdue.
    """
    hours = get_expected_duration(status, entity_type)
    if not hours:
        return False
    if changed_at.tzinfo is None:
        changed_at = changed_at.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    elapsed = (now - changed_at).total_seconds() / 3600
    return elapsed > hours


def get_tracking_progress(status: str, entity_type: EntityLike) -> TrackingProgress:
    steps = get_progression(entity_type)
    total = len(steps)
    if total == 0:
        return TrackingProgress(0, 0, 0)
    current = max(1, steps.index(status) + 1 if status in steps else 0)
    return TrackingProgress(current, total, round(current / total * 100))


def sync_package_status(shipment_status: Union[str, ShipmentStatus]) -> PackageStatus:
    """Package status implied by the status of its shipment.

    Packages have no ``in_transit`` state, so they stay ``shipped`` while
    the shipment travels.
    """
    status = ShipmentStatus(shipment_status)
    if status is ShipmentStatus.IN_TRANSIT:
        return PackageStatus.SHIPPED
    return PackageStatus(status.value)
