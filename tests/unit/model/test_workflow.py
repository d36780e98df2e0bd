"""Unit tests for cargo_labels.model.workflow."""

from datetime import datetime, timedelta, timezone

import pytest

from cargo_labels.model.enums import EntityType, PackageStatus, ShipmentStatus, UserRole
from cargo_labels.model.workflow import (
    PACKAGE_PROGRESSION,
    SHIPMENT_PROGRESSION,
    TransitionContext,
    TrackingProgress,
    can_set_status,
    get_expected_duration,
    get_progression,
    get_tracking_progress,
    get_valid_next_statuses,
    is_final_status,
    is_status_overdue,
    is_valid_transition,
    sync_package_status,
    validate_transition,
)


class TestProgression:
    def test_package_progression(self) -> None:
        assert PACKAGE_PROGRESSION == (
            "pending",
            "received",
            "processing",
            "shipped",
            "arrived",
            "delivered",
        )

    def test_shipment_progression(self) -> None:
        assert SHIPMENT_PROGRESSION[3] == "in_transit"
        assert get_progression(EntityType.SHIPMENT) == SHIPMENT_PROGRESSION

    def test_unknown_entity(self) -> None:
        assert get_progression("crate") == ()
        assert get_valid_next_statuses("pending", "crate") == []

    @pytest.mark.parametrize(
        "current,entity,expected",
        [
            ("pending", "package", ["received"]),
            ("shipped", "package", ["arrived"]),
            ("shipped", "shipment", ["in_transit"]),
            ("delivered", "package", []),
            ("lost", "package", []),
        ],
    )
    def test_next_statuses(self, current: str, entity: str, expected: list) -> None:
        assert get_valid_next_statuses(current, entity) == expected

    def test_no_skipping_or_going_back(self) -> None:
        assert is_valid_transition("received", "processing", "package")
        assert not is_valid_transition("received", "shipped", "package")
        assert not is_valid_transition("processing", "received", "package")
        assert not is_valid_transition("pending", "pending", "shipment")

    def test_final_status(self) -> None:
        assert is_final_status("delivered", "package")
        assert is_final_status("delivered", "shipment")
        assert not is_final_status("arrived", "shipment")
        assert not is_final_status("delivered", "crate")


class TestPermissions:
    @pytest.mark.parametrize("status", ["received", "processing", "shipped"])
    def test_warehouse_admin_package(self, status: str) -> None:
        assert can_set_status(UserRole.WAREHOUSE_ADMIN, status, "package")

    @pytest.mark.parametrize("status", ["arrived", "delivered", "pending"])
    def test_warehouse_admin_package_denied(self, status: str) -> None:
        assert not can_set_status("warehouse_admin", status, "package")

    def test_warehouse_admin_shipment(self) -> None:
        assert can_set_status("warehouse_admin", "arrived", "shipment")
        assert not can_set_status("warehouse_admin", "in_transit", "shipment")

    @pytest.mark.parametrize("role", ["admin", "superadmin", UserRole.ADMIN])
    def test_admins_can_set_anything(self, role: str) -> None:
        for status in SHIPMENT_PROGRESSION:
            assert can_set_status(role, status, "shipment")

    def test_client_and_unknown_roles(self) -> None:
        assert not can_set_status("client", "received", "package")
        assert not can_set_status("courier", "received", "package")
        assert not can_set_status(None, "received", "package")

    def test_non_canonical_status_denied(self) -> None:
        assert not can_set_status("admin", "in_transit", "package")


class TestValidateTransition:
    def _ctx(self, **kwargs: object) -> TransitionContext:
        base = dict(
            entity_id="PKG-1",
            entity_type="package",
            current_status="pending",
            new_status="received",
            user_role="warehouse_admin",
        )
        base.update(kwargs)
        return TransitionContext(**base)  # type: ignore[arg-type]

    def test_valid_with_actions(self) -> None:
        result = validate_transition(self._ctx())
        assert result.is_valid
        assert result.error is None
        assert "Scan package barcode" in result.suggested_actions

    def test_invalid_transition(self) -> None:
        result = validate_transition(self._ctx(new_status="shipped"))
        assert not result.is_valid
        assert result.error == "Invalid transition from 'pending' to 'shipped'"
        assert result.suggested_actions == ["Valid next statuses: received"]

    def test_from_final_status(self) -> None:
        result = validate_transition(
            self._ctx(current_status="delivered", new_status="pending", user_role="admin")
        )
        assert result.suggested_actions == ["Valid next statuses: none"]

    def test_missing_role(self) -> None:
        result = validate_transition(self._ctx(user_role=None))
        assert not result.is_valid
        assert result.error == "User role is required for status transitions"

    def test_unauthorized_role(self) -> None:
        result = validate_transition(self._ctx(user_role=UserRole.CLIENT))
        assert not result.is_valid
        assert result.error == "Role 'client' is not authorized to set status 'received'"

    def test_unknown_entity(self) -> None:
        result = validate_transition(self._ctx(entity_type="crate"))
        assert not result.is_valid
        assert "Unknown entity type" in (result.error or "")

    def test_admin_without_suggestions(self) -> None:
        result = validate_transition(
            self._ctx(current_status="shipped", new_status="arrived", user_role="admin")
        )
        assert result.is_valid
        assert result.suggested_actions == []


class TestDurations:
    def test_expected_durations(self) -> None:
        assert get_expected_duration("shipped", "package") == 168
        assert get_expected_duration("in_transit", "shipment") == 240
        assert get_expected_duration("delivered", "shipment") is None
        assert get_expected_duration("pending", "crate") is None

    def test_overdue(self) -> None:
        now = datetime(2024, 6, 10, 12, 0, tzinfo=timezone.utc)
        assert is_status_overdue("received", now - timedelta(hours=25), "package", now=now)
        assert not is_status_overdue("received", now - timedelta(hours=23), "package", now=now)

    def test_naive_datetimes_are_utc(self) -> None:
        now = datetime(2024, 6, 10, 12, 0)
        changed = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
        assert is_status_overdue("arrived", changed, "shipment", now=now)

    def test_final_never_overdue(self) -> None:
        long_ago = datetime(2000, 1, 1, tzinfo=timezone.utc)
        assert not is_status_overdue("delivered", long_ago, "package")


class TestTrackingProgress:
    @pytest.mark.parametrize(
        "status,entity,expected",
        [
            ("pending", "package", TrackingProgress(1, 6, 17)),
            ("shipped", "package", TrackingProgress(4, 6, 67)),
            ("in_transit", "shipment", TrackingProgress(4, 6, 67)),
            ("delivered", "shipment", TrackingProgress(6, 6, 100)),
            ("lost", "package", TrackingProgress(1, 6, 17)),
            ("pending", "crate", TrackingProgress(0, 0, 0)),
        ],
    )
    def test_progress(self, status: str, entity: str, expected: TrackingProgress) -> None:
        assert get_tracking_progress(status, entity) == expected


class TestSyncPackageStatus:
    @pytest.mark.parametrize(
        "shipment,package",
        [
            ("pending", PackageStatus.PENDING),
            ("processing", PackageStatus.PROCESSING),
            ("shipped", PackageStatus.SHIPPED),
            ("in_transit", PackageStatus.SHIPPED),
            (ShipmentStatus.ARRIVED, PackageStatus.ARRIVED),
            ("delivered", PackageStatus.DELIVERED),
        ],
    )
    def test_sync(self, shipment: str, package: PackageStatus) -> None:
        assert sync_package_status(shipment) is package

    def test_unknown_shipment_status_raises(self) -> None:
        with pytest.raises(ValueError):
            sync_package_status("lost")
