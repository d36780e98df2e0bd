"""Unit tests for cargo_labels.model.status."""

from unittest.mock import patch

import pytest

from cargo_labels.model.enums import EntityType, StatusColor
from cargo_labels.model.status import (
    DEFAULT_FALLBACK_STATUS,
    LEGACY_STATUS_MAPPING,
    PACKAGE_STATUS_CONFIG,
    SHIPMENT_STATUS_CONFIG,
    ResolutionKind,
    StatusConfig,
    StatusError,
    convert_legacy_status,
    get_all_statuses,
    get_status_badge_classes,
    get_status_config,
    get_status_values,
    is_valid_status,
    normalize_status,
    require_status,
)

CANONICAL = [("package", cfg.value) for cfg in PACKAGE_STATUS_CONFIG] + [
    ("shipment", cfg.value) for cfg in SHIPMENT_STATUS_CONFIG
]
ENTITIES = ["package", "shipment"]


class TestCanonicalStatuses:
    @pytest.mark.parametrize("entity,value", CANONICAL)
    def test_every_canonical_value_is_valid_and_configured(self, entity: str, value: str) -> None:
        assert is_valid_status(value, entity)
        cfg = get_status_config(value, entity)
        assert isinstance(cfg, StatusConfig)
        assert cfg.value == value
        assert cfg.label and cfg.description

    def test_package_labels_and_colors(self) -> None:
        pending = get_status_config("pending", "package")
        assert pending is not None
        assert pending.label == "Pending Arrival"
        assert pending.color is StatusColor.GRAY
        shipped = get_status_config("shipped", EntityType.PACKAGE)
        assert shipped is not None and shipped.color is StatusColor.INDIGO

    def test_shipment_labels(self) -> None:
        cfg = get_status_config("in_transit", "shipment")
        assert cfg is not None
        assert cfg.label == "In Transit"
        assert cfg.color is StatusColor.BLUE

    def test_values_in_order(self) -> None:
        assert get_status_values("package")[0] == "pending"
        assert get_status_values("shipment")[-1] == "delivered"
        assert [c.value for c in get_all_statuses("shipment")] == get_status_values("shipment")

    def test_unknown_entity_type(self) -> None:
        assert get_all_statuses("crate") == []
        assert not is_valid_status("pending", "crate")
        assert get_status_config("pending", "crate") is None


class TestIsValidStatus:
    @pytest.mark.parametrize(
        "candidate,entity",
        [
            ("PENDING", "package"),
            (" pending", "package"),
            ("in_transit", "package"),
            ("received", "shipment"),
            ("awaiting_quote", "shipment"),
            ("", "package"),
        ],
    )
    def test_exact_match_only(self, candidate: str, entity: str) -> None:
        assert not is_valid_status(candidate, entity)

    def test_non_string(self) -> None:
        assert not is_valid_status(None, "package")  # type: ignore[arg-type]

    def test_get_status_config_absent(self) -> None:
        assert get_status_config("lost", "package") is None


class TestLegacyConversion:
    @pytest.mark.parametrize("entity", ENTITIES)
    @pytest.mark.parametrize("legacy", sorted(LEGACY_STATUS_MAPPING))
    def test_every_legacy_key_maps_to_valid_status(self, legacy: str, entity: str) -> None:
        assert is_valid_status(convert_legacy_status(legacy, entity), entity)

    def test_awaiting_quote(self) -> None:
        assert convert_legacy_status("awaiting_quote", "shipment") == "pending"

    def test_in_transit_targets_fit_packages(self) -> None:
        assert convert_legacy_status("customs_clearance", "shipment") == "in_transit"
        assert convert_legacy_status("customs_clearance", "package") == "shipped"
        assert convert_legacy_status("out_for_delivery", "package") == "shipped"

    def test_canonical_passes_through(self) -> None:
        assert convert_legacy_status("arrived", "package") == "arrived"

    @pytest.mark.parametrize("value", ["", "shiped", "PENDING", "garbage"])
    def test_unknown_falls_back_to_pending(self, value: str) -> None:
        assert convert_legacy_status(value, "package") == DEFAULT_FALLBACK_STATUS == "pending"

    def test_unknown_is_logged(self) -> None:
        with patch("cargo_labels.model.status.logger") as mock_logger:
            convert_legacy_status("shiped", "shipment")
        mock_logger.warning.assert_called_once()


class TestNormalizeStatus:
    def test_canonical(self) -> None:
        res = normalize_status("processing", "shipment")
        assert res.kind is ResolutionKind.CANONICAL
        assert res.status == "processing"
        assert res.entity_type is EntityType.SHIPMENT
        assert not res.is_unknown and not res.was_migrated

    def test_legacy(self) -> None:
        res = normalize_status("inspected", "package")
        assert res.kind is ResolutionKind.LEGACY
        assert res.status == "processing"
        assert res.raw == "inspected"
        assert res.was_migrated

    def test_unknown(self) -> None:
        res = normalize_status("shiped", "package")
        assert res.is_unknown
        assert res.status == "pending"

    def test_unknown_entity(self) -> None:
        res = normalize_status("pending", "crate")
        assert res.is_unknown
        assert res.entity_type is None


class TestRequireStatus:
    def test_returns_canonical(self) -> None:
        assert require_status("cancelled", "shipment") == "pending"
        assert require_status("delivered", "package") == "delivered"

    def test_unknown_raises(self) -> None:
        with pytest.raises(StatusError, match="Unknown package status"):
            require_status("shiped", "package")

    def test_unknown_entity_raises(self) -> None:
        with pytest.raises(StatusError, match="entity type"):
            require_status("pending", "crate")


class TestBadgeClasses:
    def test_purple(self) -> None:
        classes = get_status_badge_classes("purple")
        assert "bg-purple-100" in classes
        assert "text-purple-800" in classes

    def test_unknown_is_gray(self) -> None:
        assert get_status_badge_classes("unknown-color") == get_status_badge_classes("gray")

    def test_enum_input(self) -> None:
        assert get_status_badge_classes(StatusColor.GREEN) == get_status_badge_classes("green")

    def test_full_token(self) -> None:
        assert get_status_badge_classes("blue") == (
            "px-2 py-1 rounded-full text-xs font-medium bg-blue-100 text-blue-800"
        )

    @pytest.mark.parametrize("color", list(StatusColor))
    def test_every_color_distinct(self, color: StatusColor) -> None:
        classes = get_status_badge_classes(color)
        assert f"bg-{color.value}-100" in classes
