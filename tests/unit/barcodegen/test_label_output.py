from datetime import datetime
from pathlib import Path
from unittest.mock import Mock
from urllib.parse import urlparse

import pytest

from cargo_labels.barcodegen.artifact import BLANK_PNG, BLANK_PNG_DATA_URL, BarcodeArtifact
from cargo_labels.barcodegen.barcode_generator import generate_package_barcode
from cargo_labels.barcodegen.label_output import (
    DEFAULT_PRINT_HEADER,
    DEFAULT_WAREHOUSE_ADDRESS,
    build_print_document,
    download_barcode,
    png_bytes_from,
    print_barcode,
)


@pytest.fixture(scope="module")
def artifact() -> BarcodeArtifact:
    return generate_package_barcode("12345")


class TestPngBytes:
    def test_from_artifact(self, artifact: BarcodeArtifact) -> None:
        assert png_bytes_from(artifact) == artifact.png

    def test_from_data_url(self) -> None:
        assert png_bytes_from(BLANK_PNG_DATA_URL) == BLANK_PNG

    def test_from_bytes(self) -> None:
        assert png_bytes_from(b"raw") == b"raw"

    @pytest.mark.parametrize(
        "value", ["not a url", "data:image/jpeg;base64,AAAA", "data:image/png;base64,@@"]
    )
    def test_bad_strings(self, value: str) -> None:
        with pytest.raises(ValueError):
            png_bytes_from(value)

    def test_bad_type(self) -> None:
        with pytest.raises(TypeError):
            png_bytes_from(42)  # type: ignore[arg-type]


class TestDownload:
    def test_appends_png_extension(self, tmp_path: Path, artifact: BarcodeArtifact) -> None:
        path = download_barcode(artifact, "PKG-12345", tmp_path)
        assert path == tmp_path / "PKG-12345.png"
        assert path.read_bytes() == artifact.png

    def test_keeps_existing_extension(self, tmp_path: Path) -> None:
        path = download_barcode(BLANK_PNG_DATA_URL, "label.png", tmp_path)
        assert path == tmp_path / "label.png"
        assert path.read_bytes() == BLANK_PNG

    def test_creates_directory(self, tmp_path: Path, artifact: BarcodeArtifact) -> None:
        path = download_barcode(artifact, "x", tmp_path / "a" / "b")
        assert path is not None and path.exists()

    def test_failure_returns_none(self, tmp_path: Path) -> None:
        assert download_barcode("garbage", "x", tmp_path) is None
        assert not (tmp_path / "x.png").exists()


class TestPrintDocument:
    def test_layout(self, artifact: BarcodeArtifact) -> None:
        doc = build_print_document(
            artifact,
            "Package Label",
            {"Package ID": "PKG-12345", "Weight": "2.5 kg"},
            generated_at=datetime(2024, 1, 2, 3, 4, 5),
        )
        assert "<title>Package Label</title>" in doc
        assert f'<div class="header">{DEFAULT_PRINT_HEADER}</div>' in doc
        assert artifact.data_url in doc
        assert "<div><strong>Package ID:</strong> PKG-12345</div>" in doc
        assert "<div><strong>Weight:</strong> 2.5 kg</div>" in doc
        assert "Generated: 2024-01-02 03:04:05" in doc
        assert DEFAULT_WAREHOUSE_ADDRESS in doc
        assert "window.print()" in doc

    def test_no_info_block_without_rows(self) -> None:
        doc = build_print_document(BLANK_PNG_DATA_URL, "T")
        assert 'class="info"' not in doc

    def test_escapes_caller_text(self) -> None:
        doc = build_print_document(
            BLANK_PNG_DATA_URL, "<b>x</b>", {"<script>": "a & b"}, auto_print=False
        )
        assert "<b>x</b>" not in doc
        assert "&lt;b&gt;x&lt;/b&gt;" in doc
        assert "&lt;script&gt;" in doc
        assert "a &amp; b" in doc
        assert "<script>" not in doc

    def test_custom_header_and_address(self) -> None:
        doc = build_print_document(BLANK_PNG_DATA_URL, "T", header="ACME", address="Dock 9")
        assert '<div class="header">ACME</div>' in doc
        assert "Dock 9" in doc


class TestPrintBarcode:
    def test_writes_and_opens(self, artifact: BarcodeArtifact) -> None:
        opener = Mock(return_value=True)
        path = print_barcode(artifact, "Shipment Label", {"Shipment": "SHP-1"}, opener=opener)
        try:
            assert path is not None
            opener.assert_called_once_with(path.as_uri())
            content = path.read_text(encoding="utf-8")
            assert "Shipment Label" in content
            assert "SHP-1" in content
        finally:
            if path is not None:
                path.unlink()

    def test_opener_refusal_returns_none(self) -> None:
        opener = Mock(return_value=False)
        assert print_barcode(BLANK_PNG_DATA_URL, "T", opener=opener) is None
        written = Path(urlparse(opener.call_args.args[0]).path)
        assert not written.exists()

    def test_opener_error_returns_none(self) -> None:
        opener = Mock(side_effect=RuntimeError("no browser"))
        assert print_barcode(BLANK_PNG_DATA_URL, "T", opener=opener) is None
        written = Path(urlparse(opener.call_args.args[0]).path)
        assert not written.exists()

    def test_bad_image_returns_none(self) -> None:
        opener = Mock(return_value=True)
        assert print_barcode(123, "T", opener=opener) is None  # type: ignore[arg-type]
        opener.assert_not_called()
