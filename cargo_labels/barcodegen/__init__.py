"""
barcodegen

Штрихкоды для этикеток посылок, отправлений и складских ячеек.

- Упрощённая таблица Code 128 (как на уже напечатанных этикетках), стандартный
  Code 128 (python-barcode) и QR (qrcode).
- Трёхуровневая деградация: штрихкод → карточка-заглушка → пустой PNG.
- Сохранение PNG и HTML-страница для печати.

Public API:
    - BarcodeGenerator: генератор этикеток (class)
    - BarcodeGenError: исключение для ошибок кодирования/рендеринга
    - BarcodeConfig, BarcodeArtifact: геометрия и результат
    - generate_*_barcode: готовые пресеты PKG-/SHP-/WH-
    - download_barcode, print_barcode, build_print_document: вывод

Примеры:
    >>> from cargo_labels.barcodegen import generate_package_barcode
    >>> art = generate_package_barcode("12345")
    >>> art.text, art.width, art.height
    ('PKG-12345', 250, 80)

Зависимости:
    Pillow, qrcode, python-barcode
"""

from cargo_labels.barcodegen.artifact import (
    BLANK_PNG,
    BLANK_PNG_DATA_URL,
    DEFAULT_BARCODE_CONFIG,
    BarcodeArtifact,
    BarcodeConfig,
    BarcodeOverrides,
)
from cargo_labels.barcodegen.barcode_generator import (
    BarcodeGenerator,
    generate_package_barcode,
    generate_shipment_barcode,
    generate_tracking_barcode,
    generate_warehouse_label_barcode,
    get_barcode_dimensions,
)
from cargo_labels.barcodegen.encoding import (
    BarcodeGenError,
    EncodedPattern,
    encode_code128,
    encode_simplified,
    sanitize_barcode_text,
    validate_barcode_text,
)
from cargo_labels.barcodegen.label_output import (
    build_print_document,
    download_barcode,
    print_barcode,
)
from cargo_labels.barcodegen.matrix2d_generator import QrLabelGenerator
from cargo_labels.barcodegen.surface import PillowSurface, RasterSurface, SurfaceFactory

__all__ = [
    "BLANK_PNG",
    "BLANK_PNG_DATA_URL",
    "DEFAULT_BARCODE_CONFIG",
    "BarcodeArtifact",
    "BarcodeConfig",
    "BarcodeOverrides",
    "BarcodeGenerator",
    "BarcodeGenError",
    "EncodedPattern",
    "QrLabelGenerator",
    "PillowSurface",
    "RasterSurface",
    "SurfaceFactory",
    "build_print_document",
    "download_barcode",
    "encode_code128",
    "encode_simplified",
    "generate_package_barcode",
    "generate_shipment_barcode",
    "generate_tracking_barcode",
    "generate_warehouse_label_barcode",
    "get_barcode_dimensions",
    "print_barcode",
    "sanitize_barcode_text",
    "validate_barcode_text",
]
