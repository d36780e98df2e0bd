"""
Пакет cargo_labels
==================

Label barcodes and package/shipment status rules for a freight-forwarding
warehouse (US warehouse → Ghana).

Этот пакет предоставляет:
    - Таксономию статусов посылок и отправлений с миграцией устаревших значений
    - Правила переходов статусов по ролям, ожидаемые сроки и прогресс отслеживания
    - Растеризацию штрихкодов этикеток (PNG) с гарантированным результатом
    - Сохранение этикеток и HTML-страницы для печати

Пример базового использования:
    >>> from cargo_labels import LabelContext, convert_legacy_status
    >>>
    >>> ctx = LabelContext()
    >>> art = ctx.package_barcode("12345")
    >>> art.text
    'PKG-12345'
    >>> convert_legacy_status("awaiting_quote", "shipment")
    'pending'

Управление конфигурацией:
    >>> import os
    >>> os.environ['CARGO_LABELS_LOG_LEVEL'] = 'DEBUG'
    >>>
    >>> from cargo_labels import load_config
    >>> config = load_config()
    >>> config["business_name"]
    'VANGUARD CARGO'
"""

import json
import logging
import logging.handlers
import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

# =============================================================================
# МЕТАДАННЫЕ ВЕРСИИ
# =============================================================================

__version__ = "0.1.0"
__author__ = "Vanguard Cargo Development Team"
__description__ = "Package/shipment status taxonomy and label barcode rasterizer"
__license__ = "MIT"
__python_requires__ = ">=3.9"

VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0

PACKAGE_LOGGER_NAME = "cargo_labels"

# =============================================================================
# КОНФИГУРАЦИЯ ЛОГИРОВАНИЯ
# =============================================================================


def _setup_logging() -> None:
    """
    Initialize package-wide logging for the ``cargo_labels`` logger.

    - stderr handler for WARNING and above;
    - rotating file handler at the configured level, only when
      ``CARGO_LABELS_LOG_DIR`` is set.

    The level comes from ``CARGO_LABELS_LOG_LEVEL`` (DEBUG, INFO, WARNING,
    ERROR, CRITICAL; INFO otherwise). Idempotent.
    """
    log_level_str = os.environ.get("CARGO_LABELS_LOG_LEVEL", "INFO").upper()
    log_level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    log_level = log_level_map.get(log_level_str, logging.INFO)

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if package_logger.handlers:
        return

    package_logger.setLevel(log_level)

    formatter = logging.Formatter(
        fmt="[%(asctime)s] %(levelname)-8s [%(name)s.%(funcName)s:%(lineno)d] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    log_dir_str = os.environ.get("CARGO_LABELS_LOG_DIR")
    if log_dir_str:
        try:
            log_dir = Path(log_dir_str)
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                filename=log_dir / "cargo_labels.log",
                maxBytes=10 * 1024 * 1024,  # 10 MB
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            package_logger.addHandler(file_handler)
        except OSError as e:
            package_logger.warning(
                f"Could not initialize file logging in {log_dir_str}: {e}. "
                f"Logging to console only."
            )

    package_logger.propagate = False


def get_logger(module_name: str) -> logging.Logger:
    """
    Logger namespaced under ``cargo_labels``.

    Args:
        module_name: Usually ``__name__``; ``__main__`` maps to
            ``cargo_labels.main``.

    Example:
        >>> get_logger("scanner").name
        'cargo_labels.scanner'
    """
    if module_name == PACKAGE_LOGGER_NAME or module_name.startswith(PACKAGE_LOGGER_NAME + "."):
        return logging.getLogger(module_name)
    if module_name == "__main__":
        return logging.getLogger(f"{PACKAGE_LOGGER_NAME}.main")
    clean_name = module_name.lstrip(".")
    return logging.getLogger(f"{PACKAGE_LOGGER_NAME}.{clean_name}")


# =============================================================================
# УПРАВЛЕНИЕ КОНФИГУРАЦИЕЙ
# =============================================================================

DEFAULT_CONFIG_FILENAME = "cargo_labels.json"

_DEFAULT_CONFIG: Dict[str, Any] = {
    "business_name": "VANGUARD CARGO",
    "print_header": "Vanguard Cargo Logistics",
    "warehouse_address": "ALX-E2: 4700 Eisenhower Avenue, Alexandria, VA 22304, USA",
    "symbology": "simplified",
    "barcode": {},
    "output_dir": "labels",
    "log_level": "INFO",
}

_CONFIG_TYPES: Dict[str, Tuple[type, ...]] = {
    "business_name": (str,),
    "print_header": (str,),
    "warehouse_address": (str,),
    "symbology": (str,),
    "barcode": (Mapping,),
    "output_dir": (str, os.PathLike),
    "log_level": (str,),
}


def _sanitize_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Replace values of the wrong type with their defaults, in place.

    Each replacement is logged as a warning. ``barcode`` is copied into a plain dict.
    """
    logger = get_logger(__name__)
    for key, expected in _CONFIG_TYPES.items():
        value = config.get(key)
        if not isinstance(value, expected):
            logger.warning(
                f"Config key {key!r} must be {' or '.join(t.__name__ for t in expected)}, "
                f"got {type(value).__name__}. Using default."
            )
            default = _DEFAULT_CONFIG[key]
            value = dict(default) if isinstance(default, dict) else default
        config[key] = dict(value) if key == "barcode" else value
    return config


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from a JSON file merged over the defaults.

    Keys:
        - business_name: str - heading of the placeholder card
        - print_header: str - first header line of printed labels
        - warehouse_address: str - footer line of printed labels
        - symbology: str - "simplified", "code128" or "qr"
        - barcode: dict - BarcodeConfig overrides (width, height, ...)
        - output_dir: str - default directory for saved label PNGs
        - log_level: str - informational, logging reads the env var

    Args:
        config_path: JSON file. Defaults to ``$CARGO_LABELS_CONFIG`` or
            ``cargo_labels.json`` in the current directory.

    Returns:
        Every default key, with file values taking precedence. A missing,
        unreadable or malformed file logs a warning and yields the defaults.
        Values of the wrong type fall back to their defaults the same way.
    """
    logger = get_logger(__name__)

    if config_path is None:
        config_path = Path(os.environ.get("CARGO_LABELS_CONFIG", DEFAULT_CONFIG_FILENAME))
    config_path = Path(config_path)

    config = {k: (dict(v) if isinstance(v, dict) else v) for k, v in _DEFAULT_CONFIG.items()}

    if not config_path.exists():
        logger.info(f"Config file {config_path} not found. Using defaults.")
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            user_config = json.load(f)
        if not isinstance(user_config, dict):
            raise ValueError(
                f"Config file must contain a JSON object, got {type(user_config).__name__}"
            )
        config.update(user_config)
        logger.info(f"Configuration loaded from {config_path}")
        logger.debug(f"Configuration: {config}")
    except json.JSONDecodeError as e:
        logger.warning(
            f"Could not parse {config_path}: invalid JSON at line {e.lineno}, "
            f"column {e.colno}. Using defaults."
        )
    except OSError as e:
        logger.warning(f"Could not read {config_path}: {e}. Using defaults.")
    except ValueError as e:
        logger.warning(f"Invalid configuration format: {e}. Using defaults.")

    return _sanitize_config(config)


def check_dependencies() -> Dict[str, bool]:
    """
    Report which third-party libraries can be imported.

    Never raises; returns ``{"pillow": bool, "python-barcode": bool, "qrcode": bool}``.
    """
    dependencies: Dict[str, bool] = {}

    try:
        import PIL  # noqa: F401

        dependencies["pillow"] = True
    except ImportError:
        dependencies["pillow"] = False

    try:
        import barcode  # noqa: F401

        dependencies["python-barcode"] = True
    except ImportError:
        dependencies["python-barcode"] = False

    try:
        import qrcode  # noqa: F401

        dependencies["qrcode"] = True
    except ImportError:
        dependencies["qrcode"] = False

    return dependencies


_setup_logging()

# =============================================================================
# ПУБЛИЧНЫЙ API
# =============================================================================

# Imported after the utilities above so logging is configured first and
# cargo_labels.context can import load_config.
from .model import (  # noqa: E402
    EntityType,
    PackageStatus,
    RenderTier,
    ShipmentStatus,
    StatusColor,
    StatusError,
    Symbology,
    UserRole,
    convert_legacy_status,
    get_status_badge_classes,
    get_status_config,
    is_valid_status,
    normalize_status,
    require_status,
)
from .barcodegen import (  # noqa: E402
    BarcodeArtifact,
    BarcodeConfig,
    BarcodeGenerator,
    BarcodeGenError,
    generate_package_barcode,
    generate_shipment_barcode,
    generate_tracking_barcode,
    generate_warehouse_label_barcode,
    validate_barcode_text,
)
from .context import LabelContext  # noqa: E402

__all__ = [
    "__version__",
    "get_logger",
    "load_config",
    "check_dependencies",
    "LabelContext",
    "EntityType",
    "PackageStatus",
    "RenderTier",
    "ShipmentStatus",
    "StatusColor",
    "StatusError",
    "Symbology",
    "UserRole",
    "convert_legacy_status",
    "get_status_badge_classes",
    "get_status_config",
    "is_valid_status",
    "normalize_status",
    "require_status",
    "BarcodeArtifact",
    "BarcodeConfig",
    "BarcodeGenerator",
    "BarcodeGenError",
    "generate_package_barcode",
    "generate_shipment_barcode",
    "generate_tracking_barcode",
    "generate_warehouse_label_barcode",
    "validate_barcode_text",
]
