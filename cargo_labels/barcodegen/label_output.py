"""
RU: Сохранение и печать этикеток со штрихкодом.
EN: Saving label PNGs and building printable HTML label pages.

Both side-effecting helpers log failures and return None instead of raising,
so a broken printer path never interrupts label workflows.
"""

from __future__ import annotations

import base64
import binascii
import html
import logging
import tempfile
import webbrowser
from datetime import datetime
from pathlib import Path
from typing import Callable, Final, Mapping, Optional, Union

from cargo_labels.barcodegen.artifact import BarcodeArtifact

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_PRINT_HEADER",
    "DEFAULT_WAREHOUSE_ADDRESS",
    "png_bytes_from",
    "download_barcode",
    "build_print_document",
    "print_barcode",
]

DEFAULT_PRINT_HEADER: Final[str] = "Vanguard Cargo Logistics"
DEFAULT_WAREHOUSE_ADDRESS: Final[str] = (
    "ALX-E2: 4700 Eisenhower Avenue, Alexandria, VA 22304, USA"
)

_PNG_DATA_URL_PREFIX: Final[str] = "data:image/png;base64,"

_PRINT_STYLE: Final[str] = """
    body { font-family: Arial, sans-serif; text-align: center; padding: 20px; margin: 0; }
    .barcode-container { margin: 20px auto; padding: 20px; border: 2px solid #000;
                         display: inline-block; background: white; }
    .header { margin-bottom: 15px; font-size: 18px; font-weight: bold; }
    .barcode-image { margin: 15px 0; }
    .info { margin-top: 15px; font-size: 12px; text-align: left; }
    .footer { margin-top: 15px; font-size: 10px; color: #666; }
    @media print {
      body { margin: 0; padding: 10px; }
      .no-print { display: none; }
    }
"""

LabelImage = Union[BarcodeArtifact, bytes, str]


def png_bytes_from(image: LabelImage) -> bytes:
    """PNG payload of an artifact, raw PNG bytes or a ``data:image/png`` URL.

    Raises:
        ValueError: not a PNG data URL or undecodable base64.
        TypeError: unsupported input type.
    """
    if isinstance(image, BarcodeArtifact):
        return image.png
    if isinstance(image, bytes):
        return image
    if isinstance(image, str):
        if not image.startswith(_PNG_DATA_URL_PREFIX):
            raise ValueError("Expected a data:image/png;base64 URL")
        try:
            return base64.b64decode(image[len(_PNG_DATA_URL_PREFIX) :], validate=True)
        except binascii.Error as e:
            raise ValueError("Invalid base64 payload in data URL") from e
    raise TypeError(f"Unsupported label image type: {type(image)!r}")


def _data_url(image: LabelImage) -> str:
    if isinstance(image, BarcodeArtifact):
        return image.data_url
    if isinstance(image, bytes):
        return _PNG_DATA_URL_PREFIX + base64.b64encode(image).decode("ascii")
    return image


def download_barcode(
    image: LabelImage,
    filename: str,
    directory: Union[str, Path] = ".",
) -> Optional[Path]:
    """
    Save a label PNG as ``<directory>/<filename>[.png]``.

    Returns:
        Path written, or None when saving failed (error is logged).
    """
    try:
        name = filename if filename.endswith(".png") else f"{filename}.png"
        target = Path(directory) / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(png_bytes_from(image))
    except Exception as e:
        logger.error("Error downloading barcode %r: %s", filename, e)
        return None
    logger.info("Barcode saved to %s", target)
    return target


def build_print_document(
    image: LabelImage,
    title: str,
    additional_info: Optional[Mapping[str, str]] = None,
    header: str = DEFAULT_PRINT_HEADER,
    address: str = DEFAULT_WAREHOUSE_ADDRESS,
    generated_at: Optional[datetime] = None,
    auto_print: bool = True,
) -> str:
    """Printable HTML page: header, title, barcode image, info rows, footer.

    All caller-supplied text is HTML-escaped.
    """
    esc = html.escape
    stamp = (generated_at or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    info_rows = "".join(
        f"<div><strong>{esc(str(key))}:</strong> {esc(str(value))}</div>"
        for key, value in (additional_info or {}).items()
    )
    info_block = f'<div class="info">{info_rows}</div>' if info_rows else ""
    script = (
        "<script>window.onload = function () { window.focus(); window.print(); };</script>"
        if auto_print
        else ""
    )
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        '<meta charset="utf-8">\n'
        f"<title>{esc(title)}</title>\n"
        f"<style>{_PRINT_STYLE}</style>\n"
        f"{script}\n"
        "</head>\n"
        "<body>\n"
        '<div class="barcode-container">\n'
        f'<div class="header">{esc(header)}</div>\n'
        f'<div class="header">{esc(title)}</div>\n'
        f'<div class="barcode-image"><img src="{esc(_data_url(image))}" alt="Barcode" /></div>\n'
        f"{info_block}\n"
        '<div class="footer">\n'
        f"Generated: {esc(stamp)}<br>\n"
        f"{esc(address)}\n"
        "</div>\n"
        "</div>\n"
        "</body>\n"
        "</html>\n"
    )


def print_barcode(
    image: LabelImage,
    title: str,
    additional_info: Optional[Mapping[str, str]] = None,
    opener: Callable[[str], bool] = webbrowser.open,
    header: str = DEFAULT_PRINT_HEADER,
    address: str = DEFAULT_WAREHOUSE_ADDRESS,
) -> Optional[Path]:
    """
    Write the print page to a temporary HTML file and open it for printing.

    Args:
        opener: Called with the file URI; a falsy result counts as failure.

    Returns:
        Path of the HTML file, or None when printing failed (error is logged).
    """
    path: Optional[Path] = None
    try:
        document = build_print_document(
            image, title, additional_info, header=header, address=address
        )
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", prefix="label-", suffix=".html", delete=False
        ) as tmp:
            tmp.write(document)
            path = Path(tmp.name)
        if not opener(path.as_uri()):
            raise RuntimeError("Unable to open print window")
    except Exception as e:
        logger.error("Error printing barcode %r: %s", title, e)
        if path is not None:
            path.unlink(missing_ok=True)
        return None
    logger.debug("Print page for %r written to %s", title, path)
    return path
