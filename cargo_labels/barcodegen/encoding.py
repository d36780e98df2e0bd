"""
RU: Кодирование идентификаторов в битовые шаблоны штрихкода (упрощённый Code 128 и стандартный Code 128).
EN: Bit-pattern encoders for label identifiers (simplified Code 128 table and checksummed Code 128).

The simplified table is the one printed on existing warehouse labels: one
11-module pattern per supported character, START_B prefix, STOP suffix and
no checksum. Its output is not guaranteed to decode on off-the-shelf
Code 128 scanners; use :func:`encode_code128` where scanners read labels.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Final, FrozenSet, Mapping

logger = logging.getLogger(__name__)

__all__ = [
    "BarcodeGenError",
    "EncodedPattern",
    "CODE128_PATTERNS",
    "SUPPORTED_CHARACTERS",
    "MAX_BARCODE_LENGTH",
    "sanitize_barcode_text",
    "encode_simplified",
    "encode_code128",
    "validate_barcode_text",
]

MAX_BARCODE_LENGTH: Final[int] = 50

SUPPORTED_CHARACTERS: Final[FrozenSet[str]] = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-. $/+%"
)

CODE128_PATTERNS: Final[Mapping[str, str]] = {
    "START_A": "11010000100",
    "START_B": "11010010000",
    "START_C": "11010011100",
    "STOP": "1100011101011",
    "0": "11011001100",
    "1": "11001101100",
    "2": "11001100110",
    "3": "10010011000",
    "4": "10010001100",
    "5": "10001001100",
    "6": "10011001000",
    "7": "10011000100",
    "8": "10001100100",
    "9": "11001001000",
    "A": "11001000100",
    "B": "11000100100",
    "C": "10110011100",
    "D": "10011011100",
    "E": "10011001110",
    "F": "10111001000",
    "G": "10011101000",
    "H": "10011100100",
    "I": "11001110010",
    "J": "11001011100",
    "K": "11001001110",
    "L": "11011100100",
    "M": "11001110100",
    "N": "11101101110",
    "O": "11101001100",
    "P": "11100101100",
    "Q": "11100100110",
    "R": "11101100100",
    "S": "11100110100",
    "T": "11100110010",
    "U": "11011011000",
    "V": "11011000110",
    "W": "11000110110",
    "X": "10100011000",
    "Y": "10001011000",
    "Z": "10001000110",
    "-": "10110001000",
    ".": "10001101000",
    " ": "10001100010",
    "$": "10110111000",
    "/": "10110001110",
    "+": "10001001110",
    "%": "11010001110",
}

# Whitespace passes the filter but only a plain space has a pattern.
_UNSUPPORTED_RE: Final[re.Pattern[str]] = re.compile(r"[^A-Z0-9\-.\s$/+%]")
_VALID_TEXT_RE: Final[re.Pattern[str]] = re.compile(r"^[A-Z0-9\-.\s$/+%]*$", re.IGNORECASE)


class BarcodeGenError(Exception):
    """Barcode encoding/rendering error."""


@dataclass(frozen=True)
class EncodedPattern:
    """Bar/space modules for one identifier.

    Attributes:
        pattern: '1' (bar) / '0' (space) modules of equal nominal width.
        source: Identifier as given by the caller.
        encoded_text: Characters that actually made it into the pattern.
        lossy: True when characters of ``source`` were dropped on the way.
    """

    pattern: str
    source: str
    encoded_text: str
    lossy: bool = False

    def __len__(self) -> int:
        return len(self.pattern)


def sanitize_barcode_text(text: str) -> str:
    """Upper-case ``text`` and drop characters outside the supported set."""
    return _UNSUPPORTED_RE.sub("", text.upper())


def encode_simplified(text: str) -> EncodedPattern:
    """Encode with the simplified table (START_B + symbols + STOP)."""
    clean = sanitize_barcode_text(text)
    parts = [CODE128_PATTERNS["START_B"]]
    encoded = []
    for char in clean:
        symbol = CODE128_PATTERNS.get(char)
        if symbol is None:
            continue
        parts.append(symbol)
        encoded.append(char)
    parts.append(CODE128_PATTERNS["STOP"])
    result = EncodedPattern(
        "".join(parts), text, "".join(encoded), len(encoded) != len(text)
    )
    if result.lossy:
        logger.debug("Barcode text %r encoded as %r", text, result.encoded_text)
    return result


def encode_code128(text: str) -> EncodedPattern:
    """Encode as standard Code 128 (with checksum) using python-barcode.

    Raises:
        BarcodeGenError: empty text, characters Code 128 cannot carry, or
            python-barcode not installed (``cargo-labels[code128]``).
    """
    if not isinstance(text, str) or not text:
        raise BarcodeGenError("Barcode data must be non-empty string")
    try:
        import barcode as pybarcode
    except ImportError as e:
        raise BarcodeGenError("Code 128 output requires python-barcode") from e
    try:
        code = pybarcode.get_barcode_class("code128")(text, writer=None)
        pattern = code.build()[0]
    except Exception as e:
        raise BarcodeGenError(f"Code 128 encoding failed for {text!r}") from e
    return EncodedPattern(pattern, text, text)


def validate_barcode_text(text: str) -> bool:
    """True if ``text`` is 1..50 chars drawn from the supported set (any case)."""
    if not isinstance(text, str) or not text:
        return False
    if len(text) > MAX_BARCODE_LENGTH:
        return False
    return _VALID_TEXT_RE.match(text) is not None
