# src/lector_nfc_qt5/codec/hexcodec.py
# Uppercase hex <-> bytes conversion used for display and for cutting sub-fields out of a block.
from __future__ import annotations

from enum import Enum
from typing import Iterable

HEX_DIGITS = frozenset("0123456789ABCDEFabcdef")


class DecodeErrorKind(Enum):
    INVALID_LENGTH = "invalid_length"
    INVALID_CHARACTER = "invalid_character"
    OVERFLOW = "overflow"


class DecodeError(ValueError):
    """Raised when a hex string cannot be turned into bytes/a value. `kind` tells why."""
    def __init__(self, kind: DecodeErrorKind, detail: str = ""):
        super().__init__(detail or kind.value)
        self.kind = kind


def encode(data: Iterable[int], sep: str = "") -> str:
    """Return two uppercase hex digits per byte, e.g. b'\\x05\\xff' -> '05FF'.
    pyscard hands out lists of ints, so any iterable of 0..255 is accepted;
    anything outside that range raises ValueError."""
    out = []
    for b in data:
        if not 0 <= b <= 0xFF:
            raise ValueError(f"byte value out of range: {b}")
        out.append(f"{b:02X}")
    return sep.join(out)


def decode(text: str) -> bytes:
    """
    Parse an even-length hex string (case-insensitive, no separators) into bytes.
    Odd length -> DecodeError(INVALID_LENGTH); non-hex char -> DecodeError(INVALID_CHARACTER).
    Never truncates or pads.
    """
    s = text or ""
    if len(s) % 2:
        raise DecodeError(DecodeErrorKind.INVALID_LENGTH, f"odd hex length: {len(s)}")
    for i, ch in enumerate(s):
        if ch not in HEX_DIGITS:
            raise DecodeError(DecodeErrorKind.INVALID_CHARACTER, f"non-hex character {ch!r} at {i}")
    return bytes(int(s[i:i + 2], 16) for i in range(0, len(s), 2))
