# src/lector_nfc_qt5/codec/balance.py
"""
Stored-value decoding for the transport card block.

The first 2 bytes of the block hold a little-endian uint16. The card stores
half-units, so the displayed amount is value / 2 / 100 (keep the /2 as-is).

    block[0:2] = E8 03  ->  0x03E8 = 1000  ->  1000 / 2 / 100 = 5.00 €
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from .hexcodec import HEX_DIGITS, DecodeErrorKind, encode

VALUE_HEX_LEN = 4          # 2 bytes
HALF_UNIT_DIVISOR = 2
CENTS_DIVISOR = 100
MAX_RAW_VALUE = 0xFFFF
CURRENCY_SUFFIX = " €"
TWO_PLACES = Decimal("0.01")

MESSAGES = {
    DecodeErrorKind.INVALID_LENGTH: "Error: Valor hexadecimal inválido.",
    DecodeErrorKind.INVALID_CHARACTER: "Error: Carácter hexadecimal inválido.",
    DecodeErrorKind.OVERFLOW: "Error: Valor fuera de rango.",
}


@dataclass(frozen=True)
class BalanceResult:
    amount: Optional[Decimal] = None
    error: Optional[DecodeErrorKind] = None
    raw_value: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def text(self) -> str:
        """Display string: '5.00 €' on success, the error message otherwise."""
        if self.error is not None:
            return MESSAGES[self.error]
        return format_amount(self.amount)


def format_amount(amount: Decimal) -> str:
    """Two decimals, '.' separator, half-up rounding (327.675 -> '327.68 €')."""
    return f"{amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)}{CURRENCY_SUFFIX}"


def decode_balance(value_hex: str) -> BalanceResult:
    """Decode the 4 hex chars of the stored value. Never raises."""
    s = value_hex or ""
    if len(s) != VALUE_HEX_LEN:
        return BalanceResult(error=DecodeErrorKind.INVALID_LENGTH)
    if any(ch not in HEX_DIGITS for ch in s):
        return BalanceResult(error=DecodeErrorKind.INVALID_CHARACTER)

    swapped = s[2:4] + s[0:2]  # little-endian -> big-endian
    raw = int(swapped, 16)
    if raw > MAX_RAW_VALUE:
        return BalanceResult(error=DecodeErrorKind.OVERFLOW, raw_value=raw)

    saldo = Decimal(raw) / HALF_UNIT_DIVISOR / CENTS_DIVISOR
    return BalanceResult(amount=saldo, raw_value=raw)


def format_balance(value_hex: str) -> str:
    return decode_balance(value_hex).text


def balance_from_block(block: Iterable[int]) -> BalanceResult:
    """Decode the balance from a raw block (only the leading 2 bytes are used)."""
    return decode_balance(encode(block)[:VALUE_HEX_LEN])
