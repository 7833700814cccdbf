# src/lector_nfc_qt5/ui/render.py
"""
Turns a scan result into the four texts shown on screen.
Pure functions only; MainWindow copies a ScreenState into its labels.
"""
from __future__ import annotations

from dataclasses import dataclass, replace

from .. import constants as C
from ..codec.balance import balance_from_block
from ..codec.hexcodec import encode
from ..nfc.mifare import CardReadResult, FailureKind
from ..nfc.pcsc import ReaderStatus


@dataclass(frozen=True)
class ScreenState:
    status: str = C.STATUS_READY
    card_id: str = ""
    sector_data: str = ""
    saldo: str = ""


INITIAL_STATE = ScreenState()

_STATUS_TEXT = {
    ReaderStatus.READY: C.STATUS_READY,
    ReaderStatus.NO_READER: C.STATUS_NO_NFC,
    ReaderStatus.SERVICE_UNAVAILABLE: C.STATUS_NFC_DISABLED,
}


def render_status(status: ReaderStatus) -> str:
    return _STATUS_TEXT[status]


def _failure_text(result: CardReadResult) -> str:
    kind = result.failure
    if kind is FailureKind.AUTH_FAILED:
        return C.MSG_AUTH_FAILED
    if kind is FailureKind.IO_ERROR:
        return C.MSG_READ_ERROR.format(detail=result.detail)
    if kind is FailureKind.CLOSE_ERROR:
        return C.MSG_CLOSE_ERROR.format(detail=result.detail)
    if kind is FailureKind.NOT_MIFARE_CLASSIC:
        return C.MSG_NOT_MIFARE
    return C.MSG_NO_CARD


def render(result: CardReadResult, status: str = C.STATUS_READY) -> ScreenState:
    """
    Success:  'Bloque 37: <HEX>' + balance of the first 2 bytes ('5.00 €' or the error text).
    Failure:  the failure text in the sector field. The saldo stays empty unless the
              block was read before the close failed; then it is still shown.
    """
    card_id = f"{C.CARD_ID_PREFIX}{encode(result.uid)}" if result.uid is not None else ""
    if not result.ok:
        saldo = balance_from_block(result.data).text if result.data is not None else ""
        return ScreenState(status=status, card_id=card_id, sector_data=_failure_text(result),
                           saldo=saldo)

    sector_data = C.SECTOR_DATA_PREFIX.format(block=result.block) + encode(result.data)
    saldo = balance_from_block(result.data).text
    return ScreenState(status=status, card_id=card_id, sector_data=sector_data, saldo=saldo)


def clear_scan(state: ScreenState) -> ScreenState:
    """Drop sector data and saldo before a new read (the card id stays until replaced)."""
    return replace(state, sector_data="", saldo="")


def saldo_label(state: ScreenState) -> str:
    return f"{C.SALDO_PREFIX}{state.saldo}" if state.saldo else ""
