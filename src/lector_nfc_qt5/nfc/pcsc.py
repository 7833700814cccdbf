# src/lector_nfc_qt5/nfc/pcsc.py
# Minimal PC/SC helpers for detecting readers, connecting, and reading ATR/UID.
from __future__ import annotations

import logging
import time
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from smartcard.CardConnection import CardConnection
from smartcard.Exceptions import CardConnectionException, NoCardException
from smartcard.System import readers

logger = logging.getLogger(__name__)

SW_OK = (0x90, 0x00)
APDU_GET_UID = [0xFF, 0xCA, 0x00, 0x00, 0x00]


class ReaderStatus(Enum):
    READY = "ready"
    NO_READER = "no_reader"
    SERVICE_UNAVAILABLE = "service_unavailable"   # pcscd / SCardSvr not running


def _all_readers() -> List:
    """Raw pyscard reader list; raises if the PC/SC service is unavailable."""
    return list(readers())


def _matching(rlist: Sequence, name_filter: str) -> List:
    if not name_filter:
        return list(rlist)
    return [r for r in rlist if name_filter in str(r)]


def list_readers(name_filter: str = "") -> List:
    """Return available PC/SC readers whose name contains name_filter."""
    try:
        return _matching(_all_readers(), name_filter)
    except Exception as e:
        logger.debug("Listing readers failed: %s", e)
        return []


def reader_status(name_filter: str = "") -> ReaderStatus:
    try:
        rlist = _all_readers()
    except Exception as e:
        logger.debug("PC/SC service unavailable: %s", e)
        return ReaderStatus.SERVICE_UNAVAILABLE
    return ReaderStatus.READY if _matching(rlist, name_filter) else ReaderStatus.NO_READER


def connect_reader(name: str) -> Optional[CardConnection]:
    """Create connection object to the reader named exactly `name` (not yet connected)."""
    for r in list_readers():
        if str(r) == name:
            logger.debug("Using reader %s", r)
            return r.createConnection()
    logger.debug("Reader %s not found", name)
    return None


def connect_first_reader(name_filter: str = "") -> Optional[CardConnection]:
    """Create connection object to the first matching reader (not yet connected)."""
    rlist = list_readers(name_filter)
    if not rlist:
        return None
    logger.debug("Using reader %s", rlist[0])
    return rlist[0].createConnection()


def wait_for_card(timeout_s: float = 30.0, poll_interval_s: float = 0.5,
                  name_filter: str = "") -> Optional[CardConnection]:
    """Poll the first reader until a card is present or timeout. Returns a connected connection."""
    conn = connect_first_reader(name_filter)
    if conn is None:
        return None
    deadline = time.time() + timeout_s
    while time.time() < deadline:
        try:
            conn.connect()  # will raise until a card is present
            return conn
        except (NoCardException, CardConnectionException):
            time.sleep(poll_interval_s)
    return None


def transmit(conn: CardConnection, apdu: List[int]) -> Tuple[bytes, int, int]:
    data, sw1, sw2 = conn.transmit(list(apdu))
    return bytes(data), sw1, sw2


def read_atr(conn: CardConnection) -> bytes:
    """Return ATR bytes of the connected card (already connected)."""
    atr = conn.getATR()
    return bytes(atr) if atr else b""


def read_uid(conn: CardConnection) -> Tuple[Optional[bytes], int, int]:
    """
    Read the card UID with the PC/SC GET DATA pseudo-APDU:
    FF CA 00 00 00  -> returns UID, SW1, SW2
    Not all readers support this; failures give (None, sw1, sw2).
    """
    try:
        data, sw1, sw2 = transmit(conn, APDU_GET_UID)
    except CardConnectionException as e:
        logger.warning("UID read failed: %s", e)
        return None, 0x6F, 0x00  # 6F00 = generic error
    if (sw1, sw2) == SW_OK:
        return data, sw1, sw2
    return None, sw1, sw2
