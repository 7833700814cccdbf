# src/lector_nfc_qt5/nfc/mifare.py
"""
MIFARE Classic access through PC/SC pseudo-APDUs (ACR122U and compatible readers).

Memory is divided into blocks of 16 bytes grouped into sectors:
  - MIFARE Classic 1K: 16 sectors x 4 blocks
  - MIFARE Classic 4K: 32 sectors x 4 blocks, plus 8 sectors x 16 blocks
The last block of every sector (the trailer) holds KEY_A | access bits | KEY_B.
A sector has to be authenticated with key A or key B before any block in it can be read.

Anticollision, Crypto1 and framing run inside the reader firmware; here we only
load a key, ask the reader to authenticate and issue READ BINARY.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from smartcard.CardConnection import CardConnection
from smartcard.Exceptions import CardConnectionException, NoCardException

from ..codec.hexcodec import encode
from .pcsc import SW_OK, read_atr, read_uid, transmit

logger = logging.getLogger(__name__)

BLOCK_SIZE = 16
KEY_SIZE = 6
SMALL_SECTORS = 32          # sectors 0..31 have 4 blocks
SMALL_SECTOR_BLOCKS = 4
LARGE_SECTOR_BLOCKS = 16    # sectors 32..39 (4K only)
MAX_SECTOR = 39

# PC/SC part 3 card name bytes (ATR bytes 13..14 for storage cards)
CARD_NAMES = {
    (0x00, 0x01): "MIFARE Classic 1K",
    (0x00, 0x02): "MIFARE Classic 4K",
    (0x00, 0x03): "MIFARE Ultralight",
    (0x00, 0x26): "MIFARE Mini",
    (0xF0, 0x04): "Topaz and Jewel",
    (0xF0, 0x11): "FeliCa 212K",
    (0xF0, 0x12): "FeliCa 424K",
}
MIFARE_CLASSIC_NAMES = frozenset({"MIFARE Classic 1K", "MIFARE Classic 4K", "MIFARE Mini"})


class KeyType(Enum):
    A = 0x60
    B = 0x61


class FailureKind(Enum):
    NO_CARD = "no_card"
    NOT_MIFARE_CLASSIC = "not_mifare_classic"
    AUTH_FAILED = "auth_failed"
    IO_ERROR = "io_error"
    CLOSE_ERROR = "close_error"


class CardIOError(Exception):
    """A card command answered with a status word other than 90 00."""
    def __init__(self, command: str, sw1: int, sw2: int):
        super().__init__(f"{command} failed: SW1/SW2={sw1:02X}/{sw2:02X}")
        self.sw1 = sw1
        self.sw2 = sw2


@dataclass(frozen=True)
class CardReadResult:
    """
    Outcome of one scan. `data` is set after a successful block read; `failure` tells
    what went wrong. Both are set when only the final disconnect failed (CLOSE_ERROR).
    """
    uid: Optional[bytes] = None
    card_name: str = "unknown"
    block: Optional[int] = None
    data: Optional[bytes] = None
    key_type: Optional[KeyType] = None
    failure: Optional[FailureKind] = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.failure is None and self.data is not None


# ---------- card identification ----------

def card_name_from_atr(atr: bytes) -> str:
    """Card name from a PC/SC storage-card ATR (3B 8F 80 01 80 4F 0C A0 00 00 03 06 SS C0 C1 ...)."""
    atr = bytes(atr or b"")
    if len(atr) < 15 or atr[4:6] != b"\x80\x4F":
        return "unknown"
    return CARD_NAMES.get((atr[13], atr[14]), "unknown")


def is_mifare_classic(atr: bytes) -> bool:
    return card_name_from_atr(atr) in MIFARE_CLASSIC_NAMES


# ---------- addressing ----------

def sector_to_block(sector: int) -> int:
    """First (absolute) block of a sector."""
    if not 0 <= sector <= MAX_SECTOR:
        raise ValueError(f"sector out of range: {sector}")
    if sector < SMALL_SECTORS:
        return sector * SMALL_SECTOR_BLOCKS
    return SMALL_SECTORS * SMALL_SECTOR_BLOCKS + (sector - SMALL_SECTORS) * LARGE_SECTOR_BLOCKS


def target_block(sector: int, block_index: int) -> int:
    """Absolute block for a block number relative to its sector: sector 9 / block 37 -> 37."""
    return sector_to_block(sector) + (block_index % SMALL_SECTOR_BLOCKS)


# ---------- authentication ----------

def load_key(conn: CardConnection, key: bytes, slot: int = 0x00) -> bool:
    """
    Load a 6-byte key into the reader's volatile key slot (0 or 1).
    APDU: FF 82 00 <slot> 06 <key>
    """
    if len(key) != KEY_SIZE:
        raise ValueError(f"key must be {KEY_SIZE} bytes, got {len(key)}")
    if slot not in (0, 1):
        raise ValueError("key slot must be 0 or 1")
    _, sw1, sw2 = transmit(conn, [0xFF, 0x82, 0x00, slot, KEY_SIZE] + list(key))
    return (sw1, sw2) == SW_OK


def authenticate(conn: CardConnection, block: int, key_type: KeyType, slot: int = 0x00) -> bool:
    """
    Authenticate the sector holding `block` with the key loaded in `slot`.
    APDU: FF 86 00 00 05 | 01 00 <block> <60|61> <slot>
    """
    _, sw1, sw2 = transmit(conn, [0xFF, 0x86, 0x00, 0x00, 0x05,
                                  0x01, 0x00, block & 0xFF, key_type.value, slot])
    return (sw1, sw2) == SW_OK


def authenticate_sector(conn: CardConnection, sector: int, keys: Iterable[bytes]) -> Optional[KeyType]:
    """Try every key as key A, then as key B. Returns the key type that unlocked the sector."""
    block = sector_to_block(sector)
    for key in keys:
        if not load_key(conn, key):
            logger.warning("Reader refused to load key %s", encode(key))
            continue
        for key_type in (KeyType.A, KeyType.B):
            if authenticate(conn, block, key_type):
                logger.info("Sector %d authenticated with key %s", sector, key_type.name)
                return key_type
    logger.info("Sector %d: key A and key B rejected", sector)
    return None


# ---------- data ----------

def read_block(conn: CardConnection, block: int) -> bytes:
    """
    Read one 16-byte block (sector must be authenticated).
    APDU: FF B0 00 <block> 10
    """
    data, sw1, sw2 = transmit(conn, [0xFF, 0xB0, 0x00, block & 0xFF, BLOCK_SIZE])
    if (sw1, sw2) != SW_OK:
        raise CardIOError(f"READ block {block}", sw1, sw2)
    if len(data) != BLOCK_SIZE:
        raise CardIOError(f"READ block {block} returned {len(data)} bytes", sw1, sw2)
    return data


def read_card(conn: CardConnection, settings) -> CardReadResult:
    """
    One full scan: connect, identify, authenticate the configured sector,
    read the target block, disconnect. Never raises; see CardReadResult.failure.
    """
    try:
        conn.connect()
    except NoCardException as e:
        logger.info("No card on reader: %s", e)
        return CardReadResult(failure=FailureKind.NO_CARD, detail=str(e))
    except CardConnectionException as e:
        logger.error("Connect failed: %s", e)
        return CardReadResult(failure=FailureKind.IO_ERROR, detail=str(e))

    uid = None
    card_name = "unknown"
    block = target_block(settings.sector, settings.block)
    data = None
    key_type = None
    failure = None
    detail = ""
    try:
        uid, _, _ = read_uid(conn)
        atr = read_atr(conn)
        card_name = card_name_from_atr(atr)
        logger.info("Card %s (%s), ATR %s", encode(uid or b""), card_name, encode(atr, " "))

        if settings.check_card_type and card_name not in MIFARE_CLASSIC_NAMES:
            failure = FailureKind.NOT_MIFARE_CLASSIC
            detail = card_name
        else:
            key_type = authenticate_sector(conn, settings.sector, settings.keys)
            if key_type is None:
                failure = FailureKind.AUTH_FAILED
            else:
                data = read_block(conn, block)
                logger.info("Block %d: %s", block, encode(data))
    except (CardConnectionException, CardIOError) as e:
        logger.error("Reading sector %d failed: %s", settings.sector, e)
        data = None
        failure = FailureKind.IO_ERROR
        detail = str(e)
    finally:
        try:
            conn.disconnect()
        except CardConnectionException as e:
            logger.error("Disconnect failed: %s", e)
            # block already read stays in the result; the close error replaces any other failure
            failure = FailureKind.CLOSE_ERROR
            detail = str(e)

    return CardReadResult(uid=uid, card_name=card_name, block=block, data=data,
                          key_type=key_type, failure=failure, detail=detail)
