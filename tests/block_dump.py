# tests/block_dump.py
# Dump the blocks of one MIFARE Classic sector via PC/SC (FF B0 00 <block> 10).
# - Authenticates the sector with the configured keys (A, then B).
# - Prints HEX + ASCII for each block and the saldo of the configured block.
# - Run while a card is on the reader.

from __future__ import annotations
import sys
import argparse

from smartcard.Exceptions import NoCardException

from lector_nfc_qt5.codec.balance import balance_from_block
from lector_nfc_qt5.codec.hexcodec import encode
from lector_nfc_qt5.config.settings import load_settings
from lector_nfc_qt5.nfc.mifare import (
    CardIOError,
    SMALL_SECTORS,
    SMALL_SECTOR_BLOCKS,
    LARGE_SECTOR_BLOCKS,
    authenticate_sector,
    read_block,
    sector_to_block,
    target_block,
)
from lector_nfc_qt5.nfc.pcsc import connect_first_reader, list_readers


def fmt_ascii(b: bytes) -> str:
    return "".join(chr(x) if 32 <= x < 127 else "." for x in b)


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Dump one MIFARE Classic sector via PC/SC.")
    p.add_argument("--settings", default=None, help="Settings ini (default: packaged lector.ini)")
    p.add_argument("--sector", type=int, default=None, help="Sector to dump (default: from settings)")
    return p.parse_args()


def main():
    args = parse_args()
    settings = load_settings(args.settings)
    sector = settings.sector if args.sector is None else args.sector

    if not list_readers(settings.name_filter):
        print("[ERROR] No PC/SC reader found.")
        sys.exit(1)

    conn = connect_first_reader(settings.name_filter)
    if conn is None:
        print("[ERROR] Failed to get connection object for first reader.")
        sys.exit(1)

    try:
        try:
            conn.connect()
        except NoCardException:
            print("[ERROR] No card present. Place a card on the reader.")
            sys.exit(1)

        key_type = authenticate_sector(conn, sector, settings.keys)
        if key_type is None:
            print(f"[ERROR] Sector {sector}: authentication failed (key A and key B).")
            sys.exit(1)
        print(f"Sector {sector} unlocked with key {key_type.name}\n")

        first = sector_to_block(sector)
        count = SMALL_SECTOR_BLOCKS if sector < SMALL_SECTORS else LARGE_SECTOR_BLOCKS
        wanted = target_block(settings.sector, settings.block)
        for blk in range(first, first + count):
            try:
                data = read_block(conn, blk)
            except CardIOError as e:
                print(f"{blk:03d}: READ ERROR ({e})")
                continue
            mark = "  <- saldo " + balance_from_block(data).text if blk == wanted else ""
            print(f"{blk:03d}: {encode(data, ' ')}   |{fmt_ascii(data)}|{mark}")
    finally:
        try:
            conn.disconnect()
        except Exception:
            pass


if __name__ == "__main__":
    main()
