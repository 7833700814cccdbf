# tests/conftest.py
# Fake pyscard connection emulating an ACR122U with a MIFARE Classic 1K on it.
from __future__ import annotations

import pytest

from lector_nfc_qt5.config.settings import ReaderSettings

MIFARE_1K_ATR = bytes.fromhex("3B8F8001804F0CA000000306030001000000006A")
ULTRALIGHT_ATR = bytes.fromhex("3B8F8001804F0CA0000003060300030000000068")
DEFAULT_KEY = b"\xFF" * 6
UID = bytes.fromhex("04A1B2C3")
BLOCK_37 = bytes.fromhex("E8030000000000000000000000000000")


class FakeConnection:
    def __init__(self, atr=MIFARE_1K_ATR, uid=UID, blocks=None, accepted=None,
                 connect_error=None, disconnect_error=None, read_sw=(0x90, 0x00)):
        self.atr = atr
        self.uid = uid
        self.blocks = {37: BLOCK_37} if blocks is None else blocks
        # key type (0x60/0x61) -> keys the card accepts
        self.accepted = {0x60: {DEFAULT_KEY}} if accepted is None else accepted
        self.connect_error = connect_error
        self.disconnect_error = disconnect_error
        self.read_sw = read_sw
        self.slots = {}
        self.auth_sector = None
        self.sent = []
        self.connected = False
        self.disconnected = False

    def connect(self):
        if self.connect_error is not None:
            raise self.connect_error
        self.connected = True

    def disconnect(self):
        self.disconnected = True
        if self.disconnect_error is not None:
            raise self.disconnect_error

    def getATR(self):
        return list(self.atr)

    def transmit(self, apdu):
        self.sent.append(list(apdu))
        ins = apdu[1]
        if ins == 0xCA:
            if self.uid is None:
                return [], 0x6A, 0x81
            return list(self.uid), 0x90, 0x00
        if ins == 0x82:
            self.slots[apdu[3]] = bytes(apdu[5:11])
            return [], 0x90, 0x00
        if ins == 0x86:
            block, key_type, slot = apdu[7], apdu[8], apdu[9]
            if self.slots.get(slot) in self.accepted.get(key_type, set()):
                self.auth_sector = block // 4
                return [], 0x90, 0x00
            self.auth_sector = None
            return [], 0x63, 0x00
        if ins == 0xB0:
            block = apdu[3]
            if self.auth_sector != block // 4:
                return [], 0x69, 0x82
            if self.read_sw != (0x90, 0x00):
                return [], self.read_sw[0], self.read_sw[1]
            return list(self.blocks.get(block, bytes(16))), 0x90, 0x00
        return [], 0x6D, 0x00


@pytest.fixture
def settings():
    return ReaderSettings()


@pytest.fixture
def card():
    return FakeConnection()
