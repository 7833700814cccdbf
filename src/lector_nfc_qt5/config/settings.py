# src/lector_nfc_qt5/config/settings.py
from __future__ import annotations

import configparser
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from ..codec.hexcodec import DecodeError, decode

DEFAULT_INI = Path(__file__).parent / "lector.ini"
DEFAULT_KEY = b"\xFF" * 6
KEY_LENGTH = 6
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class SettingsError(ValueError):
    pass


@dataclass(frozen=True)
class ReaderSettings:
    sector: int = 9
    block: int = 37
    keys: Tuple[bytes, ...] = (DEFAULT_KEY,)
    check_card_type: bool = True
    name_filter: str = ""
    poll_interval_ms: int = 2000
    log_level: str = "INFO"
    log_file: str = "lector_error.log"
    source: Optional[str] = field(default=None, compare=False)


def parse_keys(value: str) -> Tuple[bytes, ...]:
    """'FFFFFFFFFFFF, A0A1A2A3A4A5' -> (b'\\xff'*6, b'\\xa0...')."""
    keys: List[bytes] = []
    for item in (value or "").split(","):
        item = item.strip().replace(" ", "")
        if not item:
            continue
        try:
            key = decode(item)
        except DecodeError as e:
            raise SettingsError(f"[card] keys: invalid key {item!r} ({e})") from e
        if len(key) != KEY_LENGTH:
            raise SettingsError(f"[card] keys: key {item!r} must be {KEY_LENGTH} bytes")
        keys.append(key)
    if not keys:
        raise SettingsError("[card] keys: at least one key is required")
    return tuple(keys)


def _get_int(cp: configparser.ConfigParser, section: str, option: str, default: int,
             lo: int, hi: int) -> int:
    try:
        value = cp.getint(section, option, fallback=default)
    except ValueError as e:
        raise SettingsError(f"[{section}] {option}: {e}") from e
    if not lo <= value <= hi:
        raise SettingsError(f"[{section}] {option}: {value} not in {lo}..{hi}")
    return value


def load_settings(path: Optional[str] = None) -> ReaderSettings:
    """
    Read settings from `path`, or from the packaged lector.ini.
    Missing options fall back to ReaderSettings defaults.
    """
    ini_path = Path(path) if path else DEFAULT_INI
    cp = configparser.ConfigParser()
    try:
        with open(ini_path, "r", encoding="utf-8") as f:
            cp.read_file(f)
    except OSError as e:
        raise SettingsError(f"cannot read settings file {ini_path}: {e}") from e
    except configparser.Error as e:
        raise SettingsError(f"malformed settings file {ini_path}: {e}") from e

    d = ReaderSettings()
    sector = _get_int(cp, "card", "sector", d.sector, 0, 39)   # 4K has 40 sectors
    block = _get_int(cp, "card", "block", d.block, 0, 255)
    keys = parse_keys(cp.get("card", "keys", fallback="FFFFFFFFFFFF"))
    try:
        check = cp.getboolean("card", "check_card_type", fallback=d.check_card_type)
    except ValueError as e:
        raise SettingsError(f"[card] check_card_type: {e}") from e

    level = cp.get("log", "level", fallback=d.log_level).strip().upper()
    if level not in LOG_LEVELS:
        raise SettingsError(f"[log] level: unknown level {level!r}")

    settings = ReaderSettings(
        sector=sector,
        block=block,
        keys=keys,
        check_card_type=check,
        name_filter=cp.get("reader", "name_filter", fallback="").strip(),
        poll_interval_ms=_get_int(cp, "reader", "poll_interval_ms", d.poll_interval_ms, 100, 60000),
        log_level=level,
        log_file=cp.get("log", "file", fallback=d.log_file).strip(),
        source=str(ini_path),
    )
    logging.getLogger(__name__).debug("Loaded settings from %s: sector=%d block=%d keys=%d",
                                      ini_path, settings.sector, settings.block, len(settings.keys))
    return settings
