# tests/test_nfc_probe.py
# Hardware smoke test for a PC/SC NFC reader:
# - list readers
# - wait for a card
# - authenticate the configured sector and print block + saldo

import sys

import pytest

from lector_nfc_qt5.codec.hexcodec import encode
from lector_nfc_qt5.config.settings import load_settings
from lector_nfc_qt5.nfc.mifare import FailureKind, read_card
from lector_nfc_qt5.nfc.pcsc import list_readers, read_atr, wait_for_card
from lector_nfc_qt5.ui.render import render, saldo_label


def _probe():
    """Returns (ScreenState, CardReadResult, atr) or a skip reason string."""
    settings = load_settings()
    rlist = list_readers(settings.name_filter)
    if not rlist:
        return "No PC/SC reader found. Install drivers / start pcscd."

    print(f"[INFO] Found readers: {[str(r) for r in rlist]}")
    print("[INFO] Waiting for a card (30s timeout). Place a card on the reader...")
    conn = wait_for_card(timeout_s=30.0, poll_interval_s=0.5, name_filter=settings.name_filter)
    if conn is None:
        return "No card detected within timeout."
    atr = read_atr(conn)
    conn.disconnect()

    result = read_card(conn, settings)
    return render(result), result, atr


@pytest.mark.hardware
def test_nfc_probe_interactive():
    """Interactive probe: skip if no reader; waits up to 30s for a card."""
    out = _probe()
    if isinstance(out, str):
        pytest.skip(out)
    state, result, atr = out
    print(f"[OK] ATR: {encode(atr, ' ') or '(empty)'}")
    print(f"[OK] {state.card_id}")
    print(f"[{'OK' if result.ok else 'WARN'}] {state.sector_data}")
    if result.ok:
        print(f"[OK] {saldo_label(state)}")
        assert len(result.data) == 16
    else:
        # wrong keys / wrong card are not reader failures
        assert result.failure is not FailureKind.NO_CARD


if __name__ == "__main__":
    # Allow running as a standalone script without pytest:
    out = _probe()
    if isinstance(out, str):
        print(f"[WARN] {out}")
        sys.exit(0)
    state, result, atr = out
    print(f"[OK] ATR: {encode(atr, ' ') or '(empty)'}")
    for line in (state.status, state.card_id, state.sector_data, saldo_label(state)):
        if line:
            print(line)
