# src/lector_nfc_qt5/ui/main_window.py
from __future__ import annotations

import logging
import sys
import traceback
from dataclasses import replace
from typing import Optional

from PyQt5 import QtWidgets, QtGui, QtCore

from ..config.settings import ReaderSettings
from ..nfc.mifare import FailureKind, read_card
from ..nfc.pcsc import ReaderStatus, connect_first_reader, connect_reader, reader_status
from ..nfc.presence import QtPresenceBridge, start_presence_monitor
from .render import INITIAL_STATE, ScreenState, clear_scan, render, render_status, saldo_label

logger = logging.getLogger(__name__)


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self, title: str, version: str, settings: ReaderSettings):
        super().__init__()
        self.setWindowTitle(f"{title} - {version}")
        self.resize(640, 480)

        self.settings = settings
        self.state: ScreenState = INITIAL_STATE
        self.reader_state = ReaderStatus.NO_READER

        # === central UI: four texts in a centered column ===
        central = QtWidgets.QWidget()
        self.setCentralWidget(central)
        layout = QtWidgets.QVBoxLayout(central)
        layout.setSpacing(16)
        layout.setContentsMargins(10, 10, 10, 10)
        layout.addStretch()

        self.status_label = self._make_label(point_delta=6, bold=True)
        self.card_id_label = self._make_label(point_delta=2)
        self.sector_label = self._make_label()
        self.saldo_text = self._make_label(point_delta=2, bold=True)
        for lbl in (self.status_label, self.card_id_label, self.sector_label, self.saldo_text):
            layout.addWidget(lbl, 0, QtCore.Qt.AlignHCenter)

        # === buttons ===
        btn_row = QtWidgets.QHBoxLayout()
        layout.addLayout(btn_row)
        self.btn_read = QtWidgets.QPushButton("LEER TARJETA")
        self.btn_refresh = QtWidgets.QToolButton()
        self.btn_refresh.setText("Refresh")
        self.btn_refresh.setToolTip("Refresh reader status")
        btn_row.addStretch()
        btn_row.addWidget(self.btn_read)
        btn_row.addWidget(self.btn_refresh)
        btn_row.addStretch()
        layout.addStretch()

        # === log area ===
        log_row = QtWidgets.QHBoxLayout()
        layout.addLayout(log_row)
        self.output = QtWidgets.QPlainTextEdit()
        self.output.setReadOnly(True)
        self.output.setMaximumHeight(140)
        self.btn_clear_log = QtWidgets.QToolButton()
        self.btn_clear_log.setText("Clear Log")
        log_row.addWidget(self.output, 1)
        log_row.addWidget(self.btn_clear_log, 0, QtCore.Qt.AlignTop)

        self.statusBar().showMessage("Ready")

        # signals
        self.btn_read.clicked.connect(lambda: self.on_read())
        self.btn_refresh.clicked.connect(self.refresh_reader_status)
        self.btn_clear_log.clicked.connect(self.clear_log)

        # monitor
        self.show_state(INITIAL_STATE)
        self.refresh_reader_status()
        self.reader_timer = QtCore.QTimer(self)
        self.reader_timer.setInterval(settings.poll_interval_ms)
        self.reader_timer.timeout.connect(self.refresh_reader_status)
        self.reader_timer.start()

        self._presence_bridge = QtPresenceBridge()
        self._presence_bridge.cardInserted.connect(self.on_card_inserted)
        self._presence_bridge.cardRemoved.connect(self.on_card_removed)
        self._card_monitor, self._presence_observer = start_presence_monitor(
            self._presence_bridge, settings.name_filter)

        self.log(f"Sector {settings.sector}, bloque {settings.block}, {len(settings.keys)} key(s).")
        self._update_actions()

    # ---------- basic helpers ----------
    @staticmethod
    def _make_label(point_delta: int = 0, bold: bool = False) -> QtWidgets.QLabel:
        lbl = QtWidgets.QLabel("", alignment=QtCore.Qt.AlignCenter)
        f = lbl.font()
        f.setBold(bold)
        f.setPointSize(f.pointSize() + point_delta)
        lbl.setFont(f)
        lbl.setTextInteractionFlags(QtCore.Qt.TextSelectableByMouse)
        return lbl

    def clear_log(self):
        self.output.clear()

    def log(self, msg: str):
        self.output.appendPlainText(msg)

    def log_exception(self, prefix: str = "[ERROR]"):
        """Append full traceback of the active exception to the log window and stderr."""
        exc = traceback.format_exc()
        self.log(f"{prefix}\n{exc}")
        print(exc, file=sys.stderr)

    def show_state(self, state: ScreenState):
        self.state = state
        self.status_label.setText(state.status)
        self.card_id_label.setText(state.card_id)
        self.sector_label.setText(state.sector_data)
        self.sector_label.setVisible(bool(state.sector_data))
        self.saldo_text.setText(saldo_label(state))
        self.saldo_text.setVisible(bool(state.saldo))

    def refresh_reader_status(self):
        self.reader_state = reader_status(self.settings.name_filter)
        status = render_status(self.reader_state)
        if status != self.state.status:
            self.show_state(replace(self.state, status=status))
        self._update_actions()

    def _update_actions(self):
        self.btn_read.setEnabled(self.reader_state is ReaderStatus.READY)

    # ---------- presence ----------
    @QtCore.pyqtSlot(str)
    def on_card_inserted(self, reader: str):
        self.log(f"[INFO] Card detected on {reader}")
        self.on_read(reader)

    @QtCore.pyqtSlot(str)
    def on_card_removed(self, reader: str):
        self.log(f"[INFO] Card removed from {reader}")
        self._update_actions()

    # ---------- NFC: READ ----------
    def on_read(self, reader: Optional[str] = None):
        """Read the card on `reader`, or on the first matching reader when none is given."""
        self.refresh_reader_status()
        if self.reader_state is not ReaderStatus.READY:
            self.log("[ERROR] No NFC reader connected.")
            return

        if reader:
            conn = connect_reader(reader)
        else:
            conn = connect_first_reader(self.settings.name_filter)
        if conn is None:
            self.log("[ERROR] No NFC reader available.")
            self.refresh_reader_status()
            return

        self.show_state(clear_scan(self.state))
        try:
            result = read_card(conn, self.settings)
        except Exception as e:
            self.log(f"[ERROR] Read failed: {e}")
            self.log_exception()
            return

        if result.failure is FailureKind.NO_CARD:
            self.log("[INFO] No card detected. Place a card on the reader and try again.")
            return

        state = render(result, status=self.state.status)
        self.show_state(state)
        if result.ok:
            self.log(f"[OK] {state.card_id}")
            self.log(f"[OK] {state.sector_data} (key {result.key_type.name})")
            self.log(f"[OK] {saldo_label(state)}")
            self.statusBar().showMessage(saldo_label(state), 5000)
        else:
            self.log(f"[ERR] {result.card_name}: {state.sector_data}")

    # ---------- close ----------
    def closeEvent(self, event: QtGui.QCloseEvent):
        try:
            self.reader_timer.stop()
            try:
                self._card_monitor.deleteObserver(self._presence_observer)
            except Exception as e:
                logger.debug("Removing card observer failed: %s", e)
        finally:
            super().closeEvent(event)
