# src/lector_nfc_qt5/app.py
import logging
import sys
import traceback
from typing import Optional

from PyQt5 import QtWidgets, QtCore

from .constants import APP_TITLE, UI_VERSION
from .config.settings import ReaderSettings, load_settings
from .ui.main_window import MainWindow

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_error_log_path = "lector_error.log"


def configure_logging(level: str = "INFO"):
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def _global_excepthook(exctype, value, tb):
    text = "".join(traceback.format_exception(exctype, value, tb))
    # Terminal
    print(text, file=sys.stderr)
    # and the error log file
    with open(_error_log_path, "a", encoding="utf-8") as f:
        f.write(text + "\n")


def run_app(settings_path: Optional[str] = None):
    global _error_log_path

    settings: ReaderSettings = load_settings(settings_path)
    configure_logging(settings.log_level)
    _error_log_path = settings.log_file or _error_log_path
    sys.excepthook = _global_excepthook
    logging.getLogger(__name__).info("Starting %s %s (settings: %s)", APP_TITLE, UI_VERSION, settings.source)

    QtWidgets.QApplication.setAttribute(QtCore.Qt.AA_EnableHighDpiScaling, True)
    QtWidgets.QApplication.setAttribute(QtCore.Qt.AA_UseHighDpiPixmaps, True)
    app = QtWidgets.QApplication(sys.argv)
    win = MainWindow(APP_TITLE, UI_VERSION, settings)
    win.show()
    sys.exit(app.exec_())


def main():
    run_app(sys.argv[1] if len(sys.argv) > 1 else None)


if __name__ == "__main__":
    main()
