# freeze_setup.py
# cx_Freeze setup for Windows (.exe), Linux and macOS (.app).
#   pip install -e .[freeze]
#   python freeze_setup.py build        (or bdist_mac on macOS)

from cx_Freeze import setup, Executable
from pathlib import Path
import sys

APP_NAME = "LectorNFCBasicoQT5"
VERSION = "0.1.0"
BASE_DIR = Path(__file__).parent

build_exe_options = {
    "packages": ["lector_nfc_qt5"],
    "includes": [
        "PyQt5.QtCore",
        "PyQt5.QtGui",
        "PyQt5.QtWidgets",
        "configparser",
        "logging",
        # --- smartcard (pyscard) ---
        "smartcard",
        "smartcard.Exceptions",
        "smartcard.System",
        "smartcard.scard",
        "smartcard.CardConnection",
        "smartcard.CardMonitoring",
    ],
    "excludes": ["tkinter", "unittest", "tests"],
    # default settings next to the executable, editable by the user
    "include_files": [
        (str(BASE_DIR / "src" / "lector_nfc_qt5" / "config" / "lector.ini"), "lector.ini"),
    ],
    "zip_include_packages": ["encodings", "importlib", "PyQt5"],
    "zip_exclude_packages": [],
    "optimize": 1,
    "silent_level": 1,
}

if sys.platform == "win32":
    base = "Win32GUI"
    target_name = f"{APP_NAME}.exe"
else:
    base = None
    target_name = APP_NAME

executables = [
    Executable(
        script="LectorNFCBasicoQT5.py",
        base=base,
        target_name=target_name,
    )
]

setup(
    name=APP_NAME,
    version=VERSION,
    description="PyQt5 MIFARE Classic balance reader",
    options={
        "build_exe": build_exe_options,
        "bdist_mac": {"bundle_name": APP_NAME},
    },
    executables=executables,
)
