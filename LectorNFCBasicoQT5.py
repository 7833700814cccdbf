# LectorNFCBasicoQT5.py
# Launcher script for cx_Freeze (see freeze_setup.py); pass an ini path to override settings.
from lector_nfc_qt5.app import main

if __name__ == "__main__":
    main()
