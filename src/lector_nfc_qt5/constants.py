# src/lector_nfc_qt5/constants.py
APP_TITLE = "LectorNFCBasicoQT5"
UI_VERSION = "V0.1"

# Screen texts (kept identical to the phone app)
STATUS_READY = "Acerque una tarjeta NFC"
STATUS_NO_NFC = "Este dispositivo no soporta NFC."
STATUS_NFC_DISABLED = "NFC está desactivado. Actívalo en ajustes."

CARD_ID_PREFIX = "ID de la tarjeta: "
SECTOR_DATA_PREFIX = "Bloque {block}: "
SALDO_PREFIX = "Saldo: "

MSG_AUTH_FAILED = "Fallo autenticacion"
MSG_READ_ERROR = "Error leyendo sector: {detail}"
MSG_CLOSE_ERROR = "Error al cerrar: {detail}"
MSG_NOT_MIFARE = "No es una tarjeta Mifare Classic"
MSG_NO_CARD = "No se detecta ninguna tarjeta."
