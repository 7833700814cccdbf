# src/lector_nfc_qt5/nfc/presence.py
from PyQt5 import QtCore
from smartcard.CardMonitoring import CardMonitor, CardObserver


class QtPresenceBridge(QtCore.QObject):
    """Qt bridge to emit signals from CardObserver callbacks (background thread)."""
    cardInserted = QtCore.pyqtSignal(str)   # reader name
    cardRemoved = QtCore.pyqtSignal(str)


class CardPresenceObserver(CardObserver):
    """Forwards insert/remove events of matching readers to Qt. Replaces Android tag dispatch."""
    def __init__(self, bridge: QtPresenceBridge, name_filter: str = ""):
        super().__init__()
        self._bridge = bridge
        self._name_filter = name_filter

    def _wanted(self, card) -> bool:
        return not self._name_filter or self._name_filter in str(getattr(card, "reader", ""))

    def update(self, observable, actions):
        """Called by pyscard (monitor thread) on card inserted/removed."""
        (added, removed) = actions
        for card in added or ():
            if self._wanted(card):
                self._bridge.cardInserted.emit(str(card.reader))
        for card in removed or ():
            if self._wanted(card):
                self._bridge.cardRemoved.emit(str(card.reader))


def start_presence_monitor(bridge: QtPresenceBridge, name_filter: str = ""):
    """Create and start a CardMonitor with observer; returns (monitor, observer)."""
    monitor = CardMonitor()
    observer = CardPresenceObserver(bridge, name_filter)
    monitor.addObserver(observer)
    return monitor, observer
