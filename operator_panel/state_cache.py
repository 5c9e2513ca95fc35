import threading
from typing import Optional

from controller.interfaces.state_observer import IStateObserver
from controller.model.building import BuildingSnapshot


class LatestStateCache(IStateObserver):
    """
    Keeps the most recent snapshot and connection state for the HTTP thread

    Written on the control thread, read on the HTTP thread. Snapshots are
    immutable, so only the reference swap needs the lock.
    """
    def __init__(self):
        self._lock = threading.Lock()
        self._snapshot: Optional[BuildingSnapshot] = None
        self._connection_state = "DISCONNECTED"

    def on_state_changed(self, snapshot: BuildingSnapshot) -> None:
        with self._lock:
            self._snapshot = snapshot

    def on_connection_changed(self, message: dict) -> None:
        """Broker callback for the 'ecc/connection' topic"""
        with self._lock:
            self._connection_state = message.get('new_state', self._connection_state)

    @property
    def snapshot(self) -> Optional[BuildingSnapshot]:
        with self._lock:
            return self._snapshot

    @property
    def connection_state(self) -> str:
        with self._lock:
            return self._connection_state
