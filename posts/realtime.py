"""
Transport-agnostic fan-out of status events.

A websocket (or any other) transport registers one ``send(event, data)``
callable per connected client. When a client emits ``status-changed`` the
payload is re-emitted as ``status-update`` to every other client, unchanged.
"""
import logging
import threading

logger = logging.getLogger(__name__)

STATUS_CHANGED = 'status-changed'
STATUS_UPDATE = 'status-update'


class StatusRelay:

    def __init__(self):
        self._clients = {}
        self._lock = threading.Lock()

    def connect(self, client_id, send):
        with self._lock:
            self._clients[client_id] = send
        logger.info("User connected: %s", client_id)

    def disconnect(self, client_id):
        with self._lock:
            self._clients.pop(client_id, None)
        logger.info("User disconnected: %s", client_id)

    @property
    def client_count(self):
        with self._lock:
            return len(self._clients)

    def receive(self, client_id, event, data):
        """Handle an event emitted by ``client_id``. Returns deliveries made."""
        if event != STATUS_CHANGED:
            return 0
        return self.broadcast(STATUS_UPDATE, data, exclude=client_id)

    def broadcast(self, event, data, exclude=None):
        with self._lock:
            targets = [(cid, send) for cid, send in self._clients.items() if cid != exclude]

        delivered = 0
        dead = []
        for client_id, send in targets:
            try:
                send(event, data)
            except Exception:
                logger.warning("Dropping client %s after failed send", client_id, exc_info=True)
                dead.append(client_id)
            else:
                delivered += 1

        for client_id in dead:
            self.disconnect(client_id)
        return delivered


relay = StatusRelay()
