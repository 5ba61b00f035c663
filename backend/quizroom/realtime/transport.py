from __future__ import annotations

from flask_socketio import SocketIO

NAMESPACE = "/"


class SocketIOTransport:
    """Delivers session output over Socket.IO rooms and per-connection sids."""

    def __init__(self, socketio: SocketIO, namespace: str = NAMESPACE) -> None:
        self._socketio = socketio
        self._namespace = namespace

    def broadcast(self, room_code: str, event: str, payload=None) -> None:
        self._emit(event, payload, room_code)

    def send(self, identity: str, event: str, payload=None) -> None:
        self._emit(event, payload, identity)

    def disconnect(self, identity: str) -> None:
        if self.is_connected(identity):
            self._socketio.server.disconnect(identity, namespace=self._namespace)

    def is_connected(self, identity: str) -> bool:
        return bool(self._socketio.server.manager.is_connected(identity, self._namespace))

    def _emit(self, event: str, payload, to: str) -> None:
        if payload is None:
            self._socketio.emit(event, to=to, namespace=self._namespace)
        else:
            self._socketio.emit(event, payload, to=to, namespace=self._namespace)
