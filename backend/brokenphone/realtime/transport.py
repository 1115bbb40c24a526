from __future__ import annotations

import logging
from typing import Any

from flask_socketio import SocketIO


logger = logging.getLogger(__name__)


class SocketIOTransport:
    """Room broadcast and unicast on top of a Flask-SocketIO server.

    Every connection sits in a private room named after its sid, so unicast
    is an emit to that sid. Emits are best-effort: room state has already
    changed by the time anything is sent, so a failed emit is logged and
    never raised into the caller or a running countdown.
    """

    def __init__(self, socketio: SocketIO, namespace: str = "/") -> None:
        self.socketio = socketio
        self.namespace = namespace

    def _emit(self, to: str, event: str, payload: Any) -> None:
        try:
            self.socketio.emit(event, payload, to=to, namespace=self.namespace)
        except Exception:
            logger.exception(f"[emit-failed] to={to} event={event}")

    def broadcast(self, room_id: str, event: str, payload: Any) -> None:
        self._emit(room_id, event, payload)

    def send(self, player_id: str, event: str, payload: Any) -> None:
        self._emit(player_id, event, payload)
