from __future__ import annotations

import functools
import logging
from typing import Any, Callable

from flask import request
from flask_socketio import SocketIO, join_room, leave_room

from ..game.errors import GameError, InternalError, InvalidPayload
from ..game.service import RoomRegistry
from . import events


logger = logging.getLogger(__name__)

MAX_NAME_LEN = 24


def _clean_name(name: Any) -> str:
    n = str(name or "").strip()[:MAX_NAME_LEN]
    # No control characters.
    n = "".join(ch for ch in n if ord(ch) >= 32)
    return n or "Player"


def _room_code(payload: dict) -> str:
    room_code = str(payload.get("roomId", "") or "").strip()
    if not room_code:
        raise InvalidPayload("roomId is required")
    return room_code


def _target_id(payload: dict) -> str:
    target = str(payload.get("targetId", "") or "").strip()
    if not target:
        raise InvalidPayload("targetId is required")
    return target


def replies(handler: Callable[[dict], dict | None]) -> Callable[[Any], dict]:
    """Turn a handler into an acknowledgement of the form ``{ok, err?}``."""

    @functools.wraps(handler)
    def wrapper(data: Any = None) -> dict:
        payload = data if isinstance(data, dict) else {}
        try:
            result = handler(payload)
        except GameError as exc:
            logger.debug(f"[reply] event={handler.__name__} sid={request.sid} err={exc.code} detail={exc.detail}")
            return {"ok": False, "err": exc.code}
        except Exception:
            logger.exception(f"[reply] event={handler.__name__} sid={request.sid} unexpected failure")
            return {"ok": False, "err": InternalError.code}
        reply = {"ok": True}
        if result:
            reply.update(result)
        return reply

    return wrapper


def register_socketio_handlers(socketio: SocketIO, registry: RoomRegistry) -> None:
    @socketio.on(events.CREATE_ROOM)
    @replies
    def create_room(payload: dict) -> dict:
        room = registry.create_room(payload)
        return {"roomId": room.id}

    @socketio.on(events.JOIN_ROOM)
    @replies
    def room_join(payload: dict) -> dict:
        room_code = _room_code(payload)
        name = _clean_name(payload.get("name"))

        registry.require_room(room_code)
        # Subscribe first so the joiner also receives the roomUpdate broadcast.
        join_room(room_code)
        room = registry.join_room(room_code, request.sid, name)
        return {"room": registry.room_summary(room), "playerId": request.sid}

    @socketio.on(events.LEAVE_ROOM)
    @replies
    def room_leave(payload: dict) -> None:
        room_code = _room_code(payload)
        registry.leave(request.sid, room_code)
        leave_room(room_code)

    @socketio.on(events.START_GAME)
    @replies
    def game_start(payload: dict) -> None:
        registry.start_game(_room_code(payload), request.sid, payload.get("settings"))

    @socketio.on(events.SUBMIT_PROMPT)
    @replies
    def submit_prompt(payload: dict) -> None:
        registry.submit_prompt(_room_code(payload), request.sid, payload.get("prompt"))

    @socketio.on(events.DRAWING_DATA)
    @replies
    def drawing_data(payload: dict) -> None:
        registry.submit_drawing(_room_code(payload), request.sid, _target_id(payload), payload.get("strokes"))

    @socketio.on(events.SUBMIT_GUESS)
    @replies
    def submit_guess(payload: dict) -> None:
        registry.submit_guess(_room_code(payload), request.sid, _target_id(payload), payload.get("guess"))

    @socketio.on("disconnect")
    def on_disconnect(*args):
        # Remove the player from any rooms where present (linear scan)
        left = registry.leave_all(request.sid)
        if left:
            logger.info(f"[disconnect] sid={request.sid} rooms={left}")
