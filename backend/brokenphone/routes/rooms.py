from __future__ import annotations

from flask import Blueprint, jsonify

from ..game.errors import NotFound
from . import get_registry

bp = Blueprint("rooms", __name__)


@bp.get("/rooms/<code>")
def get_room(code: str):
    registry = get_registry()
    room = registry.get_room(code)
    if not room:
        return jsonify({"error": NotFound.code}), 404
    return jsonify(registry.room_summary(room))
