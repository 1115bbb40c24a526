from __future__ import annotations

from flask import current_app

from ..game.service import RoomRegistry


def get_registry() -> RoomRegistry:
    return current_app.extensions["brokenphone"]
