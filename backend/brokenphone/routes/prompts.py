from __future__ import annotations

from flask import Blueprint, jsonify, request

from ..game.prompts import pick_prompts
from . import get_registry

bp = Blueprint("prompts", __name__)

MAX_SUGGESTIONS = 20


@bp.get("/prompts")
def get_prompts():
    try:
        count = int(request.args.get("count", "5"))
    except ValueError:
        count = 5
    count = max(1, min(count, MAX_SUGGESTIONS))

    return jsonify({"prompts": pick_prompts(get_registry().prompts, count)})
