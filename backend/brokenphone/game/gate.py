"""Validation and recording of player contributions.

Every check runs before anything is written to the room, so a rejected
submission leaves the chain untouched.
"""
from __future__ import annotations

from typing import Any

from . import assignment, history
from .errors import DuplicateSubmission, EntryMissing, NotAssigned, WrongPhase
from .models import PHASE_STEP, ContributionStep, Room


def clean_text(text: Any, max_len: int) -> str:
    if text is None:
        return ""
    return str(text).strip()[:max_len]


def _require_phase(room: Room, phase: str) -> None:
    if room.phase != phase:
        raise WrongPhase(f"room {room.id} is {room.phase}, not {phase}")


def submit_prompt(room: Room, caller_id: str, prompt: str) -> ContributionStep:
    _require_phase(room, "writing")
    if caller_id not in room.players:
        raise NotAssigned(f"{caller_id} is not playing in {room.id}")
    if history.find_entry(room, caller_id) is not None:
        raise DuplicateSubmission(f"{caller_id} already wrote a prompt")

    entry = history.start_chain(room, caller_id, prompt)
    return entry.steps[-1]


def submit_drawing(room: Room, caller_id: str, target_id: str, strokes: Any) -> ContributionStep:
    _require_phase(room, "drawing")
    if not assignment.drawer_for(room.order, target_id).is_for(caller_id):
        raise NotAssigned(f"{caller_id} does not draw for {target_id}")

    entry = history.find_entry(room, target_id)
    if entry is None:
        raise EntryMissing(f"no chain for {target_id}")

    return history.append_step(entry, "drawing", caller_id, strokes)


def submit_guess(room: Room, caller_id: str, target_id: str, guess: str) -> ContributionStep:
    _require_phase(room, "guessing")
    if not assignment.guesser_for(room.order, target_id).is_for(caller_id):
        raise NotAssigned(f"{caller_id} does not guess for {target_id}")

    entry = history.find_entry(room, target_id)
    if entry is None:
        raise EntryMissing(f"no chain for {target_id}")

    return history.append_step(entry, "guess", caller_id, guess)


def outstanding(room: Room) -> list[str]:
    """Owners whose chain still waits for the current phase's step from someone present."""
    kind = PHASE_STEP.get(room.phase)
    if kind is None:
        return []
    if kind == "prompt":
        return [pid for pid in room.order if history.find_entry(room, pid) is None]

    before = "prompt" if kind == "drawing" else "drawing"
    resolve = assignment.drawer_for if kind == "drawing" else assignment.guesser_for
    return [
        entry.owner
        for entry in room.history
        if entry.step(before) is not None
        and entry.step(kind) is None
        and resolve(room.order, entry.owner).assigned
    ]


def is_complete(room: Room) -> bool:
    if room.phase not in PHASE_STEP or not room.order:
        return False
    return not outstanding(room)
