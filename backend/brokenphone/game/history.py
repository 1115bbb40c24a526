from __future__ import annotations

from typing import Any, Callable

from .errors import DuplicateSubmission, EntryMissing
from .models import STEP_ORDER, ContributionStep, HistoryEntry, Room, StepKind


def find_entry(room: Room, owner_id: str) -> HistoryEntry | None:
    for entry in room.history:
        if entry.owner == owner_id:
            return entry
    return None


def append_step(entry: HistoryEntry, kind: StepKind, by: str, data: Any, placeholder: bool = False) -> ContributionStep:
    if entry.step(kind) is not None:
        raise DuplicateSubmission(f"{kind} already recorded for {entry.owner}")

    expected = STEP_ORDER[len(entry.steps)] if len(entry.steps) < len(STEP_ORDER) else None
    if expected != kind:
        raise EntryMissing(f"{entry.owner} has no step before {kind}")

    step = ContributionStep(kind=kind, by=by, data=data, placeholder=placeholder)
    entry.steps.append(step)
    return step


def start_chain(room: Room, owner_id: str, prompt: str, placeholder: bool = False) -> HistoryEntry:
    if find_entry(room, owner_id) is not None:
        raise DuplicateSubmission(f"{owner_id} already wrote a prompt")

    entry = HistoryEntry(owner=owner_id)
    append_step(entry, "prompt", owner_id, prompt, placeholder=placeholder)
    room.history.append(entry)
    return entry


def fill_placeholders(room: Room, make_prompt: Callable[[], str]) -> list[HistoryEntry]:
    """Start a chain for every player in ``order`` who has none yet."""
    filled = []
    for pid in room.order:
        if find_entry(room, pid) is None:
            filled.append(start_chain(room, pid, make_prompt(), placeholder=True))
    return filled


def count_reached(room: Room, kind: StepKind) -> int:
    return sum(1 for entry in room.history if entry.step(kind) is not None)


def serialize_entry(entry: HistoryEntry) -> dict:
    return {
        "owner": entry.owner,
        "sequence": [
            {"type": s.kind, "by": s.by, "data": s.data, "placeholder": s.placeholder}
            for s in entry.steps
        ],
    }


def serialize_history(room: Room) -> list[dict]:
    return [serialize_entry(e) for e in room.history]
