from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal


Phase = Literal["waiting", "writing", "drawing", "guessing", "reveal", "finished"]
StepKind = Literal["prompt", "drawing", "guess"]

# Chains grow in this order, one step per active phase.
STEP_ORDER: tuple[StepKind, ...] = ("prompt", "drawing", "guess")

PHASE_STEP: dict[str, StepKind] = {
    "writing": "prompt",
    "drawing": "drawing",
    "guessing": "guess",
}

ACTIVE_PHASES = ("writing", "drawing", "guessing")


@dataclass
class Player:
    id: str
    name: str


@dataclass
class ContributionStep:
    kind: StepKind
    by: str
    data: Any
    placeholder: bool = False


@dataclass
class HistoryEntry:
    owner: str
    steps: list[ContributionStep] = field(default_factory=list)

    def step(self, kind: StepKind) -> ContributionStep | None:
        for s in self.steps:
            if s.kind == kind:
                return s
        return None


@dataclass
class RoomSettings:
    max_rounds: int = 3
    seconds_per_turn: int = 60
    mode: str = "classic"


@dataclass
class Room:
    id: str
    host_id: str | None = None
    phase: Phase = "waiting"
    round: int = 0
    max_rounds: int = 3
    seconds_per_turn: int = 60
    mode: str = "classic"
    players: dict[str, Player] = field(default_factory=dict)
    order: list[str] = field(default_factory=list)
    # Joined while duties were out; seated in `order` when the round reaches reveal.
    bench: list[str] = field(default_factory=list)
    history: list[HistoryEntry] = field(default_factory=list)
    # Bumped on every phase entry; timers and early advances carry the value
    # they were issued under.
    phase_seq: int = 0
    timer: Any = None

    def apply_settings(self, settings: RoomSettings) -> None:
        self.max_rounds = settings.max_rounds
        self.seconds_per_turn = settings.seconds_per_turn
        self.mode = settings.mode
