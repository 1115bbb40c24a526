"""Round-robin duty rotation.

A chain started by ``owner`` is drawn by the next player in ``order`` and
guessed by the one after that. With two players both duties go to the other
player. Resolution is pure index arithmetic over the live order, so a
departure shifts every later result.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


DRAWER_OFFSET = 1
GUESSER_OFFSET = 2


@dataclass(frozen=True)
class Duty:
    owner_id: str
    player_id: str | None

    @property
    def assigned(self) -> bool:
        return self.player_id is not None

    def is_for(self, player_id: str) -> bool:
        return self.assigned and self.player_id == player_id


def resolve(order: Sequence[str], owner_id: str, offset: int) -> Duty:
    n = len(order)
    if n < 2 or owner_id not in order:
        return Duty(owner_id=owner_id, player_id=None)
    idx = list(order).index(owner_id)
    # An offset that wraps onto the owner (guesser with two players) falls to the next player.
    shift = offset % n or 1
    return Duty(owner_id=owner_id, player_id=order[(idx + shift) % n])


def drawer_for(order: Sequence[str], owner_id: str) -> Duty:
    return resolve(order, owner_id, DRAWER_OFFSET)


def guesser_for(order: Sequence[str], owner_id: str) -> Duty:
    return resolve(order, owner_id, GUESSER_OFFSET)
