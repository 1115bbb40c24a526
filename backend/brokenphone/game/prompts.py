from __future__ import annotations

import random


DEFAULT_PROMPTS = [
    "ghost",
    "haunted house",
    "black cat",
    "pumpkin",
    "witch on a broom",
    "vampire at the dentist",
    "skeleton dancing",
    "bat in a cave",
    "zombie eating cereal",
    "spider web",
    "full moon",
    "candy bucket",
    "scarecrow",
    "mummy on vacation",
    "werewolf haircut",
    "cauldron",
    "graveyard",
    "monster under the bed",
    "owl with glasses",
    "jack-o'-lantern",
]


def pick_prompts(words: list[str], count: int) -> list[str]:
    pool = [w for w in dict.fromkeys(words) if w]
    if not pool:
        return []
    count = max(1, min(count, len(pool)))
    return random.sample(pool, count)


def random_prompt(words: list[str] | None = None) -> str:
    picked = pick_prompts(words or DEFAULT_PROMPTS, 1)
    return picked[0] if picked else "ghost"
