from __future__ import annotations

import random
from typing import Sequence

from .types import NPC, NPCDefinition


def create_npc(definition: NPCDefinition, rng: random.Random, max_base_rate: int = 90) -> NPC:
    base = definition.base_rate if definition.base_rate is not None else rng.randint(0, max_base_rate)
    return NPC(name=definition.name, role=definition.role, base_rate=base, current_rate=base)


def create_npcs(pool: Sequence[NPCDefinition], rng: random.Random, max_base_rate: int = 90) -> list[NPC]:
    return [create_npc(d, rng, max_base_rate) for d in pool]


def pick_participants(npcs: Sequence[NPC], count: int, rng: random.Random) -> list[NPC]:
    """Draw `count` NPCs uniformly; result keeps pool order for stable display."""
    if count > len(npcs):
        raise ValueError(f"NPC pool has {len(npcs)} entries, need {count}.")
    chosen = set(n.name for n in rng.sample(list(npcs), count))
    return [n for n in npcs if n.name in chosen]
