from __future__ import annotations

import random
from typing import Sequence

from .types import DIE_FACES, NPC, DifficultyProfile, Intel, IntelNames

# 100-point intel carries 3 faces, 300-point intel 2
NUMBER_COUNTS: dict[int, int] = {100: 3, 300: 2}


class IntelGenerator:
    """Builds the intel roster for a run.

    All randomness goes through the injected `rng` so a run can be replayed
    from its seed.
    """

    def __init__(self, rng: random.Random, names: IntelNames | None = None) -> None:
        self._rng = rng
        self._names = names
        self._id_counter = 0

    def _next_id(self) -> str:
        self._id_counter += 1
        return f"intel_{self._id_counter}"

    def _name_for(self, topic: int, is_good: bool) -> str:
        if self._names is None:
            return f"Topic {topic} {'lead' if is_good else 'risk'}"
        return self._names.pick(self._rng, topic, is_good)

    def generate_numbers(self, score: int) -> list[int]:
        count = NUMBER_COUNTS.get(score, 3)
        return self._rng.sample(list(DIE_FACES), count)

    def pick_knowers(self, npcs: Sequence[NPC], count: int) -> list[str]:
        count = min(count, len(npcs))
        return [npc.name for npc in self._rng.sample(list(npcs), count)]

    def create_intel(self, topic: int, is_good: bool, score: int, knowers: Sequence[str]) -> Intel:
        intel = Intel(
            id=self._next_id(),
            name=self._name_for(topic, is_good),
            topic=topic,
            status="good" if is_good else "bad",
            score=score,
            numbers=self.generate_numbers(score),
            rumor=self._rng.random() < 0.5,
        )
        for name in knowers:
            intel.add_knower(name)
        return intel

    def generate_topic_intels(
        self, topic: int, profile: DifficultyProfile, npcs: Sequence[NPC]
    ) -> list[Intel]:
        intels: list[Intel] = []
        for _ in range(profile.bad_intel_count):
            intels.append(self.create_intel(topic, False, 100, self.pick_knowers(npcs, 1)))
        for _ in range(profile.good300_count):
            intels.append(self.create_intel(topic, True, 300, self.pick_knowers(npcs, 2)))
        for _ in range(profile.good100_count):
            intels.append(self.create_intel(topic, True, 100, self.pick_knowers(npcs, 1)))
        return intels

    def distribute_intels_to_npcs(self, all_intels: Sequence[Intel], npcs: Sequence[NPC]) -> None:
        """Make sure every NPC knows at least one intel, then link knowledge both ways."""
        if all_intels:
            for npc in npcs:
                if any(npc.name in intel.knowers for intel in all_intels):
                    continue
                self._rng.choice(list(all_intels)).add_knower(npc.name)

        for npc in npcs:
            for intel in all_intels:
                if npc.name in intel.knowers:
                    npc.add_intel(intel)
