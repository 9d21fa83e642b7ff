from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

Phase = Literal["setup", "collect", "process", "event", "result"]
EventPhase = Literal["bad", "good", "complete"]
IntelStatus = Literal["bad", "resolved", "good"]
IntelType = Literal["secret", "public", "rumor"]
Category = Literal["info", "success", "fail"]
Rating = Literal["fail", "success", "perfect"]

DIE_FACES: tuple[int, ...] = (1, 2, 3, 4, 5, 6)


@dataclass(frozen=True)
class DifficultyProfile:
    id: str
    bad_intel_count: int
    good300_count: int
    good100_count: int


@dataclass(frozen=True)
class NPCDefinition:
    name: str
    role: str
    base_rate: int | None = None  # None = drawn at NPC creation


@dataclass(frozen=True)
class IntelNames:
    """Display names per topic, split by polarity."""

    good: dict[int, tuple[str, ...]]
    bad: dict[int, tuple[str, ...]]

    def pick(self, rng: random.Random, topic: int, is_good: bool) -> str:
        table = self.good if is_good else self.bad
        names = table.get(topic)
        if not names:
            return f"Topic {topic} {'lead' if is_good else 'risk'}"
        return rng.choice(names)


@dataclass
class Intel:
    id: str
    name: str
    topic: int
    status: IntelStatus
    score: int
    numbers: list[int]
    knowers: list[str] = field(default_factory=list)
    rumor: bool = False  # coin flip used when a widely known bad intel is classified

    @property
    def is_good(self) -> bool:
        return self.status != "bad"

    @property
    def was_bad(self) -> bool:
        return self.status in ("bad", "resolved")

    @property
    def type(self) -> IntelType:
        if len(self.knowers) == 1:
            return "secret"
        if self.status == "bad" and len(self.knowers) >= 3:
            return "rumor" if self.rumor else "public"
        return "public"

    def resolve(self) -> None:
        if self.status != "bad":
            raise ValueError(f"Intel {self.id} is not an unresolved bad intel.")
        self.status = "resolved"

    def add_knower(self, npc_name: str) -> bool:
        if npc_name in self.knowers:
            return False
        self.knowers.append(npc_name)
        return True

    def add_random_number(self, rng: random.Random) -> int | None:
        available = [n for n in DIE_FACES if n not in self.numbers]
        if not available:
            return None
        new_num = rng.choice(available)
        self.numbers.append(new_num)
        return new_num

    def deduct(self, amount: int) -> int:
        dealt = min(amount, self.score)
        self.score = max(0, self.score - dealt)
        return dealt


@dataclass
class NPC:
    name: str
    role: str
    base_rate: int
    current_rate: int
    known_intels: list[str] = field(default_factory=list)
    current_number: int | None = None

    def roll_number(self, rng: random.Random) -> int:
        return rng.randint(1, 6)

    def refresh_number(self, rng: random.Random) -> int:
        self.current_number = self.roll_number(rng)
        return self.current_number

    def add_intel(self, intel: Intel) -> None:
        if intel.id not in self.known_intels:
            self.known_intels.append(intel.id)

    def knows_intel(self, intel: Intel) -> bool:
        return intel.id in self.known_intels


@dataclass(frozen=True)
class ContentBundle:
    """Everything the engine needs from content files to start a run."""

    profiles: dict[str, DifficultyProfile]
    npc_pool: tuple[NPCDefinition, ...]
    names: IntelNames | None = None

    def difficulty_ids(self) -> Sequence[str]:
        return list(self.profiles.keys())
