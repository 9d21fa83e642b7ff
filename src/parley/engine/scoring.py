from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from .types import Intel, Rating

FEVER_STEP = 0.1
TIER1_FACTOR = 1.5
TIER2_FACTOR = 4.0


@dataclass(frozen=True)
class DiceOutcome:
    rolls: tuple[int, ...]  # player die first, then assistants in roll order
    matched: tuple[int, ...]
    match_count: int

    @property
    def success(self) -> bool:
        return self.match_count > 0


def resolve_with_dice(
    numbers: Sequence[int], player_roll: int, assisting_numbers: Iterable[int]
) -> DiceOutcome:
    """Count how many of the rolled dice land on one of the intel's numbers."""
    rolls = (player_roll, *assisting_numbers)
    matched = tuple(d for d in rolls if d in numbers)
    return DiceOutcome(rolls=rolls, matched=matched, match_count=len(matched))


def match_multiplier(match_count: int) -> int:
    if match_count <= 0:
        return 0
    if match_count == 1:
        return 1
    if match_count == 2:
        return 2
    if match_count == 3:
        return 4
    return 8


def fever_multiplier(streak: int) -> float:
    if streak <= 0:
        return 1.0
    return 1.0 + (streak - 1) * FEVER_STEP


@dataclass
class FeverState:
    active: bool = False
    streak: int = 0
    scores: list[float] = field(default_factory=list)
    multiplier: float = 1.0

    def ledger_sum(self) -> float:
        return float(sum(self.scores))


def enter_fever(fever: FeverState) -> float:
    if not fever.active:
        fever.active = True
        fever.streak = 0
        fever.scores = []
        fever.multiplier = 1.0
    fever.streak += 1
    fever.multiplier = fever_multiplier(fever.streak)
    return fever.multiplier


def settle_fever(fever: FeverState) -> float:
    """Close the streak and return the amount to fold into the settled total.

    The multiplier is applied once, to the ledger sum.
    """
    settled = 0.0
    if fever.active and fever.scores:
        settled = fever.ledger_sum() * fever.multiplier
    fever.active = False
    fever.streak = 0
    fever.scores = []
    fever.multiplier = 1.0
    return settled


@dataclass(frozen=True)
class ScoreBreakdown:
    settled: float
    fever_base: float
    fever_multiplier: float
    fever_total: float
    display: int


def display_score(total_score: float, fever: FeverState) -> ScoreBreakdown:
    base = fever.ledger_sum()
    fever_total = base * fever.multiplier
    return ScoreBreakdown(
        settled=total_score,
        fever_base=base,
        fever_multiplier=fever.multiplier,
        fever_total=fever_total,
        display=math.floor(total_score + fever_total),
    )


@dataclass(frozen=True)
class FinalResult:
    base_score: int
    tier1: float
    tier2: float
    total_score: int
    rating: Rating


def rate(score: float, tier1: float, tier2: float) -> Rating:
    if score >= tier2:
        return "perfect"
    if score >= tier1:
        return "success"
    return "fail"


def calculate_result(
    intels: Iterable[Intel],
    processed: set[str],
    skipped: set[str],
    total_score: float,
) -> FinalResult:
    # Thresholds are derived from, and compared against, the un-multiplied base.
    base = sum(i.score for i in intels if i.id in processed and i.id not in skipped)
    tier1 = base * TIER1_FACTOR
    tier2 = base * TIER2_FACTOR
    return FinalResult(
        base_score=base,
        tier1=tier1,
        tier2=tier2,
        total_score=math.floor(total_score),
        rating=rate(base, tier1, tier2),
    )
