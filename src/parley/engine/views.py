"""Read-only queries a presenter renders from.

Nothing here mutates state or draws from the run's random source.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .game import GameState, auto_assistants, eligible_assistants
from .scoring import FinalResult, ScoreBreakdown, display_score
from .types import EventPhase, Intel, IntelType, Phase

CardKind = Literal["resolve", "bonus", "play", "none"]


@dataclass(frozen=True)
class CurrentCard:
    intel: Intel | None
    kind: CardKind
    index: int
    total: int


@dataclass(frozen=True)
class IntelView:
    id: str
    name: str
    topic: int
    type: IntelType
    score: int
    numbers: tuple[int, ...]
    knowers: tuple[str, ...]
    is_good: bool
    processed: bool
    processed_in_stage: bool
    pending_shares: tuple[str, ...]


@dataclass(frozen=True)
class NPCView:
    name: str
    role: str
    base_rate: int
    current_rate: int
    current_number: int | None
    participating: bool
    interacted: bool
    knows_card: bool
    can_assist: bool
    auto_selected: bool


@dataclass(frozen=True)
class StatusView:
    phase: Phase
    topic: int
    action_points: int
    max_action_points: int
    event_phase: EventPhase
    fever_active: bool
    score: ScoreBreakdown


def current_card(state: GameState) -> CurrentCard:
    if state.phase != "event":
        return CurrentCard(intel=None, kind="none", index=0, total=0)

    if state.bonus_intel_id is not None:
        return CurrentCard(
            intel=state.find_intel(state.bonus_intel_id),
            kind="bonus",
            index=state.event_bad_index,
            total=state.original_bad_count,
        )

    if state.event_phase == "bad":
        bad = state.topic_bad_intels()
        if state.event_bad_index < len(bad):
            return CurrentCard(
                intel=bad[state.event_bad_index],
                kind="resolve",
                index=state.event_bad_index,
                total=state.original_bad_count,
            )

    if state.event_phase == "good":
        remaining = playable_good_intels(state)
        if remaining:
            return CurrentCard(
                intel=remaining[0],
                kind="play",
                index=state.event_good_index,
                total=state.original_good_count,
            )

    return CurrentCard(intel=None, kind="none", index=0, total=0)


def playable_good_intels(state: GameState) -> list[Intel]:
    if state.phase != "event" or state.event_phase != "good":
        return []
    return [i for i in state.topic_good_intels() if i.id not in state.processed_intels]


def intel_view(state: GameState, intel: Intel) -> IntelView:
    return IntelView(
        id=intel.id,
        name=intel.name,
        topic=intel.topic,
        type=intel.type,
        score=intel.score,
        numbers=tuple(intel.numbers),
        knowers=tuple(intel.knowers),
        is_good=intel.is_good,
        processed=intel.id in state.processed_intels,
        processed_in_stage=intel.id in state.processed_in_process_stage,
        pending_shares=tuple(state.pending_shares.get(intel.id, [])),
    )


def collected_by_topic(state: GameState) -> dict[int, list[IntelView]]:
    groups: dict[int, list[IntelView]] = {t: [] for t in range(1, state.config.topic_count + 1)}
    for intel in state.intels:
        if intel.id in state.collected_intels:
            groups.setdefault(intel.topic, []).append(intel_view(state, intel))
    return groups


def npc_views(state: GameState, card: Intel | None = None) -> list[NPCView]:
    """NPC panel; `card` defaults to the card currently on the table."""
    if card is None:
        card = current_card(state).intel
    eligible = eligible_assistants(state, card) if card is not None else set()
    auto = auto_assistants(state, card) if card is not None else set()
    out: list[NPCView] = []
    for npc in state.npcs:
        out.append(
            NPCView(
                name=npc.name,
                role=npc.role,
                base_rate=npc.base_rate,
                current_rate=npc.current_rate,
                current_number=npc.current_number,
                participating=npc.name in state.participants,
                interacted=npc.name in state.interacted_npcs,
                knows_card=card is not None and npc.knows_intel(card),
                can_assist=npc.name in eligible,
                auto_selected=npc.name in auto,
            )
        )
    return out


def status_view(state: GameState) -> StatusView:
    return StatusView(
        phase=state.phase,
        topic=state.current_topic,
        action_points=state.action_points,
        max_action_points=state.config.action_points,
        event_phase=state.event_phase,
        fever_active=state.fever.active,
        score=display_score(state.total_score, state.fever),
    )


def final_result(state: GameState) -> FinalResult | None:
    return state.final_result
