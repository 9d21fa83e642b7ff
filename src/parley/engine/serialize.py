from __future__ import annotations

from dataclasses import asdict

from .actions import (
    Action,
    ApplyBonusAction,
    CollectAction,
    PlayGoodIntelAction,
    ProcessIntelAction,
    ResolveBadIntelAction,
    SkipGoodIntelAction,
    StartGameAction,
    ToggleShareAction,
)
from .game import GameState
from .types import NPC, Intel

_ACTION_TYPES: dict[str, str] = {
    "StartGameAction": "start",
    "CollectAction": "collect",
    "AdvanceToProcessAction": "to_process",
    "ProcessIntelAction": "process",
    "ToggleShareAction": "toggle_share",
    "AdvanceToEventAction": "to_event",
    "ResolveBadIntelAction": "resolve_bad",
    "ApplyBonusAction": "bonus",
    "PlayGoodIntelAction": "play_good",
    "SkipGoodIntelAction": "skip_good",
    "SkipRemainingGoodAction": "skip_remaining",
    "AdvanceTopicAction": "advance_topic",
    "RestartAction": "restart",
}


def action_to_dict(a: Action) -> dict[str, object]:
    out: dict[str, object] = {"type": _ACTION_TYPES.get(type(a).__name__, "unknown")}
    if isinstance(a, StartGameAction):
        out["difficulty"] = a.difficulty
    elif isinstance(a, CollectAction):
        out["npc"] = a.npc
    elif isinstance(a, ProcessIntelAction | SkipGoodIntelAction):
        out["intel_id"] = a.intel_id
    elif isinstance(a, ToggleShareAction):
        out.update({"intel_id": a.intel_id, "npc": a.npc, "checked": a.checked})
    elif isinstance(a, ResolveBadIntelAction | ApplyBonusAction | PlayGoodIntelAction):
        out.update({"intel_id": a.intel_id, "assistants": list(a.assistants)})
    return out


def _intel_to_dict(i: Intel) -> dict[str, object]:
    return {
        "id": i.id,
        "name": i.name,
        "topic": i.topic,
        "status": i.status,
        "score": i.score,
        "numbers": list(i.numbers),
        "knowers": list(i.knowers),
        "type": i.type,
    }


def _npc_to_dict(n: NPC) -> dict[str, object]:
    return {
        "name": n.name,
        "role": n.role,
        "base_rate": n.base_rate,
        "current_rate": n.current_rate,
        "known_intels": list(n.known_intels),
        "current_number": n.current_number,
    }


def snapshot(state: GameState) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current run state."""
    return {
        "seed": state.seed,
        "phase": state.phase,
        "difficulty": state.difficulty,
        "action_points": state.action_points,
        "current_topic": state.current_topic,
        "participants": list(state.participants),
        "npcs": [_npc_to_dict(n) for n in state.npcs],
        "intels": [_intel_to_dict(i) for i in state.intels],
        "collected_intels": sorted(state.collected_intels),
        "processed_intels": sorted(state.processed_intels),
        "skipped_intels": sorted(state.skipped_intels),
        "interacted_npcs": sorted(state.interacted_npcs),
        "pending_shares": {k: list(v) for k, v in sorted(state.pending_shares.items())},
        "event": {
            "phase": state.event_phase,
            "bad_index": state.event_bad_index,
            "good_index": state.event_good_index,
            "original_bad_count": state.original_bad_count,
            "original_good_count": state.original_good_count,
            "bonus_intel_id": state.bonus_intel_id,
        },
        "fever": {
            "active": state.fever.active,
            "streak": state.fever.streak,
            "scores": list(state.fever.scores),
            "multiplier": state.fever.multiplier,
        },
        "total_score": state.total_score,
        "final_result": asdict(state.final_result) if state.final_result is not None else None,
        "action_log": [action_to_dict(a) for a in state.action_log],
    }
