from __future__ import annotations

from dataclasses import dataclass

from .actions import (
    Action,
    AdvanceToEventAction,
    AdvanceToProcessAction,
    AdvanceTopicAction,
    ApplyBonusAction,
    CollectAction,
    PlayGoodIntelAction,
    ProcessIntelAction,
    ResolveBadIntelAction,
    StartGameAction,
)
from .game import GameState, StepResult, step
from .types import Intel
from .views import current_card, playable_good_intels


@dataclass(frozen=True)
class AutoplaySpec:
    """Scripted player tuning.

    process_budget:
      action points held back from collection so the process stage
      still has something to spend
    """

    difficulty: str = "easy"
    process_budget: int = 4


def _pick_collect_target(state: GameState) -> str | None:
    best: tuple[int, str] | None = None
    for npc in state.participating_npcs():
        if npc.name in state.interacted_npcs:
            continue
        if best is None or npc.current_rate > best[0]:
            best = (npc.current_rate, npc.name)
    return best[1] if best is not None else None


def _pick_process_target(state: GameState) -> Intel | None:
    candidates = [
        i for i in state.intels if i.id in state.collected_intels and len(i.numbers) < 6
    ]
    if not candidates:
        return None
    # Fewest numbers first: every extra face is worth most there
    return min(candidates, key=lambda i: (len(i.numbers), -i.score, i.id))


def choose_action(state: GameState, spec: AutoplaySpec) -> Action | None:
    """Pick the next action; None once the run has settled.

    Never draws from `state.rng`, so a recorded run replays exactly.
    """
    if state.phase == "setup":
        return StartGameAction(difficulty=spec.difficulty)

    if state.phase == "collect":
        if state.action_points > spec.process_budget:
            target = _pick_collect_target(state)
            if target is not None:
                return CollectAction(npc=target)
        return AdvanceToProcessAction()

    if state.phase == "process":
        if state.action_points > 0:
            intel = _pick_process_target(state)
            if intel is not None:
                return ProcessIntelAction(intel_id=intel.id)
        return AdvanceToEventAction()

    if state.phase == "event":
        card = current_card(state)
        if card.intel is None:
            return AdvanceTopicAction()
        if card.kind == "bonus":
            return ApplyBonusAction(intel_id=card.intel.id)
        if card.kind == "resolve":
            return ResolveBadIntelAction(intel_id=card.intel.id)
        best = max(playable_good_intels(state), key=lambda i: (i.score, len(i.numbers)))
        return PlayGoodIntelAction(intel_id=best.id)

    return None


def play_run(state: GameState, spec: AutoplaySpec, max_steps: int = 500) -> list[StepResult]:
    results: list[StepResult] = []
    for _ in range(max_steps):
        action = choose_action(state, spec)
        if action is None:
            break
        results.append(step(state, action))
    return results
