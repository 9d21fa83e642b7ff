from __future__ import annotations

import random
from collections import deque
from typing import Iterable

from parley.engine.actions import AdvanceToEventAction, AdvanceToProcessAction, ResolveBadIntelAction, StartGameAction
from parley.engine.game import GameState, new_game, step
from parley.engine.types import ContentBundle
from parley.engine.views import current_card
from parley.paths import get_paths
from parley.services.content import ContentService


class ScriptedRandom(random.Random):
    """Random source whose dice and probability draws can be queued up front.

    Queued values are consumed first; afterwards it behaves like a seeded
    `random.Random`.
    """

    def __init__(self) -> None:
        super().__init__(0)
        self._rolls: deque[int] = deque()
        self._floats: deque[float] = deque()

    def script(self, rolls: Iterable[int] = (), floats: Iterable[float] = ()) -> "ScriptedRandom":
        self._rolls.extend(rolls)
        self._floats.extend(floats)
        return self

    def randint(self, a: int, b: int) -> int:
        if self._rolls:
            return self._rolls.popleft()
        return super().randint(a, b)

    def random(self) -> float:
        if self._floats:
            return self._floats.popleft()
        return super().random()


def load_content() -> ContentBundle:
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    return content.load_bundle()


def started_game(difficulty: str = "easy", seed: int = 7) -> GameState:
    state = new_game(load_content(), seed=seed)
    res = step(state, StartGameAction(difficulty=difficulty))
    assert res.ok
    return state


def event_game(difficulty: str = "easy", seed: int = 7) -> tuple[GameState, ScriptedRandom]:
    """A run that has just entered topic 1, with a scripted random source installed."""
    state = started_game(difficulty, seed)
    step(state, AdvanceToProcessAction())
    step(state, AdvanceToEventAction())
    assert state.phase == "event"
    rng = ScriptedRandom()
    state.rng = rng
    return state, rng


def set_numbers(state: GameState, number: int) -> None:
    for npc in state.participating_npcs():
        npc.current_number = number


def fail_current_bad(state: GameState, rng: ScriptedRandom) -> None:
    card = current_card(state)
    assert card.kind == "resolve" and card.intel is not None
    card.intel.numbers = [2, 5]
    set_numbers(state, 1)
    rng.script(rolls=[1])
    res = step(state, ResolveBadIntelAction(intel_id=card.intel.id))
    assert res.ok and res.data["success"] is False
