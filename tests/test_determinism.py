from __future__ import annotations

from parley.engine.actions import RestartAction
from parley.engine.autoplay import AutoplaySpec, play_run
from parley.engine.game import new_game, replay, step
from parley.engine.serialize import snapshot

from helpers import load_content


def test_engine_determinism_replay() -> None:
    content = load_content()
    seed = 424242
    state1 = new_game(content, seed=seed)
    play_run(state1, AutoplaySpec(difficulty="hard"))
    assert state1.phase == "result"

    snap1 = snapshot(state1)
    state2 = replay(content, seed=seed, actions=list(state1.action_log))
    snap2 = snapshot(state2)

    assert snap1 == snap2


def test_same_seed_same_run() -> None:
    content = load_content()
    a = new_game(content, seed=99)
    b = new_game(content, seed=99)
    play_run(a, AutoplaySpec())
    play_run(b, AutoplaySpec())
    assert snapshot(a) == snapshot(b)
    assert a.event_log == b.event_log


def test_autoplay_settles_every_run() -> None:
    content = load_content()
    for seed in range(10):
        state = new_game(content, seed=seed)
        play_run(state, AutoplaySpec(difficulty="easy" if seed % 2 else "hard"))
        assert state.phase == "result"
        assert state.final_result is not None
        assert 0 <= state.action_points <= 10
        assert state.processed_intels == {i.id for i in state.intels}
        assert not state.fever.active


def test_restart_returns_to_setup() -> None:
    content = load_content()
    state = new_game(content, seed=5)
    play_run(state, AutoplaySpec())
    res = step(state, RestartAction())
    assert res.ok
    assert state.phase == "setup"
    assert state.intels == []
    assert state.total_score == 0.0
    assert state.action_points == 10
    assert all(npc.current_number is None for npc in state.npcs)

    play_run(state, AutoplaySpec())
    assert state.phase == "result"
