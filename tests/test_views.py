from __future__ import annotations

from parley.engine.actions import ResolveBadIntelAction
from parley.engine.game import step
from parley.engine.views import collected_by_topic, current_card, npc_views, status_view

from helpers import event_game, fail_current_bad, set_numbers, started_game


def test_status_and_collected_views_before_event() -> None:
    state = started_game(seed=30)
    status = status_view(state)
    assert status.phase == "collect"
    assert status.action_points == status.max_action_points == 10
    assert status.score.display == 0
    assert current_card(state).kind == "none"

    groups = collected_by_topic(state)
    assert set(groups) == {1, 2, 3}
    shown = [v.id for views in groups.values() for v in views]
    assert sorted(shown) == sorted(state.collected_intels)
    assert all(not v.processed for views in groups.values() for v in views)


def test_card_sequence_through_a_topic() -> None:
    state, rng = event_game(seed=31)
    card = current_card(state)
    assert card.kind == "resolve" and card.index == 0 and card.total == 1

    intel = card.intel
    assert intel is not None
    intel.numbers = [2, 5]
    set_numbers(state, 1)
    rng.script(rolls=[5])
    step(state, ResolveBadIntelAction(intel_id=intel.id))
    bonus = current_card(state)
    assert bonus.kind == "bonus" and bonus.intel is intel

    state2, rng2 = event_game(seed=32)
    fail_current_bad(state2, rng2)
    play = current_card(state2)
    assert play.kind == "play" and play.total == 3
    assert play.intel is not None and play.intel.is_good


def test_npc_panel_marks_idle_npc() -> None:
    state, _ = event_game(seed=33)
    views = npc_views(state)
    assert len(views) == 4
    idle = [v for v in views if not v.participating]
    assert len(idle) == 1
    assert idle[0].current_number is None
    assert not idle[0].can_assist
    for v in views:
        if v.auto_selected:
            assert v.can_assist
