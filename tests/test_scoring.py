from __future__ import annotations

from dataclasses import asdict

import pytest

from parley.engine.scoring import (
    FeverState,
    calculate_result,
    display_score,
    enter_fever,
    fever_multiplier,
    match_multiplier,
    rate,
    resolve_with_dice,
    settle_fever,
)
from parley.engine.types import Intel


def test_match_multiplier_table() -> None:
    assert [match_multiplier(n) for n in range(0, 7)] == [0, 1, 2, 4, 8, 8, 8]


def test_fever_multiplier_formula() -> None:
    fever = FeverState()
    for n in range(1, 11):
        enter_fever(fever)
        assert fever.streak == n
        assert fever.multiplier == 1.0 + (n - 1) * 0.1
        assert fever_multiplier(n) == 1.0 + (n - 1) * 0.1


def test_settle_applies_multiplier_once_to_ledger_sum() -> None:
    fever = FeverState()
    enter_fever(fever)
    fever.scores.append(300.0)
    enter_fever(fever)
    fever.scores.append(200.0)
    assert fever.multiplier == pytest.approx(1.1)

    settled = settle_fever(fever)
    assert settled == pytest.approx(550.0)
    assert not fever.active
    assert fever.scores == [] and fever.streak == 0 and fever.multiplier == 1.0


def test_settle_is_idempotent_on_empty_ledger() -> None:
    fever = FeverState()
    assert settle_fever(fever) == 0.0
    before = asdict(fever)
    assert settle_fever(fever) == 0.0
    assert asdict(fever) == before

    enter_fever(fever)
    assert settle_fever(fever) == 0.0
    assert asdict(fever) == before


def test_display_score_shows_unsettled_fever() -> None:
    fever = FeverState()
    enter_fever(fever)
    enter_fever(fever)
    fever.scores.extend([100.0, 250.5])
    breakdown = display_score(1000.0, fever)
    assert breakdown.settled == 1000.0
    assert breakdown.fever_base == 350.5
    assert breakdown.fever_multiplier == pytest.approx(1.1)
    assert breakdown.display == int(1000.0 + 350.5 * 1.1)


def test_resolve_with_dice_counts_every_matching_die() -> None:
    outcome = resolve_with_dice([1, 4, 6], 6, [4])
    assert outcome.match_count == 2
    assert outcome.rolls == (6, 4)
    assert outcome.success

    outcome = resolve_with_dice([2, 5], 3, [])
    assert outcome.match_count == 0
    assert not outcome.success

    # Duplicate dice each count
    assert resolve_with_dice([2, 5], 2, [2, 5, 5]).match_count == 4


def test_rate_thresholds() -> None:
    assert rate(1200, 1800, 4800) == "fail"
    assert rate(2000, 1800, 4800) == "success"
    assert rate(5000, 1800, 4800) == "perfect"


def test_calculate_result_uses_processed_non_skipped_scores() -> None:
    intels = [
        Intel(id="a", name="a", topic=1, status="resolved", score=100, numbers=[1, 2, 3]),
        Intel(id="b", name="b", topic=1, status="bad", score=0, numbers=[1, 2, 3]),
        Intel(id="c", name="c", topic=1, status="good", score=300, numbers=[1, 2]),
        Intel(id="d", name="d", topic=1, status="good", score=300, numbers=[3, 4]),
        Intel(id="e", name="e", topic=1, status="good", score=100, numbers=[1, 5, 6]),
    ]
    result = calculate_result(intels, {"a", "b", "c", "d"}, {"d"}, 1234.9)
    assert result.base_score == 400
    assert result.tier1 == 600
    assert result.tier2 == 1600
    assert result.total_score == 1234
    assert result.rating == "fail"
