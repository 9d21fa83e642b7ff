from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Iterable, Sequence

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
    RestartAction,
    SkipGoodIntelAction,
    SkipRemainingGoodAction,
    StartGameAction,
    ToggleShareAction,
)
from .intel import IntelGenerator
from .npc import create_npcs, pick_participants
from .scoring import (
    DiceOutcome,
    FeverState,
    FinalResult,
    calculate_result,
    enter_fever,
    match_multiplier,
    resolve_with_dice,
    settle_fever,
)
from .types import DIE_FACES, NPC, Category, ContentBundle, EventPhase, Intel, Phase

Event = dict[str, object]


@dataclass(frozen=True)
class GameConfig:
    topic_count: int = 3
    action_points: int = 10
    participant_count: int = 3
    initial_collected_min: float = 0.3
    initial_collected_max: float = 0.7
    collect_rate_step: int = 10
    rate_cap: int = 100
    max_base_rate: int = 90
    fail_penalty: int = 100


@dataclass
class StepResult:
    ok: bool
    events: list[Event]
    error: str | None = None
    data: dict[str, object] = field(default_factory=dict)


@dataclass
class GameState:
    content: ContentBundle
    config: GameConfig
    seed: int
    rng: random.Random
    npcs: list[NPC] = field(default_factory=list)
    phase: Phase = "setup"
    difficulty: str | None = None
    action_points: int = 0
    current_topic: int = 1
    participants: list[str] = field(default_factory=list)
    intels: list[Intel] = field(default_factory=list)
    collected_intels: set[str] = field(default_factory=set)
    processed_intels: set[str] = field(default_factory=set)
    skipped_intels: set[str] = field(default_factory=set)
    processed_in_process_stage: set[str] = field(default_factory=set)  # display only
    interacted_npcs: set[str] = field(default_factory=set)
    pending_shares: dict[str, list[str]] = field(default_factory=dict)

    event_phase: EventPhase = "bad"
    event_bad_index: int = 0
    event_good_index: int = 0
    original_bad_count: int = 0
    original_good_count: int = 0
    bonus_intel_id: str | None = None
    # intel id -> npc name -> passed the knowledge alignment check this topic
    alignment: dict[str, dict[str, bool]] = field(default_factory=dict)

    fever: FeverState = field(default_factory=FeverState)
    total_score: float = 0.0
    final_result: FinalResult | None = None

    action_log: list[Action] = field(default_factory=list)
    event_log: list[Event] = field(default_factory=list)

    def find_intel(self, intel_id: str) -> Intel | None:
        for intel in self.intels:
            if intel.id == intel_id:
                return intel
        return None

    def find_npc(self, name: str) -> NPC | None:
        for npc in self.npcs:
            if npc.name == name:
                return npc
        return None

    def participating_npcs(self) -> list[NPC]:
        return [npc for npc in self.npcs if npc.name in self.participants]

    def topic_intels(self, topic: int | None = None) -> list[Intel]:
        t = self.current_topic if topic is None else topic
        return [i for i in self.intels if i.topic == t]

    def topic_bad_intels(self) -> list[Intel]:
        return [i for i in self.topic_intels() if i.was_bad]

    def topic_good_intels(self) -> list[Intel]:
        return [i for i in self.topic_intels() if not i.was_bad]

    def unprocessed_topic_intels(self) -> list[Intel]:
        return [i for i in self.topic_intels() if i.id not in self.processed_intels]


def _narrate(state: GameState, type_: str, category: Category, message: str, **fields: object) -> None:
    ev: Event = {"type": type_, "category": category, "message": message}
    ev.update(fields)
    state.event_log.append(ev)


def _ok(**data: object) -> StepResult:
    return StepResult(ok=True, events=[], data=dict(data))


def _fail(state: GameState, error: str, *, narrate: bool = True, **data: object) -> StepResult:
    # Unknown ids are caller bugs; they are rejected without narration.
    if narrate:
        _narrate(state, "ACTION_REJECTED", "fail", error)
    return StepResult(ok=False, events=[], error=error, data=dict(data))


def _wrong_phase(state: GameState, expected: Phase) -> StepResult:
    return _fail(state, f"Only allowed during the {expected} phase (now {state.phase}).")


def _no_points(state: GameState) -> StepResult:
    return _fail(state, "Not enough action points.")


def _reset_run(state: GameState) -> None:
    cfg = state.config
    state.npcs = create_npcs(state.content.npc_pool, state.rng, cfg.max_base_rate)
    state.phase = "setup"
    state.difficulty = None
    state.action_points = cfg.action_points
    state.current_topic = 1
    state.participants = []
    state.intels = []
    state.collected_intels = set()
    state.processed_intels = set()
    state.skipped_intels = set()
    state.processed_in_process_stage = set()
    state.interacted_npcs = set()
    state.pending_shares = {}
    state.event_phase = "bad"
    state.event_bad_index = 0
    state.event_good_index = 0
    state.original_bad_count = 0
    state.original_good_count = 0
    state.bonus_intel_id = None
    state.alignment = {}
    state.fever = FeverState()
    state.total_score = 0.0
    state.final_result = None


def _exit_fever(state: GameState) -> None:
    fever = state.fever
    had_scores = fever.active and bool(fever.scores)
    base = fever.ledger_sum()
    multiplier = fever.multiplier
    settled = settle_fever(fever)
    if had_scores:
        state.total_score += settled
        _narrate(
            state,
            "FEVER_SETTLED",
            "info",
            f"Fever settled: {base:g} x{multiplier:.1f} = {settled:g}.",
            base=base,
            multiplier=multiplier,
            settled=settled,
        )


def _setup_initial_intels(state: GameState) -> None:
    cfg = state.config
    total = len(state.intels)
    span = cfg.initial_collected_max - cfg.initial_collected_min
    percent = cfg.initial_collected_min + state.rng.random() * span
    count = math.floor(total * percent)
    for intel in state.intels[:count]:
        state.collected_intels.add(intel.id)

    actual = (count / total * 100) if total else 0.0
    if actual < 40:
        desc = "a small part"
    elif actual <= 60:
        desc = "about half"
    else:
        desc = "most"
    _narrate(
        state,
        "INITIAL_INTEL",
        "info",
        f"Starting intel: {count}/{total} ({desc}).",
        count=count,
        total=total,
    )

    # NPCs with nothing left to tell count as already questioned
    for npc in state.npcs:
        if not any(iid not in state.collected_intels for iid in npc.known_intels):
            state.interacted_npcs.add(npc.name)


def _start_game(state: GameState, action: StartGameAction) -> StepResult:
    if state.phase != "setup":
        return _wrong_phase(state, "setup")
    profile = state.content.profiles.get(action.difficulty)
    if profile is None:
        return _fail(state, f"Unknown difficulty: {action.difficulty}.")

    cfg = state.config
    state.difficulty = profile.id
    participants = pick_participants(state.npcs, cfg.participant_count, state.rng)
    state.participants = [npc.name for npc in participants]

    generator = IntelGenerator(state.rng, state.content.names)
    for topic in range(1, cfg.topic_count + 1):
        state.intels.extend(generator.generate_topic_intels(topic, profile, participants))
    generator.distribute_intels_to_npcs(state.intels, participants)

    state.phase = "collect"
    _narrate(state, "GAME_STARTED", "info", "The negotiation begins!", participants=list(state.participants))
    _narrate(state, "DIFFICULTY", "info", f"Difficulty: {profile.id}.", difficulty=profile.id)
    _setup_initial_intels(state)
    return _ok(intel_count=len(state.intels))


def _collect(state: GameState, action: CollectAction) -> StepResult:
    if state.phase != "collect":
        return _wrong_phase(state, "collect")
    npc = state.find_npc(action.npc)
    if npc is None:
        return _fail(state, "Unknown NPC.", narrate=False)
    if state.action_points <= 0:
        return _no_points(state)

    cfg = state.config
    state.action_points -= 1

    if state.rng.random() < npc.current_rate / 100:
        new_intels: list[Intel] = []
        for intel_id in npc.known_intels:
            if intel_id in state.collected_intels:
                continue
            state.collected_intels.add(intel_id)
            intel = state.find_intel(intel_id)
            if intel is not None:
                new_intels.append(intel)
        state.interacted_npcs.add(npc.name)
        if new_intels:
            _narrate(
                state,
                "INTEL_COLLECTED",
                "success",
                f"{npc.name} shared: {', '.join(i.name for i in new_intels)}.",
                npc=npc.name,
                intel_ids=[i.id for i in new_intels],
            )
        else:
            _narrate(state, "NOTHING_NEW", "info", f"{npc.name} had nothing new.", npc=npc.name)
        return _ok(success=True, collected=[i.id for i in new_intels])

    npc.current_rate = min(cfg.rate_cap, npc.current_rate + cfg.collect_rate_step)
    _narrate(
        state,
        "COLLECT_FAILED",
        "fail",
        f"{npc.name} would not talk. Their rate rises to {npc.current_rate}%.",
        npc=npc.name,
        rate=npc.current_rate,
    )
    return _ok(success=False, rate=npc.current_rate)


def _advance_to_process(state: GameState, action: AdvanceToProcessAction) -> StepResult:
    if state.phase != "collect":
        return _wrong_phase(state, "collect")
    state.phase = "process"
    _narrate(state, "PHASE_CHANGED", "info", "Processing stage.", phase="process")
    return _ok()


def _collected_intel(state: GameState, intel_id: str) -> Intel | None:
    if intel_id not in state.collected_intels:
        return None
    return state.find_intel(intel_id)


def _process_intel(state: GameState, action: ProcessIntelAction) -> StepResult:
    if state.phase != "process":
        return _wrong_phase(state, "process")
    intel = _collected_intel(state, action.intel_id)
    if intel is None:
        return _fail(state, "Unknown intel.", narrate=False)
    if len(intel.numbers) >= len(DIE_FACES):
        return _fail(state, f"\"{intel.name}\" already has every face.")
    if state.action_points <= 0:
        return _no_points(state)

    state.action_points -= 1
    roll = state.rng.randint(1, 6)
    if roll not in intel.numbers:
        _narrate(
            state,
            "PROCESS_FAILED",
            "fail",
            f"Processing \"{intel.name}\" failed: rolled {roll}.",
            intel_id=intel.id,
            roll=roll,
        )
        return _ok(success=False, roll=roll)

    added = intel.add_random_number(state.rng)
    state.processed_in_process_stage.add(intel.id)
    _narrate(
        state,
        "INTEL_PROCESSED",
        "success",
        f"Processed \"{intel.name}\": rolled {roll}, gained number {added}.",
        intel_id=intel.id,
        roll=roll,
        added=added,
    )
    return _ok(success=True, roll=roll, added=added)


def _toggle_share(state: GameState, action: ToggleShareAction) -> StepResult:
    if state.phase != "process":
        return _wrong_phase(state, "process")
    intel = _collected_intel(state, action.intel_id)
    npc = state.find_npc(action.npc)
    if intel is None or npc is None:
        return _fail(state, "Unknown intel or NPC.", narrate=False)

    pending = state.pending_shares.get(intel.id, [])
    if action.checked:
        if npc.name in intel.knowers:
            return _fail(state, f"{npc.name} already knows \"{intel.name}\".")
        if npc.name in pending:
            return _fail(state, f"{npc.name} is already queued for \"{intel.name}\".")
        if state.action_points <= 0:
            return _no_points(state)
        state.action_points -= 1
        state.pending_shares.setdefault(intel.id, []).append(npc.name)
        _narrate(
            state,
            "SHARE_QUEUED",
            "info",
            f"Will tell {npc.name} about \"{intel.name}\" (1 point spent).",
            intel_id=intel.id,
            npc=npc.name,
        )
        return _ok(points=state.action_points)

    if npc.name not in pending:
        return _fail(state, f"{npc.name} is not queued for \"{intel.name}\".", narrate=False)
    pending.remove(npc.name)
    if not pending:
        del state.pending_shares[intel.id]
    state.action_points += 1
    _narrate(
        state,
        "SHARE_CANCELLED",
        "info",
        f"No longer telling {npc.name} (1 point refunded).",
        intel_id=intel.id,
        npc=npc.name,
    )
    return _ok(points=state.action_points)


def _apply_pending_shares(state: GameState) -> None:
    told: dict[str, list[str]] = {}
    for intel_id, names in state.pending_shares.items():
        intel = state.find_intel(intel_id)
        if intel is None:
            continue
        for name in names:
            npc = state.find_npc(name)
            if npc is None:
                continue
            if intel.add_knower(npc.name):
                npc.add_intel(intel)
                told.setdefault(npc.name, []).append(intel.id)
    state.pending_shares = {}
    for name, intel_ids in told.items():
        _narrate(
            state,
            "INTEL_SHARED",
            "success",
            f"Told {name} about {len(intel_ids)} intel.",
            npc=name,
            intel_ids=intel_ids,
        )


def _sync_event_phase(state: GameState) -> None:
    if state.bonus_intel_id is not None:
        return
    if state.event_phase == "bad" and state.event_bad_index >= state.original_bad_count:
        state.event_phase = "good"
    if state.event_phase == "good" and state.event_good_index >= state.original_good_count:
        state.event_phase = "complete"


def _start_topic(state: GameState) -> None:
    _apply_pending_shares(state)
    state.phase = "event"

    intels = state.topic_intels()
    state.original_bad_count = sum(1 for i in intels if i.was_bad)
    state.original_good_count = len(intels) - state.original_bad_count
    state.event_bad_index = 0
    state.event_good_index = 0
    state.bonus_intel_id = None
    state.event_phase = "bad"
    _sync_event_phase(state)

    participants = state.participating_npcs()
    for npc in participants:
        old = npc.current_number
        npc.refresh_number(state.rng)
        _narrate(
            state,
            "NPC_ROLLED",
            "info",
            f"{npc.name} rolled {npc.current_number} (was {old}).",
            npc=npc.name,
            number=npc.current_number,
        )

    state.alignment = {
        intel.id: {npc.name: state.rng.random() < npc.base_rate / 100 for npc in participants}
        for intel in intels
    }
    _narrate(
        state,
        "TOPIC_STARTED",
        "info",
        f"Topic {state.current_topic} begins.",
        topic=state.current_topic,
    )


def _advance_to_event(state: GameState, action: AdvanceToEventAction) -> StepResult:
    if state.phase != "process":
        return _wrong_phase(state, "process")
    state.current_topic = 1
    _start_topic(state)
    return _ok(topic=state.current_topic)


def eligible_assistants(state: GameState, intel: Intel) -> set[str]:
    """NPCs who may lend their number to a roll on `intel`.

    Knowing a bad intel disqualifies an NPC; knowing a good one qualifies it
    outright; everyone else needs to have passed this topic's alignment check.
    """
    checks = state.alignment.get(intel.id, {})
    out: set[str] = set()
    for npc in state.participating_npcs():
        if npc.current_number is None:
            continue
        if npc.knows_intel(intel):
            if intel.is_good:
                out.add(npc.name)
            continue
        if checks.get(npc.name, False):
            out.add(npc.name)
    return out


def auto_assistants(state: GameState, intel: Intel) -> set[str]:
    eligible = eligible_assistants(state, intel)
    return {
        npc.name
        for npc in state.npcs
        if npc.name in eligible and npc.current_number in intel.numbers
    }


def _select_assistants(
    state: GameState, intel: Intel, requested: Sequence[str]
) -> tuple[list[str], str | None]:
    eligible = eligible_assistants(state, intel)
    refused = [name for name in requested if name not in eligible]
    if refused:
        return [], f"Cannot assist with \"{intel.name}\": {', '.join(refused)}."
    chosen = set(requested) | auto_assistants(state, intel)
    return [npc.name for npc in state.npcs if npc.name in chosen], None


def _roll(state: GameState, intel: Intel, assistants: Iterable[str]) -> DiceOutcome:
    player_roll = state.rng.randint(1, 6)
    _narrate(state, "PLAYER_ROLLED", "info", f"Player rolled {player_roll}.", roll=player_roll)
    numbers: list[int] = []
    for name in assistants:
        npc = state.find_npc(name)
        if npc is None or npc.current_number is None:
            continue
        numbers.append(npc.current_number)
        _narrate(
            state,
            "ASSIST_ROLLED",
            "info",
            f"{npc.name} adds {npc.current_number}.",
            npc=npc.name,
            number=npc.current_number,
        )
        npc.refresh_number(state.rng)
    return resolve_with_dice(intel.numbers, player_roll, numbers)


def _current_bad_intel(state: GameState) -> Intel | None:
    if state.event_phase != "bad":
        return None
    bad = state.topic_bad_intels()
    if state.event_bad_index < len(bad):
        return bad[state.event_bad_index]
    return None


def _finish_bad_card(state: GameState, intel: Intel) -> None:
    state.processed_intels.add(intel.id)
    state.event_bad_index += 1
    state.bonus_intel_id = None
    _sync_event_phase(state)


def _record_fever_score(state: GameState, intel: Intel, outcome: DiceOutcome) -> tuple[int, float]:
    multiplier = match_multiplier(outcome.match_count)
    enter_fever(state.fever)
    final_score = intel.score * multiplier * state.fever.multiplier
    state.fever.scores.append(final_score)
    return multiplier, final_score


def _resolve_bad_intel(state: GameState, action: ResolveBadIntelAction) -> StepResult:
    if state.phase != "event":
        return _wrong_phase(state, "event")
    intel = state.find_intel(action.intel_id)
    if intel is None:
        return _fail(state, "Unknown intel.", narrate=False)
    if state.bonus_intel_id is not None:
        return _fail(state, "Finish the pending bonus roll first.")
    current = _current_bad_intel(state)
    if current is None or current.id != intel.id:
        return _fail(state, f"\"{intel.name}\" is not the bad intel on the table.")
    assistants, err = _select_assistants(state, intel, action.assistants)
    if err is not None:
        return _fail(state, err)

    outcome = _roll(state, intel, assistants)
    if outcome.success:
        intel.resolve()
        state.bonus_intel_id = intel.id
        _narrate(
            state,
            "BAD_INTEL_RESOLVED",
            "success",
            f"Resolved \"{intel.name}\" with {', '.join(map(str, outcome.matched))}. Bonus roll next.",
            intel_id=intel.id,
            matched=list(outcome.matched),
        )
        return _ok(success=True, needs_bonus=True, rolls=list(outcome.rolls), matched=list(outcome.matched))

    _exit_fever(state)
    deducted = intel.deduct(state.config.fail_penalty)
    _finish_bad_card(state, intel)
    _narrate(
        state,
        "BAD_INTEL_FAILED",
        "fail",
        f"Failed to resolve \"{intel.name}\" (numbers {intel.numbers}); lost {deducted} points.",
        intel_id=intel.id,
        deducted=deducted,
    )
    return _ok(success=False, needs_bonus=False, score=-deducted, rolls=list(outcome.rolls))


def _apply_bonus(state: GameState, action: ApplyBonusAction) -> StepResult:
    if state.phase != "event":
        return _wrong_phase(state, "event")
    intel = state.find_intel(action.intel_id)
    if intel is None:
        return _fail(state, "Unknown intel.", narrate=False)
    if state.bonus_intel_id != intel.id:
        return _fail(state, f"No bonus roll is pending for \"{intel.name}\".")
    assistants, err = _select_assistants(state, intel, action.assistants)
    if err is not None:
        return _fail(state, err)

    outcome = _roll(state, intel, assistants)
    if not outcome.success:
        _exit_fever(state)
        _finish_bad_card(state, intel)
        _narrate(
            state,
            "BONUS_FAILED",
            "fail",
            f"Bonus missed for \"{intel.name}\" (numbers {intel.numbers}).",
            intel_id=intel.id,
        )
        return _ok(success=False, needs_bonus=False, rolls=list(outcome.rolls))

    multiplier, final_score = _record_fever_score(state, intel, outcome)
    _finish_bad_card(state, intel)
    _narrate(
        state,
        "BONUS_SCORED",
        "success",
        f"Bonus on \"{intel.name}\": {outcome.match_count} match(es) x{multiplier} = {final_score:g}.",
        intel_id=intel.id,
        match_count=outcome.match_count,
        multiplier=multiplier,
        score=final_score,
    )
    return _ok(
        success=True,
        needs_bonus=False,
        match_count=outcome.match_count,
        multiplier=multiplier,
        fever_multiplier=state.fever.multiplier,
        score=final_score,
        rolls=list(outcome.rolls),
    )


def _playable_good_intel(state: GameState, intel_id: str) -> tuple[Intel | None, StepResult | None]:
    if state.phase != "event":
        return None, _wrong_phase(state, "event")
    intel = state.find_intel(intel_id)
    if intel is None:
        return None, _fail(state, "Unknown intel.", narrate=False)
    if state.event_phase != "good":
        return None, _fail(state, "Good intel comes after every bad intel is handled.")
    if intel.topic != state.current_topic or intel.was_bad or intel.id in state.processed_intels:
        return None, _fail(state, f"\"{intel.name}\" cannot be played now.")
    return intel, None


def _advance_good_cursor(state: GameState, intel: Intel) -> None:
    state.processed_intels.add(intel.id)
    state.event_good_index += 1
    _sync_event_phase(state)


def _play_good_intel(state: GameState, action: PlayGoodIntelAction) -> StepResult:
    intel, rejected = _playable_good_intel(state, action.intel_id)
    if rejected is not None:
        return rejected
    assert intel is not None
    assistants, err = _select_assistants(state, intel, action.assistants)
    if err is not None:
        return _fail(state, err)

    outcome = _roll(state, intel, assistants)
    if not outcome.success:
        _exit_fever(state)
        _advance_good_cursor(state, intel)
        _narrate(
            state,
            "GOOD_INTEL_FAILED",
            "fail",
            f"\"{intel.name}\" fell flat (numbers {intel.numbers}).",
            intel_id=intel.id,
        )
        return _ok(success=False, rolls=list(outcome.rolls))

    multiplier, final_score = _record_fever_score(state, intel, outcome)
    _advance_good_cursor(state, intel)
    _narrate(
        state,
        "GOOD_INTEL_SCORED",
        "success",
        f"\"{intel.name}\" landed: {outcome.match_count} match(es) x{multiplier} = {final_score:g}.",
        intel_id=intel.id,
        match_count=outcome.match_count,
        multiplier=multiplier,
        score=final_score,
    )
    return _ok(
        success=True,
        match_count=outcome.match_count,
        multiplier=multiplier,
        fever_multiplier=state.fever.multiplier,
        score=final_score,
        rolls=list(outcome.rolls),
    )


def _skip_good_intel(state: GameState, action: SkipGoodIntelAction) -> StepResult:
    intel, rejected = _playable_good_intel(state, action.intel_id)
    if rejected is not None:
        return rejected
    assert intel is not None
    state.skipped_intels.add(intel.id)
    _advance_good_cursor(state, intel)
    _narrate(state, "GOOD_INTEL_SKIPPED", "info", f"Skipped \"{intel.name}\".", intel_id=intel.id)
    return _ok(skipped=[intel.id])


def _skip_remaining_good(state: GameState, action: SkipRemainingGoodAction) -> StepResult:
    if state.phase != "event":
        return _wrong_phase(state, "event")
    if state.event_phase != "good":
        return _fail(state, "Good intel comes after every bad intel is handled.")
    skipped: list[str] = []
    for intel in state.topic_good_intels():
        if intel.id in state.processed_intels:
            continue
        state.processed_intels.add(intel.id)
        state.skipped_intels.add(intel.id)
        state.event_good_index += 1
        skipped.append(intel.id)
    state.event_phase = "complete"
    _narrate(
        state,
        "GOOD_INTEL_SKIPPED",
        "info",
        f"Skipped the remaining {len(skipped)} good intel.",
        intel_ids=skipped,
    )
    return _ok(skipped=skipped)


def _advance_topic(state: GameState, action: AdvanceTopicAction) -> StepResult:
    if state.phase != "event":
        return _wrong_phase(state, "event")
    remaining = state.unprocessed_topic_intels()
    if remaining:
        return _fail(state, f"{len(remaining)} intel still unplayed.", remaining=len(remaining))

    _exit_fever(state)
    if state.current_topic >= state.config.topic_count:
        state.phase = "result"
        state.final_result = calculate_result(
            state.intels, state.processed_intels, state.skipped_intels, state.total_score
        )
        res = state.final_result
        _narrate(
            state,
            "RUN_SETTLED",
            "info",
            f"Base score {res.base_score}; tiers {res.tier1:.0f} / {res.tier2:.0f}; rating {res.rating}.",
            base_score=res.base_score,
            total_score=res.total_score,
            rating=res.rating,
        )
        return _ok(phase=state.phase, rating=res.rating)

    state.current_topic += 1
    _start_topic(state)
    return _ok(phase=state.phase, topic=state.current_topic)


def _restart(state: GameState, action: RestartAction) -> StepResult:
    _reset_run(state)
    _narrate(state, "RESTARTED", "info", "A new negotiation is ready.")
    return _ok()


def step(state: GameState, action: Action) -> StepResult:
    """Apply a single player action to the run state.

    This mutates `state` in-place but remains deterministic for a given
    (seed, content, action sequence). Rejected actions leave the run
    untouched apart from the logs.
    """
    # Log first so replay has a full record of attempted actions
    state.action_log.append(action)
    mark = len(state.event_log)
    result = _dispatch(state, action)
    result.events = state.event_log[mark:]
    return result


def _dispatch(state: GameState, action: Action) -> StepResult:
    if isinstance(action, StartGameAction):
        return _start_game(state, action)
    if isinstance(action, CollectAction):
        return _collect(state, action)
    if isinstance(action, AdvanceToProcessAction):
        return _advance_to_process(state, action)
    if isinstance(action, ProcessIntelAction):
        return _process_intel(state, action)
    if isinstance(action, ToggleShareAction):
        return _toggle_share(state, action)
    if isinstance(action, AdvanceToEventAction):
        return _advance_to_event(state, action)
    if isinstance(action, ResolveBadIntelAction):
        return _resolve_bad_intel(state, action)
    if isinstance(action, ApplyBonusAction):
        return _apply_bonus(state, action)
    if isinstance(action, PlayGoodIntelAction):
        return _play_good_intel(state, action)
    if isinstance(action, SkipGoodIntelAction):
        return _skip_good_intel(state, action)
    if isinstance(action, SkipRemainingGoodAction):
        return _skip_remaining_good(state, action)
    if isinstance(action, AdvanceTopicAction):
        return _advance_topic(state, action)
    if isinstance(action, RestartAction):
        return _restart(state, action)
    return _fail(state, "Unknown action.", narrate=False)


def new_game(
    content: ContentBundle,
    seed: int,
    config: GameConfig | None = None,
    rng: random.Random | None = None,
) -> GameState:
    cfg = config or GameConfig()
    if len(content.npc_pool) < cfg.participant_count:
        raise ValueError(f"NPC pool must hold at least {cfg.participant_count} NPCs.")
    state = GameState(content=content, config=cfg, seed=seed, rng=rng or random.Random(seed))
    _reset_run(state)
    return state


def replay(
    content: ContentBundle,
    seed: int,
    actions: Iterable[Action],
    config: GameConfig | None = None,
) -> GameState:
    state = new_game(content, seed=seed, config=config)
    for a in actions:
        step(state, a)
    return state
