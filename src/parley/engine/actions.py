from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StartGameAction:
    difficulty: str


@dataclass(frozen=True)
class CollectAction:
    npc: str


@dataclass(frozen=True)
class AdvanceToProcessAction:
    pass


@dataclass(frozen=True)
class ProcessIntelAction:
    intel_id: str


@dataclass(frozen=True)
class ToggleShareAction:
    intel_id: str
    npc: str
    checked: bool


@dataclass(frozen=True)
class AdvanceToEventAction:
    pass


@dataclass(frozen=True)
class ResolveBadIntelAction:
    intel_id: str
    assistants: tuple[str, ...] = ()


@dataclass(frozen=True)
class ApplyBonusAction:
    intel_id: str
    assistants: tuple[str, ...] = ()


@dataclass(frozen=True)
class PlayGoodIntelAction:
    intel_id: str
    assistants: tuple[str, ...] = ()


@dataclass(frozen=True)
class SkipGoodIntelAction:
    intel_id: str


@dataclass(frozen=True)
class SkipRemainingGoodAction:
    pass


@dataclass(frozen=True)
class AdvanceTopicAction:
    pass


@dataclass(frozen=True)
class RestartAction:
    pass


Action = (
    StartGameAction
    | CollectAction
    | AdvanceToProcessAction
    | ProcessIntelAction
    | ToggleShareAction
    | AdvanceToEventAction
    | ResolveBadIntelAction
    | ApplyBonusAction
    | PlayGoodIntelAction
    | SkipGoodIntelAction
    | SkipRemainingGoodAction
    | AdvanceTopicAction
    | RestartAction
)
