"""Headless, seedable rules engine for Parley.

IMPORTANT: This package must never import a UI toolkit.
"""

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
from .game import GameConfig, GameState, StepResult, new_game, replay, step
from .scoring import FinalResult, ScoreBreakdown
from .types import NPC, ContentBundle, DifficultyProfile, Intel, NPCDefinition

__all__ = [
    "Action",
    "AdvanceToEventAction",
    "AdvanceToProcessAction",
    "AdvanceTopicAction",
    "ApplyBonusAction",
    "CollectAction",
    "ContentBundle",
    "DifficultyProfile",
    "FinalResult",
    "GameConfig",
    "GameState",
    "Intel",
    "NPC",
    "NPCDefinition",
    "PlayGoodIntelAction",
    "ProcessIntelAction",
    "ResolveBadIntelAction",
    "RestartAction",
    "ScoreBreakdown",
    "SkipGoodIntelAction",
    "SkipRemainingGoodAction",
    "StartGameAction",
    "StepResult",
    "ToggleShareAction",
    "new_game",
    "replay",
    "step",
]
