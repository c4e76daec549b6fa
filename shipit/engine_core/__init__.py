"""
Engine Core - Game state, rules and effect resolution.

The engine is the runtime that:
1. Builds and shuffles the deck for a new game
2. Owns the authoritative GameState and its history
3. Validates and applies player actions
4. Resolves card effects (static and coin flip)
5. Detects win/loss and computes the final score
"""

from .state import (
    BASE_PRODUCTIVITY,
    HAND_SIZE,
    MAX_PROGRESS,
    MAX_TECHNICAL_DEBT,
    GameEndState,
    GamePhase,
    GamePiles,
    GameResources,
    GameState,
    GameStats,
)
from .action import ActionResult, ActionType, GameConfig, PlayerAction, SaveState, SAVE_VERSION
from .effect_resolver import (
    CoinFlipOutcome,
    EffectResolution,
    EffectResolutionError,
    apply_effect_to_game_state,
    resolve_and_apply_effects,
    resolve_effect,
)
from .history import GameHistory, GameHistoryEntry, HistoryAction
from .scoring import GameSummary, calculate_score, summarize_game
from .validators import (
    CardValidation,
    check_lose_condition,
    check_win_condition,
    validate_card_play,
    validate_game_state,
    validate_technical_debt_reduction,
)
from .engine import CardPlayPreview, CoinFlipPreview, EndTurnPreview, GameEngine
from .action_generator import is_legal, legal_actions

__all__ = [
    "BASE_PRODUCTIVITY",
    "HAND_SIZE",
    "MAX_PROGRESS",
    "MAX_TECHNICAL_DEBT",
    "GameEndState",
    "GamePhase",
    "GamePiles",
    "GameResources",
    "GameState",
    "GameStats",
    "ActionResult",
    "ActionType",
    "GameConfig",
    "PlayerAction",
    "SaveState",
    "SAVE_VERSION",
    "CoinFlipOutcome",
    "EffectResolution",
    "EffectResolutionError",
    "apply_effect_to_game_state",
    "resolve_and_apply_effects",
    "resolve_effect",
    "GameHistory",
    "GameHistoryEntry",
    "HistoryAction",
    "GameSummary",
    "calculate_score",
    "summarize_game",
    "CardValidation",
    "check_lose_condition",
    "check_win_condition",
    "validate_card_play",
    "validate_game_state",
    "validate_technical_debt_reduction",
    "CardPlayPreview",
    "CoinFlipPreview",
    "EndTurnPreview",
    "GameEngine",
    "is_legal",
    "legal_actions",
]
