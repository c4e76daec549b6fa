"""
Action Generator - Enumerates the legal actions for a game state.

Used by bots to pick moves and by frontends to enable buttons. Each
generated PlayerAction is fully specified and would be accepted by
GameEngine.process_action.
"""

from __future__ import annotations

from .action import PlayerAction
from .history import GameHistory
from .state import GamePhase, GameState
from .validators import validate_card_play, validate_technical_debt_reduction


def legal_actions(state: GameState, history: GameHistory) -> list[PlayerAction]:
    """
    All legal actions, in a stable order: playable cards in hand order,
    then TD reduction (when eligible), then END_TURN.

    Empty once the game is over.
    """
    if state.is_over or state.phase != GamePhase.PLANNING:
        return []

    actions = [
        PlayerAction.play_card(card.instance_id)
        for card in state.piles.hand
        if validate_card_play(card, state).can_play
    ]

    if validate_technical_debt_reduction(state, history):
        actions.append(PlayerAction.discard_all_for_td_reduction())

    actions.append(PlayerAction.end_turn())
    return actions


def is_legal(state: GameState, history: GameHistory, action: PlayerAction) -> bool:
    """Check if a specific action is legal."""
    for candidate in legal_actions(state, history):
        if (
            candidate.action_type == action.action_type
            and candidate.card_instance_id == action.card_instance_id
        ):
            return True
    return False
