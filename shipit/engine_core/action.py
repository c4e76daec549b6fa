"""
Action System - Player actions, game config, save states and results.

All state changes flow through a PlayerAction handed to
GameEngine.process_action, which always answers with an ActionResult.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable
import time

from .history import GameHistoryEntry
from .state import GameState


SAVE_VERSION = "1.0.0"


class ActionType(Enum):
    """Kinds of player action."""
    PLAY_CARD = "PLAY_CARD"
    DISCARD_ALL_FOR_TD_REDUCTION = "DISCARD_ALL_FOR_TD_REDUCTION"
    END_TURN = "END_TURN"
    START_NEW_GAME = "START_NEW_GAME"
    LOAD_GAME = "LOAD_GAME"


@dataclass
class GameConfig:
    """
    Options for a new game.

    seed: makes shuffles, coin flips and random discards reproducible
    deck_ids: restrict the deck to these card ids
    starting_resources: override any of progress, bugs,
        technical_debt, productivity_points
    """
    seed: str | None = None
    player_id: str | None = None
    deck_ids: Iterable[str] | None = None
    starting_resources: dict[str, int] | None = None


@dataclass
class SaveState:
    """
    Serializable snapshot of a game.

    history is empty for snapshots built by hand; loading one of those
    starts a fresh log at the saved round.
    """
    game_state: GameState
    saved_at: float = field(default_factory=time.time)
    version: str = SAVE_VERSION
    history: tuple[GameHistoryEntry, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "game_state": self.game_state.to_dict(),
            "saved_at": self.saved_at,
            "version": self.version,
            "history": [entry.to_dict() for entry in self.history],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SaveState:
        return cls(
            game_state=GameState.from_dict(data["game_state"]),
            saved_at=float(data["saved_at"]),
            version=data["version"],
            history=tuple(GameHistoryEntry.from_dict(e) for e in data.get("history") or []),
        )


@dataclass
class PlayerAction:
    """
    An action requested by the player.

    action_type is normally an ActionType; a raw string is accepted so
    unknown kinds reach the engine and are rejected there.
    """
    action_type: ActionType | str
    card_instance_id: str | None = None
    config: GameConfig | None = None
    save_state: SaveState | None = None

    @classmethod
    def play_card(cls, card_instance_id: str) -> PlayerAction:
        return cls(action_type=ActionType.PLAY_CARD, card_instance_id=card_instance_id)

    @classmethod
    def discard_all_for_td_reduction(cls) -> PlayerAction:
        return cls(action_type=ActionType.DISCARD_ALL_FOR_TD_REDUCTION)

    @classmethod
    def end_turn(cls) -> PlayerAction:
        return cls(action_type=ActionType.END_TURN)

    @classmethod
    def start_new_game(cls, config: GameConfig | None = None) -> PlayerAction:
        return cls(action_type=ActionType.START_NEW_GAME, config=config)

    @classmethod
    def load_game(cls, save_state: SaveState) -> PlayerAction:
        return cls(action_type=ActionType.LOAD_GAME, save_state=save_state)


@dataclass
class ActionResult:
    """
    Result of processing an action.

    data carries side-channel information for the presentation layer,
    e.g. applied_effects and cards_to_draw after a card play.
    """
    success: bool
    new_state: GameState | None = None
    error: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def failure(cls, error: str) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error)

    @classmethod
    def success_with_state(cls, state: GameState, **data: Any) -> ActionResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, data=data)
