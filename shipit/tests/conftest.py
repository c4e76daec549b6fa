"""
Pytest fixtures for Ship It tests.
"""

import random
import time

import pytest

from ..cards import CardInstance, get_card_by_id
from ..engine_core.action import GameConfig, PlayerAction, SaveState
from ..engine_core.engine import GameEngine
from ..engine_core.state import (
    GameEndState,
    GamePhase,
    GamePiles,
    GameResources,
    GameState,
    GameStats,
)


class FixedRandom(random.Random):
    """Random source whose random() always returns the same value."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


def _instances(card_id: str, count: int, prefix: str) -> list[CardInstance]:
    card = get_card_by_id(card_id)
    return [CardInstance(card=card, instance_id=f"{prefix}-{card_id}-{i}") for i in range(count)]


@pytest.fixture
def cards():
    """
    Factory for card instances with predictable ids.

    cards("quick-bug-fix", 3) -> ids "h-quick-bug-fix-0" .. "-2"
    """
    def factory(card_id: str, count: int = 1, prefix: str = "h") -> list[CardInstance]:
        return _instances(card_id, count, prefix)
    return factory


@pytest.fixture
def make_state():
    """
    Factory for a PLANNING state with explicit piles.

    Unspecified piles are empty; the deck defaults to 10 quick-bug-fix
    cards so END_TURN can draw. Resource keyword arguments override the
    defaults (0/0/0/20).
    """
    def factory(
        hand=None,
        deck=None,
        discard=None,
        graveyard=None,
        current_round: int = 1,
        cards_played: int = 0,
        **resources,
    ) -> GameState:
        return GameState(
            resources=GameResources().copy(**resources),
            stats=GameStats(
                current_round=current_round,
                cards_played=cards_played,
                start_time=time.time(),
            ),
            piles=GamePiles(
                deck=list(deck) if deck is not None else _instances("quick-bug-fix", 10, "d"),
                hand=list(hand or []),
                discard=list(discard or []),
                graveyard=list(graveyard or []),
            ),
            seed="test",
            phase=GamePhase.PLANNING,
            end_state=GameEndState.IN_PROGRESS,
        )
    return factory


@pytest.fixture
def engine() -> GameEngine:
    """Engine with a fresh seeded game."""
    engine = GameEngine()
    engine.create_new_game(GameConfig(seed="test-seed"))
    return engine


@pytest.fixture
def load_state():
    """Put a hand-built state into an engine via LOAD_GAME."""
    def loader(engine: GameEngine, state: GameState) -> GameEngine:
        result = engine.process_action(PlayerAction.load_game(SaveState(game_state=state)))
        assert result.success, result.error
        return engine
    return loader
