"""
Game State - The authoritative aggregate owned by the engine.

Design principles:
- Copy-on-write: every transition builds a new GameState
- Serializable: to_dict/from_dict round-trip for save/load
- Clamped: resource bounds hold after every engine mutation
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any
import time

from ..cards.models import CardInstance


MAX_PROGRESS = 100
MAX_TECHNICAL_DEBT = 20
BASE_PRODUCTIVITY = 20
HAND_SIZE = 5


class GamePhase(Enum):
    """Phases of a game. GAME_OVER is terminal."""
    PLANNING = "PLANNING"
    GAME_OVER = "GAME_OVER"


class GameEndState(Enum):
    """How the game ended, if it has."""
    IN_PROGRESS = "IN_PROGRESS"
    WON = "WON"
    LOST_NO_CARDS = "LOST_NO_CARDS"


@dataclass
class GameResources:
    """
    The four resources the player manages.

    Bounds: progress 0-100, bugs >= 0, technical debt 0-20, PP >= 0.
    """
    progress: int = 0
    bugs: int = 0
    technical_debt: int = 0
    productivity_points: int = BASE_PRODUCTIVITY

    def copy(self, **changes: Any) -> GameResources:
        return replace(self, **changes)

    def to_dict(self) -> dict[str, int]:
        return {
            "progress": self.progress,
            "bugs": self.bugs,
            "technical_debt": self.technical_debt,
            "productivity_points": self.productivity_points,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameResources:
        return cls(
            progress=int(data.get("progress", 0)),
            bugs=int(data.get("bugs", 0)),
            technical_debt=int(data.get("technical_debt", 0)),
            productivity_points=int(data.get("productivity_points", BASE_PRODUCTIVITY)),
        )


@dataclass
class GameStats:
    """Counters and timestamps. end_time/final_score are set once, at game over."""
    current_round: int = 1
    cards_played: int = 0
    tech_debt_reductions: int = 0
    start_time: float = field(default_factory=time.time)
    end_time: float | None = None
    final_score: int | None = None

    @property
    def duration_seconds(self) -> float:
        end = self.end_time if self.end_time is not None else time.time()
        return max(0.0, end - self.start_time)

    def copy(self, **changes: Any) -> GameStats:
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_round": self.current_round,
            "cards_played": self.cards_played,
            "tech_debt_reductions": self.tech_debt_reductions,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "final_score": self.final_score,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameStats:
        return cls(
            current_round=int(data.get("current_round", 1)),
            cards_played=int(data.get("cards_played", 0)),
            tech_debt_reductions=int(data.get("tech_debt_reductions", 0)),
            start_time=float(data["start_time"]),
            end_time=data.get("end_time"),
            final_score=data.get("final_score"),
        )


@dataclass
class GamePiles:
    """
    The four disjoint card piles.

    deck: face-down draw pile (index 0 is the top)
    hand: the player's visible cards
    discard: set aside, reshuffled into the deck when it runs dry
    graveyard: played or sacrificed cards, never return
    """
    deck: list[CardInstance] = field(default_factory=list)
    hand: list[CardInstance] = field(default_factory=list)
    discard: list[CardInstance] = field(default_factory=list)
    graveyard: list[CardInstance] = field(default_factory=list)

    def total(self) -> int:
        return len(self.deck) + len(self.hand) + len(self.discard) + len(self.graveyard)

    def find_in_hand(self, instance_id: str) -> CardInstance | None:
        for card in self.hand:
            if card.instance_id == instance_id:
                return card
        return None

    def copy(self) -> GamePiles:
        """Shallow-copy each pile list. Instances themselves are never mutated."""
        return GamePiles(
            deck=list(self.deck),
            hand=list(self.hand),
            discard=list(self.discard),
            graveyard=list(self.graveyard),
        )

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "deck": [c.to_dict() for c in self.deck],
            "hand": [c.to_dict() for c in self.hand],
            "discard": [c.to_dict() for c in self.discard],
            "graveyard": [c.to_dict() for c in self.graveyard],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GamePiles:
        return cls(
            deck=[CardInstance.from_dict(c) for c in data.get("deck", [])],
            hand=[CardInstance.from_dict(c) for c in data.get("hand", [])],
            discard=[CardInstance.from_dict(c) for c in data.get("discard", [])],
            graveyard=[CardInstance.from_dict(c) for c in data.get("graveyard", [])],
        )


@dataclass
class GameState:
    """
    Complete game state at a point in time.

    Only the GameEngine replaces its GameState; every other component
    receives a state and returns a new one.
    """
    resources: GameResources
    stats: GameStats
    piles: GamePiles
    seed: str
    phase: GamePhase = GamePhase.PLANNING
    end_state: GameEndState = GameEndState.IN_PROGRESS
    player_id: str | None = None

    @property
    def is_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    def with_resources(self, **changes: Any) -> GameState:
        """Return new state with some resource fields replaced."""
        return self._copy_with(resources=self.resources.copy(**changes))

    def with_stats(self, **changes: Any) -> GameState:
        """Return new state with some stats fields replaced."""
        return self._copy_with(stats=self.stats.copy(**changes))

    def with_piles(self, piles: GamePiles) -> GameState:
        return self._copy_with(piles=piles)

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return GameState(
            resources=kwargs.get("resources", self.resources),
            stats=kwargs.get("stats", self.stats),
            piles=kwargs.get("piles", self.piles),
            seed=kwargs.get("seed", self.seed),
            phase=kwargs.get("phase", self.phase),
            end_state=kwargs.get("end_state", self.end_state),
            player_id=kwargs.get("player_id", self.player_id),
        )

    def clone(self) -> GameState:
        """Deep copy the state."""
        return deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase.value,
            "end_state": self.end_state.value,
            "resources": self.resources.to_dict(),
            "stats": self.stats.to_dict(),
            "piles": self.piles.to_dict(),
            "seed": self.seed,
            "player_id": self.player_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameState:
        return cls(
            phase=GamePhase(data["phase"]),
            end_state=GameEndState(data["end_state"]),
            resources=GameResources.from_dict(data["resources"]),
            stats=GameStats.from_dict(data["stats"]),
            piles=GamePiles.from_dict(data["piles"]),
            seed=data["seed"],
            player_id=data.get("player_id"),
        )
