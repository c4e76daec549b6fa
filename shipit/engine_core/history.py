"""
Game History - Append-only log of state transitions for one game.

Owned by the engine and cleared only when a new game starts. Saved
games carry their history so a load resumes it. Used to
answer "has a card been played this round?" and to list the cards
played when the game ends.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, TYPE_CHECKING
import time

from .effect_resolver import EffectResolution

if TYPE_CHECKING:
    from .state import GameResources


class HistoryAction(Enum):
    CARD_PLAYED = "card_played"
    ROUND_START = "round_start"
    ROUND_END = "round_end"
    TECH_DEBT_REDUCTION = "tech_debt_reduction"
    GAME_END = "game_end"


@dataclass(frozen=True)
class GameHistoryEntry:
    """One recorded transition."""
    round: int
    action: HistoryAction
    state_before: dict[str, int]
    state_after: dict[str, int]
    description: str
    timestamp: float
    card_id: str | None = None
    effect_resolutions: tuple[EffectResolution, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "round": self.round,
            "action": self.action.value,
            "card_id": self.card_id,
            "effect_resolutions": (
                [r.to_dict() for r in self.effect_resolutions]
                if self.effect_resolutions is not None else None
            ),
            "state_before": dict(self.state_before),
            "state_after": dict(self.state_after),
            "description": self.description,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameHistoryEntry:
        resolutions = data.get("effect_resolutions")
        return cls(
            round=int(data["round"]),
            action=HistoryAction(data["action"]),
            state_before=dict(data.get("state_before") or {}),
            state_after=dict(data["state_after"]),
            description=data.get("description", ""),
            timestamp=float(data["timestamp"]),
            card_id=data.get("card_id"),
            effect_resolutions=(
                tuple(EffectResolution.from_dict(r) for r in resolutions)
                if resolutions is not None else None
            ),
        )


@dataclass
class GameHistory:
    _entries: list[GameHistoryEntry] = field(default_factory=list)

    def add_entry(
        self,
        action: HistoryAction,
        description: str,
        state_before: GameResources | None,
        state_after: GameResources,
        round: int,
        card_id: str | None = None,
        effect_resolutions: list[EffectResolution] | None = None,
    ) -> GameHistoryEntry:
        """Append an entry. Resource snapshots are copied, never referenced."""
        entry = GameHistoryEntry(
            round=round,
            action=action,
            state_before=state_before.to_dict() if state_before is not None else {},
            state_after=state_after.to_dict(),
            description=description,
            timestamp=time.time(),
            card_id=card_id,
            effect_resolutions=tuple(effect_resolutions) if effect_resolutions is not None else None,
        )
        self._entries.append(entry)
        return entry

    @property
    def entries(self) -> tuple[GameHistoryEntry, ...]:
        return tuple(self._entries)

    def entries_for_round(self, round: int) -> list[GameHistoryEntry]:
        return [e for e in self._entries if e.round == round]

    def has_played_card_this_round(self, current_round: int) -> bool:
        """
        True if a card_played entry follows the latest round_start of
        current_round. Without such a round_start, the whole log is searched.
        """
        start = 0
        for i in range(len(self._entries) - 1, -1, -1):
            entry = self._entries[i]
            if entry.action == HistoryAction.ROUND_START and entry.round == current_round:
                start = i + 1
                break

        return any(
            e.action == HistoryAction.CARD_PLAYED for e in self._entries[start:]
        )

    def played_card_ids(self) -> list[str]:
        """Card ids of every played card, in play order."""
        return [
            e.card_id for e in self._entries
            if e.action == HistoryAction.CARD_PLAYED and e.card_id is not None
        ]

    def clear(self):
        self._entries = []

    def replace(self, entries: Iterable[GameHistoryEntry]):
        """Swap in entries restored from a save."""
        self._entries = list(entries)

    def __len__(self) -> int:
        return len(self._entries)
