"""
Scoring - Final score and end-of-game summary.

Score = rounds component (0-700) + cards component (0-200)
        + time component (0-100), rounded to an integer.

Each component is full value at or below its "perfect" threshold,
zero at or beyond its "worst" threshold, and linear in between.
Only won games score; anything else is 0.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import math

from .history import GameHistory
from .state import GameEndState, GameState


ROUNDS_CAP = 700
ROUNDS_PERFECT = 10
ROUNDS_WORST = 50

CARDS_CAP = 200
CARDS_PERFECT = 10
CARDS_WORST = 25  # 30-card deck minus a hand

TIME_CAP = 100
TIME_PERFECT_SECONDS = 30
TIME_WORST_SECONDS = 300


def _linear_component(value: float, perfect: float, worst: float, cap: float) -> float:
    if value <= perfect:
        return cap
    if value >= worst:
        return 0.0
    return cap - ((value - perfect) / (worst - perfect)) * cap


def round_component(rounds: int) -> float:
    return _linear_component(rounds, ROUNDS_PERFECT, ROUNDS_WORST, ROUNDS_CAP)


def cards_component(cards_played: int) -> float:
    return _linear_component(cards_played, CARDS_PERFECT, CARDS_WORST, CARDS_CAP)


def time_component(seconds: float) -> float:
    return _linear_component(seconds, TIME_PERFECT_SECONDS, TIME_WORST_SECONDS, TIME_CAP)


def calculate_score(state: GameState) -> int:
    """Final score in [0, 1000]."""
    if state.end_state != GameEndState.WON:
        return 0

    stats = state.stats
    total = (
        round_component(stats.current_round)
        + cards_component(stats.cards_played)
        + time_component(stats.duration_seconds)
    )
    # Half rounds up
    return int(math.floor(total + 0.5))


@dataclass
class GameSummary:
    """
    Flat record of a finished game, as handed to the leaderboard.
    """
    end_state: GameEndState
    score: int
    rounds: int
    final_progress: int
    final_bugs: int
    final_tech_debt: int
    game_duration_seconds: int
    cards_played: list[str] = field(default_factory=list)
    player_id: str | None = None

    @property
    def is_win(self) -> bool:
        return self.end_state == GameEndState.WON


def summarize_game(state: GameState, history: GameHistory) -> GameSummary:
    score = state.stats.final_score
    if score is None:
        score = calculate_score(state)
    return GameSummary(
        end_state=state.end_state,
        score=score,
        rounds=state.stats.current_round,
        final_progress=state.resources.progress,
        final_bugs=state.resources.bugs,
        final_tech_debt=state.resources.technical_debt,
        game_duration_seconds=int(round(state.stats.duration_seconds)),
        cards_played=history.played_card_ids(),
        player_id=state.player_id,
    )
