"""
Bots module - Automated players.

Provides:
- BotPolicy: Interface for bot decision-making
- RandomPolicy, FirstLegalPolicy, GreedyPolicy: Implementations
- run_bot_game: Plays a full game through the engine
"""

from .policy import (
    BotDecision,
    BotPolicy,
    FirstLegalPolicy,
    GreedyPolicy,
    GreedyWeights,
    RandomPolicy,
)
from .runner import BotGameResult, run_bot_game

POLICIES = {
    "greedy": GreedyPolicy,
    "random": RandomPolicy,
    "first": FirstLegalPolicy,
}

__all__ = [
    "BotDecision",
    "BotPolicy",
    "FirstLegalPolicy",
    "GreedyPolicy",
    "GreedyWeights",
    "RandomPolicy",
    "BotGameResult",
    "run_bot_game",
    "POLICIES",
]
