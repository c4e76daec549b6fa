"""
Ship It - Rules engine for the "Draw It, Play It, Ship It" card game.

A single-player card game about shipping software. The package provides:
- Card catalog and deck construction
- Deterministic (seedable) game state machine
- Effect resolution with coin-flip outcomes
- Scoring and end-of-game summaries
- A small leaderboard API for finished games
"""

__version__ = "0.1.0"
