"""
API Module - Leaderboard service.

Finished games are submitted with their summary, validated for
plausibility, and ranked globally. Storage is in memory.
"""

from .schemas import (
    # Requests
    SubmitScoreRequest,
    # Responses
    ErrorResponse,
    GameRecord,
    LeaderboardEntry,
    LeaderboardResponse,
    LeaderboardStatsResponse,
    PlayerStats,
    SubmitScoreResponse,
    # Enums
    ErrorCode,
)
from .service import LeaderboardService, SubmissionError, game_state_hash, validate_submission
from .rate_limit import SimpleRateLimiter

__all__ = [
    # Requests
    "SubmitScoreRequest",
    # Responses
    "ErrorResponse",
    "GameRecord",
    "LeaderboardEntry",
    "LeaderboardResponse",
    "LeaderboardStatsResponse",
    "PlayerStats",
    "SubmitScoreResponse",
    # Enums
    "ErrorCode",
    # Service
    "LeaderboardService",
    "SubmissionError",
    "game_state_hash",
    "validate_submission",
    "SimpleRateLimiter",
]
