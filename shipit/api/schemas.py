"""
Pydantic Schemas for API - Request/response models for the leaderboard.

These models define the contract between game clients and the
leaderboard service, and drive the OpenAPI schema.

Error Codes:
- INVALID_GAME_STATE: Submitted game failed structural validation
- PLAYER_NOT_FOUND: No games recorded for this player name
- RATE_LIMITED: Too many requests from this client
- VALIDATION_ERROR: Request body failed schema validation
- INTERNAL_ERROR: Unexpected server error
"""

from __future__ import annotations
from enum import Enum
from typing import Optional, Any, TYPE_CHECKING
from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from ..engine_core.scoring import GameSummary


PLAYER_NAME_PATTERN = r"^[a-zA-Z0-9_-]+$"


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    INVALID_GAME_STATE = "INVALID_GAME_STATE"
    PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
    RATE_LIMITED = "RATE_LIMITED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Request Models
# =============================================================================

class SubmitScoreRequest(BaseModel):
    """Request to record a finished game."""
    player_name: str = Field(
        ..., min_length=1, max_length=50, pattern=PLAYER_NAME_PATTERN,
        description="Letters, numbers, underscores and hyphens",
    )
    score: int = Field(..., ge=0, le=10000)
    rounds: int = Field(..., ge=1, le=100)
    final_progress: int = Field(..., ge=0, le=100)
    final_bugs: int = Field(..., ge=0, le=50)
    final_tech_debt: int = Field(..., ge=0, le=100)
    game_duration_seconds: int = Field(..., ge=30, le=7200, description="30 seconds to 2 hours")
    cards_played: list[str] = Field(..., min_length=1, max_length=200, description="Card ids in play order")

    @classmethod
    def from_summary(cls, summary: GameSummary, player_name: str) -> SubmitScoreRequest:
        """Build a submission from an engine game summary."""
        return cls(
            player_name=player_name,
            score=summary.score,
            rounds=summary.rounds,
            final_progress=summary.final_progress,
            final_bugs=summary.final_bugs,
            final_tech_debt=summary.final_tech_debt,
            game_duration_seconds=summary.game_duration_seconds,
            cards_played=list(summary.cards_played),
        )


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameRecord(BaseModel):
    """A stored game."""
    id: str
    player_name: str
    score: int
    rounds: int
    final_progress: int
    final_bugs: int
    final_tech_debt: int
    game_duration_seconds: int
    completed_at: float = Field(..., description="Unix timestamp")
    game_state_hash: str
    cards_played: list[str] = Field(default_factory=list)


class LeaderboardEntry(BaseModel):
    """A game on the leaderboard with its global rank."""
    game_id: str
    player_name: str
    score: int
    rounds: int
    final_progress: int
    final_bugs: int
    final_tech_debt: int
    game_duration_seconds: int
    completed_at: float
    rank: int = Field(..., ge=1)


class PlayerStats(BaseModel):
    """Aggregate statistics for one player."""
    player_name: str
    total_games: int
    best_score: int
    avg_score: float
    avg_rounds: float
    best_rounds: int = Field(..., description="Fewest rounds in any game")
    avg_duration: float
    first_played_at: float


class Pagination(BaseModel):
    limit: int
    offset: int
    has_more: bool


class SubmitScoreResponse(BaseModel):
    """Result of a successful score submission."""
    success: bool = True
    message: str = "Score submitted successfully"
    game: GameRecord
    rank: int


class LeaderboardResponse(BaseModel):
    success: bool = True
    entries: list[LeaderboardEntry] = Field(default_factory=list)
    pagination: Pagination


class PlayerLeaderboardResponse(BaseModel):
    """A player's stats together with their ranked games."""
    success: bool = True
    player_name: str
    stats: PlayerStats
    games: list[LeaderboardEntry] = Field(default_factory=list)


class PlayerStatsResponse(BaseModel):
    success: bool = True
    stats: PlayerStats


class PlayerGamesResponse(BaseModel):
    success: bool = True
    player_name: str
    games: list[LeaderboardEntry] = Field(default_factory=list)


class LeaderboardStatsResponse(BaseModel):
    success: bool = True
    total_games: int
    total_players: int


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    environment: str
