"""
Leaderboard Service - Business logic behind the leaderboard API.

The service:
1. Validates submitted games (structural checks only)
2. Stores game records in memory
3. Ranks games globally and aggregates per-player stats

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import hashlib
import json
import logging
import threading
import time
import uuid

from .schemas import GameRecord, LeaderboardEntry, PlayerStats, SubmitScoreRequest

logger = logging.getLogger(__name__)

MAX_LEADERBOARD_LIMIT = 100
MAX_PLAYER_GAMES_LIMIT = 50


class SubmissionError(ValueError):
    """A submitted game failed validation."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


def validate_submission(request: SubmitScoreRequest) -> tuple[bool, str | None]:
    """
    Check that a submitted score is plausible for the game it describes.

    Returns (valid, reason). Only the first failing rule is reported.
    """
    if request.final_progress != 100:
        return False, "Game must be completed (100% progress)"

    if request.final_bugs > 0:
        return False, "Game cannot end with bugs"

    max_possible_score = 1000 + (100 - request.rounds) * 10
    if request.score > max_possible_score:
        return False, "Score too high for number of rounds"

    # At least 10 seconds per round
    if request.game_duration_seconds < request.rounds * 10:
        return False, "Game completed too quickly"

    if len(request.cards_played) < request.rounds:
        return False, "Not enough cards played for number of rounds"

    return True, None


def game_state_hash(request: SubmitScoreRequest) -> str:
    """Stable fingerprint of a submission; card order does not matter."""
    payload = json.dumps(
        {
            "player_name": request.player_name,
            "score": request.score,
            "rounds": request.rounds,
            "final_progress": request.final_progress,
            "final_bugs": request.final_bugs,
            "final_tech_debt": request.final_tech_debt,
            "cards_played": sorted(request.cards_played),
        },
        sort_keys=True,
        separators=(",", ":"),
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:16]


@dataclass
class LeaderboardService:
    """
    In-memory leaderboard.

    Usage:
        service = LeaderboardService()
        record, rank = service.submit_score(request)
        top = service.get_leaderboard(limit=10)
    """
    _games: list[GameRecord] = field(default_factory=list)
    # Insertion order breaks ties between identical completed_at values
    _sequence: dict[str, int] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    # =========================================================================
    # Submission
    # =========================================================================

    def submit_score(
        self,
        request: SubmitScoreRequest,
        completed_at: float | None = None,
    ) -> tuple[GameRecord, int]:
        """
        Validate and store a game.

        Returns:
            (stored record, its global rank)

        Raises:
            SubmissionError: if the game fails validation
        """
        valid, reason = validate_submission(request)
        if not valid:
            logger.info("Rejected score from %s: %s", request.player_name, reason)
            raise SubmissionError(reason)

        record = GameRecord(
            id=str(uuid.uuid4()),
            player_name=request.player_name,
            score=request.score,
            rounds=request.rounds,
            final_progress=request.final_progress,
            final_bugs=request.final_bugs,
            final_tech_debt=request.final_tech_debt,
            game_duration_seconds=request.game_duration_seconds,
            completed_at=completed_at if completed_at is not None else time.time(),
            game_state_hash=game_state_hash(request),
            cards_played=list(request.cards_played),
        )

        with self._lock:
            self._sequence[record.id] = len(self._games)
            self._games.append(record)
            rank = self._rank_of(record)

        logger.info("Recorded score %d for %s (rank %d)", record.score, record.player_name, rank)
        return record, rank

    # =========================================================================
    # Queries
    # =========================================================================

    def get_leaderboard(self, limit: int = MAX_LEADERBOARD_LIMIT, offset: int = 0) -> list[LeaderboardEntry]:
        """Ranked games, best first. limit is capped at 100."""
        limit = max(0, min(limit, MAX_LEADERBOARD_LIMIT))
        offset = max(0, offset)
        with self._lock:
            ordered = self._ordered()
            page = ordered[offset:offset + limit]
            return [self._entry(g, offset + i + 1) for i, g in enumerate(page)]

    def get_player_games(self, player_name: str, limit: int = MAX_PLAYER_GAMES_LIMIT) -> list[LeaderboardEntry]:
        """A player's games with their global ranks, best first."""
        limit = max(0, min(limit, MAX_PLAYER_GAMES_LIMIT))
        with self._lock:
            ranked = [
                (rank, g) for rank, g in enumerate(self._ordered(), start=1)
                if g.player_name == player_name
            ]
            return [self._entry(g, rank) for rank, g in ranked[:limit]]

    def get_player_stats(self, player_name: str) -> PlayerStats | None:
        """Aggregates over a player's games, or None for an unknown player."""
        with self._lock:
            games = [g for g in self._games if g.player_name == player_name]
        if not games:
            return None

        count = len(games)
        return PlayerStats(
            player_name=player_name,
            total_games=count,
            best_score=max(g.score for g in games),
            avg_score=round(sum(g.score for g in games) / count, 2),
            avg_rounds=round(sum(g.rounds for g in games) / count, 2),
            best_rounds=min(g.rounds for g in games),
            avg_duration=round(sum(g.game_duration_seconds for g in games) / count, 2),
            first_played_at=min(g.completed_at for g in games),
        )

    def game_count(self) -> int:
        with self._lock:
            return len(self._games)

    def player_count(self) -> int:
        with self._lock:
            return len({g.player_name for g in self._games})

    # =========================================================================
    # Ranking helpers
    # =========================================================================

    def _sort_key(self, game: GameRecord) -> tuple[int, float, int]:
        return (-game.score, game.completed_at, self._sequence[game.id])

    def _ordered(self) -> list[GameRecord]:
        return sorted(self._games, key=self._sort_key)

    def _rank_of(self, game: GameRecord) -> int:
        """1 + number of games with a higher score, or an equal score completed earlier."""
        key = self._sort_key(game)
        return 1 + sum(1 for other in self._games if self._sort_key(other) < key)

    @staticmethod
    def _entry(game: GameRecord, rank: int) -> LeaderboardEntry:
        return LeaderboardEntry(
            game_id=game.id,
            player_name=game.player_name,
            score=game.score,
            rounds=game.rounds,
            final_progress=game.final_progress,
            final_bugs=game.final_bugs,
            final_tech_debt=game.final_tech_debt,
            game_duration_seconds=game.game_duration_seconds,
            completed_at=game.completed_at,
            rank=rank,
        )
