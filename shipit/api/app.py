"""
FastAPI Application - REST API for the leaderboard.

Endpoints:
    POST   /api/v1/scores                      Submit a finished game
    GET    /api/v1/leaderboard                 Global ranked games
    GET    /api/v1/leaderboard/stats           Game and player counts
    GET    /api/v1/leaderboard/player/{name}   Player stats and ranked games
    GET    /api/v1/players/{name}/stats        Player stats
    GET    /api/v1/players/{name}/games        Player games
    GET    /health                             Health check

All responses are JSON with explicit Pydantic schemas. Errors use
ErrorResponse with a machine-readable error_code.
"""

from typing import Optional
import logging
import os

from .. import __version__

# Environment configuration
SHIPIT_ENV = os.getenv("SHIPIT_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
SHIPIT_LOG_LEVEL = os.getenv("SHIPIT_LOG_LEVEL", "INFO").upper()
SCORE_RATE_LIMIT = int(os.getenv("SHIPIT_SCORE_RATE_LIMIT", "10"))
GENERAL_RATE_LIMIT = int(os.getenv("SHIPIT_GENERAL_RATE_LIMIT", "60"))
RATE_LIMIT_WINDOW_SECONDS = 60.0

logger = logging.getLogger(__name__)


def client_key(headers, client_host: Optional[str]) -> str:
    """Rate-limit key: first X-Forwarded-For hop, else the socket peer."""
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return client_host or "unknown"


def create_app(service=None, score_limiter=None, general_limiter=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional LeaderboardService instance (creates new if not provided)
        score_limiter: Optional SimpleRateLimiter for score submissions
        general_limiter: Optional SimpleRateLimiter for every /api/v1 request

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query, Request
        from fastapi.encoders import jsonable_encoder
        from fastapi.exceptions import RequestValidationError
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .rate_limit import SimpleRateLimiter
    from .service import LeaderboardService, SubmissionError
    from .schemas import (
        # Request models
        SubmitScoreRequest,
        # Response models
        ErrorResponse,
        HealthResponse,
        LeaderboardResponse,
        LeaderboardStatsResponse,
        Pagination,
        PlayerGamesResponse,
        PlayerLeaderboardResponse,
        PlayerStatsResponse,
        SubmitScoreResponse,
        # Enums
        ErrorCode,
    )

    logging.getLogger("shipit").setLevel(SHIPIT_LOG_LEVEL)

    app = FastAPI(
        title="Ship It Leaderboard API",
        description="""
Leaderboard for Draw It, Play It, Ship It.

Finished games are submitted with their final resources and the cards
played. Submissions are checked for plausibility before they are ranked.

## Error Codes

| Code | Description |
|------|-------------|
| `INVALID_GAME_STATE` | Submitted game failed validation |
| `PLAYER_NOT_FOUND` | No games recorded for this player |
| `RATE_LIMITED` | Too many requests from this client |
| `VALIDATION_ERROR` | Request body failed schema validation |
| `INTERNAL_ERROR` | Unexpected server error |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    leaderboard = service or LeaderboardService()
    score_limiter = score_limiter or SimpleRateLimiter(SCORE_RATE_LIMIT, RATE_LIMIT_WINDOW_SECONDS)
    general_limiter = general_limiter or SimpleRateLimiter(GENERAL_RATE_LIMIT, RATE_LIMIT_WINDOW_SECONDS)

    # Exposed for tests and operational tooling
    app.state.leaderboard = leaderboard
    app.state.score_limiter = score_limiter
    app.state.general_limiter = general_limiter

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def _key(request: Request) -> str:
        return client_key(request.headers, request.client.host if request.client else None)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Request validation failed",
            status_code=422,
            details={"errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return make_error_response(
            ErrorCode.INTERNAL_ERROR,
            "Internal server error",
            status_code=500,
        )

    @app.middleware("http")
    async def general_rate_limit(request: Request, call_next):
        if request.url.path.startswith("/api/v1") and not general_limiter.is_allowed(_key(request)):
            return make_error_response(
                ErrorCode.RATE_LIMITED,
                "Rate limit exceeded. Too many general requests.",
                status_code=429,
            )
        return await call_next(request)

    # =========================================================================
    # Score Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/scores",
        response_model=SubmitScoreResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Game failed validation"},
            429: {"model": ErrorResponse, "description": "Too many submissions"},
        },
        tags=["Scores"],
        summary="Submit a finished game",
    )
    async def submit_score(body: SubmitScoreRequest, request: Request):
        """
        Record a finished game and return its global rank.

        Games must be completed (100% progress, no bugs) and plausible
        for their number of rounds.
        """
        if not score_limiter.is_allowed(_key(request)):
            return make_error_response(
                ErrorCode.RATE_LIMITED,
                "Rate limit exceeded. Too many score requests.",
                status_code=429,
            )

        try:
            record, rank = leaderboard.submit_score(body)
        except SubmissionError as e:
            return make_error_response(
                ErrorCode.INVALID_GAME_STATE,
                f"Invalid game state: {e.reason}",
            )

        return SubmitScoreResponse(game=record, rank=rank)

    # =========================================================================
    # Leaderboard Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/leaderboard",
        response_model=LeaderboardResponse,
        tags=["Leaderboard"],
        summary="Global leaderboard",
    )
    async def get_leaderboard(
        limit: int = Query(100, ge=1, description="Capped at 100"),
        offset: int = Query(0, ge=0),
    ) -> LeaderboardResponse:
        limit = min(limit, 100)
        entries = leaderboard.get_leaderboard(limit=limit, offset=offset)
        return LeaderboardResponse(
            entries=entries,
            pagination=Pagination(limit=limit, offset=offset, has_more=len(entries) == limit),
        )

    @app.get(
        "/api/v1/leaderboard/stats",
        response_model=LeaderboardStatsResponse,
        tags=["Leaderboard"],
        summary="Leaderboard totals",
    )
    async def get_leaderboard_stats() -> LeaderboardStatsResponse:
        return LeaderboardStatsResponse(
            total_games=leaderboard.game_count(),
            total_players=leaderboard.player_count(),
        )

    @app.get(
        "/api/v1/leaderboard/player/{player_name}",
        response_model=PlayerLeaderboardResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Leaderboard"],
        summary="A player's stats and ranked games",
    )
    async def get_player_leaderboard(
        player_name: str,
        limit: int = Query(50, ge=1, description="Capped at 50"),
    ):
        stats = leaderboard.get_player_stats(player_name)
        if stats is None:
            return make_error_response(
                ErrorCode.PLAYER_NOT_FOUND,
                "Player not found",
                status_code=404,
            )
        return PlayerLeaderboardResponse(
            player_name=player_name,
            stats=stats,
            games=leaderboard.get_player_games(player_name, limit=min(limit, 50)),
        )

    # =========================================================================
    # Player Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/players/{player_name}/stats",
        response_model=PlayerStatsResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Players"],
        summary="Player statistics",
    )
    async def get_player_stats(player_name: str):
        stats = leaderboard.get_player_stats(player_name)
        if stats is None:
            return make_error_response(
                ErrorCode.PLAYER_NOT_FOUND,
                "Player not found",
                status_code=404,
            )
        return PlayerStatsResponse(stats=stats)

    @app.get(
        "/api/v1/players/{player_name}/games",
        response_model=PlayerGamesResponse,
        tags=["Players"],
        summary="Player games",
    )
    async def get_player_games(
        player_name: str,
        limit: int = Query(50, ge=1),
    ) -> PlayerGamesResponse:
        """Unknown players get an empty list."""
        return PlayerGamesResponse(
            player_name=player_name,
            games=leaderboard.get_player_games(player_name, limit=limit),
        )

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="shipit-leaderboard",
            version=__version__,
            environment=SHIPIT_ENV,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Ship It Leaderboard API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    logger.debug("Leaderboard API created (env=%s)", SHIPIT_ENV)
    return app


# For running directly: uvicorn shipit.api.app:app
app = create_app()
