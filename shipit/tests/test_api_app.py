"""
Tests for the FastAPI leaderboard application.

Tests:
- Score submission and error codes
- Leaderboard and player endpoints
- Rate limiting
- Health and root endpoints
"""

import pytest
from fastapi.testclient import TestClient

from ..api.app import client_key, create_app
from ..api.rate_limit import SimpleRateLimiter
from ..api.service import LeaderboardService


def _payload(**overrides):
    data = {
        "player_name": "ada",
        "score": 800,
        "rounds": 15,
        "final_progress": 100,
        "final_bugs": 0,
        "final_tech_debt": 5,
        "game_duration_seconds": 300,
        "cards_played": [f"card-{i}" for i in range(20)],
    }
    data.update(overrides)
    return data


@pytest.fixture
def service():
    return LeaderboardService()


@pytest.fixture
def client(service):
    app = create_app(
        service=service,
        score_limiter=SimpleRateLimiter(3, 60),
        general_limiter=SimpleRateLimiter(1000, 60),
    )
    return TestClient(app)


class TestScores:
    """Tests for POST /api/v1/scores."""

    def test_submit_score(self, client, service):
        response = client.post("/api/v1/scores", json=_payload())

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["rank"] == 1
        assert body["game"]["player_name"] == "ada"
        assert len(body["game"]["game_state_hash"]) == 16
        assert service.game_count() == 1

    def test_invalid_game_state(self, client, service):
        response = client.post("/api/v1/scores", json=_payload(final_progress=80))

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error_code"] == "INVALID_GAME_STATE"
        assert body["error"] == "Invalid game state: Game must be completed (100% progress)"
        assert service.game_count() == 0

    def test_schema_violation(self, client):
        response = client.post("/api/v1/scores", json=_payload(player_name="bad name!"))

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_score_rate_limit(self, client):
        for _ in range(3):
            assert client.post("/api/v1/scores", json=_payload()).status_code == 200

        response = client.post("/api/v1/scores", json=_payload())

        assert response.status_code == 429
        assert response.json()["error_code"] == "RATE_LIMITED"

    def test_rate_limit_keyed_by_forwarded_for(self, client):
        for _ in range(3):
            client.post("/api/v1/scores", json=_payload(), headers={"X-Forwarded-For": "10.0.0.1"})

        other = client.post("/api/v1/scores", json=_payload(), headers={"X-Forwarded-For": "10.0.0.2"})

        assert other.status_code == 200


class TestLeaderboard:
    """Tests for leaderboard endpoints."""

    def test_leaderboard_order_and_pagination(self, client):
        for name, score in [("a", 300), ("b", 900), ("c", 600)]:
            client.post("/api/v1/scores", json=_payload(player_name=name, score=score))

        body = client.get("/api/v1/leaderboard", params={"limit": 2}).json()

        assert [e["player_name"] for e in body["entries"]] == ["b", "c"]
        assert [e["rank"] for e in body["entries"]] == [1, 2]
        assert body["pagination"] == {"limit": 2, "offset": 0, "has_more": True}

    def test_leaderboard_limit_capped(self, client):
        body = client.get("/api/v1/leaderboard", params={"limit": 500}).json()
        assert body["pagination"]["limit"] == 100
        assert body["entries"] == []

    def test_stats(self, client):
        client.post("/api/v1/scores", json=_payload(player_name="a"))
        client.post("/api/v1/scores", json=_payload(player_name="a", score=10))

        body = client.get("/api/v1/leaderboard/stats").json()

        assert body["total_games"] == 2
        assert body["total_players"] == 1

    def test_player_leaderboard(self, client):
        client.post("/api/v1/scores", json=_payload(player_name="ada", score=700))

        response = client.get("/api/v1/leaderboard/player/ada")

        assert response.status_code == 200
        body = response.json()
        assert body["stats"]["best_score"] == 700
        assert body["games"][0]["rank"] == 1

    def test_player_leaderboard_unknown(self, client):
        response = client.get("/api/v1/leaderboard/player/nobody")
        assert response.status_code == 404
        assert response.json()["error_code"] == "PLAYER_NOT_FOUND"


class TestPlayers:
    """Tests for player endpoints."""

    def test_player_stats(self, client):
        client.post("/api/v1/scores", json=_payload(player_name="ada", score=500))
        client.post("/api/v1/scores", json=_payload(player_name="ada", score=700))

        body = client.get("/api/v1/players/ada/stats").json()

        assert body["stats"]["total_games"] == 2
        assert body["stats"]["avg_score"] == 600

    def test_player_stats_unknown(self, client):
        assert client.get("/api/v1/players/nobody/stats").status_code == 404

    def test_player_games(self, client):
        client.post("/api/v1/scores", json=_payload(player_name="ada"))
        body = client.get("/api/v1/players/ada/games").json()
        assert body["player_name"] == "ada"
        assert len(body["games"]) == 1

    def test_player_games_unknown_is_empty(self, client):
        body = client.get("/api/v1/players/nobody/games").json()
        assert body["games"] == []


class TestSystem:
    """Tests for health, root and the general rate limit."""

    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["service"] == "shipit-leaderboard"

    def test_root(self, client):
        assert client.get("/").json()["health"] == "/health"

    def test_general_rate_limit(self):
        app = create_app(service=LeaderboardService(), general_limiter=SimpleRateLimiter(2, 60))
        client = TestClient(app)

        assert client.get("/api/v1/leaderboard").status_code == 200
        assert client.get("/api/v1/leaderboard").status_code == 200
        assert client.get("/api/v1/leaderboard").status_code == 429
        assert client.get("/health").status_code == 200

    def test_unexpected_error_returns_internal_error(self):
        class BrokenService(LeaderboardService):
            def get_leaderboard(self, limit=100, offset=0):
                raise RuntimeError("storage offline")

        app = create_app(service=BrokenService())
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/api/v1/leaderboard")

        assert response.status_code == 500
        body = response.json()
        assert body["error_code"] == "INTERNAL_ERROR"
        assert "storage offline" not in body["error"]

    def test_client_key(self):
        assert client_key({"x-forwarded-for": "1.2.3.4, 5.6.7.8"}, "9.9.9.9") == "1.2.3.4"
        assert client_key({}, "9.9.9.9") == "9.9.9.9"
        assert client_key({}, None) == "unknown"
