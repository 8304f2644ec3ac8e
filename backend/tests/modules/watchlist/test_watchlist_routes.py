"""Tests for the watchlist endpoints."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.dependencies import get_auth_service, get_watchlist_service
from api.middleware.auth import get_current_user
from modules.auth.exceptions import UnauthorizedError
from modules.watchlist.service import WatchlistService
from shared.models import User
from tests.fakes import InMemoryWatchlistRepository

USER = User(id="7", email="alice@example.com")


def rejecting_auth_service() -> MagicMock:
    auth = MagicMock()
    auth.get_current_user = AsyncMock(side_effect=UnauthorizedError())
    return auth


@pytest.fixture
def items() -> InMemoryWatchlistRepository:
    return InMemoryWatchlistRepository()


@pytest.fixture
def client(items) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_current_user] = lambda: USER
    app.dependency_overrides[get_watchlist_service] = lambda: WatchlistService(repository=items)
    return TestClient(app)


class TestWatchlistRoutes:
    def test_requires_session(self, items):
        """Without a session override the real auth dependency rejects the request."""
        app = create_app()
        app.dependency_overrides[get_auth_service] = lambda: rejecting_auth_service()
        app.dependency_overrides[get_watchlist_service] = lambda: WatchlistService(repository=items)

        response = TestClient(app).get("/api/watchlist")

        assert response.status_code == 401

    def test_add_then_list(self, client):
        created = client.post(
            "/api/watchlist",
            json={"movie_id": 550, "media_type": "movie", "title": "Fight Club"},
        )

        assert created.status_code == 201
        assert created.json() == {"message": "Successfully added to watchlist", "id": "1"}

        listed = client.get("/api/watchlist")
        assert listed.status_code == 200
        assert listed.json()["watchlist"][0]["id"] == 550
        assert listed.json()["watchlist"][0]["media_type"] == "movie"

    def test_duplicate_is_409(self, client):
        body = {"movie_id": 550, "media_type": "movie", "title": "Fight Club"}
        client.post("/api/watchlist", json=body)

        response = client.post("/api/watchlist", json=body)

        assert response.status_code == 409
        assert response.json()["message"] == "Item already in watchlist"

    def test_missing_title_is_400(self, client):
        response = client.post("/api/watchlist", json={"movie_id": 550, "media_type": "movie"})

        assert response.status_code == 400
        assert response.json()["message"] == "Media type and title are required"

    def test_delete(self, client, items):
        client.post(
            "/api/watchlist",
            json={"tv_id": 1399, "media_type": "tv", "title": "GoT"},
        )

        response = client.delete("/api/watchlist/tv/1399")

        assert response.status_code == 204
        assert items.items == []

    def test_delete_missing_is_404(self, client):
        response = client.delete("/api/watchlist/movie/1")

        assert response.status_code == 404
        assert response.json()["message"] == "Item not found in watchlist"
