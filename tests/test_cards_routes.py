"""Tests for the card search API routes.

The upstream transport is never reached: the process-wide cache's
``request_window`` is patched so routes, service and error handlers are
exercised end to end without network access.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from app.api.routes import cards as cards_routes
from app.core.errors import UpstreamAppError
from app.main import app
from app.services.pagination_cache import WindowResult


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def request_window():
    """Patch the shared cache so no upstream request is made."""
    mock = AsyncMock(
        return_value=WindowResult(
            items=[{"name": "Lightning Bolt"}, {"name": "Lightning Helix"}],
            total_count=42,
            has_more=True,
        )
    )
    with patch.object(cards_routes._cache, "request_window", mock):
        yield mock


def test_search_returns_page(client: TestClient, request_window: AsyncMock) -> None:
    response = client.get(
        "/v1/cards/search",
        params={"q": "o:lightning", "page": 2, "limit": 2, "order": "released", "format": "modern"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["query"] == "o:lightning format:modern"
    assert data["order"] == "released"
    assert data["page"] == 2
    assert data["offset"] == 2
    assert data["total_count"] == 42
    assert data["has_more"] is True
    assert data["next_page"] == 3
    assert [card["name"] for card in data["cards"]] == ["Lightning Bolt", "Lightning Helix"]
    request_window.assert_awaited_once_with("o:lightning format:modern", "released", 2, 2)


def test_search_uses_defaults(client: TestClient, request_window: AsyncMock) -> None:
    response = client.get("/v1/cards/search", params={"q": "t:goblin"})

    assert response.status_code == 200
    request_window.assert_awaited_once_with("t:goblin format:commander", "name", 0, 20)


def test_blank_query_returns_400(client: TestClient, request_window: AsyncMock) -> None:
    response = client.get("/v1/cards/search", params={"q": "   "})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "empty_query"
    assert "request_id" in error
    request_window.assert_not_awaited()


@pytest.mark.parametrize(
    "params",
    [
        {},
        {"q": "t:goblin", "page": 0},
        {"q": "t:goblin", "limit": 0},
    ],
)
def test_invalid_parameters_return_422(client: TestClient, request_window: AsyncMock, params: dict) -> None:
    response = client.get("/v1/cards/search", params=params)

    assert response.status_code == 422
    request_window.assert_not_awaited()


def test_upstream_failure_returns_502(client: TestClient, request_window: AsyncMock) -> None:
    request_window.side_effect = UpstreamAppError(
        code="upstream_error",
        message="Scryfall search error: 503",
        details={"upstream": "scryfall", "http_status": 503},
    )

    response = client.get("/v1/cards/search", params={"q": "t:goblin"})

    assert response.status_code == 502
    error = response.json()["error"]
    assert error["code"] == "upstream_error"
    assert error["message"] == "Scryfall search error: 503"
    assert error["details"]["http_status"] == 503


def test_cache_stats(client: TestClient) -> None:
    response = client.get("/v1/cache/stats")

    assert response.status_code == 200
    data = response.json()
    assert data["page_size"] == 175
    assert data["ttl_seconds"] == 300
    assert {"entries", "windows", "page_fetches", "resets", "evictions"} <= data.keys()


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
