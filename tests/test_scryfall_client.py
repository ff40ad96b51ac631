"""Tests for the Scryfall search transport using httpx.MockTransport."""

from __future__ import annotations

from typing import Callable

import httpx
import pytest

from app.adapters.search.base import SearchPage
from app.adapters.search.scryfall_client import ScryfallSearchClient
from app.core.errors import UpstreamAppError

BASE_URL = "https://api.scryfall.test"


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> ScryfallSearchClient:
    http = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return ScryfallSearchClient(base_url=BASE_URL, user_agent="tests", client=http)


@pytest.mark.asyncio
async def test_parses_search_page_and_sends_query_params() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "object": "list",
                "total_cards": 412,
                "has_more": True,
                "data": [{"name": "Counterspell"}, {"name": "Brainstorm"}],
            },
        )

    client = _client(handler)
    page = await client.fetch_page("c:blue t:instant", "edhrec", 3)
    await client.aclose()

    assert page == SearchPage(
        items=[{"name": "Counterspell"}, {"name": "Brainstorm"}],
        has_more=True,
        total_count=412,
    )
    params = seen[0].url.params
    assert seen[0].url.path == "/cards/search"
    assert params["q"] == "c:blue t:instant"
    assert params["order"] == "edhrec"
    assert params["page"] == "3"
    assert params["unique"] == "cards"
    assert params["include_extras"] == "false"


@pytest.mark.asyncio
async def test_not_found_is_an_empty_page() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            404,
            json={"object": "error", "code": "not_found", "details": "Your query didn't match any cards."},
        )

    client = _client(handler)
    page = await client.fetch_page("t:nonsense", "name", 1)

    assert page == SearchPage.empty()


@pytest.mark.asyncio
async def test_error_status_uses_upstream_details() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={"object": "error", "code": "bad_request", "details": "All of your terms were ignored."},
        )

    client = _client(handler)

    with pytest.raises(UpstreamAppError) as exc_info:
        await client.fetch_page("???", "name", 1)

    assert exc_info.value.code == "upstream_error"
    assert exc_info.value.message == "All of your terms were ignored."
    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_error_status_without_body_has_generic_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, text="slow down")

    client = _client(handler)

    with pytest.raises(UpstreamAppError) as exc_info:
        await client.fetch_page("t:goblin", "name", 2)

    assert exc_info.value.message == "Scryfall search error: 429"
    assert exc_info.value.status_code == 429
    assert exc_info.value.details["page"] == 2


@pytest.mark.asyncio
async def test_network_failure_is_upstream_unreachable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)

    with pytest.raises(UpstreamAppError) as exc_info:
        await client.fetch_page("t:goblin", "name", 1)

    assert exc_info.value.code == "upstream_unreachable"
    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response_kwargs",
    [
        {"text": "<html>maintenance</html>"},
        {"json": []},
        {"json": "oops"},
        {"content": b"null", "headers": {"Content-Type": "application/json"}},
    ],
)
async def test_malformed_success_body_is_rejected(response_kwargs: dict) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, **response_kwargs)

    client = _client(handler)

    with pytest.raises(UpstreamAppError) as exc_info:
        await client.fetch_page("t:goblin", "name", 1)

    assert exc_info.value.code == "upstream_invalid_response"
    assert exc_info.value.status_code == 200


@pytest.mark.asyncio
async def test_default_client_sends_identifying_headers() -> None:
    client = ScryfallSearchClient(base_url=BASE_URL + "/", user_agent="CardSearchPager/9.9")

    assert client.base_url == BASE_URL
    assert client.client.headers["User-Agent"] == "CardSearchPager/9.9"
    assert client.client.headers["Accept"] == "application/json"

    await client.aclose()
