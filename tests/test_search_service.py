"""Unit tests for SearchService."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core.config import settings
from app.core.errors import UpstreamAppError, ValidationAppError
from app.services.pagination_cache import WindowResult
from app.services.search_service import SearchService, build_query, page_to_window


def _service(window: WindowResult | None = None) -> tuple[SearchService, MagicMock]:
    cache = MagicMock()
    cache.request_window = AsyncMock(
        return_value=window or WindowResult(items=[], total_count=0, has_more=False)
    )
    return SearchService(cache=cache), cache


class TestHelperFunctions:
    def test_build_query_appends_format(self) -> None:
        assert build_query("t:goblin", "modern") == "t:goblin format:modern"

    @pytest.mark.parametrize("card_format", ["all", "ALL", "", None])
    def test_build_query_without_filter(self, card_format) -> None:
        assert build_query("t:goblin", card_format) == "t:goblin"

    def test_page_to_window_first_page(self) -> None:
        assert page_to_window(1, 20, 175) == (0, 20)

    def test_page_to_window_later_page(self) -> None:
        assert page_to_window(3, 20, 175) == (40, 20)

    def test_page_to_window_caps_limit(self) -> None:
        assert page_to_window(2, 500, 175) == (175, 175)


class TestSearch:
    @pytest.mark.asyncio
    async def test_defaults_applied(self) -> None:
        service, cache = _service()

        result = await service.search("  t:elf  ")

        cache.request_window.assert_awaited_once_with(
            f"t:elf format:{settings.app.default_format}",
            settings.app.default_order,
            0,
            settings.app.default_limit,
        )
        assert result.page == 1
        assert result.next_page is None

    @pytest.mark.asyncio
    async def test_maps_window_to_response(self) -> None:
        window = WindowResult(items=[{"name": "Llanowar Elves"}], total_count=45, has_more=True)
        service, cache = _service(window)

        result = await service.search("t:elf", page=2, limit=20, order="cmc", card_format="all")

        cache.request_window.assert_awaited_once_with("t:elf", "cmc", 20, 20)
        assert result.query == "t:elf"
        assert result.offset == 20
        assert result.total_count == 45
        assert result.has_more is True
        assert result.next_page == 3
        assert result.cards == [{"name": "Llanowar Elves"}]

    @pytest.mark.asyncio
    async def test_limit_is_capped(self) -> None:
        service, cache = _service()

        result = await service.search("t:elf", limit=10_000, card_format="all")

        assert result.limit == settings.app.max_limit
        cache.request_window.assert_awaited_once_with(
            "t:elf", settings.app.default_order, 0, settings.app.max_limit
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["", "   ", "\n"])
    async def test_blank_query_rejected(self, query: str) -> None:
        service, cache = _service()

        with pytest.raises(ValidationAppError) as exc_info:
            await service.search(query)

        assert exc_info.value.code == "empty_query"
        cache.request_window.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_page_rejected(self) -> None:
        service, _ = _service()

        with pytest.raises(ValidationAppError) as exc_info:
            await service.search("t:elf", page=0)

        assert exc_info.value.code == "invalid_page"

    @pytest.mark.asyncio
    async def test_upstream_error_propagates(self) -> None:
        service, cache = _service()
        cache.request_window.side_effect = UpstreamAppError(
            code="upstream_error", message="Scryfall search error: 500", details={"http_status": 500}
        )

        with pytest.raises(UpstreamAppError):
            await service.search("t:elf")
