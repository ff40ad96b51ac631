from fastapi import APIRouter, Query

from app.adapters.search.factory import create_search_transport
from app.core.config import settings
from app.core.rate_limit import get_rate_limiter
from app.schemas.search import CacheStatsResponse, CardSearchResponse
from app.services.pagination_cache import PaginationCache
from app.services.search_service import SearchService

router = APIRouter(tags=["Cards"])

# One transport, one cache and one service per process
_transport = create_search_transport()
_cache = PaginationCache(
    transport=_transport,
    rate_limiter=get_rate_limiter(),
    page_size=settings.search.page_size,
    ttl_seconds=settings.cache.ttl_seconds,
    max_entries=settings.cache.max_entries,
)
_search_service = SearchService(cache=_cache)


@router.get("/cards/search", response_model=CardSearchResponse)
async def search_cards(
    q: str = Query(
        ...,
        description=(
            "Scryfall query string. Common filters: c: (color), ci: (color identity), "
            "t: (type), o: (oracle text), otag: (tag), cmc: (mana value)."
        ),
    ),
    page: int = Query(1, ge=1, description="Page number (1-based)."),
    limit: int | None = Query(
        None,
        ge=1,
        description="Cards per page (default 20, capped at the configured maximum).",
    ),
    order: str | None = Query(
        None,
        description="Sort order: name, released, edhrec, cmc, color, rarity, power, toughness.",
    ),
    format: str | None = Query(
        None,
        description="Restrict to cards legal in a format (commander, modern, ...). Use 'all' for no filter.",
    ),
) -> CardSearchResponse:
    """Search cards and return one page of results.

    Pages are served from the pagination cache; only upstream pages that are
    not buffered yet are fetched.

    Raises:
        ValidationAppError: 400 when the query is blank.
        UpstreamAppError: 502 when the upstream search fails.
    """
    return await _search_service.search(
        q,
        page=page,
        limit=limit,
        order=order,
        card_format=format,
    )


@router.get("/cache/stats", response_model=CacheStatsResponse)
def cache_stats() -> CacheStatsResponse:
    """Expose pagination cache metrics."""
    return CacheStatsResponse(**_cache.stats())


async def close_transport() -> None:
    """Close the upstream HTTP client (called on application shutdown)."""
    await _transport.aclose()
