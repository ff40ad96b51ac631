"""Card search service mapping page-based requests onto the pagination cache.

Clients think in pages of ``limit`` cards; the cache thinks in
(offset, limit) windows. This service:
- validates and normalizes the query
- applies the format legality filter
- caps the page size and converts page numbers to offsets
- shapes the cache window into the public response schema
"""

from __future__ import annotations

import logging

from app.core.config import settings
from app.core.errors import ValidationAppError
from app.schemas.search import CardSearchResponse
from app.services.pagination_cache import PaginationCache

logger = logging.getLogger(__name__)

NO_FORMAT_FILTER = "all"


def build_query(query: str, card_format: str | None) -> str:
    """Append a ``format:`` legality filter unless disabled.

    Args:
        query: Raw user query (already stripped).
        card_format: Format name, ``"all"`` or None to skip filtering.

    Returns:
        Query string sent upstream.
    """
    if card_format and card_format.lower() != NO_FORMAT_FILTER:
        return f"{query} format:{card_format}"
    return query


def page_to_window(page: int, limit: int, max_limit: int) -> tuple[int, int]:
    """Convert a 1-based page number into an (offset, limit) window.

    Args:
        page: 1-based page number.
        limit: Requested page size.
        max_limit: Upper bound for the page size.

    Returns:
        Tuple of (offset, capped_limit).
    """
    capped = min(limit, max_limit)
    return (page - 1) * capped, capped


class SearchService:
    """Service answering paged card searches from the pagination cache.

    Attributes:
        cache: Pagination cache shared by all requests of the process.
    """

    def __init__(self, cache: PaginationCache) -> None:
        self.cache = cache

    def _validate(self, query: str, page: int, limit: int) -> str:
        stripped = (query or "").strip()
        if not stripped:
            raise ValidationAppError(
                code="empty_query",
                message="Please provide a search query.",
            )
        if page < 1:
            raise ValidationAppError(
                code="invalid_page",
                message="Page must be >= 1.",
                details={"page": page},
            )
        if limit < 1:
            raise ValidationAppError(
                code="invalid_limit",
                message="Limit must be >= 1.",
            )
        return stripped

    async def search(
        self,
        query: str,
        *,
        page: int = 1,
        limit: int | None = None,
        order: str | None = None,
        card_format: str | None = None,
    ) -> CardSearchResponse:
        """Return one page of cards for a query.

        Args:
            query: Scryfall query syntax (e.g. "ci:simic t:creature cmc<=3").
            page: 1-based page number.
            limit: Cards per page; defaults to settings and is capped.
            order: Sort order; defaults to settings.
            card_format: Format legality filter; defaults to settings.

        Returns:
            CardSearchResponse for the requested page.

        Raises:
            ValidationAppError: If the query is blank or page/limit invalid.
            UpstreamAppError: If the upstream search fails.
        """
        limit = settings.app.default_limit if limit is None else limit
        order = order or settings.app.default_order
        card_format = settings.app.default_format if card_format is None else card_format

        stripped = self._validate(query, page, limit)
        full_query = build_query(stripped, card_format)
        offset, capped_limit = page_to_window(page, limit, settings.app.max_limit)

        logger.info(
            "search.requested",
            extra={
                "query": full_query,
                "order": order,
                "page": page,
                "offset": offset,
                "limit": capped_limit,
            },
        )

        window = await self.cache.request_window(full_query, order, offset, capped_limit)

        return CardSearchResponse(
            query=full_query,
            order=order,
            page=page,
            limit=capped_limit,
            offset=offset,
            total_count=window.total_count,
            has_more=window.has_more,
            next_page=page + 1 if window.has_more else None,
            cards=window.items,
        )
