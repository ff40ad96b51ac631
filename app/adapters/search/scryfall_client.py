"""Scryfall search client adapter."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.adapters.search.base import AbstractSearchTransport, SearchPage
from app.core.errors import UpstreamAppError

logger = logging.getLogger(__name__)

SEARCH_ENDPOINT = "/cards/search"


class ScryfallSearchClient(AbstractSearchTransport):
    """Client for Scryfall's paginated ``/cards/search`` endpoint.

    Uses a shared ``httpx.AsyncClient``. Rate limiting is not handled here;
    callers gate each request through the process-wide limiter.
    """

    def __init__(
        self,
        base_url: str,
        user_agent: str,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Scryfall client.

        Args:
            base_url: Scryfall API base URL.
            user_agent: Value for the User-Agent header (Scryfall requires one).
            timeout_seconds: Timeout for requests in seconds.
            client: Optional pre-built httpx client (used by tests).
        """
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout_seconds,
            headers={
                "Accept": "application/json",
                "User-Agent": user_agent,
            },
        )

    @staticmethod
    def build_params(query: str, order: str, page: int) -> dict[str, Any]:
        """Build the query string for one search page."""
        return {
            "q": query,
            "order": order,
            "dir": "auto",
            "include_extras": "false",
            "include_multilingual": "false",
            "include_variations": "true",
            "unique": "cards",
            "page": page,
        }

    async def fetch_page(self, query: str, order: str, page: int) -> SearchPage:
        """Fetch one page of search results from Scryfall.

        Args:
            query: Scryfall query (e.g. "c:blue t:instant cmc<3").
            order: Sort order (name, released, edhrec, cmc, ...).
            page: 1-based page number.

        Returns:
            SearchPage: Parsed page, empty when Scryfall answers 404.

        Raises:
            UpstreamAppError: On network failures, non-success statuses
                other than 404, or an unparseable body.
        """
        params = self.build_params(query, order, page)

        try:
            response = await self.client.get(SEARCH_ENDPOINT, params=params)
        except httpx.HTTPError as exc:
            logger.error(
                "scryfall.request_failed",
                extra={
                    "page": page,
                    "exc_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            raise UpstreamAppError(
                code="upstream_unreachable",
                message=f"Scryfall request failed: {type(exc).__name__}",
                details={"upstream": "scryfall", "page": page},
            ) from exc

        if response.status_code == 404:
            logger.debug("scryfall.no_results", extra={"page": page})
            return SearchPage.empty()

        if response.is_error:
            raise self._build_status_error(response, page)

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamAppError(
                code="upstream_invalid_response",
                message="Scryfall returned a non-JSON response",
                details={
                    "upstream": "scryfall",
                    "http_status": response.status_code,
                    "page": page,
                },
            ) from exc

        if not isinstance(payload, dict):
            raise UpstreamAppError(
                code="upstream_invalid_response",
                message="Scryfall returned an unexpected response body",
                details={
                    "upstream": "scryfall",
                    "http_status": response.status_code,
                    "page": page,
                },
            )

        return self._parse_page(payload)

    @staticmethod
    def _parse_page(payload: dict[str, Any]) -> SearchPage:
        return SearchPage(
            items=list(payload.get("data") or []),
            has_more=bool(payload.get("has_more", False)),
            total_count=int(payload.get("total_cards") or 0),
        )

    @staticmethod
    def _build_status_error(response: httpx.Response, page: int) -> UpstreamAppError:
        status_code = response.status_code
        try:
            body = response.json()
        except ValueError:
            body = {}
        detail = body.get("details") if isinstance(body, dict) else None

        logger.warning(
            "scryfall.error_status",
            extra={"status_code": status_code, "page": page},
        )
        return UpstreamAppError(
            code="upstream_error",
            message=detail or f"Scryfall search error: {status_code}",
            details={
                "upstream": "scryfall",
                "http_status": status_code,
                "page": page,
            },
        )

    async def aclose(self) -> None:
        await self.client.aclose()
