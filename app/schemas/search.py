"""Pydantic schemas for card search responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class CardSearchResponse(BaseModel):
    """One page of card search results served from the pagination cache."""

    query: str = Field(
        ...,
        description="Full upstream query, including the format filter if one was applied.",
    )
    order: str = Field(..., description="Sort order used for the search.")
    page: int = Field(..., ge=1, description="1-based page number of this response.")
    limit: int = Field(..., ge=1, description="Page size actually applied (after capping).")
    offset: int = Field(..., ge=0, description="Index of the first card in this page.")
    total_count: int = Field(
        ...,
        ge=0,
        description="Upstream estimate of the total number of matching cards.",
    )
    has_more: bool = Field(..., description="Whether more results exist after this page.")
    next_page: int | None = Field(
        default=None,
        description="Page number to request next, or null when there are no more results.",
    )
    cards: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Card objects exactly as returned by the upstream API.",
    )


class CacheStatsResponse(BaseModel):
    """Pagination cache metrics."""

    page_size: int
    ttl_seconds: float
    max_entries: int | None = None
    entries: int
    buffered_items: int
    windows: int
    page_fetches: int
    resets: int
    evictions: int
