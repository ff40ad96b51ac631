"""Process-wide outbound rate limiter.

All requests to the upstream search service share a single gate, no matter
how many HTTP requests are being served concurrently.
"""

from __future__ import annotations

import logging

from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.rate_limit.in_memory import MinIntervalRateLimiter
from app.core.config import settings

logger = logging.getLogger(__name__)


_limiter: AbstractRateLimiter | None = None


def get_rate_limiter() -> AbstractRateLimiter:
    """Return the process-wide outbound rate limiter.

    The instance is created on first use and cached in-module to preserve
    the last dispatch time across requests. Its interval is fixed at that
    point; later changes to ``SEARCH_MIN_INTERVAL_MS`` need a restart.

    Returns:
        AbstractRateLimiter: Configured limiter instance.
    """

    global _limiter

    if _limiter is None:
        config = settings.search.min_interval_ms
        _limiter = MinIntervalRateLimiter(min_interval_seconds=config / 1000)
        logger.info("rate_limit.configured", extra={"min_interval_ms": config})

    return _limiter
