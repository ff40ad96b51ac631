"""In-memory minimum-interval rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective rate.
- Waiters are serialized through an asyncio lock, so dispatches happen on a
  single timeline in roughly the order callers arrived.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable

from app.adapters.rate_limit.base import AbstractRateLimiter

logger = logging.getLogger(__name__)


class MinIntervalRateLimiter(AbstractRateLimiter):
    """Gate ensuring a minimum spacing between consecutive dispatches.

    Upstream APIs such as Scryfall ask clients to keep 50-100 ms between
    requests. Every caller awaits ``gate()`` right before sending a request;
    the limiter sleeps just long enough to honour the spacing measured from
    the previous dispatch anywhere in the process.
    """

    def __init__(
        self,
        *,
        min_interval_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the limiter.

        Args:
            min_interval_seconds: Minimum spacing between two dispatches.
            clock: Monotonic time source returning seconds.
            sleep: Coroutine used to suspend the caller.

        Raises:
            ValueError: If min_interval_seconds is negative.
        """
        if min_interval_seconds < 0:
            raise ValueError("min_interval_seconds must be >= 0")

        self._min_interval = min_interval_seconds
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last_dispatch: float | None = None

    @property
    def min_interval_seconds(self) -> float:
        return self._min_interval

    @property
    def last_dispatch(self) -> float | None:
        """Clock reading of the most recent dispatch, or None before the first."""
        return self._last_dispatch

    def _compute_wait(self, now: float) -> float:
        if self._last_dispatch is None:
            return 0.0
        return self._min_interval - (now - self._last_dispatch)

    async def gate(self) -> None:
        """Suspend the caller until the minimum interval has elapsed.

        The dispatch timestamp is recorded after the (possibly delayed) wake
        up, so the next caller measures its spacing from the real dispatch
        point rather than from when this caller arrived.
        """
        async with self._lock:
            wait = self._compute_wait(self._clock())
            if wait > 0:
                logger.debug(
                    "rate_limit.wait",
                    extra={"wait_ms": round(wait * 1000, 2)},
                )
                await self._sleep(wait)
            self._last_dispatch = self._clock()
