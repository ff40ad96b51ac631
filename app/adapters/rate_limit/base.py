"""Rate limiter interfaces.

The pagination cache depends on this abstraction (not the concrete
implementation) so the spacing policy can be swapped or faked in tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class AbstractRateLimiter(ABC):
    """Interface for outbound request gates."""

    @abstractmethod
    async def gate(self) -> None:
        """Wait until the next outbound request may be dispatched.

        Returns once the caller is allowed to send exactly one upstream
        request. Implementations only delay; they never raise for
        throttling reasons.
        """
        raise NotImplementedError
