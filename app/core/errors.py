"""Application-level exception types.

This module defines the errors shared by the cache, the upstream adapters and
the HTTP layer, so failures are logged and rendered the same way everywhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    All fields are optional; include only what helps diagnose the failure.
    """

    code: str
    message: str
    hint: str
    http_status: int
    upstream: str
    query: str
    page: int
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class UpstreamAppError(AppError):
    """Raised when the upstream search service fails.

    A "no results" answer is not an error; transports translate it into an
    empty page. Everything else (non-success status, network failure) ends
    up here and is propagated to the caller without retries.
    """

    @property
    def status_code(self) -> int | None:
        """HTTP status reported by the upstream, if a response was received."""
        if not self.details:
            return None
        return self.details.get("http_status")
