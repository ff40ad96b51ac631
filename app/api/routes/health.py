from __future__ import annotations

from fastapi import APIRouter

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness probe.

    Does not touch the upstream search API, so it stays cheap and never
    consumes rate-limit budget.
    """

    return {"status": "ok"}
