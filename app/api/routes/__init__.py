from __future__ import annotations

from app.api.routes.cards import router as cards_router
from app.api.routes.health import router as health_router

__all__ = ["cards_router", "health_router"]
