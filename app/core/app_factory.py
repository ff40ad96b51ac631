"""Application factory for the FastAPI app.

Centralizes app construction (logging, middleware, handlers, routers and
shutdown hooks) so tests and the ASGI entrypoint build the same app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api.routes import cards_router, health_router
from app.api.routes.cards import close_transport
from app.core.config import settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    await close_transport()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Card Search Pager API",
        description=(
            "Serves arbitrary pages of card search results on top of Scryfall's "
            "fixed-size pagination. Upstream pages are fetched on demand, spaced "
            "by a process-wide rate limiter and cached per (query, order)."
        ),
        version="0.1.0",
        debug=settings.app.debug,
        lifespan=lifespan,
    )

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(cards_router, prefix="/v1")
    app.include_router(health_router)

    return app
