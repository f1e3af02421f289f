"""flashdeck ASGI application.

Run with ``uvicorn flashdeck.main:app``.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flashdeck import __version__
from flashdeck.api import cards, decks, system
from flashdeck.core.config import Settings, get_settings
from flashdeck.core.database import db_manager
from flashdeck.core.middleware import RequestTracingMiddleware

# Every mapped class must be imported before the first query so that
# string relationship targets resolve.
from flashdeck.modules.cards.models import Card, Field  # noqa: F401
from flashdeck.modules.decks.models import Deck  # noqa: F401
from flashdeck.modules.templates.models import CardTemplate, TemplateField  # noqa: F401
from flashdeck.shared.errors import setup_exception_handlers
from flashdeck.shared.logging import get_logger, setup_logger

logger = get_logger(__name__)

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    setup_logger(settings)
    db_manager.init()
    logger.info(f"{settings.app.name} {__version__} started")
    try:
        yield
    finally:
        await db_manager.close()
        logger.info(f"{settings.app.name} stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Application settings; the cached instance when omitted.
    """
    settings = settings or get_settings()
    docs_enabled = settings.app.debug

    app = FastAPI(
        title=settings.app.name,
        description="Hierarchical flashcard decks and template-driven cards",
        version=__version__,
        debug=settings.app.debug,
        lifespan=lifespan,
        docs_url=f"{API_PREFIX}/docs" if docs_enabled else None,
        redoc_url=f"{API_PREFIX}/redoc" if docs_enabled else None,
        openapi_url=f"{API_PREFIX}/openapi.json" if docs_enabled else None,
        redirect_slashes=False,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.app.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTracingMiddleware)

    setup_exception_handlers(app)

    for module in (decks, cards):
        app.include_router(module.router, prefix=API_PREFIX)
    app.include_router(system.router)

    return app


app = create_app()
