"""Journal Coach API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map JournalCoachError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager
    - Tool registry built once per app and shared read-only via app.state

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - create_app() factory so tests get a fresh app with the same wiring
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from journal_coach.api.error_handlers import register_error_handlers
from journal_coach.api.routes import api_keys, chat_stream, health, mcp
from journal_coach.config import get_settings
from journal_coach.infrastructure.database import init_db
from journal_coach.infrastructure.observability import setup_logging
from journal_coach.services.tools_registry import build_tool_registry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Journal Coach API started")
    yield
    logger.info("Journal Coach API shutting down")
    await manager.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Journal Coach API", version="1.0.0", lifespan=lifespan,
    )
    app.state.tool_registry = build_tool_registry()

    settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes: explicit registration
    app.include_router(health.router)
    app.include_router(mcp.router)
    app.include_router(api_keys.router)
    app.include_router(chat_stream.router)

    register_error_handlers(app)
    return app


app = create_app()
