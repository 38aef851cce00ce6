"""
FastAPI application factory.

``create_app()`` assembles the application with CORS, error handlers,
routers, and the health endpoint. The module-level ``app`` instance
allows ``uvicorn talkitout.api.app:app --reload``.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from talkitout.api import websocket
from talkitout.api.dependencies import build_services
from talkitout.api.middleware.error_handler import register_error_handlers
from talkitout.api.routes import entries, profile, recording
from talkitout.core.config import get_settings
from talkitout.core.models import HealthResponse
from talkitout.services.storage.database import close_db, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown lifecycle.

    Startup: configure logging, create tables, build the services, and retry
    uploads left pending by a previous run.
    Shutdown: wait for in-flight classification/upload tasks, then dispose
    the DB engine.
    """
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    await init_db()
    app.state.services = build_services(settings)

    try:
        await app.state.services.controller.retry_pending_uploads()
    except Exception:
        logger.exception("Retrying pending uploads at startup failed")

    yield

    await app.state.services.aclose()
    await close_db()


def create_app() -> FastAPI:
    """Build and return a fully configured FastAPI application.

    Returns:
        FastAPI: The configured application, ready for ``uvicorn``.
    """

    app = FastAPI(
        title="TalkItOut",
        description="Voice journaling with live transcription, topic prompts, "
        "and daily streaks.",
        version="0.1.0",
        lifespan=lifespan,
    )

    # -- CORS --
    settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -- Error handlers --
    register_error_handlers(app)

    # -- Health check (root-level, not under /api/v1) --
    @app.get("/health", response_model=HealthResponse, tags=["system"])
    async def health() -> HealthResponse:
        return HealthResponse(timestamp=datetime.now(UTC))

    # -- REST routes --
    app.include_router(recording.router, prefix="/api/v1")
    app.include_router(entries.router, prefix="/api/v1")
    app.include_router(profile.router, prefix="/api/v1")

    # -- WebSocket --
    app.include_router(websocket.router)

    return app


app = create_app()
