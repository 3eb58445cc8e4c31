"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from newsbrief import __version__
from newsbrief.api.v1.router import api_router
from newsbrief.config import get_settings
from newsbrief.db import async_session, init_db
from newsbrief.logging_config import configure_logging
from newsbrief.services import FetchRunner, SchedulerService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup/shutdown events."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info(f"Starting {settings.app_name} in {settings.environment} mode")

    await init_db()
    logger.info("SQLite tables initialized")

    runner = FetchRunner(async_session)
    scheduler = SchedulerService(async_session, runner)
    app.state.fetch_runner = runner
    app.state.scheduler = scheduler
    await scheduler.init()

    yield

    logger.info("Shutting down...")
    scheduler.shutdown()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Scheduled news fetching with AI-generated summaries",
        version=__version__,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],  # Next.js dev server
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix=settings.api_v1_prefix)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "app": settings.app_name}

    return app


app = create_app()
