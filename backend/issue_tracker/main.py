"""Issue Tracker API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map IssueTrackerError → text/plain responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Static front-end mounted AFTER API routes so /api/* takes precedence
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from issue_tracker import __version__
from issue_tracker.api.error_handlers import register_error_handlers
from issue_tracker.api.routes import health, issues
from issue_tracker.config import get_settings
from issue_tracker.infrastructure import database
from issue_tracker.infrastructure.observability import (
    make_request_logger, setup_logging,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Issue Tracker API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("Issue Tracker API shutting down")


app = FastAPI(
    title="Issue Tracker API", version=__version__, lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
if settings.log_requests:
    app.middleware("http")(make_request_logger())

app.include_router(health.router)
app.include_router(issues.router)

register_error_handlers(app)

if os.path.isdir(settings.static_dir):
    app.mount(
        "/", StaticFiles(directory=settings.static_dir, html=True), name="static",
    )
