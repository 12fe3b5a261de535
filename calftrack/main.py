"""Calftrack API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CalftrackError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup and disposed on shutdown via lifespan

Design Decisions:
    - Lifespan over @app.on_event
    - Error handlers live in api/error_handlers.py to keep this module wiring-only
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from calftrack.api.error_handlers import register_error_handlers
from calftrack.api.routes import calves, health, loads, master_data, ranches
from calftrack.config import get_settings
from calftrack.infrastructure import database
from calftrack.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format, settings.log_sql)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Calftrack API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("Calftrack API shutting down")


app = FastAPI(title="Calftrack API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(ranches.router)
app.include_router(master_data.breeds_router)
app.include_router(master_data.sellers_router)
app.include_router(calves.router)
app.include_router(loads.router)

register_error_handlers(app)
