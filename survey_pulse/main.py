"""Survey Pulse API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map SurveyPulseError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from survey_pulse.api.error_handlers import register_error_handlers
from survey_pulse.api.routes import admin, health, responses, surveys, users
from survey_pulse.config import get_settings
from survey_pulse.infrastructure import database
from survey_pulse.infrastructure.observability import setup_logging

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
    logger.info("Survey Pulse API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("Survey Pulse API shutting down")


app = FastAPI(
    title="Survey Pulse API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(surveys.router)
app.include_router(responses.router)
app.include_router(users.router)
app.include_router(admin.router)

register_error_handlers(app)
