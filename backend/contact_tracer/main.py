"""Contact Tracer API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TracerError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Logging configured on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py (three layers: domain,
      validation, catch-all) that never leak internal details
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from contact_tracer.api.error_handlers import register_error_handlers
from contact_tracer.api.routes import (
    health, history, locations, people, snapshot, tracing, visits,
)
from contact_tracer.config import get_settings
from contact_tracer.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    logger.info(
        f"Contact Tracer API started (high-risk threshold {settings.high_risk_threshold})",
    )
    yield
    logger.info("Contact Tracer API shutting down")


app = FastAPI(
    title="Contact Tracer API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes, registered explicitly
app.include_router(health.router)
app.include_router(people.router)
app.include_router(locations.router)
app.include_router(visits.router)
app.include_router(tracing.router)
app.include_router(history.router)
app.include_router(snapshot.router)

register_error_handlers(app)
