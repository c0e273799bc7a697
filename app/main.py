"""
Main FastAPI application.

This is the entry point for the API server.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.core.config import settings
from app.errors import AppError, app_error_handler
from app.routers import assessments, health


logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for the FastAPI app.

    Runs once when the server starts and once when it stops.
    """
    logger.info("Starting %s (model=%s)", settings.APP_NAME, settings.GEMINI_MODEL)
    if not settings.GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY is not set; analysis requests will fail until it is configured")

    yield  # The server runs while we're "yielded" here

    logger.info("Shutting down %s", settings.APP_NAME)


# Create the FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Candidate assessment lifecycle and AI analysis API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_exception_handler(AppError, app_error_handler)

# Include routers (API endpoints)
app.include_router(health.router, tags=["Health"])
app.include_router(assessments.router)
