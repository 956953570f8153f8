# freelance_booking/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .core.config import settings
from .errors import register_error_handlers
from .routes import health, prometheus
from .routes.v1 import (
    availability as availability_v1,
    bookings as bookings_v1,
    notifications as notifications_v1,
)

# Configure logging
logging.basicConfig(
    level=settings.log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown without deprecated events."""
    logger.info("Freelance booking API starting up...")
    logger.info(f"Environment: {settings.environment}")
    if settings.redis_url:
        logger.info("Calendar lock: process-local + Redis")
    else:
        logger.info("Calendar lock: process-local only (REDIS_URL unset)")
    yield
    logger.info("Freelance booking API shutting down...")


app = FastAPI(
    title="Freelance Booking API",
    description="Booking lifecycle, calendar conflicts and notifications for the freelancer marketplace",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
)

# Register unified error envelope handlers
register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=["*"],
    allow_headers=CORS_ALLOW_HEADERS,
)
logger.info("CORS allow_origins=%s", settings.cors_allow_origins)

api_v1 = APIRouter(prefix="/api/v1")
api_v1.include_router(bookings_v1.router, prefix="/bookings")
api_v1.include_router(notifications_v1.router, prefix="/notifications")
api_v1.include_router(availability_v1.router, prefix="/availability")
app.include_router(api_v1)

# Infrastructure routes stay unversioned
app.include_router(health.router)
app.include_router(prometheus.router)
