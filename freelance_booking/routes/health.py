# freelance_booking/routes/health.py
"""
Health check endpoint for monitoring and load balancer probes.
"""

from datetime import datetime, timezone
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import text
from sqlalchemy.orm import Session

from .. import __version__
from ..api.dependencies.database import get_db
from ..core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health(response: Response, db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Liveness plus a cheap round-trip to the calendar store."""
    database_ok = True
    try:
        db.execute(text("SELECT 1"))
    except Exception as exc:
        database_ok = False
        logger.warning(f"Health check database probe failed: {str(exc)}")
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return {
        "status": "healthy" if database_ok else "degraded",
        "service": "freelance-booking-api",
        "version": __version__,
        "environment": settings.environment,
        "database": "ok" if database_ok else "unavailable",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }
