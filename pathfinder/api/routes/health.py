"""
Health check endpoints
"""

import time

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
import structlog

from pathfinder.core.clock import utcnow
from pathfinder.core.config import settings
from pathfinder.database.connection import get_database

logger = structlog.get_logger(__name__)
router = APIRouter()

_started = time.monotonic()


def _base_status() -> dict:
    return {
        "status": "ok",
        "timestamp": utcnow().isoformat(),
        "uptime": round(time.monotonic() - _started, 3),
        "environment": settings.environment,
    }

@router.get("/health")
async def health_check():
    """Basic health check"""
    return _base_status()

@router.get("/health/detailed")
async def detailed_health_check(db: Session = Depends(get_database)):
    """Detailed health check with database connectivity"""
    db_error = None
    try:
        # Test database connection
        db.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception as e:
        logger.error("Database health check failed", error=str(e))
        db_status = "disconnected"
        db_error = str(e)

    body = _base_status()
    body["status"] = "ok" if db_status == "connected" else "degraded"
    body["database"] = {"status": db_status, "error": db_error}
    return body
