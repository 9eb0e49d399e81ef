"""
Health check and metrics endpoints.
"""

from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from poi_catalog.config import get_settings
from poi_catalog.core.db import get_db
from poi_catalog.core.error_handlers import error_handler
from poi_catalog.core.metrics import get_metrics_snapshot

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Report service and database status."""
    settings = get_settings()
    try:
        db.execute(text("SELECT 1"))
        database = {"status": "healthy"}
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        database = {"status": "unhealthy", "error": str(e)}

    return {
        "status": "healthy" if database["status"] == "healthy" else "unhealthy",
        "version": settings.app_version,
        "environment": settings.environment.value,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "details": {"database": database},
    }


@router.get("/metrics")
def metrics():
    """Latency timers and error counters collected since startup."""
    return {
        "latency": get_metrics_snapshot(),
        "errors": error_handler.get_error_statistics(),
    }
