"""Health check endpoints."""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from webculus.config import settings
from webculus.db.session import get_db
from webculus.services.rate_limiter import require_api_rate_limit

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health")
async def health():
    """Liveness only; does not touch the database."""
    return {"status": "healthy", "service": "webculus-backend"}


@router.get("/api/health", dependencies=[Depends(require_api_rate_limit)])
def api_health(db: Session = Depends(get_db)):
    """Readiness: 200 when the database answers, 503 otherwise."""
    started = time.perf_counter()
    now = datetime.now(timezone.utc).isoformat()
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Health check failed: %s", e)
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "database": "disconnected",
                "response_time_ms": round((time.perf_counter() - started) * 1000, 1),
                "timestamp": now,
            },
        )
    return {
        "status": "healthy",
        "database": "connected",
        "response_time_ms": round((time.perf_counter() - started) * 1000, 1),
        "timestamp": now,
        "environment": settings.ENV,
    }
