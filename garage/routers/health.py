# garage/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from garage.database import get_db
from garage.utils.logger import get_logger
from datetime import datetime

router = APIRouter()
logger = get_logger(__name__)


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "database": "unknown",
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        logger.error(f"Health check: database unreachable: {e}")
        result["database"] = "error"
        result["status"] = "degraded"

    return result
