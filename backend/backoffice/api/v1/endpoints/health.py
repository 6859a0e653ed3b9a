"""
Health and readiness checks
"""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backoffice.core.config import settings
from backoffice.core.logger import logger
from backoffice.db.database import get_db

router = APIRouter()


def _check_database(db: Session) -> tuple[str, str]:
    """Returns (status, detail). Status is 'ok' or 'error'."""
    try:
        db.execute(text("SELECT 1"))
        return "ok", "Database reachable"
    except SQLAlchemyError as e:
        logger.error(f"Database check failed: {str(e)}")
        return "error", f"Database: {str(e)}"


@router.get("")
def health():
    """Liveness probe"""
    return {"status": "healthy", "service": settings.APP_NAME}


@router.get("/ready")
def readiness(db: Session = Depends(get_db)):
    """Readiness probe: checks the database connection"""
    db_status, db_detail = _check_database(db)
    return {
        "status": "ready" if db_status == "ok" else "degraded",
        "checks": {
            "database": {"status": db_status, "detail": db_detail},
            "document_store": {"status": "ok", "detail": settings.DOCUMENT_STORE_BACKEND},
            "email": {"status": "ok", "detail": settings.EMAIL_PROVIDER},
        },
    }
