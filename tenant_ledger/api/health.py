"""
Liveness endpoint. Needs no tenant and no token.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tenant_ledger.config import get_settings
from tenant_ledger.models.base import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


def database_reachable(db: Session) -> bool:
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("Health check could not reach the database", exc_info=True)
        return False
    return True


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    settings = get_settings()
    healthy = database_reachable(db)
    return {
        "status": "healthy" if healthy else "degraded",
        "service": "tenant-ledger",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "database": "healthy" if healthy else "unhealthy",
    }
