# backend/bistro/routers/cron.py
"""
Scheduled maintenance endpoints.

GET /api/cron/auto-cancel - Cancel pending reservations older than
                            PENDING_EXPIRY_MINUTES

Callers must send "Authorization: Bearer <CRON_SECRET>" when a secret is
configured.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import settings
from ..core.errors import error_response
from ..database import get_db
from ..schemas.cron import AutoCancelResult
from ..services.auto_cancel import cancel_expired_pending

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cron", tags=["cron"])


def get_cron_secret() -> Optional[str]:
    return settings.cron_secret


@router.get("/auto-cancel", response_model=AutoCancelResult)
def auto_cancel_expired(
    authorization: Optional[str] = Header(None),
    cron_secret: Optional[str] = Depends(get_cron_secret),
    db: Session = Depends(get_db),
):
    if cron_secret and authorization != f"Bearer {cron_secret}":
        return error_response(status.HTTP_401_UNAUTHORIZED, "Unauthorized", success=False)

    try:
        ids = cancel_expired_pending(db, max_age_minutes=settings.pending_expiry_minutes)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Auto-cancel failed")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to process auto-cancel",
            success=False,
        )

    if not ids:
        return AutoCancelResult(success=True, message="No expired reservations to cancel", cancelled=0)

    return AutoCancelResult(
        success=True,
        message=f"Cancelled {len(ids)} expired reservations",
        cancelled=len(ids),
        ids=ids,
    )
