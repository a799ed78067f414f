"""
Auto-cancel of pending reservations nobody confirmed.

Pending rows count as occupied when slots are calculated, so an abandoned
booking would keep its table forever. An external scheduler calls
GET /api/cron/auto-cancel periodically to run this.
"""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from ..models.generated import Reservations

logger = logging.getLogger(__name__)

PENDING_EXPIRY_MINUTES = 30
# created_at is stored as CURRENT_TIMESTAMP text (UTC)
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def cancel_expired_pending(
    db: Session,
    now: datetime | None = None,
    max_age_minutes: int = PENDING_EXPIRY_MINUTES,
) -> list[str]:
    """
    Cancel pending reservations created more than max_age_minutes before now.

    Args:
        now: Reference instant, naive UTC (defaults to the current time)

    Returns:
        Ids of the cancelled reservations. Database errors propagate.
    """
    now = now or datetime.now(timezone.utc).replace(tzinfo=None)
    cutoff = (now - timedelta(minutes=max_age_minutes)).strftime(TIMESTAMP_FORMAT)

    expired = (
        db.query(Reservations)
        .filter(
            Reservations.status == "pending",
            Reservations.created_at < cutoff,
        )
        .all()
    )
    if not expired:
        return []

    stamp = now.strftime(TIMESTAMP_FORMAT)
    cancelled_ids = []
    for reservation in expired:
        reservation.status = "cancelled"
        reservation.updated_at = stamp
        cancelled_ids.append(reservation.id)
        logger.info(f"Auto-cancelled reservation: {reservation.booking_code or reservation.id}")

    db.commit()
    return cancelled_ids
