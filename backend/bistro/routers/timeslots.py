# backend/bistro/routers/timeslots.py
"""
Timeslots API.

GET  /api/timeslots - Slot list for a date (available / booked / held)
POST /api/timeslots - Hold or release a slot while the customer checks out
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from redis import Redis
from sqlalchemy.orm import Session

from ..core.errors import MSG_INTERNAL_ERROR, error_response
from ..database import get_db
from ..i18n import t
from ..redis_client import get_redis
from ..schemas.timeslots import (
    SlotRead,
    TimeslotAction,
    TimeslotActionResult,
    TimeslotsResponse,
)
from ..services.slots import (
    BookingConfig,
    HoldDecision,
    HoldLedger,
    get_booking_config,
    get_day_slots,
    get_hold_ledger,
    release_hold,
    request_hold,
)
from ..services.slots.config import parse_date, parse_slot_time

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["timeslots"])

REJECTION_MESSAGE_KEYS = {
    HoldDecision.FULLY_BOOKED: "timeslots:fully_booked",
    HoldDecision.HELD_BY_OTHER: "timeslots:held_by_other",
}


@router.get("/timeslots", response_model=TimeslotsResponse)
def get_timeslots(
    date_str: Optional[str] = Query(None, alias="date"),
    session_id: Optional[str] = Query(None, alias="sessionId"),
    locale: Optional[str] = None,
    db: Session = Depends(get_db),
    ledger: HoldLedger = Depends(get_hold_ledger),
    config: BookingConfig = Depends(get_booking_config),
    redis: Optional[Redis] = Depends(get_redis),
):
    """Slots for a date, annotated for the requesting session."""
    if not date_str:
        return error_response(status.HTTP_400_BAD_REQUEST, "Date is required")

    try:
        target_date = parse_date(date_str)
    except ValueError:
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid date format")

    try:
        slots = get_day_slots(
            db,
            target_date,
            session_id=session_id,
            ledger=ledger,
            config=config,
            redis=redis,
            locale=locale,
        )
    except Exception:
        logger.exception("Error fetching time slots for %s", target_date)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch slots")

    return TimeslotsResponse(
        slots=[
            SlotRead(time=s.time, label=s.label, status=s.status.value)
            for s in slots
        ]
    )


@router.post("/timeslots", response_model=TimeslotActionResult)
def post_timeslot_action(
    data: TimeslotAction,
    db: Session = Depends(get_db),
    ledger: HoldLedger = Depends(get_hold_ledger),
    config: BookingConfig = Depends(get_booking_config),
    redis: Optional[Redis] = Depends(get_redis),
):
    """Hold or release a slot for a session."""
    if not data.date or not data.time or not data.action or not data.sessionId:
        return error_response(status.HTTP_400_BAD_REQUEST, "Missing required fields")

    if data.action not in ("hold", "release"):
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid action")

    try:
        target_date = parse_date(data.date)
    except ValueError:
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid date format")

    try:
        time_str = parse_slot_time(data.time)
    except ValueError:
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid time format")

    if data.action == "release":
        release_hold(target_date, time_str, data.sessionId, ledger=ledger)
        return TimeslotActionResult(success=True)

    try:
        decision = request_hold(
            db,
            target_date,
            time_str,
            data.sessionId,
            ledger=ledger,
            config=config,
            redis=redis,
        )
    except Exception:
        logger.exception("Error in POST /api/timeslots")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, MSG_INTERNAL_ERROR)

    if decision is not HoldDecision.ACCEPTED:
        return error_response(
            status.HTTP_409_CONFLICT,
            t(REJECTION_MESSAGE_KEYS[decision], data.locale),
            success=False,
        )

    return TimeslotActionResult(success=True)
