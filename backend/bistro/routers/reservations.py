# backend/bistro/routers/reservations.py
"""
Public reservations API.

GET  /api/reservations - Active reservations (limited fields) for conflict display
POST /api/reservations - Create a pending reservation

The create path re-validates table overlap against committed reservations
only; slot holds are advisory and the caller's hold is released after the
row is stored.
"""

import logging
import secrets
import threading
import uuid
from datetime import time
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from redis import Redis
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import error_response
from ..database import get_db
from ..i18n import t
from ..models.generated import Reservations as DBReservations
from ..redis_client import get_redis
from ..schemas.reservations import (
    ReservationCreate,
    ReservationCreated,
    ReservationListResponse,
    ReservationPublicRead,
    ReservationRead,
)
from ..services.slots import (
    BookingConfig,
    HoldLedger,
    ReservationReadError,
    get_booking_config,
    get_hold_ledger,
    has_table_conflict,
    release_hold,
)
from ..services.slots.calculator import ACTIVE_STATUSES
from ..services.slots.config import parse_date, parse_slot_time
from ..services.slots.settings_store import get_reservation_policy

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["reservations"])

REQUIRED_FIELDS = (
    "guest_name",
    "guest_phone",
    "party_size",
    "reservation_date",
    "reservation_time",
)
MIN_PARTY_SIZE = 1
MAX_PARTY_SIZE = 50

# conflict check and insert form one critical section (per process)
_booking_lock = threading.Lock()


@router.get("/reservations", response_model=ReservationListResponse)
def list_reservations(
    date_str: Optional[str] = Query(None, alias="date"),
    status_filter: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    query = db.query(DBReservations).filter(DBReservations.status.in_(ACTIVE_STATUSES))

    if status_filter:
        query = query.filter(DBReservations.status == status_filter)

    if date_str:
        try:
            target_date = parse_date(date_str)
        except ValueError:
            return error_response(status.HTTP_400_BAD_REQUEST, "Invalid date format")
        query = query.filter(DBReservations.reservation_date == target_date)

    try:
        rows = query.order_by(
            DBReservations.reservation_date,
            DBReservations.reservation_time,
        ).all()
    except SQLAlchemyError:
        logger.exception("Failed to fetch reservations")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch reservations")

    return ReservationListResponse(
        data=[ReservationPublicRead.model_validate(r) for r in rows]
    )


@router.post("/reservations", response_model=ReservationCreated, status_code=status.HTTP_201_CREATED)
def create_reservation(
    data: ReservationCreate,
    db: Session = Depends(get_db),
    ledger: HoldLedger = Depends(get_hold_ledger),
    config: BookingConfig = Depends(get_booking_config),
    redis: Optional[Redis] = Depends(get_redis),
):
    for field in REQUIRED_FIELDS:
        if not getattr(data, field):
            return error_response(status.HTTP_400_BAD_REQUEST, f"Missing required field: {field}")

    if not MIN_PARTY_SIZE <= data.party_size <= MAX_PARTY_SIZE:
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            f"Party size must be between {MIN_PARTY_SIZE} and {MAX_PARTY_SIZE}",
        )

    try:
        target_date = parse_date(data.reservation_date)
    except ValueError:
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid date format")

    try:
        time_str = parse_slot_time(data.reservation_time)
    except ValueError:
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid time format")

    with _booking_lock:
        if data.table_number:
            policy = get_reservation_policy(db, config, redis)
            try:
                conflict = has_table_conflict(
                    db, target_date, time_str, data.table_number, policy, config
                )
            except ReservationReadError:
                logger.exception("Error checking availability")
                return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to check availability")

            if conflict:
                return error_response(
                    status.HTTP_409_CONFLICT,
                    t("reservations:table_overlap", data.locale, policy.total_duration),
                )

        obj = DBReservations(
            id=str(uuid.uuid4()),
            booking_code=secrets.token_hex(4).upper(),
            guest_name=data.guest_name,
            guest_phone=data.guest_phone,
            guest_email=data.guest_email,
            party_size=data.party_size,
            reservation_date=target_date,
            reservation_time=time.fromisoformat(time_str),
            table_number=data.table_number,
            special_requests=data.special_requests,
            status="pending",
        )

        try:
            db.add(obj)
            db.commit()
            db.refresh(obj)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to create reservation")
            return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create reservation")

        created = ReservationRead.model_validate(obj)

    logger.info(
        f"Reservation {created.booking_code} created for {target_date} {time_str} "
        f"(table={created.table_number or '-'}, party={created.party_size})"
    )

    if data.session_id:
        release_hold(target_date, time_str, data.session_id, ledger=ledger)

    return ReservationCreated(data=created)
