"""
Slot availability: wires database reads, the business calendar, the slot
calculator and the hold ledger together for the API layer.

Reads per request:
- business_hours, dining_duration/buffer_time, table count (defaults on failure)
- holidays for the date (none on failure)
- active reservations for the date (ReservationReadError on failure:
  occupancy cannot be computed without them)
"""

import logging
from datetime import date, datetime

from redis import Redis
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models.generated import Reservations
from ..retry import with_retry
from .settings_store import (
    get_business_hours,
    get_holiday_dates,
    get_reservation_policy,
    get_total_tables,
)
from .calculator import ACTIVE_STATUSES, count_reservation_occupancy, generate_time_slots
from .calendar import resolve_business_hours
from .config import BookingConfig, ReservationPolicy, get_booking_config, time_str_to_minutes
from .holds import HoldDecision, HoldLedger, get_hold_ledger
from .types import ReservationSnapshot, Slot

logger = logging.getLogger(__name__)


class ReservationReadError(Exception):
    """Active reservations for a date could not be read."""


def load_active_reservations(
    db: Session,
    target_date: date,
    config: BookingConfig | None = None,
    table_number: int | None = None,
) -> list[ReservationSnapshot]:
    """Pending/confirmed reservations on target_date, optionally for one table."""
    config = config or get_booking_config()

    def load():
        query = db.query(
            Reservations.reservation_time,
            Reservations.table_number,
            Reservations.status,
        ).filter(
            Reservations.reservation_date == target_date,
            Reservations.status.in_(ACTIVE_STATUSES),
        )
        if table_number is not None:
            query = query.filter(Reservations.table_number == table_number)
        return query.all()

    try:
        rows = with_retry(load, config.retry_max_retries, config.retry_base_delay_seconds)
    except SQLAlchemyError as e:
        raise ReservationReadError(f"Failed to read reservations for {target_date}") from e

    return [
        ReservationSnapshot(
            reservation_time=row.reservation_time,
            table_number=row.table_number,
            status=row.status,
        )
        for row in rows
    ]


def get_day_slots(
    db: Session,
    target_date: date,
    session_id: str | None = None,
    ledger: HoldLedger | None = None,
    config: BookingConfig | None = None,
    redis: Redis | None = None,
    now: datetime | None = None,
    locale: str | None = None,
) -> list[Slot]:
    """
    Annotated slot list for a date.

    Raises:
        ReservationReadError: reservations could not be read
    """
    config = config or get_booking_config()
    ledger = ledger or get_hold_ledger()
    ledger.purge_expired()

    hours_config = get_business_hours(db, config, redis)
    holidays = get_holiday_dates(db, target_date, config)
    hours = resolve_business_hours(target_date, hours_config, holidays)
    if hours is None:
        logger.debug("Venue closed on %s", target_date)
        return []

    total_tables = get_total_tables(db, config, redis)
    policy = get_reservation_policy(db, config, redis)
    reservations = load_active_reservations(db, target_date, config)
    holds = ledger.active_holds(target_date.isoformat())

    return generate_time_slots(
        target_date=target_date,
        reservations=reservations,
        hours=hours,
        total_tables=total_tables,
        holds=holds,
        session_id=session_id,
        policy=policy,
        config=config,
        now=now,
        locale=locale,
    )


def request_hold(
    db: Session,
    target_date: date,
    time_str: str,
    session_id: str,
    ledger: HoldLedger | None = None,
    config: BookingConfig | None = None,
    redis: Redis | None = None,
) -> HoldDecision:
    """
    Try to hold (date, time) for a session.

    Raises:
        ReservationReadError: reservations could not be read
    """
    config = config or get_booking_config()
    ledger = ledger or get_hold_ledger()
    ledger.purge_expired()

    total_tables = get_total_tables(db, config, redis)
    policy = get_reservation_policy(db, config, redis)
    reservations = load_active_reservations(db, target_date, config)

    return ledger.hold(
        date_str=target_date.isoformat(),
        time_str=time_str,
        session_id=session_id,
        reservations=reservations,
        total_tables=total_tables,
        total_duration=policy.total_duration,
    )


def release_hold(
    target_date: date,
    time_str: str,
    session_id: str,
    ledger: HoldLedger | None = None,
) -> bool:
    ledger = ledger or get_hold_ledger()
    return ledger.release(target_date.isoformat(), time_str, session_id)


def has_table_conflict(
    db: Session,
    target_date: date,
    time_str: str,
    table_number: int,
    policy: ReservationPolicy,
    config: BookingConfig | None = None,
) -> bool:
    """
    True when an active reservation on the same table starts within
    policy.total_duration minutes of time_str.

    Raises:
        ReservationReadError: reservations could not be read
    """
    existing = load_active_reservations(db, target_date, config, table_number=table_number)
    return count_reservation_occupancy(
        existing, time_str_to_minutes(time_str), policy.total_duration
    ) > 0
