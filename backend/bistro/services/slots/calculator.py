"""
Slot generation and occupancy counting.

Walks the opening window in `slot_step_minutes` steps and labels every
candidate start time as available / booked / held.

Overlap rule (shared with the booking write path):
    a reservation or hold occupies a candidate start when
    abs(start_a - start_b) < dining_duration + buffer_time

Occupancy units:
✓ Reservations with a table: counted once per distinct table
✓ Reservations without a table: one unit each
✓ Live holds: one unit each, except the requester's own hold at the
  exact candidate time
"""

import logging
from collections.abc import Iterable
from datetime import date, datetime

from ...i18n import t
from .calendar import BusinessHours
from .config import (
    BookingConfig,
    DEFAULT_POLICY,
    ReservationPolicy,
    get_booking_config,
    minutes_to_time_str,
    time_str_to_minutes,
)
from .types import Hold, ReservationSnapshot, Slot, SlotStatus

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = ("pending", "confirmed")
MINUTES_PER_DAY = 24 * 60


def count_reservation_occupancy(
    reservations: Iterable[ReservationSnapshot],
    candidate_minutes: int,
    total_duration: int,
) -> int:
    """Number of tables taken by active reservations around candidate_minutes."""
    table_ids: set[int] = set()
    unassigned = 0

    for r in reservations:
        if r.status not in ACTIVE_STATUSES:
            continue
        try:
            start = time_str_to_minutes(r.reservation_time)
        except (TypeError, ValueError):
            logger.warning("Ignoring reservation with bad time %r", r.reservation_time)
            continue

        if abs(start - candidate_minutes) < total_duration:
            if r.table_number:
                table_ids.add(r.table_number)
            else:
                unassigned += 1

    return len(table_ids) + unassigned


def count_hold_occupancy(
    holds: Iterable[Hold],
    candidate_time: str,
    total_duration: int,
    session_id: str | None = None,
) -> tuple[int, bool]:
    """
    Count live holds around candidate_time.

    Returns:
        (held_count, held_by_requester). The requester's own hold at exactly
        candidate_time is reported via the flag instead of the count.
    """
    candidate_minutes = time_str_to_minutes(candidate_time)
    held_count = 0
    held_by_requester = False

    for hold in holds:
        if abs(time_str_to_minutes(hold.time) - candidate_minutes) >= total_duration:
            continue
        if session_id is not None and hold.held_by == session_id and hold.time == candidate_time:
            held_by_requester = True
        else:
            held_count += 1

    return held_count, held_by_requester


def slot_status(
    booked_count: int,
    held_count: int,
    total_tables: int,
    held_by_requester: bool = False,
) -> SlotStatus:
    """First matching rule wins: booked, then held, then available."""
    if booked_count >= total_tables:
        return SlotStatus.BOOKED
    if booked_count + held_count >= total_tables and not held_by_requester:
        return SlotStatus.HELD
    return SlotStatus.AVAILABLE


def generate_time_slots(
    target_date: date,
    reservations: list[ReservationSnapshot],
    hours: BusinessHours | None,
    total_tables: int,
    holds: list[Hold] | None = None,
    session_id: str | None = None,
    policy: ReservationPolicy = DEFAULT_POLICY,
    config: BookingConfig | None = None,
    now: datetime | None = None,
    locale: str | None = None,
) -> list[Slot]:
    """
    Build the ordered slot list for a day.

    Args:
        target_date: Requested date (venue calendar)
        reservations: Reservations on target_date
        hours: Resolved opening window, None = closed
        total_tables: Table inventory
        holds: Live holds on target_date
        session_id: Requesting session; its own hold is not counted against it
        now: Reference instant (defaults to the current time)

    Returns:
        Slots from opening time onward. Start times already past (today,
        venue time) are omitted. Each start must fit a full dining duration
        before closing.
    """
    if hours is None:
        return []

    config = config or get_booking_config()
    holds = holds or []
    venue_now = config.venue_now(now)
    is_today = target_date == venue_now.date()
    now_minutes = venue_now.hour * 60 + venue_now.minute
    total_duration = policy.total_duration

    slots: list[Slot] = []
    t_min = hours.open_minutes

    while t_min < hours.close_minutes:
        if t_min + policy.dining_duration > hours.close_minutes:
            break
        # Starts after midnight belong to the next calendar day
        if t_min >= MINUTES_PER_DAY:
            break

        if is_today and t_min < now_minutes:
            t_min += config.slot_step_minutes
            continue

        time_value = minutes_to_time_str(t_min)
        booked_count = count_reservation_occupancy(reservations, t_min, total_duration)
        held_count, held_by_requester = count_hold_occupancy(
            holds, time_value, total_duration, session_id
        )

        slots.append(Slot(
            time=time_value,
            label=t("timeslots:label", locale, time_value),
            status=slot_status(booked_count, held_count, total_tables, held_by_requester),
        ))

        t_min += config.slot_step_minutes

    return slots
