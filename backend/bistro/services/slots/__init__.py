"""
Slot availability and hold coordination.

- calendar: is the venue open on a date, and when
- calculator: per-slot occupancy and status
- holds: in-process, time-bounded slot claims
- availability: database-backed entry points used by the routers
"""

from .config import BookingConfig, ReservationPolicy, get_booking_config
from .calendar import BusinessHours, resolve_business_hours
from .calculator import generate_time_slots
from .holds import HoldDecision, HoldLedger, get_hold_ledger
from .availability import (
    ReservationReadError,
    get_day_slots,
    has_table_conflict,
    release_hold,
    request_hold,
)
from .types import Hold, ReservationSnapshot, Slot, SlotStatus

__all__ = [
    "BookingConfig",
    "ReservationPolicy",
    "get_booking_config",
    "BusinessHours",
    "resolve_business_hours",
    "generate_time_slots",
    "HoldDecision",
    "HoldLedger",
    "get_hold_ledger",
    "ReservationReadError",
    "get_day_slots",
    "has_table_conflict",
    "release_hold",
    "request_hold",
    "Hold",
    "ReservationSnapshot",
    "Slot",
    "SlotStatus",
]
