"""
Value types shared by the slot calculator and the hold ledger.
"""

from dataclasses import dataclass
from datetime import time
from enum import Enum
from typing import NamedTuple, Optional


class SlotStatus(str, Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    HELD = "held"


class ReservationSnapshot(NamedTuple):
    """The columns of a reservation the occupancy checks need."""
    reservation_time: str | time
    table_number: Optional[int] = None
    status: str = "confirmed"


@dataclass(frozen=True)
class Hold:
    """Provisional claim on a (date, time) slot by one session."""
    date: str  # "YYYY-MM-DD"
    time: str  # "HH:MM"
    held_by: str
    held_at: float  # unix timestamp


@dataclass(frozen=True)
class Slot:
    time: str
    label: str
    status: SlotStatus
