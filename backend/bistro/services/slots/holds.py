"""
Hold ledger: short-lived, in-process claims on (date, time) slots.

A customer holds a slot while completing checkout so that two concurrent
customers cannot both see the last free table as available.

- Key: "{date}|{time}", one holder per key (a new hold overwrites)
- A hold is live while now - held_at < hold_duration
- Expired holds are purged at the start of every ledger call; there is no
  background timer
- Holds are advisory: the reservation write path re-checks committed
  reservations only

Process-local. Holds granted by one worker process are invisible to
another; running several instances needs a shared store instead.
"""

import logging
import threading
import time
from collections.abc import Callable, Iterable
from enum import Enum

from .calculator import count_reservation_occupancy
from .config import get_booking_config, time_str_to_minutes
from .types import Hold, ReservationSnapshot

logger = logging.getLogger(__name__)


class HoldDecision(str, Enum):
    ACCEPTED = "accepted"
    FULLY_BOOKED = "fully_booked"
    HELD_BY_OTHER = "held_by_other"


class HoldLedger:
    """Thread-safe map of slot key → Hold."""

    def __init__(
        self,
        hold_duration_seconds: float = 30,
        clock: Callable[[], float] = time.time,
    ):
        self.hold_duration = hold_duration_seconds
        self._clock = clock
        self._holds: dict[str, Hold] = {}
        # sync endpoints run in a threadpool; check-then-act must not interleave
        self._lock = threading.Lock()

    @staticmethod
    def _key(date_str: str, time_str: str) -> str:
        return f"{date_str}|{time_str}"

    # ── Expiry ───────────────────────────────────────────────────────────

    def purge_expired(self) -> int:
        """Drop every hold past its TTL. Returns the number removed."""
        with self._lock:
            return self._purge_locked()

    def _purge_locked(self) -> int:
        now = self._clock()
        expired = [
            key for key, hold in self._holds.items()
            if now - hold.held_at >= self.hold_duration
        ]
        for key in expired:
            del self._holds[key]
        if expired:
            logger.debug("Purged %d expired holds", len(expired))
        return len(expired)

    # ── Read ─────────────────────────────────────────────────────────────

    def active_holds(self, date_str: str) -> list[Hold]:
        """Live holds for a date (purges first)."""
        with self._lock:
            self._purge_locked()
            return [h for h in self._holds.values() if h.date == date_str]

    # ── Write ────────────────────────────────────────────────────────────

    def hold(
        self,
        date_str: str,
        time_str: str,
        session_id: str,
        reservations: Iterable[ReservationSnapshot],
        total_tables: int,
        total_duration: int,
    ) -> HoldDecision:
        """
        Try to claim (date, time) for session_id.

        Rejected when committed reservations alone fill every table
        (FULLY_BOOKED), or when reservations plus other sessions' holds do
        (HELD_BY_OTHER). On rejection the ledger is not modified.
        """
        candidate = time_str_to_minutes(time_str)
        booked_count = count_reservation_occupancy(reservations, candidate, total_duration)

        with self._lock:
            self._purge_locked()

            if booked_count >= total_tables:
                logger.info("Hold rejected (fully booked): %s %s session=%s", date_str, time_str, session_id)
                return HoldDecision.FULLY_BOOKED

            held_count = sum(
                1 for h in self._holds.values()
                if h.date == date_str
                and h.held_by != session_id
                and abs(time_str_to_minutes(h.time) - candidate) < total_duration
            )
            if booked_count + held_count >= total_tables:
                logger.info("Hold rejected (held by other): %s %s session=%s", date_str, time_str, session_id)
                return HoldDecision.HELD_BY_OTHER

            self._holds[self._key(date_str, time_str)] = Hold(
                date=date_str,
                time=time_str,
                held_by=session_id,
                held_at=self._clock(),
            )

        logger.info("Hold granted: %s %s session=%s", date_str, time_str, session_id)
        return HoldDecision.ACCEPTED

    def release(self, date_str: str, time_str: str, session_id: str) -> bool:
        """
        Release a hold owned by session_id.

        Releasing a missing or foreign hold is a no-op. Returns True if a
        hold was removed.
        """
        key = self._key(date_str, time_str)
        with self._lock:
            self._purge_locked()
            existing = self._holds.get(key)
            if existing is None or existing.held_by != session_id:
                return False
            del self._holds[key]

        logger.info("Hold released: %s %s session=%s", date_str, time_str, session_id)
        return True


hold_ledger = HoldLedger(get_booking_config().hold_duration_seconds)


def get_hold_ledger() -> HoldLedger:
    """FastAPI dependency returning the process-wide ledger."""
    return hold_ledger
