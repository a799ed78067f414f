"""
Booking configuration for slots calculation.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache

from ...config import settings


@dataclass(frozen=True)
class BookingConfig:
    """
    Configuration for the slot / hold system.

    Attributes:
        slot_step_minutes: Generation interval for candidate start times (15/30/60)
        hold_duration_seconds: How long a provisional hold stays valid
        default_total_tables: Inventory used when the live table count is unavailable
        venue_utc_offset_hours: Fixed venue timezone, used for every "today" check
        cache_ttl_seconds: Redis TTL for configuration reads
        retry_max_retries: Retries for database reads (after the first attempt)
        retry_base_delay_seconds: First backoff delay, doubled per attempt
    """
    slot_step_minutes: int = 30
    hold_duration_seconds: int = 30
    default_total_tables: int = 5
    venue_utc_offset_hours: int = 7
    cache_ttl_seconds: int = 60
    retry_max_retries: int = 2
    retry_base_delay_seconds: float = 0.5

    def __post_init__(self):
        """Validate configuration."""
        if self.slot_step_minutes not in (15, 30, 60):
            raise ValueError(f"slot_step_minutes must be 15, 30, or 60, got {self.slot_step_minutes}")
        if self.default_total_tables < 1:
            raise ValueError(f"default_total_tables must be positive, got {self.default_total_tables}")

    @property
    def venue_tz(self) -> timezone:
        return timezone(timedelta(hours=self.venue_utc_offset_hours))

    def venue_now(self, now: datetime | None = None) -> datetime:
        """Current wall-clock time at the venue, independent of server locale."""
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now.astimezone(self.venue_tz)


@dataclass(frozen=True)
class ReservationPolicy:
    """Dining duration and table turnover buffer, in minutes."""
    dining_duration: int = 90
    buffer_time: int = 15

    @property
    def total_duration(self) -> int:
        """Exclusion window used by every overlap check."""
        return self.dining_duration + self.buffer_time


DEFAULT_POLICY = ReservationPolicy()

_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


@lru_cache
def get_booking_config() -> BookingConfig:
    """Booking configuration (singleton), built from application settings."""
    return BookingConfig(
        slot_step_minutes=settings.slot_step_minutes,
        hold_duration_seconds=settings.hold_duration_seconds,
        default_total_tables=settings.default_total_tables,
        venue_utc_offset_hours=settings.venue_utc_offset_hours,
        cache_ttl_seconds=settings.settings_cache_ttl_seconds,
        retry_max_retries=settings.retry_max_retries,
        retry_base_delay_seconds=settings.retry_base_delay_seconds,
    )


# ── Time helpers ─────────────────────────────────────────────────────────


def time_str_to_minutes(value: str | time) -> int:
    """
    Convert "HH:MM" (or "HH:MM:SS", or a time object) to minutes since midnight.

    Raises ValueError on malformed input.
    """
    if isinstance(value, time):
        return value.hour * 60 + value.minute

    parts = str(value).strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"invalid time: {value!r}")
    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 24 and 0 <= minute < 60):
        raise ValueError(f"invalid time: {value!r}")
    return hour * 60 + minute


def minutes_to_time_str(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_date(value: str) -> date:
    """Parse a strict "YYYY-MM-DD" string."""
    if not _DATE_RE.fullmatch(value):
        raise ValueError(f"invalid date: {value!r}")
    return date.fromisoformat(value)


def parse_slot_time(value: str) -> str:
    """Normalize a requested slot time to "HH:MM"; raises ValueError if malformed."""
    parts = value.split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"invalid time: {value!r}")
    minutes = time_str_to_minutes(value)
    if minutes >= 24 * 60:
        raise ValueError(f"invalid time: {value!r}")
    return minutes_to_time_str(minutes)
