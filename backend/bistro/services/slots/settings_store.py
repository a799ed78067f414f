"""
Configuration reads for the slot core.

Every reader degrades to built-in defaults when the database is unreachable
or the stored value is unusable; none of them raise.

Cached in Redis (when configured):
✓ business_hours
✓ reservation policy (dining_duration, buffer_time)
✓ active table count

Never cached:
✗ holidays (admin changes apply immediately)
✗ reservations
"""

import json
import logging
from collections.abc import Callable
from datetime import date
from typing import Any

from redis import Redis
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models.generated import Holidays, Settings, Tables
from ..read_cache import ReadCache
from ..retry import with_retry
from .config import BookingConfig, DEFAULT_POLICY, ReservationPolicy, get_booking_config

logger = logging.getLogger(__name__)

BUSINESS_HOURS_KEY = "business_hours"
POLICY_KEYS = ("dining_duration", "buffer_time")


def get_business_hours(
    db: Session,
    config: BookingConfig | None = None,
    redis: Redis | None = None,
) -> dict | None:
    """Stored weekly hours mapping, or None (resolver then uses its defaults)."""
    config = config or get_booking_config()

    def load():
        row = db.query(Settings.value).filter(Settings.key == BUSINESS_HOURS_KEY).first()
        if row is None or not row.value:
            return None
        try:
            value = json.loads(row.value)
        except json.JSONDecodeError:
            logger.warning("business_hours setting is not valid JSON, using defaults")
            return None
        return value if isinstance(value, dict) else None

    return _cached_read(BUSINESS_HOURS_KEY, load, None, config, redis)


def get_reservation_policy(
    db: Session,
    config: BookingConfig | None = None,
    redis: Redis | None = None,
) -> ReservationPolicy:
    """dining_duration / buffer_time from settings; each falls back on its own."""
    config = config or get_booking_config()

    def load():
        rows = db.query(Settings.key, Settings.value).filter(Settings.key.in_(POLICY_KEYS)).all()
        values = {
            "dining_duration": DEFAULT_POLICY.dining_duration,
            "buffer_time": DEFAULT_POLICY.buffer_time,
        }
        for key, raw in rows:
            parsed = _parse_minutes(raw)
            if parsed is None:
                logger.warning(f"Setting {key}={raw!r} is not a valid minute count, using default")
                continue
            values[key] = parsed
        return values

    fallback = {
        "dining_duration": DEFAULT_POLICY.dining_duration,
        "buffer_time": DEFAULT_POLICY.buffer_time,
    }
    values = _cached_read("reservation_policy", load, fallback, config, redis)
    return ReservationPolicy(
        dining_duration=values["dining_duration"],
        buffer_time=values["buffer_time"],
    )


def get_total_tables(
    db: Session,
    config: BookingConfig | None = None,
    redis: Redis | None = None,
) -> int:
    """Active table count; default inventory when zero or unreadable."""
    config = config or get_booking_config()

    def load():
        return db.query(func.count(Tables.id)).filter(Tables.is_active == 1).scalar() or 0

    count = _cached_read("table_count", load, 0, config, redis)
    if not count or count <= 0:
        return config.default_total_tables
    return count


def get_holiday_dates(
    db: Session,
    target_date: date,
    config: BookingConfig | None = None,
) -> set[date]:
    """Holiday closures matching target_date (empty set when unreadable)."""
    config = config or get_booking_config()

    def load():
        rows = db.query(Holidays.holiday_date).filter(Holidays.holiday_date == target_date).all()
        return {row.holiday_date for row in rows}

    try:
        return with_retry(load, config.retry_max_retries, config.retry_base_delay_seconds)
    except SQLAlchemyError:
        logger.warning("Failed to read holidays for %s, assuming none", target_date, exc_info=True)
        return set()


# ── Helpers ──────────────────────────────────────────────────────────────


def _cached_read(
    name: str,
    loader: Callable[[], Any],
    fallback: Any,
    config: BookingConfig,
    redis: Redis | None,
) -> Any:
    def load():
        return with_retry(loader, config.retry_max_retries, config.retry_base_delay_seconds)

    try:
        if redis is not None:
            return ReadCache(redis, config.cache_ttl_seconds).get_or_load(name, load)
        return load()
    except SQLAlchemyError:
        logger.warning("Failed to read %s, using default", name, exc_info=True)
        return fallback


def _parse_minutes(raw) -> int | None:
    try:
        value = json.loads(raw) if isinstance(raw, str) else raw
        minutes = int(value)
    except (TypeError, ValueError):
        return None
    return minutes if minutes >= 0 else None
