"""
Default reservation settings.

Existing rows are never overwritten, so running the seeder against a live
database only fills in what is missing.
"""

import json
import logging

from sqlalchemy.orm import Session

from ..models.generated import Settings
from .slots.calendar import DEFAULT_OPENING_HOURS
from .slots.config import DEFAULT_POLICY

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = [
    {
        "key": "dining_duration",
        "value": str(DEFAULT_POLICY.dining_duration),
        "description": "Dining duration in minutes per reservation",
    },
    {
        "key": "buffer_time",
        "value": str(DEFAULT_POLICY.buffer_time),
        "description": "Buffer time in minutes between reservations for cleaning",
    },
    {
        "key": "business_hours",
        "value": json.dumps({str(k): v for k, v in DEFAULT_OPENING_HOURS.items()}),
        "description": "Opening hours per weekday (0 = Sunday)",
    },
]


def seed_reservation_settings(db: Session) -> list[str]:
    """Insert missing default settings. Returns the keys inserted."""
    existing = {key for (key,) in db.query(Settings.key).all()}

    inserted = []
    for item in DEFAULT_SETTINGS:
        if item["key"] in existing:
            logger.info("Setting %s already present, skipped", item["key"])
            continue
        db.add(Settings(**item))
        inserted.append(item["key"])

    db.commit()
    return inserted
