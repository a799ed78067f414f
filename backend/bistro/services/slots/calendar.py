"""
Business calendar: is the venue open on a date, and between which times.

Resolution order:
  1. Permanent weekly closure (Friday), not overridable by settings
  2. Holiday closures (holidays table)
  3. Weekly business hours from settings, falling back to DEFAULT_OPENING_HOURS

Weekday indices follow the stored settings format: 0 = Sunday .. 6 = Saturday.
"""

import json
import logging
from collections.abc import Collection
from dataclasses import dataclass
from datetime import date

from .config import time_str_to_minutes

logger = logging.getLogger(__name__)

PERMANENT_CLOSURE_WEEKDAY = 5  # Friday

DEFAULT_OPENING_HOURS: dict[int, dict[str, str]] = {
    0: {"open": "10:00", "close": "21:00"},  # Sunday
    1: {"open": "11:00", "close": "22:00"},  # Monday
    2: {"open": "11:00", "close": "22:00"},  # Tuesday
    3: {"open": "11:00", "close": "22:00"},  # Wednesday
    4: {"open": "11:00", "close": "23:00"},  # Thursday
    5: {"open": "11:00", "close": "23:00"},  # Friday (never used, see PERMANENT_CLOSURE_WEEKDAY)
    6: {"open": "10:00", "close": "23:00"},  # Saturday
}


@dataclass(frozen=True)
class BusinessHours:
    """
    Opening window in minutes since midnight.

    close_minutes > 24 * 60 when the venue closes after midnight.
    """
    open_minutes: int
    close_minutes: int


def venue_weekday(target_date: date) -> int:
    """Weekday index with Sunday = 0."""
    return (target_date.weekday() + 1) % 7


def resolve_business_hours(
    target_date: date,
    hours_config: dict | str | None = None,
    holidays: Collection[date] = (),
) -> BusinessHours | None:
    """
    Resolve the opening window for target_date.

    Returns:
        BusinessHours, or None when the venue is closed.
        Malformed configuration never raises; it degrades to the defaults.
    """
    weekday = venue_weekday(target_date)

    if weekday == PERMANENT_CLOSURE_WEEKDAY:
        return None

    if target_date in holidays:
        return None

    schedule = _normalize_schedule(hours_config)
    if weekday not in schedule:
        return None

    entry = schedule[weekday]
    if not entry:
        return None

    window = _parse_window(entry)
    if window is None:
        logger.warning("Malformed business hours for weekday=%s: %r, using default", weekday, entry)
        window = _parse_window(DEFAULT_OPENING_HOURS[weekday])

    return window


# ── Helpers ──────────────────────────────────────────────────────────────


def _normalize_schedule(hours_config: dict | str | None) -> dict[int, object]:
    """
    Map weekday index → raw entry.

    Accepts numeric keys as int or str ("0".."6"). Anything that isn't a
    usable mapping yields the default table.
    """
    if isinstance(hours_config, str):
        try:
            hours_config = json.loads(hours_config)
        except json.JSONDecodeError:
            hours_config = None

    if not isinstance(hours_config, dict) or not hours_config:
        return dict(DEFAULT_OPENING_HOURS)

    schedule: dict[int, object] = {}
    for key, value in hours_config.items():
        try:
            weekday = int(key)
        except (TypeError, ValueError):
            continue
        if 0 <= weekday <= 6:
            schedule[weekday] = value

    if not schedule:
        return dict(DEFAULT_OPENING_HOURS)
    return schedule


def _parse_window(entry) -> BusinessHours | None:
    if not isinstance(entry, dict):
        return None

    open_str = entry.get("open")
    close_str = entry.get("close")
    if not open_str or not close_str:
        return None

    try:
        open_min = time_str_to_minutes(open_str)
        close_min = time_str_to_minutes(close_str)
    except (TypeError, ValueError):
        return None

    # Closing at or before opening means the window runs past midnight
    if close_min <= open_min:
        close_min += 24 * 60

    return BusinessHours(open_minutes=open_min, close_minutes=close_min)
