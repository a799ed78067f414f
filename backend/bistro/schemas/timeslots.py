# backend/bistro/schemas/timeslots.py
"""
Pydantic schemas for the timeslots API.

Field names (sessionId, time, ...) match what the booking frontend sends.
"""

from typing import Literal, Optional
from pydantic import BaseModel


class SlotRead(BaseModel):
    """A single candidate start time."""
    time: str  # "HH:MM"
    label: str
    status: Literal["available", "booked", "held"]


class TimeslotsResponse(BaseModel):
    slots: list[SlotRead]


class TimeslotAction(BaseModel):
    """
    Hold / release request.

    Everything is optional here so that missing fields produce the
    "Missing required fields" error instead of a validation error.
    """
    date: Optional[str] = None
    time: Optional[str] = None
    action: Optional[str] = None
    sessionId: Optional[str] = None
    locale: Optional[str] = None


class TimeslotActionResult(BaseModel):
    success: bool
