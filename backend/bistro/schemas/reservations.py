# backend/bistro/schemas/reservations.py

from datetime import date, time
from typing import Optional
from pydantic import BaseModel


class ReservationCreate(BaseModel):
    guest_name: Optional[str] = None
    guest_phone: Optional[str] = None
    guest_email: Optional[str] = None
    party_size: Optional[int] = None

    reservation_date: Optional[str] = None  # YYYY-MM-DD
    reservation_time: Optional[str] = None  # HH:MM

    table_number: Optional[int] = None
    special_requests: Optional[str] = None

    # Hold to release once the row is stored
    session_id: Optional[str] = None
    locale: Optional[str] = None


class ReservationRead(BaseModel):
    id: str
    booking_code: Optional[str] = None

    guest_name: str
    guest_phone: str
    guest_email: Optional[str] = None
    party_size: int

    reservation_date: date
    reservation_time: time
    table_number: Optional[int] = None
    special_requests: Optional[str] = None

    status: str
    created_at: Optional[str] = None

    model_config = {"from_attributes": True}


class ReservationPublicRead(BaseModel):
    """Fields the public booking page needs to avoid conflicts."""
    reservation_date: date
    reservation_time: time
    table_number: Optional[int] = None
    status: str

    model_config = {"from_attributes": True}


class ReservationListResponse(BaseModel):
    data: list[ReservationPublicRead]


class ReservationCreated(BaseModel):
    data: ReservationRead
