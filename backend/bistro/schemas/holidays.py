# backend/bistro/schemas/holidays.py

from datetime import date
from typing import Optional
from pydantic import BaseModel


class HolidayRead(BaseModel):
    id: int
    holiday_date: date
    description: Optional[str] = None

    model_config = {"from_attributes": True}


class HolidayListResponse(BaseModel):
    data: list[HolidayRead]
