# backend/bistro/routers/holidays.py

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import error_response
from ..database import get_db
from ..models.generated import Holidays as DBHolidays
from ..schemas.holidays import HolidayListResponse, HolidayRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["holidays"])


@router.get("/holidays", response_model=HolidayListResponse)
def list_holidays(db: Session = Depends(get_db)):
    """Closure dates shown on the booking calendar."""
    try:
        rows = db.query(DBHolidays).order_by(DBHolidays.holiday_date).all()
    except SQLAlchemyError:
        logger.exception("Failed to fetch holidays")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch holidays")
    return HolidayListResponse(data=[HolidayRead.model_validate(r) for r in rows])
