# backend/bistro/schemas/cron.py

from pydantic import BaseModel


class AutoCancelResult(BaseModel):
    success: bool
    message: str
    cancelled: int
    ids: list[str] = []
