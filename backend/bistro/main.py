import logging

from fastapi import FastAPI
from redis import RedisError

from .config import settings
from .core.errors import register_error_handlers
from .redis_client import redis_client
from .routers import cron, holidays, reservations, timeslots

logging.basicConfig(level=settings.log_level)

app = FastAPI(title="Bistro Booking API")

register_error_handlers(app)

app.include_router(timeslots.router)
app.include_router(reservations.router)
app.include_router(holidays.router)
app.include_router(cron.router)


@app.get("/health")
def health():
    redis_ok = None
    if redis_client is not None:
        try:
            redis_ok = bool(redis_client.ping())
        except RedisError:
            redis_ok = False
    return {"status": "ok", "redis": redis_ok}
