from redis import Redis

from .config import settings

# Optional: without REDIS_URL configuration reads go straight to the database.
redis_client: Redis | None = (
    Redis.from_url(settings.redis_url, socket_timeout=2.0)
    if settings.redis_url
    else None
)


def get_redis() -> Redis | None:
    """FastAPI dependency for the optional Redis client."""
    return redis_client
