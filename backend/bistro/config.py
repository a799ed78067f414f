# backend/bistro/config.py

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # repo root


class Settings(BaseSettings):
    database_url: str = "sqlite:///./data/bistro.db"
    redis_url: Optional[str] = None
    log_level: str = "INFO"

    # Venue / booking policy
    venue_utc_offset_hours: int = 7
    hold_duration_seconds: int = 30
    slot_step_minutes: int = 30
    default_total_tables: int = 5
    pending_expiry_minutes: int = 30

    # Bearer token for /api/cron/*; unset = no check
    cron_secret: Optional[str] = None

    settings_cache_ttl_seconds: int = 60
    retry_max_retries: int = 2
    retry_base_delay_seconds: float = 0.5

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        extra="ignore",
    )

    @property
    def resolved_database_url(self) -> str:
        url = self.database_url
        if url.startswith("sqlite:///./"):
            # relative sqlite path is resolved against the repo root
            relative_path = url.replace("sqlite:///./", "")
            absolute_path = BASE_DIR / relative_path
            return f"sqlite:///{absolute_path}"
        return url


settings = Settings()
