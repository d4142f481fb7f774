# backend/slotbook/config.py

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # repository root


class Settings(BaseSettings):
    database_url: str = "sqlite:///./data/slotbook.db"
    redis_url: str = "redis://localhost:6379/0"

    # Booking engine
    hold_ttl_minutes: int = 5
    default_seating_duration_minutes: int = 90
    default_buffer_minutes: int = 0
    hold_cleanup_interval_seconds: int = 60

    # Notifications: "queue" (Redis list), "log" (stub) or "none"
    notifications_backend: str = "queue"
    notifications_queue: str = "events:p2p"
    frontend_url: str = "http://localhost:5173"

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        extra="ignore",
    )

    @property
    def resolved_database_url(self) -> str:
        url = self.database_url
        if url.startswith("sqlite:///./"):
            # Relative SQLite paths are anchored at the repository root
            relative_path = url.replace("sqlite:///./", "")
            absolute_path = BASE_DIR / relative_path
            return f"sqlite:///{absolute_path}"
        return url


settings = Settings()
