"""
Application configuration. Loads from environment variables.
Secrets and sensitive config must never be hardcoded.
"""

import os

from dotenv import load_dotenv

load_dotenv()
from functools import lru_cache


@lru_cache(maxsize=1)
def get_settings() -> "Settings":
    """Return cached settings instance."""
    return Settings()


class Settings:
    """Application settings loaded from environment."""

    # App
    app_name: str = "HearHome"
    debug: bool = False

    # Local cache database (SQLite by default; postgresql+psycopg:// also works)
    database_url: str = "sqlite:///./hearhome.db"
    db_connect_timeout: int = 10  # seconds, PostgreSQL only

    # Remote backend
    api_base_url: str = "http://localhost:8080"
    http_timeout: float = 15.0

    # Security
    internal_job_token: str = ""  # Required for /internal/* endpoints

    # Pet simulation
    pet_tick_interval_minutes: int = 30  # cadence the external scheduler should use
    default_pet_name: str = "萌宠"

    def __init__(self) -> None:
        self.app_name = os.getenv("APP_NAME", self.app_name)
        self.debug = os.getenv("DEBUG", "false").lower() == "true"

        raw_url = os.getenv("DATABASE_URL", self.database_url)
        # Ensure psycopg3 driver if URL uses generic postgresql://
        if raw_url.startswith("postgresql://"):
            raw_url = raw_url.replace("postgresql://", "postgresql+psycopg://", 1)
        self.database_url = raw_url
        self.db_connect_timeout = int(os.getenv("DB_CONNECT_TIMEOUT", str(self.db_connect_timeout)))

        self.api_base_url = os.getenv("API_BASE_URL", self.api_base_url).rstrip("/")
        self.http_timeout = float(os.getenv("HTTP_TIMEOUT", str(self.http_timeout)))

        self.internal_job_token = os.getenv("INTERNAL_JOB_TOKEN", "")

        self.pet_tick_interval_minutes = int(
            os.getenv("PET_TICK_INTERVAL_MINUTES", str(self.pet_tick_interval_minutes))
        )
        self.default_pet_name = os.getenv("DEFAULT_PET_NAME", self.default_pet_name)
