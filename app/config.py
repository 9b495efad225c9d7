"""CHANLENS — Central Configuration via Pydantic Settings."""

import os
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Database ──
    database_url: str = ""

    # ── App ──
    log_level: str = "INFO"
    scheduler_enabled: bool = True
    takeoff_scan_hour: int = 3  # Daily takeoff scan at 3 AM UTC

    # ── Metrics ──
    history_days: int = 365  # Daily history pulled per metrics request
    metrics_cache_ttl_seconds: int = 60
    default_page_size: int = 10

    @property
    def effective_database_url(self) -> str:
        """Return PostgreSQL URL if set, otherwise fall back to SQLite."""
        if self.database_url:
            return self.database_url
        # Vercel has a read-only filesystem; use /tmp for SQLite
        if os.environ.get("VERCEL"):
            return "sqlite:////tmp/chanlens.db"
        return "sqlite:///./chanlens.db"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
