from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # DB
    database_url: str = Field(
        default="sqlite+pysqlite:///./sports_hub.db",
        validation_alias="DATABASE_URL",
    )
    db_echo: bool = False

    # Fetch budget
    per_call_timeout_s: float = 30.0
    global_deadline_s: float = 120.0
    max_parallel: int = Field(default=3, ge=1)

    # Progress sessions
    progress_ttl_s: float = 300.0
    progress_default_estimate_s: float = 120.0

    # Cache
    cache_sweep_interval_s: float = 3600.0

    default_region: str = "global"
    log_level: str = "INFO"

    # -----------------------------
    # Derived helpers
    # -----------------------------

    def call_timeout_within(self, remaining_s: float) -> float:
        """Per-call timeout, never longer than what is left of the global budget."""
        return max(0.0, min(self.per_call_timeout_s, remaining_s))


settings = Settings()
