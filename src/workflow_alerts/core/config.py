from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Workflow Alert Engine"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    app_url: str | None = None  # Prefix for notification action links; relative when unset

    # Database
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_ssl_mode: str = "prefer"  # disable, prefer, require, verify-ca, verify-full
    database_statement_cache_size: int = 100

    # Redis (optional - alert history falls back to process memory without it)
    redis_url: str | None = None  # e.g., "redis://localhost:6379/0"
    redis_pool_size: int = 10
    redis_retry_seconds: int = 30  # Wait between reconnect attempts after a failure

    # Temporal
    temporal_host: str = "localhost:7233"
    temporal_namespace: str = "default"
    temporal_queue_prefix: str = "workflow-alerts"

    # Alert cooldowns per tier
    alert_warning_cooldown_hours: int = 24
    alert_urgent_cooldown_hours: int = 12
    alert_overdue_cooldown_hours: int = 24
    alert_history_retention_days: int = 7

    # Schedules (Temporal cron syntax). Set alert_sweep_schedule to "" to rely on
    # completion-triggered alerts only.
    alert_sweep_schedule: str = "0 * * * *"
    maintenance_schedule: str = "0 0 * * *"

    # Optional JSON file replacing the bundled alert routing tables
    alert_routing_path: str | None = None

    @field_validator(
        "alert_warning_cooldown_hours",
        "alert_urgent_cooldown_hours",
        "alert_overdue_cooldown_hours",
        "alert_history_retention_days",
    )
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Alert cooldowns and retention must be positive")
        return v

    @field_validator("alert_sweep_schedule", "maintenance_schedule")
    @classmethod
    def validate_cron(cls, v: str) -> str:
        """Accept an empty string (disabled) or a five-field cron expression."""
        if v and len(v.split()) != 5:
            raise ValueError(f"Invalid cron expression '{v}': expected 5 fields")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
