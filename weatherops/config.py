"""WeatherOps configuration system using Pydantic Settings."""

from __future__ import annotations

from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class WeatherOpsConfig(BaseSettings):
    """Main configuration class. Loads from .env file and environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "WEATHEROPS"
    debug: bool = False
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: str = "http://localhost:3000"

    # Database
    database_url: str = "sqlite+aiosqlite:///./weatherops.db"

    # Logging
    log_dir: str = "logs"
    log_max_bytes: int = 10_000_000
    log_backup_count: int = 5

    # SMTP (operator notifications)
    smtp_host: str = ""
    smtp_port: int = 465
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_from: str = ""
    smtp_use_ssl: bool = True
    admin_email: str = ""

    # Webhook (optional second operator channel)
    alert_webhook_url: Optional[str] = None

    # System monitor
    rapid_change_cpu_delta: float = 30.0  # percentage points between snapshots

    # Rate limiting
    rate_limit_window_minutes: int = 1

    @field_validator("rapid_change_cpu_delta")
    @classmethod
    def validate_rapid_change_delta(cls, v: float) -> float:
        if v < 0:
            raise ValueError("rapid_change_cpu_delta must be non-negative")
        return v

    @field_validator("rate_limit_window_minutes")
    @classmethod
    def validate_window(cls, v: int) -> int:
        if v < 1:
            raise ValueError("rate_limit_window_minutes must be at least 1")
        return v


def get_config() -> WeatherOpsConfig:
    """Factory function to create config instance."""
    return WeatherOpsConfig()
