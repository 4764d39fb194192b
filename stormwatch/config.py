"""
Stormwatch Configuration.

Pydantic Settings v2 — loads from .env, environment variables.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ──────────────────────────────────────────────────────
    app_name: str = "Stormwatch"
    app_version: str = "1.0.0"
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")

    # ── API ───────────────────────────────────────────────────────────────
    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=3000, alias="PORT")
    allowed_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        alias="CORS_ORIGINS",
    )

    # ── Security ────────────────────────────────────────────────────────────
    api_key: str = Field(default="", alias="API_KEY")
    access_code: str = Field(default="", alias="ACCESS_CODE")

    # ── Reading Window / Classifier ───────────────────────────────────────
    window_minutes: int = Field(default=60, alias="WINDOW_MINUTES")
    grace_minutes: int = Field(default=30, alias="GRACE_MINUTES")
    observation_cadence_hours: float = Field(default=0.5, alias="OBSERVATION_CADENCE_HOURS")

    # ── Alerting ──────────────────────────────────────────────────────────
    monitoring_duration_minutes: int = Field(default=60, alias="MONITORING_DURATION_MINUTES")
    alert_dispatch_timeout_seconds: float = Field(
        default=10.0, alias="ALERT_DISPATCH_TIMEOUT_SECONDS",
        description="Upper bound on a single integration's delivery attempt",
    )
    alert_dispatch_background: bool = Field(
        default=True, alias="ALERT_DISPATCH_BACKGROUND",
        description="Acknowledge ingestion before alert delivery settles",
    )
    alert_webhook_url: str = Field(default="", alias="ALERT_WEBHOOK_URL")
    alert_log_only: bool = Field(default=False, alias="ALERT_LOG_ONLY")

    # ── Email ─────────────────────────────────────────────────────────────
    email_host: str = Field(default="", alias="EMAIL_HOST")
    email_port: int = Field(default=587, alias="EMAIL_PORT")
    email_secure: bool = Field(default=False, alias="EMAIL_SECURE")
    email_user: str = Field(default="", alias="EMAIL_USER")
    email_password: str = Field(default="", alias="EMAIL_PASS")
    email_from: str = Field(
        default='"Stormwatch Alerts" <alerts@stormwatch.local>',
        alias="EMAIL_FROM",
    )
    subscribers_file: str = Field(default="subscribers.json", alias="SUBSCRIBERS_FILE")

    # ── Operational ────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="console", alias="LOG_FORMAT")
    graceful_shutdown_seconds: int = Field(default=30, alias="GRACEFUL_SHUTDOWN_SECONDS")

    @property
    def email_configured(self) -> bool:
        """SMTP delivery needs at least a host."""
        return bool(self.email_host)


settings = Settings()
