"""
Application settings (Pydantic Settings).
"""
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings

# .env next to backend/ (parent of compliance/)
_env_path = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    database_url: str = "sqlite:///./nammacompliance.db"
    jwt_secret: str = "nammacompliance-secret-key-change-in-production"
    environment: str = "development"
    log_level: str = "INFO"

    # Email channel: SMTP_USER / SMTP_PASSWORD in .env (Gmail App Password, not the account password)
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    notify_from: str = ""
    frontend_url: str = "http://localhost:3000"

    # Feature flags
    enable_cron_jobs: bool = True
    enable_email_notifications: bool = False
    enable_whatsapp_notifications: bool = False

    # Scheduler: all cron expressions are evaluated in scheduler_timezone, never the host zone.
    # Weekdays by name: APScheduler counts 0=mon, so a numeric "1" would mean Tuesday.
    scheduler_timezone: str = "Asia/Kolkata"
    gst_reminder_cron: str = "0 8 * * *"
    compliance_reminder_cron: str = "0 9 * * mon"
    log_cleanup_cron: str = "0 2 1 * *"
    activity_log_retention_days: int = 90

    class Config:
        env_file = _env_path
        extra = "ignore"

    @field_validator("smtp_user", "smtp_password", "notify_from", "frontend_url", mode="after")
    @classmethod
    def strip_strings(cls, v: str) -> str:
        return (v or "").strip()

    @field_validator("scheduler_timezone", mode="after")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone {v!r}") from e
        return v


settings = Settings()
