# repair_cafe/core/config.py

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Values come from the process environment (Docker Compose passes the
    # root .env through). Every key has a development default.
    model_config = SettingsConfigDict(extra="ignore")

    # The environment mode: 'local' or 'prod'
    ENV: str = "local"

    DATABASE_URL_PROD: str = "postgresql://repair:repair@db:5432/repair_cafe_db"
    DATABASE_URL_LOCAL: str = "sqlite:///./repair_cafe.db"

    # Session cookies are HS256 JWTs signed with this secret
    JWT_SECRET: str = "dev-secret-change-me"
    SESSION_COOKIE_NAME: str = "revive-session"
    SESSION_TTL_DAYS: int = 30
    MAGIC_LINK_TTL_MINUTES: int = 60
    MAGIC_LINK_RATE_LIMIT: str = "5/minute"

    APP_URL: str = "http://localhost:3300"
    CORS_ORIGINS: List[str] = ["http://localhost:3300"]

    # Comma-separated list; users created with one of these emails are admins
    ADMIN_EMAILS: str = ""

    # Email delivery. Without an API key, emails are logged instead of sent.
    RESEND_API_KEY: str = ""
    RESEND_FROM_DOMAIN: str = "repaircommons.org"
    EMAIL_FROM_NAME: str = "Repair Commons"

    DEFAULT_EVENT_CAPACITY: int = 40
    REGISTRATION_OPENS_DAYS_BEFORE: int = 14
    REMINDER_DAYS_AHEAD: List[int] = [7, 1]

    NOTIFICATION_MAX_ATTEMPTS: int = 5
    # A row stuck in `sending` this long is assumed abandoned and retried
    NOTIFICATION_CLAIM_TIMEOUT_MINUTES: int = 10
    ENABLE_SCHEDULER: bool = False

    @property
    def DATABASE_URL(self) -> str:
        return (
            self.DATABASE_URL_LOCAL if self.ENV == "local" else self.DATABASE_URL_PROD
        )

    @property
    def admin_emails(self) -> set[str]:
        return {
            email.strip().lower()
            for email in self.ADMIN_EMAILS.split(",")
            if email.strip()
        }

    @property
    def email_enabled(self) -> bool:
        return bool(self.RESEND_API_KEY) and self.RESEND_API_KEY != "password"


# Create a single instance of the settings
settings = Settings()
