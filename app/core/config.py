from pathlib import Path
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# -------------------------------------------------
# Explicitly load .env (CRITICAL)
# -------------------------------------------------

BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_PATH = BASE_DIR / ".env"

load_dotenv(dotenv_path=ENV_PATH)


class Settings(BaseSettings):
    DATABASE_URL: str
    SECRET_KEY: str
    ENVIRONMENT: str = "development"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440
    ALGORITHM: str = "HS256"
    CORS_ORIGINS: str = Field(default="*", description="Comma separated list of allowed origins")
    AUTO_CREATE_TABLES: bool = Field(default=False, description="Run metadata.create_all on startup (development only)")

    # Seeded admin account (created on startup when no admin exists)
    DEFAULT_ADMIN_EMAIL: str = "admin@tuition.local"
    DEFAULT_ADMIN_PASSWORD: str = "Admin@123"
    DEFAULT_ADMIN_NAME: str = "Administrator"

    # Twilio SMS gateway: accept TWILIO_* or SMS_* (e.g. .env uses SMS_FROM_NUMBER)
    TWILIO_ACCOUNT_SID: str = Field(default="", validation_alias=AliasChoices("TWILIO_ACCOUNT_SID", "SMS_ACCOUNT_SID"))
    TWILIO_AUTH_TOKEN: str = Field(default="", validation_alias=AliasChoices("TWILIO_AUTH_TOKEN", "SMS_AUTH_TOKEN"))
    TWILIO_FROM_NUMBER: str = Field(default="", validation_alias=AliasChoices("TWILIO_FROM_NUMBER", "SMS_FROM_NUMBER"))
    TWILIO_API_BASE_URL: str = "https://api.twilio.com"
    SMS_TIMEOUT_SECONDS: float = 10.0

    # Reminder cron (env: REMINDER_CRON_ENABLED, REMINDER_CRON_HOUR, REMINDER_CRON_MINUTE)
    REMINDER_CRON_ENABLED: bool = Field(default=True, description="Start the daily reminder task on startup")
    REMINDER_CRON_HOUR: int = Field(default=9, ge=0, le=23, description="Local hour of the daily reminder run")
    REMINDER_CRON_MINUTE: int = Field(default=0, ge=0, le=59, description="Local minute of the daily reminder run")

    # Message and report wording
    SCHOOL_NAME: str = "K2B Dancing Studio"
    CURRENCY_SYMBOL: str = "$"
    REPORT_CURRENCY: str = "CAD"

    class Config:
        extra = "ignore"
        env_file = str(ENV_PATH)
        env_file_encoding = "utf-8"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
