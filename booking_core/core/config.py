from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    BUSINESS_TIMEZONE: str = "America/Los_Angeles"
    BUSINESS_OPEN_HOUR: int = 9
    BUSINESS_CLOSE_HOUR: int = 17
    BOOKING_BUFFER_MINUTES: int = 15
    MAX_LOOKAHEAD_DAYS: int = 30

    STORE_PROVIDER: str = "memory"  # "memory" or "json"
    DATA_DIR: str = "./data"
    PROMO_STORE_PATH: str | None = None

    REMINDER_ENABLED: bool = True
    REMINDER_HOURS_AHEAD: int = 24
    REMINDER_INTERVAL_MINUTES: int = 30
    REMINDER_RETENTION_DAYS: int = 30
    SCHEDULER_ENABLED: bool = False

    NOTIFY_EMAIL_ENDPOINT: str | None = None
    NOTIFY_SMS_ENDPOINT: str | None = None
    NOTIFY_API_KEY: str | None = None
    NOTIFY_FROM_ADDRESS: str = "no-reply@example.com"


settings = Settings()
