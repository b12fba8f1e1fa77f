from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./emotherm.db"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://myapp.com,https://api.myapp.com"
    CORS_ORIGINS: str = "*"

    # Storage slot keys
    ASSESSMENTS_KEY: str = "emotional_assessments"
    THEME_KEY: str = "theme_preference"

    # Soft ceiling on the serialized assessment array (characters).
    STORAGE_SOFT_LIMIT: int = 4_500_000
    # Hard capacity of the medium in bytes. None = unbounded.
    STORAGE_HARD_QUOTA: Optional[int] = None
    # Records kept when the soft ceiling forces archiving.
    ARCHIVE_KEEP: int = 100

    WEATHER_WINDOW: int = 10
    DEFAULT_FILTER_DAYS: int = 30
    # A filter window at or above this many days means "all time".
    ALL_TIME_DAYS: int = 365

    # "redact-notes" or "keep-notes"
    ANONYMIZE_NOTES_POLICY: str = "redact-notes"
    EXPORT_APP_NAME: str = "Emotion Thermometer"
    EXPORT_VERSION: str = "1.1"

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency; overridden in tests to inject capacity thresholds."""
    return settings
