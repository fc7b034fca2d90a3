from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    debug: bool = True
    site_host: str = "sargaux.com"
    cors_origins: list[str] = ["*"]

    ENVIRONMENT: str = "Production"

    # Session cookie signing
    secret_key: str = "your-super-secret-key-change-in-production"
    session_max_age_days: int = 90

    # Calendar subscription links, never commit a real value
    calendar_hmac_secret: str = ""

    # Notion
    notion_api_key: str = ""
    notion_api_url: str = "https://api.notion.com/v1"
    notion_version: str = "2022-06-28"
    notion_guest_list_db: str = ""
    notion_event_catalog_db: str = ""
    notion_rsvp_responses_db: str = ""

    SENTRY_DSN: str = ""
    SENTRY_TRACES_SAMPLE_RATE: float = 0.0
    SENTRY_PROFILES_SAMPLE_RATE: float = 0.0

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def secure_cookies(self) -> bool:
        return self.ENVIRONMENT.lower() not in ("development", "test")


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
