from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="PROGRESS_", case_sensitive=False)

    app_name: str = "Lesson Progress API"
    api_v1_prefix: str = "/api/v1"
    database_url: str = "sqlite:///./progress.db"
    storage_key_prefix: str = "200wad"
    log_level: str = "INFO"

    @field_validator("database_url")
    @classmethod
    def validate_db_url(cls, value: str) -> str:
        if not value:
            raise ValueError("PROGRESS_DATABASE_URL is required")
        return value

    @field_validator("storage_key_prefix")
    @classmethod
    def validate_key_prefix(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("storage key prefix must not be empty")
        return value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return (value or "INFO").upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
