from functools import lru_cache

from pydantic import HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SyncSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="SYNC_", extra="ignore")

    api_base_url: HttpUrl | str = "http://localhost:8000/api"
    access_token: str = ""
    timeout_seconds: float = 10.0

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be positive")
        return value


@lru_cache(maxsize=1)
def get_settings() -> SyncSettings:
    return SyncSettings()
