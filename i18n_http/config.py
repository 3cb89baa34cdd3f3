from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="I18N_HTTP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = ""
    user_agent: str = "i18n-backend-http/0.1"

    open_timeout_seconds: float = Field(default=1.0, gt=0)
    read_timeout_seconds: float = Field(default=1.0, gt=0)
    open_retries: int = Field(default=0, ge=0)
    read_retries: int = Field(default=0, ge=0)

    polling_interval_seconds: float = Field(default=600.0, gt=0)
    poll_enabled: bool = True

    # <= 0 disables in-process caching entirely
    memory_cache_size: int = 10

    cache_namespace: str = "i18n/backend/http"
    cache_schema_version: str = "v2"
    stats_namespace: str = "i18n-backend-http"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
