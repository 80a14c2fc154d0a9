"""Application settings loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration with sensible defaults."""

    log_level: str = Field(default="info", alias="LOG_LEVEL")
    metrics_enabled: bool = Field(default=True, alias="METRICS_ENABLED")
    parsers: str = Field(default="calendar,uri", alias="PARSERS")
    max_request_size_bytes: int = Field(default=64 * 1024, alias="MAX_REQUEST_SIZE_BYTES")
    max_concurrent_requests: int = Field(default=32, alias="MAX_CONCURRENT_REQUESTS")
    request_timeout_seconds: float = Field(default=2.0, alias="REQUEST_TIMEOUT_SECONDS")
    require_api_key: bool = Field(default=False, alias="REQUIRE_API_KEY")
    api_key: str | None = Field(default=None, alias="API_KEY")
    version: str = Field(default="0.1.0", alias="VERSION")
    host: str = Field(default="127.0.0.1", alias="HOST")
    port: int = Field(default=8080, alias="PORT")
    dev_reload: bool = Field(default=False, alias="DEV_RELOAD")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    @property
    def parser_names(self) -> list[str]:
        return [name.strip() for name in self.parsers.split(",") if name.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()
