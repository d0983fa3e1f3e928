"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database (None -> in-memory stores)
    database_url: str | None = None

    # Optimistic concurrency
    mutation_max_attempts: int = Field(3, ge=1)

    # Flight pricing API
    flight_api_base_url: str = "https://test.api.amadeus.com"
    flight_api_client_id: str = ""
    flight_api_client_secret: str = ""
    flight_api_timeout_ms: int = 4000
    flight_currency: str = "USD"

    # Live status
    trip_timezone: str = "UTC"

    # Bootstrap admins, merged with profile roles
    admin_user_ids: list[str] | str = Field(default_factory=list)

    @field_validator("admin_user_ids", mode="before")
    @classmethod
    def parse_admin_user_ids(cls, v: object) -> object:
        """Accept a comma-separated string as well as a list."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
