"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Application
    app_name: str = "CarbonFlow"
    debug: bool = False
    api_v1_prefix: str = "/api/v1"

    # Database
    database_url: str = "sqlite:///./carbonflow.db"
    store_document_key: str = "carbon-credit-projects"

    # CORS
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Rate Limiting
    rate_limit_enabled: bool = True
    rate_limit_requests: int = 100
    rate_limit_period: int = 60  # seconds

    # Project defaults
    default_project_name: str = "New Project"
    default_owner_id: str = "owner-1"
    default_owner_name: str = "Project Owner"
    default_owner_email: str = "owner@example.com"
    default_estimated_duration: str = "18 months"
    default_credits_per_year: int = 1000
    default_timezone: str = "America/New_York"

    # Navigation gating
    advanced_unlock_progress: float = 0.0  # percent of setup gates


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
