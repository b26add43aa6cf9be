"""Application configuration settings."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict


def _get_default_database_url() -> str:
    """Get the default database URL, using a mounted volume path if available."""
    if os.path.isdir("/data"):
        return "sqlite:////data/rentals.db"
    return "sqlite:///./rentals.db"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    PROJECT_NAME: str = "Rentals"
    VERSION: str = "0.1.0"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database - production runs on PostgreSQL with PostGIS
    DATABASE_URL: str = _get_default_database_url()

    # Object storage for property photos
    AWS_REGION: str = "us-east-1"
    S3_BUCKET_NAME: str = "rentals-property-photos"

    # Geocoding (Nominatim-compatible search endpoint)
    GEOCODING_URL: str = "https://nominatim.openstreetmap.org/search"
    GEOCODING_USER_AGENT: str = "RentalsApp (ops@example.com)"
    GEOCODING_TIMEOUT_SECONDS: float = 10.0

    # Bearer tokens - signatures are only verified when a key set URL is given
    JWT_JWKS_URL: str | None = None
    JWT_AUDIENCE: str | None = None

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "standard"


settings = Settings()
