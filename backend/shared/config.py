"""
Centralized configuration for the Reelbase backend.

All settings are loaded from environment variables with sensible defaults.
Backend-specific settings are namespaced (e.g., SUPABASE_*, DB_*).
"""

import logging
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Reelbase API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Deployment environment (selects the auth backend, see shared.environment)
    environment: str = "development"
    vercel_env: str = ""

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Relational store (development mode)
    database_url: str = ""
    db_pool_min: int = 1
    db_pool_max: int = 5

    # Session tokens (development mode)
    jwt_secret: str = ""
    session_ttl_days: int = 7
    session_cookie_name: str = "token"
    bcrypt_rounds: int = 12

    # Supabase (production mode store and identity-token issuer)
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""
    supabase_jwt_secret: str = ""

    @property
    def cookie_secure(self) -> bool:
        """Session cookies are marked Secure only in production."""
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


def configure_logging(settings: Settings) -> None:
    """Set the root log level and a plain formatter for the process."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
