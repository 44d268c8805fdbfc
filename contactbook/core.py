"""Application configuration and settings management.

This module defines the application settings loaded from environment
variables and provides a helper for accessing the cached settings.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Attributes:
        DATABASE_URL: Database connection string.
        SECRET_KEY: Secret key used to sign the session cookie.
        SESSION_COOKIE: Name of the session cookie.
        SESSION_MAX_AGE: Session cookie lifetime in seconds.
        HTTPS_ONLY: Only send the session cookie over HTTPS.
        LOG_LEVEL: Root logging level.
        SEED_USERNAME: Optional user created at startup.
        SEED_PASSWORD: Password for the seed user.
    """

    DATABASE_URL: str = "sqlite:///./contacts.db"
    SECRET_KEY: str = "dev-secret"
    SESSION_COOKIE: str = "contactbook-session-id"
    SESSION_MAX_AGE: int = 31 * 24 * 60 * 60
    HTTPS_ONLY: bool = False
    LOG_LEVEL: str = "INFO"
    SEED_USERNAME: str | None = None
    SEED_PASSWORD: str | None = None

    class Config:
        """Pydantic configuration for loading environment variables."""

        env_file = ".env"
        extra = "allow"


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings.

    The settings object is cached to prevent reloading environment
    variables multiple times during application lifetime.
    """

    return Settings()
