# settings.py
"""
Gainsly API Settings.

Pydantic settings management with environment variable support.
"""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


PLACEHOLDER_SECRETS = {"changeme", "defaultsecret", "secret"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # MongoDB - REQUIRED from environment
    DATABASE_URL: str = Field(..., description="MongoDB connection string (required)")
    DATABASE_NAME: str = Field(default="gainsly")

    # JWT - REQUIRED from environment
    SECRET_KEY: str = Field(..., description="JWT signing secret (required)")
    ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=15)
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(default=7)

    # Environment
    ENV: str = Field(default="development")
    DEBUG: bool = Field(default=True)
    LOG_LEVEL: str = Field(default="INFO")
    PORT: int = Field(default=5000)

    # CORS - Expo and Metro dev servers by default
    CORS_ORIGINS: str = (
        "http://localhost:19000,http://localhost:19006,"
        "exp://localhost:19000,http://localhost:8081"
    )

    # Rate limiting
    RATE_LIMIT_STORAGE_URI: str = Field(
        default="memory://",
        description="slowapi storage backend (memory:// or redis://...)"
    )
    AUTH_RATE_LIMIT: str = Field(default="20/minute")

    # Sentry Error Tracking
    SENTRY_DSN: Optional[str] = None
    SENTRY_ENVIRONMENT: str = "production"
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"

    def get_cors_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    def validate_required_settings(self) -> None:
        """Validate that required settings are configured."""
        if not self.DATABASE_URL:
            raise ValueError("DATABASE_URL must be set")
        if not self.SECRET_KEY or self.SECRET_KEY.lower() in PLACEHOLDER_SECRETS:
            raise ValueError("SECRET_KEY must be changed from default in production")

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()

# Validate in production
if settings.ENV == "production":
    settings.validate_required_settings()
