"""
Gainsly Client Settings.

Loaded from ``GAINSLY_*`` environment variables (or a ``.env`` file).
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Settings for the client service layer."""

    model_config = SettingsConfigDict(
        env_prefix="GAINSLY_",
        env_file=".env",
        extra="ignore",
    )

    API_URL: str = Field(default="http://localhost:5000", description="Base URL of the Gainsly API")
    REQUEST_TIMEOUT: float = Field(default=10.0, description="Per-request timeout in seconds")

    # Offline mode keeps everything in a local JSON file instead of calling the API
    USE_LOCAL_BACKEND: bool = False
    LOCAL_STORE_PATH: str = "gainsly_local.json"

    # Where tokens and the current user id are remembered between runs
    SESSION_PATH: Optional[str] = None
