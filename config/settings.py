"""
Configuration management using Pydantic Settings.

Environment variables (case-insensitive, also read from .env):
- BACKEND_URL: Base URL of the remote OCR/credit backend
- BACKEND_AUTH_MODE: 'none', 'static' or 'google'
- BACKEND_TOKEN: Bearer token used when BACKEND_AUTH_MODE=static
- BACKEND_AUDIENCE: ID-token audience when BACKEND_AUTH_MODE=google
- BACKEND_TIMEOUT: Upstream request timeout in seconds
- DATABASE_URL: SQLAlchemy database URL for local user records
- CORS_ALLOW_ORIGINS: Comma-separated list of allowed origins
- LOG_LEVEL: Root log level
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

AUTH_MODES = ("none", "static", "google")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Remote backend
    backend_url: str = Field(default="http://localhost:8000")
    backend_auth_mode: str = Field(default="none")
    backend_token: Optional[str] = Field(default=None)
    backend_audience: Optional[str] = Field(default=None)
    backend_timeout: float = Field(default=60.0)

    # Local user records
    database_url: str = Field(default="sqlite:///smartlens.db")

    # API Configuration
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8080)
    cors_allow_origins: str = Field(default="")

    # Logging
    log_level: str = Field(default="INFO")

    # Billing
    extraction_cost: int = Field(default=1)

    def get_cors_origins(self) -> List[str]:
        """Split the comma-separated origin list."""
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]

    def get_auth_mode(self) -> str:
        """Normalized auth mode. Raises ValueError on unknown values."""
        mode = (self.backend_auth_mode or "none").strip().lower()
        if mode not in AUTH_MODES:
            raise ValueError(
                f"BACKEND_AUTH_MODE must be one of {', '.join(AUTH_MODES)}, got {mode!r}"
            )
        return mode


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
