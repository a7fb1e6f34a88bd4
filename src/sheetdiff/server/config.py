"""Application configuration using pydantic-settings.

Every setting can be overridden with an environment variable of the same
name (case-insensitive) or from a local ``.env`` file.
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars not defined in Settings
    )

    # Server
    port: int = 8000
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Request limits
    max_payload_bytes: int = 50 * 1024 * 1024  # 50 MiB

    # Uploaded file storage
    file_ttl_seconds: int = 60 * 60  # 1 hour
    cleanup_interval_seconds: int = 30 * 60  # 30 minutes

    # Comma-separated list of accepted upload extensions
    allowed_extensions: str = ".xlsx,.xlsm"

    # CORS (comma-separated, "*" allows any origin)
    allowed_origins: str = "*"

    @field_validator("max_payload_bytes", "file_ttl_seconds", "cleanup_interval_seconds")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return level

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def allowed_extensions_list(self) -> tuple[str, ...]:
        """Parse accepted extensions, lowercased and dot-prefixed."""
        extensions = []
        for ext in self.allowed_extensions.split(","):
            ext = ext.strip().lower()
            if not ext:
                continue
            extensions.append(ext if ext.startswith(".") else f".{ext}")
        return tuple(extensions)

    @property
    def allowed_origins_list(self) -> list[str]:
        """Parse allowed origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded once and cached for the lifetime of the application.
    """
    return Settings()
