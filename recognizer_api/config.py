"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Environment
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    max_request_body_mb: int = 24

    # Remote sources
    # Hosts are matched exactly, no subdomain wildcards.
    allowed_domains: frozenset[str] = frozenset({"discord.mx"})
    fetch_timeout_seconds: float = 10.0
    max_image_mb: int = 24

    # Tesseract
    tesseract_cmd: str = ""  # Empty = resolve "tesseract" from PATH
    default_language: str = "eng"
    recognition_timeout_seconds: float = 30.0

    @property
    def max_request_body_bytes(self) -> int:
        """Request body cap in bytes."""
        return self.max_request_body_mb * 1024 * 1024

    @property
    def max_image_bytes(self) -> int:
        """Remote image download cap in bytes."""
        return self.max_image_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
