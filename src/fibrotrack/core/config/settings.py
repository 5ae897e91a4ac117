"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Fibrotrack server configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Server
    # Loopback by default: symptom logs are health data and there is no auth layer.
    fibro_host: str = "127.0.0.1"
    fibro_port: int = 8001
    fibro_log_level: str = "info"
    fibro_allow_insecure_bind: bool = False

    # Analytics
    # IANA zone used to bucket entries into calendar days. Empty = process local time.
    analytics_timezone: str = ""


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
