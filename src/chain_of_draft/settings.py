from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server configuration."""

    server_name: str = "chain-of-draft"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_dir: Path = Path("logs")
    log_to_file: bool = False

    session_backend: Literal["memory", "redis"] = "memory"
    redis_url: str | None = None
    session_key_prefix: str = "session:"

    session_max_age_seconds: int = 86400  # 24 hours
    session_max_size_bytes: int = 5 * 1024 * 1024  # 5 MiB
    session_cleanup_interval_seconds: int = 3600  # 0 disables the sweep

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the settings singleton (loaded from env / .env)."""
    return Settings()
