"""Application configuration loaded from environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All configuration is loaded from environment variables (or .env file).

    Variables are prefixed with ``CYCLEKEEPER_``, e.g. ``CYCLEKEEPER_DATA_DIR``.
    """

    # --- App ---
    app_name: str = "cyclekeeper"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    environment: str = "development"  # development | production

    # --- Local storage ---
    data_dir: Path = Path.home() / ".cyclekeeper"
    users_key: str = "SavedUsers"
    preferences_key: str = "AppPreferences"

    # --- Tracker config override (defaults to the bundled YAML) ---
    tracker_config_path: Path | None = None

    # --- CORS ---
    cors_origins: list[str] = ["http://localhost:3000"]

    model_config = {
        "env_prefix": "CYCLEKEEPER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    return Settings()
