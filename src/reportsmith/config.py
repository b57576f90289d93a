"""Application configuration.

Configuration is loaded from environment variables. For local development, you can provide a
`.env` file and set `REPORTSMITH_ENV_FILE` to point to it.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """reportsmith settings.

    All fields are environment-configurable. Prefix is `REPORTSMITH_`.
    """

    model_config = SettingsConfigDict(
        env_prefix="REPORTSMITH_",
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    log_level: str = Field(default="INFO")

    # History
    max_history_length: int = Field(default=10, ge=1, le=1000)

    # Project defaults
    default_min_sections: int = Field(default=5, ge=0, le=100)
    default_max_sub_sections: int = Field(default=2, ge=0, le=10)

    # Outline conversion
    overview_suffix: str = Field(default="Overview", min_length=1)


def load_settings() -> Settings:
    """Load settings from env.

    Returns:
        Settings: Parsed settings.
    """

    env_file_override = os.getenv("REPORTSMITH_ENV_FILE")
    if env_file_override:
        env_path = Path(env_file_override)
        return Settings(_env_file=env_path)

    default_env = Path.cwd() / ".env"
    if default_env.exists():
        return Settings(_env_file=default_env)

    return Settings()
