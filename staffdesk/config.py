"""
staffdesk settings, read from the environment and an optional project .env.

Everything has a default, so the store and the tool dispatcher run without
any configuration; only the chat assistant needs ANTHROPIC_API_KEY.
"""

import os
from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env relative to this file (staffdesk/config.py → project root)
_ENV_FILE = Path(__file__).parent.parent / ".env"


def _load_env_file() -> None:
    """Copy .env values into os.environ where the variable is unset or blank."""
    if not _ENV_FILE.exists():
        return
    from dotenv import dotenv_values
    for key, value in dotenv_values(_ENV_FILE).items():
        if value and not os.environ.get(key):
            os.environ[key] = value


# Before any Settings() is built
_load_env_file()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Anthropic (optional: the tool dispatcher works without a model)
    anthropic_api_key: str = ""
    model_complex: str = "claude-sonnet-4-6"
    anthropic_max_tokens: int = 4096
    max_tool_iterations: int = 5

    # Environment
    data_dir: str = "./data"
    container_environment: bool = False

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    # ── Document store ──────────────────────────────────────────────────────────
    cache_ttl_seconds: float = 300.0

    # ── Name resolution / recommendations ──────────────────────────────────────
    suggestion_limit: int = 3
    recommend_show_bonus: float = 0.5
    recommend_role_bonus: float = 2.0

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"

    @model_validator(mode="after")
    def container_data_dir(self) -> "Settings":
        if self.container_environment and self.data_dir == "./data":
            self.data_dir = "/data"
        return self

    @property
    def db_path(self) -> str:
        return os.path.join(self.data_dir, "staffdesk.db")

    @property
    def logs_dir(self) -> str:
        return os.path.join(self.data_dir, "logs")


def get_settings() -> "Settings":
    """Return the application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


_settings: Settings | None = None


class _SettingsProxy:
    """Lazy proxy so `from staffdesk.config import settings` works without eager init."""
    def __getattr__(self, name):
        return getattr(get_settings(), name)


settings = _SettingsProxy()  # type: ignore[assignment]
