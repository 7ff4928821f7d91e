"""
Pydantic v2 settings for hkreporter.
Supports .env files, environment variables, and runtime validation.
"""

from pathlib import Path
from typing import Dict

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from hkreporter.environment import Environment


ROOT_PATH = Path(__file__).parent.parent.parent

class AppSettings(BaseSettings):
    """Main application configuration."""

    log_level: str = Field(default="INFO", description="Logging level", pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")


class DateSettings(BaseSettings):
    """ISO-8601 date formatting used by date metadata values."""

    fractional_seconds: bool = Field(default=False, description="Emit and accept fractional seconds (millisecond precision)")


class Settings(BaseSettings):
    """Complete application settings."""

    model_config = SettingsConfigDict(
        env_file_encoding='utf-8',
        env_nested_delimiter='__',
        extra='ignore',
    )

    app  : AppSettings  = Field(default_factory=AppSettings)
    date : DateSettings = Field(default_factory=DateSettings)
    env  : Environment  = Field(default_factory=Environment.current, description="Current application environment")

    @classmethod
    def for_environment(cls, env: Environment) -> "Settings":
        """Build settings reading the dotenv file that belongs to `env` (a missing file is ignored)."""
        return cls(_env_file=ROOT_PATH / env.dotenv_filename(), env=env)  # pyright: ignore


# Global settings singleton
SETTINGS: Dict[Environment, Settings] = {}

def get_settings() -> Settings:
    """Retrieve the global settings singleton for the current environment.

    Settings are built lazily on first access for each environment, so the
    environment can be switched (see `hkreporter.environment.set_current_env`)
    before the first call.

    Example:
        >>> from hkreporter.environment import set_current_env
        >>> set_current_env('testing')
        >>> settings = get_settings()  # Uses .env.testing file
        >>> settings.date.fractional_seconds
        False
    """
    current_env = Environment.current()
    if (settings := SETTINGS.get(current_env, None)) is None:
        settings = SETTINGS[current_env] = Settings.for_environment(current_env)
    return settings

def clear_settings() -> None:
    """Forget every cached settings instance so the next access rebuilds from the environment."""
    SETTINGS.clear()
