import os

from enum import Enum
from typing import Self


OS_ENV_KEY = "APP_ENV" # Selects which .env file settings are read from

class Environment(Enum):
    """Deployment environment hkreporter settings are loaded for."""
    PRODUCTION  = "production"
    STAGING     = "staging"
    DEVELOPMENT = "development"
    TESTING     = "testing"

    @classmethod
    def current(cls) -> Self:
        """The environment named by APP_ENV, development when unset."""
        return cls.parse(os.environ.get(OS_ENV_KEY, cls.DEVELOPMENT.value))

    @classmethod
    def parse(cls, name: str) -> Self:
        try:
            return cls(name.lower())
        except ValueError as exc:
            raise ValueError(f"Invalid environment: {name}. Must be one of {[member.value for member in cls]}.") from exc

    def dotenv_filename(self) -> str:
        """The .env file holding overrides for this environment."""
        if self is Environment.DEVELOPMENT:
            return '.env'
        return f'.env.{self.value}'


def set_current_env(env: str | Environment) -> Environment:
    """Point APP_ENV at `env` and return the environment now in effect."""
    environment = env if isinstance(env, Environment) else Environment.parse(env)
    os.environ[OS_ENV_KEY] = environment.value
    return Environment.current()
