from datetime import datetime, timezone

import pytest

from hkreporter.environment import Environment, set_current_env
from hkreporter.settings import clear_settings


# ===========================================================================================
# ENV AND SETTINGS
# ===========================================================================================

ENV = set_current_env(Environment.TESTING)


# ===========================================================================================
# HOOKS
# ===========================================================================================

@pytest.fixture(autouse=True, scope="function")
def around_function():
    """Rebuild settings around each test so environment overrides made by one test never leak into the next."""
    clear_settings()

    yield # execution of the test function

    clear_settings()


# ===========================================================================================
# FIXTURES
# ===========================================================================================

@pytest.fixture
def fractional_seconds(monkeypatch: pytest.MonkeyPatch) -> None:
    """Enable fractional-second date formatting through the environment."""
    monkeypatch.setenv("DATE__FRACTIONAL_SECONDS", "true")
    clear_settings()


@pytest.fixture
def instant() -> datetime:
    """A fixed, whole-second instant: 2023-07-22T08:26:40Z."""
    return datetime(2023, 7, 22, 8, 26, 40, tzinfo=timezone.utc)
