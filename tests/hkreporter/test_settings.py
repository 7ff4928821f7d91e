from __future__ import annotations

import pytest

from pydantic import ValidationError

from hkreporter.environment import Environment, set_current_env
from hkreporter.settings import Settings, clear_settings, get_settings


class TestEnvironment:
    def test_current_is_testing(self):
        assert Environment.current() is Environment.TESTING

    def test_current_is_case_insensitive(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("APP_ENV", "Staging")
        assert Environment.current() is Environment.STAGING

    def test_defaults_to_development(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("APP_ENV", raising=False)
        assert Environment.current() is Environment.DEVELOPMENT

    def test_set_current_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("APP_ENV", "testing")
        assert set_current_env("staging") is Environment.STAGING
        assert set_current_env(Environment.TESTING) is Environment.TESTING

    def test_set_current_env_rejects_unknown(self):
        with pytest.raises(ValueError, match="Invalid environment"):
            set_current_env("qa")

    def test_dotenv_filename(self):
        assert Environment.DEVELOPMENT.dotenv_filename() == ".env"
        assert Environment.TESTING.dotenv_filename() == ".env.testing"
        assert Environment.PRODUCTION.dotenv_filename() == ".env.production"


class TestSettings:
    def test_defaults(self):
        settings = get_settings()
        assert settings.env is Environment.TESTING
        assert settings.app.log_level == "INFO"
        assert settings.date.fractional_seconds is False

    def test_singleton(self):
        assert get_settings() is get_settings()

    def test_clear_settings(self):
        first = get_settings()
        clear_settings()
        assert get_settings() is not first

    def test_nested_environment_variables(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("APP__LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("DATE__FRACTIONAL_SECONDS", "true")
        clear_settings()
        settings = get_settings()
        assert settings.app.log_level == "DEBUG"
        assert settings.date.fractional_seconds is True

    def test_dotenv_file(self, tmp_path, monkeypatch: pytest.MonkeyPatch):
        env_file = tmp_path / ".env.testing"
        env_file.write_text("DATE__FRACTIONAL_SECONDS=true\n", encoding="utf-8")
        monkeypatch.setattr("hkreporter.settings.ROOT_PATH", tmp_path)
        settings = Settings.for_environment(Environment.TESTING)
        assert settings.date.fractional_seconds is True

    def test_log_level_is_validated(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("APP__LOG_LEVEL", "LOUD")
        clear_settings()
        with pytest.raises(ValidationError):
            get_settings()

    def test_per_environment_instances(self, monkeypatch: pytest.MonkeyPatch):
        testing = get_settings()
        monkeypatch.setenv("APP_ENV", "development")
        development = get_settings()
        assert development is not testing
        assert development.env is Environment.DEVELOPMENT
