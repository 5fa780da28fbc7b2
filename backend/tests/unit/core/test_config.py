from __future__ import annotations

import pytest
from liftlog.core import config as config_module
from liftlog.core.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    env_bool,
    get_config,
)


class TestConfigSelection:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("production", ProductionConfig),
            ("testing", TestingConfig),
            (" Development ", DevelopmentConfig),
            ("unknown", DevelopmentConfig),
        ],
    )
    def test_get_config_uses_app_env(self, monkeypatch, value, expected):
        monkeypatch.setenv(config_module.ENV_VAR, value)
        assert get_config() is expected

    def test_get_config_defaults_to_development(self, monkeypatch):
        monkeypatch.delenv(config_module.ENV_VAR, raising=False)
        assert get_config() is DevelopmentConfig

    @pytest.mark.parametrize("raw,expected", [("1", True), ("Yes", True), ("off", False)])
    def test_env_bool(self, monkeypatch, raw, expected):
        monkeypatch.setenv("LIFTLOG_FLAG", raw)
        assert env_bool("LIFTLOG_FLAG") is expected

    def test_env_bool_default(self, monkeypatch):
        monkeypatch.delenv("LIFTLOG_FLAG", raising=False)
        assert env_bool("LIFTLOG_FLAG", True) is True

    def test_workout_defaults(self):
        assert TestingConfig.DEFAULT_TIMEZONE
        assert TestingConfig.WORKOUT_COPY_SUFFIX


class TestAppFactory:
    def test_app_is_configured_for_tests(self, app):
        assert app.config["TESTING"] is True
        assert app.config["SQLALCHEMY_DATABASE_URI"] == "sqlite:///:memory:"
        assert "exercises" in app.cli.commands
