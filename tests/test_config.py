"""Tests for configuration loading."""

from pathlib import Path

import pytest

from libraryconsole.config import Config, get_config, reset_config


class TestConfig:
    """Tests for Config."""

    def test_defaults(self, monkeypatch):
        for name in (
            "LIBRARY_API_URL",
            "LIBRARY_API_TIMEOUT",
            "LIBRARY_DEFAULT_LOAN_DAYS",
            "LIBRARY_FETCH_WORKERS",
            "LIBRARY_LOG_LEVEL",
        ):
            monkeypatch.delenv(name, raising=False)

        config = Config.from_env()

        assert config.api_url == "http://localhost:5000/api"
        assert config.api_timeout == 10
        assert config.default_loan_days == 14
        assert config.fetch_workers == 4
        assert config.log_level == "WARNING"
        assert config.validate() == []

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LIBRARY_API_URL", "https://library.example.org/api/")
        monkeypatch.setenv("LIBRARY_SESSION_PATH", str(tmp_path / "s.json"))
        monkeypatch.setenv("LIBRARY_DEFAULT_LOAN_DAYS", "21")
        monkeypatch.setenv("LIBRARY_LOG_LEVEL", "debug")

        config = Config.from_env()

        assert config.api_url == "https://library.example.org/api"
        assert config.session_path == Path(tmp_path / "s.json")
        assert config.default_loan_days == 21
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize(
        "field,value,message",
        [
            ("api_url", "ftp://x", "Invalid API URL"),
            ("default_loan_days", 0, "Default loan days"),
            ("default_loan_days", 366, "Default loan days"),
            ("fetch_workers", 0, "Fetch workers"),
            ("api_timeout", 0, "API timeout"),
        ],
    )
    def test_validate(self, field, value, message):
        config = Config.from_env()
        setattr(config, field, value)
        errors = config.validate()
        assert len(errors) == 1
        assert message in errors[0]


def test_get_config_cached():
    first = get_config()
    assert get_config() is first
    reset_config()
    assert get_config() is not first
