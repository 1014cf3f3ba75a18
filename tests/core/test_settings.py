"""Tests for core.settings module.

Covers:
- CadenceSettings defaults
- Environment variable override (CADENCE_ prefix)
- Field validation
"""

import pydantic
import pytest

from cadence.core.settings import CadenceSettings


class TestCadenceSettingsDefaults:
    def test_default_timezone_is_local(self):
        assert CadenceSettings().timezone is None

    def test_default_poll_interval(self):
        assert CadenceSettings().poll_interval_seconds == 1.0

    def test_default_stop_timeout_waits_fully(self):
        assert CadenceSettings().stop_timeout_seconds is None

    def test_default_log_level(self):
        assert CadenceSettings().log_level == "INFO"

    def test_default_log_json_autodetects(self):
        assert CadenceSettings().log_json is None


class TestCadenceSettingsEnvOverride:
    def test_timezone_from_env(self, monkeypatch):
        monkeypatch.setenv("CADENCE_TIMEZONE", "Europe/Berlin")
        assert CadenceSettings().timezone == "Europe/Berlin"

    def test_poll_interval_from_env(self, monkeypatch):
        monkeypatch.setenv("CADENCE_POLL_INTERVAL_SECONDS", "0.25")
        assert CadenceSettings().poll_interval_seconds == 0.25

    def test_stop_timeout_from_env(self, monkeypatch):
        monkeypatch.setenv("CADENCE_STOP_TIMEOUT_SECONDS", "5")
        assert CadenceSettings().stop_timeout_seconds == 5.0

    def test_log_json_from_env(self, monkeypatch):
        monkeypatch.setenv("CADENCE_LOG_JSON", "true")
        assert CadenceSettings().log_json is True

    def test_unprefixed_variables_ignored(self, monkeypatch):
        monkeypatch.setenv("TIMEZONE", "Asia/Tokyo")
        assert CadenceSettings().timezone is None

    def test_dotenv_file(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("CADENCE_TIMEZONE=Asia/Tokyo\n")
        monkeypatch.chdir(tmp_path)
        assert CadenceSettings().timezone == "Asia/Tokyo"


class TestCadenceSettingsValidation:
    def test_log_level_is_uppercased(self):
        assert CadenceSettings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            CadenceSettings(log_level="chatty")

    @pytest.mark.parametrize("value", [0, -1.0])
    def test_poll_interval_must_be_positive(self, value):
        with pytest.raises(pydantic.ValidationError):
            CadenceSettings(poll_interval_seconds=value)

    def test_stop_timeout_must_be_positive(self):
        with pytest.raises(pydantic.ValidationError):
            CadenceSettings(stop_timeout_seconds=0)
