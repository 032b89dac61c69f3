"""Unit tests for core.config module."""

from pathlib import Path

import pytest

from flightlog.core.config import ConfigResolver, LoggerSettings, env_var_name
from flightlog.core.errors import ConfigError
from flightlog.core.levels import LevelSet, LogLevel


def _resolver(tmp_path: Path, cli_args=None, user_yaml: str | None = None, system_yaml: str | None = None):
    user_config = tmp_path / "user.yaml"
    system_config = tmp_path / "system.yaml"
    if user_yaml is not None:
        user_config.write_text(user_yaml)
    if system_yaml is not None:
        system_config.write_text(system_yaml)
    return ConfigResolver(
        cli_args=cli_args or {},
        user_config_path=user_config,
        system_config_path=system_config,
    )


class TestConfigResolver:
    """Tests for ConfigResolver."""

    def test_cli_priority(self, tmp_path):
        """Test that CLI args have highest priority."""
        resolver = _resolver(
            tmp_path,
            cli_args={"logging": {"color": False}},
            user_yaml="logging:\n  color: true\n",
        )

        value, source = resolver.resolve("logging.color")
        assert value is False
        assert source == "cli"

    def test_env_priority(self, tmp_path, monkeypatch):
        """Test that ENV overrides config files."""
        monkeypatch.setenv("FLIGHTLOG_LOGGING_PACKAGE_NAME", "Wings")
        resolver = _resolver(tmp_path, user_yaml="logging:\n  package_name: Feathers\n")

        value, source = resolver.resolve("logging.package_name")
        assert value == "Wings"
        assert source == "env"

    def test_user_config_priority(self, tmp_path):
        """Test that user config overrides system config."""
        resolver = _resolver(
            tmp_path,
            user_yaml="logging:\n  max_messages: 50\n",
            system_yaml="logging:\n  max_messages: 10\n",
        )

        value, source = resolver.resolve("logging.max_messages")
        assert value == 50
        assert source == "user_config"

    def test_system_config_used(self, tmp_path):
        resolver = _resolver(tmp_path, system_yaml="logging:\n  dump_state: false\n")
        assert resolver.resolve("logging.dump_state") == (False, "system_config")

    def test_defaults(self, tmp_path):
        """Test that defaults are used when nothing else provides value."""
        resolver = _resolver(tmp_path)
        assert resolver.resolve("logging.object_name") == ("OpenFlightLogObject", "default")

    def test_missing_key(self, tmp_path):
        resolver = _resolver(tmp_path)
        with pytest.raises(ConfigError):
            resolver.resolve("nonexistent.key")

    def test_invalid_yaml(self, tmp_path):
        resolver = _resolver(tmp_path, user_yaml="logging: [unclosed\n")
        with pytest.raises(ConfigError):
            resolver.resolve("logging.color")

    def test_env_var_name(self):
        assert env_var_name("logging.max_messages") == "FLIGHTLOG_LOGGING_MAX_MESSAGES"

    def test_cli_hides_broken_user_config(self, tmp_path):
        resolver = _resolver(
            tmp_path,
            cli_args={"logging": {"color": False}},
            user_yaml="logging: [unclosed\n",
        )
        assert resolver.resolve("logging.color") == (False, "cli")


class TestLoggerSettings:
    """Tests for resolving LoggerSettings."""

    def test_defaults_match_dataclass(self, tmp_path):
        assert _resolver(tmp_path).resolve_logger_settings() == LoggerSettings()

    def test_control_matrix_from_yaml(self, tmp_path):
        resolver = _resolver(
            tmp_path,
            user_yaml=(
                "logging:\n"
                "  control_matrix:\n"
                "    PlayerSettings: [Info, Warning, Error]\n"
                "    PlayerMetrics: [info, callback, error]\n"
            ),
        )
        settings = resolver.resolve_logger_settings()

        assert settings.control_matrix == {
            "PlayerSettings": LogLevel.Info | LogLevel.Warning | LogLevel.Error,
            "PlayerMetrics": LogLevel.Info | LogLevel.Callback | LogLevel.Error,
        }

    def test_control_matrix_single_name(self, tmp_path):
        resolver = _resolver(tmp_path, user_yaml="logging:\n  control_matrix:\n    Net: error\n")
        assert resolver.resolve_logger_settings().control_matrix == {
            "Net": LevelSet.of(LogLevel.Error)
        }

    def test_control_matrix_unknown_level(self, tmp_path):
        resolver = _resolver(tmp_path, user_yaml="logging:\n  control_matrix:\n    Net: [Debug]\n")
        with pytest.raises(ConfigError):
            resolver.resolve_logger_settings()

    def test_control_matrix_must_be_mapping(self, tmp_path):
        resolver = _resolver(tmp_path, user_yaml="logging:\n  control_matrix: [Info]\n")
        with pytest.raises(ConfigError):
            resolver.resolve_logger_settings()

    def test_env_strings_are_normalized(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FLIGHTLOG_LOGGING_COLOR", "off")
        monkeypatch.setenv("FLIGHTLOG_LOGGING_ENFORCE_CONTROL_MATRIX", "yes")
        monkeypatch.setenv("FLIGHTLOG_LOGGING_MAX_MESSAGES", "50")

        settings = _resolver(tmp_path).resolve_logger_settings()

        assert settings.color is False
        assert settings.enforce_control_matrix is True
        assert settings.max_messages == 50

    def test_invalid_bool(self, tmp_path, monkeypatch):
        monkeypatch.setenv("FLIGHTLOG_LOGGING_DUMP_STATE", "sometimes")
        with pytest.raises(ConfigError):
            _resolver(tmp_path).resolve_logger_settings()

    def test_max_messages_must_be_positive(self, tmp_path):
        resolver = _resolver(tmp_path, cli_args={"logging": {"max_messages": 0}})
        with pytest.raises(ConfigError):
            resolver.resolve_logger_settings()

    def test_empty_package_name(self, tmp_path):
        resolver = _resolver(tmp_path, cli_args={"logging": {"package_name": "  "}})
        with pytest.raises(ConfigError):
            resolver.resolve_logger_settings()
