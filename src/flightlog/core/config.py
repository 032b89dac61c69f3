"""Logger settings, resolved from layered sources.

A key is taken from the first source that defines it: command line
overrides, FLIGHTLOG_* environment variables, the user YAML file, the system
YAML file, then the built-in defaults.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from flightlog.core.errors import ConfigError
from flightlog.core.formatting import DEFAULT_PACKAGE_COLOR, DEFAULT_PACKAGE_NAME
from flightlog.core.levels import LevelSet

DEFAULT_OBJECT_NAME = "OpenFlightLogObject"
DEFAULT_MAX_MESSAGES = 200

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class LoggerSettings:
    """Resolved, immutable settings for a log store."""

    package_name: str = DEFAULT_PACKAGE_NAME
    package_color: str = DEFAULT_PACKAGE_COLOR
    object_name: str = DEFAULT_OBJECT_NAME
    color: bool = True
    # Soft cap on lines kept in the text surface mirror.
    max_messages: int = DEFAULT_MAX_MESSAGES
    # Write the whole structure as JSON to the console after each record.
    dump_state: bool = True
    # Off: the control matrix is stored but entries are recorded regardless.
    enforce_control_matrix: bool = False
    mirror_to_surface: bool = False
    control_matrix: dict[str, LevelSet] = field(default_factory=dict)


class ConfigResolver:
    """Look up `logging.*` settings across CLI, env, config files and defaults.

    Example:
        resolver = ConfigResolver(cli_args={"logging": {"color": False}})
        resolver.resolve("logging.color")   # (False, "cli")
        settings = resolver.resolve_logger_settings()
    """

    def __init__(
        self,
        cli_args: dict[str, Any] | None = None,
        user_config_path: Path | None = None,
        system_config_path: Path | None = None,
        defaults: dict[str, Any] | None = None,
    ) -> None:
        """Initialize config resolver.

        Args:
            cli_args: Nested overrides from the command line
            user_config_path: User YAML file (~/.config/flightlog/config.yaml)
            system_config_path: System YAML file (/etc/flightlog/config.yaml)
            defaults: Fallback values (built-in defaults if omitted)
        """
        self.cli_args = cli_args or {}
        self.user_config_path = user_config_path or Path.home() / ".config/flightlog/config.yaml"
        self.system_config_path = system_config_path or Path("/etc/flightlog/config.yaml")
        self.defaults = defaults or self._default_config()
        self._files: dict[Path, dict[str, Any]] = {}

    def resolve(self, key: str) -> tuple[Any, str]:
        """Return (value, source) for a dotted key from the first source that has it.

        Raises:
            ConfigError: If no source has the key, or a config file is unreadable
        """
        for source, value in self._lookups(key):
            if value is not None:
                return value, source
        raise ConfigError(f"Config key '{key}' not found in any source")

    def _lookups(self, key: str) -> Iterator[tuple[str, Any]]:
        # Lazy, so config files are only read when higher sources lack the key.
        yield "cli", _get_nested(self.cli_args, key)
        yield "env", os.environ.get(env_var_name(key))
        yield "user_config", _get_nested(self._file(self.user_config_path), key)
        yield "system_config", _get_nested(self._file(self.system_config_path), key)
        yield "default", _get_nested(self.defaults, key)

    def _file(self, path: Path) -> dict[str, Any]:
        if path not in self._files:
            self._files[path] = _load_yaml(path)
        return self._files[path]

    def resolve_logger_settings(self) -> LoggerSettings:
        """Resolve and validate every logging.* key into LoggerSettings.

        Raises:
            ConfigError: If any value is invalid.
        """
        return LoggerSettings(
            package_name=self._resolve_str("logging.package_name"),
            package_color=self._resolve_str("logging.package_color"),
            object_name=self._resolve_str("logging.object_name"),
            color=self._resolve_bool("logging.color"),
            max_messages=self._resolve_int("logging.max_messages", minimum=1),
            dump_state=self._resolve_bool("logging.dump_state"),
            enforce_control_matrix=self._resolve_bool("logging.enforce_control_matrix"),
            mirror_to_surface=self._resolve_bool("logging.mirror_to_surface"),
            control_matrix=self._resolve_control_matrix(),
        )

    def _resolve_str(self, key: str) -> str:
        value, _src = self.resolve(key)
        if not isinstance(value, str):
            raise ConfigError(f"Config key '{key}' must be a string, got {type(value).__name__}")
        if value.strip() == "":
            raise ConfigError(f"Config key '{key}' must not be empty")
        return value

    def _resolve_bool(self, key: str) -> bool:
        value, src = self.resolve(key)
        if isinstance(value, bool):
            return value
        # Environment values always arrive as strings.
        if isinstance(value, str):
            norm = value.strip().lower()
            if norm in _TRUE_VALUES:
                return True
            if norm in _FALSE_VALUES:
                return False
        raise ConfigError(f"Config key '{key}' must be a bool, got {value!r} (from {src})")

    def _resolve_int(self, key: str, minimum: int | None = None) -> int:
        value, src = self.resolve(key)
        if isinstance(value, str) and value.strip().isdigit():
            value = int(value.strip())
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"Config key '{key}' must be an int, got {value!r} (from {src})")
        if minimum is not None and value < minimum:
            raise ConfigError(f"Config key '{key}' must be >= {minimum}, got {value}")
        return value

    def _resolve_control_matrix(self) -> dict[str, LevelSet]:
        key = "logging.control_matrix"
        try:
            value, _src = self.resolve(key)
        except ConfigError:
            return {}

        if not isinstance(value, dict):
            raise ConfigError(f"Config key '{key}' must be an object")

        matrix: dict[str, LevelSet] = {}
        for category, names in value.items():
            if not isinstance(category, str) or not category:
                raise ConfigError(f"Config key '{key}' has an invalid category: {category!r}")
            if not isinstance(names, (list, str)):
                raise ConfigError(f"Config key '{key}.{category}' must be a list of level names")
            matrix[category] = LevelSet.from_names(names)
        return matrix

    @staticmethod
    def _default_config() -> dict[str, Any]:
        """Default configuration."""
        return {
            "logging": {
                "package_name": DEFAULT_PACKAGE_NAME,
                "package_color": DEFAULT_PACKAGE_COLOR,
                "object_name": DEFAULT_OBJECT_NAME,
                "color": True,
                "max_messages": DEFAULT_MAX_MESSAGES,
                "dump_state": True,
                "enforce_control_matrix": False,
                "mirror_to_surface": False,
                "control_matrix": {},
            },
        }


def env_var_name(key: str) -> str:
    """Environment variable for a dotted key.

    Example: logging.max_messages -> FLIGHTLOG_LOGGING_MAX_MESSAGES
    """
    return "FLIGHTLOG_" + key.upper().replace(".", "_")


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e
    return data if isinstance(data, dict) else {}


def _get_nested(data: dict[str, Any], key: str) -> Any | None:
    current: Any = data
    for part in key.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    return current
