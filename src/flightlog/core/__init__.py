"""flightlog core.

Leveled, categorized logging with a shared, scene-discovered log store.
"""

from flightlog.core.colors import choose_color
from flightlog.core.config import ConfigResolver, LoggerSettings
from flightlog.core.console import (
    ConsoleBus,
    ConsoleChannel,
    ConsoleRecord,
    HostConsole,
    get_console,
    get_console_bus,
    set_colors,
    set_console,
)
from flightlog.core.errors import (
    ConfigError,
    FlightLogError,
    MissingCategoryError,
    SerializationError,
    SinkUnavailableError,
)
from flightlog.core.formatting import colorize_function, colorize_identity, format_message
from flightlog.core.levels import LevelSet, LogLevel
from flightlog.core.logger import (
    UTILITY_CATEGORY,
    Loggable,
    check_if_logged,
    get_resolver,
    log,
    set_resolver,
)
from flightlog.core.proxy import ProxyResolver, Scene, SceneObject, get_scene, install_log_store
from flightlog.core.registry import ControlMatrix
from flightlog.core.store import BufferSurface, LogEntry, LogStore

__all__ = [
    # Levels
    "LogLevel",
    "LevelSet",
    # Formatting
    "choose_color",
    "colorize_identity",
    "colorize_function",
    "format_message",
    # Console
    "HostConsole",
    "get_console",
    "set_console",
    "set_colors",
    "ConsoleChannel",
    "ConsoleRecord",
    "ConsoleBus",
    "get_console_bus",
    # Config
    "ConfigResolver",
    "LoggerSettings",
    # Errors
    "FlightLogError",
    "ConfigError",
    "SinkUnavailableError",
    "SerializationError",
    "MissingCategoryError",
    # Store
    "ControlMatrix",
    "LogEntry",
    "LogStore",
    "BufferSurface",
    # Proxy
    "Scene",
    "SceneObject",
    "ProxyResolver",
    "get_scene",
    "install_log_store",
    # Logging
    "Loggable",
    "UTILITY_CATEGORY",
    "log",
    "check_if_logged",
    "get_resolver",
    "set_resolver",
]
