"""Public logging API.

Usage:
    from flightlog.core.levels import LogLevel
    from flightlog.core.logger import Loggable, log

    class PlayerSettings(Loggable):
        def start(self):
            self.log(LogLevel.Info, "Settings loaded")

    # Calls with no source are filed under "Utility Methods".
    log(LogLevel.Warning, "No world settings found")

Logging never raises. When no LogStore is installed in the scene, calls do
nothing at all.
"""

from __future__ import annotations

import traceback

from rich.markup import escape

from flightlog.core.console import get_console
from flightlog.core.formatting import colorize_function, format_message
from flightlog.core.levels import LogLevel
from flightlog.core.proxy import ProxyResolver
from flightlog.core.store import LogStore

# Category for calls made without a source.
UTILITY_CATEGORY = "Utility Methods"


class Loggable:
    """Base class for objects that log through the shared LogStore.

    Subclasses may set `log_category` to group their entries; it defaults to
    the object's name.
    """

    # The store this object logs to, found on first use.
    _log_proxy: LogStore | None = None
    name: str | None = None
    log_category: str | None = None

    def __init__(self, name: str | None = None, log_category: str | None = None) -> None:
        self.name = name if name is not None else type(self).__name__
        if log_category is not None:
            self.log_category = log_category
        self._log_proxy = None

    @property
    def category(self) -> str | None:
        return self.log_category or self.name

    def log(self, level: LogLevel, text: str, once: bool = False) -> None:
        """Log a message from this object. See flightlog.core.logger.log."""
        log(level, text, once, self)

    def function_tag(self, function: str) -> str:
        """Markup naming one of this object's functions, in the object's colour."""
        return colorize_function(self.name, function)


_RESOLVER: ProxyResolver | None = None


def get_resolver() -> ProxyResolver:
    """Get the process-wide proxy resolver."""
    global _RESOLVER
    if _RESOLVER is None:
        _RESOLVER = ProxyResolver()
    return _RESOLVER


def set_resolver(resolver: ProxyResolver | None) -> None:
    """Replace the process-wide proxy resolver (None restores the default)."""
    global _RESOLVER
    _RESOLVER = resolver


def _category_for(caller: Loggable | None) -> str | None:
    if caller is None:
        return UTILITY_CATEGORY
    return caller.category


def _write_console(store: LogStore, level: LogLevel, line: str) -> None:
    if level is LogLevel.Warning:
        store.console.write_warning(line)
    elif level is LogLevel.Error:
        store.console.write_error(line)
    else:
        store.console.write_line(line)


def log(
    level: LogLevel,
    text: str,
    once: bool = False,
    caller: Loggable | None = None,
    *,
    resolver: ProxyResolver | None = None,
) -> None:
    """Log a message to the console and the shared LogStore.

    Args:
        level: The level of the log
        text: The text to print to the console
        once: Whether or not to only log the message once and ignore future
            calls until the latest message is different
        caller: The object that is logging the text
        resolver: Proxy resolver to use (defaults to the process-wide one)
    """
    resolver = resolver or get_resolver()
    store: LogStore | None = None
    try:
        store, found = resolver.resolve(caller)
        if not found or store is None:
            return

        if once and store.is_latest(text):
            return

        category = _category_for(caller)
        if category is not None and not store.accepts(category, level):
            return

        settings = store.settings
        line = format_message(
            text,
            level,
            caller.name if caller is not None else None,
            package_name=settings.package_name,
            package_color=settings.package_color,
        )
        _write_console(store, level, line)
        store.record(category, level, text)
    except Exception as e:
        console = store.console if store is not None else get_console()
        console.write_error(
            escape(f"Logging failed: {type(e).__name__}: {e}\n{traceback.format_exc()}")
        )


def check_if_logged(
    text: str,
    caller: Loggable | None = None,
    *,
    resolver: ProxyResolver | None = None,
) -> bool:
    """Check whether text is the latest message in the caller's LogStore.

    Returns False when no LogStore can be found.
    """
    resolver = resolver or get_resolver()
    store, found = resolver.resolve(caller)
    if not found or store is None:
        return False
    return store.is_latest(text)


def info(text: str, caller: Loggable | None = None) -> None:
    log(LogLevel.Info, text, caller=caller)


def callback(text: str, caller: Loggable | None = None) -> None:
    log(LogLevel.Callback, text, caller=caller)


def warning(text: str, caller: Loggable | None = None) -> None:
    log(LogLevel.Warning, text, caller=caller)


def error(text: str, caller: Loggable | None = None) -> None:
    log(LogLevel.Error, text, caller=caller)
