"""Console formatting for log lines.

Lines are built as rich console markup. Caller supplied text and source names
are escaped so they are always shown literally.

Layout:
    [OpenFlight] [Info] [12:34:56] [PlayerSettings] message text
"""

from __future__ import annotations

from datetime import datetime

from rich.errors import MarkupError
from rich.markup import escape
from rich.text import Text

from flightlog.core.colors import choose_color
from flightlog.core.levels import LogLevel

DEFAULT_PACKAGE_NAME = "OpenFlight"
DEFAULT_PACKAGE_COLOR = "orange1"

UNTRACEABLE_SOURCE = "Untraceable Static Function Call"

LEVEL_COLORS = {
    LogLevel.Info: "white",
    LogLevel.Callback: "cyan",
    LogLevel.Warning: "yellow",
    LogLevel.Error: "red",
}

TIMESTAMP_FORMAT = "%H:%M:%S"


def color_text(text: str, color: str) -> str:
    """Wrap already-escaped text in a colour tag."""
    return f"[{color}]{text}[/]"


def _bracket(markup: str) -> str:
    # markup always starts with a tag, so the outer "[" is never read as one.
    return f"[{markup}]"


def level_tag(level: LogLevel) -> str:
    return color_text(level.name, LEVEL_COLORS[level])


def timestamp_string(now: datetime | None = None) -> str:
    now = now or datetime.now()
    return color_text(now.strftime(TIMESTAMP_FORMAT), "white")


def identity_name(identity: str | None) -> str:
    if identity is None:
        return UNTRACEABLE_SOURCE
    return identity


def colorize_identity(identity: str | None) -> str:
    """Return the source name coloured with its own colour."""
    return color_text(escape(identity_name(identity)), choose_color(identity))


def colorize_function(identity: str | None, function: str) -> str:
    """Return a function name in its source's colour, italicised to mark it as a function."""
    colorized = color_text(escape(function), choose_color(identity))
    return f"[italic]{colorized}[/italic]"


def format_message(
    text: str,
    level: LogLevel,
    identity: str | None,
    include_prefix: bool = True,
    *,
    package_name: str = DEFAULT_PACKAGE_NAME,
    package_color: str = DEFAULT_PACKAGE_COLOR,
    now: datetime | None = None,
) -> str:
    """Format the text to be logged.

    Args:
        text: The text to format
        level: Level the line is logged at
        identity: Name of the logging source, or None
        include_prefix: Whether or not to include the package tag
        package_name: Package tag text
        package_color: Package tag colour
        now: Time to stamp the line with (defaults to the current time)

    Returns:
        Console markup for the line
    """
    parts = []
    if include_prefix:
        parts.append(_bracket(color_text(escape(package_name), package_color)))
    parts.append(_bracket(level_tag(level)))
    parts.append(_bracket(timestamp_string(now)))
    parts.append(_bracket(colorize_identity(identity)))
    parts.append(escape(text))
    return " ".join(parts)


def plain_text(markup: str) -> str:
    """Strip console markup, returning the text a reader would see.

    Malformed markup is returned unchanged.
    """
    try:
        return Text.from_markup(markup).plain
    except MarkupError:
        return markup
