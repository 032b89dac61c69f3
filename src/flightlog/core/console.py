"""Host console output.

The console has three channels, mirroring a game engine's debug console:
plain lines, warnings and errors. Lines are console markup (see
flightlog.core.formatting) and are rendered with rich.

Every write is also published as a ConsoleRecord on a ConsoleBus, so UIs and
tests can observe output without scraping stdout.

Usage:
    from flightlog.core.console import get_console

    console = get_console()
    console.write_line("[cyan]hello[/]")
    console.write_error("something broke")
"""

from __future__ import annotations

import contextlib
import sys
import traceback
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from rich.console import Console
from rich.errors import MarkupError
from rich.text import Text

from flightlog.core.formatting import plain_text


class ConsoleChannel(Enum):
    """Host console output channels."""

    LINE = "line"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class ConsoleRecord:
    channel: ConsoleChannel
    markup: str
    plain: str


Subscriber = Callable[[ConsoleRecord], None]


class ConsoleBus:
    """Delivers console records to subscribers.

    A subscriber registered with a channel only sees that channel; without one
    it sees everything. Subscriber exceptions are suppressed.
    """

    def __init__(self) -> None:
        self._subscribers: list[tuple[ConsoleChannel | None, Subscriber]] = []

    def subscribe(self, cb: Subscriber, channel: ConsoleChannel | None = None) -> None:
        self._subscribers.append((channel, cb))

    def unsubscribe(self, cb: Subscriber, channel: ConsoleChannel | None = None) -> None:
        with contextlib.suppress(ValueError):
            self._subscribers.remove((channel, cb))

    def publish(self, record: ConsoleRecord) -> None:
        for channel, cb in list(self._subscribers):
            if channel is not None and channel is not record.channel:
                continue
            try:
                cb(record)
            except Exception:
                # Not through the host console: that would publish again.
                with contextlib.suppress(Exception):
                    sys.stderr.write(
                        "Console subscriber raised; suppressed.\n" + traceback.format_exc()
                    )

    def clear(self) -> None:
        self._subscribers.clear()


_BUS: ConsoleBus | None = None


def get_console_bus() -> ConsoleBus:
    """Get the process-wide console bus."""
    global _BUS
    if _BUS is None:
        _BUS = ConsoleBus()
    return _BUS


class HostConsole:
    """Console sink with line/warning/error channels.

    Lines go to stdout, warnings and errors to stderr. Writes never raise.
    """

    def __init__(
        self,
        colors: bool = True,
        stdout: Console | None = None,
        stderr: Console | None = None,
        bus: ConsoleBus | None = None,
    ) -> None:
        """Initialize console.

        Args:
            colors: Whether to render colours
            stdout: Console for plain lines (defaults to stdout)
            stderr: Console for warnings and errors (defaults to stderr)
            bus: Bus to publish records on (defaults to the process-wide bus)
        """
        self._stdout = stdout or Console(highlight=False)
        self._stderr = stderr or Console(stderr=True, highlight=False)
        self._bus = bus
        self.set_colors(colors)

    @property
    def bus(self) -> ConsoleBus:
        return self._bus if self._bus is not None else get_console_bus()

    def set_colors(self, enabled: bool) -> None:
        self.colors = enabled
        self._stdout.no_color = not enabled
        self._stderr.no_color = not enabled

    def write_line(self, text: str) -> None:
        self._write(ConsoleChannel.LINE, text)

    def write_warning(self, text: str) -> None:
        self._write(ConsoleChannel.WARNING, text)

    def write_error(self, text: str) -> None:
        self._write(ConsoleChannel.ERROR, text)

    def _write(self, channel: ConsoleChannel, markup: str) -> None:
        target = self._stdout if channel is ConsoleChannel.LINE else self._stderr
        try:
            renderable = Text.from_markup(markup)
        except MarkupError:
            renderable = Text(markup)

        # Output failures are dropped; logging must not take the caller down.
        with contextlib.suppress(Exception):
            target.print(renderable, soft_wrap=True)

        self.bus.publish(ConsoleRecord(channel=channel, markup=markup, plain=plain_text(markup)))


_CONSOLE: HostConsole | None = None


def get_console() -> HostConsole:
    """Get the process-wide host console."""
    global _CONSOLE
    if _CONSOLE is None:
        _CONSOLE = HostConsole()
    return _CONSOLE


def set_console(console: HostConsole | None) -> None:
    """Replace the process-wide host console (None restores the default)."""
    global _CONSOLE
    _CONSOLE = console


def set_colors(enabled: bool) -> None:
    """Enable or disable colored output on the process-wide console.

    The console is changed in place, so stores already holding it follow.
    """
    get_console().set_colors(enabled)
