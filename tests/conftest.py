"""Pytest configuration and fixtures."""

import io
import sys
from pathlib import Path

import pytest

# Add src to path (for 'flightlog.*' imports without an install)
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root / "src"))

from rich.console import Console  # noqa: E402

from flightlog.core.config import LoggerSettings  # noqa: E402
from flightlog.core.console import ConsoleBus, ConsoleRecord, HostConsole  # noqa: E402
from flightlog.core.logger import set_resolver  # noqa: E402
from flightlog.core.proxy import ProxyResolver, Scene, install_log_store  # noqa: E402


class RecordingConsole(HostConsole):
    """HostConsole writing to in-memory buffers and keeping every record."""

    def __init__(self) -> None:
        self.stdout_buffer = io.StringIO()
        self.stderr_buffer = io.StringIO()
        super().__init__(
            colors=False,
            stdout=Console(file=self.stdout_buffer, no_color=True, width=400),
            stderr=Console(file=self.stderr_buffer, no_color=True, width=400),
            bus=ConsoleBus(),
        )
        self.records: list[ConsoleRecord] = []
        self.bus.subscribe(self.records.append)

    def plain_lines(self) -> list[str]:
        return [r.plain for r in self.records]


@pytest.fixture
def scene():
    """Fresh scene, used by the process-wide resolver for the test's duration."""
    fresh = Scene()
    set_resolver(ProxyResolver(scene=fresh))
    yield fresh
    set_resolver(None)


@pytest.fixture
def console():
    return RecordingConsole()


@pytest.fixture
def settings():
    # State dumps are on by default; most tests only look at the formatted lines.
    return LoggerSettings(dump_state=False)


@pytest.fixture
def store(scene, console, settings):
    """LogStore installed in the test scene."""
    return install_log_store(scene=scene, settings=settings, console=console)
