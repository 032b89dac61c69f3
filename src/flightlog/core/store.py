"""The shared log store (the log proxy).

One LogStore exists per scene. Every loggable in the scene finds it through
the scene lookup (see flightlog.core.proxy) and records into it.

Layout of the recorded structure:
    {
      "<category>": {
        "logLevelFlags": <mask>,          # only if a control matrix is set
        "Info":    [{"text": "...", "time": <ticks>}, ...],
        "Warning": [...],
      },
      ...
    }
"""

from __future__ import annotations

import json
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from rich.markup import escape

from flightlog.core.config import LoggerSettings
from flightlog.core.console import HostConsole, get_console
from flightlog.core.errors import MissingCategoryError, SerializationError
from flightlog.core.levels import LevelSet, LogLevel
from flightlog.core.registry import ControlMatrix

if TYPE_CHECKING:
    from flightlog.core.proxy import SceneObject

CONTROL_MATRIX_KEY = "logLevelFlags"


@dataclass(frozen=True)
class LogEntry:
    text: str
    created_at: int  # monotonic clock ticks (ns)

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "time": self.created_at}


class TextSurface(Protocol):
    """A visible text element the log can be mirrored to."""

    def set_text(self, text: str) -> None: ...


class BufferSurface:
    """In-memory text surface."""

    def __init__(self) -> None:
        self.text = ""

    def set_text(self, text: str) -> None:
        self.text = text


def to_minified_json(data: dict[str, Any]) -> str:
    """Serialize the store structure.

    Raises:
        SerializationError: If the structure is not JSON serializable
    """
    try:
        return json.dumps(data, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Could not serialize log dictionary to json! {e}") from e


class LogStore:
    """Shared sink: category -> level -> ordered entries.

    Failures are reported on the console error channel and never raised to
    the caller.
    """

    def __init__(
        self,
        settings: LoggerSettings | None = None,
        console: HostConsole | None = None,
        surface: TextSurface | None = None,
        clock: Callable[[], int] = time.monotonic_ns,
        serializer: Callable[[dict[str, Any]], str] = to_minified_json,
    ) -> None:
        self.settings = settings or LoggerSettings()
        self.console = console or get_console()
        self.surface = surface
        self.control_matrix = ControlMatrix()
        # Text surface contents, one raw message per line.
        self.log = ""
        self._clock = clock
        self._serializer = serializer
        self._categories: dict[str, dict[str, list[LogEntry]]] = {}
        self._last_message: str | None = None
        self.scene_object: SceneObject | None = None

    def start(self) -> None:
        """Claim the well-known object name and apply the configured control matrix."""
        if self.scene_object is not None:
            self.scene_object.name = self.settings.object_name
        for category, levels in self.settings.control_matrix.items():
            self.set_control_matrix(category, levels)

    def set_control_matrix(self, category: str, levels: LevelSet | LogLevel) -> None:
        """Replace the enabled-level mask for a category."""
        try:
            self.control_matrix.set(category, levels)
        except ValueError as e:
            self.console.write_error(escape(str(e)))
            return
        # Make sure the category shows up in the structure.
        self._categories.setdefault(category, {})

    def accepts(self, category: str, level: LogLevel) -> bool:
        """Whether an entry would be recorded under the current policy."""
        if not self.settings.enforce_control_matrix:
            return True
        return self.control_matrix.allows(category, level)

    def record(self, category: str | None, level: LogLevel, text: str) -> None:
        """Append an entry under (category, level) and publish the new state."""
        if category is None:
            self.console.write_error(escape(MissingCategoryError().message))
            return

        levels = self._categories.setdefault(category, {})
        levels.setdefault(level.name, []).append(LogEntry(text=text, created_at=self._clock()))
        self._last_message = text

        if self.settings.mirror_to_surface:
            self._mirror(text)

        if self.settings.dump_state:
            try:
                dumped = self.serialize()
            except SerializationError as e:
                self.console.write_error(escape(e.message))
                return
            self.console.write_line(escape(dumped))

    def is_latest(self, text: str) -> bool:
        """Whether text is the most recently recorded message."""
        return self._last_message == text

    def entries(self, category: str, level: LogLevel) -> list[LogEntry]:
        return list(self._categories.get(category, {}).get(level.name, []))

    def categories(self) -> list[str]:
        return list(self._categories)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for category, levels in self._categories.items():
            category_dict: dict[str, Any] = {}
            mask = self.control_matrix.get(category)
            if mask is not None:
                category_dict[CONTROL_MATRIX_KEY] = mask.mask
            for level_name, entries in levels.items():
                category_dict[level_name] = [entry.to_dict() for entry in entries]
            data[category] = category_dict
        return data

    def serialize(self) -> str:
        """Serialize the whole structure.

        Raises:
            SerializationError: If the serializer fails
        """
        try:
            return self._serializer(self.to_dict())
        except SerializationError:
            raise
        except Exception as e:
            raise SerializationError(f"Could not serialize log dictionary to json! {e}") from e

    def _mirror(self, text: str) -> None:
        self.log += text + "\n"

        # Keep only the newest max_messages lines.
        lines = self.log.split("\n")[:-1]
        if len(lines) > self.settings.max_messages:
            lines = lines[-self.settings.max_messages :]
            self.log = "\n".join(lines) + "\n"

        if self.surface is not None:
            self.surface.set_text(self.log)
