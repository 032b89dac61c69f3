"""Error handling with friendly messages.

None of these escape the public logging calls. They are raised internally and
reported on the console error channel at the logging boundary.
"""

from __future__ import annotations


class FlightLogError(Exception):
    """Base exception for all flightlog errors."""

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message}\nSuggestion: {self.suggestion}"
        return self.message


class ConfigError(FlightLogError):
    """Configuration error."""

    pass


class SinkUnavailableError(FlightLogError):
    """The shared log store could not be located."""

    def __init__(self, object_name: str) -> None:
        super().__init__(
            f"Log object '{object_name}' not found",
            "Call install_log_store() before logging",
        )
        self.object_name = object_name


class SerializationError(FlightLogError):
    """The log structure could not be rendered to JSON."""

    pass


class MissingCategoryError(FlightLogError):
    """No category could be determined for an entry."""

    def __init__(self) -> None:
        super().__init__("Log category is null, cannot log to UI!")
