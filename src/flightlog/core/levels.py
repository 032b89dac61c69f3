"""Log levels and level masks.

A single entry is always classified by exactly one LogLevel. Filters are
expressed as a LevelSet, which is a separate type so a mask can never be used
where a classification is expected.

Usage:
    from flightlog.core.levels import LevelSet, LogLevel

    mask = LogLevel.Info | LogLevel.Error     # LevelSet
    LogLevel.Warning in mask                  # False
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from flightlog.core.errors import ConfigError


class LogLevel(Enum):
    """The type of log to write."""

    Info = 1 << 0
    # Callback is info-level output about a callback being induced or set up.
    # Failing callbacks are logged as Warning or Error.
    Callback = 1 << 1
    Warning = 1 << 2
    Error = 1 << 3

    def __or__(self, other: LogLevel | LevelSet) -> LevelSet:
        return LevelSet.of(self) | other

    __ror__ = __or__

    @classmethod
    def from_name(cls, name: str) -> LogLevel:
        """Look up a level by name, ignoring case.

        Raises:
            ConfigError: If the name is not a level
        """
        norm = name.strip().lower()
        for level in cls:
            if level.name.lower() == norm:
                return level
        allowed = ", ".join(level.name for level in cls)
        raise ConfigError(f"Invalid log level: {name!r}. Allowed values: {allowed}")


_ALL_BITS = sum(level.value for level in LogLevel)


@dataclass(frozen=True)
class LevelSet:
    """Immutable set of enabled levels, stored as a bitmask."""

    mask: int = 0

    def __post_init__(self) -> None:
        if self.mask & ~_ALL_BITS:
            raise ValueError(f"Unknown level bits in mask: {self.mask:#x}")

    @classmethod
    def of(cls, *levels: LogLevel) -> LevelSet:
        """Build a mask enabling exactly the given levels."""
        mask = 0
        for level in levels:
            mask |= level.value
        return cls(mask)

    @classmethod
    def from_names(cls, names: Iterable[str] | str) -> LevelSet:
        """Build a mask from level names.

        Args:
            names: Level names (case-insensitive), or a single name

        Raises:
            ConfigError: If a name is not a level
        """
        if isinstance(names, str):
            names = [names]
        return cls.of(*(LogLevel.from_name(n) for n in names))

    @classmethod
    def all(cls) -> LevelSet:
        """Mask with every level enabled."""
        return cls(_ALL_BITS)

    @classmethod
    def none(cls) -> LevelSet:
        return cls(0)

    def __or__(self, other: LogLevel | LevelSet) -> LevelSet:
        if isinstance(other, LogLevel):
            return LevelSet(self.mask | other.value)
        if isinstance(other, LevelSet):
            return LevelSet(self.mask | other.mask)
        return NotImplemented

    __ror__ = __or__

    def __contains__(self, level: object) -> bool:
        # Only LogLevel members can be in a mask.
        if not isinstance(level, LogLevel):
            return False
        return bool(self.mask & level.value)

    def __iter__(self):
        return (level for level in LogLevel if level in self)

    def __bool__(self) -> bool:
        return self.mask != 0

    def names(self) -> list[str]:
        """Names of the enabled levels, in level order."""
        return [level.name for level in self]
