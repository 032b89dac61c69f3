"""Per-category level masks (the control matrix)."""

from __future__ import annotations

from flightlog.core.levels import LevelSet, LogLevel


class ControlMatrix:
    """Mapping of category name to the levels enabled for it.

    Setting a category replaces its mask; masks are never merged. Categories
    without a mask have every level enabled.
    """

    def __init__(self) -> None:
        self._masks: dict[str, LevelSet] = {}

    def set(self, category: str, levels: LevelSet | LogLevel) -> None:
        """Replace the mask for a category.

        Args:
            category: Category name
            levels: Enabled levels; a single LogLevel enables only that level

        Raises:
            ValueError: If category is empty
        """
        if not category:
            raise ValueError("Category name must not be empty")
        if isinstance(levels, LogLevel):
            levels = LevelSet.of(levels)
        self._masks[category] = levels

    def get(self, category: str) -> LevelSet | None:
        """Mask for a category, or None if none was set."""
        return self._masks.get(category)

    def allows(self, category: str, level: LogLevel) -> bool:
        """Check whether a level is enabled for a category.

        Returns:
            True if the category has no mask or its mask contains level
        """
        mask = self._masks.get(category)
        if mask is None:
            return True
        return level in mask

    def categories(self) -> list[str]:
        return list(self._masks)

    def as_dict(self) -> dict[str, int]:
        """Category -> raw bitmask, as written under logLevelFlags."""
        return {category: mask.mask for category, mask in self._masks.items()}

    def clear(self) -> None:
        self._masks.clear()

    def __contains__(self, category: object) -> bool:
        return category in self._masks

    def __len__(self) -> int:
        return len(self._masks)
