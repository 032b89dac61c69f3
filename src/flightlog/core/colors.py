"""Deterministic per-source colours.

The colour for a source is derived from its name only, so a given script keeps
its colour no matter which order sources start logging in.
"""

from __future__ import annotations

import colorsys
import random

# Fixed saturation/brightness; only the hue varies per source.
SATURATION = 1.0
BRIGHTNESS = 1.0


def choose_color(identity: str | None) -> str:
    """Choose a colour based on the name of the logging source.

    Args:
        identity: Source name, or None for calls with no traceable source

    Returns:
        HTML colour string, e.g. "#FF7A00"
    """
    # str seeds are hashed from the string bytes, not hash(), so this does not
    # depend on PYTHONHASHSEED.
    rng = random.Random(0 if identity is None else identity)
    hue = rng.random()
    return color_to_html(colorsys.hsv_to_rgb(hue, SATURATION, BRIGHTNESS))


def color_to_html(rgb: tuple[float, float, float]) -> str:
    """Convert an RGB triple in [0, 1] to an upper-case HTML colour."""
    r, g, b = (int(c * 255) for c in rgb)
    return f"#{r:02X}{g:02X}{b:02X}"
