"""Tests for per-source colours."""

import colorsys
import random
import re

from flightlog.core.colors import choose_color, color_to_html

HTML_COLOR = re.compile(r"^#[0-9A-F]{6}$")


def test_same_name_same_color() -> None:
    assert choose_color("PlayerSettings") == choose_color("PlayerSettings")


def test_absent_source_uses_seed_zero() -> None:
    hue = random.Random(0).random()
    expected = color_to_html(colorsys.hsv_to_rgb(hue, 1.0, 1.0))
    assert choose_color(None) == expected
    assert choose_color(None) == choose_color(None)


def test_hue_pipeline() -> None:
    hue = random.Random("WingFlapDetector").random()
    expected = color_to_html(colorsys.hsv_to_rgb(hue, 1.0, 1.0))
    assert choose_color("WingFlapDetector") == expected


def test_color_is_html_hex() -> None:
    for name in ("a", "PlayerMetrics", "Utility Methods", ""):
        assert HTML_COLOR.match(choose_color(name))


def test_distinct_names_mostly_get_distinct_colors() -> None:
    names = [f"Script{i}" for i in range(12)]
    colors = {choose_color(name) for name in names}
    assert len(colors) >= 10


def test_color_to_html_truncates_channels() -> None:
    assert color_to_html((1.0, 0.5, 0.0)) == "#FF7F00"
    assert color_to_html((0.0, 0.0, 0.0)) == "#000000"
