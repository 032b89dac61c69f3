"""flightlog - leveled, categorized, colorized logging for scene scripts."""

__version__ = "0.1.0"
