"""flightlog - Package entry point.

This module enables running the project with:

    python -m flightlog emit warning "dropped packet" --source Net
    python -m flightlog color PlayerSettings PlayerMetrics
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from rich.markup import escape

from flightlog.core.colors import choose_color
from flightlog.core.config import ConfigResolver
from flightlog.core.console import HostConsole
from flightlog.core.errors import ConfigError, FlightLogError
from flightlog.core.formatting import color_text
from flightlog.core.levels import LogLevel
from flightlog.core.logger import Loggable, log
from flightlog.core.proxy import ProxyResolver, Scene, install_log_store


class CliSource(Loggable):
    """Named source for lines logged from the command line."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="flightlog", description="Leveled, categorized logging")
    parser.add_argument("--config", type=Path, help="User config file (YAML)")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument(
        "--enforce",
        action="store_true",
        help="Drop entries whose level is disabled for their category",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    emit = sub.add_parser("emit", help="Log one or more messages")
    emit.add_argument("level", help="Info, Callback, Warning or Error")
    emit.add_argument("text", nargs="+", help="Message text (one entry per argument)")
    emit.add_argument("--source", help="Source name (omit for an untraceable call)")
    emit.add_argument("--category", help="Category (defaults to the source name)")
    emit.add_argument("--once", action="store_true", help="Skip a message equal to the previous one")

    color = sub.add_parser("color", help="Show the colour assigned to each source name")
    color.add_argument("names", nargs="+")

    return parser


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    logging: dict[str, Any] = {}
    if args.no_color:
        logging["color"] = False
    if args.enforce:
        logging["enforce_control_matrix"] = True
    return {"logging": logging} if logging else {}


def _cmd_emit(args: argparse.Namespace, resolver: ConfigResolver) -> int:
    settings = resolver.resolve_logger_settings()
    console = HostConsole(colors=settings.color)

    scene = Scene()
    install_log_store(scene=scene, settings=settings, console=console)
    proxy = ProxyResolver(scene=scene)

    level = LogLevel.from_name(args.level)
    caller = None
    if args.source is not None:
        caller = CliSource(name=args.source, log_category=args.category)

    for text in args.text:
        log(level, text, args.once, caller, resolver=proxy)
    return 0


def _cmd_color(args: argparse.Namespace, resolver: ConfigResolver) -> int:
    settings = resolver.resolve_logger_settings()
    console = HostConsole(colors=settings.color)
    for name in args.names:
        hex_color = choose_color(name)
        console.write_line(f"{color_text(escape(name), hex_color)} {hex_color}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    resolver = ConfigResolver(cli_args=_cli_overrides(args), user_config_path=args.config)

    try:
        if args.command == "emit":
            return _cmd_emit(args, resolver)
        return _cmd_color(args, resolver)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except FlightLogError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
