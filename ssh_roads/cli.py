#!/usr/bin/env python3
"""
ssh-roads - pick a configured server and connect to it
"""

import argparse
import logging
import sys
from typing import List, Optional

from colorama import Fore, Style, just_fix_windows_console

from .config import ConfigError, load_env_file, load_servers
from .connectors.base import DispatchError
from .dispatcher import connect
from .menu import show_menu

logger = logging.getLogger(__name__)

PROMPT = "Enter server key: "


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ssh-roads",
        description="SSH connection manager",
    )
    parser.add_argument("route", nargs="?", help="Server key to connect to")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to the servers file (default: ~/.ssh-roads/servers.json or ./servers.json)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def read_input(prompt: str = PROMPT) -> str:
    """Read a route key from stdin; end of input yields an empty key"""
    try:
        return input(prompt).strip()
    except EOFError:
        return ""


def _error(message: str) -> None:
    print(f"{Fore.RED}{Style.BRIGHT}{message}{Style.RESET_ALL}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point, returns the process exit code"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    just_fix_windows_console()

    # Secrets referenced by placeholders may live in .env
    load_env_file()

    try:
        servers = load_servers(args.config)
    except ConfigError as e:
        _error(f"Error loading config: {e}")
        return 1

    show_menu(servers)

    if args.route is not None:
        route = args.route
    else:
        try:
            route = read_input()
        except KeyboardInterrupt:
            print(file=sys.stderr)
            _error("Aborted")
            return 1

    logger.debug(f"Selected route {route!r}")
    try:
        connect(servers, route)
    except DispatchError as e:
        print(
            f"{Fore.RED}{Style.BRIGHT}Error:{Style.RESET_ALL} {Fore.RED}{e}{Style.RESET_ALL}",
            file=sys.stderr,
        )
        return 1
    except KeyboardInterrupt:
        print(file=sys.stderr)
        _error("Aborted")
        return 1

    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
