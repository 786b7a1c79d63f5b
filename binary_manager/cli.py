"""Command-line interface for binary-manager."""

from __future__ import annotations

import argparse
import sys
from typing import Any

from . import __version__
from .config import FETCHER_MODES, BinaryManagerConfig, ConfigError
from .fetch import FetchError, select_fetcher
from .install import Installer
from .registry import UnknownBinaryError
from .status import collect_status
from .table import print_status_table
from .utils import console, err_console, log, setup_logging


def check(_args: Any, config: BinaryManagerConfig) -> int:
    """Print the status table."""
    config.ensure_bin_dir()
    rows = collect_status(config.registry, config.bin_dir)
    print_status_table(rows)
    return 0


def _installer(config: BinaryManagerConfig) -> Installer:
    fetcher = select_fetcher(config.fetcher, config.bin_dir)
    return Installer(config.registry, config.bin_dir, fetcher, config.ensure_bin_dir)


def get(args: argparse.Namespace, config: BinaryManagerConfig) -> int:
    """Install a single binary."""
    config.registry.lookup(args.bin_name)
    outcome = _installer(config).install_one(args.bin_name)
    return 0 if outcome.result == "installed" else 1


def get_missing(_args: Any, config: BinaryManagerConfig) -> int:
    """Install every binary that is not present yet."""
    summary = _installer(config).install_missing()
    return 0 if summary.ok else 1


def list_binaries(_args: Any, config: BinaryManagerConfig) -> int:
    """List registered binaries."""
    console.print("🔧 [blue]Managed binaries:[/blue]")
    for entry in config.registry.list():
        console.print(f"  [green]{entry.name}[/green] (from {entry.repository})")
    return 0


def version(_args: Any, _config: BinaryManagerConfig | None) -> int:
    """Print version information."""
    console.print(f"[yellow]binary-manager[/] [bold]v{__version__}[/]")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="binary-manager",
        description="Manages binary installations in XDG_BIN_HOME",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--bin-dir",
        type=str,
        help="Installation directory (defaults to $XDG_BIN_HOME)",
    )
    parser.add_argument(
        "--config-file",
        type=str,
        help="YAML file with extra binaries to manage",
    )
    parser.add_argument(
        "--fetcher",
        choices=FETCHER_MODES,
        help="How to download binaries (defaults to $BINARY_MANAGER_FETCHER or auto)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    check_parser = subparsers.add_parser(
        "check",
        help="Checks availability of binaries in XDG_BIN_HOME",
    )
    check_parser.set_defaults(func=check)

    get_parser = subparsers.add_parser("get", help="Downloads a specified binary")
    get_parser.add_argument("bin_name", help="The name of the binary to download")
    get_parser.set_defaults(func=get)

    missing_parser = subparsers.add_parser(
        "get-missing",
        help="Downloads all missing binaries",
    )
    missing_parser.set_defaults(func=get_missing)

    list_parser = subparsers.add_parser("list", help="List managed binaries")
    list_parser.set_defaults(func=list_binaries)

    version_parser = subparsers.add_parser("version", help="Print version information")
    version_parser.set_defaults(func=version, needs_config=False)

    return parser


def run(argv: list[str] | None = None) -> int:
    """Parse arguments, execute the command and return the exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return 2

    if not getattr(args, "needs_config", True):
        return args.func(args, None)

    try:
        config = BinaryManagerConfig.load(
            bin_dir=args.bin_dir,
            config_file=args.config_file,
            fetcher=args.fetcher,
        )
        return args.func(args, config)
    except (ConfigError, UnknownBinaryError, FetchError) as e:
        log(f"Error: {e}", "error", "❌")
        return 1
    except Exception as e:
        log(f"Error: {e!s}", "error", "❌")
        if args.verbose:
            err_console.print_exception()
        return 1


def main() -> None:
    """Main function to parse arguments and execute commands."""
    sys.exit(run())


if __name__ == "__main__":
    main()
