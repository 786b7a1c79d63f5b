"""binary-manager - keep a set of CLI binaries installed in XDG_BIN_HOME.

Checks the installed version of each managed binary against its latest GitHub
release and installs missing binaries with ``ubi`` or a built-in downloader.
"""

from __future__ import annotations

__version__ = "0.1.0"

from . import cli, config, download, extract, fetch, install, registry, status, table, utils
from .cli import main
from .config import BinaryManagerConfig, ConfigError
from .fetch import BuiltinFetcher, FetchError, UbiFetcher, select_fetcher
from .install import Installer, InstallOutcome, InstallSummary
from .registry import DEFAULT_BINARIES, BinaryEntry, Registry, UnknownBinaryError
from .status import (
    LocalStatus,
    RemoteStatus,
    StatusRow,
    collect_status,
    probe_local,
    resolve_remote,
)
from .table import build_status_table, print_status_table

__all__ = [
    "DEFAULT_BINARIES",
    "BinaryEntry",
    "BinaryManagerConfig",
    "BuiltinFetcher",
    "ConfigError",
    "FetchError",
    "InstallOutcome",
    "InstallSummary",
    "Installer",
    "LocalStatus",
    "Registry",
    "RemoteStatus",
    "StatusRow",
    "UbiFetcher",
    "UnknownBinaryError",
    "build_status_table",
    "cli",
    "collect_status",
    "config",
    "download",
    "extract",
    "fetch",
    "install",
    "main",
    "print_status_table",
    "probe_local",
    "registry",
    "resolve_remote",
    "select_fetcher",
    "status",
    "table",
    "utils",
]
