"""Utility functions for binary-manager."""

from __future__ import annotations

import logging
import os
import re
import sys
from typing import Literal

import requests
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__

# Initialize rich consoles
console = Console()
err_console = Console(stderr=True)

GITHUB_API = "https://api.github.com"
REQUEST_TIMEOUT = 30

_VERSION_RE = re.compile(r"\d+(?:\.\d+)+")
_TAG_PREFIX_RE = re.compile(r"^\D+")

_STYLES = {
    "debug": "dim",
    "info": "blue",
    "success": "green",
    "warning": "yellow",
    "error": "bold red",
}

_verbose = False


def setup_logging(verbose: bool = False) -> None:  # noqa: FBT001, FBT002
    """Configure logging level based on verbosity."""
    global _verbose  # noqa: PLW0603
    _verbose = verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def log(
    message: str,
    level: Literal["debug", "info", "success", "warning", "error"] = "info",
    emoji: str = "",
) -> None:
    """Print a styled message; errors go to stderr, debug only when verbose."""
    if level == "debug" and not _verbose:
        return
    style = _STYLES[level]
    prefix = f"{emoji} " if emoji else ""
    target = err_console if level == "error" else console
    target.print(f"{prefix}[{style}]{escape(message)}[/{style}]")


def extract_version(output: str) -> str | None:
    """Return the first dotted run of digits in ``output``."""
    match = _VERSION_RE.search(output)
    return match.group(0) if match else None


def normalize_tag(tag: str | None) -> str | None:
    """Strip a leading non-numeric prefix (``v``, ``release-``) from a tag."""
    if tag is None:
        return None
    return _TAG_PREFIX_RE.sub("", tag.strip(), count=1) or None


def get_latest_release(repo: str) -> dict:
    """Get the latest release information from GitHub."""
    url = f"{GITHUB_API}/repos/{repo}/releases/latest"
    log(f"Fetching latest release from {url}", "debug", "🔍")
    response = requests.get(
        url,
        headers={
            "Accept": "application/vnd.github+json",
            "User-Agent": f"binary-manager/{__version__}",
        },
        timeout=REQUEST_TIMEOUT,
    )
    response.raise_for_status()
    return response.json()


def current_platform() -> tuple[str, str]:
    """Detect the current platform and architecture."""
    platform = "linux"
    if sys.platform == "darwin":
        platform = "macos"

    arch = "amd64"
    machine = os.uname().machine.lower()
    if machine in ["arm64", "aarch64"]:
        arch = "arm64"

    return platform, arch
