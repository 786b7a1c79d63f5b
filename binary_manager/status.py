"""Local and remote version lookups for registered binaries."""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple

import requests

from .utils import extract_version, get_latest_release, log, normalize_tag

if TYPE_CHECKING:
    from .registry import BinaryEntry, Registry

PROBE_TIMEOUT = 10
RATE_LIMIT_STATUSES = (403, 429)

# Set after the first rate limit warning of a status run
_rate_limit_warned = False


class LocalStatus(NamedTuple):
    """Whether a binary is installed and the version it reports."""

    found: bool
    version: str | None = None


class RemoteStatus(NamedTuple):
    """The latest published version of a binary."""

    latest_version: str | None = None


class StatusRow(NamedTuple):
    """One line of the status table."""

    entry: BinaryEntry
    local: LocalStatus
    remote: RemoteStatus


def is_installed(bin_dir: Path, entry: BinaryEntry) -> bool:
    """Check whether the executable for ``entry`` exists in ``bin_dir``."""
    return (bin_dir / entry.exe).is_file()


def probe_local(bin_dir: Path, entry: BinaryEntry) -> LocalStatus:
    """Find the installed binary and ask it for its version."""
    if not is_installed(bin_dir, entry):
        return LocalStatus(found=False)

    path = bin_dir / entry.exe
    try:
        result = subprocess.run(
            [str(path), entry.version_flag],
            capture_output=True,
            text=True,
            errors="replace",
            timeout=PROBE_TIMEOUT,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        log(f"Could not run {path}: {e}", "debug", "⚠️")
        return LocalStatus(found=True)

    if result.returncode != 0:
        log(f"{path} {entry.version_flag} exited with {result.returncode}", "debug", "⚠️")
        return LocalStatus(found=True)

    version = extract_version(result.stdout) or extract_version(result.stderr)
    if version is None:
        log(f"No version found in output of {path}", "debug", "⚠️")
    return LocalStatus(found=True, version=version)


def resolve_remote(repository: str) -> RemoteStatus:
    """Look up the latest release tag of ``repository`` on GitHub."""
    global _rate_limit_warned  # noqa: PLW0603
    try:
        release = get_latest_release(repository)
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        if status in RATE_LIMIT_STATUSES and not _rate_limit_warned:
            _rate_limit_warned = True
            log(
                f"GitHub API rate limit hit while checking {repository} "
                "(unauthenticated requests are limited to 60 per hour)",
                "warning",
                "⏳",
            )
        else:
            log(f"Could not fetch latest release of {repository}: {e}", "debug", "⚠️")
        return RemoteStatus()
    except requests.RequestException as e:
        log(f"Could not fetch latest release of {repository}: {e}", "debug", "⚠️")
        return RemoteStatus()
    except ValueError as e:
        log(f"Malformed release response for {repository}: {e}", "debug", "⚠️")
        return RemoteStatus()

    tag = release.get("tag_name") if isinstance(release, dict) else None
    return RemoteStatus(latest_version=normalize_tag(tag if isinstance(tag, str) else None))


def collect_status(
    registry: Registry,
    bin_dir: Path,
    resolver: Callable[[str], RemoteStatus] = resolve_remote,
    prober: Callable[[Path, BinaryEntry], LocalStatus] = probe_local,
) -> list[StatusRow]:
    """Build one status row per registered binary, in registry order."""
    global _rate_limit_warned  # noqa: PLW0603
    _rate_limit_warned = False
    rows = []
    for entry in registry.list():
        local = prober(bin_dir, entry)
        remote = resolver(entry.repository)
        rows.append(StatusRow(entry, local, remote))
    return rows
