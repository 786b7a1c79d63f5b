"""Fetch-and-extract helpers that put a release binary into the bin directory."""

from __future__ import annotations

import os
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

import requests

from .download import download_file, find_asset
from .extract import ExtractionError, extract_binary
from .utils import current_platform, get_latest_release, log

if TYPE_CHECKING:
    from .registry import BinaryEntry


class FetchError(RuntimeError):
    """Installing a binary failed."""


class Fetcher(Protocol):
    """Something that can install a binary from its GitHub releases."""

    def fetch(self, entry: BinaryEntry, bin_dir: Path) -> Path:
        """Install ``entry`` into ``bin_dir`` and return the executable path."""
        ...


class UbiFetcher:
    """Delegate to the ``ubi`` command line tool."""

    def __init__(self, executable: str = "ubi") -> None:
        self.executable = executable

    def command(self, entry: BinaryEntry, bin_dir: Path) -> list[str]:
        return [
            self.executable,
            "--project",
            entry.repository,
            "--in",
            str(bin_dir),
            "--exe",
            entry.exe,
        ]

    def fetch(self, entry: BinaryEntry, bin_dir: Path) -> Path:
        cmd = self.command(entry, bin_dir)
        log(f"Running {' '.join(cmd)}", "debug", "🔧")
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except OSError as e:
            msg = f"Could not run {self.executable}: {e}"
            raise FetchError(msg) from e
        if result.returncode != 0:
            detail = (result.stderr or result.stdout).strip()
            msg = f"ubi exited with status {result.returncode}"
            if detail:
                msg += f": {detail}"
            raise FetchError(msg)
        return bin_dir / entry.exe


def install_executable(data: bytes, dest_path: Path) -> None:
    """Write an executable next to ``dest_path`` and move it into place.

    A failed write leaves no partial file behind at ``dest_path``.
    """
    fd, tmp_name = tempfile.mkstemp(prefix=f".{dest_path.name}.", dir=dest_path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.chmod(tmp_name, 0o755)
        os.replace(tmp_name, dest_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class BuiltinFetcher:
    """Download the release asset for this machine and extract the binary."""

    def __init__(self, platform: str | None = None, arch: str | None = None) -> None:
        detected_platform, detected_arch = current_platform()
        self.platform = platform or detected_platform
        self.arch = arch or detected_arch

    def fetch(self, entry: BinaryEntry, bin_dir: Path) -> Path:
        try:
            release = get_latest_release(entry.repository)
        except (requests.RequestException, ValueError) as e:
            msg = f"Could not fetch latest release of {entry.repository}: {e}"
            raise FetchError(msg) from e

        asset = find_asset(release.get("assets", []), self.platform, self.arch)
        if asset is None:
            msg = (
                f"No release asset of {entry.repository} "
                f"{release.get('tag_name', '')} matches {self.platform}/{self.arch}"
            )
            raise FetchError(msg)

        with tempfile.TemporaryDirectory() as tmp_dir:
            archive = Path(tmp_dir) / asset["name"]
            try:
                download_file(asset["browser_download_url"], archive)
            except (requests.RequestException, OSError) as e:
                msg = f"Failed to download {asset['browser_download_url']}: {e}"
                raise FetchError(msg) from e
            try:
                data = extract_binary(asset["name"], archive.read_bytes(), entry.exe)
            except ExtractionError as e:
                msg = f"Could not extract {entry.exe} from {asset['name']}: {e}"
                raise FetchError(msg) from e

        dest_path = bin_dir / entry.exe
        try:
            install_executable(data, dest_path)
        except OSError as e:
            msg = f"Could not write {dest_path}: {e}"
            raise FetchError(msg) from e
        log(f"Copied binary to {dest_path}", "debug", "✅")
        return dest_path


def select_fetcher(mode: str, bin_dir: Path) -> Fetcher:
    """Pick the fetcher for ``mode`` (``auto``, ``ubi`` or ``builtin``)."""
    if mode == "builtin":
        return BuiltinFetcher()

    local_ubi = bin_dir / "ubi"
    ubi = str(local_ubi) if local_ubi.is_file() else shutil.which("ubi")
    if ubi:
        return UbiFetcher(ubi)
    if mode == "ubi":
        msg = "ubi was requested but is not installed; run 'get ubi' with --fetcher builtin first"
        raise FetchError(msg)
    log("ubi not found, using the built-in downloader", "debug", "ℹ️")
    return BuiltinFetcher()
