"""Configuration for pytest fixtures used in binary-manager tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from binary_manager.fetch import FetchError
from binary_manager.registry import BinaryEntry, Registry


class RecordingFetcher:
    """Fetcher that writes a stub executable and remembers what it was asked for."""

    def __init__(self, fail: tuple[str, ...] = ()) -> None:
        self.fail = fail
        self.calls: list[tuple[str, Path]] = []

    def fetch(self, entry: BinaryEntry, bin_dir: Path) -> Path:
        self.calls.append((entry.name, bin_dir))
        if entry.name in self.fail:
            msg = f"could not download {entry.name}"
            raise FetchError(msg)
        dest = bin_dir / entry.exe
        dest.write_text("#!/bin/sh\necho 1.0.0\n")
        dest.chmod(0o755)
        return dest

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    """An empty installation directory."""
    path = tmp_path / "bin"
    path.mkdir()
    return path


@pytest.fixture
def make_executable(bin_dir: Path) -> Callable[..., Path]:
    """Create a shell script in the bin directory that prints ``output``."""

    def _make(name: str, output: str = "", exit_code: int = 0, stderr: str = "") -> Path:
        script = bin_dir / name
        lines = ["#!/bin/sh"]
        if output:
            lines.append(f"echo '{output}'")
        if stderr:
            lines.append(f"echo '{stderr}' >&2")
        lines.append(f"exit {exit_code}")
        script.write_text("\n".join(lines) + "\n")
        script.chmod(0o755)
        return script

    return _make


@pytest.fixture
def small_registry() -> Registry:
    """A registry with two entries."""
    return Registry(
        (
            BinaryEntry("alpha", "owner/alpha"),
            BinaryEntry("beta", "owner/beta"),
        ),
    )


@pytest.fixture
def recording_fetcher() -> RecordingFetcher:
    return RecordingFetcher()


@pytest.fixture
def release_assets() -> list[dict]:
    """Assets of a typical cross-platform Rust release."""
    names = [
        "tool-1.2.3-aarch64-apple-darwin.tar.gz",
        "tool-1.2.3-aarch64-unknown-linux-gnu.tar.gz",
        "tool-1.2.3-aarch64-unknown-linux-musl.tar.gz",
        "tool-1.2.3-armv7-unknown-linux-gnueabihf.tar.gz",
        "tool-1.2.3-x86_64-apple-darwin.tar.gz",
        "tool-1.2.3-x86_64-pc-windows-msvc.zip",
        "tool-1.2.3-x86_64-unknown-linux-gnu.tar.gz",
        "tool-1.2.3-x86_64-unknown-linux-musl.tar.gz",
        "tool-1.2.3-x86_64-unknown-linux-musl.tar.gz.sha256",
        "tool_1.2.3_amd64.deb",
        "checksums.txt",
    ]
    return [
        {"name": name, "browser_download_url": f"https://example.com/{name}"}
        for name in names
    ]


@pytest.fixture
def make_fetcher() -> type[RecordingFetcher]:
    """Factory for fetchers, e.g. ``make_fetcher(fail=("alpha",))``."""
    return RecordingFetcher
