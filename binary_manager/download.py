"""Release asset selection and download."""

from __future__ import annotations

import re
from pathlib import Path

import requests

from .utils import REQUEST_TIMEOUT, log

PLATFORM_KEYWORDS = {
    "linux": ("linux",),
    "macos": ("darwin", "macos", "apple", "osx"),
}
ARCH_KEYWORDS = {
    "amd64": ("x86_64", "amd64", "x64", "linux64", "64bit"),
    "arm64": ("aarch64", "arm64"),
}
FOREIGN_ARCH_KEYWORDS = (
    "arm",
    "armv6",
    "armv7",
    "armhf",
    "i386",
    "i686",
    "386",
    "32bit",
    "32-bit",
    "linux32",
    "ppc64le",
    "s390x",
    "riscv64",
    "loong64",
    "mips",
    "mips64",
)
SKIPPED_SUFFIXES = (
    ".sha256",
    ".sha256sum",
    ".sha512",
    ".md5",
    ".sig",
    ".asc",
    ".pem",
    ".sbom",
    ".json",
    ".jsonl",
    ".txt",
    ".deb",
    ".rpm",
    ".apk",
    ".msi",
    ".pkg",
    ".dmg",
    ".b3",
)


def _contains(name: str, keyword: str, *, prefix_only: bool = False) -> bool:
    """Check for ``keyword`` in ``name`` not glued to other letters or digits."""
    pattern = rf"(?<![a-z0-9]){re.escape(keyword)}"
    if not prefix_only:
        pattern += r"(?![a-z0-9])"
    return re.search(pattern, name) is not None


def score_asset(name: str, platform: str, arch: str) -> int | None:
    """Score how well an asset fits the platform, ``None`` if it cannot be used."""
    lower = name.lower()
    if lower.endswith(SKIPPED_SUFFIXES) or "checksum" in lower:
        return None
    if not any(_contains(lower, kw, prefix_only=True) for kw in PLATFORM_KEYWORDS[platform]):
        return None

    foreign = [kw for other, kws in ARCH_KEYWORDS.items() if other != arch for kw in kws]
    foreign.extend(FOREIGN_ARCH_KEYWORDS)
    if any(_contains(lower, kw) for kw in foreign):
        return None

    score = 0
    if any(_contains(lower, kw) for kw in ARCH_KEYWORDS[arch]):
        score += 10
    elif "universal" in lower:
        score += 5
    if platform == "linux" and "musl" in lower:
        score += 3
    if "static" in lower:
        score += 2
    if "debug" in lower or "profile" in lower:
        score -= 5
    return score


def find_asset(assets: list[dict], platform: str, arch: str) -> dict | None:
    """Find the release asset that best matches the platform and architecture."""
    best: tuple[int, int] | None = None
    best_asset = None
    for asset in assets:
        score = score_asset(asset["name"], platform, arch)
        if score is None:
            continue
        key = (score, -len(asset["name"]))
        if best is None or key > best:
            best, best_asset = key, asset

    if best_asset is not None:
        log(f"Found matching asset: {best_asset['name']}", "debug", "✅")
    return best_asset


def download_file(url: str, destination: Path) -> Path:
    """Download a file from a URL to a destination path."""
    log(f"Downloading from {url}", "info", "📥")
    response = requests.get(url, stream=True, timeout=REQUEST_TIMEOUT)
    response.raise_for_status()

    with open(destination, "wb") as f:
        for chunk in response.iter_content(chunk_size=8192):
            f.write(chunk)

    return destination
