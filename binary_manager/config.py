"""Configuration management for binary-manager."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .registry import BinaryEntry, Registry
from .utils import log

BIN_DIR_ENV = "XDG_BIN_HOME"
FETCHER_ENV = "BINARY_MANAGER_FETCHER"
FETCHER_MODES = ("auto", "ubi", "builtin")


class ConfigError(Exception):
    """Configuration that leaves nothing sensible to do."""


def default_config_file() -> Path:
    """Return the path of the optional tools file."""
    config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.expanduser("~/.config")
    return Path(config_home) / "binary-manager" / "tools.yaml"


@dataclass
class BinaryManagerConfig:
    """Configuration for binary-manager."""

    bin_dir: Path
    registry: Registry = field(default_factory=Registry)
    fetcher: str = "auto"

    def ensure_bin_dir(self) -> Path:
        """Create the installation directory if it does not exist yet."""
        if not self.bin_dir.exists():
            log(f"Creating directory {self.bin_dir}...", "info", "📁")
            try:
                self.bin_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                msg = f"Failed to create directory {self.bin_dir}: {e}"
                raise ConfigError(msg) from e
        elif not self.bin_dir.is_dir():
            msg = f"{self.bin_dir} exists and is not a directory"
            raise ConfigError(msg)
        return self.bin_dir

    @classmethod
    def load(
        cls,
        bin_dir: str | None = None,
        config_file: str | None = None,
        fetcher: str | None = None,
    ) -> BinaryManagerConfig:
        """Build the configuration from arguments, environment and tools file."""
        bin_dir = bin_dir or os.environ.get(BIN_DIR_ENV, "")
        if not bin_dir:
            msg = f"{BIN_DIR_ENV} environment variable is not set"
            raise ConfigError(msg)

        fetcher = fetcher or os.environ.get(FETCHER_ENV) or "auto"
        if fetcher not in FETCHER_MODES:
            msg = f"Unknown fetcher {fetcher!r}, expected one of: {', '.join(FETCHER_MODES)}"
            raise ConfigError(msg)

        if config_file:
            extra = load_tools_file(Path(config_file))
        elif default_config_file().is_file():
            extra = load_tools_file(default_config_file())
        else:
            extra = []

        try:
            registry = Registry.with_extra(extra)
        except ValueError as e:
            raise ConfigError(str(e)) from e

        return cls(
            bin_dir=Path(os.path.expanduser(bin_dir)),
            registry=registry,
            fetcher=fetcher,
        )


def load_tools_file(path: Path) -> list[BinaryEntry]:
    """Load extra registry entries from a YAML tools file."""
    log(f"Loading tools from {path}", "debug", "📄")
    try:
        with open(path) as file:
            data = yaml.safe_load(file) or {}
    except FileNotFoundError as e:
        msg = f"Configuration file not found: {path}"
        raise ConfigError(msg) from e
    except yaml.YAMLError as e:
        msg = f"Invalid YAML in configuration file {path}: {e}"
        raise ConfigError(msg) from e

    tools = data.get("tools", {}) if isinstance(data, dict) else None
    if not isinstance(tools, dict):
        msg = f"Expected a 'tools' mapping in {path}"
        raise ConfigError(msg)

    return [_entry_from_config(name, tool_config) for name, tool_config in tools.items()]


def _entry_from_config(name: str, tool_config: Any) -> BinaryEntry:
    """Build a registry entry from ``name: owner/repo`` or a mapping."""
    if isinstance(tool_config, str):
        tool_config = {"repo": tool_config}
    if not isinstance(tool_config, dict) or "repo" not in tool_config:
        msg = f"Tool {name} is missing required field 'repo'"
        raise ConfigError(msg)
    try:
        return BinaryEntry(
            name=str(name),
            repository=str(tool_config["repo"]),
            exe=str(tool_config.get("exe", "")),
            version_flag=str(tool_config.get("version_flag", "--version")),
        )
    except ValueError as e:
        raise ConfigError(str(e)) from e
