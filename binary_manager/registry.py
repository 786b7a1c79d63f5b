"""The table of managed binaries."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

_REPO_RE = re.compile(r"^[\w.-]+/[\w.-]+$")


class UnknownBinaryError(KeyError):
    """A binary name that is not in the registry."""

    def __init__(self, name: str) -> None:
        """Initialize the UnknownBinaryError."""
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        """Return a human readable message."""
        return f"Binary '{self.name}' not found in registry"


@dataclass(frozen=True)
class BinaryEntry:
    """A managed binary and the GitHub repository it is released from."""

    name: str
    repository: str
    exe: str = ""
    version_flag: str = "--version"

    def __post_init__(self) -> None:
        """Validate the repository and default ``exe`` to the name."""
        if not _REPO_RE.match(self.repository):
            msg = f"Invalid repository for {self.name}: {self.repository!r} (expected 'owner/repo')"
            raise ValueError(msg)
        if not self.exe:
            object.__setattr__(self, "exe", self.name)


DEFAULT_BINARIES: tuple[BinaryEntry, ...] = (
    BinaryEntry("nu", "nushell/nushell"),
    BinaryEntry("uv", "astral-sh/uv"),
    BinaryEntry("zoxide", "ajeetdsouza/zoxide"),
    BinaryEntry("bun", "oven-sh/bun"),
    BinaryEntry("jj", "jj-vcs/jj"),
    BinaryEntry("fzf", "junegunn/fzf"),
    BinaryEntry("ubi", "houseabsolute/ubi"),
    BinaryEntry("gh", "cli/cli"),
    BinaryEntry("yazi", "sxyazi/yazi"),
    BinaryEntry("micro", "zyedidia/micro"),
    BinaryEntry("lazygit", "jesseduffield/lazygit"),
)


@dataclass(frozen=True)
class Registry:
    """Ordered, read-only mapping of binary names to entries."""

    entries: tuple[BinaryEntry, ...] = DEFAULT_BINARIES
    _by_name: dict[str, BinaryEntry] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Index the entries by name, rejecting duplicates."""
        by_name: dict[str, BinaryEntry] = {}
        for entry in self.entries:
            if entry.name in by_name:
                msg = f"Duplicate binary name in registry: {entry.name}"
                raise ValueError(msg)
            by_name[entry.name] = entry
        object.__setattr__(self, "_by_name", by_name)

    @classmethod
    def with_extra(cls, extra: Iterable[BinaryEntry]) -> Registry:
        """Return the default registry followed by ``extra`` entries."""
        return cls((*DEFAULT_BINARIES, *extra))

    def list(self) -> list[BinaryEntry]:
        """Return all entries in registry order."""
        return list(self.entries)

    def names(self) -> list[str]:
        """Return all binary names in registry order."""
        return [entry.name for entry in self.entries]

    def lookup(self, name: str) -> BinaryEntry:
        """Return the entry called ``name``."""
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownBinaryError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self.entries)
