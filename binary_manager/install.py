"""Install one or all missing binaries."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Literal, NamedTuple

from .fetch import FetchError
from .status import is_installed
from .utils import console, log

if TYPE_CHECKING:
    from .fetch import Fetcher
    from .registry import BinaryEntry, Registry


class InstallOutcome(NamedTuple):
    """What happened to one binary."""

    entry: BinaryEntry
    result: Literal["installed", "skipped", "failed"]
    error: str | None = None


@dataclass
class InstallSummary:
    """Outcomes of a batch install, in registry order."""

    outcomes: list[InstallOutcome] = field(default_factory=list)

    def _names(self, result: str) -> list[str]:
        return [o.entry.name for o in self.outcomes if o.result == result]

    @property
    def installed(self) -> list[str]:
        return self._names("installed")

    @property
    def skipped(self) -> list[str]:
        return self._names("skipped")

    @property
    def failed(self) -> list[str]:
        return self._names("failed")

    @property
    def ok(self) -> bool:
        """True when no install failed."""
        return not self.failed


class Installer:
    """Installs registered binaries into the bin directory with a fetcher."""

    def __init__(
        self,
        registry: Registry,
        bin_dir: Path,
        fetcher: Fetcher,
        ensure_dir: Callable[[], object] | None = None,
    ) -> None:
        self.registry = registry
        self.bin_dir = bin_dir
        self.fetcher = fetcher
        self._ensure_dir = ensure_dir or (lambda: bin_dir.mkdir(parents=True, exist_ok=True))

    def install_one(self, name: str) -> InstallOutcome:
        """Install the binary called ``name``.

        Raises ``UnknownBinaryError`` before touching the filesystem when the
        name is not registered. Fetch failures are reported and returned as a
        failed outcome.
        """
        entry = self.registry.lookup(name)
        self._ensure_dir()
        return self._install(entry)

    def _install(self, entry: BinaryEntry) -> InstallOutcome:
        log(f"Downloading {entry.name} from {entry.repository}...", "info", "📥")
        try:
            self.fetcher.fetch(entry, self.bin_dir)
        except (FetchError, OSError) as e:
            log(f"Failed to install {entry.name}: {e}", "error", "❌")
            return InstallOutcome(entry, "failed", str(e))
        log(f"Successfully downloaded {entry.name}", "success", "✅")
        return InstallOutcome(entry, "installed")

    def install_missing(self) -> InstallSummary:
        """Install every registered binary that is not in the bin directory."""
        self._ensure_dir()
        summary = InstallSummary()
        for entry in self.registry.list():
            if is_installed(self.bin_dir, entry):
                summary.outcomes.append(InstallOutcome(entry, "skipped"))
                continue
            summary.outcomes.append(self._install(entry))

        print_summary(summary)
        return summary


def print_summary(summary: InstallSummary) -> None:
    """Print the result of a batch install."""
    if not summary.installed and not summary.failed:
        console.print("✅ [green]All binaries are already present.[/green]")
        return

    total = len(summary.installed) + len(summary.failed)
    console.print(
        f"\n🔄 [blue]Completed: {len(summary.installed)}/{total} binaries installed successfully[/blue]",
    )
    if summary.skipped:
        console.print(f"⏭️  [dim]Skipped (already present): {', '.join(summary.skipped)}[/dim]")
    if summary.failed:
        console.print(f"❌ [bold red]Failed: {', '.join(summary.failed)}[/bold red]")
