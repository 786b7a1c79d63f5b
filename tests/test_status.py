"""Tests for local and remote status lookups."""

from __future__ import annotations

from pathlib import Path
from typing import Callable
from unittest.mock import MagicMock, patch

import pytest
import requests

from binary_manager import status
from binary_manager.registry import BinaryEntry, Registry
from binary_manager.status import (
    LocalStatus,
    RemoteStatus,
    StatusRow,
    collect_status,
    is_installed,
    probe_local,
    resolve_remote,
)


def _http_error(status_code: int) -> requests.HTTPError:
    response = requests.Response()
    response.status_code = status_code
    return requests.HTTPError(f"{status_code} Client Error", response=response)


def test_probe_missing_binary(bin_dir: Path) -> None:
    entry = BinaryEntry("nu", "nushell/nushell")
    assert probe_local(bin_dir, entry) == LocalStatus(found=False, version=None)
    assert not is_installed(bin_dir, entry)


def test_probe_reads_version(bin_dir: Path, make_executable: Callable[..., Path]) -> None:
    make_executable("nu", output="0.99.1")
    assert probe_local(bin_dir, BinaryEntry("nu", "nushell/nushell")) == LocalStatus(True, "0.99.1")


def test_probe_uses_exe_and_flag(bin_dir: Path) -> None:
    script = bin_dir / "rg"
    script.write_text('#!/bin/sh\n[ "$1" = "-V" ] && echo "ripgrep 14.1.1"\n')
    script.chmod(0o755)
    entry = BinaryEntry("ripgrep", "BurntSushi/ripgrep", exe="rg", version_flag="-V")
    assert probe_local(bin_dir, entry) == LocalStatus(True, "14.1.1")


def test_probe_falls_back_to_stderr(bin_dir: Path, make_executable: Callable[..., Path]) -> None:
    make_executable("micro", stderr="Version: 2.0.14")
    assert probe_local(bin_dir, BinaryEntry("micro", "zyedidia/micro")).version == "2.0.14"


def test_probe_failing_binary_is_found_without_version(
    bin_dir: Path,
    make_executable: Callable[..., Path],
) -> None:
    make_executable("fzf", output="1.2.3", exit_code=3)
    assert probe_local(bin_dir, BinaryEntry("fzf", "junegunn/fzf")) == LocalStatus(True, None)


def test_probe_unparsable_output(bin_dir: Path, make_executable: Callable[..., Path]) -> None:
    make_executable("jj", output="no version information")
    assert probe_local(bin_dir, BinaryEntry("jj", "jj-vcs/jj")) == LocalStatus(True, None)


def test_probe_not_executable(bin_dir: Path) -> None:
    (bin_dir / "gh").write_text("not a program")
    (bin_dir / "gh").chmod(0o644)
    assert probe_local(bin_dir, BinaryEntry("gh", "cli/cli")) == LocalStatus(True, None)


def test_probe_ignores_directories(bin_dir: Path) -> None:
    (bin_dir / "yazi").mkdir()
    assert probe_local(bin_dir, BinaryEntry("yazi", "sxyazi/yazi")) == LocalStatus(False)


def test_resolve_remote_strips_prefix() -> None:
    with patch("binary_manager.status.get_latest_release", return_value={"tag_name": "v0.99.1"}):
        assert resolve_remote("nushell/nushell") == RemoteStatus("0.99.1")


@pytest.mark.parametrize(
    "release",
    [{}, {"tag_name": ""}, {"tag_name": "   "}, {"tag_name": None}, {"tag_name": 12}, []],
)
def test_resolve_remote_bad_payload(release: object) -> None:
    with patch("binary_manager.status.get_latest_release", return_value=release):
        assert resolve_remote("owner/repo") == RemoteStatus(None)


@pytest.mark.parametrize(
    "error",
    [
        requests.ConnectionError("offline"),
        requests.Timeout("slow"),
        _http_error(404),
        ValueError("Expecting value"),
    ],
)
def test_resolve_remote_errors_degrade(error: Exception) -> None:
    with patch("binary_manager.status.get_latest_release", side_effect=error):
        assert resolve_remote("owner/repo") == RemoteStatus(None)


@pytest.mark.parametrize("status_code", [403, 429])
def test_resolve_remote_rate_limited(
    status_code: int,
    capsys: pytest.CaptureFixture[str],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(status, "_rate_limit_warned", False)
    with patch("binary_manager.status.get_latest_release", side_effect=_http_error(status_code)):
        assert resolve_remote("owner/repo") == RemoteStatus(None)
    assert "rate limit" in capsys.readouterr().out


def test_collect_status_keeps_registry_order(small_registry: Registry, bin_dir: Path) -> None:
    seen = []

    def resolver(repository: str) -> RemoteStatus:
        seen.append(repository)
        return RemoteStatus("2.0.0") if repository == "owner/beta" else RemoteStatus()

    def prober(_bin_dir: Path, entry: BinaryEntry) -> LocalStatus:
        return LocalStatus(True, "1.0.0") if entry.name == "alpha" else LocalStatus(False)

    rows = collect_status(small_registry, bin_dir, resolver=resolver, prober=prober)

    assert seen == ["owner/alpha", "owner/beta"]
    assert [row.entry.name for row in rows] == ["alpha", "beta"]
    assert rows[0] == StatusRow(small_registry.lookup("alpha"), LocalStatus(True, "1.0.0"), RemoteStatus())
    assert rows[1].remote.latest_version == "2.0.0"


def test_collect_status_one_failure_does_not_stop_the_rest(
    small_registry: Registry,
    bin_dir: Path,
    make_executable: Callable[..., Path],
) -> None:
    make_executable("alpha", exit_code=1)
    make_executable("beta", output="beta 3.1.4")
    resolver = MagicMock(side_effect=[RemoteStatus(), RemoteStatus("3.1.5")])

    rows = collect_status(small_registry, bin_dir, resolver=resolver)

    assert rows[0].local == LocalStatus(True, None)
    assert rows[1].local == LocalStatus(True, "3.1.4")
    assert rows[1].remote == RemoteStatus("3.1.5")


def test_rate_limit_warning_printed_once_per_run(
    small_registry: Registry,
    bin_dir: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    with patch("binary_manager.status.get_latest_release", side_effect=_http_error(403)):
        rows = collect_status(small_registry, bin_dir)
        assert [row.remote for row in rows] == [RemoteStatus(None), RemoteStatus(None)]
        assert capsys.readouterr().out.count("rate limit") == 1

        collect_status(small_registry, bin_dir)
        assert capsys.readouterr().out.count("rate limit") == 1
