"""Extract an executable from a downloaded release asset."""

from __future__ import annotations

import bz2
import gzip
import lzma
import tarfile
import zipfile
import zlib
from dataclasses import dataclass
from io import BytesIO
from pathlib import PurePosixPath


class ExtractionError(Exception):
    """Error during extraction process."""

    def __init__(self, message: str, candidates: list[str] | None = None) -> None:
        """Initialize the ExtractionError."""
        self.message = message
        self.candidates = candidates or []
        super().__init__(message)


@dataclass
class ArchiveMember:
    """A regular file inside an archive."""

    name: str
    mode: int
    data: bytes


_DOC_NAMES = {"license", "licence", "readme", "changelog", "copying", "notice"}


def _is_definitely_not_exec(filename: str) -> bool:
    """Check if a file is definitely not executable."""
    basename = PurePosixPath(filename).name.lower()
    return basename in _DOC_NAMES or basename.endswith((".deb", ".1", ".txt", ".md"))


def is_exec(filename: str, mode: int) -> bool:
    """Determine if a file is executable based on name and permissions."""
    if _is_definitely_not_exec(filename):
        return False
    if mode & 0o111 != 0:
        return True
    return filename.endswith((".exe", ".appimage")) or "." not in PurePosixPath(filename).name


def binary_chooser(name: str, mode: int, exe: str) -> tuple[bool, bool]:
    """Return (exact match, possible match) for an archive member."""
    basename = PurePosixPath(name).name
    is_possible = is_exec(name, mode)
    is_match = basename in (exe, f"{exe}.exe", f"{exe}.appimage")
    return is_match and is_possible, is_possible


def _tar_members(data: bytes) -> list[ArchiveMember]:
    members = []
    try:
        with tarfile.open(fileobj=BytesIO(data), mode="r:") as tar:
            for member in tar.getmembers():
                if not member.isfile():
                    continue
                file_data = tar.extractfile(member)
                if file_data:
                    members.append(ArchiveMember(member.name, member.mode, file_data.read()))
    except tarfile.TarError as e:
        msg = f"Failed to read tar archive: {e}"
        raise ExtractionError(msg) from e
    return members


def _zip_members(data: bytes) -> list[ArchiveMember]:
    members = []
    try:
        with zipfile.ZipFile(BytesIO(data)) as zip_file:
            for info in zip_file.infolist():
                if info.is_dir():
                    continue
                mode = 0o644
                if info.external_attr > 0:
                    mode = (info.external_attr >> 16) & 0o777
                members.append(ArchiveMember(info.filename, mode, zip_file.read(info)))
    except (zipfile.BadZipFile, zlib.error, OSError, EOFError) as e:
        msg = f"Failed to read zip archive: {e}"
        raise ExtractionError(msg) from e
    return members


def _choose(members: list[ArchiveMember], exe: str) -> ArchiveMember:
    """Pick the member that is the executable called ``exe``."""
    direct = []
    possible = []
    for member in members:
        is_direct, is_possible = binary_chooser(member.name, member.mode, exe)
        if is_direct:
            direct.append(member)
        if is_possible:
            possible.append(member)

    if direct:
        # Shortest path wins, e.g. "bin/tool" over "completions/bin/tool"
        return min(direct, key=lambda m: len(m.name))
    if len(possible) == 1:
        return possible[0]
    if not possible:
        msg = f"{exe} not found in archive"
        raise ExtractionError(msg)
    msg = f"{len(possible)} candidates found for {exe}"
    raise ExtractionError(msg, [m.name for m in possible])


def _decompress(data: bytes, compression: str) -> bytes:
    try:
        if compression == "gzip":
            return gzip.decompress(data)
        if compression == "bzip2":
            return bz2.decompress(data)
        if compression == "xz":
            return lzma.decompress(data)
    except (OSError, EOFError, lzma.LZMAError, zlib.error) as e:
        msg = f"Failed to decompress with {compression}: {e}"
        raise ExtractionError(msg) from e
    return data


def extract_binary(filename: str, data: bytes, exe: str) -> bytes:
    """Return the contents of executable ``exe`` from an asset called ``filename``.

    Tarballs and zip files are searched for a member named like the executable.
    Single compressed files are decompressed, and anything else is assumed to
    be the executable itself.
    """
    lower = filename.lower()
    if lower.endswith((".tar.gz", ".tgz")):
        members = _tar_members(_decompress(data, "gzip"))
    elif lower.endswith((".tar.bz2", ".tbz", ".tbz2")):
        members = _tar_members(_decompress(data, "bzip2"))
    elif lower.endswith((".tar.xz", ".txz")):
        members = _tar_members(_decompress(data, "xz"))
    elif lower.endswith(".tar"):
        members = _tar_members(data)
    elif lower.endswith(".zip"):
        members = _zip_members(data)
    elif lower.endswith(".gz"):
        return _decompress(data, "gzip")
    elif lower.endswith(".bz2"):
        return _decompress(data, "bzip2")
    elif lower.endswith(".xz"):
        return _decompress(data, "xz")
    else:
        return data
    return _choose(members, exe).data
