"""Read a ZIP container into an in-memory entry map."""

from __future__ import annotations

import io
import logging
import struct
import zipfile
import zlib
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import BinaryIO, Callable

from ebook_reader.core.errors import ArchiveError

log = logging.getLogger(__name__)

ArchiveSource = bytes | bytearray | Path | str | BinaryIO

_UTF16_BOMS = (b"\xff\xfe", b"\xfe\xff")


def decode_text(raw: bytes) -> str:
    """Decode document bytes, trying UTF-16 (by BOM) then UTF-8, then cp1252."""
    if raw.startswith(_UTF16_BOMS):
        return raw.decode("utf-16", errors="replace")
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        return raw.decode("cp1252", errors="replace")


def normalize_path(name: str) -> str:
    """Normalize an archive member name to a forward-slash relative path."""
    return name.replace("\\", "/").lstrip("/")


class ArchiveEntries(Mapping[str, bytes]):
    """Immutable mapping of archive path to raw entry bytes."""

    def __init__(self, entries: dict[str, bytes]):
        self._entries = dict(entries)

    def __getitem__(self, path: str) -> bytes:
        return self._entries[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def text(self, path: str) -> str | None:
        """Return the decoded text of an entry, or None if absent."""
        raw = self._entries.get(path)
        if raw is None:
            return None
        return decode_text(raw)


def _open_source(source: ArchiveSource) -> BinaryIO:
    if isinstance(source, (bytes, bytearray)):
        return io.BytesIO(source)
    if isinstance(source, (str, Path)):
        return open(source, "rb")
    return source


def read_archive(
    source: ArchiveSource,
    include: Callable[[str], bool] | None = None,
) -> ArchiveEntries:
    """Read every non-directory entry of a ZIP container into memory.

    Args:
        source: Raw bytes, a path, or a readable binary stream
        include: Optional predicate on the normalized entry path; entries
            it rejects are not read

    Raises:
        ArchiveError: If the data is not a valid or complete ZIP archive
    """
    stream = _open_source(source)
    entries: dict[str, bytes] = {}
    try:
        with zipfile.ZipFile(stream) as zf:
            for info in zf.infolist():
                if info.is_dir():
                    continue
                path = normalize_path(info.filename)
                if include is not None and not include(path):
                    continue
                entries[path] = zf.read(info)
    except (
        zipfile.BadZipFile,
        zlib.error,
        struct.error,
        EOFError,
        NotImplementedError,
        ValueError,
        OSError,
    ) as e:
        raise ArchiveError(f"Not a readable ZIP container: {e}") from e
    finally:
        if stream is not source:
            stream.close()

    log.debug("Read %d archive entries", len(entries))
    return ArchiveEntries(entries)
