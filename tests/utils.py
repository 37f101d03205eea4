"""Test helpers that fabricate (nested) tar archives in memory."""

from __future__ import annotations

import bz2
import gzip
import io
import lzma
import shutil
import tarfile
from pathlib import Path
from typing import Mapping, Optional, Union

import pytest

#: Entry content: raw bytes for a regular file, ``None`` for a directory.
Content = Optional[bytes]
Entries = Union[Mapping[str, Content], "list[tuple[str, Content]]"]

requires_posix_tools = pytest.mark.skipif(
    not all(shutil.which(tool) for tool in ("cat", "sh", "false", "true", "yes")),
    reason="POSIX cat/sh/false/true/yes not available",
)


def tar_bytes(entries: Entries) -> bytes:
    """Return an uncompressed tar archive holding *entries* in order.

    Args:
        entries: Mapping (or list of pairs) of entry name to content.  A value
            of ``None`` creates a directory entry.

    Returns:
        Archive bytes, including the end-of-archive blocks.
    """
    items = entries.items() if isinstance(entries, Mapping) else entries
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w", format=tarfile.GNU_FORMAT) as tf:
        for name, data in items:
            info = tarfile.TarInfo(name=name)
            info.mtime = 0
            if data is None:
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                tf.addfile(info)
            else:
                info.size = len(data)
                info.mode = 0o644
                tf.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def compress(data: bytes, kind: str) -> bytes:
    """Compress *data* with ``"tar"`` (no-op), ``"gzip"``, ``"bzip2"`` or ``"xz"``."""
    if kind == "tar":
        return data
    if kind == "gzip":
        return gzip.compress(data)
    if kind == "bzip2":
        return bz2.compress(data)
    if kind == "xz":
        return lzma.compress(data, format=lzma.FORMAT_XZ)
    raise ValueError(f"unsupported kind {kind!r}")


def archive_bytes(entries: Entries, kind: str = "tar") -> bytes:
    """Return *entries* as a tar archive compressed with *kind*."""
    return compress(tar_bytes(entries), kind)


def write_archive(path: Path, entries: Entries, kind: str = "tar") -> Path:
    """Write *entries* to *path* as a (possibly compressed) tar archive."""
    path.write_bytes(archive_bytes(entries, kind))
    return path


def nested_tar(depth: int, leaf: str = "leaf.txt") -> bytes:
    """Return *depth* plain tars nested inside each other around *leaf*.

    The outermost archive is not named here; level ``i`` (1-based, counting
    inwards) contains ``level{i}.tar`` except the innermost, which holds
    *leaf*.
    """
    data = tar_bytes({leaf: b"deep"})
    for level in range(depth - 1, 0, -1):
        data = tar_bytes({f"level{level}.tar": data})
    return data


class TrackingStream:
    """Proxy that counts :meth:`close` calls on the wrapped stream."""

    def __init__(self, inner, label: str, registry: list) -> None:
        self._inner = inner
        self.label = label
        self.close_calls = 0
        registry.append(self)

    def close(self) -> None:
        self.close_calls += 1
        self._inner.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __getattr__(self, name):
        return getattr(self._inner, name)
