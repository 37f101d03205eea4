"""
Helpers for identifying tar-family containers.

This module contains *pure* utility code used by the search pipeline and the
``formats`` command to decide whether a name denotes a supported container
and which decompression must be applied before the bytes read as a tar
stream.

The logic purposefully remains extremely cheap: a case-insensitive suffix
comparison against a fixed table.  Content is never probed, so a misnamed
file is misclassified; the tar reader then reports it as a container-read
failure.
"""

from __future__ import annotations

import enum


class ContainerKind(enum.Enum):
    """Decompression layer required before a name can be read as tar."""

    NONE = "none"  # not a container
    TAR = "tar"
    GZIP = "gzip"
    BZIP2 = "bzip2"
    XZ = "xz"
    ZSTD = "zstd"

    @property
    def is_container(self) -> bool:
        """Return ``True`` for every kind except :attr:`NONE`."""
        return self is not ContainerKind.NONE


#: Recognised container endings, checked **in this order**.  ``.tar`` comes
#: first because none of the compressed spellings end with it, so the order
#: only matters between kinds that share a tail.
_CONTAINER_SUFFIXES: tuple[tuple[ContainerKind, tuple[str, ...]], ...] = (
    (ContainerKind.TAR, (".tar",)),
    (ContainerKind.GZIP, (".tar.gz", ".tgz", ".taz")),
    (ContainerKind.BZIP2, (".tar.bz2", ".tar.bz", ".tbz", ".tbz2", ".tz2", ".tb2")),
    (ContainerKind.XZ, (".tar.xz", ".txz")),
    (ContainerKind.ZSTD, (".tar.zst", ".tzst", ".tar.zstd")),
)


def classify(name: str) -> ContainerKind:
    """Return the :class:`ContainerKind` denoted by *name*.

    The check is case-insensitive and looks at the whole string, so entry
    names carrying directories inside the archive work the same way::

        >>> classify("backup.TAR.GZ")
        <ContainerKind.GZIP: 'gzip'>
        >>> classify("logs/2019.tbz2")
        <ContainerKind.BZIP2: 'bzip2'>
        >>> classify("notes.txt")
        <ContainerKind.NONE: 'none'>

    Args:
        name: Root path or tar entry name.

    Returns:
        The matching kind, or :attr:`ContainerKind.NONE` for unknown suffixes.
    """
    lower_name = name.lower()
    for kind, suffixes in _CONTAINER_SUFFIXES:
        if lower_name.endswith(suffixes):
            return kind
    return ContainerKind.NONE


def is_container(name: str) -> bool:
    """Return ``True`` when *name* denotes a supported container."""
    return classify(name).is_container


def container_suffixes() -> dict[ContainerKind, tuple[str, ...]]:
    """Return the suffix table keyed by kind, in lookup order."""
    return dict(_CONTAINER_SUFFIXES)
