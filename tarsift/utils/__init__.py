"""
Public facade for the *utils* package.

Anything imported here becomes part of the *stable* public API.
Internal helpers live in their own modules and are **not** re-exported.
"""

from __future__ import annotations

# ─── container classification ───────────────────────────────────────────
from .archive import ContainerKind, classify, container_suffixes, is_container

# ─── name matching ──────────────────────────────────────────────────────
from .matching import NameMatcher

# ─── errors ─────────────────────────────────────────────────────────────
from .errors import (
    ContainerReadError,
    DecompressionError,
    OpenError,
    PatternError,
    TarsiftError,
)

__all__: list[str] = [
    "ContainerKind",
    "classify",
    "container_suffixes",
    "is_container",
    "NameMatcher",
    "ContainerReadError",
    "DecompressionError",
    "OpenError",
    "PatternError",
    "TarsiftError",
]
