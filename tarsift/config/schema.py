"""
Pydantic model that mirrors the YAML configuration consumed by *tarsift*.

The settings only tune *how* archives are read (external decompressor
commands, worker and queue sizes); the suffix table and the traversal rules
are fixed in code.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FinderSettings(BaseModel):
    """Validated runtime settings for :class:`tarsift.pipelines.finder.Finder`.

    Attributes:
        xz_command: Argument vector of the xz-compatible decompressor.  It
            must read compressed bytes on stdin and write plain bytes to
            stdout.
        zstd_command: Same contract for zstd-compressed tar streams.
        max_workers: Optional cap on concurrently searched root paths.
            ``None`` runs one worker per root.
        queue_size: Capacity of the result queue.  The default of ``1`` makes
            every producer wait for the consumer.
        ignore_case: Compile the name pattern case-insensitively.
        chunk_size: Bytes copied per write into an external decompressor.
        separator: String placed between chain elements when printing.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    xz_command: List[str] = Field(default_factory=lambda: ["xz", "-d", "-T0"])
    zstd_command: List[str] = Field(default_factory=lambda: ["zstd", "-d"])
    max_workers: Optional[int] = Field(None, ge=1)
    queue_size: int = Field(1, ge=1)
    ignore_case: bool = False
    chunk_size: int = Field(64 * 1024, ge=1)
    separator: str = ":"

    @field_validator("xz_command", "zstd_command")
    @classmethod
    def _command_not_empty(cls, value: List[str]) -> List[str]:
        """Reject an empty argument vector early."""
        if not value or not value[0]:
            raise ValueError("decompressor command must name an executable")
        return value
