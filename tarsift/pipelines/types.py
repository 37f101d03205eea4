"""
Typed, immutable value objects produced by the search pipeline.

A *path chain* is a plain ``tuple[str, ...]``: the root path first, the
innermost entry name last.  Extending a chain (``chain + (name,)``) always
builds a new tuple, so sibling descents can never share mutable storage.
"""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

PathChain = Tuple[str, ...]


class Result(BaseModel):
    """One emission on the result queue: a match *or* a failure.

    Attributes
    ----------
    chain
        Nesting address of the entry, root first.  Never empty.
    error
        ``None`` for a match.  For a failure, the exception describing what
        went wrong at *chain*.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    chain: Tuple[str, ...] = Field(..., min_length=1)
    error: Optional[BaseException] = None

    # ------------------------------------------------------------------ #
    # constructors
    # ------------------------------------------------------------------ #
    @classmethod
    def match(cls, chain: PathChain) -> "Result":
        return cls(chain=chain)

    @classmethod
    def failure(cls, chain: PathChain, error: BaseException) -> "Result":
        return cls(chain=chain, error=error)

    # ------------------------------------------------------------------ #
    # convenience
    # ------------------------------------------------------------------ #
    @property
    def ok(self) -> bool:
        """``True`` when the result is a match."""
        return self.error is None

    @property
    def name(self) -> str:
        """Terminal element of the chain."""
        return self.chain[-1]

    @property
    def depth(self) -> int:
        """Nesting depth; ``0`` for the root itself."""
        return len(self.chain) - 1

    def display(self, sep: str = ":") -> str:
        """Return the chain joined by *sep* (``a.tar:inner.tgz:leaf.txt``)."""
        return sep.join(self.chain)

    def __str__(self) -> str:
        if self.ok:
            return self.display()
        return f"{self.display()}: {self.error}"
