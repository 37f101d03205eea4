"""Name matching against a compiled regular expression."""

from __future__ import annotations

import re

from .errors import PatternError


class NameMatcher:
    """Answer "does this name match" for the terminal element of a chain.

    The pattern is compiled once; :meth:`matches` only reads the compiled
    object, so one instance is shared by every concurrent descent.  Matching
    is a *search* (unanchored), like ``grep``.
    """

    def __init__(self, pattern: str, *, ignore_case: bool = False) -> None:
        flags = re.IGNORECASE if ignore_case else 0
        try:
            self._regex = re.compile(pattern, flags)
        except re.error as exc:
            raise PatternError(f"Invalid pattern {pattern!r}: {exc}") from exc

    @property
    def pattern(self) -> str:
        return self._regex.pattern

    def matches(self, name: str) -> bool:
        """Return ``True`` when *name* contains a match for the pattern."""
        return self._regex.search(name) is not None

    __call__ = matches

    def __repr__(self) -> str:
        return f"NameMatcher({self.pattern!r})"
