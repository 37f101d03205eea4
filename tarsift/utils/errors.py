"""Exceptions raised and reported across the archive search pipeline.

Only :class:`PatternError` is fatal.  Every other class describes a failure
confined to one branch of the traversal; the search pipeline wraps the
original exception (kept as ``__cause__``) and carries it inside a failure
:class:`~tarsift.pipelines.types.Result` instead of raising it.
"""

from __future__ import annotations


class TarsiftError(RuntimeError):
    """Base class for every error defined by *tarsift*."""

    pass


class PatternError(TarsiftError, ValueError):
    """Raised when the name pattern is not a valid regular expression."""

    pass


class OpenError(TarsiftError):
    """A root path or an entry could not be opened at all."""

    pass


class DecompressionError(TarsiftError):
    """A transform rejected its input or the external decompressor failed."""

    pass


class ContainerReadError(TarsiftError):
    """The tar reader met a structurally invalid header mid-stream."""

    pass


class TraversalStopped(TarsiftError):
    """Internal signal unwinding a descent after :meth:`Finder.stop`."""

    pass
