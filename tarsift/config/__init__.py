"""
Configuration package facade.

Exports the small, stable surface that external callers rely on:

* :func:`load_config` - locate, parse and validate the YAML settings file.
* :class:`FinderSettings` - Pydantic model of the validated settings.
"""

from .loader import load_config  # noqa: F401  (import re-exposed on purpose)
from .schema import FinderSettings  # noqa: F401

__all__: list[str] = ["load_config", "FinderSettings"]
