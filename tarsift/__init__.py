"""
tarsift package initialisation.

The module performs two small tasks:

1. **Expose the version string**
   ``tarsift.__version__`` is resolved at import-time from the installed
   distribution metadata so that every runtime context (install, editable,
   source checkout) surfaces the same canonical value.

2. **Re-export the public search API**
   :class:`~tarsift.pipelines.finder.Finder`, :func:`search`,
   :func:`find_matches`, :class:`~tarsift.pipelines.types.Result` and
   :func:`~tarsift.config.load_config` are importable from the top level::

       from tarsift import Finder, load_config
"""

from importlib.metadata import PackageNotFoundError, version

# --------------------------------------------------------------------------- #
# Version resolution
# --------------------------------------------------------------------------- #
try:
    __version__: str = version("tarsift")
except PackageNotFoundError:
    # Source tree without an installed wheel.
    __version__ = "0.0.0"

# --------------------------------------------------------------------------- #
# Public re-exports
# --------------------------------------------------------------------------- #
from .config import FinderSettings, load_config  # noqa: E402
from .pipelines.finder import Finder, find_matches, search  # noqa: E402
from .pipelines.types import Result  # noqa: E402
from .utils.errors import PatternError, TarsiftError  # noqa: E402

__all__: list[str] = [
    "__version__",
    "Finder",
    "FinderSettings",
    "PatternError",
    "Result",
    "TarsiftError",
    "find_matches",
    "load_config",
    "search",
]
