"""Search pipeline: recursive descent, root dispatch and result types."""

from .finder import Descender, Finder, find_matches, search
from .types import PathChain, Result

__all__ = ["Descender", "Finder", "PathChain", "Result", "find_matches", "search"]
