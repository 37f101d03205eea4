"""Stream adapters: decompression transforms and process-backed streams."""

from .decompress import Transform, transform_for

__all__ = ["Transform", "transform_for"]
