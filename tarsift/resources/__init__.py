"""Packaged data files (default configuration)."""
