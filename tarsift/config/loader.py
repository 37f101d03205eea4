"""
YAML configuration loader.

This helper locates, reads and validates the settings file before returning a
:class:`tarsift.config.schema.FinderSettings` instance.

Search precedence (first match wins)
1. An explicit path argument (``--config`` on the CLI) or, when none is
   given, the ``$TARSIFT_CONFIG`` environment variable.
2. ``<project>/.tarsift.yaml`` - project-local override.
3. The packaged default shipped inside the wheel.

All resolution logic is concentrated here so the rest of *tarsift* treats
configuration as an already-validated object.
"""

from __future__ import annotations

import os
import warnings
from importlib.resources import as_file, files
from pathlib import Path
from typing import Optional

import yaml

from .schema import FinderSettings

# --------------------------------------------------------------------------- #
# Wheel-internal fallback (works even from a zipped wheel)                    #
# --------------------------------------------------------------------------- #
try:
    _DEFAULT_CONFIG = files("tarsift.resources") / "default_config.yaml"
except ModuleNotFoundError:
    _DEFAULT_CONFIG = Path(__file__).resolve().parent.parent / "resources" / "default_config.yaml"

_LOCAL_NAME = ".tarsift.yaml"
_ENV_VAR = "TARSIFT_CONFIG"


# --------------------------------------------------------------------------- #
# Helper functions                                                            #
# --------------------------------------------------------------------------- #
def _project_local(root: Optional[str | Path]) -> Optional[Path]:
    """Return ``<root>/.tarsift.yaml`` or *None* if *root* is ``None``."""
    if root is None:
        return None
    return Path(root).expanduser().resolve() / _LOCAL_NAME


def _first_existing(*candidates: Optional[Path]) -> Optional[Path]:
    """Return the first path in *candidates* that exists on disk."""
    for p in candidates:
        if p is not None and p.exists():
            return p
    return None


def _load_yaml(path: Path) -> dict:
    """Read a YAML file.

    Args:
        path: Location of the YAML document.

    Returns:
        Dictionary parsed from the file, or an empty dict if the file is empty.

    Raises:
        RuntimeError: When the document is not a mapping.
    """
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise RuntimeError(f"Invalid configuration - {path} is not a YAML mapping")
    return data


def _explicit_path(config_path: Optional[str | Path]) -> Optional[Path]:
    """Return the caller's path, falling back to ``$TARSIFT_CONFIG``."""
    if config_path is not None:
        return Path(config_path).expanduser().resolve()

    env_value = os.environ.get(_ENV_VAR)
    if not env_value:
        return None
    env_path = Path(env_value).expanduser().resolve()
    if not env_path.exists():
        warnings.warn(
            f"${_ENV_VAR} points at {env_path}, which does not exist; ignored.",
            UserWarning,
        )
        return None
    return env_path


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #
def load_config(
    *,
    config_path: Optional[str | Path] = None,
    project_root: Optional[str | Path] = None,
) -> FinderSettings:
    """Return fully validated :class:`FinderSettings`.

    Args:
        config_path: Explicit YAML path.  ``None`` triggers the search
            sequence described in the module doc-string.
        project_root: Directory searched for a ``.tarsift.yaml`` override.

    Returns:
        Settings ready for downstream use.

    Raises:
        FileNotFoundError: When *config_path* is given but does not exist.
        RuntimeError: When the YAML fails Pydantic validation.
    """
    explicit = _explicit_path(config_path)
    if config_path is not None and not explicit.exists():
        raise FileNotFoundError(f"Configuration file not found: {explicit}")

    resolved = _first_existing(explicit, _project_local(project_root))
    if resolved is None:
        with as_file(_DEFAULT_CONFIG) as p:
            data = _load_yaml(p)
    else:
        data = _load_yaml(resolved)

    try:
        return FinderSettings(**data)
    except Exception as exc:  # pydantic.ValidationError
        raise RuntimeError(f"Invalid configuration - {exc}") from exc
