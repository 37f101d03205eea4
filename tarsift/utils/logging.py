"""
Package-level logging configuration.

* Rich console output on *stderr* so matches printed on *stdout* stay
  pipe-friendly.
* Rotating log file inside ``$TARSIFT_LOG_DIR`` when that variable is set.
* Optional plain-text mirror controlled via ``--save-logfile`` on the CLI.

The public helper :func:`setup_logging` wires everything and should be the
sole entry-point used by the CLI.
"""

from __future__ import annotations

import atexit
import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

import structlog
from rich.console import Console
from rich.logging import RichHandler
from structlog.dev import ConsoleRenderer as StructlogConsoleRenderer
from structlog.stdlib import LoggerFactory

__all__ = ["setup_logging"]

_LOG_DIR_ENV = "TARSIFT_LOG_DIR"


# --------------------------------------------------------------------------- #
# Internal helpers – file-based handlers                                      #
# --------------------------------------------------------------------------- #
def _rotating_file_handler(level: int) -> logging.Handler | None:
    """Return a rotating file handler under ``$TARSIFT_LOG_DIR`` or *None*.

    Args:
        level: Log-level for the handler.

    Returns:
        Configured handler writing ``tarsift.log`` (5 MB x 3 backups), or
        *None* when the environment variable is unset.
    """
    env_dir = os.environ.get(_LOG_DIR_ENV)
    if not env_dir:
        return None

    logdir = Path(env_dir).expanduser()
    logdir.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        filename=logdir / "tarsift.log",
        maxBytes=5_000_000,  # ~5 MB before rollover
        backupCount=3,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s %(threadName)s %(message)s")
    )
    return handler


def _plain_text_file_handler(
    path: Optional[Path], level: int
) -> logging.Handler | None:
    """Return a plain-text file handler or *None* when *path* is *None*.

    Args:
        path: Destination file.
        level: Log-level for the handler.
    """
    if path is None:
        return None

    path = path.expanduser().resolve()
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(path, encoding="utf-8", mode="a")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    # Ensure the buffer is flushed on interpreter exit.
    atexit.register(handler.close)
    return handler


# --------------------------------------------------------------------------- #
# Public API – main entry-point                                               #
# --------------------------------------------------------------------------- #
def setup_logging(
    *,
    verbose: bool = False,
    debug: bool = False,
    extra_text_log: Optional[Path] = None,
) -> None:
    """Configure rich console logging and optional file mirrors.

    Per-chain failures are logged at WARNING, so they reach the console by
    default; traversal progress is DEBUG.

    Args:
        verbose: Emit INFO-level messages to the console.
        debug: Emit DEBUG-level messages plus rich tracebacks with locals.
        extra_text_log: Optional path for a plain-text mirror of console output.
    """
    console_lvl = (
        logging.DEBUG
        if debug
        else logging.INFO if verbose else logging.WARNING
    )
    file_lvl = logging.DEBUG if debug else logging.INFO

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            level=console_lvl,
            rich_tracebacks=True,
            tracebacks_show_locals=debug,
            markup=False,
            show_path=debug,
        )
    ]

    file_handler = _rotating_file_handler(file_lvl)
    if file_handler:
        handlers.append(file_handler)

    txt_handler = _plain_text_file_handler(extra_text_log, console_lvl)
    if txt_handler:
        handlers.append(txt_handler)

    # --- Configure root logger --------------------------------------------------
    logging.basicConfig(
        level=logging.DEBUG,  # handlers filter individually
        handlers=handlers,
        format="%(message)s",  # Rich/structlog handle formatting
    )

    # --- structlog binds --------------------------------------------------------
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            *([structlog.processors.TimeStamper(fmt="iso")] if debug else []),
            StructlogConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            min(console_lvl, file_lvl) if file_handler else console_lvl
        ),
        logger_factory=LoggerFactory(),
    )
