"""Expose the project-wide Click group for the ``tarsift-cli`` script.

The module:

* declares a single Click *group* called :pyfunc:`main`;
* wires common global flags (configuration file, verbosity, log mirror);
* sets up logging via :pyfunc:`tarsift.utils.logging.setup_logging`;
* loads the validated settings and stashes them in the Click context;
* registers every sub-command located in sibling modules.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import click

from tarsift import __version__
from tarsift.config import load_config
from tarsift.utils.logging import setup_logging


class LazyGroup(click.Group):
    """Click group that imports sub-commands lazily."""

    def __init__(self, *args, **kwargs):
        self._lazy: dict[str, str] = {}
        super().__init__(*args, **kwargs)

    def set_lazy_command(self, name: str, target: str) -> None:
        """Register *name* to be imported from ``target`` on first use."""
        self._lazy[name] = target

    def list_commands(self, ctx):  # noqa: D401 - Click signature
        return sorted(set(super().list_commands(ctx)) | set(self._lazy))

    def get_command(self, ctx, cmd_name):  # noqa: D401 - Click signature
        """Resolve *cmd_name* from the eager map or import table."""
        cmd = super().get_command(ctx, cmd_name)
        if cmd is not None:
            return cmd
        target = self._lazy.get(cmd_name)
        if not target:
            return None
        module_name, attr = target.split(":", 1)
        import importlib

        module = importlib.import_module(module_name)
        cmd = getattr(module, attr)
        self.add_command(cmd, name=cmd_name)
        return cmd


# ─────────────────────────────────────────────────────────────────────────────
# Context settings shared by the entire Click hierarchy
# ─────────────────────────────────────────────────────────────────────────────
_CTX: Dict[str, Any] = dict(
    help_option_names=["-h", "--help"],
    show_default=True,
    max_content_width=120,
)


@click.group(
    cls=LazyGroup,
    context_settings=_CTX,
    help="""\b
tarsift-cli – find entries by name inside nested, compressed tar archives.

"""
)
@click.version_option(__version__)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    help="YAML settings file (defaults to $TARSIFT_CONFIG, ./.tarsift.yaml, packaged defaults).",
)
@click.option("-v", "--verbose", is_flag=True, help="INFO-level console output.")
@click.option("--debug", is_flag=True, help="DEBUG console output with rich tracebacks.")
@click.option(
    "--save-logfile",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Mirror console log output into this plain-text file.",
)
@click.pass_context
def main(  # noqa: D401 – Click requires the callback to be named “main”.
    ctx: click.Context,
    config_path: Path | None,
    verbose: bool,
    debug: bool,
    save_logfile: Path | None,
) -> None:
    """Root command executed by *tarsift-cli*.

    Raises:
        click.ClickException: When the settings file fails validation.
    """
    # Logging must be configured before any output is produced ----------------
    setup_logging(verbose=verbose, debug=debug, extra_text_log=save_logfile)

    try:
        settings = load_config(config_path=config_path, project_root=Path.cwd())
    except RuntimeError as exc:
        raise click.ClickException(str(exc)) from exc

    ctx.obj = {
        "settings": settings,
        "verbose": verbose,
        "debug": debug,
    }


main.set_lazy_command("find", "tarsift.cli.find:cli")
main.set_lazy_command("formats", "tarsift.cli.formats:cli")

# The public symbol exported by this module.  Required for ``python -m`` entry-points.
cli = main
__all__: list[str] = ["main"]
