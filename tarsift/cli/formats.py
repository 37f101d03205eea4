"""List the container suffixes ``find`` descends into.

Exposed as ``tarsift-cli formats``.  For kinds handled by an external
decompressor the configured command is shown together with whether its
executable is currently on ``$PATH``.
"""

from __future__ import annotations

import shlex
import shutil

import click

from tarsift.utils.archive import ContainerKind, container_suffixes
from tarsift.utils.display import echo_banner


@click.command(
    name="formats",
    help="Show recognised container suffixes and decompressor availability.",
    context_settings=dict(help_option_names=["-h", "--help"], max_content_width=120),
)
@click.pass_obj
def cli(ctx_obj) -> None:  # noqa: D401 – Click callback naming rule
    """Entry-point for ``tarsift-cli formats``."""
    settings = ctx_obj["settings"]
    external = {
        ContainerKind.XZ: settings.xz_command,
        ContainerKind.ZSTD: settings.zstd_command,
    }

    echo_banner("Container formats")
    for kind, suffixes in container_suffixes().items():
        line = f"{kind.value:<6} {' '.join(suffixes)}"
        argv = external.get(kind)
        if argv is not None:
            state = "available" if shutil.which(argv[0]) else "missing"
            line += f"    [{shlex.join(argv)}: {state}]"
        click.echo(line)
