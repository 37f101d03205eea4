"""Utility functions to print search results and banners on the console."""

from __future__ import annotations

import click

from tarsift.pipelines.types import Result

__all__ = ["echo_banner", "echo_match", "echo_failure"]


def echo_banner(text: str) -> None:
    """Print a colourful banner announcing a section of output.

    Args:
        text: Banner text.
    """
    click.secho(f"\n=== {text} ===", fg="cyan")


def echo_match(result: Result, sep: str = ":") -> None:
    """Print one matching chain on stdout, undecorated so it can be piped.

    Args:
        result: Successful result.
        sep: String placed between chain elements.
    """
    click.echo(result.display(sep))


def echo_failure(result: Result, sep: str = ":") -> None:
    """Print a failure on stderr in red.

    Args:
        result: Failed result.
        sep: String placed between chain elements.
    """
    click.secho(f"{result.display(sep)}: {result.error}", fg="red", err=True)
