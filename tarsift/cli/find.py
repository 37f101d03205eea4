"""Search archives for entries whose name matches a regular expression.

The command is exposed as ``tarsift-cli find PATTERN PATH...``.  Matches are
printed on stdout, one chain per line (``outer.tar.gz:inner.tar:leaf.txt``);
per-branch failures go to stderr.

Exit status follows ``grep``: 0 when something matched, 1 when nothing
matched, 2 when nothing matched and at least one failure was reported.
"""

from __future__ import annotations

from pathlib import Path

import click
import structlog

from tarsift.pipelines.finder import Finder
from tarsift.utils.display import echo_failure, echo_match
from tarsift.utils.errors import PatternError

log = structlog.get_logger()


@click.command(
    name="find",
    help="Report every entry (at any nesting depth) whose name matches PATTERN.",
    context_settings=dict(help_option_names=["-h", "--help"], max_content_width=120),
)
@click.argument("pattern")
@click.argument(
    "paths",
    type=click.Path(path_type=Path),
    nargs=-1,
    required=True,
)
@click.option("-i", "--ignore-case", is_flag=True, help="Match names case-insensitively.")
@click.option("--separator", metavar="<sep>",
              help="String printed between nesting levels (default from settings).")
@click.option("--errors/--no-errors", "show_errors", default=True,
              help="Print per-archive failures on stderr.")
@click.option("--max-results", type=click.IntRange(min=1), metavar="<n>",
              help="Stop after this many matches.")
@click.option("--count", is_flag=True, help="Print only the number of matches.")
@click.pass_context
def cli(  # noqa: D401 – Click callback naming rule
    ctx: click.Context,
    pattern: str,
    paths: tuple[Path, ...],
    ignore_case: bool,
    separator: str | None,
    show_errors: bool,
    max_results: int | None,
    count: bool,
) -> None:
    """Entry-point for ``tarsift-cli find``.

    Args:
        ctx:          Click context with global settings already loaded.
        pattern:      Regular expression searched in each entry name.
        paths:        Root files or archives.
        ignore_case:  Force case-insensitive matching.
        separator:    Override for the chain separator.
        show_errors:  Print failures on stderr.
        max_results:  Stop the search after this many matches.
        count:        Print the match count instead of the matches.
    """
    settings = ctx.obj["settings"]
    sep = settings.separator if separator is None else separator

    try:
        finder = Finder(pattern, settings=settings, ignore_case=True if ignore_case else None)
    except PatternError as exc:
        raise click.BadParameter(str(exc), param_hint="PATTERN") from exc

    log.info("Searching %d path(s) for %r", len(paths), pattern)
    finder.start(paths)

    matches = failures = 0
    results = finder.results()
    try:
        for res in results:
            if not res.ok:
                failures += 1
                if show_errors:
                    echo_failure(res, sep)
                continue
            matches += 1
            if not count:
                echo_match(res, sep)
            if max_results is not None and matches >= max_results:
                log.info("Reached --max-results=%d; stopping", max_results)
                break
    finally:
        results.close()

    if count:
        click.echo(matches)
    log.info("Search finished: %d match(es), %d failure(s)", matches, failures)

    if matches:
        ctx.exit(0)
    ctx.exit(2 if failures else 1)
