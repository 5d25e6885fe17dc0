"""Extract command: recover provenance marks from URs."""

from __future__ import annotations

__all__ = ["extract"]

import json
import sys

import click

from provenance_cli.chain.collect import collect_marks, sources_from_tokens
from provenance_cli.core.extractor import ArtifactExtractor

from ..session import EXIT_FAILED, load_session_or_exit, read_stdin_text
from ..styling import style_error


@click.command("extract")
@click.argument("tokens", nargs=-1)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["ur", "json"]),
    default="ur",
    show_default=True,
    help="Output format",
)
@click.pass_context
def extract(ctx: click.Context, tokens: tuple[str, ...], output_format: str) -> None:
    """Extract the provenance mark carried by each UR in TOKENS.

    A `ur:provenance` is decoded directly. Any other UR must be an envelope
    (possibly wrapped, e.g. a signed XID document) with exactly one
    `provenance` assertion at some layer. Reads one UR per line from stdin
    when TOKENS is omitted.

    Exit codes:
      0 - Every UR yielded a mark
      1 - At least one UR failed
    """
    session = load_session_or_exit(ctx)

    token_list = list(tokens) if tokens else read_stdin_text().splitlines()
    sources = sources_from_tokens(token_list)
    if not sources:
        raise click.UsageError("No URs provided")

    extractor = ArtifactExtractor(session.registries.known_values)
    collection = collect_marks(sources, extractor)

    for mark in collection.marks:
        if output_format == "json":
            click.echo(json.dumps(mark.record.summary()))
        else:
            click.echo(mark.record.to_ur_string())

    for issue in collection.issues:
        click.echo(style_error(issue.message), err=True)

    if collection.issues:
        sys.exit(EXIT_FAILED)
