"""Validate command: extract marks and report them by chain."""

from __future__ import annotations

__all__ = ["validate"]

import sys
from pathlib import Path

import click

from provenance_cli.chain.collect import (
    collect_marks,
    sources_from_directory,
    sources_from_tokens,
)
from provenance_cli.chain.report import build_report
from provenance_cli.core.extractor import ArtifactExtractor

from ..session import EXIT_FAILED, load_session_or_exit
from ..styling import style_error, style_success, style_warning


@click.command("validate")
@click.argument("tokens", nargs=-1)
@click.option(
    "--dir",
    "chain_dir",
    type=click.Path(path_type=Path, file_okay=False),
    help="Chain directory to read marks from (instead of TOKENS)",
)
@click.option("--warn", "-w", is_flag=True, help="Report issues as warnings without failing")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Output format",
)
@click.pass_context
def validate(
    ctx: click.Context,
    tokens: tuple[str, ...],
    chain_dir: Path | None,
    warn: bool,
    output_format: str,
) -> None:
    """Validate provenance marks given as URs or read from a chain directory.

    Marks are kept in command-line order, or in file-name order for --dir.
    Every mark is attempted: a UR that cannot be parsed or extracted is
    reported as an issue and validation moves on to the next one instead of
    stopping at the first failure.

    Exit codes:
      0 - All marks extracted (or --warn given)
      1 - At least one mark could not be read or extracted
    """
    if bool(tokens) == (chain_dir is not None):
        raise click.UsageError("Provide either mark URs or --dir, not both")

    session = load_session_or_exit(ctx)
    extractor = ArtifactExtractor(session.registries.known_values)

    if chain_dir is not None:
        try:
            sources, read_issues = sources_from_directory(chain_dir)
        except NotADirectoryError as e:
            click.echo(style_error(str(e)), err=True)
            sys.exit(EXIT_FAILED)
        collection = collect_marks(sources, extractor, read_issues)
    else:
        collection = collect_marks(sources_from_tokens(tokens), extractor)

    report = build_report(collection)
    if output_format == "json":
        click.echo(report.model_dump_json(indent=2))
    else:
        output = report.format_text()
        if output:
            click.echo(output)
        if not report.has_issues:
            click.echo(
                style_success(f"{report.mark_count} mark(s) in {len(report.chains)} chain(s)"),
                err=True,
            )

    if report.has_issues:
        if warn:
            click.echo(style_warning(f"{len(report.issues)} mark(s) had issues"), err=True)
        else:
            click.echo(style_error("Validation failed with issues"), err=True)
            sys.exit(EXIT_FAILED)
