"""Tags command: list the effective CBOR tag registry."""

from __future__ import annotations

__all__ = ["tags"]

import sys

import click

from ..session import EXIT_FAILED, load_session_or_exit
from ..styling import style_error


@click.command("tags")
@click.option("--name", "-n", "name", help="Show only this UR type")
@click.pass_context
def tags(ctx: click.Context, name: str | None) -> None:
    """List registered UR types and their CBOR tags.

    Includes built-in registrations and those added in the config file.
    """
    session = load_session_or_exit(ctx)
    registry = session.registries.tags

    if name is not None:
        tag = registry.tag_for_name(name)
        if tag is None:
            click.echo(style_error(f"UR type '{name}' is not registered"), err=True)
            sys.exit(EXIT_FAILED)
        click.echo(f"{tag}\t{name}")
        return

    for type_name, tag in registry.items():
        click.echo(f"{tag}\t{type_name}")
