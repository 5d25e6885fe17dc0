"""Config command group: show configuration location and contents."""

from __future__ import annotations

__all__ = ["config"]

import json

import click

from ..session import CliState, load_session_or_exit
from ..styling import style_label


@click.group()
def config() -> None:
    """Configuration commands."""


@config.command("path")
@click.pass_context
def path(ctx: click.Context) -> None:
    """Show the config file path.

    The file is optional; built-in defaults apply when it does not exist.
    """
    state = ctx.find_object(CliState)
    config_path = state.config_path if state is not None else None
    click.echo(str(config_path))


@config.command("show")
@click.pass_context
def show(ctx: click.Context) -> None:
    """Show the effective configuration and registry sizes."""
    session = load_session_or_exit(ctx)
    state = ctx.find_object(CliState)

    if state is not None:
        exists = "present" if state.config_path.exists() else "not found, using defaults"
        click.echo(f"{style_label('Config file')} {state.config_path} ({exists})")
    click.echo(f"{style_label('Log file')} {session.log_file or 'disabled'}")
    click.echo(
        f"{style_label('Registry')} {len(session.registries.tags)} tags, "
        f"{len(session.registries.known_values)} known values"
    )
    click.echo()
    click.echo(json.dumps(session.config.model_dump(mode="json"), indent=2))
