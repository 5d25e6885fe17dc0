"""Main CLI entry point for provenance-cli.

Defines the CLI group and registers all subcommands.

Commands:
    config    - Configuration (path, show)
    extract   - Extract provenance marks from URs
    info      - Resolve an info payload to tagged CBOR
    tags      - List the CBOR tag registry
    validate  - Validate marks given as URs or in a chain directory

Subcommand help:
    provenance COMMAND -h      Show help for a specific command
"""

from __future__ import annotations

__all__ = ["cli"]

import os
import sys
from pathlib import Path

import click

from provenance_cli import __version__
from provenance_cli.constants import CONFIG_ENV_VAR
from provenance_cli.utils.file_helpers import get_config_path

from .commands.config import config
from .commands.extract import extract
from .commands.info import info
from .commands.tags import tags
from .commands.validate import validate
from .session import CliState


class ReorderedGroup(click.Group):
    """Custom group that shows examples after the commands section."""

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """Add extra help after commands section."""
        formatter.write(
            """
Examples:
  provenance info 0xa1626964187b             Hex CBOR info payload
  provenance info ur:my-type/... --info-tag 90001
                                             UR of an unregistered type
  provenance extract ur:xid/...              Mark from a (signed) XID document
  provenance validate --dir ./my-chain       Marks from a chain directory
"""
        )


@click.group(
    cls=ReorderedGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    help=f"Config file (default: ${CONFIG_ENV_VAR} or the platform config dir)",
)
@click.pass_context
def cli(ctx: click.Context, version: bool, config_path: Path | None) -> None:
    """provenance: info payloads and provenance mark extraction."""
    if version:
        click.echo(f"provenance-cli {__version__}")
        sys.exit(0)
    # An explicitly named config file must exist; the default one is optional
    required = config_path is not None or bool(os.environ.get(CONFIG_ENV_VAR))
    ctx.obj = CliState(config_path=get_config_path(config_path), config_required=required)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(config)
cli.add_command(extract)
cli.add_command(info)
cli.add_command(tags)
cli.add_command(validate)


def main() -> None:
    """CLI entry point."""
    cli()
