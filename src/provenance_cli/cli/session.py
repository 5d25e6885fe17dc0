"""Per-invocation CLI state.

The root command records where configuration should come from; commands
that need registries call `load_session_or_exit`, which loads the config,
builds the read-only registries once, sets up logging, and caches the result
on the click context.
"""

from __future__ import annotations

__all__ = [
    "EXIT_FAILED",
    "CliState",
    "Session",
    "load_session_or_exit",
    "read_stdin_text",
]

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import click

from provenance_cli.config import AppConfig, Registries
from provenance_cli.constants import APP_NAME
from provenance_cli.exceptions import ConfigurationError
from provenance_cli.utils.logging import setup_cli_logging

from .styling import style_error

# Command failed (payload rejected, extraction failed, validation issues)
EXIT_FAILED = 1

_logger = logging.getLogger(f"{APP_NAME}.cli")


@dataclass(frozen=True)
class Session:
    """Loaded configuration and the registries built from it."""

    config: AppConfig
    registries: Registries
    log_file: Path | None


@dataclass
class CliState:
    """Stored on ctx.obj by the root command."""

    config_path: Path
    config_required: bool
    session: Session | None = None


def load_session_or_exit(ctx: click.Context) -> Session:
    """Load config and registries once per invocation.

    Exits with ConfigurationError.exit_code if the configuration is invalid.
    """
    state = ctx.find_object(CliState)
    if state is None:
        raise RuntimeError("CLI state missing; commands must run under the root group")
    if state.session is not None:
        return state.session

    try:
        config = AppConfig.load(state.config_path, required=state.config_required)
        registries = config.build_registries()
        log_file = setup_cli_logging(config.logging)
    except ConfigurationError as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(ConfigurationError.exit_code)
    except OSError as e:
        click.echo(style_error(f"Cannot set up logging: {e}"), err=True)
        sys.exit(ConfigurationError.exit_code)

    _logger.info(
        {
            "event": "session_started",
            "command": ctx.info_name,
            "config_path": str(state.config_path),
            "tags": len(registries.tags),
            "known_values": len(registries.known_values),
        }
    )
    state.session = Session(config=config, registries=registries, log_file=log_file)
    return state.session


def read_stdin_text() -> str:
    """Read all of stdin as text."""
    return click.get_text_stream("stdin").read()
