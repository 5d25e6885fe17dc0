"""Info command: resolve an info payload into tagged CBOR.

Accepts the same payloads as a mark's `--info` option: hex-encoded CBOR or a
UR. A UR of an unregistered type needs `--info-tag`.
"""

from __future__ import annotations

__all__ = ["info"]

import json
import sys

import click

from provenance_cli.core.resolver import PayloadTagResolver
from provenance_cli.exceptions import PayloadError, URError

from ..session import EXIT_FAILED, load_session_or_exit, read_stdin_text
from ..styling import style_error


@click.command("info")
@click.argument("payload", required=False)
@click.option(
    "--info-tag",
    "info_tag",
    type=click.IntRange(min=0, max=2**64 - 1),
    help="CBOR tag for a UR type that is not registered",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["hex", "json"]),
    default="hex",
    show_default=True,
    help="Output format",
)
@click.pass_context
def info(ctx: click.Context, payload: str | None, info_tag: int | None, output_format: str) -> None:
    """Resolve an info PAYLOAD (hex CBOR or UR) to its tagged CBOR form.

    Reads the payload from stdin when PAYLOAD is omitted.

    \b
    Examples:
      provenance info 0x6568656c6c6f
      provenance info ur:seed/...
      provenance info ur:my-type/... --info-tag 90001

    Exit codes:
      0 - Payload resolved
      1 - Payload rejected
    """
    session = load_session_or_exit(ctx)

    raw = payload if payload is not None else read_stdin_text()
    if not raw.strip() and info_tag is not None:
        raise click.UsageError("--info-tag requires a UR payload")

    resolver = PayloadTagResolver(session.registries.tags)
    try:
        resolved = resolver.resolve(raw, info_tag)
    except (PayloadError, URError) as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(EXIT_FAILED)

    if output_format == "json":
        tag = resolved.tag
        click.echo(
            json.dumps(
                {
                    "hex": resolved.hex(),
                    "tag": tag,
                    "tag_name": session.registries.tags.name_for_tag(tag) if tag is not None else None,
                },
                indent=2,
            )
        )
    else:
        click.echo(resolved.hex())
