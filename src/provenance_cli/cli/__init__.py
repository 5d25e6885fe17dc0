"""Command-line interface for provenance-cli.

Provides commands for resolving info payloads, extracting provenance marks,
and validating mark collections.
"""

from .main import cli, main

__all__ = ["cli", "main"]
