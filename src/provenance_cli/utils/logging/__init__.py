"""Logging utilities: JSONL formatting and CLI logger setup."""

from provenance_cli.utils.logging.iso_formatter import ISO8601Formatter
from provenance_cli.utils.logging.logger_setup import setup_cli_logging

__all__ = ["ISO8601Formatter", "setup_cli_logging"]
