"""Logger setup for the CLI.

All modules log to named children of the `provenance-cli` logger with dict
messages. When a log directory is configured, a JSONL file handler is
attached to the parent logger; otherwise the records are discarded.
"""

from __future__ import annotations

__all__ = ["setup_cli_logging"]

import logging
from pathlib import Path

from provenance_cli.config import LoggingConfig
from provenance_cli.constants import APP_NAME, LOG_FILE_NAME
from provenance_cli.utils.file_helpers import ensure_secure_directory
from provenance_cli.utils.logging.iso_formatter import ISO8601Formatter


def setup_cli_logging(config: LoggingConfig) -> Path | None:
    """Configure the application logger from config.

    Args:
        config: Logging settings.

    Returns:
        Path of the log file, or None when logging is disabled.

    Raises:
        PermissionError: If unable to create the log directory due to permissions.
        OSError: If directory creation fails for other reasons.
    """
    logger = logging.getLogger(APP_NAME)
    logger.propagate = False  # Don't propagate to root logger

    # Close and remove any existing handlers to avoid duplicates and resource leaks
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    if config.log_dir is None:
        logger.addHandler(logging.NullHandler())
        return None

    log_dir = Path(config.log_dir).expanduser()
    ensure_secure_directory(log_dir)
    log_file = log_dir / LOG_FILE_NAME

    level = logging.getLevelName(config.log_level)
    logger.setLevel(level)

    file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(ISO8601Formatter())
    logger.addHandler(file_handler)

    return log_file
