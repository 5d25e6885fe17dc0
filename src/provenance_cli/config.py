"""Application configuration for provenance-cli.

Defines configuration models for logging and registry additions. The config
file is optional: without one, built-in defaults apply. The file lives at the
OS-appropriate config directory unless overridden by --config or
$PROVENANCE_CLI_CONFIG.

Example config.json:
    {
      "logging": {"log_dir": "~/.local/state/provenance-cli", "log_level": "DEBUG"},
      "registry": {
        "tags": {"my-type": 90001},
        "known_values": {"900": "myPredicate"}
      }
    }

Example usage:
    config = AppConfig.load(config_path, required=False)
    registries = config.build_registries()
"""

from __future__ import annotations

__all__ = [
    "AppConfig",
    "LoggingConfig",
    "Registries",
    "RegistryConfig",
]

import re
from pathlib import Path
from typing import Literal, NamedTuple

from pydantic import BaseModel, Field, field_validator

from provenance_cli.exceptions import ConfigurationError
from provenance_cli.registry.known_values import KnownValueRegistry
from provenance_cli.registry.tags import TagRegistry
from provenance_cli.utils.file_helpers import load_validated_json

_UR_TYPE_PATTERN = re.compile(r"[a-z0-9-]+")


class Registries(NamedTuple):
    """Read-only registries built once per invocation."""

    tags: TagRegistry
    known_values: KnownValueRegistry


class LoggingConfig(BaseModel):
    """Logging configuration settings.

    Attributes:
        log_dir: Directory for the JSONL log file. Logging is disabled when
            unset.
        log_level: Minimum level written to the log file.
    """

    log_dir: str | None = Field(default=None, min_length=1)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


class RegistryConfig(BaseModel):
    """Additions to the built-in registries.

    Attributes:
        tags: UR type name -> CBOR tag.
        known_values: Known value -> predicate name.
    """

    tags: dict[str, int] = Field(default_factory=dict)
    known_values: dict[int, str] = Field(default_factory=dict)

    @field_validator("tags")
    @classmethod
    def _check_tags(cls, tags: dict[str, int]) -> dict[str, int]:
        for name, tag in tags.items():
            if not _UR_TYPE_PATTERN.fullmatch(name):
                raise ValueError(f"'{name}' is not a valid UR type name")
            if tag < 0:
                raise ValueError(f"CBOR tag for '{name}' must be non-negative")
        return tags

    @field_validator("known_values")
    @classmethod
    def _check_known_values(cls, known_values: dict[int, str]) -> dict[int, str]:
        for value, name in known_values.items():
            if value < 0:
                raise ValueError(f"known value for '{name}' must be non-negative")
            if not name:
                raise ValueError(f"known value {value} needs a name")
        return known_values


class AppConfig(BaseModel):
    """Top-level configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)

    @classmethod
    def load(cls, path: Path, *, required: bool) -> AppConfig:
        """Load configuration from a JSON file.

        Args:
            path: Config file path.
            required: If False, a missing file yields the defaults.

        Returns:
            Validated configuration.

        Raises:
            ConfigurationError: If a required file is missing, or the file
                is unreadable, malformed, or invalid.
        """
        if not path.exists():
            if required:
                raise ConfigurationError(f"Configuration file not found at {path}")
            return cls()
        try:
            return load_validated_json(path, cls, file_type="config")
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

    def build_registries(self) -> Registries:
        """Build the session's registries: built-ins plus configured additions.

        Raises:
            ConfigurationError: If an addition contradicts a built-in entry.
        """
        return Registries(
            tags=TagRegistry.with_defaults().extended(self.registry.tags),
            known_values=KnownValueRegistry.with_defaults().extended(self.registry.known_values),
        )
