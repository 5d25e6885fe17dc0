"""Shared file utilities for provenance-cli.

- get_config_path: Config file location (explicit, env var, or default)
- load_validated_json: JSON file + Pydantic validation with consistent errors
- ensure_secure_directory: Owner-only directory creation for logs
"""

from __future__ import annotations

__all__ = [
    "ensure_secure_directory",
    "get_config_path",
    "load_validated_json",
]

import json
import os
import sys
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from provenance_cli.constants import CONFIG_DIR, CONFIG_ENV_VAR, CONFIG_FILE_NAME

# Type variable for Pydantic models
T = TypeVar("T", bound=BaseModel)


def get_config_path(explicit: Path | None = None) -> Path:
    """Resolve the config file path.

    Precedence: explicit path, then $PROVENANCE_CLI_CONFIG, then the
    platform config directory.
    """
    if explicit is not None:
        return explicit
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return Path(CONFIG_DIR) / CONFIG_FILE_NAME


def load_validated_json(
    file_path: Path,
    model_class: type[T],
    file_type: str = "file",
) -> T:
    """Load JSON file and validate against Pydantic model.

    Args:
        file_path: Path to JSON file.
        model_class: Pydantic model class to validate against.
        file_type: Description for error messages (e.g., "config").

    Returns:
        Validated Pydantic model instance.

    Raises:
        ValueError: If the file cannot be read, JSON is invalid, or
            validation fails.
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {file_type} file {file_path}: {e}") from e
    except OSError as e:
        raise ValueError(f"Could not read {file_type} file {file_path}: {e}") from e

    try:
        return model_class.model_validate(data)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            errors.append(f"  - {loc}: {error['msg']}")
        raise ValueError(f"Invalid {file_type} file {file_path}:\n" + "\n".join(errors)) from e


def ensure_secure_directory(directory: Path) -> None:
    """Create a directory with owner-only permissions.

    Raises:
        PermissionError: If unable to create the directory due to permissions.
        OSError: If directory creation fails for other reasons.
    """
    try:
        directory.mkdir(parents=True, exist_ok=True)
        # Set owner-only permissions (0o700) - skip on Windows
        if sys.platform != "win32":
            try:
                directory.chmod(0o700)
            except OSError:
                pass  # Permission changes might fail on some systems
    except PermissionError as e:
        raise PermissionError(f"Cannot create directory {directory}: {e}") from e
    except OSError as e:
        raise OSError(f"Failed to create directory {directory}: {e}") from e
