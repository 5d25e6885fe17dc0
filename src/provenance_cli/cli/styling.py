"""CLI output styling helpers.

- Cyan bold for labels
- Green for success messages (with checkmark)
- Red for error messages (with cross)
- Yellow for warnings
"""

from __future__ import annotations

__all__ = [
    "style_error",
    "style_label",
    "style_success",
    "style_warning",
]

import click


def style_label(label: str) -> str:
    """Style a label, appending a colon.

    Example:
        >>> click.echo(style_label("Config file") + f" {path}")
        Config file: /home/user/.config/provenance-cli/config.json
    """
    return click.style(f"{label}:", fg="cyan", bold=True)


def style_success(message: str) -> str:
    """Style a success message with checkmark."""
    return click.style(f"✓ {message}", fg="green")


def style_error(message: str) -> str:
    """Style an error message with cross mark.

    Example:
        >>> click.echo(style_error("UR type 'foo' is not registered"), err=True)
        ✗ UR type 'foo' is not registered
    """
    return click.style(f"✗ {message}", fg="red")


def style_warning(message: str) -> str:
    """Style a warning message in yellow bold."""
    return click.style(f"Warning: {message}", fg="yellow", bold=True)
