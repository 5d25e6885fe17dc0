"""Strict hex decoding."""

from __future__ import annotations

__all__ = ["decode_hex", "encode_hex"]

import re

from provenance_cli.exceptions import HexDecodeError

_HEX_PATTERN = re.compile(r"[0-9a-fA-F]*")


def decode_hex(text: str) -> bytes:
    """Decode a hex string, tolerating an optional `0x` prefix.

    Unlike bytes.fromhex(), embedded whitespace is rejected.

    Args:
        text: Hex string (surrounding whitespace is trimmed).

    Returns:
        Decoded bytes.

    Raises:
        HexDecodeError: If the string is empty, has odd length, or contains
            a non-hex character.
    """
    trimmed = text.strip()
    source = trimmed[2:] if trimmed.startswith("0x") else trimmed
    if not source:
        raise HexDecodeError("empty hex string")
    if not _HEX_PATTERN.fullmatch(source):
        bad = next(c for c in source if c not in "0123456789abcdefABCDEF")
        raise HexDecodeError(f"invalid character {bad!r} in hex string")
    if len(source) % 2:
        raise HexDecodeError(f"odd number of hex digits ({len(source)})")
    return bytes.fromhex(source)


def encode_hex(data: bytes) -> str:
    """Encode bytes as lowercase hex without prefix."""
    return data.hex()
