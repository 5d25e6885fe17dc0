"""Uniform Resource (UR) codec.

A UR is a compact, self-describing text encoding of a CBOR payload:

    ur:<type>/<minimal bytewords of cbor + crc32>

The `ur:` scheme and the bytewords body are case-insensitive (URs are often
upper-cased for QR codes); the text is folded to lowercase before decoding,
and the resulting type name is matched exactly against registries. By
convention the payload omits the CBOR tag implied by the type.

Only single-part URs are supported.
"""

from __future__ import annotations

__all__ = ["UR", "has_ur_scheme"]

import re
from dataclasses import dataclass, field

from provenance_cli.codec.bytewords import decode_minimal, encode_minimal
from provenance_cli.codec.cbor import CBORValue, decode_cbor, encode_cbor
from provenance_cli.constants import UR_SCHEME
from provenance_cli.exceptions import CBORDecodeError, URError

_TYPE_PATTERN = re.compile(r"[a-z0-9-]+")
_SEQUENCE_PATTERN = re.compile(r"\d+-\d+")


def has_ur_scheme(text: str) -> bool:
    """Return True if the text starts with `ur:`, ignoring case."""
    return text[: len(UR_SCHEME)].lower() == UR_SCHEME


@dataclass(frozen=True)
class UR:
    """A decoded single-part UR.

    Attributes:
        ur_type: Lowercase type name (e.g. "envelope", "provenance").
        cbor: Decoded CBOR payload.
        data: Payload bytes exactly as carried by the UR.
    """

    ur_type: str
    cbor: CBORValue = field(compare=False)
    data: bytes

    @classmethod
    def new(cls, ur_type: str, cbor: CBORValue) -> "UR":
        """Build a UR from a type name and a CBOR value."""
        if not _TYPE_PATTERN.fullmatch(ur_type):
            raise URError(f"invalid UR type {ur_type!r}")
        return cls(ur_type=ur_type, cbor=cbor, data=encode_cbor(cbor))

    @classmethod
    def parse(cls, text: str) -> "UR":
        """Parse UR text.

        Args:
            text: UR string (surrounding whitespace is trimmed).

        Returns:
            The decoded UR.

        Raises:
            URError: If the scheme, type, or body is malformed, the checksum
                does not match, the UR is multi-part, or the payload is not
                well-formed CBOR.
        """
        lowered = text.strip().lower()
        if not has_ur_scheme(lowered):
            raise URError("missing 'ur:' scheme")
        path = lowered[len(UR_SCHEME) :]
        components = path.split("/")
        if len(components) < 2:
            raise URError("missing UR type or body")
        ur_type = components[0]
        if not _TYPE_PATTERN.fullmatch(ur_type):
            raise URError(f"invalid UR type {ur_type!r}")
        if len(components) == 3 and _SEQUENCE_PATTERN.fullmatch(components[1]):
            raise URError("multi-part URs are not supported")
        if len(components) != 2:
            raise URError("unexpected path components in UR")
        body = components[1]
        if not body:
            raise URError("empty UR body")
        data = decode_minimal(body)
        try:
            cbor = decode_cbor(data)
        except CBORDecodeError as e:
            raise URError(f"UR payload is not valid CBOR: {e}") from e
        return cls(ur_type=ur_type, cbor=cbor, data=data)

    def to_string(self) -> str:
        """Serialize as lowercase UR text."""
        return f"{UR_SCHEME}{self.ur_type}/{encode_minimal(self.data)}"

    def __str__(self) -> str:
        return self.to_string()
