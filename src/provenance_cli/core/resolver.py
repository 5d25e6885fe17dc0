"""Info payload resolution.

Turns a user-supplied `--info` string into a single tagged CBOR item
suitable for a mark's `info` field. Two textual forms compete:

- Hex-encoded CBOR (optional `0x` prefix). Already self-typed, so a tag
  override is rejected.
- A UR. The UR's type name determines the CBOR tag via the tag registry,
  or via an explicit override when the type is not registered. Never both.

Hex is tried first unless the text carries the `ur:` scheme. When hex fails
the UR interpretation is attempted, and if that also fails both causes are
reported together. A `ur:` string is never retried as hex.

Payload bytes are carried through exactly as given; tags are read from the
encoded item head so that tags cbor2 decodes natively still count.
"""

from __future__ import annotations

__all__ = ["PayloadTagResolver", "ResolvedPayload"]

import logging
from dataclasses import dataclass

from provenance_cli.codec.cbor import CBORValue, decode_cbor, outer_tag, prefix_tag
from provenance_cli.codec.hex import decode_hex
from provenance_cli.codec.ur import UR, has_ur_scheme
from provenance_cli.constants import APP_NAME
from provenance_cli.exceptions import (
    BothDecodeAttemptsFailedError,
    CBORDecodeError,
    ConflictingTagSourceError,
    EmptyPayloadError,
    HexDecodeError,
    OverrideNotApplicableError,
    PayloadError,
    TagMismatchError,
    UnknownTypeNeedsOverrideError,
    URError,
)
from provenance_cli.registry.tags import TagRegistry

_logger = logging.getLogger(f"{APP_NAME}.resolver")


@dataclass(frozen=True)
class ResolvedPayload:
    """A resolved info payload.

    Attributes:
        data: The single CBOR item, deterministically encoded.
        tag: Its outermost tag (None only for untagged hex input).
    """

    data: bytes
    tag: int | None

    @property
    def value(self) -> CBORValue:
        return decode_cbor(self.data)

    def hex(self) -> str:
        return self.data.hex()


class PayloadTagResolver:
    """Resolves info payloads against a read-only tag registry.

    Holds no state besides the registry reference; safe to reuse.

    Usage:
        resolver = PayloadTagResolver(registry)
        payload = resolver.resolve("ur:seed/...")
    """

    def __init__(self, registry: TagRegistry) -> None:
        self._registry = registry

    def resolve(self, raw: str, tag_override: int | None = None) -> ResolvedPayload:
        """Resolve an info payload into one tagged CBOR item.

        Args:
            raw: Hex-encoded CBOR or UR text.
            tag_override: CBOR tag for a UR type that is not registered.

        Returns:
            The hex input's bytes unchanged, or the UR payload carrying its
            resolved tag.

        Raises:
            EmptyPayloadError: If the payload is blank.
            OverrideNotApplicableError: If an override accompanies hex input.
            BothDecodeAttemptsFailedError: If neither hex nor UR decoding
                succeeded for non-`ur:` input.
            ConflictingTagSourceError: If an override accompanies a
                registered UR type.
            UnknownTypeNeedsOverrideError: If the UR type is unregistered and
                no override was given.
            TagMismatchError: If the UR payload is tagged with a different tag.
            URError: If `ur:` input is malformed.
        """
        trimmed = raw.strip()
        if not trimmed:
            raise EmptyPayloadError()

        if has_ur_scheme(trimmed):
            return self._resolve_ur(trimmed, tag_override)

        try:
            data = decode_hex(trimmed)
            decode_cbor(data)
        except (HexDecodeError, CBORDecodeError) as hex_error:
            _logger.debug({"event": "info_hex_rejected", "reason": str(hex_error)})
            try:
                return self._resolve_ur(trimmed, tag_override)
            except (URError, PayloadError) as token_error:
                raise BothDecodeAttemptsFailedError(hex_error, token_error) from token_error

        if tag_override is not None:
            raise OverrideNotApplicableError(tag_override)
        payload = ResolvedPayload(data=data, tag=outer_tag(data))
        _logger.debug({"event": "info_resolved", "source": "hex", "tag": payload.tag})
        return payload

    def _resolve_ur(self, text: str, tag_override: int | None) -> ResolvedPayload:
        ur = UR.parse(text)
        type_name = ur.ur_type
        expected = self._resolve_tag(type_name, tag_override)
        payload = _ensure_tag(ur.data, expected, type_name)
        _logger.debug(
            {
                "event": "info_resolved",
                "source": "ur",
                "ur_type": type_name,
                "tag": expected,
                "tag_source": "override" if tag_override is not None else "registry",
            }
        )
        return payload

    def _resolve_tag(self, type_name: str, tag_override: int | None) -> int:
        registered_tag = self._registry.tag_for_name(type_name)
        if registered_tag is not None and tag_override is not None:
            raise ConflictingTagSourceError(type_name, registered_tag, tag_override)
        if registered_tag is not None:
            return registered_tag
        if tag_override is not None:
            return tag_override
        raise UnknownTypeNeedsOverrideError(type_name)


def _ensure_tag(data: bytes, expected: int, type_name: str) -> ResolvedPayload:
    """Check an existing tag, or apply `expected` to an untagged item."""
    found = outer_tag(data)
    if found is None:
        return ResolvedPayload(data=prefix_tag(expected, data), tag=expected)
    if found != expected:
        raise TagMismatchError(type_name, found, expected)
    return ResolvedPayload(data=data, tag=found)
