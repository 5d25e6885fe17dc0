"""Custom exceptions for provenance-cli.

This module contains all custom exceptions used throughout the package.
Exceptions are organized into three categories:

Codec Errors (low-level, chained as causes):
    - HexDecodeError: Input is not valid hex
    - CBORDecodeError: Bytes are not exactly one well-formed CBOR item
    - URError: Text is not a well-formed single-part UR
    - EnvelopeError: CBOR does not describe an envelope
    - RecordShapeError: CBOR does not describe a provenance mark

Payload Errors (info payload resolution):
    - EmptyPayloadError, OverrideNotApplicableError,
      BothDecodeAttemptsFailedError, ConflictingTagSourceError,
      UnknownTypeNeedsOverrideError, TagMismatchError

Extraction Errors (provenance mark extraction):
    - TokenParseError, RecordDecodeError, UnsupportedTokenShapeError,
      AmbiguousProvenanceAssertionError, NoProvenanceAssertionFoundError

Usage:
    from provenance_cli.exceptions import PayloadError, ExtractionError
"""

from __future__ import annotations

__all__ = [
    "AmbiguousProvenanceAssertionError",
    "BothDecodeAttemptsFailedError",
    "CBORDecodeError",
    "ConfigurationError",
    "ConflictingTagSourceError",
    "EmptyPayloadError",
    "EnvelopeError",
    "ExtractionError",
    "HexDecodeError",
    "NoProvenanceAssertionFoundError",
    "OverrideNotApplicableError",
    "PayloadError",
    "ProvenanceCliError",
    "RecordDecodeError",
    "RecordShapeError",
    "TagMismatchError",
    "TokenParseError",
    "URError",
    "UnknownTypeNeedsOverrideError",
    "UnsupportedTokenShapeError",
]


class ProvenanceCliError(Exception):
    """Base class for all provenance-cli errors."""


# =============================================================================
# Codec Errors
# =============================================================================


class HexDecodeError(ProvenanceCliError, ValueError):
    """Input is not a valid hex string."""


class CBORDecodeError(ProvenanceCliError, ValueError):
    """Bytes are not exactly one well-formed CBOR data item."""


class URError(ProvenanceCliError, ValueError):
    """Text is not a well-formed single-part UR string.

    Raised for a missing scheme, an invalid type name, a bad bytewords body,
    a checksum mismatch, or a multi-part UR.
    """


class EnvelopeError(ProvenanceCliError, ValueError):
    """CBOR value does not describe a valid envelope, or an envelope
    operation (such as unwrapping) does not apply to it."""


class RecordShapeError(ProvenanceCliError, ValueError):
    """CBOR value does not have the shape of a provenance mark."""


class ConfigurationError(ProvenanceCliError):
    """Configuration is invalid or cannot be loaded.

    Raised when:
    - An explicitly requested config file does not exist
    - Config file contains invalid JSON
    - Config file fails Pydantic validation
    - A configured tag registration contradicts a built-in one

    Exit code 16 indicates configuration failure.
    """

    exit_code = 16
    failure_type = "configuration_failure"


# =============================================================================
# Payload Errors (info payload resolution)
# =============================================================================


class PayloadError(ProvenanceCliError):
    """Base class for info payload resolution failures."""


class EmptyPayloadError(PayloadError):
    """Payload is empty after trimming whitespace."""

    def __init__(self) -> None:
        super().__init__("info payload must not be empty")


class OverrideNotApplicableError(PayloadError):
    """A tag override was supplied for a hex payload.

    Hex payloads are already self-typed; overrides only apply to URs.
    """

    def __init__(self, tag_override: int) -> None:
        self.tag_override = tag_override
        super().__init__(
            f"--info-tag ({tag_override}) is only valid when the payload is a UR"
        )


class BothDecodeAttemptsFailedError(PayloadError):
    """Payload parsed neither as hex CBOR nor as a UR.

    Attributes:
        hex_error: Why the hex interpretation was rejected.
        token_error: Why the UR interpretation was rejected.
    """

    def __init__(self, hex_error: Exception, token_error: Exception) -> None:
        self.hex_error = hex_error
        self.token_error = token_error
        super().__init__(
            f"failed to parse info payload as hex ({hex_error}) or UR ({token_error})"
        )


class ConflictingTagSourceError(PayloadError):
    """A tag override was supplied for a UR type with a registered tag."""

    def __init__(self, type_name: str, registered_tag: int, tag_override: int) -> None:
        self.type_name = type_name
        self.registered_tag = registered_tag
        self.tag_override = tag_override
        super().__init__(
            f"UR type '{type_name}' has a known CBOR tag ({registered_tag}); "
            f"--info-tag must not be supplied"
        )


class UnknownTypeNeedsOverrideError(PayloadError):
    """UR type is not registered and no tag override was supplied."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(
            f"UR type '{type_name}' is not registered; "
            f"supply --info-tag with the CBOR tag value"
        )


class TagMismatchError(PayloadError):
    """UR payload carries a CBOR tag different from the resolved one."""

    def __init__(self, type_name: str, found: int, expected: int) -> None:
        self.type_name = type_name
        self.found = found
        self.expected = expected
        super().__init__(
            f"UR type '{type_name}' encodes CBOR tag {found} but {expected} was expected"
        )


# =============================================================================
# Extraction Errors (provenance mark extraction)
# =============================================================================


class ExtractionError(ProvenanceCliError):
    """Base class for provenance mark extraction failures."""


class TokenParseError(ExtractionError):
    """Input text is not a well-formed UR."""

    def __init__(self, token: str, reason: Exception) -> None:
        self.token = token
        self.reason = reason
        super().__init__(f"failed to parse UR '{token}': {reason}")


class RecordDecodeError(ExtractionError):
    """Provenance mark payload could not be decoded."""

    def __init__(self, reason: Exception) -> None:
        self.reason = reason
        super().__init__(f"failed to decode provenance mark: {reason}")


class UnsupportedTokenShapeError(ExtractionError):
    """UR is neither a provenance mark nor an envelope."""

    def __init__(self, type_name: str, reason: Exception) -> None:
        self.type_name = type_name
        self.reason = reason
        super().__init__(
            f"UR type '{type_name}' is neither a provenance mark nor an envelope: {reason}"
        )


class AmbiguousProvenanceAssertionError(ExtractionError):
    """An envelope level carries more than one `provenance` assertion."""

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(
            f"envelope contains {count} 'provenance' assertions; expected exactly one"
        )


class NoProvenanceAssertionFoundError(ExtractionError):
    """No `provenance` assertion at any level of the envelope."""

    def __init__(self) -> None:
        super().__init__("envelope does not contain a 'provenance' assertion")
