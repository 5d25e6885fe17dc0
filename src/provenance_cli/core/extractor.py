"""Provenance mark extraction from arbitrary URs.

A UR of type `provenance` is decoded directly. Any other UR must carry an
envelope; the envelope is searched level by level for a single
`provenance` assertion, stripping one wrapper layer at a time:

    level 0: [provenance assertion?] --none--> unwrap
    level 1: [provenance assertion?] --none--> unwrap
    ...
    no more layers -> NoProvenanceAssertionFoundError

More than one `provenance` assertion on a level is an error; the search
never picks one of several candidates and never looks past an ambiguous
level. Each iteration strips exactly one layer, so the loop is bounded by
the wrapping depth.
"""

from __future__ import annotations

__all__ = ["ArtifactExtractor", "ContainerUnwrapper", "UnwrapResult"]

import logging
from dataclasses import dataclass

from provenance_cli.codec.ur import UR
from provenance_cli.constants import APP_NAME, PROVENANCE_PREDICATE, PROVENANCE_UR_TYPE
from provenance_cli.envelope.model import Envelope
from provenance_cli.exceptions import (
    AmbiguousProvenanceAssertionError,
    EnvelopeError,
    NoProvenanceAssertionFoundError,
    RecordDecodeError,
    RecordShapeError,
    TokenParseError,
    UnsupportedTokenShapeError,
    URError,
)
from provenance_cli.mark.record import ProvenanceRecord
from provenance_cli.registry.known_values import KnownValueRegistry

_logger = logging.getLogger(f"{APP_NAME}.extractor")


@dataclass(frozen=True)
class UnwrapResult:
    """A located provenance mark.

    Attributes:
        record: The decoded mark.
        layers: Number of wrapper layers stripped before it was found.
    """

    record: ProvenanceRecord
    layers: int


class ContainerUnwrapper:
    """Searches an envelope's wrapper layers for one `provenance` assertion."""

    def __init__(
        self,
        known_values: KnownValueRegistry,
        predicate: str = PROVENANCE_PREDICATE,
    ) -> None:
        self._known_values = known_values
        self._predicate = predicate

    def locate(self, document: Envelope) -> UnwrapResult:
        """Find and decode the mark carried by `document`.

        Raises:
            AmbiguousProvenanceAssertionError: If a level has several
                `provenance` assertions.
            RecordDecodeError: If the assertion object is not a mark.
            NoProvenanceAssertionFoundError: If wrapping is exhausted
                without finding an assertion.
        """
        current = document
        layers = 0
        while True:
            matches = current.assertions_with_predicate(self._predicate, self._known_values)
            if len(matches) > 1:
                raise AmbiguousProvenanceAssertionError(len(matches))
            if matches:
                try:
                    record = ProvenanceRecord.from_envelope(matches[0].object)
                except RecordShapeError as e:
                    raise RecordDecodeError(e) from e
                return UnwrapResult(record=record, layers=layers)
            try:
                current = current.try_unwrap()
            except EnvelopeError as e:
                raise NoProvenanceAssertionFoundError() from e
            layers += 1


class ArtifactExtractor:
    """Recovers exactly one provenance mark from a UR string.

    Usage:
        extractor = ArtifactExtractor(known_values)
        record = extractor.extract("ur:xid/...")
    """

    def __init__(self, known_values: KnownValueRegistry) -> None:
        self._unwrapper = ContainerUnwrapper(known_values)

    def extract(self, token_text: str) -> ProvenanceRecord:
        """Extract the provenance mark carried by a UR.

        Raises:
            TokenParseError: If the text is not a well-formed UR.
            RecordDecodeError: If a mark payload cannot be decoded.
            UnsupportedTokenShapeError: If the UR is neither a mark nor an
                envelope.
            AmbiguousProvenanceAssertionError: If an envelope level has
                several `provenance` assertions.
            NoProvenanceAssertionFoundError: If no level has one.
        """
        return self.extract_with_layers(token_text).record

    def extract_with_layers(self, token_text: str) -> UnwrapResult:
        """Like extract(), also reporting how many layers were stripped."""
        token = token_text.strip()
        try:
            ur = UR.parse(token)
        except URError as e:
            raise TokenParseError(token, e) from e

        if ur.ur_type == PROVENANCE_UR_TYPE:
            try:
                record = ProvenanceRecord.from_untagged_cbor(ur.cbor)
            except RecordShapeError as e:
                raise RecordDecodeError(e) from e
            _logger.debug({"event": "mark_extracted", "ur_type": ur.ur_type, "layers": 0})
            return UnwrapResult(record=record, layers=0)

        try:
            document = Envelope.from_untagged_cbor(ur.cbor)
        except EnvelopeError as e:
            raise UnsupportedTokenShapeError(ur.ur_type, e) from e

        result = self._unwrapper.locate(document)
        _logger.debug(
            {
                "event": "mark_extracted",
                "ur_type": ur.ur_type,
                "layers": result.layers,
                "seq": result.record.seq,
            }
        )
        return result
