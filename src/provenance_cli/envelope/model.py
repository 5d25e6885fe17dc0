"""Envelope model: a subject plus assertions, possibly wrapped in layers.

An envelope is a tagged variant. Each case is its own frozen dataclass:

    Leaf                a plain CBOR value            #6.201(value)
    KnownValueEnvelope  a numeric well-known value    uint
    Wrapped             another envelope as subject   #6.200(content)
    AssertionEnvelope   a (predicate, object) pair    {predicate: object}
    Node                subject with assertions       [subject, assertion, ...]
    Elided              digest standing in for data   bytes(32)
    Encrypted           opaque ciphertext             #6.40002(...)
    Compressed          opaque compressed content     #6.40003(...)

The right column is the untagged CBOR content form. A tagged envelope is
`#6.200(content)`; a UR of type `envelope` carries the untagged content.

Wrapping is by value: unwrapping removes exactly one layer, and an envelope
can never contain itself, so layer traversal always terminates.
"""

from __future__ import annotations

__all__ = [
    "AssertionEnvelope",
    "Compressed",
    "Elided",
    "Encrypted",
    "Envelope",
    "KnownValueEnvelope",
    "Leaf",
    "Node",
    "Wrapped",
]

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from cbor2 import CBORTag

from provenance_cli.codec.cbor import CBORValue, freeze, thaw
from provenance_cli.constants import (
    DIGEST_LENGTH,
    TAG_COMPRESSED,
    TAG_ENCRYPTED,
    TAG_ENVELOPE,
    TAG_LEAF,
)
from provenance_cli.exceptions import EnvelopeError

if TYPE_CHECKING:
    from provenance_cli.registry.known_values import KnownValueRegistry


class Envelope:
    """Base class for all envelope cases."""

    # -------------------------------------------------------------------------
    # Decoding
    # -------------------------------------------------------------------------

    @staticmethod
    def from_tagged_cbor(value: CBORValue) -> Envelope:
        """Decode `#6.200(content)`.

        Raises:
            EnvelopeError: If the value is not tagged 200 or the content is
                not a valid envelope.
        """
        if not isinstance(value, CBORTag) or value.tag != TAG_ENVELOPE:
            raise EnvelopeError(f"expected CBOR tag {TAG_ENVELOPE} for a tagged envelope")
        return Envelope.from_untagged_cbor(value.value)

    @staticmethod
    def from_untagged_cbor(value: CBORValue) -> Envelope:
        """Decode untagged envelope content.

        Raises:
            EnvelopeError: If the value matches no envelope case.
        """
        if isinstance(value, CBORTag):
            if value.tag == TAG_LEAF:
                return Leaf(thaw(value.value))
            if value.tag == TAG_ENVELOPE:
                return Wrapped(Envelope.from_untagged_cbor(value.value))
            if value.tag == TAG_ENCRYPTED:
                return Encrypted(thaw(value.value))
            if value.tag == TAG_COMPRESSED:
                return Compressed(thaw(value.value))
            raise EnvelopeError(f"unexpected CBOR tag {value.tag} in envelope")

        if isinstance(value, bool):
            raise EnvelopeError("a boolean is not a valid envelope")
        if isinstance(value, int):
            if value < 0:
                raise EnvelopeError("known values must be non-negative")
            return KnownValueEnvelope(value)

        if isinstance(value, bytes):
            if len(value) != DIGEST_LENGTH:
                raise EnvelopeError(
                    f"elided envelope digest must be {DIGEST_LENGTH} bytes, got {len(value)}"
                )
            return Elided(value)

        if isinstance(value, Mapping):
            if len(value) != 1:
                raise EnvelopeError(f"assertion must be a single-entry map, got {len(value)} entries")
            ((predicate, obj),) = value.items()
            return AssertionEnvelope(
                Envelope.from_untagged_cbor(predicate),
                Envelope.from_untagged_cbor(obj),
            )

        if isinstance(value, (list, tuple)):
            if len(value) < 2:
                raise EnvelopeError("node must have a subject and at least one assertion")
            subject = Envelope.from_untagged_cbor(value[0])
            assertions = tuple(Envelope.from_untagged_cbor(item) for item in value[1:])
            for assertion in assertions:
                if not assertion.is_assertion_like:
                    raise EnvelopeError(
                        f"node element {type(assertion).__name__} is not an assertion"
                    )
            return Node(subject, assertions)

        raise EnvelopeError(f"{type(value).__name__} is not a valid envelope")

    # -------------------------------------------------------------------------
    # Encoding
    # -------------------------------------------------------------------------

    def to_untagged_cbor(self) -> CBORValue:
        raise NotImplementedError

    def to_tagged_cbor(self) -> CBORTag:
        return CBORTag(TAG_ENVELOPE, self.to_untagged_cbor())

    # -------------------------------------------------------------------------
    # Structure
    # -------------------------------------------------------------------------

    @property
    def subject(self) -> Envelope:
        """The envelope's subject (itself, unless it is a node)."""
        return self

    @property
    def assertions(self) -> tuple[Envelope, ...]:
        """Assertions attached to the subject (empty unless a node)."""
        return ()

    @property
    def is_assertion_like(self) -> bool:
        """True for cases that may appear in a node's assertion slots."""
        return False

    def as_assertion(self) -> AssertionEnvelope | None:
        """The (predicate, object) pair this envelope carries, if any."""
        return None

    def assertions_with_predicate(
        self,
        name: str,
        known_values: KnownValueRegistry,
    ) -> list[AssertionEnvelope]:
        """Find the assertions on this level whose predicate is `name`.

        A predicate matches if it is a text leaf equal to `name`, or a known
        value that the registry names `name`. Elided or encrypted assertions
        never match. Nested wrapped layers are not searched.
        """
        matches: list[AssertionEnvelope] = []
        for element in self.assertions:
            assertion = element.as_assertion()
            if assertion is not None and assertion.predicate_name(known_values) == name:
                matches.append(assertion)
        return matches

    def try_unwrap(self) -> Envelope:
        """Strip one wrapper layer.

        Returns:
            The wrapped envelope when this envelope's subject is a wrapper.

        Raises:
            EnvelopeError: If the subject is not wrapped.
        """
        subject = self.subject
        if isinstance(subject, Wrapped):
            return subject.inner
        raise EnvelopeError("envelope subject is not a wrapped envelope")

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @staticmethod
    def new(value: Envelope | CBORValue) -> Envelope:
        """Return `value` if it is already an envelope, else a leaf holding it."""
        if isinstance(value, Envelope):
            return value
        return Leaf(value)

    def wrap(self) -> Wrapped:
        return Wrapped(self)

    def add_assertion(self, predicate: Envelope | CBORValue, obj: Envelope | CBORValue) -> Node:
        """Return a node with one more assertion on this envelope's subject."""
        assertion = AssertionEnvelope(Envelope.new(predicate), Envelope.new(obj))
        return Node(self.subject, (*self.assertions, assertion))


@dataclass(frozen=True)
class Leaf(Envelope):
    value: Any

    def to_untagged_cbor(self) -> CBORValue:
        return CBORTag(TAG_LEAF, self.value)


@dataclass(frozen=True)
class KnownValueEnvelope(Envelope):
    value: int

    def to_untagged_cbor(self) -> CBORValue:
        return self.value


@dataclass(frozen=True)
class Wrapped(Envelope):
    inner: Envelope

    def to_untagged_cbor(self) -> CBORValue:
        return CBORTag(TAG_ENVELOPE, self.inner.to_untagged_cbor())


@dataclass(frozen=True)
class AssertionEnvelope(Envelope):
    predicate: Envelope
    object: Envelope

    @property
    def is_assertion_like(self) -> bool:
        return True

    def as_assertion(self) -> AssertionEnvelope:
        return self

    def predicate_name(self, known_values: KnownValueRegistry) -> str | None:
        """Name of the predicate: leaf text, or the name of a known value."""
        predicate = self.predicate.subject
        if isinstance(predicate, KnownValueEnvelope):
            return known_values.name_for_value(predicate.value)
        if isinstance(predicate, Leaf) and isinstance(predicate.value, str):
            return predicate.value
        return None

    def to_untagged_cbor(self) -> CBORValue:
        key = freeze(self.predicate.to_untagged_cbor())
        return {key: self.object.to_untagged_cbor()}


@dataclass(frozen=True)
class Node(Envelope):
    node_subject: Envelope
    node_assertions: tuple[Envelope, ...]

    @property
    def subject(self) -> Envelope:
        return self.node_subject

    @property
    def assertions(self) -> tuple[Envelope, ...]:
        return self.node_assertions

    @property
    def is_assertion_like(self) -> bool:
        # An assertion that itself carries assertions (e.g. a signed assertion)
        return isinstance(self.node_subject, AssertionEnvelope)

    def as_assertion(self) -> AssertionEnvelope | None:
        return self.node_subject.as_assertion()

    def to_untagged_cbor(self) -> CBORValue:
        return [
            self.node_subject.to_untagged_cbor(),
            *(assertion.to_untagged_cbor() for assertion in self.node_assertions),
        ]


@dataclass(frozen=True)
class Elided(Envelope):
    digest: bytes

    @property
    def is_assertion_like(self) -> bool:
        return True

    def to_untagged_cbor(self) -> CBORValue:
        return self.digest


@dataclass(frozen=True)
class Encrypted(Envelope):
    content: Any

    @property
    def is_assertion_like(self) -> bool:
        return True

    def to_untagged_cbor(self) -> CBORValue:
        return CBORTag(TAG_ENCRYPTED, self.content)


@dataclass(frozen=True)
class Compressed(Envelope):
    content: Any

    @property
    def is_assertion_like(self) -> bool:
        return True

    def to_untagged_cbor(self) -> CBORValue:
        return CBORTag(TAG_COMPRESSED, self.content)
