"""Envelope model (subject, assertions, wrapper layers)."""

from provenance_cli.envelope.model import (
    AssertionEnvelope,
    Compressed,
    Elided,
    Encrypted,
    Envelope,
    KnownValueEnvelope,
    Leaf,
    Node,
    Wrapped,
)

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
