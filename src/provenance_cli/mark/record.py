"""Provenance mark records and their CBOR forms.

A provenance mark's untagged CBOR form is a two-element array:

    [resolution, message]
    message = key || obfuscate(key, chain_id || hash || seq || date || info)

key, chain_id and hash are each one link long. seq and date are fixed-width
big-endian fields whose size depends on the resolution; info is optional
deterministic CBOR filling the rest of the message:

    resolution  link  seq  date
    low            4    2     2   packed year (from 2023), month, day
    medium         8    4     4   seconds since 2001-01-01T00:00:00Z
    quartile      16    4     6   milliseconds since 2001-01-01T00:00:00Z
    high          32    4     6   milliseconds since 2001-01-01T00:00:00Z

The tagged form wraps the array in TAG_PROVENANCE_MARK; a UR of type
`provenance` carries the untagged form. Decoding then encoding a mark
reproduces its bytes exactly.

Mark generation, hash derivation, and chain validation belong to the mark
library that produces these records; this module only decodes and encodes
them.
"""

from __future__ import annotations

__all__ = ["ProvenanceRecord", "Resolution"]

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import IntEnum
from typing import Any

from cbor2 import CBORTag

from provenance_cli.codec.cbor import CBORValue, decode_cbor, encode_cbor
from provenance_cli.codec.ur import UR
from provenance_cli.constants import PROVENANCE_UR_TYPE, TAG_PROVENANCE_MARK
from provenance_cli.envelope.model import Envelope, Leaf
from provenance_cli.exceptions import CBORDecodeError, RecordShapeError
from provenance_cli.mark.obfuscation import obfuscate

REFERENCE_DATE = datetime(2001, 1, 1, tzinfo=timezone.utc)
_LOW_BASE_YEAR = 2023
_MAX_MILLISECONDS = 0xE5940A78A7FF


class Resolution(IntEnum):
    """Mark resolution; determines field widths and sequence range."""

    LOW = 0
    MEDIUM = 1
    QUARTILE = 2
    HIGH = 3

    @property
    def link_length(self) -> int:
        return {0: 4, 1: 8, 2: 16, 3: 32}[self.value]

    @property
    def seq_length(self) -> int:
        return 2 if self is Resolution.LOW else 4

    @property
    def date_length(self) -> int:
        return {0: 2, 1: 4, 2: 6, 3: 6}[self.value]

    @property
    def fixed_length(self) -> int:
        """Message length without info."""
        return self.link_length * 3 + self.seq_length + self.date_length

    @property
    def max_seq(self) -> int:
        return (1 << (8 * self.seq_length)) - 1

    def serialize_seq(self, seq: int) -> bytes:
        if not 0 <= seq <= self.max_seq:
            raise RecordShapeError(f"seq {seq} out of range for {self.name.lower()} resolution")
        return seq.to_bytes(self.seq_length, "big")

    def deserialize_seq(self, data: bytes) -> int:
        return int.from_bytes(data, "big")

    def serialize_date(self, date: datetime) -> bytes:
        """Encode a date at this resolution's precision (truncating)."""
        if date.tzinfo is None:
            raise RecordShapeError("mark date must be timezone-aware")
        if self is Resolution.LOW:
            utc = date.astimezone(timezone.utc)
            years = utc.year - _LOW_BASE_YEAR
            if not 0 <= years < 128:
                raise RecordShapeError(f"year {utc.year} out of range for low resolution")
            return (years << 9 | utc.month << 5 | utc.day).to_bytes(2, "big")

        if date < REFERENCE_DATE:
            raise RecordShapeError(f"mark date {date.isoformat()} is before 2001-01-01")
        if self is Resolution.MEDIUM:
            seconds = (date - REFERENCE_DATE) // timedelta(seconds=1)
            if seconds > 0xFFFFFFFF:
                raise RecordShapeError("mark date out of range for medium resolution")
            return seconds.to_bytes(4, "big")
        milliseconds = (date - REFERENCE_DATE) // timedelta(milliseconds=1)
        if milliseconds > _MAX_MILLISECONDS:
            raise RecordShapeError(f"mark date out of range for {self.name.lower()} resolution")
        return milliseconds.to_bytes(6, "big")

    def deserialize_date(self, data: bytes) -> datetime:
        value = int.from_bytes(data, "big")
        if self is Resolution.LOW:
            day, month, years = value & 0x1F, (value >> 5) & 0x0F, value >> 9
            try:
                return datetime(_LOW_BASE_YEAR + years, month, day, tzinfo=timezone.utc)
            except ValueError as e:
                raise RecordShapeError(f"invalid packed mark date: {e}") from e
        if self is Resolution.MEDIUM:
            return REFERENCE_DATE + timedelta(seconds=value)
        if value > _MAX_MILLISECONDS:
            raise RecordShapeError("mark date out of range")
        return REFERENCE_DATE + timedelta(milliseconds=value)


@dataclass(frozen=True)
class ProvenanceRecord:
    """A single provenance mark.

    The date is normalized to the resolution's precision on construction,
    so a record always encodes to the same message it was decoded from.

    Attributes:
        resolution: Mark resolution.
        key: Link key revealed by this mark.
        hash: Link hash committing to the next mark.
        chain_id: Identifier shared by every mark in a chain.
        seq: Position in the chain (0 for the genesis mark).
        date: Mark date (timezone-aware).
        info_bytes: Encoded side-channel CBOR payload, empty when absent.
    """

    resolution: Resolution
    key: bytes
    hash: bytes
    chain_id: bytes
    seq: int
    date: datetime
    info_bytes: bytes = field(default=b"")

    def __post_init__(self) -> None:
        length = self.resolution.link_length
        for name in ("key", "hash", "chain_id"):
            value = getattr(self, name)
            if len(value) != length:
                raise RecordShapeError(
                    f"{name} must be {length} bytes at {self.resolution.name.lower()} "
                    f"resolution, got {len(value)}"
                )
        self.resolution.serialize_seq(self.seq)
        date_bytes = self.resolution.serialize_date(self.date)
        object.__setattr__(self, "date", self.resolution.deserialize_date(date_bytes))
        if self.info_bytes:
            try:
                decode_cbor(self.info_bytes)
            except CBORDecodeError as e:
                raise RecordShapeError(f"mark info is not valid CBOR: {e}") from e

    @classmethod
    def with_info(cls, info: CBORValue, **fields: Any) -> ProvenanceRecord:
        """Build a record whose info field encodes `info`."""
        return cls(info_bytes=encode_cbor(info), **fields)

    @property
    def info(self) -> CBORValue | None:
        """Decoded info payload, or None."""
        if not self.info_bytes:
            return None
        return decode_cbor(self.info_bytes)

    @property
    def identifier(self) -> str:
        """Short hex identifier (first four bytes of the hash)."""
        return self.hash[:4].hex()

    @property
    def chain_id_hex(self) -> str:
        return self.chain_id.hex()

    @property
    def message(self) -> bytes:
        """Key followed by the obfuscated remainder of the mark."""
        payload = b"".join(
            (
                self.chain_id,
                self.hash,
                self.resolution.serialize_seq(self.seq),
                self.resolution.serialize_date(self.date),
                self.info_bytes,
            )
        )
        return self.key + obfuscate(self.key, payload)

    # -------------------------------------------------------------------------
    # Decoding
    # -------------------------------------------------------------------------

    @classmethod
    def from_message(cls, resolution: Resolution, message: bytes) -> ProvenanceRecord:
        """Split and restore a mark message.

        Raises:
            RecordShapeError: If the message is too short or a field is
                invalid.
        """
        if len(message) < resolution.fixed_length:
            raise RecordShapeError(
                f"mark message must be at least {resolution.fixed_length} bytes at "
                f"{resolution.name.lower()} resolution, got {len(message)}"
            )
        link = resolution.link_length
        key = message[:link]
        payload = obfuscate(key, message[link:])

        seq_start = 2 * link
        date_start = seq_start + resolution.seq_length
        info_start = date_start + resolution.date_length
        return cls(
            resolution=resolution,
            key=key,
            chain_id=payload[:link],
            hash=payload[link:seq_start],
            seq=resolution.deserialize_seq(payload[seq_start:date_start]),
            date=resolution.deserialize_date(payload[date_start:info_start]),
            info_bytes=payload[info_start:],
        )

    @classmethod
    def from_untagged_cbor(cls, value: CBORValue) -> ProvenanceRecord:
        """Decode the untagged `[resolution, message]` form.

        Raises:
            RecordShapeError: If the value does not have the mark's shape.
        """
        if not isinstance(value, (list, tuple)):
            raise RecordShapeError(f"expected a CBOR array, got {type(value).__name__}")
        if len(value) != 2:
            raise RecordShapeError(f"expected 2 fields, got {len(value)}")
        resolution_raw, message = value

        if isinstance(resolution_raw, bool) or not isinstance(resolution_raw, int):
            raise RecordShapeError("resolution must be an unsigned integer")
        try:
            resolution = Resolution(resolution_raw)
        except ValueError as e:
            raise RecordShapeError(f"unknown resolution {resolution_raw}") from e
        if not isinstance(message, bytes):
            raise RecordShapeError("mark message must be a byte string")
        return cls.from_message(resolution, message)

    @classmethod
    def from_tagged_cbor(cls, value: CBORValue) -> ProvenanceRecord:
        """Decode the tagged form.

        Raises:
            RecordShapeError: If the tag is missing or wrong, or the content
                does not have the mark's shape.
        """
        if not isinstance(value, CBORTag):
            raise RecordShapeError(f"expected CBOR tag {TAG_PROVENANCE_MARK}, value is untagged")
        if value.tag != TAG_PROVENANCE_MARK:
            raise RecordShapeError(f"expected CBOR tag {TAG_PROVENANCE_MARK}, found {value.tag}")
        return cls.from_untagged_cbor(value.value)

    @classmethod
    def from_envelope(cls, envelope: Envelope) -> ProvenanceRecord:
        """Extract a mark from an envelope whose subject is a leaf holding
        the tagged mark (the usual form of an assertion object)."""
        subject = envelope.subject
        if not isinstance(subject, Leaf):
            raise RecordShapeError(
                f"envelope subject is {type(subject).__name__}, expected a leaf"
            )
        return cls.from_tagged_cbor(subject.value)

    # -------------------------------------------------------------------------
    # Encoding
    # -------------------------------------------------------------------------

    def to_untagged_cbor(self) -> list[Any]:
        return [int(self.resolution), self.message]

    def to_tagged_cbor(self) -> CBORTag:
        return CBORTag(TAG_PROVENANCE_MARK, self.to_untagged_cbor())

    def to_envelope(self) -> Leaf:
        return Leaf(self.to_tagged_cbor())

    def to_ur(self) -> UR:
        return UR.new(PROVENANCE_UR_TYPE, self.to_untagged_cbor())

    def to_ur_string(self) -> str:
        return self.to_ur().to_string()

    def summary(self) -> dict[str, Any]:
        """JSON-friendly summary for reports."""
        return {
            "id": self.identifier,
            "chain_id": self.chain_id_hex,
            "seq": self.seq,
            "date": self.date.isoformat(),
            "resolution": self.resolution.name.lower(),
            "has_info": self.info is not None,
            "ur": self.to_ur_string(),
        }
