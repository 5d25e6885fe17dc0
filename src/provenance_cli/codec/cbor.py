"""CBOR helpers built on cbor2.

Decoding is strict: the input must hold exactly one data item with no
trailing bytes, and that item must be deterministically encoded (shortest
heads, definite lengths, sorted unique map keys, NFC text, reduced floats).
Encoding is canonical so that equal values always produce equal bytes.

cbor2 turns some well-known tags (dates, bignums, self-describe) into native
Python values. Code that must see the exact tag or the exact bytes works on
the encoded data instead: `outer_tag` reads the tag from the item head, and
`prefix_tag` applies one without re-encoding the content.
"""

from __future__ import annotations

__all__ = [
    "CBORTag",
    "CBORValue",
    "decode_cbor",
    "encode_cbor",
    "freeze",
    "outer_tag",
    "prefix_tag",
    "thaw",
]

import io
import math
import struct
import unicodedata
from collections.abc import Mapping
from datetime import timezone
from typing import Any

import cbor2
from cbor2 import CBORTag

from provenance_cli.exceptions import CBORDecodeError

# Any value cbor2 can produce or consume
CBORValue = Any

_MAJOR_BYTES = 2
_MAJOR_TEXT = 3
_MAJOR_ARRAY = 4
_MAJOR_MAP = 5
_MAJOR_TAG = 6
_MAJOR_SIMPLE = 7

# Smallest argument each extended head width may carry
_MIN_ARGUMENT = {24: 24, 25: 0x100, 26: 0x10000, 27: 0x100000000}

# false, true, null
_ALLOWED_SIMPLE = (20, 21, 22)
_CANONICAL_NAN = b"\xf9\x7e\x00"


def decode_cbor(data: bytes) -> CBORValue:
    """Decode exactly one deterministically encoded CBOR data item.

    Args:
        data: Encoded bytes.

    Returns:
        The decoded value. Tags cbor2 has no semantic decoder for are
        returned as CBORTag.

    Raises:
        CBORDecodeError: If the bytes are empty, malformed, followed by
            trailing data, or not in deterministic form.
    """
    if not data:
        raise CBORDecodeError("empty CBOR data")
    decoder = cbor2.CBORDecoder(io.BytesIO(data))
    try:
        value = decoder.decode()
    except cbor2.CBORDecodeError as e:
        raise CBORDecodeError(f"malformed CBOR: {e}") from e
    # The decoder reads ahead, so ask it (not the stream) for leftover bytes
    try:
        extra = decoder.read(1)
    except cbor2.CBORDecodeEOF:
        extra = b""
    if extra:
        raise CBORDecodeError("trailing data after CBOR item")
    # Nesting depth is already bounded by the decoder
    _check_item(data, 0)
    return value


def encode_cbor(value: CBORValue) -> bytes:
    """Encode a value as canonical CBOR.

    Datetimes are written as epoch timestamps (tag 1).
    """
    return cbor2.dumps(
        value,
        canonical=True,
        datetime_as_timestamp=True,
        timezone=timezone.utc,
    )


def freeze(value: CBORValue) -> CBORValue:
    """Return a hashable equivalent of a value, usable as a map key.

    Arrays become tuples and maps become cbor2's immutable mapping, exactly
    as the decoder produces them for map keys.
    """
    return cbor2.loads(encode_cbor(value), immutable=True)


def thaw(value: CBORValue) -> CBORValue:
    """Return a value with every array as a list and every map as a dict.

    The decoder hands back tuples and immutable mappings in some positions;
    thawing gives decoded and hand-built values the same shape. Map keys
    are left hashable.
    """
    if isinstance(value, CBORTag):
        return CBORTag(value.tag, thaw(value.value))
    if isinstance(value, (list, tuple)):
        return [thaw(item) for item in value]
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    return value


def outer_tag(data: bytes) -> int | None:
    """Return the tag of an encoded item, or None if it is untagged."""
    if not data:
        raise CBORDecodeError("empty CBOR data")
    major, _, argument, _ = _read_head(data, 0)
    return argument if major == _MAJOR_TAG else None


def prefix_tag(tag: int, data: bytes) -> bytes:
    """Tag an encoded item, leaving its bytes untouched."""
    return _encode_head(_MAJOR_TAG, tag) + data


def _encode_head(major: int, argument: int) -> bytes:
    if argument < 24:
        return bytes([major << 5 | argument])
    for info, fmt in ((24, ">B"), (25, ">H"), (26, ">I"), (27, ">Q")):
        if argument < 1 << (8 * struct.calcsize(fmt)):
            return bytes([major << 5 | info]) + struct.pack(fmt, argument)
    raise ValueError(f"CBOR argument {argument} is too large")


def _read_head(data: bytes, offset: int) -> tuple[int, int, int, int]:
    """Return (major type, additional info, argument, offset after head)."""
    if offset >= len(data):
        raise CBORDecodeError("truncated CBOR item")
    initial = data[offset]
    major, info = initial >> 5, initial & 0x1F
    offset += 1
    if info < 24:
        return major, info, info, offset
    if info > 27:
        raise CBORDecodeError("indefinite-length CBOR is not deterministic")
    size = 1 << (info - 24)
    if offset + size > len(data):
        raise CBORDecodeError("truncated CBOR item")
    argument = int.from_bytes(data[offset : offset + size], "big")
    return major, info, argument, offset + size


def _check_item(data: bytes, offset: int) -> int:
    """Check one item is deterministically encoded; return the offset after it."""
    start = offset
    major, info, argument, offset = _read_head(data, offset)

    if major == _MAJOR_SIMPLE:
        _check_simple(data[start:offset], info, argument)
        return offset
    if info >= 24 and argument < _MIN_ARGUMENT[info]:
        raise CBORDecodeError("CBOR integer or length not in shortest form")

    if major in (_MAJOR_BYTES, _MAJOR_TEXT):
        end = offset + argument
        if end > len(data):
            raise CBORDecodeError("truncated CBOR item")
        if major == _MAJOR_TEXT:
            text = data[offset:end].decode("utf-8")
            if not unicodedata.is_normalized("NFC", text):
                raise CBORDecodeError("CBOR text is not in Unicode NFC form")
        return end
    if major == _MAJOR_ARRAY:
        for _ in range(argument):
            offset = _check_item(data, offset)
        return offset
    if major == _MAJOR_MAP:
        previous_key = None
        for _ in range(argument):
            key_start = offset
            offset = _check_item(data, offset)
            key = data[key_start:offset]
            if previous_key is not None and key <= previous_key:
                raise CBORDecodeError("CBOR map keys are not unique and in ascending order")
            previous_key = key
            offset = _check_item(data, offset)
        return offset
    if major == _MAJOR_TAG:
        return _check_item(data, offset)
    return offset


def _check_simple(head: bytes, info: int, argument: int) -> None:
    if info < 24:
        if argument not in _ALLOWED_SIMPLE:
            raise CBORDecodeError(f"CBOR simple value {argument} is not allowed")
        return
    if info == 24:
        raise CBORDecodeError("CBOR simple value is not in shortest form")

    value = struct.unpack({25: ">e", 26: ">f", 27: ">d"}[info], head[1:])[0]
    if math.isnan(value):
        if head != _CANONICAL_NAN:
            raise CBORDecodeError("CBOR NaN is not in canonical form")
        return
    if value.is_integer() and -(2**63) <= value < 2**64:
        raise CBORDecodeError("CBOR float with an integral value must be an integer")
    for narrower in (">e", ">f")[: info - 25]:
        try:
            if struct.unpack(narrower, struct.pack(narrower, value))[0] == value:
                raise CBORDecodeError("CBOR float not in shortest form")
        except OverflowError:
            continue
