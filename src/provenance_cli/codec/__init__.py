"""Wire codecs: hex, CBOR, bytewords, and UR."""

from provenance_cli.codec.cbor import (
    CBORTag,
    CBORValue,
    decode_cbor,
    encode_cbor,
    freeze,
    outer_tag,
    prefix_tag,
    thaw,
)
from provenance_cli.codec.hex import decode_hex, encode_hex
from provenance_cli.codec.ur import UR, has_ur_scheme

__all__ = [
    "CBORTag",
    "CBORValue",
    "UR",
    "decode_cbor",
    "decode_hex",
    "encode_cbor",
    "encode_hex",
    "freeze",
    "has_ur_scheme",
    "outer_tag",
    "prefix_tag",
    "thaw",
]
