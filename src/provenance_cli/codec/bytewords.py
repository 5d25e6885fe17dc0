"""Bytewords minimal encoding.

Each byte maps to one of 256 four-letter words; the minimal form keeps only
the first and last letter of each word. A CRC-32 of the payload (big-endian)
is appended before encoding and verified on decode.
"""

from __future__ import annotations

__all__ = ["decode_minimal", "encode_minimal"]

import struct
import zlib

from provenance_cli.exceptions import URError

_WORDS = (
    "able acid also apex aqua arch atom aunt away axis back bald barn belt beta bias "
    "blue body brag brew bulb buzz calm cash cats chef city claw code cola cook cost "
    "crux curl cusp cyan dark data days deli dice diet door down draw drop drum dull "
    "duty each easy echo edge epic even exam exit eyes fact fair fern figs film fish "
    "fizz flap flew flux foxy free frog fuel fund gala game gear gems gift girl glow "
    "good gray grim guru gush gyro half hang hard hawk heat help high hill holy hope "
    "horn huts iced idea idle inch inky into iris iron item jade jazz join jolt jowl "
    "judo jugs jump junk jury keep keno kept keys kick kiln king kite kiwi knob lamb "
    "lava lazy leaf legs liar limp lion list logo loud love luau luck lung main many "
    "math maze memo menu meow mild mint miss monk nail navy need news next noon note "
    "numb obey oboe omit onyx open oval owls paid part peck play plus poem pool pose "
    "puff puma purr quad quiz race ramp real redo rich road rock roof ruby ruin runs "
    "rust safe saga scar sets silk skew slot soap solo song stub surf swan taco task "
    "taxi tent tied time tiny toil tomb toys trip tuna twin ugly undo unit urge user "
    "vast very veto vial vibe view visa void vows wall wand warm wasp wave waxy webs "
    "what when whiz wolf work yank yawn yell yoga yurt zaps zero zest zinc zone zoom"
).split()

_MINIMAL = tuple(word[0] + word[3] for word in _WORDS)
_MINIMAL_INDEX = {pair: index for index, pair in enumerate(_MINIMAL)}

_CHECKSUM_LENGTH = 4


def encode_minimal(data: bytes) -> str:
    """Encode bytes as minimal bytewords with a trailing CRC-32."""
    body = data + struct.pack(">I", zlib.crc32(data))
    return "".join(_MINIMAL[b] for b in body)


def decode_minimal(text: str) -> bytes:
    """Decode minimal bytewords and verify the trailing CRC-32.

    Args:
        text: Lowercase minimal bytewords.

    Returns:
        The payload without its checksum.

    Raises:
        URError: If the text has odd length, contains an unknown word, is too
            short to carry a checksum, or the checksum does not match.
    """
    if len(text) % 2:
        raise URError("bytewords body has odd length")
    body = bytearray()
    for i in range(0, len(text), 2):
        pair = text[i : i + 2]
        index = _MINIMAL_INDEX.get(pair)
        if index is None:
            raise URError(f"invalid bytewords word {pair!r}")
        body.append(index)
    if len(body) <= _CHECKSUM_LENGTH:
        raise URError("bytewords body too short")
    payload = bytes(body[:-_CHECKSUM_LENGTH])
    (expected,) = struct.unpack(">I", body[-_CHECKSUM_LENGTH:])
    if zlib.crc32(payload) != expected:
        raise URError("bytewords checksum mismatch")
    return payload
