"""Mark payload obfuscation.

Everything in a mark's message after the link key is XORed with a ChaCha20
keystream. The cipher key is HKDF-SHA256 of the link key (empty salt and
info); the 12-byte nonce is the last 12 bytes of that cipher key in reverse
order. The keystream starts at block 0, so applying the function twice
returns the input.
"""

from __future__ import annotations

__all__ = ["obfuscate"]

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

_KEY_LENGTH = 32
_NONCE_LENGTH = 12
# ChaCha20 in cryptography takes a 16-byte nonce: a little-endian block
# counter followed by the 12-byte nonce
_INITIAL_COUNTER = b"\x00\x00\x00\x00"


def obfuscate(key: bytes, message: bytes) -> bytes:
    """Obfuscate (or restore) `message` under a mark's link key."""
    if not message:
        return message
    cipher_key = HKDF(
        algorithm=hashes.SHA256(),
        length=_KEY_LENGTH,
        salt=None,
        info=b"",
    ).derive(key)
    nonce = cipher_key[::-1][:_NONCE_LENGTH]
    cipher = Cipher(algorithms.ChaCha20(cipher_key, _INITIAL_COUNTER + nonce), mode=None)
    encryptor = cipher.encryptor()
    return encryptor.update(message) + encryptor.finalize()
