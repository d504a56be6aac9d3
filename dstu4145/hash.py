"""
Hash glue for DSTU 4145 signing.

The protocol consumes a digest, never the message itself.  Callers may
hash with anything ``hashlib`` offers; the message-level API defaults to
SHA3-512.  Digests reach the field through ``hash_to_field`` and signed
values leave it through ``truncate_to_order``.
"""

from __future__ import annotations

import hashlib
from typing import Any, Union

from .field import BinaryField, FieldElement

DEFAULT_HASH_ALGORITHM = "sha3_512"

DigestLike = Union[bytes, bytearray, memoryview, Any]


def new_hasher(algorithm: str = DEFAULT_HASH_ALGORITHM) -> hashlib._Hash:
    """Fresh ``hashlib`` context for *algorithm* (``ValueError`` if unknown)."""
    try:
        return hashlib.new(algorithm)
    except ValueError:
        raise ValueError(f"unsupported hash algorithm: {algorithm}") from None


def digest_message(
    message: bytes, algorithm: str = DEFAULT_HASH_ALGORITHM,
) -> bytes:
    h = new_hasher(algorithm)
    h.update(message)
    return h.digest()


def digest_bytes(digest: DigestLike) -> bytes:
    """
    Normalise a digest argument to raw bytes.

    Accepts bytes-like values or a hashlib-style object exposing
    ``digest()`` (the object is not consumed; hashlib digests are
    repeatable).
    """
    if isinstance(digest, (bytes, bytearray, memoryview)):
        return bytes(digest)
    finish = getattr(digest, "digest", None)
    if callable(finish):
        return bytes(finish())
    raise TypeError(
        f"expected digest bytes or a hash object, got {type(digest).__name__}"
    )


def hash_to_field(digest: DigestLike, gf: BinaryField) -> FieldElement:
    """Digest → h ∈ GF(2^m), never zero."""
    return FieldElement.from_hash(digest_bytes(digest), gf)


def truncate_to_order(value: Union[int, FieldElement], order: int) -> int:
    """
    Keep the low  bitlen(n) - 1  bits of *value*.

    This fixes the admissible range of r by the order's bit length,
    independently of the field degree.
    """
    mask = (1 << (order.bit_length() - 1)) - 1
    return int(value) & mask
