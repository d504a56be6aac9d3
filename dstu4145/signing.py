"""
DSTU 4145 signature generation and verification.

Keys
----
A signing key is a scalar  d,  0 < d < n.  Its verifying key is the
*negated* multiple  Q = −d·G,  so that verification needs one point sum:

    R  = s·G + r·Q  =  (e + d·r)·G − r·d·G  =  e·G

**Presign:**  sample  e ∈ [0, 2^(bitlen(n)−1))  and set  F = e·G,
rejecting the draw while F is the identity or has x = 0.

**Sign:**  with  h = H(m) ∈ GF(2^m)  (never zero),

    y = h · x_F        (field product)
    r = y  truncated to its low bitlen(n) − 1 bits,   retry on r = 0
    s = (e + d·r) mod n

**Verify:**  recompute  R = s·G + r·Q,  then  r' = trunc(h · x_R)  and
accept iff  r' = r.  An identity R is reported separately from a plain
mismatch.

Encoding
--------
The packed signature is  s ‖ r,  each big-endian and zero-padded to
L_d/16 bytes.  L_d must be a multiple of 16 and at least 2·bitlen(n).

References
----------
- DSTU 4145-2002, §7 – §12  (key pair, presignature, signing,
  verification, signature encoding).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .curve import MAX_SAMPLING_ATTEMPTS, BinaryCurve, Point
from .errors import (
    InvalidLengthEncodingError,
    InvalidParamLengthError,
    InvalidParamsError,
    PointAtInfinityError,
    SamplingLimitError,
    SignatureMismatchError,
)
from .field import FieldElement, RandomSource, parse_hex
from .hash import (
    DEFAULT_HASH_ALGORITHM,
    DigestLike,
    digest_message,
    hash_to_field,
    truncate_to_order,
)

logger = logging.getLogger(__name__)


# ── parameters ──────────────────────────────────────────────────────────
def check_l_d(l_d: int, curve: BinaryCurve) -> None:
    """Raise ``InvalidParamsError`` unless  L_d ≡ 0 (mod 16)  and  L_d ≥ 2·bitlen(n)."""
    if l_d % 16 != 0:
        raise InvalidParamsError(f"L_d must be a multiple of 16, got {l_d}")
    if l_d < 2 * curve.order_bits:
        raise InvalidParamsError(
            f"L_d must be at least {2 * curve.order_bits} for this curve, got {l_d}"
        )


def _same_curve(a: BinaryCurve, b: BinaryCurve) -> bool:
    return a is b or a == b


# ── presignature ────────────────────────────────────────────────────────
def generate_presign(
    curve: BinaryCurve, rng: Optional[RandomSource] = None,
) -> Tuple[int, FieldElement]:
    """
    Fresh presignature  (e, x_F)  with  F = e·G  finite and  x_F ≠ 0.

    ``e`` is secret and single use; callers must not reuse it across
    signatures.
    """
    g = curve.base_point
    for attempt in range(MAX_SAMPLING_ATTEMPTS):
        e = curve.random_scalar(rng)
        f = g * e
        if f.is_inf() or f.x.is_zero():
            logger.debug("presign rejected (degenerate e·G), retry %d", attempt)
            continue
        return e, f.x
    raise SamplingLimitError(
        f"no usable presignature after {MAX_SAMPLING_ATTEMPTS} attempts"
    )


# ── Signature ───────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Signature:
    """
    Signature  (r, s)  for a given L_d.

    ``r`` and ``s`` are big-endian byte strings, each exactly L_d/16
    bytes long.
    """

    r: bytes
    s: bytes
    l_d: int

    def __post_init__(self) -> None:
        if self.l_d <= 0 or self.l_d % 16 != 0:
            raise InvalidLengthEncodingError(
                f"L_d must be a positive multiple of 16, got {self.l_d}"
            )
        width = self.l_d // 16
        if len(self.r) != width or len(self.s) != width:
            raise InvalidLengthEncodingError(
                f"r and s must be {width} bytes each for L_d={self.l_d}"
            )

    @classmethod
    def from_values(cls, r: int, s: int, l_d: int) -> Signature:
        width = l_d // 16
        try:
            return cls(r.to_bytes(width, "big"), s.to_bytes(width, "big"), l_d)
        except OverflowError:
            raise InvalidParamsError(
                f"r or s does not fit into {width} bytes (L_d={l_d})"
            ) from None

    @property
    def r_value(self) -> int:
        return int.from_bytes(self.r, "big")

    @property
    def s_value(self) -> int:
        return int.from_bytes(self.s, "big")

    # serialization ----------------------------------------------------------
    def to_bytes(self) -> bytes:
        """Packed form  s ‖ r,  L_d/8 bytes."""
        return self.s + self.r

    @classmethod
    def from_bytes(cls, data: bytes) -> Signature:
        data = bytes(data)
        if not data or len(data) % 2 != 0:
            raise InvalidLengthEncodingError(
                f"packed signature must have a positive even length, got {len(data)}"
            )
        half = len(data) // 2
        return cls(r=data[half:], s=data[:half], l_d=len(data) * 8)

    def to_hex(self) -> str:
        return self.to_bytes().hex().upper()

    @classmethod
    def from_hex(cls, text: str) -> Signature:
        if len(text) % 4 != 0:
            raise InvalidLengthEncodingError(
                f"hex signature length must be a multiple of 4, got {len(text)}"
            )
        return cls.from_bytes(parse_hex(text).to_bytes(len(text) // 2, "big"))

    def __repr__(self) -> str:
        return f"Signature(r={self.r.hex()}, s={self.s.hex()}, l_d={self.l_d})"


# ── core algorithms ─────────────────────────────────────────────────────
def sign(
    curve: BinaryCurve,
    digest: DigestLike,
    d: int,
    l_d: int,
    rng: Optional[RandomSource] = None,
) -> Signature:
    """
    Sign a message digest with secret scalar *d*.

    Parameters
    ----------
    curve : BinaryCurve
        Domain parameters.
    digest : bytes or hash object
        H(m); only its bytes are used.
    d : int
        Secret key,  0 < d < n.
    l_d : int
        Signature length parameter (see ``check_l_d``).
    rng : callable, optional
        ``rng(k) -> k`` random bytes; defaults to ``secrets.token_bytes``.
    """
    check_l_d(l_d, curve)
    if not 0 < d < curve.order:
        raise InvalidParamsError("secret scalar out of range")
    h = hash_to_field(digest, curve.field)
    for attempt in range(MAX_SAMPLING_ATTEMPTS):
        e, x_f = generate_presign(curve, rng)
        r = truncate_to_order(h * x_f, curve.order)
        if r == 0:
            logger.debug("sign: r = 0, fresh presignature (retry %d)", attempt)
            continue
        s = (e + d * r) % curve.order
        return Signature.from_values(r, s, l_d)
    raise SamplingLimitError(
        f"no non-zero r after {MAX_SAMPLING_ATTEMPTS} presignatures"
    )


def verify(
    curve: BinaryCurve,
    digest: DigestLike,
    q: Point,
    r: Union[int, bytes],
    s: Union[int, bytes],
    l_d: int,
) -> None:
    """
    Check a signature against verifying point *q*.  Returns ``None`` on
    success and raises otherwise:

    - ``InvalidParamsError``     bad L_d, or  r ≥ n  or  s ≥ n
    - ``PointAtInfinityError``   s·G + r·Q  is the identity
    - ``SignatureMismatchError`` recomputed r differs
    """
    check_l_d(l_d, curve)
    if isinstance(r, (bytes, bytearray)):
        r = int.from_bytes(r, "big")
    if isinstance(s, (bytes, bytearray)):
        s = int.from_bytes(s, "big")
    if r >= curve.order or s >= curve.order:
        raise InvalidParamsError("signature component not below the curve order")
    h = hash_to_field(digest, curve.field)
    big_r = curve.base_point * s + q * r
    if big_r.is_inf():
        logger.debug("verify: s·G + r·Q is the point at infinity")
        raise PointAtInfinityError("verification point is the identity")
    if truncate_to_order(h * big_r.x, curve.order) != r:
        logger.debug("verify: recomputed r does not match")
        raise SignatureMismatchError("signature does not match")


# ── keys ────────────────────────────────────────────────────────────────
class VerifyingKey:
    """Public key  Q = −d·G  bound to a curve and an L_d."""

    __slots__ = ("_curve", "_q", "_l_d")

    def __init__(self, curve: BinaryCurve, q: Point, l_d: int) -> None:
        check_l_d(l_d, curve)
        if not _same_curve(q.curve, curve):
            raise InvalidParamsError("point belongs to a different curve")
        self._curve = curve
        self._q = q
        self._l_d = l_d

    @property
    def curve(self) -> BinaryCurve:
        return self._curve

    @property
    def point(self) -> Point:
        return self._q

    @property
    def l_d(self) -> int:
        return self._l_d

    # verification -----------------------------------------------------------
    def verify_digest(self, digest: DigestLike, signature: Signature) -> None:
        if signature.l_d != self._l_d:
            raise InvalidParamsError(
                f"signature L_d {signature.l_d} does not match key L_d {self._l_d}"
            )
        verify(self._curve, digest, self._q, signature.r, signature.s, self._l_d)

    def verify(
        self,
        message: bytes,
        signature: Signature,
        algorithm: str = DEFAULT_HASH_ALGORITHM,
    ) -> None:
        self.verify_digest(digest_message(message, algorithm), signature)

    # serialization ----------------------------------------------------------
    def to_bytes(self) -> bytes:
        """Compressed point, ``field.byte_length`` bytes."""
        return self._curve.compress(self._q).to_bytes()

    def to_hex(self) -> str:
        return self.to_bytes().hex().upper()

    @classmethod
    def from_bytes(
        cls, curve: BinaryCurve, data: bytes, l_d: Optional[int] = None,
    ) -> VerifyingKey:
        """Decode and fully validate a compressed public key."""
        return cls._from_packed(curve, int.from_bytes(data, "big"), l_d)

    @classmethod
    def from_hex(
        cls, curve: BinaryCurve, text: str, l_d: Optional[int] = None,
    ) -> VerifyingKey:
        return cls._from_packed(curve, parse_hex(text), l_d)

    @classmethod
    def _from_packed(
        cls, curve: BinaryCurve, value: int, l_d: Optional[int],
    ) -> VerifyingKey:
        q = curve.check_public_key(value)
        return cls(curve, q, curve.default_l_d if l_d is None else l_d)

    # comparison -------------------------------------------------------------
    def __eq__(self, o: object) -> bool:
        if not isinstance(o, VerifyingKey):
            return NotImplemented
        return (
            _same_curve(self._curve, o._curve)
            and self._l_d == o._l_d
            and self._q == o._q
        )

    def __hash__(self) -> int:
        return hash((self._q, self._l_d))

    def __repr__(self) -> str:
        return f"VerifyingKey({self._curve.name or self._curve.m}, {self.to_hex()})"


class SigningKey:
    """Secret scalar  d,  0 < d < 2^(bitlen(n)−1),  bound to a curve and an L_d."""

    __slots__ = ("_curve", "_d", "_l_d")

    def __init__(self, curve: BinaryCurve, d: int, l_d: int) -> None:
        check_l_d(l_d, curve)
        if not 0 < d < curve.order:
            raise InvalidParamsError("secret scalar must satisfy 0 < d < n")
        self._curve = curve
        self._d = d
        self._l_d = l_d

    # constructors -----------------------------------------------------------
    @classmethod
    def generate(
        cls,
        curve: BinaryCurve,
        l_d: Optional[int] = None,
        rng: Optional[RandomSource] = None,
    ) -> Tuple[SigningKey, VerifyingKey]:
        """Random key pair.  *l_d* defaults to ``curve.default_l_d``."""
        l_d = curve.default_l_d if l_d is None else l_d
        check_l_d(l_d, curve)
        for attempt in range(MAX_SAMPLING_ATTEMPTS):
            d = curve.random_scalar(rng)
            if d != 0:
                sk = cls(curve, d, l_d)
                return sk, sk.verifying_key()
            logger.debug("generate: sampled d = 0, retry %d", attempt)
        raise SamplingLimitError(
            f"no non-zero secret after {MAX_SAMPLING_ATTEMPTS} attempts"
        )

    @classmethod
    def from_secret(
        cls, curve: BinaryCurve, d_bytes: bytes, l_d: Optional[int] = None,
    ) -> SigningKey:
        """Key from big-endian secret bytes of at most bitlen(n) − 1 bits."""
        l_d = curve.default_l_d if l_d is None else l_d
        check_l_d(l_d, curve)
        d = int.from_bytes(d_bytes, "big")
        limit = curve.order_bits - 1
        if d.bit_length() > limit:
            raise InvalidParamLengthError(limit, d.bit_length(), "d")
        return cls(curve, d, l_d)

    @property
    def curve(self) -> BinaryCurve:
        return self._curve

    @property
    def l_d(self) -> int:
        return self._l_d

    def to_bytes(self) -> bytes:
        return self._d.to_bytes((self._curve.order_bits + 7) // 8, "big")

    # derivation -------------------------------------------------------------
    def verifying_key(self) -> VerifyingKey:
        return VerifyingKey(self._curve, -(self._curve.base_point * self._d), self._l_d)

    def verify_verifying_key(self, vk: VerifyingKey) -> None:
        """Raise ``InvalidParamsError`` unless *vk* is this key's public half."""
        if not _same_curve(self._curve, vk.curve):
            raise InvalidParamsError("keys are on different curves")
        if self._l_d != vk.l_d:
            raise InvalidParamsError(
                f"L_d mismatch: signing key {self._l_d}, verifying key {vk.l_d}"
            )
        if -(self._curve.base_point * self._d) != vk.point:
            raise InvalidParamsError("verifying key does not match signing key")

    # signing ----------------------------------------------------------------
    def sign_digest(
        self, digest: DigestLike, rng: Optional[RandomSource] = None,
    ) -> Signature:
        return sign(self._curve, digest, self._d, self._l_d, rng)

    def sign(
        self,
        message: bytes,
        rng: Optional[RandomSource] = None,
        algorithm: str = DEFAULT_HASH_ALGORITHM,
    ) -> Signature:
        """Hash *message* (SHA3-512 by default) and sign the digest."""
        return self.sign_digest(digest_message(message, algorithm), rng)

    def __repr__(self) -> str:
        return f"SigningKey({self._curve.name or self._curve.m}, <secret>)"
