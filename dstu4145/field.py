"""
Binary field arithmetic  GF(2^m)  in polynomial basis.

An element is a polynomial over GF(2) of degree < m, stored as a Python
``int`` whose bits are the coefficients.  Every field is fixed by an
irreducible reduction polynomial  f(t)  of degree m; the eleven degrees
supported here are the ones DSTU 4145-2002 recommends (plus 239):

    163  t^163 + t^7 + t^6 + t^3 + 1
    167  t^167 + t^6 + 1
    173  t^173 + t^10 + t^2 + t + 1
    179  t^179 + t^4 + t^2 + t + 1
    191  t^191 + t^9 + 1
    233  t^233 + t^9 + t^4 + t + 1
    239  t^239 + t^15 + t^2 + t + 1
    257  t^257 + t^12 + 1
    307  t^307 + t^8 + t^4 + t^2 + 1
    367  t^367 + t^21 + 1
    431  t^431 + t^5 + t^3 + t + 1

Addition is XOR.  Multiplication is carry-less shift-and-add followed by
reduction modulo f(t).  Nothing here is constant time.

References
----------
- DSTU 4145-2002, §6 (basic field operations) and Table 1.
- Hankerson, Menezes, Vanstone. "Guide to Elliptic Curve Cryptography",
  §2.3 (binary field arithmetic).
"""

from __future__ import annotations

import re
import secrets
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from .errors import NumericParseError

RandomSource = Callable[[int], bytes]

_HEX_DIGITS = re.compile(r"[0-9A-Fa-f]+")


def parse_hex(text: str) -> int:
    """
    Big-endian hex digits to an int.  Only plain digits are accepted: no
    sign, no ``0x`` prefix, no separators or whitespace.
    """
    if not isinstance(text, str) or not _HEX_DIGITS.fullmatch(text):
        raise NumericParseError(f"invalid hex string: {text!r}")
    return int(text, 16)


# ── reduction polynomials ───────────────────────────────────────────────
REDUCTION_EXPONENTS: Dict[int, Tuple[int, ...]] = {
    163: (163, 7, 6, 3, 0),
    167: (167, 6, 0),
    173: (173, 10, 2, 1, 0),
    179: (179, 4, 2, 1, 0),
    191: (191, 9, 0),
    233: (233, 9, 4, 1, 0),
    239: (239, 15, 2, 1, 0),
    257: (257, 12, 0),
    307: (307, 8, 4, 2, 0),
    367: (367, 21, 0),
    431: (431, 5, 3, 1, 0),
}


# ── raw polynomial helpers (ints as GF(2)[t]) ───────────────────────────
def _spread_byte(b: int) -> int:
    r = 0
    for i in range(8):
        if (b >> i) & 1:
            r |= 1 << (2 * i)
    return r


# squaring inserts a zero bit between every coefficient
_SPREAD = tuple(_spread_byte(b) for b in range(256))


def poly_reduce(x: int, modulus: int) -> int:
    """Reduce *x* modulo *modulus* by aligning and XOR-ing its top bit."""
    mod_bits = modulus.bit_length()
    x_bits = x.bit_length()
    while x_bits >= mod_bits:
        x ^= modulus << (x_bits - mod_bits)
        x_bits = x.bit_length()
    return x


def poly_mul(a: int, b: int) -> int:
    """Carry-less product (unreduced, up to double width)."""
    if a.bit_length() < b.bit_length():
        a, b = b, a
    r = 0
    while b:
        if b & 1:
            r ^= a
        a <<= 1
        b >>= 1
    return r


def poly_square(a: int) -> int:
    """Carry-less square (unreduced): spread the bits of *a*."""
    r = 0
    shift = 0
    while a:
        r |= _SPREAD[a & 0xFF] << shift
        a >>= 8
        shift += 16
    return r


def poly_inverse(a: int, modulus: int) -> int:
    """
    Inverse of *a* modulo the irreducible *modulus*.

    Binary extended Euclidean algorithm (Hankerson et al., Alg. 2.48):
    keeps  g1·a ≡ u  and  g2·a ≡ v  and cancels leading terms until
    u = 1.

    Raises ``ZeroDivisionError`` for a ≡ 0.
    """
    a = poly_reduce(a, modulus)
    if a == 0:
        raise ZeroDivisionError("cannot invert zero field element")
    u, v = a, modulus
    g1, g2 = 1, 0
    while u != 1:
        j = u.bit_length() - v.bit_length()
        if j < 0:
            u, v = v, u
            g1, g2 = g2, g1
            j = -j
        u ^= v << j
        g1 ^= g2 << j
    return poly_reduce(g1, modulus)


# ── field description ───────────────────────────────────────────────────
@dataclass(frozen=True)
class BinaryField:
    """GF(2^m) together with its reduction polynomial."""

    degree: int
    exponents: Tuple[int, ...]
    modulus: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        modulus = 0
        for e in self.exponents:
            modulus |= 1 << e
        if modulus.bit_length() != self.degree + 1:
            raise ValueError(
                f"reduction polynomial degree {modulus.bit_length() - 1} "
                f"does not match field degree {self.degree}"
            )
        object.__setattr__(self, "modulus", modulus)

    @property
    def byte_length(self) -> int:
        """Bytes needed to hold one element."""
        return (self.degree + 7) // 8

    # constructors -----------------------------------------------------------
    def element(self, value: int) -> FieldElement:
        return FieldElement(value, self)

    def zero(self) -> FieldElement:
        return FieldElement(0, self)

    def one(self) -> FieldElement:
        return FieldElement(1, self)

    def random(self, rng: Optional[RandomSource] = None) -> FieldElement:
        return FieldElement.random(self, rng)

    def from_bytes(self, data: bytes) -> FieldElement:
        return FieldElement.from_bytes(data, self)

    def from_hex(self, text: str) -> FieldElement:
        return FieldElement.from_hex(text, self)

    def from_hash(self, digest: bytes) -> FieldElement:
        return FieldElement.from_hash(digest, self)


FIELDS: Dict[int, BinaryField] = {
    m: BinaryField(m, exps) for m, exps in REDUCTION_EXPONENTS.items()
}


def get_field(degree: int) -> BinaryField:
    """Return the shared ``BinaryField`` for a supported degree."""
    try:
        return FIELDS[degree]
    except KeyError:
        raise ValueError(
            f"unsupported field degree {degree}; "
            f"expected one of {sorted(FIELDS)}"
        ) from None


# ── FieldElement ────────────────────────────────────────────────────────
class FieldElement:
    """Immutable element of a ``BinaryField``, always held reduced."""

    __slots__ = ("_v", "_field")

    def __init__(self, value: int, gf: BinaryField) -> None:
        if value < 0:
            raise ValueError("field element must be non-negative")
        if value.bit_length() > gf.degree:
            value = poly_reduce(value, gf.modulus)
        self._v = value
        self._field = gf

    # constructors -----------------------------------------------------------
    @classmethod
    def random(
        cls, gf: BinaryField, rng: Optional[RandomSource] = None,
    ) -> FieldElement:
        """Uniform element: m random bits from *rng* (default ``secrets``)."""
        rng = rng or secrets.token_bytes
        raw = int.from_bytes(rng(gf.byte_length), "big")
        return cls(raw & ((1 << gf.degree) - 1), gf)

    @classmethod
    def from_bytes(cls, data: bytes, gf: BinaryField) -> FieldElement:
        return cls(int.from_bytes(data, "big"), gf)

    @classmethod
    def from_hex(cls, text: str, gf: BinaryField) -> FieldElement:
        return cls(parse_hex(text), gf)

    @classmethod
    def from_hash(cls, digest: bytes, gf: BinaryField) -> FieldElement:
        """
        Map a hash digest to a field element.

        The big-endian integer of the digest is truncated to its low
        min(bitlen, m) bits; a zero result is replaced by 1 so that
        signing never multiplies by zero.
        """
        v = int.from_bytes(digest, "big")
        width = min(v.bit_length(), gf.degree)
        v &= (1 << width) - 1
        if v == 0:
            v = 1
        return cls(v, gf)

    # serialisation ----------------------------------------------------------
    @property
    def value(self) -> int:
        return self._v

    @property
    def field(self) -> BinaryField:
        return self._field

    def to_bytes(self) -> bytes:
        return self._v.to_bytes(self._field.byte_length, "big")

    def hex(self) -> str:
        """Upper-case big-endian hex, padded to the field's byte width."""
        return self.to_bytes().hex().upper()

    def __int__(self) -> int:
        return self._v

    def is_zero(self) -> bool:
        return self._v == 0

    def is_one(self) -> bool:
        return self._v == 1

    def _same_field(self, o: FieldElement) -> bool:
        return o._field is self._field or o._field == self._field

    # arithmetic -------------------------------------------------------------
    def __add__(self, o: FieldElement) -> FieldElement:
        if not isinstance(o, FieldElement) or not self._same_field(o):
            return NotImplemented
        return FieldElement(self._v ^ o._v, self._field)

    # characteristic 2:  a - b = a + b
    __sub__ = __add__

    def __neg__(self) -> FieldElement:
        return self

    def __mul__(self, o: FieldElement) -> FieldElement:
        if not isinstance(o, FieldElement) or not self._same_field(o):
            return NotImplemented
        return FieldElement(
            poly_reduce(poly_mul(self._v, o._v), self._field.modulus),
            self._field,
        )

    def __truediv__(self, o: FieldElement) -> FieldElement:
        if not isinstance(o, FieldElement) or not self._same_field(o):
            return NotImplemented
        return self * o.inverse()

    def square(self) -> FieldElement:
        return FieldElement(
            poly_reduce(poly_square(self._v), self._field.modulus),
            self._field,
        )

    def __pow__(self, k: int) -> FieldElement:
        """
        Left-to-right fixed-window exponentiation (4-bit windows).

        Precomputes a^0 … a^15, then for every hex digit of *k*
        (most significant first) squares four times and multiplies in
        the digit's table entry.
        """
        if not isinstance(k, int):
            return NotImplemented
        if k < 0:
            return self.inverse() ** (-k)
        mod = self._field.modulus
        table = [1, self._v]
        for _ in range(2, 16):
            table.append(poly_reduce(poly_mul(table[-1], self._v), mod))
        acc = 1
        for digit in format(k, "x"):
            for _ in range(4):
                acc = poly_reduce(poly_square(acc), mod)
            w = int(digit, 16)
            if w:
                acc = poly_reduce(poly_mul(acc, table[w]), mod)
        return FieldElement(acc, self._field)

    def inverse(self) -> FieldElement:
        """Multiplicative inverse; raises ``ZeroDivisionError`` for 0."""
        return FieldElement(
            poly_inverse(self._v, self._field.modulus), self._field,
        )

    def sqrt(self) -> FieldElement:
        """Square root  a^(2^(m-1)),  the inverse of the Frobenius map."""
        return self ** (1 << (self._field.degree - 1))

    def trace(self) -> int:
        """
        Absolute trace  Tr(a) = a + a^2 + a^4 + … + a^(2^(m-1)),
        computed as  t ← t² + a  repeated m-1 times.  Returns 0 or 1.
        """
        mod = self._field.modulus
        a = self._v
        t = a
        for _ in range(self._field.degree - 1):
            t = poly_reduce(poly_square(t), mod) ^ a
        return t

    def half_trace(self) -> FieldElement:
        """
        Half-trace  H(a) = Σ a^(2^(2i)),  i = 0 … (m-1)/2.

        Defined for odd m only.  When Tr(a) = 0 the result z solves
        z² + z = a.
        """
        m = self._field.degree
        if m % 2 == 0:
            raise ValueError(f"half-trace is undefined for even m = {m}")
        mod = self._field.modulus
        a = self._v
        t = a
        for _ in range((m - 1) // 2):
            t = poly_reduce(poly_square(t), mod)
            t = poly_reduce(poly_square(t), mod) ^ a
        return FieldElement(t, self._field)

    # comparison / hashing ---------------------------------------------------
    def __eq__(self, o: object) -> bool:
        if isinstance(o, FieldElement):
            return self._v == o._v and self._same_field(o)
        if isinstance(o, int):
            return self._v == o
        return False

    def __hash__(self) -> int:
        # equal to an int of the same value, so hash like one
        return hash(self._v)

    def __bool__(self) -> bool:
        return self._v != 0

    def __repr__(self) -> str:
        return f"FieldElement(GF(2^{self._field.degree}), 0x{self._v:X})"


# ── quadratic equations ─────────────────────────────────────────────────
def solve_quadratic(u: FieldElement, w: FieldElement) -> Optional[FieldElement]:
    """
    Solve  z² + u·z = w  over GF(2^m).

    Returns one root z (the other is z + u) or ``None`` when the
    equation has no solution.

    - u = 0:  z = √w.
    - u ≠ 0:  substitute v = w / u²; solvable iff Tr(v) = 0, and then
      z = u · H(v).
    """
    if u.is_zero():
        if w.is_zero():
            return w
        return w.sqrt()
    v = w * u.inverse().square()
    if v.trace() != 0:
        return None
    return u * v.half_trace()
