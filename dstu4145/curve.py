"""
Elliptic curve arithmetic over binary fields.

Curves have the DSTU 4145 form

    y² + x·y = x³ + A·x² + B,      A ∈ {0, 1},  B ∈ GF(2^m) \\ {0}

and points are kept in affine coordinates.  All group operations are
pure functions on immutable values; nothing here is constant time.

Compression packs a finite point into a single field element: the
x-coordinate with its low bit replaced by  Tr(y / x).  Decompression
recovers the unique point whose compression reproduces the input.

References
----------
- DSTU 4145-2002, §6.4 – §6.9  (point operations, compression).
- Hankerson, Menezes, Vanstone. "Guide to Elliptic Curve Cryptography",
  §3.1.2 (non-supersingular binary curves).
"""

from __future__ import annotations

import dataclasses
import logging
import secrets
from dataclasses import dataclass
from typing import Optional, Union

from .errors import (
    InvalidParamLengthError,
    PublicKeyValidationError,
    SamplingLimitError,
)
from .field import BinaryField, FieldElement, RandomSource, solve_quadratic

logger = logging.getLogger(__name__)

# rejection-sampling loops give up after this many draws
MAX_SAMPLING_ATTEMPTS = 1000


def random_scalar(bits: int, rng: Optional[RandomSource] = None) -> int:
    """Uniform integer in  [0, 2^bits)  drawn from *rng* (default ``secrets``)."""
    rng = rng or secrets.token_bytes
    raw = int.from_bytes(rng((bits + 7) // 8), "big")
    return raw & ((1 << bits) - 1)


# ── Point ───────────────────────────────────────────────────────────────
class Point:
    """
    Affine point on a ``BinaryCurve``, or the point at infinity.

    The identity is represented by a flag rather than by coordinates;
    its ``x`` and ``y`` read as the zero field element.  Validity is not
    enforced on construction: use ``BinaryCurve.contains`` or
    ``BinaryCurve.check_public_key`` where it matters.
    """

    __slots__ = ("_x", "_y", "_curve", "_inf")

    def __init__(
        self,
        curve: BinaryCurve,
        x: Optional[FieldElement] = None,
        y: Optional[FieldElement] = None,
        *,
        infinity: bool = False,
    ) -> None:
        if not infinity and (x is None or y is None):
            raise ValueError("finite point needs both coordinates")
        self._curve = curve
        self._inf = infinity
        self._x = None if infinity else x
        self._y = None if infinity else y

    # constructors -----------------------------------------------------------
    @classmethod
    def identity(cls, curve: BinaryCurve) -> Point:
        """Point at infinity, the additive identity."""
        return cls(curve, infinity=True)

    # accessors --------------------------------------------------------------
    @property
    def curve(self) -> BinaryCurve:
        return self._curve

    @property
    def x(self) -> FieldElement:
        if self._inf:
            return self._curve.field.zero()
        return self._x  # type: ignore[return-value]

    @property
    def y(self) -> FieldElement:
        if self._inf:
            return self._curve.field.zero()
        return self._y  # type: ignore[return-value]

    def is_inf(self) -> bool:
        return self._inf

    # group operations -------------------------------------------------------
    def __neg__(self) -> Point:
        """−(x, y) = (x, x + y)."""
        if self._inf:
            return self
        return Point(self._curve, self._x, self._x + self._y)

    def double(self) -> Point:
        """
        2P:  x₃ = x² + B / x²,   y₃ = x² + (x + y/x)·x₃ + x₃.

        A point with x = 0 is its own negative, so it doubles to the
        identity.
        """
        if self._inf or self._x.is_zero():
            return Point.identity(self._curve)
        x, y = self._x, self._y
        x_inv = x.inverse()
        x_sq = x.square()
        x3 = x_sq + self._curve.b * x_inv.square()
        y3 = x_sq + (x + y * x_inv) * x3 + x3
        return Point(self._curve, x3, y3)

    def __add__(self, o: Point) -> Point:
        if not isinstance(o, Point):
            return NotImplemented
        if self._inf:
            return o
        if o._inf:
            return self
        if self == -o:
            return Point.identity(self._curve)
        if self == o:
            return self.double()
        x1, y1, x2, y2 = self._x, self._y, o._x, o._y
        lam = (y1 + y2) / (x1 + x2)
        x3 = lam.square() + lam + x1 + x2 + self._curve.a_element
        y3 = lam * (x1 + x3) + x3 + y1
        return Point(self._curve, x3, y3)

    def __sub__(self, o: Point) -> Point:
        return self + (-o)

    def _smul(self, k: int) -> Point:
        """Double-and-add, scanning *k* from the most significant bit."""
        if k < 0:
            return (-self)._smul(-k)
        result = Point.identity(self._curve)
        for bit in format(k, "b"):
            result = result.double()
            if bit == "1":
                result = result + self
        return result

    def __mul__(self, k: int) -> Point:
        if not isinstance(k, int):
            return NotImplemented
        return self._smul(k)

    __rmul__ = __mul__

    # comparison / hashing ---------------------------------------------------
    def __eq__(self, o: object) -> bool:
        if not isinstance(o, Point):
            return False
        if self._inf and o._inf:
            return True
        if self._inf or o._inf:
            return False
        return self._x == o._x and self._y == o._y

    def __hash__(self) -> int:
        if self._inf:
            return hash(("inf", self._curve.field.degree))
        return hash((self._x, self._y))

    def __repr__(self) -> str:
        if self._inf:
            return "Point(∞)"
        return f"Point(x=0x{self._x.value:X}, y=0x{self._y.value:X})"


# ── BinaryCurve ─────────────────────────────────────────────────────────
@dataclass(frozen=True)
class BinaryCurve:
    """
    Curve  y² + xy = x³ + A·x² + B  over ``field`` with base point
    (gx, gy) of prime order ``order``.

    Two curves are equal when all their parameters are; ``name`` is a
    label only.
    """

    field: BinaryField
    a: int
    b: FieldElement
    gx: FieldElement
    gy: FieldElement
    order: int
    name: str = dataclasses.field(default="", compare=False)

    def __post_init__(self) -> None:
        if self.a not in (0, 1):
            raise ValueError(f"coefficient A must be 0 or 1, got {self.a}")
        if self.b.is_zero():
            raise ValueError("coefficient B must be non-zero")
        if self.order <= 1:
            raise ValueError("order must be a prime > 1")

    # parameters -------------------------------------------------------------
    @property
    def m(self) -> int:
        return self.field.degree

    @property
    def a_element(self) -> FieldElement:
        return self.field.element(self.a)

    @property
    def base_point(self) -> Point:
        return Point(self, self.gx, self.gy)

    @property
    def order_bits(self) -> int:
        return self.order.bit_length()

    @property
    def default_l_d(self) -> int:
        """Smallest L_d accepted for this curve: a multiple of 16, ≥ 2·bitlen(n)."""
        return (2 * self.order_bits + 15) // 16 * 16

    def element(self, value: Union[int, FieldElement]) -> FieldElement:
        if isinstance(value, FieldElement):
            return value
        return self.field.element(value)

    def point(
        self, x: Union[int, FieldElement], y: Union[int, FieldElement],
    ) -> Point:
        return Point(self, self.element(x), self.element(y))

    def identity(self) -> Point:
        return Point.identity(self)

    # group operations -------------------------------------------------------
    def negate(self, p: Point) -> Point:
        return -p

    def add(self, p: Point, q: Point) -> Point:
        return p + q

    def double(self, p: Point) -> Point:
        return p.double()

    def mul(self, p: Point, k: int) -> Point:
        return p._smul(k)

    def contains(self, p: Point) -> bool:
        """Check  y² + xy = x³ + A·x² + B.  False for the identity."""
        if p.is_inf():
            return False
        x, y = p.x, p.y
        x_sq = x.square()
        lhs = y.square() + x * y
        rhs = x_sq * x + self.b
        if self.a:
            rhs = rhs + x_sq
        return lhs == rhs

    # compression ------------------------------------------------------------
    def compress(self, p: Point) -> FieldElement:
        """
        Pack *p* into one field element: x with its low bit set to
        Tr(y / x).  The identity and the point with x = 0 both map to 0.
        """
        if p.is_inf() or p.x.is_zero():
            return self.field.zero()
        bit = (p.y / p.x).trace()
        x = p.x.value
        if (x & 1) != bit:
            x ^= 1
        return self.field.element(x)

    def decompress(self, packed: Union[int, FieldElement]) -> Point:
        """
        Inverse of ``compress``.

        An integer input must be canonical: wider than m bits raises
        ``InvalidParamLengthError`` rather than being reduced.  Raises
        ``PublicKeyValidationError`` (``"not_on_curve"``) when no point of
        the curve has the encoded x-coordinate.
        """
        if isinstance(packed, int) and packed.bit_length() > self.m:
            raise InvalidParamLengthError(
                self.m, packed.bit_length(), "public key"
            )
        packed = self.element(packed)
        if packed.is_zero():
            return Point(self, packed, self.b.sqrt())
        k = packed.value & 1
        x = self.field.element(packed.value ^ k)
        if x.trace() != self.a:
            x = self.field.element(x.value ^ 1)
        if x.is_zero():
            return Point(self, x, self.b.sqrt())
        x_sq = x.square()
        w = x_sq * x + self.b
        if self.a:
            w = w + x_sq
        z = solve_quadratic(self.field.one(), w * x.inverse().square())
        if z is None:
            raise PublicKeyValidationError("not_on_curve")
        if z.trace() != k:
            z = z + self.field.one()
        return Point(self, x, z * x)

    def check_public_key(self, packed: Union[int, FieldElement]) -> Point:
        """
        Decompress and validate a public key (see ``validate_public_point``).

        Decompression only yields finite points on the curve, so from
        packed input the only validation failure in practice is
        ``"wrong_order"``; an x with no curve point already fails inside
        ``decompress`` as ``"not_on_curve"``.
        """
        return self.validate_public_point(self.decompress(packed))

    def validate_public_point(self, q: Point) -> Point:
        """
        Check that *q* is finite, on the curve, and of order n.  Raises
        ``PublicKeyValidationError`` naming the failed check.
        """
        if q.is_inf():
            raise PublicKeyValidationError("infinity")
        if not self.contains(q):
            raise PublicKeyValidationError("not_on_curve")
        if not (q * self.order).is_inf():
            raise PublicKeyValidationError("wrong_order")
        return q

    # sampling ---------------------------------------------------------------
    def random_scalar(self, rng: Optional[RandomSource] = None) -> int:
        """Uniform scalar in  [0, 2^(bitlen(n) - 1)),  always below n."""
        return random_scalar(self.order_bits - 1, rng)

    def random_point(self, rng: Optional[RandomSource] = None) -> Point:
        """
        Random point of the curve (not necessarily in the subgroup of
        order n): draw x, solve  y² + x·y = x³ + A·x² + B  for y.
        """
        for attempt in range(MAX_SAMPLING_ATTEMPTS):
            u = self.field.random(rng)
            u_sq = u.square()
            w = u_sq * u + self.b
            if self.a:
                w = w + u_sq
            z = solve_quadratic(u, w)
            if z is not None:
                return Point(self, u, z)
            logger.debug("random_point: no point with sampled x, retry %d", attempt)
        raise SamplingLimitError(
            f"no curve point found after {MAX_SAMPLING_ATTEMPTS} attempts"
        )
