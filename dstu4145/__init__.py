"""
dstu4145: DSTU 4145-2002 digital signatures over binary elliptic curves.

A from-scratch implementation in three layers:

- **GF(2^m) arithmetic** in polynomial basis (trace, half-trace,
  quadratic solving, inversion)
- **Binary curves**  y² + xy = x³ + A·x² + B  with point compression
  and public-key validation
- **Signature protocol**: presignatures, sign / verify, key
  consistency checks and the  s ‖ r  wire format

Nothing here is constant time; it is not hardened against side channels.

Quick start
-----------
::

    from dstu4145 import CurveName, SigningKey, get_curve

    curve = get_curve(CurveName.DSTU_PB_257)
    sk, vk = SigningKey.generate(curve)

    sig = sk.sign(b"transfer 100 UAH")
    vk.verify(b"transfer 100 UAH", sig)      # raises on failure

    packed = sig.to_bytes()                  # s ‖ r
"""

__version__ = "0.1.0"

# ── field ───────────────────────────────────────────────────────────────
from .field import (
    BinaryField,
    FieldElement,
    FIELDS,
    get_field,
    solve_quadratic,
)

# ── curves ──────────────────────────────────────────────────────────────
from .curve import BinaryCurve, Point, MAX_SAMPLING_ATTEMPTS
from .params import CurveName, CURVES, get_curve

# ── signatures ──────────────────────────────────────────────────────────
from .signing import (
    Signature,
    SigningKey,
    VerifyingKey,
    check_l_d,
    generate_presign,
    sign,
    verify,
)
from .hash import DEFAULT_HASH_ALGORITHM, hash_to_field, truncate_to_order

# ── errors ──────────────────────────────────────────────────────────────
from .errors import (
    DSTU4145Error,
    InvalidParamsError,
    InvalidParamLengthError,
    InvalidLengthEncodingError,
    PointAtInfinityError,
    SignatureMismatchError,
    PublicKeyValidationError,
    NumericParseError,
    SamplingLimitError,
)

__all__ = [
    # version
    "__version__",
    # field
    "BinaryField", "FieldElement", "FIELDS", "get_field", "solve_quadratic",
    # curves
    "BinaryCurve", "Point", "MAX_SAMPLING_ATTEMPTS",
    "CurveName", "CURVES", "get_curve",
    # signatures
    "Signature", "SigningKey", "VerifyingKey",
    "check_l_d", "generate_presign", "sign", "verify",
    # hashing
    "DEFAULT_HASH_ALGORITHM", "hash_to_field", "truncate_to_order",
    # errors
    "DSTU4145Error", "InvalidParamsError", "InvalidParamLengthError",
    "InvalidLengthEncodingError", "PointAtInfinityError",
    "SignatureMismatchError", "PublicKeyValidationError",
    "NumericParseError", "SamplingLimitError",
]
