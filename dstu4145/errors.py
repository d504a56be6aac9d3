"""
Exception hierarchy for DSTU 4145 operations.

Every failure surfaced by the signature layer derives from
``DSTU4145Error``.  Kinds that describe malformed caller input also
derive from ``ValueError`` so that generic ``except ValueError`` blocks
keep working.
"""

from __future__ import annotations


class DSTU4145Error(Exception):
    """Base class for all DSTU 4145 errors."""


class InvalidParamsError(DSTU4145Error, ValueError):
    """Structural or semantic mismatch (curve, L_d, out-of-range r/s)."""


class InvalidParamLengthError(DSTU4145Error, ValueError):
    """A supplied value is wider than the curve allows."""

    def __init__(self, desired: int, actual: int, name: str) -> None:
        self.desired = desired
        self.actual = actual
        self.name = name
        super().__init__(
            f"invalid length of '{name}': at most {desired} bits, got {actual}"
        )


class InvalidLengthEncodingError(DSTU4145Error, ValueError):
    """Packed signature length is not a multiple of 16 bits (4 hex digits)."""


class PointAtInfinityError(DSTU4145Error):
    """Verification produced the group identity; the input is malformed."""


class SignatureMismatchError(DSTU4145Error):
    """The recomputed r does not match the signature: it is invalid."""


class PublicKeyValidationError(DSTU4145Error, ValueError):
    """A decompressed public key failed validation.

    ``reason`` is one of ``"infinity"``, ``"not_on_curve"`` or
    ``"wrong_order"``.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"public key validation failed: {reason}")


class NumericParseError(DSTU4145Error, ValueError):
    """Malformed hex or byte input."""


class SamplingLimitError(DSTU4145Error, RuntimeError):
    """A rejection-sampling loop exceeded its attempt cap.

    Only a broken random source can realistically trigger this.
    """
