"""
BN254 base field (Fp), quadratic extension (Fp2) and scalar field (Fr) helpers.

Arithmetic is delegated to py_ecc's optimized BN254 field classes. Every
value leaving this module is canonical: an FQ with 0 <= n < p, or an FQ2
whose coefficients are canonical (Fp2 = Fp[u] / (u^2 + 1)).
"""

from __future__ import annotations

from typing import Tuple, Union

from py_ecc.optimized_bn128 import FQ, FQ2

from .config import COORDINATE_BYTES, CURVE_ORDER, FIELD_MODULUS
from .exceptions import InvalidEncodingError

IntLike = Union[int, FQ]


def _coeff_int(value) -> int:
    if isinstance(value, int):
        return value
    return int(value.n)


# ============================================================================
# Fp
# ============================================================================


def fp(value: IntLike) -> FQ:
    """Reduce an integer (or FQ) into Fp."""
    if isinstance(value, FQ):
        return value
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError("field element must be int or FQ")
    return FQ(value % FIELD_MODULUS)


def fp_add(a: IntLike, b: IntLike) -> FQ:
    return fp(a) + fp(b)


def fp_sub(a: IntLike, b: IntLike) -> FQ:
    return fp(a) - fp(b)


def fp_mul(a: IntLike, b: IntLike) -> FQ:
    return fp(a) * fp(b)


def fp_neg(a: IntLike) -> FQ:
    return -fp(a)


def fp_inv(a: IntLike) -> FQ:
    """
    Multiplicative inverse in Fp.

    Raises:
        ZeroDivisionError: If a == 0
    """
    value = fp(a)
    if value == 0:
        raise ZeroDivisionError("zero has no inverse in Fp")
    return FQ.one() / value


def fp_from_bytes(data: bytes) -> FQ:
    """
    Decode a 32-byte big-endian canonical Fp element.

    Raises:
        InvalidEncodingError: Wrong length or value >= p
    """
    if not isinstance(data, (bytes, bytearray)):
        raise InvalidEncodingError("field element must be bytes")
    if len(data) != COORDINATE_BYTES:
        raise InvalidEncodingError(
            f"field element must be {COORDINATE_BYTES} bytes, got {len(data)}"
        )
    value = int.from_bytes(data, "big")
    if value >= FIELD_MODULUS:
        raise InvalidEncodingError("field element is not canonical (>= p)")
    return FQ(value)


def fp_to_bytes(value: IntLike) -> bytes:
    return _coeff_int(fp(value)).to_bytes(COORDINATE_BYTES, "big")


# ============================================================================
# Fp2
# ============================================================================


def fp2(c0: IntLike, c1: IntLike = 0) -> FQ2:
    """Build c0 + c1*u from two Fp coefficients."""
    return FQ2([_coeff_int(fp(c0)), _coeff_int(fp(c1))])


def fp2_coeffs(value: FQ2) -> Tuple[int, int]:
    c0, c1 = value.coeffs
    return _coeff_int(c0), _coeff_int(c1)


def fp2_add(a: FQ2, b: FQ2) -> FQ2:
    return a + b


def fp2_mul(a: FQ2, b: FQ2) -> FQ2:
    return a * b


def fp2_neg(a: FQ2) -> FQ2:
    return -a


def fp2_inv(a: FQ2) -> FQ2:
    """
    Multiplicative inverse in Fp2.

    Raises:
        ZeroDivisionError: If a == 0
    """
    if fp2_coeffs(a) == (0, 0):
        raise ZeroDivisionError("zero has no inverse in Fp2")
    return FQ2.one() / a


def fp2_from_bytes(data: bytes) -> FQ2:
    """Decode c0 || c1, each a canonical 32-byte big-endian Fp element."""
    if not isinstance(data, (bytes, bytearray)) or len(data) != 2 * COORDINATE_BYTES:
        raise InvalidEncodingError(
            f"Fp2 element must be {2 * COORDINATE_BYTES} bytes"
        )
    c0 = fp_from_bytes(data[:COORDINATE_BYTES])
    c1 = fp_from_bytes(data[COORDINATE_BYTES:])
    return fp2(c0, c1)


def fp2_to_bytes(value: FQ2) -> bytes:
    c0, c1 = fp2_coeffs(value)
    return fp_to_bytes(c0) + fp_to_bytes(c1)


# ============================================================================
# Fr (scalars)
# ============================================================================


def is_canonical_scalar(value) -> bool:
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 0 <= value < CURVE_ORDER
    )


def to_fr(value: int) -> int:
    """Reduce an integer scalar into [0, r)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError("scalar must be int")
    return value % CURVE_ORDER


def fr_from_bytes(data: bytes) -> int:
    """
    Decode a 32-byte big-endian canonical Fr scalar.

    Raises:
        InvalidEncodingError: Wrong length or value >= r
    """
    if not isinstance(data, (bytes, bytearray)):
        raise InvalidEncodingError("scalar must be bytes")
    if len(data) != COORDINATE_BYTES:
        raise InvalidEncodingError(
            f"scalar must be {COORDINATE_BYTES} bytes, got {len(data)}"
        )
    value = int.from_bytes(data, "big")
    if value >= CURVE_ORDER:
        raise InvalidEncodingError("scalar is not canonical (>= r)")
    return value


def fr_to_bytes(value: int) -> bytes:
    return to_fr(value).to_bytes(COORDINATE_BYTES, "big")
