"""
⚠️ DRAFT — requires crypto review before production use

BN254 G1 / G2 points as immutable value types.

Points are validated whenever they are built from outside data: coordinates
must be canonical field elements and satisfy the curve equation, and G2
points must lie in the order-r subgroup (the twist has a large cofactor).
Results of group operations on valid points are valid by construction and
skip re-validation.

Affine coordinates are stored as plain ints. The identity (point at
infinity) uses the (0, 0) sentinel, which is also its wire encoding; (0, 0)
is never on either curve, so the sentinel cannot collide with a real point.

Group arithmetic is delegated to py_ecc.optimized_bn128.

Wire format (32-byte big-endian coordinates):
    G1: x || y
    G2: x.c0 || x.c1 || y.c0 || y.c1
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from py_ecc.optimized_bn128 import (
    FQ,
    FQ2,
    G1 as _G1_GENERATOR,
    G2 as _G2_GENERATOR,
    Z1,
    Z2,
    add as _add,
    b2 as _B2,
    is_inf as _is_inf,
    is_on_curve as _is_on_curve,
    multiply as _multiply,
    normalize as _normalize,
)

from . import feature_flags
from .config import COORDINATE_BYTES, CURVE_ORDER, FIELD_MODULUS, G1_BYTES, G2_BYTES
from .exceptions import InvalidEncodingError, InvalidPointError
from .fields import fp2, fp2_coeffs, fp_from_bytes, fp_to_bytes, to_fr

Fp2Pair = Tuple[int, int]


def _check_coordinate(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidEncodingError(f"{name} must be int")
    if not 0 <= value < FIELD_MODULUS:
        raise InvalidEncodingError(f"{name} is not a canonical field element")
    return value


def _check_fp2_pair(value, name: str) -> Fp2Pair:
    if not isinstance(value, tuple) or len(value) != 2:
        raise InvalidEncodingError(f"{name} must be a (c0, c1) tuple")
    return (
        _check_coordinate(value[0], f"{name}.c0"),
        _check_coordinate(value[1], f"{name}.c1"),
    )


def _split(data: bytes, size: int, count: int):
    return [data[i * size:(i + 1) * size] for i in range(count)]


@dataclass(frozen=True)
class G1Point:
    """
    Affine point on E(Fp): y^2 = x^3 + 3, or the identity.

    Construction validates the coordinates; an off-curve pair raises
    InvalidPointError and a non-canonical coordinate raises
    InvalidEncodingError.

    Example:
        >>> g = G1Point.generator()
        >>> (g + g) == g * 2
        True
        >>> (g + G1Point.identity()) == g
        True
    """

    x: int
    y: int

    def __post_init__(self) -> None:
        _check_coordinate(self.x, "G1.x")
        _check_coordinate(self.y, "G1.y")
        if not self.is_on_curve():
            raise InvalidPointError("G1 point is not on the curve")

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def from_coordinates(cls, x: int, y: int) -> "G1Point":
        return cls(x, y)

    @classmethod
    def identity(cls) -> "G1Point":
        return cls._trusted(0, 0)

    @classmethod
    def generator(cls) -> "G1Point":
        return cls._from_backend(_G1_GENERATOR)

    @classmethod
    def from_bytes(cls, data: bytes) -> "G1Point":
        """
        Decode a 64-byte G1 point.

        Raises:
            InvalidEncodingError: Wrong length or non-canonical coordinate
            InvalidPointError: Coordinates are not on the curve
        """
        if not isinstance(data, (bytes, bytearray)) or len(data) != G1_BYTES:
            raise InvalidEncodingError(f"G1 point must be {G1_BYTES} bytes")
        x, y = (
            int(fp_from_bytes(part).n)
            for part in _split(bytes(data), COORDINATE_BYTES, 2)
        )
        return cls(x, y)

    @classmethod
    def _trusted(cls, x: int, y: int) -> "G1Point":
        point = object.__new__(cls)
        object.__setattr__(point, "x", x)
        object.__setattr__(point, "y", y)
        return point

    @classmethod
    def _from_backend(cls, point) -> "G1Point":
        if _is_inf(point):
            return cls.identity()
        x, y = _normalize(point)
        return cls._trusted(int(x.n), int(y.n))

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    def is_identity(self) -> bool:
        return self.x == 0 and self.y == 0

    def is_on_curve(self) -> bool:
        if self.is_identity():
            return True
        return (self.y * self.y - self.x * self.x * self.x - 3) % FIELD_MODULUS == 0

    # ------------------------------------------------------------------
    # Group operations
    # ------------------------------------------------------------------

    def to_backend(self):
        """Projective py_ecc representation."""
        if self.is_identity():
            return Z1
        return (FQ(self.x), FQ(self.y), FQ.one())

    def add(self, other: "G1Point") -> "G1Point":
        if not isinstance(other, G1Point):
            raise TypeError("can only add G1Point to G1Point")
        if self.is_identity():
            return other
        if other.is_identity():
            return self
        return G1Point._from_backend(_add(self.to_backend(), other.to_backend()))

    def negate(self) -> "G1Point":
        if self.is_identity():
            return self
        return G1Point._trusted(self.x, (FIELD_MODULUS - self.y) % FIELD_MODULUS)

    def scalar_mul(self, scalar: int) -> "G1Point":
        k = to_fr(scalar)
        if k == 0 or self.is_identity():
            return G1Point.identity()
        return G1Point._from_backend(_multiply(self.to_backend(), k))

    __add__ = add
    __neg__ = negate

    def __sub__(self, other: "G1Point") -> "G1Point":
        return self.add(-other)

    def __mul__(self, scalar: int) -> "G1Point":
        return self.scalar_mul(scalar)

    __rmul__ = __mul__

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def to_bytes(self) -> bytes:
        return fp_to_bytes(self.x) + fp_to_bytes(self.y)

    def __repr__(self) -> str:
        if self.is_identity():
            return "G1Point(identity)"
        return f"G1Point(x=0x{self.x:064x}, y=0x{self.y:064x})"


@dataclass(frozen=True)
class G2Point:
    """
    Affine point on the sextic twist E'(Fp2): y^2 = x^3 + 3/(9+u), or the
    identity.

    Coordinates are (c0, c1) pairs meaning c0 + c1*u. Besides the curve
    equation, construction checks r*Q == identity unless the subgroup check
    is disabled through feature flags.
    """

    x: Fp2Pair
    y: Fp2Pair

    def __post_init__(self) -> None:
        _check_fp2_pair(self.x, "G2.x")
        _check_fp2_pair(self.y, "G2.y")
        if not self.is_on_curve():
            raise InvalidPointError("G2 point is not on the twist curve")
        if feature_flags.g2_subgroup_check_enabled() and not self.in_subgroup():
            raise InvalidPointError("G2 point is not in the prime-order subgroup")

    @classmethod
    def from_coordinates(cls, x: Fp2Pair, y: Fp2Pair) -> "G2Point":
        return cls(tuple(x), tuple(y))

    @classmethod
    def identity(cls) -> "G2Point":
        return cls._trusted((0, 0), (0, 0))

    @classmethod
    def generator(cls) -> "G2Point":
        return cls._from_backend(_G2_GENERATOR)

    @classmethod
    def from_bytes(cls, data: bytes) -> "G2Point":
        """
        Decode a 128-byte G2 point (x.c0, x.c1, y.c0, y.c1).

        Raises:
            InvalidEncodingError: Wrong length or non-canonical coordinate
            InvalidPointError: Not on the twist or outside the subgroup
        """
        if not isinstance(data, (bytes, bytearray)) or len(data) != G2_BYTES:
            raise InvalidEncodingError(f"G2 point must be {G2_BYTES} bytes")
        x0, x1, y0, y1 = (
            int(fp_from_bytes(part).n)
            for part in _split(bytes(data), COORDINATE_BYTES, 4)
        )
        return cls((x0, x1), (y0, y1))

    @classmethod
    def _trusted(cls, x: Fp2Pair, y: Fp2Pair) -> "G2Point":
        point = object.__new__(cls)
        object.__setattr__(point, "x", x)
        object.__setattr__(point, "y", y)
        return point

    @classmethod
    def _from_backend(cls, point) -> "G2Point":
        if _is_inf(point):
            return cls.identity()
        x, y = _normalize(point)
        return cls._trusted(fp2_coeffs(x), fp2_coeffs(y))

    def is_identity(self) -> bool:
        return self.x == (0, 0) and self.y == (0, 0)

    def is_on_curve(self) -> bool:
        if self.is_identity():
            return True
        return bool(_is_on_curve(self.to_backend(), _B2))

    def in_subgroup(self) -> bool:
        if self.is_identity():
            return True
        point = self.to_backend()
        # (r - 1) * Q == -Q holds exactly for points of order dividing r
        return G2Point._from_backend(_multiply(point, CURVE_ORDER - 1)) == self.negate()

    def to_backend(self):
        if self.is_identity():
            return Z2
        return (fp2(*self.x), fp2(*self.y), FQ2.one())

    def add(self, other: "G2Point") -> "G2Point":
        if not isinstance(other, G2Point):
            raise TypeError("can only add G2Point to G2Point")
        if self.is_identity():
            return other
        if other.is_identity():
            return self
        return G2Point._from_backend(_add(self.to_backend(), other.to_backend()))

    def negate(self) -> "G2Point":
        if self.is_identity():
            return self
        y0, y1 = self.y
        return G2Point._trusted(
            self.x,
            ((FIELD_MODULUS - y0) % FIELD_MODULUS, (FIELD_MODULUS - y1) % FIELD_MODULUS),
        )

    def scalar_mul(self, scalar: int) -> "G2Point":
        k = to_fr(scalar)
        if k == 0 or self.is_identity():
            return G2Point.identity()
        return G2Point._from_backend(_multiply(self.to_backend(), k))

    __add__ = add
    __neg__ = negate

    def __sub__(self, other: "G2Point") -> "G2Point":
        return self.add(-other)

    def __mul__(self, scalar: int) -> "G2Point":
        return self.scalar_mul(scalar)

    __rmul__ = __mul__

    def to_bytes(self) -> bytes:
        return b"".join(fp_to_bytes(c) for c in (*self.x, *self.y))

    def __repr__(self) -> str:
        if self.is_identity():
            return "G2Point(identity)"
        return (
            f"G2Point(x=(0x{self.x[0]:064x}, 0x{self.x[1]:064x}), "
            f"y=(0x{self.y[0]:064x}, 0x{self.y[1]:064x}))"
        )
