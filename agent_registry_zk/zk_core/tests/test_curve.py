"""
Unit tests for BN254 G1/G2 point types.
"""

import pytest
from py_ecc.optimized_bn128 import FQ2, b2

from agent_registry_zk.zk_core import feature_flags
from agent_registry_zk.zk_core.config import CURVE_ORDER, FIELD_MODULUS
from agent_registry_zk.zk_core.curve import G1Point, G2Point
from agent_registry_zk.zk_core.exceptions import InvalidEncodingError, InvalidPointError
from agent_registry_zk.zk_core.fields import fp2, fp2_coeffs


@pytest.fixture(autouse=True)
def reset_feature_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    feature_flags.set_g2_subgroup_check(None)
    monkeypatch.delenv("AGENT_REGISTRY_G2_SUBGROUP_CHECK", raising=False)
    yield
    feature_flags.set_g2_subgroup_check(None)


def _fp2_sqrt(a):
    # p = 3 mod 4 square root in Fp2
    minus_one = fp2(FIELD_MODULUS - 1, 0)
    a1 = a ** ((FIELD_MODULUS - 3) // 4)
    alpha = a1 * a1 * a
    x0 = a1 * a
    if alpha == minus_one:
        candidate = fp2(0, 1) * x0
    else:
        candidate = (FQ2.one() + alpha) ** ((FIELD_MODULUS - 1) // 2) * x0
    return candidate if candidate * candidate == a else None


def _twist_point_outside_subgroup():
    x = 1
    while True:
        X = fp2(x, 0)
        Y = _fp2_sqrt(X * X * X + b2)
        if Y is not None:
            return fp2_coeffs(X), fp2_coeffs(Y)
        x += 1


class TestG1Point:
    def test_generator_encoding(self):
        g = G1Point.generator()
        assert (g.x, g.y) == (1, 2)
        assert g.to_bytes() == (1).to_bytes(32, "big") + (2).to_bytes(32, "big")

    def test_identity_is_neutral(self):
        g = G1Point.generator()
        zero = G1Point.identity()
        assert g + zero == g
        assert zero + g == g
        assert zero.to_bytes() == b"\x00" * 64
        assert G1Point.from_bytes(b"\x00" * 64).is_identity()

    def test_add_matches_scalar_mul(self):
        g = G1Point.generator()
        assert g + g == g * 2
        assert g + g + g == 3 * g

    def test_negation(self):
        g = G1Point.generator()
        assert (g + (-g)).is_identity()
        assert (g * 5 - g * 2) == g * 3

    def test_order_r(self):
        g = G1Point.generator()
        assert (g * CURVE_ORDER).is_identity()
        assert g * (CURVE_ORDER + 1) == g
        assert (g * 0).is_identity()

    def test_bytes_round_trip(self):
        point = G1Point.generator() * 123456789
        assert G1Point.from_bytes(point.to_bytes()) == point

    def test_off_curve_rejected(self):
        with pytest.raises(InvalidPointError):
            G1Point(1, 3)

    def test_non_canonical_coordinate_rejected(self):
        with pytest.raises(InvalidEncodingError):
            G1Point(FIELD_MODULUS + 1, 2)
        data = FIELD_MODULUS.to_bytes(32, "big") + (2).to_bytes(32, "big")
        with pytest.raises(InvalidEncodingError):
            G1Point.from_bytes(data)

    def test_wrong_length_rejected(self):
        with pytest.raises(InvalidEncodingError):
            G1Point.from_bytes(b"\x00" * 63)

    def test_frozen(self):
        g = G1Point.generator()
        with pytest.raises(AttributeError):
            g.x = 5


class TestG2Point:
    def test_identity_is_neutral(self):
        g = G2Point.generator()
        assert g + G2Point.identity() == g
        assert G2Point.identity().to_bytes() == b"\x00" * 128
        assert G2Point.from_bytes(b"\x00" * 128).is_identity()

    def test_generator_in_subgroup(self):
        assert G2Point.generator().in_subgroup()

    def test_bytes_round_trip(self):
        point = G2Point.generator() * 987654321
        data = point.to_bytes()
        assert len(data) == 128
        assert data[:32] == point.x[0].to_bytes(32, "big")
        assert data[32:64] == point.x[1].to_bytes(32, "big")
        assert G2Point.from_bytes(data) == point

    def test_negation_and_order(self):
        g = G2Point.generator()
        assert (g - g).is_identity()
        assert (g * CURVE_ORDER).is_identity()

    def test_off_curve_rejected(self):
        g = G2Point.generator()
        with pytest.raises(InvalidPointError):
            G2Point(g.x, (g.y[0], (g.y[1] + 1) % FIELD_MODULUS))

    def test_non_canonical_rejected(self):
        g = G2Point.generator()
        with pytest.raises(InvalidEncodingError):
            G2Point((g.x[0] + FIELD_MODULUS, g.x[1]), g.y)

    def test_point_outside_subgroup_rejected(self):
        x, y = _twist_point_outside_subgroup()
        with pytest.raises(InvalidPointError, match="subgroup"):
            G2Point(x, y)

    def test_subgroup_check_can_be_disabled(self):
        x, y = _twist_point_outside_subgroup()
        feature_flags.set_g2_subgroup_check(False)
        point = G2Point(x, y)
        assert point.is_on_curve()
        assert not point.in_subgroup()
