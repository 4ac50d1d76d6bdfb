"""Tests for Fp / Fp2 / Fr helpers."""

import pytest

from agent_registry_zk.zk_core import fields
from agent_registry_zk.zk_core.config import CURVE_ORDER, FIELD_MODULUS
from agent_registry_zk.zk_core.exceptions import InvalidEncodingError


class TestFp:
    def test_add_wraps_modulus(self):
        assert fields.fp_add(FIELD_MODULUS - 1, 2) == 1

    def test_sub_and_neg(self):
        assert fields.fp_sub(1, 2) == FIELD_MODULUS - 1
        assert fields.fp_neg(5) + 5 == 0

    def test_mul_inverse_is_one(self):
        value = 0x1234567890ABCDEF
        assert fields.fp_mul(value, fields.fp_inv(value)) == 1

    def test_inverse_of_zero_raises(self):
        with pytest.raises(ZeroDivisionError):
            fields.fp_inv(0)

    def test_rejects_non_int(self):
        with pytest.raises(TypeError):
            fields.fp(1.5)
        with pytest.raises(TypeError):
            fields.fp(True)


class TestFp2:
    def test_u_squared_is_minus_one(self):
        u = fields.fp2(0, 1)
        assert fields.fp2_coeffs(fields.fp2_mul(u, u)) == (FIELD_MODULUS - 1, 0)

    def test_add_and_neg(self):
        a = fields.fp2(3, 4)
        assert fields.fp2_coeffs(fields.fp2_add(a, fields.fp2_neg(a))) == (0, 0)

    def test_inverse(self):
        a = fields.fp2(7, 11)
        assert fields.fp2_coeffs(fields.fp2_mul(a, fields.fp2_inv(a))) == (1, 0)

    def test_inverse_of_zero_raises(self):
        with pytest.raises(ZeroDivisionError):
            fields.fp2_inv(fields.fp2(0, 0))

    def test_bytes_layout_is_c0_then_c1(self):
        data = fields.fp2_to_bytes(fields.fp2(1, 2))
        assert data[:32] == (1).to_bytes(32, "big")
        assert data[32:] == (2).to_bytes(32, "big")
        assert fields.fp2_coeffs(fields.fp2_from_bytes(data)) == (1, 2)


class TestCanonicalEncoding:
    def test_fp_from_bytes_accepts_p_minus_one(self):
        data = (FIELD_MODULUS - 1).to_bytes(32, "big")
        assert fields.fp_from_bytes(data) == FIELD_MODULUS - 1

    def test_fp_from_bytes_rejects_p(self):
        with pytest.raises(InvalidEncodingError):
            fields.fp_from_bytes(FIELD_MODULUS.to_bytes(32, "big"))

    def test_fp_from_bytes_rejects_all_ff(self):
        with pytest.raises(InvalidEncodingError):
            fields.fp_from_bytes(b"\xff" * 32)

    @pytest.mark.parametrize("length", [0, 31, 33, 64])
    def test_fp_from_bytes_rejects_wrong_length(self, length):
        with pytest.raises(InvalidEncodingError):
            fields.fp_from_bytes(b"\x01" * length)

    def test_fr_from_bytes_rejects_r(self):
        with pytest.raises(InvalidEncodingError):
            fields.fr_from_bytes(CURVE_ORDER.to_bytes(32, "big"))
        assert fields.fr_from_bytes((CURVE_ORDER - 1).to_bytes(32, "big")) == CURVE_ORDER - 1

    def test_is_canonical_scalar(self):
        assert fields.is_canonical_scalar(0)
        assert fields.is_canonical_scalar(CURVE_ORDER - 1)
        assert not fields.is_canonical_scalar(CURVE_ORDER)
        assert not fields.is_canonical_scalar(-1)
        assert not fields.is_canonical_scalar(True)
        assert not fields.is_canonical_scalar("1")

    def test_to_fr_reduces(self):
        assert fields.to_fr(CURVE_ORDER + 5) == 5
        assert fields.fr_to_bytes(CURVE_ORDER + 1) == (1).to_bytes(32, "big")
