"""
Tests for the pairing product check.

Pairings are slow in pure Python; keep the number of products small.
"""

import pytest

from agent_registry_zk.zk_core.curve import G1Point, G2Point
from agent_registry_zk.zk_core.exceptions import InvalidEncodingError
from agent_registry_zk.zk_core.pairing import pairing_product_equals_one


def test_empty_product_is_one():
    assert pairing_product_equals_one([]) is True


def test_identity_operands_are_skipped():
    g1 = G1Point.generator()
    g2 = G2Point.generator()
    assert pairing_product_equals_one([(G1Point.identity(), g2), (g1, G2Point.identity())])


def test_bilinearity():
    g1 = G1Point.generator()
    g2 = G2Point.generator()
    # e(3P, 5Q) * e(-15P, Q) == 1
    assert pairing_product_equals_one([(g1 * 3, g2 * 5), (-(g1 * 15), g2)])


def test_single_nontrivial_pairing_is_not_one():
    assert pairing_product_equals_one([(G1Point.generator(), G2Point.generator())]) is False


def test_rejects_non_point_operands():
    with pytest.raises(InvalidEncodingError):
        pairing_product_equals_one([(G2Point.generator(), G1Point.generator())])
    with pytest.raises(InvalidEncodingError):
        pairing_product_equals_one([(G1Point.generator(),)])
