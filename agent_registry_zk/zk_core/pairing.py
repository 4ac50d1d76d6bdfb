"""
Optimal-ate pairing product check over BN254.

    prod_i e(P_i, Q_i) == 1  in Fp12

Each pair runs its own Miller loop; the Miller values are multiplied and a
single final exponentiation is applied to the product. Pairs with an
identity operand contribute 1 and are skipped.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

from py_ecc.optimized_bn128 import FQ12, final_exponentiate, pairing

from .curve import G1Point, G2Point
from .exceptions import InvalidEncodingError

logger = logging.getLogger(__name__)

PairingPair = Tuple[G1Point, G2Point]


def _validated_pairs(pairs: Iterable[PairingPair]) -> List[PairingPair]:
    validated: List[PairingPair] = []
    for index, pair in enumerate(pairs):
        if not isinstance(pair, tuple) or len(pair) != 2:
            raise InvalidEncodingError(f"pair {index} must be a (G1, G2) tuple")
        p, q = pair
        if not isinstance(p, G1Point):
            raise InvalidEncodingError(f"pair {index}: G1 operand must be G1Point")
        if not isinstance(q, G2Point):
            raise InvalidEncodingError(f"pair {index}: G2 operand must be G2Point")
        validated.append((p, q))
    return validated


def miller_product(pairs: Iterable[PairingPair]) -> FQ12:
    """Product of the Miller loop values, before final exponentiation."""
    acc = FQ12.one()
    for p, q in _validated_pairs(pairs):
        if p.is_identity() or q.is_identity():
            continue
        acc = acc * pairing(q.to_backend(), p.to_backend(), final_exponentiate=False)
    return acc


def pairing_product(pairs: Iterable[PairingPair]) -> FQ12:
    """Reduced pairing product in the target group."""
    return final_exponentiate(miller_product(pairs))


def pairing_product_equals_one(pairs: Iterable[PairingPair]) -> bool:
    """
    Check whether the product of e(P_i, Q_i) is the identity of GT.

    Args:
        pairs: Sequence of (G1Point, G2Point). To move a term across the
            equation, negate its G1 operand (-P) before passing it in.

    Returns:
        True iff the product equals 1

    Raises:
        InvalidEncodingError: If an operand is not a validated point
    """
    pairs = _validated_pairs(pairs)
    result = pairing_product(pairs) == FQ12.one()
    logger.debug("pairing product over %d pairs -> %s", len(pairs), result)
    return result
