"""
⚠️ DRAFT — requires crypto review before production use

Groth16 verification over BN254.

Verification equation:
    e(A, B) == e(alpha, beta) * e(acc, gamma) * e(C, delta)

checked as a single product against the identity of GT:
    e(A, B) * e(-acc, gamma) * e(-C, delta) * e(-alpha, beta) == 1

where acc = IC[0] + sum_i input_i * IC[i+1].

A false proof is VerifyResult.INVALID; structurally malformed input is
VerifyResult.MALFORMED and is rejected before any pairing work.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Sequence, Tuple

import cbor2

from .config import (
    CURVE_NAME,
    G1_BYTES,
    G2_BYTES,
    NON_MEMBER_FLAG,
    NON_MEMBER_FLAG_INDEX,
    NON_MEMBERSHIP_PUBLIC_INPUTS,
    PROOF_BYTES,
    SERIALIZATION_VERSION,
)
from .curve import G1Point, G2Point
from .exceptions import InvalidEncodingError, MalformedInputError
from .fields import fr_from_bytes, is_canonical_scalar
from .pairing import pairing_product_equals_one

logger = logging.getLogger(__name__)


class VerifyResult(Enum):
    """Outcome of a Groth16 verification."""

    VALID = "valid"
    INVALID = "invalid"
    MALFORMED = "malformed"


# ============================================================================
# PROOF AND VERIFICATION KEY
# ============================================================================


def _decode_cbor_map(data: bytes, kind: str) -> Dict[str, Any]:
    try:
        decoded = cbor2.loads(data)
    except Exception as exc:
        raise InvalidEncodingError(f"{kind} is not valid CBOR") from exc
    if not isinstance(decoded, dict):
        raise InvalidEncodingError(f"{kind} must decode to a map")
    if decoded.get("version") != SERIALIZATION_VERSION:
        raise InvalidEncodingError(f"unsupported {kind} version")
    if decoded.get("curve") != CURVE_NAME:
        raise InvalidEncodingError(f"unsupported {kind} curve")
    return decoded


def _require_bytes(value: Any, name: str) -> bytes:
    if not isinstance(value, (bytes, bytearray)):
        raise InvalidEncodingError(f"{name} must be bytes")
    return bytes(value)


@dataclass(frozen=True)
class Groth16Proof:
    """
    Prover output (A, B, C).

    Byte layout (256 bytes, 32-byte big-endian coordinates):
        a.x a.y b.x0 b.x1 b.y0 b.y1 c.x c.y
    """

    pi_a: G1Point
    pi_b: G2Point
    pi_c: G1Point

    @classmethod
    def from_bytes(cls, data: bytes) -> "Groth16Proof":
        """
        Decode the eight-coordinate proof encoding.

        Raises:
            InvalidEncodingError: Wrong length or non-canonical coordinate
            InvalidPointError: A point is not on its curve
        """
        if not isinstance(data, (bytes, bytearray)) or len(data) != PROOF_BYTES:
            raise InvalidEncodingError(f"proof must be {PROOF_BYTES} bytes")
        data = bytes(data)
        a_end = G1_BYTES
        b_end = a_end + G2_BYTES
        return cls(
            pi_a=G1Point.from_bytes(data[:a_end]),
            pi_b=G2Point.from_bytes(data[a_end:b_end]),
            pi_c=G1Point.from_bytes(data[b_end:]),
        )

    def to_bytes(self) -> bytes:
        return self.pi_a.to_bytes() + self.pi_b.to_bytes() + self.pi_c.to_bytes()

    def serialize(self) -> bytes:
        """Versioned CBOR envelope."""
        return cbor2.dumps(
            {
                "version": SERIALIZATION_VERSION,
                "curve": CURVE_NAME,
                "proof": self.to_bytes(),
            }
        )

    @classmethod
    def deserialize(cls, data: bytes) -> "Groth16Proof":
        decoded = _decode_cbor_map(data, "proof")
        return cls.from_bytes(_require_bytes(decoded.get("proof"), "proof"))


@dataclass(frozen=True)
class VerificationKey:
    """
    Trusted-setup verification key.

    `ic` has one entry per public input plus the constant term IC[0].
    """

    alpha: G1Point
    beta: G2Point
    gamma: G2Point
    delta: G2Point
    ic: Tuple[G1Point, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "ic", tuple(self.ic))
        if not self.ic:
            raise MalformedInputError("verification key needs at least IC[0]")

    @property
    def num_public_inputs(self) -> int:
        return len(self.ic) - 1

    def to_bytes(self) -> bytes:
        parts = [
            self.alpha.to_bytes(),
            self.beta.to_bytes(),
            self.gamma.to_bytes(),
            self.delta.to_bytes(),
        ]
        parts.extend(point.to_bytes() for point in self.ic)
        return b"".join(parts)

    @classmethod
    def from_bytes(cls, data: bytes) -> "VerificationKey":
        """
        Decode alpha || beta || gamma || delta || IC[0] || IC[1] || ...

        Raises:
            InvalidEncodingError: Wrong length or non-canonical coordinate
            InvalidPointError: A point is not on its curve
        """
        if not isinstance(data, (bytes, bytearray)):
            raise InvalidEncodingError("verification key must be bytes")
        data = bytes(data)
        head = G1_BYTES + 3 * G2_BYTES
        if len(data) < head + G1_BYTES or (len(data) - head) % G1_BYTES:
            raise InvalidEncodingError("verification key has invalid length")

        offset = G1_BYTES
        alpha = G1Point.from_bytes(data[:offset])
        g2_points = []
        for _ in range(3):
            g2_points.append(G2Point.from_bytes(data[offset:offset + G2_BYTES]))
            offset += G2_BYTES
        ic = [
            G1Point.from_bytes(data[start:start + G1_BYTES])
            for start in range(offset, len(data), G1_BYTES)
        ]
        beta, gamma, delta = g2_points
        return cls(alpha=alpha, beta=beta, gamma=gamma, delta=delta, ic=tuple(ic))

    def serialize(self) -> bytes:
        return cbor2.dumps(
            {
                "version": SERIALIZATION_VERSION,
                "curve": CURVE_NAME,
                "n_public": self.num_public_inputs,
                "vk": self.to_bytes(),
            }
        )

    @classmethod
    def deserialize(cls, data: bytes) -> "VerificationKey":
        decoded = _decode_cbor_map(data, "verification key")
        vk = cls.from_bytes(_require_bytes(decoded.get("vk"), "vk"))
        if decoded.get("n_public") != vk.num_public_inputs:
            raise InvalidEncodingError("verification key public input count mismatch")
        return vk


# ============================================================================
# PUBLIC INPUTS
# ============================================================================


@dataclass(frozen=True)
class NonMembershipInputs:
    """
    Public inputs of the non-membership circuit, in circuit order.

    root and agent_hash are 32-byte big-endian values that must already be
    canonical scalars (< r); the circuit hashes live in Fr.
    """

    root: bytes
    agent_hash: bytes
    non_member_flag: int = NON_MEMBER_FLAG

    def as_scalars(self) -> Tuple[int, int, int]:
        """
        Map to Fr scalars ordered as NON_MEMBERSHIP_PUBLIC_INPUTS.

        Raises:
            InvalidEncodingError: If root or agent_hash is not a canonical scalar
        """
        return (
            fr_from_bytes(self.root),
            fr_from_bytes(self.agent_hash),
            self.non_member_flag,
        )


# ============================================================================
# VERIFICATION
# ============================================================================


def compute_public_input_accumulator(
    ic: Sequence[G1Point], public_inputs: Sequence[int]
) -> G1Point:
    """
    Compute acc = IC[0] + sum_i public_inputs[i] * IC[i+1] in G1.

    Raises:
        MalformedInputError: If len(ic) != len(public_inputs) + 1 or a scalar
            is not canonical in Fr
    """
    if len(ic) != len(public_inputs) + 1:
        raise MalformedInputError(
            f"IC length {len(ic)} != 1 + number of public inputs {len(public_inputs)}"
        )
    acc = ic[0]
    for index, scalar in enumerate(public_inputs):
        if not is_canonical_scalar(scalar):
            raise MalformedInputError(f"public input {index} is not a canonical Fr scalar")
        if scalar:
            acc = acc + ic[index + 1] * scalar
    return acc


def _structure_errors(
    proof: Groth16Proof, vk: VerificationKey, public_inputs: Sequence[int]
) -> str | None:
    if not isinstance(proof, Groth16Proof):
        return "proof must be Groth16Proof"
    if not isinstance(vk, VerificationKey):
        return "verification key must be VerificationKey"
    if isinstance(public_inputs, (str, bytes, bytearray)):
        return "public inputs must be a sequence of scalars"
    try:
        count = len(public_inputs)
    except TypeError:
        return "public inputs must be a sequence of scalars"
    if count + 1 != len(vk.ic):
        return f"expected {len(vk.ic) - 1} public inputs, got {count}"

    g1_points = (proof.pi_a, proof.pi_c, vk.alpha, *vk.ic)
    g2_points = (proof.pi_b, vk.beta, vk.gamma, vk.delta)
    if not all(isinstance(p, G1Point) and p.is_on_curve() for p in g1_points):
        return "G1 point failed validation"
    if not all(isinstance(q, G2Point) and q.is_on_curve() for q in g2_points):
        return "G2 point failed validation"

    for index, scalar in enumerate(public_inputs):
        if not is_canonical_scalar(scalar):
            return f"public input {index} is not a canonical Fr scalar"
    return None


def verify(
    proof: Groth16Proof, vk: VerificationKey, public_inputs: Sequence[int]
) -> VerifyResult:
    """
    Verify a Groth16 proof.

    Pure and side-effect free; safe to call concurrently.

    Args:
        proof: Decoded proof
        vk: Verification key
        public_inputs: Scalars in [0, r), ordered as the circuit's IC

    Returns:
        VerifyResult.VALID, INVALID or MALFORMED. Never raises for bad input.
    """
    reason = _structure_errors(proof, vk, public_inputs)
    if reason is not None:
        logger.debug("groth16 verify rejected as malformed: %s", reason)
        return VerifyResult.MALFORMED

    acc = compute_public_input_accumulator(vk.ic, list(public_inputs))
    pairs = [
        (proof.pi_a, proof.pi_b),
        (-acc, vk.gamma),
        (-proof.pi_c, vk.delta),
        (-vk.alpha, vk.beta),
    ]
    if pairing_product_equals_one(pairs):
        return VerifyResult.VALID

    logger.debug("groth16 pairing check failed")
    return VerifyResult.INVALID


def verify_non_membership(
    proof: Groth16Proof, vk: VerificationKey, public_inputs: Sequence[int]
) -> VerifyResult:
    """
    Verify a non-membership proof with inputs (root, agent_hash, flag).

    The circuit only proves the non-member branch when flag == 1, so any
    other flag is rejected before the pairing engine runs.

    The root is taken as given. Whether it matches the registry's current
    root is the caller's policy and is not checked here.
    """
    if isinstance(public_inputs, NonMembershipInputs):
        try:
            public_inputs = public_inputs.as_scalars()
        except MalformedInputError as exc:
            logger.debug("non-membership inputs malformed: %s", exc)
            return VerifyResult.MALFORMED

    try:
        count = len(public_inputs)
    except TypeError:
        return VerifyResult.MALFORMED
    if count != len(NON_MEMBERSHIP_PUBLIC_INPUTS):
        logger.debug("non-membership expects %d inputs, got %d",
                     len(NON_MEMBERSHIP_PUBLIC_INPUTS), count)
        return VerifyResult.MALFORMED

    flag = public_inputs[NON_MEMBER_FLAG_INDEX]
    if not is_canonical_scalar(flag):
        logger.debug("non-membership flag is not a canonical scalar")
        return VerifyResult.MALFORMED
    if flag != NON_MEMBER_FLAG:
        logger.debug("non-membership flag is %d, expected %d", flag, NON_MEMBER_FLAG)
        return VerifyResult.INVALID

    return verify(proof, vk, public_inputs)
