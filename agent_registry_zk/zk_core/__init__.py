"""Public API for zk_core: BN254 Groth16 verification and the Merkle registry."""
from __future__ import annotations

from .accumulator import EmptySlotWitness, MembershipWitness, MerkleAccumulator
from .curve import G1Point, G2Point
from .exceptions import (
    AccumulatorError,
    AccumulatorFullError,
    AlreadyRegisteredError,
    ConfigurationError,
    InvalidEncodingError,
    InvalidPointError,
    MalformedInputError,
    NotRegisteredError,
    RegistryProtocolError,
    StorageUnavailableError,
)
from .groth16 import (
    Groth16Proof,
    NonMembershipInputs,
    VerificationKey,
    VerifyResult,
    compute_public_input_accumulator,
    verify,
    verify_non_membership,
)
from .pairing import pairing_product_equals_one
from .storage import InMemoryStore, KeyValueStore

__all__ = [
    "G1Point",
    "G2Point",
    "pairing_product_equals_one",
    "Groth16Proof",
    "VerificationKey",
    "NonMembershipInputs",
    "VerifyResult",
    "compute_public_input_accumulator",
    "verify",
    "verify_non_membership",
    "MerkleAccumulator",
    "MembershipWitness",
    "EmptySlotWitness",
    "KeyValueStore",
    "InMemoryStore",
    "RegistryProtocolError",
    "MalformedInputError",
    "InvalidEncodingError",
    "InvalidPointError",
    "AccumulatorError",
    "AccumulatorFullError",
    "AlreadyRegisteredError",
    "NotRegisteredError",
    "StorageUnavailableError",
    "ConfigurationError",
]
