"""
⚠️ DRAFT — requires crypto review before production use

Cryptographic configuration for the agent registry verifier.

Curve parameters, wire sizes, domain separators and accumulator limits.
Values are checked against py_ecc at import time so a mismatched backend
fails fast instead of silently verifying against the wrong curve.
"""

from py_ecc import optimized_bn128

# ============================================================================
# CURVE SELECTION
# ============================================================================

# IMPLEMENTATION: BN254 (alt_bn128) via py_ecc.optimized_bn128
# - Curve used by snarkjs/circom Groth16 proofs
# - Same parameters as the EIP-196/197 precompiles

CURVE_NAME = "BN254"
CURVE_LIBRARY = "py_ecc"

# Base field modulus p
FIELD_MODULUS = 21888242871839275222246405745257275088696311157297823662689037894645226208583

# Scalar field order r (order of G1 and G2)
CURVE_ORDER = 21888242871839275222246405745257275088548364400416034343698204186575808495617

CURVE_B = 3  # y^2 = x^3 + 3 over Fp

# ============================================================================
# WIRE ENCODING
# ============================================================================

# Fixed 32-byte big-endian field elements
COORDINATE_BYTES = 32
G1_BYTES = 2 * COORDINATE_BYTES  # x || y
G2_BYTES = 4 * COORDINATE_BYTES  # x.c0 || x.c1 || y.c0 || y.c1
PROOF_BYTES = 2 * G1_BYTES + G2_BYTES  # pi_a || pi_b || pi_c
HASH_BYTES = 32

# CBOR envelope for proofs and verification keys
SERIALIZATION_FORMAT = "CBOR"
SERIALIZATION_VERSION = 1

# ============================================================================
# NON-MEMBERSHIP CIRCUIT CONTRACT
# ============================================================================

# Public input order is fixed by the circuit: (root, agent_hash, flag)
NON_MEMBERSHIP_PUBLIC_INPUTS = ("root", "agent_hash", "non_member_flag")
NON_MEMBER_FLAG_INDEX = 2
NON_MEMBER_FLAG = 1

# ============================================================================
# MERKLE ACCUMULATOR
# ============================================================================

DEFAULT_TREE_DEPTH = 8
MAX_TREE_DEPTH = 32

# Empty slots hold the zero leaf
EMPTY_LEAF = b"\x00" * HASH_BYTES

DOMAIN_SEPARATOR_PREFIX = b"AGENT_REGISTRY_V1_"

DOMAIN_SEPARATORS = {
    "merkle_leaf": DOMAIN_SEPARATOR_PREFIX + b"MERKLE_LEAF",
    "merkle_node": DOMAIN_SEPARATOR_PREFIX + b"MERKLE_NODE",
    "storage_meta": DOMAIN_SEPARATOR_PREFIX + b"STORAGE_META",
    "storage_leaf": DOMAIN_SEPARATOR_PREFIX + b"STORAGE_LEAF",
    "storage_index": DOMAIN_SEPARATOR_PREFIX + b"STORAGE_INDEX",
}

# ============================================================================
# VALIDATION
# ============================================================================


def validate_config() -> bool:
    """
    Validate configuration parameters.

    Returns:
        True if configuration is valid

    Raises:
        AssertionError: If configuration is invalid
    """
    assert CURVE_NAME == "BN254", "Invalid curve"
    assert CURVE_LIBRARY == "py_ecc", "Invalid library"
    assert FIELD_MODULUS == optimized_bn128.field_modulus, "Field modulus mismatch"
    assert CURVE_ORDER == optimized_bn128.curve_order, "Curve order mismatch"
    assert FIELD_MODULUS.bit_length() <= COORDINATE_BYTES * 8
    assert PROOF_BYTES == 256, "Proof encoding must be eight coordinates"
    assert 1 <= DEFAULT_TREE_DEPTH <= MAX_TREE_DEPTH, "Invalid default depth"
    assert len(set(DOMAIN_SEPARATORS.values())) == len(DOMAIN_SEPARATORS)

    return True


# Auto-validate on import
validate_config()
