"""
Agent registry non-membership verifier.

Checks Groth16 (BN254) proofs that an agent hash is absent from a Merkle
committed registry, and maintains that registry.

⚠️ DRAFT — requires crypto review before production use
"""

__version__ = "0.1.0"

DISCLAIMER = (
    "⚠️  DRAFT - requires cryptographic review before production use. "
    "Proof generation and trusted setup are out of scope."
)


def print_disclaimer() -> None:
    print(DISCLAIMER)
