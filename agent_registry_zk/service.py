"""
Host-facing boundary of the agent registry.

These are the operations an RPC or contract dispatcher calls:

    verify_non_membership(proof_bytes, public_root, agent_hash, flag) -> bool
    register_agent(agent_hash) -> root bytes
    is_agent_registered(agent_hash) -> bool
    get_merkle_root() -> root bytes

verify_non_membership never raises: malformed input and false proofs both
return False (fail closed). Registry operations propagate
StorageUnavailableError from the host store.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Optional

from .zk_core.accumulator import MerkleAccumulator
from .zk_core.config import CURVE_ORDER, HASH_BYTES, NON_MEMBER_FLAG
from .zk_core.exceptions import MalformedInputError
from .zk_core.groth16 import (
    Groth16Proof,
    NonMembershipInputs,
    VerificationKey,
    VerifyResult,
    verify_non_membership,
)
from .zk_core.storage import KeyValueStore

logger = logging.getLogger(__name__)


def hash_agent_description(description: str) -> bytes:
    """
    Hash a human-readable agent description into a 32-byte Fr element.

    Example:
        >>> len(hash_agent_description("Code Review Bot"))
        32
    """
    digest = hashlib.sha256(description.encode("utf-8")).digest()
    return (int.from_bytes(digest, "big") % CURVE_ORDER).to_bytes(HASH_BYTES, "big")


class AgentRegistryService:
    """
    Non-membership verifier plus the registry it is checked against.

    The verification key is loaded once and never mutated. The accumulator
    is the only mutable state and is owned by this service.

    Root freshness: by default the claimed root is taken as given and only
    the proof is checked; comparing it with get_merkle_root() is the
    caller's policy. Set enforce_current_root=True to reject proofs made
    against any root other than the current one.

    Example:
        >>> service = AgentRegistryService(vk)
        >>> root = service.register_agent(agent_hash)
        >>> service.is_agent_registered(agent_hash)
        True
    """

    def __init__(
        self,
        verification_key: VerificationKey,
        store: Optional[KeyValueStore] = None,
        depth: Optional[int] = None,
        enforce_current_root: bool = False,
    ) -> None:
        if not isinstance(verification_key, VerificationKey):
            raise TypeError("verification_key must be VerificationKey")
        self._vk = verification_key
        self._accumulator = MerkleAccumulator(store=store, depth=depth)
        self._enforce_current_root = enforce_current_root

    @property
    def verification_key(self) -> VerificationKey:
        return self._vk

    @property
    def accumulator(self) -> MerkleAccumulator:
        return self._accumulator

    def verify_non_membership(
        self,
        proof_bytes: bytes,
        public_root: bytes,
        agent_hash: bytes,
        flag: int,
    ) -> bool:
        """
        Verify a proof that agent_hash is not in the set committed by public_root.

        Args:
            proof_bytes: 256 bytes, eight 32-byte big-endian coordinates
            public_root: 32-byte Merkle root the proof was made against
            agent_hash: 32-byte agent hash
            flag: Non-membership flag, must be 1

        Returns:
            True only for a valid proof; False for anything else
        """
        if flag != NON_MEMBER_FLAG:
            logger.info("non-membership rejected: flag=%r", flag)
            return False

        try:
            proof = Groth16Proof.from_bytes(proof_bytes)
            inputs = NonMembershipInputs(
                root=public_root, agent_hash=agent_hash, non_member_flag=flag
            )
            scalars = inputs.as_scalars()
        except MalformedInputError as exc:
            logger.info("non-membership rejected as malformed: %s", exc)
            return False

        if self._enforce_current_root and bytes(public_root) != self.get_merkle_root():
            logger.info("non-membership rejected: root is not current")
            return False

        try:
            result = verify_non_membership(proof, self._vk, scalars)
        except Exception:
            logger.exception("non-membership verification failed unexpectedly")
            return False

        logger.info(
            "non-membership proof for %s: %s", bytes(agent_hash).hex(), result.value
        )
        return result is VerifyResult.VALID

    def register_agent(self, agent_hash: bytes) -> bytes:
        """Add agent_hash to the registry; returns the new 32-byte root."""
        return self._accumulator.register(agent_hash)

    def is_agent_registered(self, agent_hash: bytes) -> bool:
        return self._accumulator.is_registered(agent_hash)

    def get_merkle_root(self) -> bytes:
        return self._accumulator.current_root()
