"""
⚠️ DRAFT — requires crypto review before production use

Append-only Merkle accumulator over registered agent hashes.

State machine: Empty -> (register) -> NonEmpty -> (register) -> NonEmpty.
Registering a hash that is already present is a no-op that returns the
unchanged root.

Concurrency:
    - register() is serialised by a writer lock (single writer).
    - Readers take no lock. Each write publishes a new immutable snapshot
      (root, size) with one reference assignment after the leaf data is in
      place, so a reader sees either the old or the new tree, never a mix.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import cbor2

from . import feature_flags
from .config import DOMAIN_SEPARATORS, EMPTY_LEAF, HASH_BYTES
from .exceptions import (
    AccumulatorError,
    AccumulatorFullError,
    AlreadyRegisteredError,
    ConfigurationError,
    InvalidEncodingError,
    NotRegisteredError,
)
from .merkle import (
    PathEntry,
    build_tree,
    hash_leaf,
    hash_node,
    path_for_empty_slot,
    verify_path,
    zero_hashes,
)
from .storage import InMemoryStore, KeyValueStore, index_key, leaf_slot_key, meta_key

logger = logging.getLogger(__name__)

_SIZE_KEY = meta_key("size")
_DEPTH_KEY = meta_key("depth")
_ROOT_KEY = meta_key("root")


def _check_hash(agent_hash: bytes) -> bytes:
    if not isinstance(agent_hash, (bytes, bytearray)) or len(agent_hash) != HASH_BYTES:
        raise InvalidEncodingError(f"agent hash must be {HASH_BYTES} bytes")
    return bytes(agent_hash)


@dataclass(frozen=True)
class _Snapshot:
    root: bytes
    size: int


@dataclass(frozen=True)
class MembershipWitness:
    """Authentication path of a registered agent's leaf."""

    index: int
    leaf: bytes
    path: Tuple[PathEntry, ...]
    root: bytes

    def verify(self) -> bool:
        return verify_path(self.leaf, self.path, self.root)


@dataclass(frozen=True)
class EmptySlotWitness:
    """
    Authentication path of the first free slot, taken against `root`.

    This is the private witness a prover feeds the non-membership circuit
    alongside the agent hash.
    """

    index: int
    path: Tuple[PathEntry, ...]
    root: bytes
    leaf: bytes = EMPTY_LEAF

    def verify(self) -> bool:
        return verify_path(self.leaf, self.path, self.root)


class MerkleAccumulator:
    """
    Fixed-depth Merkle accumulator of registered agent hashes.

    Leaves are hash_leaf(MERKLE_LEAF, agent_hash) in insertion order.
    Existing state is reloaded from `store` on construction.

    Example:
        >>> acc = MerkleAccumulator(depth=4)
        >>> root = acc.register(b"\\x01" * 32)
        >>> acc.is_registered(b"\\x01" * 32)
        True
        >>> acc.current_root() == root
        True
    """

    def __init__(
        self, store: Optional[KeyValueStore] = None, depth: Optional[int] = None
    ) -> None:
        self._store = store if store is not None else InMemoryStore()
        self._depth = feature_flags.get_tree_depth(depth)
        self._zeros = zero_hashes(self._depth)
        self._write_lock = threading.Lock()

        self._agents: List[bytes] = []
        self._leaves: List[bytes] = []
        self._index: Dict[bytes, int] = {}
        # Left siblings on the insertion frontier, one per height
        self._frontier: List[bytes] = list(self._zeros[: self._depth])
        self._snapshot = _Snapshot(root=self._zeros[self._depth], size=0)

        self._load()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def capacity(self) -> int:
        return 1 << self._depth

    @property
    def size(self) -> int:
        return self._snapshot.size

    def __len__(self) -> int:
        return self._snapshot.size

    # ------------------------------------------------------------------
    # Reads (lock-free, snapshot based)
    # ------------------------------------------------------------------

    def current_root(self) -> bytes:
        """Latest committed root."""
        return self._snapshot.root

    def is_registered(self, agent_hash: bytes) -> bool:
        """Pure lookup; never mutates."""
        agent_hash = _check_hash(agent_hash)
        snapshot = self._snapshot
        index = self._index.get(agent_hash)
        return index is not None and index < snapshot.size

    def agents(self) -> Tuple[bytes, ...]:
        """Registered agent hashes in insertion order."""
        size = self._snapshot.size
        return tuple(self._agents[:size])

    def membership_witness(self, agent_hash: bytes) -> MembershipWitness:
        """
        Authentication path for a registered agent.

        Raises:
            NotRegisteredError: If the hash is not registered
        """
        agent_hash = _check_hash(agent_hash)
        snapshot = self._snapshot
        index = self._index.get(agent_hash)
        if index is None or index >= snapshot.size:
            raise NotRegisteredError("agent hash is not registered")

        leaves = self._leaves[: snapshot.size]
        root, paths = build_tree(leaves, self._depth)
        return MembershipWitness(
            index=index, leaf=leaves[index], path=tuple(paths[index]), root=root
        )

    def non_membership_witness(self, agent_hash: bytes) -> EmptySlotWitness:
        """
        Path to the first empty slot, for a hash that is not registered.

        Raises:
            AlreadyRegisteredError: If the hash is registered
            AccumulatorFullError: If no slot is free
        """
        agent_hash = _check_hash(agent_hash)
        snapshot = self._snapshot
        index = self._index.get(agent_hash)
        if index is not None and index < snapshot.size:
            raise AlreadyRegisteredError("agent hash is already registered")
        if snapshot.size >= self.capacity:
            raise AccumulatorFullError("no empty slot left in the tree")

        leaves = self._leaves[: snapshot.size]
        path = path_for_empty_slot(leaves, snapshot.size, self._depth)
        return EmptySlotWitness(index=snapshot.size, path=tuple(path), root=snapshot.root)

    # ------------------------------------------------------------------
    # Writes (single writer)
    # ------------------------------------------------------------------

    def register(self, agent_hash: bytes) -> bytes:
        """
        Add agent_hash as a leaf if absent and return the new root.

        Raises:
            InvalidEncodingError: If agent_hash is not 32 bytes
            AccumulatorFullError: If the tree has no free slot
            StorageUnavailableError: Propagated from the host store
        """
        agent_hash = _check_hash(agent_hash)
        with self._write_lock:
            snapshot = self._snapshot
            if agent_hash in self._index:
                logger.debug("agent %s already registered", agent_hash.hex())
                return snapshot.root
            if snapshot.size >= self.capacity:
                raise AccumulatorFullError(
                    f"accumulator is full ({self.capacity} leaves)"
                )

            index = snapshot.size
            leaf = hash_leaf(DOMAIN_SEPARATORS["merkle_leaf"], agent_hash)
            root, frontier = self._insert_path(index, leaf)

            # Persist before publishing. The size counter is the commit point:
            # slots at or past the stored size are ignored on load.
            self._store.set(leaf_slot_key(index), agent_hash)
            self._store.set(index_key(agent_hash), cbor2.dumps(index))
            self._store.set(_ROOT_KEY, root)
            self._store.set(_SIZE_KEY, cbor2.dumps(index + 1))

            self._agents.append(agent_hash)
            self._leaves.append(leaf)
            self._index[agent_hash] = index
            self._frontier = frontier
            self._snapshot = _Snapshot(root=root, size=index + 1)

        logger.info("registered agent %s at slot %d", agent_hash.hex(), index)
        return root

    def _insert_path(self, index: int, leaf: bytes) -> Tuple[bytes, List[bytes]]:
        frontier = list(self._frontier)
        current = leaf
        position = index
        for height in range(self._depth):
            if position % 2 == 0:
                frontier[height] = current
                current = hash_node(current, self._zeros[height])
            else:
                current = hash_node(frontier[height], current)
            position //= 2
        return current, frontier

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _load(self) -> None:
        stored_depth = self._store.get(_DEPTH_KEY)
        if stored_depth is None:
            self._store.set(_DEPTH_KEY, cbor2.dumps(self._depth))
        elif cbor2.loads(stored_depth) != self._depth:
            raise ConfigurationError(
                f"store was built with depth {cbor2.loads(stored_depth)}, "
                f"requested {self._depth}"
            )

        stored_size = self._store.get(_SIZE_KEY)
        size = cbor2.loads(stored_size) if stored_size is not None else 0
        if size == 0:
            return
        if size > self.capacity:
            raise AccumulatorError("stored size exceeds tree capacity")

        for index in range(size):
            agent_hash = self._store.get(leaf_slot_key(index))
            if agent_hash is None or len(agent_hash) != HASH_BYTES:
                raise AccumulatorError(f"stored slot {index} is missing or corrupt")
            marker = self._store.get(index_key(agent_hash))
            if marker is None or cbor2.loads(marker) != index:
                raise AccumulatorError(f"stored index for slot {index} is inconsistent")
            leaf = hash_leaf(DOMAIN_SEPARATORS["merkle_leaf"], agent_hash)
            _, self._frontier = self._insert_path(index, leaf)
            self._agents.append(agent_hash)
            self._leaves.append(leaf)
            self._index[agent_hash] = index

        root, _ = build_tree(self._leaves, self._depth)
        stored_root = self._store.get(_ROOT_KEY)
        if stored_root != root:
            logger.warning("stored root is stale, rewriting from leaves")
            self._store.set(_ROOT_KEY, root)
        self._snapshot = _Snapshot(root=root, size=size)
        logger.info("loaded %d registered agents (depth %d)", size, self._depth)
