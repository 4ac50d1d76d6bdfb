"""
Merkle tree utilities for the agent registry.
Uses SHA-256 with domain separation for leaf/node hashing.

Digests are reduced modulo the BN254 scalar field order so every node,
and in particular the root, is a canonical Fr element that can be passed
as a Groth16 public input.

Trees have a fixed depth. Unused slots hold EMPTY_LEAF and whole empty
subtrees collapse to precomputed zero hashes, so only the occupied prefix
of the leaf range is ever hashed.
"""

import hashlib
from functools import lru_cache
from typing import Dict, List, Sequence, Tuple

from .config import CURVE_ORDER, DOMAIN_SEPARATORS, EMPTY_LEAF, HASH_BYTES, MAX_TREE_DEPTH

# (sibling, is_left): is_left means the sibling sits to the left of the
# current node on the way up
PathEntry = Tuple[bytes, bool]


def _field_digest(data: bytes) -> bytes:
    value = int.from_bytes(hashlib.sha256(data).digest(), "big") % CURVE_ORDER
    return value.to_bytes(HASH_BYTES, "big")


def hash_leaf(domain_sep: bytes, leaf_data: bytes) -> bytes:
    """
    Hash a Merkle tree leaf with domain separation.

    Args:
        domain_sep: Domain separator (usually DOMAIN_SEPARATORS["merkle_leaf"])
        leaf_data: Leaf content (e.g., a registered agent hash)

    Returns:
        32-byte digest, canonical in Fr

    Example:
        leaf = hash_leaf(DOMAIN_SEPARATORS["merkle_leaf"], agent_hash)
    """
    return _field_digest(domain_sep + leaf_data)


def hash_node(left: bytes, right: bytes) -> bytes:
    """
    Hash two Merkle node hashes.

    Args:
        left: Left child hash (32 bytes)
        right: Right child hash (32 bytes)

    Returns:
        32-byte digest, canonical in Fr

    Note:
        Uses fixed left||right ordering (no sorting).
        Domain separation applied.
    """
    return _field_digest(DOMAIN_SEPARATORS["merkle_node"] + left + right)


@lru_cache(maxsize=None)
def _zero_hashes(depth: int) -> Tuple[bytes, ...]:
    zeros = [EMPTY_LEAF]
    for _ in range(depth):
        zeros.append(hash_node(zeros[-1], zeros[-1]))
    return tuple(zeros)


def zero_hashes(depth: int) -> Tuple[bytes, ...]:
    """
    Roots of empty subtrees, indexed by height.

    zero_hashes(d)[0] is the empty leaf and zero_hashes(d)[d] is the root of
    a completely empty depth-d tree.
    """
    if depth < 0 or depth > MAX_TREE_DEPTH:
        raise ValueError(f"depth must be in 0..{MAX_TREE_DEPTH}")
    return _zero_hashes(depth)


def build_tree(
    leaves: Sequence[bytes], depth: int
) -> Tuple[bytes, Dict[int, List[PathEntry]]]:
    """
    Build a fixed-depth Merkle tree and generate authentication paths.

    Args:
        leaves: Leaf hashes (each 32 bytes) for slots 0..len(leaves)-1
        depth: Tree depth; capacity is 2**depth leaves

    Returns:
        (root_hash, auth_paths)
        - root_hash: 32-byte Merkle root
        - auth_paths: Dict mapping leaf_index -> [(sibling, is_left), ...]
          with exactly `depth` entries per leaf

    Algorithm:
        - Slots past len(leaves) are empty; their subtrees use zero hashes
        - Build tree bottom-up
        - Track sibling positions for authentication paths
    """
    zeros = zero_hashes(depth)
    if len(leaves) > (1 << depth):
        raise ValueError(f"too many leaves for depth {depth}")

    auth_paths: Dict[int, List[PathEntry]] = {i: [] for i in range(len(leaves))}
    current_level: List[Tuple[bytes, List[int]]] = [
        (leaf, [i]) for i, leaf in enumerate(leaves)
    ]

    for height in range(depth):
        next_level: List[Tuple[bytes, List[int]]] = []

        for i in range(0, len(current_level), 2):
            left_hash, left_indices = current_level[i]

            if i + 1 < len(current_level):
                right_hash, right_indices = current_level[i + 1]
            else:
                # Right subtree is empty
                right_hash, right_indices = zeros[height], []

            parent = hash_node(left_hash, right_hash)

            for leaf_idx in left_indices:
                auth_paths[leaf_idx].append((right_hash, False))
            for leaf_idx in right_indices:
                auth_paths[leaf_idx].append((left_hash, True))

            next_level.append((parent, left_indices + right_indices))

        current_level = next_level

    root = current_level[0][0] if current_level else zeros[depth]
    return root, auth_paths


def path_for_empty_slot(
    leaves: Sequence[bytes], index: int, depth: int
) -> List[PathEntry]:
    """Authentication path of an unoccupied slot (index >= len(leaves))."""
    if index < len(leaves) or index >= (1 << depth):
        raise ValueError("index is not an empty slot")
    # Appending the empty leaf does not change any hash
    _, paths = build_tree(list(leaves) + [EMPTY_LEAF] * (index - len(leaves) + 1), depth)
    return paths[index]


def path_indices(path: Sequence[PathEntry]) -> List[int]:
    """Circuit-style direction bits: 1 where the current node is a right child."""
    return [1 if is_left else 0 for _, is_left in path]


def verify_path(
    leaf_hash: bytes,
    path: Sequence[PathEntry],
    root: bytes
) -> bool:
    """
    Verify a Merkle authentication path.

    Args:
        leaf_hash: Hash of the leaf (32 bytes)
        path: Authentication path [(sibling, is_left), ...]
        root: Expected root hash (32 bytes)

    Returns:
        True if path is valid, False otherwise

    Example:
        if verify_path(my_leaf, my_path, expected_root):
            print("Leaf is in tree")
    """
    current = leaf_hash

    for sibling, is_left in path:
        if is_left:
            # Sibling is on left, current on right
            current = hash_node(sibling, current)
        else:
            # Sibling is on right, current on left
            current = hash_node(current, sibling)

    return current == root
