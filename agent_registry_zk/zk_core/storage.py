"""
Host key-value storage contract for the registry.

The host supplies persistence; the accumulator only assumes read-your-writes
consistency. Keys are 32-byte hashes, values are opaque bytes. Host
implementations signal outages with StorageUnavailableError.
"""

from __future__ import annotations

import hashlib
import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional

from .config import DOMAIN_SEPARATORS, HASH_BYTES


def _check_key(key: bytes) -> bytes:
    if not isinstance(key, (bytes, bytearray)) or len(key) != HASH_BYTES:
        raise ValueError(f"storage key must be {HASH_BYTES} bytes")
    return bytes(key)


def meta_key(name: str) -> bytes:
    """32-byte key for registry bookkeeping entries."""
    return hashlib.sha256(
        DOMAIN_SEPARATORS["storage_meta"] + name.encode("utf-8")
    ).digest()


def leaf_slot_key(index: int) -> bytes:
    """32-byte key under which the agent hash of slot `index` is stored."""
    return hashlib.sha256(
        DOMAIN_SEPARATORS["storage_leaf"] + index.to_bytes(8, "big")
    ).digest()


def index_key(agent_hash: bytes) -> bytes:
    """32-byte key under which the slot index of a registered agent is stored."""
    return hashlib.sha256(
        DOMAIN_SEPARATORS["storage_index"] + _check_key(agent_hash)
    ).digest()


class KeyValueStore(ABC):
    """Persistent storage keyed by 32-byte hashes."""

    @abstractmethod
    def get(self, key: bytes) -> Optional[bytes]:
        """Return the stored value or None."""

    @abstractmethod
    def set(self, key: bytes, value: bytes) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def has(self, key: bytes) -> bool:
        """Whether key has a value."""


class InMemoryStore(KeyValueStore):
    """
    Dict-backed store for tests and the CLI.

    Example:
        >>> store = InMemoryStore()
        >>> store.set(b"\\x01" * 32, b"value")
        >>> store.get(b"\\x01" * 32)
        b'value'
    """

    def __init__(self) -> None:
        self._data: Dict[bytes, bytes] = {}
        self._lock = threading.Lock()

    def get(self, key: bytes) -> Optional[bytes]:
        key = _check_key(key)
        with self._lock:
            return self._data.get(key)

    def set(self, key: bytes, value: bytes) -> None:
        key = _check_key(key)
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError("storage value must be bytes")
        with self._lock:
            self._data[key] = bytes(value)

    def has(self, key: bytes) -> bool:
        key = _check_key(key)
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
