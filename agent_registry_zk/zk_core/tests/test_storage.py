import pytest

from agent_registry_zk.zk_core.storage import (
    InMemoryStore,
    KeyValueStore,
    index_key,
    leaf_slot_key,
    meta_key,
)


def test_in_memory_store_round_trip():
    store = InMemoryStore()
    key = b"\x07" * 32
    assert store.get(key) is None
    assert store.has(key) is False
    store.set(key, b"value")
    assert store.get(key) == b"value"
    assert store.has(key) is True
    store.set(key, b"other")
    assert store.get(key) == b"other"
    assert len(store) == 1


def test_keys_must_be_32_bytes():
    store = InMemoryStore()
    with pytest.raises(ValueError):
        store.set(b"short", b"value")
    with pytest.raises(ValueError):
        store.get(b"\x00" * 33)


def test_values_must_be_bytes():
    with pytest.raises(TypeError):
        InMemoryStore().set(b"\x00" * 32, "text")


def test_derived_keys_are_distinct():
    keys = {meta_key("size"), meta_key("root"), meta_key("depth")}
    keys.update(leaf_slot_key(i) for i in range(8))
    keys.add(index_key(b"\x00" * 32))
    assert len(keys) == 12
    assert all(len(key) == 32 for key in keys)


def test_index_key_requires_32_byte_hash():
    with pytest.raises(ValueError):
        index_key(b"\x01" * 31)


def test_store_is_abstract():
    with pytest.raises(TypeError):
        KeyValueStore()
