"""Tests for JSONBinaryStore: opaque payloads in a ``{"data": ...}`` envelope."""

from __future__ import annotations

import pytest

from json_sops_store.config import JSONBinaryStoreConfig
from json_sops_store.errors import (
    BinaryStoreEmitPlainError,
    MetadataNotFoundError,
    UnstructuredValueError,
)
from json_sops_store.metadata.schema import Metadata
from json_sops_store.stores.binary import BINARY_DATA_KEY, JSONBinaryStore
from json_sops_store.tree.nodes import Tree, TreeBranch, TreeItem


@pytest.fixture
def store() -> JSONBinaryStore:
    return JSONBinaryStore(JSONBinaryStoreConfig(indent=2))


class TestPlainPayload:
    def test_load_wraps_payload(self, store: JSONBinaryStore) -> None:
        assert store.load_plain_file(b"hello") == [TreeBranch([TreeItem("data", "hello")])]

    def test_data_key(self) -> None:
        assert BINARY_DATA_KEY == "data"

    def test_emit_returns_raw_payload(self, store: JSONBinaryStore) -> None:
        assert store.emit_plain_file(store.load_plain_file(b"hello")) == b"hello"

    def test_json_payload_is_not_parsed(self, store: JSONBinaryStore) -> None:
        branches = store.load_plain_file(b'{"a": 1}')
        assert branches[0][0].value == '{"a": 1}'

    def test_non_utf8_bytes_survive(self, store: JSONBinaryStore) -> None:
        payload = bytes(range(256))
        assert store.emit_plain_file(store.load_plain_file(payload)) == payload

    def test_empty_payload(self, store: JSONBinaryStore) -> None:
        assert store.emit_plain_file(store.load_plain_file(b"")) == b""

    def test_data_found_among_other_keys(self, store: JSONBinaryStore) -> None:
        branch = TreeBranch([TreeItem("other", 1), TreeItem("data", "payload")])
        assert store.emit_plain_file([branch]) == b"payload"


class TestEmitPlainErrors:
    @pytest.mark.parametrize("count", [0, 2])
    def test_branch_count(self, store: JSONBinaryStore, count: int) -> None:
        branches = [TreeBranch([TreeItem("data", "x")]) for _ in range(count)]
        with pytest.raises(BinaryStoreEmitPlainError, match="exactly one tree branch"):
            store.emit_plain_file(branches)

    def test_no_data_key(self, store: JSONBinaryStore) -> None:
        with pytest.raises(BinaryStoreEmitPlainError, match="no binary data"):
            store.emit_plain_file([TreeBranch([TreeItem("other", "x")])])

    def test_non_string_data(self, store: JSONBinaryStore) -> None:
        with pytest.raises(BinaryStoreEmitPlainError, match="does not have a string value"):
            store.emit_plain_file([TreeBranch([TreeItem("data", 5)])])


class TestEncryptedEnvelope:
    def test_round_trip(self, store: JSONBinaryStore) -> None:
        metadata = Metadata(mac="m", lastmodified="t", version="3.9.0")
        tree = Tree(branches=[TreeBranch([TreeItem("data", "ENC[payload]")])], metadata=metadata)
        emitted = store.emit_encrypted_file(tree)
        assert emitted.startswith(b'{\n  "data": "ENC[payload]",\n  "sops": {')
        assert emitted.endswith(b"}\n")
        loaded = store.load_encrypted_file(emitted)
        assert loaded.branches == tree.branches
        assert loaded.metadata == metadata

    def test_missing_metadata(self, store: JSONBinaryStore) -> None:
        with pytest.raises(MetadataNotFoundError):
            store.load_encrypted_file(b'{"data": "hello"}')

    def test_indent_passed_to_envelope(self) -> None:
        store = JSONBinaryStore(JSONBinaryStoreConfig(indent=-1))
        tree = Tree(branches=[TreeBranch([TreeItem("data", "x")])], metadata=Metadata())
        assert store.emit_encrypted_file(tree).startswith(b'{\n\t"data": "x"')


class TestUnstructured:
    @pytest.mark.parametrize("value", ["x", 1, None, [1], TreeBranch([TreeItem("a", 1)])])
    def test_emit_value_always_fails(self, store: JSONBinaryStore, value: object) -> None:
        with pytest.raises(UnstructuredValueError):
            store.emit_value(value)  # type: ignore[arg-type]

    def test_example(self, store: JSONBinaryStore) -> None:
        assert store.emit_example() == b"Welcome to SOPS! Edit this file as you please!"

    def test_has_sops_top_level_key(self, store: JSONBinaryStore) -> None:
        assert store.has_sops_top_level_key(TreeBranch([TreeItem("sops", 1)]))
        assert not store.has_sops_top_level_key(TreeBranch([TreeItem("data", "x")]))
