"""Tests for JSONStore: the four file transitions, emit_value and emit_example."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from json_sops_store.config import JSONStoreConfig
from json_sops_store.errors import (
    EncodeError,
    InvalidIndentError,
    LegacyFormatError,
    MalformedDocumentError,
    MetadataNotFoundError,
    UnexpectedTokenError,
)
from json_sops_store.metadata.schema import Metadata
from json_sops_store.stores.json_store import JSONStore
from json_sops_store.tree.nodes import Comment, Tree, TreeBranch, TreeItem

EXAMPLE_TAB = (
    b"{\n"
    b'\t"hello": "Welcome to SOPS! Edit this file as you please!",\n'
    b'\t"example_key": "example_value",\n'
    b'\t"example_array": [\n'
    b'\t\t"example_value1",\n'
    b'\t\t"example_value2"\n'
    b"\t],\n"
    b'\t"example_number": 1234.56789,\n'
    b'\t"example_booleans": [\n'
    b"\t\ttrue,\n"
    b"\t\tfalse\n"
    b"\t]\n"
    b"}\n"
)


@pytest.fixture
def store() -> JSONStore:
    return JSONStore(JSONStoreConfig(indent=2))


@pytest.fixture
def metadata() -> Metadata:
    return Metadata(lastmodified="2024-05-01T10:00:00Z", mac="m", version="3.9.0")


class TestConstruction:
    def test_default_config_uses_tabs(self) -> None:
        assert JSONStore().config.indent == -1

    def test_config_kept(self) -> None:
        config = JSONStoreConfig(indent=4)
        assert JSONStore(config).config is config


class TestLoadPlainFile:
    def test_single_branch(self, store: JSONStore) -> None:
        branches = store.load_plain_file(b'{"foo": "bar"}')
        assert branches == [TreeBranch([TreeItem("foo", "bar")])]

    def test_metadata_key_is_kept_in_plain_load(self, store: JSONStore) -> None:
        branches = store.load_plain_file(b'{"sops": {"version": "3.9.0"}}')
        assert branches[0].keys() == ["sops"]

    def test_not_an_object(self, store: JSONStore) -> None:
        with pytest.raises(UnexpectedTokenError):
            store.load_plain_file(b'["a"]')

    def test_malformed(self, store: JSONStore) -> None:
        with pytest.raises(MalformedDocumentError):
            store.load_plain_file(b'{"a": }')


class TestLoadEncryptedFile:
    def test_splits_body_and_metadata(self, store: JSONStore, metadata: Metadata) -> None:
        data = (
            b'{"b": "ENC[x]", "a": [1, 2], "sops": {"lastmodified": "2024-05-01T10:00:00Z",'
            b' "mac": "m", "version": "3.9.0"}}'
        )
        tree = store.load_encrypted_file(data)
        assert isinstance(tree, Tree)
        assert len(tree.branches) == 1
        assert tree.branches[0].keys() == ["b", "a"]
        assert tree.metadata == metadata

    def test_missing_metadata_but_plain_load_works(self, store: JSONStore) -> None:
        data = b'{"foo": "bar"}'
        with pytest.raises(MetadataNotFoundError):
            store.load_encrypted_file(data)
        assert store.load_plain_file(data) == [TreeBranch([TreeItem("foo", "bar")])]

    def test_legacy_format(self, store: JSONStore) -> None:
        with pytest.raises(LegacyFormatError):
            store.load_encrypted_file(b'{"foo": "bar", "sops": {"version": 2}}')

    def test_malformed(self, store: JSONStore) -> None:
        with pytest.raises(MalformedDocumentError):
            store.load_encrypted_file(b'{"foo": ')


class TestEmitPlainFile:
    def test_output(self, store: JSONStore) -> None:
        branches = [TreeBranch([TreeItem("b", 1), TreeItem("a", [True])])]
        assert store.emit_plain_file(branches) == b'{\n  "b": 1,\n  "a": [\n    true\n  ]\n}\n'

    def test_single_trailing_newline(self, store: JSONStore) -> None:
        out = store.emit_plain_file([TreeBranch([TreeItem("a", 1)])])
        assert out.endswith(b"}\n")
        assert not out.endswith(b"\n\n")

    def test_comments_omitted(self, store: JSONStore) -> None:
        branches = [TreeBranch([TreeItem(Comment(" hi")), TreeItem("a", 1)])]
        assert store.emit_plain_file(branches) == b'{\n  "a": 1\n}\n'

    def test_utf8_output(self, store: JSONStore) -> None:
        out = store.emit_plain_file([TreeBranch([TreeItem("k", "é")])])
        assert out == '{\n  "k": "é"\n}\n'.encode()

    @pytest.mark.parametrize("count", [0, 2])
    def test_requires_exactly_one_branch(self, store: JSONStore, count: int) -> None:
        with pytest.raises(EncodeError):
            store.emit_plain_file([TreeBranch() for _ in range(count)])

    def test_indent_zero(self) -> None:
        store = JSONStore(JSONStoreConfig(indent=0))
        out = store.emit_plain_file([TreeBranch([TreeItem("a", 1), TreeItem("b", 2)])])
        assert out == b'{\n"a": 1,\n"b": 2\n}\n'

    def test_indent_tab(self) -> None:
        out = JSONStore().emit_plain_file([TreeBranch([TreeItem("a", 1)])])
        assert out == b'{\n\t"a": 1\n}\n'

    def test_invalid_indent(self) -> None:
        store = JSONStore(JSONStoreConfig(indent=-2))
        with pytest.raises(InvalidIndentError):
            store.emit_plain_file([TreeBranch([TreeItem("a", 1)])])

    def test_round_trip(self, store: JSONStore) -> None:
        data = b'{\n  "a": [\n    1,\n    {\n      "b": "c"\n    }\n  ],\n  "d": null\n}\n'
        assert store.emit_plain_file(store.load_plain_file(data)) == data

    def test_unencodable_surrogate(self, store: JSONStore) -> None:
        with pytest.raises(EncodeError):
            store.emit_plain_file([TreeBranch([TreeItem("a", "\udcff")])])

    def test_loaded_surrogate_escape_can_be_emitted(self, store: JSONStore) -> None:
        branches = store.load_plain_file(b'{"a": "x\\ud800y"}')
        assert store.emit_plain_file(branches) == '{\n  "a": "x\ufffdy"\n}\n'.encode()


class TestEmitEncryptedFile:
    def test_metadata_appended_last(self, store: JSONStore, metadata: Metadata) -> None:
        tree = Tree(branches=[TreeBranch([TreeItem("a", "ENC[x]")])], metadata=metadata)
        assert store.emit_encrypted_file(tree) == (
            b"{\n"
            b'  "a": "ENC[x]",\n'
            b'  "sops": {\n'
            b'    "lastmodified": "2024-05-01T10:00:00Z",\n'
            b'    "mac": "m",\n'
            b'    "version": "3.9.0"\n'
            b"  }\n"
            b"}\n"
        )

    def test_tree_not_modified(self, store: JSONStore, metadata: Metadata) -> None:
        branch = TreeBranch([TreeItem("a", 1)])
        store.emit_encrypted_file(Tree(branches=[branch], metadata=metadata))
        assert branch.keys() == ["a"]

    def test_load_of_emit_is_identity(self, store: JSONStore, metadata: Metadata) -> None:
        body = TreeBranch([TreeItem("z", [1, 2]), TreeItem("y", TreeBranch([TreeItem("x", 1)]))])
        emitted = store.emit_encrypted_file(Tree(branches=[body], metadata=metadata))
        loaded = store.load_encrypted_file(emitted)
        assert loaded.branches == [body]
        assert loaded.metadata == metadata

    def test_no_duplicate_metadata_key(self, store: JSONStore, metadata: Metadata) -> None:
        body = TreeBranch([TreeItem("sops", "stale"), TreeItem("a", 1)])
        emitted = store.emit_encrypted_file(Tree(branches=[body], metadata=metadata))
        assert store.load_plain_file(emitted)[0].keys() == ["a", "sops"]

    def test_requires_one_branch(self, store: JSONStore, metadata: Metadata) -> None:
        with pytest.raises(EncodeError):
            store.emit_encrypted_file(Tree(branches=[], metadata=metadata))


class TestEmitValue:
    def test_scalar(self, store: JSONStore) -> None:
        assert store.emit_value("secret") == b'"secret"'

    def test_array(self, store: JSONStore) -> None:
        assert store.emit_value([1, Comment("c"), 2]) == b"[\n  1,\n  2\n]"

    def test_branch_without_trailing_newline(self, store: JSONStore) -> None:
        assert store.emit_value(TreeBranch([TreeItem("a", 1)])) == b'{\n  "a": 1\n}'


class TestEmitExample:
    def test_tab_output(self) -> None:
        assert JSONStore().emit_example() == EXAMPLE_TAB

    def test_comment_not_emitted(self) -> None:
        assert b"Example comment" not in JSONStore().emit_example()

    def test_stable_across_calls_and_instances(self) -> None:
        assert JSONStore().emit_example() == JSONStore().emit_example()

    def test_indent_respected(self, store: JSONStore) -> None:
        assert store.emit_example().startswith(b'{\n  "hello": ')

    def test_invalid_indent_aborts(self) -> None:
        with pytest.raises(RuntimeError):
            JSONStore(JSONStoreConfig(indent=-5)).emit_example()

    def test_concurrent_calls_agree(self) -> None:
        stores = [JSONStore(JSONStoreConfig(indent=i % 4)) for i in range(32)]
        with ThreadPoolExecutor(max_workers=8) as pool:
            outputs = list(pool.map(lambda s: s.emit_example(), stores))
        for store, output in zip(stores, outputs):
            assert output == JSONStore(store.config).emit_example()
        assert len(set(outputs)) == 4


class TestHasSopsTopLevelKey:
    def test_present(self, store: JSONStore) -> None:
        assert store.has_sops_top_level_key(TreeBranch([TreeItem("sops", TreeBranch())]))

    def test_absent(self, store: JSONStore) -> None:
        assert not store.has_sops_top_level_key(TreeBranch([TreeItem("a", 1)]))

    def test_nested_does_not_count(self, store: JSONStore) -> None:
        nested = TreeBranch([TreeItem("a", TreeBranch([TreeItem("sops", 1)]))])
        assert not store.has_sops_top_level_key(nested)
