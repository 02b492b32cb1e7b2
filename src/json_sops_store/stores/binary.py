"""JSONBinaryStore: opaque payloads wrapped in a one-key JSON envelope.

A plaintext binary file has no structure, so it is loaded as the single
item ``{"data": <payload>}``. Once encrypted, the envelope is an ordinary
JSON document and goes through ``JSONStore``.

Payload bytes are decoded as UTF-8 with the ``surrogateescape`` handler:
bytes that are not valid UTF-8 survive a load/emit cycle unchanged.
"""

from __future__ import annotations

from json_sops_store.config import JSONBinaryStoreConfig, JSONStoreConfig
from json_sops_store.errors import BinaryStoreEmitPlainError, UnstructuredValueError
from json_sops_store.stores.common import has_sops_top_level_key
from json_sops_store.stores.json_store import JSONStore
from json_sops_store.tree.nodes import Tree, TreeBranch, TreeBranches, TreeItem, Value

__all__ = ["BINARY_DATA_KEY", "JSONBinaryStore"]

BINARY_DATA_KEY = "data"

_EXAMPLE = b"Welcome to SOPS! Edit this file as you please!"


class JSONBinaryStore:
    """Stores arbitrary bytes inside an encrypted JSON envelope."""

    def __init__(self, config: JSONBinaryStoreConfig | None = None) -> None:
        self.config = config or JSONBinaryStoreConfig()
        self._store = JSONStore(JSONStoreConfig(indent=self.config.indent))

    def load_encrypted_file(self, data: bytes) -> Tree:
        return self._store.load_encrypted_file(data)

    def load_plain_file(self, data: bytes) -> TreeBranches:
        """Wrap the raw payload as ``{"data": <payload>}``."""
        payload = data.decode("utf-8", errors="surrogateescape")
        return [TreeBranch([TreeItem(key=BINARY_DATA_KEY, value=payload)])]

    def emit_encrypted_file(self, tree: Tree) -> bytes:
        return self._store.emit_encrypted_file(tree)

    def emit_plain_file(self, branches: TreeBranches) -> bytes:
        """Return the payload stored under ``data``, without any envelope.

        Raises:
            BinaryStoreEmitPlainError: There is not exactly one branch, or it
                has no ``data`` key, or ``data`` is not a string.
        """
        if len(branches) != 1:
            raise BinaryStoreEmitPlainError("there must be exactly one tree branch")
        for item in branches[0]:
            if item.key != BINARY_DATA_KEY:
                continue
            if not isinstance(item.value, str):
                raise BinaryStoreEmitPlainError("'data' key in tree does not have a string value")
            return item.value.encode("utf-8", errors="surrogateescape")
        raise BinaryStoreEmitPlainError("no binary data found in tree")

    def emit_value(self, value: Value) -> bytes:
        """Always fails: a binary payload has no inner values."""
        raise UnstructuredValueError

    def emit_example(self) -> bytes:
        return _EXAMPLE

    def has_sops_top_level_key(self, branch: TreeBranch) -> bool:
        return has_sops_top_level_key(branch)
