"""Stores subpackage: format adapters built on the codec.

- JSONStore: JSON documents as order-preserving trees
- JSONBinaryStore: opaque payloads in a ``{"data": ...}`` JSON envelope
- has_sops_top_level_key / EXAMPLE_COMPLEX_TREE: shared helpers

Both stores satisfy the ``json_sops_store.protocols.Store`` protocol.
"""

from json_sops_store.stores.binary import BINARY_DATA_KEY, JSONBinaryStore
from json_sops_store.stores.common import (
    EXAMPLE_COMPLEX_TREE,
    SOPS_METADATA_KEY,
    has_sops_top_level_key,
)
from json_sops_store.stores.json_store import JSONStore

__all__ = [
    "BINARY_DATA_KEY",
    "EXAMPLE_COMPLEX_TREE",
    "SOPS_METADATA_KEY",
    "JSONBinaryStore",
    "JSONStore",
    "has_sops_top_level_key",
]
