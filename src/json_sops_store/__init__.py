"""json-sops-store - order-preserving JSON codec for encrypted documents."""

from __future__ import annotations

import logging

from json_sops_store.codec.encoder import INDENT_TAB
from json_sops_store.config import JSONBinaryStoreConfig, JSONStoreConfig, StoresConfig
from json_sops_store.errors import (
    BinaryStoreEmitPlainError,
    EncodeError,
    InvalidIndentError,
    InvalidKeyTypeError,
    LegacyFormatError,
    MalformedDocumentError,
    MetadataDecodeError,
    MetadataNotFoundError,
    StoreError,
    UnexpectedTokenError,
    UnstructuredValueError,
    UnsupportedValueError,
)
from json_sops_store.metadata.schema import SOPS_METADATA_KEY, Metadata
from json_sops_store.protocols import Store
from json_sops_store.stores import JSONBinaryStore, JSONStore
from json_sops_store.tree.nodes import Comment, Tree, TreeBranch, TreeBranches, TreeItem

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__: str = "0.1.0"
__all__: list[str] = [
    "INDENT_TAB",
    "SOPS_METADATA_KEY",
    "BinaryStoreEmitPlainError",
    "Comment",
    "EncodeError",
    "InvalidIndentError",
    "InvalidKeyTypeError",
    "JSONBinaryStore",
    "JSONBinaryStoreConfig",
    "JSONStore",
    "JSONStoreConfig",
    "LegacyFormatError",
    "MalformedDocumentError",
    "Metadata",
    "MetadataDecodeError",
    "MetadataNotFoundError",
    "Store",
    "StoreError",
    "StoresConfig",
    "Tree",
    "TreeBranch",
    "TreeBranches",
    "TreeItem",
    "UnexpectedTokenError",
    "UnstructuredValueError",
    "UnsupportedValueError",
]
