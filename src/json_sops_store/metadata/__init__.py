"""Metadata subpackage: typed ``sops`` metadata and its split/merge protocol.

- Metadata / SopsFile and key models: pydantic schema of the metadata entry
- load_metadata: schema-aware decode with legacy-format detection
- split_metadata / merge_metadata: separate and re-attach the metadata item
"""

from json_sops_store.metadata.schema import (
    SOPS_METADATA_KEY,
    AgeKey,
    AzureKVKey,
    GCPKMSKey,
    KeyGroup,
    KMSKey,
    Metadata,
    PGPKey,
    SopsFile,
    VaultKey,
)
from json_sops_store.metadata.splitter import (
    load_metadata,
    merge_metadata,
    remove_metadata_item,
    split_metadata,
)

__all__ = [
    "SOPS_METADATA_KEY",
    "AgeKey",
    "AzureKVKey",
    "GCPKMSKey",
    "KMSKey",
    "KeyGroup",
    "Metadata",
    "PGPKey",
    "SopsFile",
    "VaultKey",
    "load_metadata",
    "merge_metadata",
    "remove_metadata_item",
    "split_metadata",
]
