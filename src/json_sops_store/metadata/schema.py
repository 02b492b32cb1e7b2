"""Fixed-schema models for the encryption metadata stored under ``sops``.

Unlike the document body, the metadata has a known shape, so it is decoded
with pydantic models instead of the generic tree decoder. Field declaration
order is the order fields are written back out; ``None`` fields are
omitted on output.

Example::

    holder = SopsFile.model_validate_json(raw_bytes)
    holder.sops.version        # "3.9.0"
    holder.sops.to_branch()    # TreeBranch ready to append to a document
"""

from __future__ import annotations

from typing import Any, cast

from pydantic import BaseModel, ConfigDict

from json_sops_store.tree.nodes import TreeBranch, TreeItem, Value

# Key under which the metadata is embedded in every encrypted document.
SOPS_METADATA_KEY = "sops"

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
    "to_tree_value",
]


class _Entry(BaseModel):
    model_config = ConfigDict(extra="ignore")


class KMSKey(_Entry):
    arn: str
    role: str | None = None
    context: dict[str, str | None] | None = None
    created_at: str = ""
    enc: str = ""
    aws_profile: str | None = None


class GCPKMSKey(_Entry):
    resource_id: str
    created_at: str = ""
    enc: str = ""


class AzureKVKey(_Entry):
    vault_url: str
    name: str
    version: str
    created_at: str = ""
    enc: str = ""


class VaultKey(_Entry):
    vault_address: str
    engine_path: str
    key_name: str
    created_at: str = ""
    enc: str = ""


class AgeKey(_Entry):
    recipient: str
    enc: str = ""


class PGPKey(_Entry):
    created_at: str = ""
    enc: str = ""
    fp: str


class KeyGroup(_Entry):
    """One Shamir key group: master keys of every supported service."""

    pgp: list[PGPKey] | None = None
    kms: list[KMSKey] | None = None
    gcp_kms: list[GCPKMSKey] | None = None
    azure_kv: list[AzureKVKey] | None = None
    hc_vault: list[VaultKey] | None = None
    age: list[AgeKey] | None = None


class Metadata(_Entry):
    """Encryption parameters of a document.

    ``version`` must be a JSON string. SOPS 1.x wrote it as a number; such
    files are rejected by the metadata splitter with a legacy-format error.
    """

    shamir_threshold: int | None = None
    key_groups: list[KeyGroup] | None = None
    kms: list[KMSKey] | None = None
    gcp_kms: list[GCPKMSKey] | None = None
    azure_kv: list[AzureKVKey] | None = None
    hc_vault: list[VaultKey] | None = None
    age: list[AgeKey] | None = None
    lastmodified: str = ""
    mac: str = ""
    pgp: list[PGPKey] | None = None
    unencrypted_suffix: str | None = None
    encrypted_suffix: str | None = None
    unencrypted_regex: str | None = None
    encrypted_regex: str | None = None
    unencrypted_comment_regex: str | None = None
    encrypted_comment_regex: str | None = None
    mac_only_encrypted: bool | None = None
    version: str = ""

    def to_branch(self) -> TreeBranch:
        """Render the metadata as a TreeBranch in declaration order."""
        return cast(TreeBranch, to_tree_value(self.model_dump(mode="json", exclude_none=True)))


class SopsFile(BaseModel):
    """Holder used to pull only the metadata out of a whole document."""

    model_config = ConfigDict(extra="ignore")

    sops: Metadata | None = None


def to_tree_value(value: Any) -> Value:
    """Convert plain Python containers into tree values.

    Dicts become TreeBranches (insertion order kept), lists stay lists,
    scalars pass through.
    """
    if isinstance(value, dict):
        return TreeBranch(TreeItem(key=k, value=to_tree_value(v)) for k, v in value.items())
    if isinstance(value, list):
        return [to_tree_value(v) for v in value]
    return value
