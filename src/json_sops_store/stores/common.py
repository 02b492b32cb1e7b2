"""Helpers shared by every format store."""

from __future__ import annotations

from json_sops_store.metadata.schema import SOPS_METADATA_KEY
from json_sops_store.tree.nodes import Comment, TreeBranch, TreeBranches, TreeItem

__all__ = ["EXAMPLE_COMPLEX_TREE", "SOPS_METADATA_KEY", "has_sops_top_level_key"]

# Document written by ``emit_example``. Never mutate it.
EXAMPLE_COMPLEX_TREE: TreeBranches = [
    TreeBranch(
        [
            TreeItem(key="hello", value="Welcome to SOPS! Edit this file as you please!"),
            TreeItem(key="example_key", value="example_value"),
            TreeItem(key=Comment(" Example comment"), value=None),
            TreeItem(key="example_array", value=["example_value1", "example_value2"]),
            TreeItem(key="example_number", value=1234.56789),
            TreeItem(key="example_booleans", value=[True, False]),
        ]
    )
]


def has_sops_top_level_key(branch: TreeBranch) -> bool:
    """Return True if ``branch`` has an item keyed by the reserved metadata key."""
    return any(item.key == SOPS_METADATA_KEY for item in branch)
