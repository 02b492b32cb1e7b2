"""Tree subpackage: the ordered document model.

Re-exports the public API for the tree module:
- Comment: pass-through comment marker (key or array element)
- TreeItem: one key/value pair
- TreeBranch: ordered list of TreeItems (one JSON object)
- TreeBranches: list of branches making up a document
- Tree: branches paired with parsed metadata
"""

from json_sops_store.tree.nodes import (
    Comment,
    Scalar,
    Tree,
    TreeBranch,
    TreeBranches,
    TreeItem,
    Value,
)

__all__ = ["Comment", "Scalar", "Tree", "TreeBranch", "TreeBranches", "TreeItem", "Value"]
