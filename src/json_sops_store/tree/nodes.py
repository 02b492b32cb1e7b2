"""Order-preserving tree model shared by every format store.

A document is a list of branches; a branch is an ordered list of
key/value items. Unlike a ``dict``, a branch keeps duplicate keys and
comment markers exactly where the source put them, which is what lets
the stores re-emit a file without reordering it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from json_sops_store.metadata.schema import Metadata

__all__ = ["Comment", "Scalar", "Tree", "TreeBranch", "TreeBranches", "TreeItem", "Value"]


@dataclass(frozen=True, slots=True)
class Comment:
    """A source comment carried through the tree.

    Comments can be used as an item key or as an array element. The JSON
    store never writes them out.
    """

    value: str


Scalar = Union[str, int, float, bool, None]

# Recursive value union. TreeBranch is a list subclass: check it before list.
Value = Union[Scalar, "TreeBranch", list["Value"], Comment]


@dataclass(slots=True)
class TreeItem:
    """A single key/value pair inside a branch.

    Attributes:
        key:   Object key. A ``Comment`` key marks a comment line; its value
               is ignored.
        value: Any member of the ``Value`` union.
    """

    key: str | Comment
    value: Value = None


class TreeBranch(list[TreeItem]):
    """An ordered sequence of TreeItems representing one JSON object."""

    def keys(self) -> list[str]:
        """Return the string keys in document order, skipping comments."""
        return [item.key for item in self if isinstance(item.key, str)]

    def __repr__(self) -> str:
        return f"TreeBranch({list.__repr__(self)})"


# One branch per top-level document section. JSON files always have one.
TreeBranches = list[TreeBranch]


@dataclass(slots=True)
class Tree:
    """A document's branches paired with its encryption metadata.

    Attributes:
        branches:  The document body, metadata key removed.
        metadata:  Parsed metadata record.
        file_path: Optional origin path, informational only.
    """

    branches: TreeBranches
    metadata: Metadata
    file_path: str = field(default="")
