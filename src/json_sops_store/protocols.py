"""Store Protocol: the contract every format store satisfies.

The encryption engine talks to format stores only through these seven
operations, so a store for another syntax can be plugged in without
inheriting from any base class. Any class with conformant methods passes
``isinstance`` checks.

Example::

    from json_sops_store.protocols import Store
    from json_sops_store.stores import JSONBinaryStore, JSONStore

    assert isinstance(JSONStore(), Store)
    assert isinstance(JSONBinaryStore(), Store)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from json_sops_store.tree.nodes import Tree, TreeBranch, TreeBranches, Value


@runtime_checkable
class Store(Protocol):
    """Structural protocol for format stores.

    Load methods take raw file bytes; emit methods return raw file bytes.
    Whole-file emission ends with a newline where the format calls for one.
    """

    def load_encrypted_file(self, data: bytes) -> Tree: ...

    def load_plain_file(self, data: bytes) -> TreeBranches: ...

    def emit_encrypted_file(self, tree: Tree) -> bytes: ...

    def emit_plain_file(self, branches: TreeBranches) -> bytes: ...

    def emit_value(self, value: Value) -> bytes: ...

    def emit_example(self) -> bytes: ...

    def has_sops_top_level_key(self, branch: TreeBranch) -> bool: ...
