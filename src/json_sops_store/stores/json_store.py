"""JSONStore: the JSON format adapter.

Composes the decoder, the encoder and the metadata splitter into the four
file transitions used by the encryption engine:

- ``load_encrypted_file``: bytes -> Tree (body + metadata)
- ``load_plain_file``:     bytes -> TreeBranches
- ``emit_encrypted_file``: Tree -> bytes (metadata appended last)
- ``emit_plain_file``:     TreeBranches -> bytes

plus ``emit_value`` for printing a single subtree and ``emit_example`` for
the document shown to new users.

Each call is independent: a store holds nothing but its frozen config, so
one instance can be shared freely.
"""

from __future__ import annotations

import logging
import threading

from cachetools import LRUCache, cached

from json_sops_store.codec.decoder import decode_branch
from json_sops_store.codec.encoder import encode_branch, encode_value, reindent
from json_sops_store.config import JSONStoreConfig
from json_sops_store.errors import EncodeError, StoreError
from json_sops_store.metadata.splitter import merge_metadata, split_metadata
from json_sops_store.stores.common import EXAMPLE_COMPLEX_TREE, has_sops_top_level_key
from json_sops_store.tree.nodes import Tree, TreeBranch, TreeBranches, Value

__all__ = ["JSONStore"]

logger = logging.getLogger(__name__)


def _to_bytes(text: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as exc:
        msg = f"document contains text that cannot be encoded as UTF-8: {exc.reason}"
        raise EncodeError(msg) from exc


def _sole_branch(branches: TreeBranches) -> TreeBranch:
    # JSON stores a single object per file
    if len(branches) != 1:
        msg = f"JSON documents hold exactly one tree branch, got {len(branches)}"
        raise EncodeError(msg)
    return branches[0]


_EXAMPLE_LOCK = threading.Lock()


@cached(cache=LRUCache(maxsize=16), lock=_EXAMPLE_LOCK)
def _render_example(indent: int) -> bytes:
    try:
        return _to_bytes(encode_branch(EXAMPLE_COMPLEX_TREE[0], indent) + "\n")
    except StoreError as exc:
        msg = f"failed to render the example document: {exc}"
        raise RuntimeError(msg) from exc


class JSONStore:
    """Reads and writes JSON documents as order-preserving trees.

    Example::

        store = JSONStore(JSONStoreConfig(indent=2))
        branches = store.load_plain_file(b'{"b": 1, "a": 2}')
        store.emit_plain_file(branches)  # b'{\\n  "b": 1,\\n  "a": 2\\n}\\n'
    """

    def __init__(self, config: JSONStoreConfig | None = None) -> None:
        self.config = config or JSONStoreConfig()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_encrypted_file(self, data: bytes) -> Tree:
        """Load an encrypted document into its body and metadata.

        Raises:
            LegacyFormatError, MetadataNotFoundError, MetadataDecodeError,
            MalformedDocumentError: see ``json_sops_store.metadata.splitter``.
        """
        body, metadata = split_metadata(data)
        logger.debug("Loaded encrypted JSON document with %d top-level items", len(body))
        return Tree(branches=[body], metadata=metadata)

    def load_plain_file(self, data: bytes) -> TreeBranches:
        """Load a plaintext document. No metadata is expected."""
        branch = decode_branch(data)
        logger.debug("Loaded plain JSON document with %d top-level items", len(branch))
        return [branch]

    # ------------------------------------------------------------------
    # Emitting
    # ------------------------------------------------------------------

    def emit_encrypted_file(self, tree: Tree) -> bytes:
        """Render an encrypted tree, appending its metadata as the last key."""
        branch = merge_metadata(_sole_branch(tree.branches), tree.metadata)
        return _to_bytes(encode_branch(branch, self.config.indent) + "\n")

    def emit_plain_file(self, branches: TreeBranches) -> bytes:
        """Render a plaintext document."""
        branch = _sole_branch(branches)
        return _to_bytes(encode_branch(branch, self.config.indent) + "\n")

    def emit_value(self, value: Value) -> bytes:
        """Render a single value (scalar, array or branch), no trailing newline."""
        return _to_bytes(reindent(encode_value(value), self.config.indent))

    def emit_example(self) -> bytes:
        """Return the example plaintext document.

        The result is cached per indent setting. A failure here means the
        built-in example or the configured indent is broken, so it is raised
        as ``RuntimeError`` rather than as a store error.
        """
        return _render_example(self.config.indent)

    def has_sops_top_level_key(self, branch: TreeBranch) -> bool:
        """Return True if ``branch`` carries a top-level ``sops`` key."""
        return has_sops_top_level_key(branch)
