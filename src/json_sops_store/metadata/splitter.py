"""Separating the ``sops`` metadata entry from a document body.

An encrypted file is read twice, by two independent decoders:

1. ``load_metadata`` validates the bytes against the ``SopsFile`` schema and
   returns only the typed metadata record.
2. ``decode_branch`` builds the ordered tree of the whole document.

``split_metadata`` composes the two and removes the metadata item from the
tree, so the body handed to the encryption engine never contains it.
``merge_metadata`` is the inverse used when emitting.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from json_sops_store.codec.decoder import decode_branch
from json_sops_store.errors import (
    LegacyFormatError,
    MalformedDocumentError,
    MetadataDecodeError,
    MetadataNotFoundError,
)
from json_sops_store.metadata.schema import SOPS_METADATA_KEY, Metadata, SopsFile
from json_sops_store.tree.nodes import TreeBranch, TreeItem

__all__ = ["load_metadata", "merge_metadata", "remove_metadata_item", "split_metadata"]

logger = logging.getLogger(__name__)


def load_metadata(data: bytes) -> Metadata:
    """Decode only the metadata entry of a document.

    Raises:
        LegacyFormatError:      ``sops.version`` is a number (SOPS 1.x file).
        MetadataNotFoundError:  No ``sops`` key, or it is null.
        MalformedDocumentError: Not JSON, or the top level is not an object.
        MetadataDecodeError:    The ``sops`` entry does not match the schema.
    """
    try:
        holder = SopsFile.model_validate_json(data)
    except ValidationError as exc:
        raise _translate(exc) from exc
    if holder.sops is None:
        raise MetadataNotFoundError(SOPS_METADATA_KEY)
    return holder.sops


def _translate(exc: ValidationError) -> Exception:
    errors = exc.errors(include_url=False)
    for error in errors:
        loc = tuple(error["loc"])
        value = error.get("input")
        if loc == (SOPS_METADATA_KEY, "version") and _is_number(value):
            return LegacyFormatError(value)
    for error in errors:
        if not error["loc"]:
            return MalformedDocumentError(
                f"Error unmarshalling input json: {error['msg']}", token_type=error["type"]
            )
    return MetadataDecodeError(str(exc), errors=[dict(e) for e in errors])


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def remove_metadata_item(branch: TreeBranch) -> TreeBranch:
    """Return a copy of ``branch`` without its first ``sops`` item.

    Only the first occurrence is removed; later duplicates stay in the body.
    """
    body = TreeBranch()
    removed = False
    for item in branch:
        if item.key == SOPS_METADATA_KEY:
            if not removed:
                removed = True
                continue
            logger.warning(
                "Document holds more than one %r key; only the first was removed",
                SOPS_METADATA_KEY,
            )
        body.append(item)
    return body


def split_metadata(data: bytes) -> tuple[TreeBranch, Metadata]:
    """Decode a document into its body branch and its metadata."""
    metadata = load_metadata(data)
    branch = decode_branch(data)
    return remove_metadata_item(branch), metadata


def merge_metadata(branch: TreeBranch, metadata: Metadata) -> TreeBranch:
    """Return a copy of ``branch`` with the metadata appended as its last item.

    Any ``sops`` item already present in ``branch`` is replaced, so the
    emitted document carries exactly one.
    """
    merged = TreeBranch()
    for item in branch:
        if item.key == SOPS_METADATA_KEY:
            logger.warning("Replacing stale %r item found in document body", SOPS_METADATA_KEY)
            continue
        merged.append(item)
    merged.append(TreeItem(key=SOPS_METADATA_KEY, value=metadata.to_branch()))
    return merged
