"""Recursive-descent decoder from JSON bytes to a TreeBranch.

A generic ``json.loads`` would hand back dicts, losing duplicate keys and
giving no place for comment markers. This decoder instead walks the token
stream once and builds TreeBranch / TreeItem / list values directly, so
the tree mirrors the source order exactly.
"""

from __future__ import annotations

import logging

from json_sops_store.codec.tokens import Delim, Token, Tokenizer, token_type_name
from json_sops_store.errors import MalformedDocumentError, UnexpectedTokenError
from json_sops_store.tree.nodes import TreeBranch, TreeItem, Value

__all__ = ["decode_branch"]

logger = logging.getLogger(__name__)


class _EndOfObject(Exception):
    """Raised by the item reader when it meets ``}`` instead of a key."""


def decode_branch(data: bytes) -> TreeBranch:
    """Decode a JSON document whose top level is an object.

    Args:
        data: UTF-8 encoded JSON text.

    Returns:
        A TreeBranch holding the top-level items in source order.

    Raises:
        UnexpectedTokenError:   The document does not start with ``{``.
        MalformedDocumentError: Any other syntax problem, including a
                                non-string key or truncated input.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        msg = f"input is not valid UTF-8: {exc.reason} at byte {exc.start}"
        raise MalformedDocumentError(
            msg, token=data[exc.start : exc.end], token_type="bytes", offset=exc.start
        ) from exc

    tokens = Tokenizer(text)
    offset = tokens.offset
    first = tokens.next_token()
    if first is not Delim.OBJECT_START:
        raise UnexpectedTokenError(first, token_type_name(first), offset=offset)

    branch = _read_branch(tokens)
    tokens.finish()
    logger.debug("Decoded JSON branch with %d top-level items", len(branch))
    return branch


def _read_branch(tokens: Tokenizer) -> TreeBranch:
    branch = TreeBranch()
    while True:
        try:
            branch.append(_read_item(tokens))
        except _EndOfObject:
            return branch


def _read_item(tokens: Tokenizer) -> TreeItem:
    offset = tokens.offset
    key = tokens.next_token()
    if key is Delim.OBJECT_END:
        raise _EndOfObject
    if not isinstance(key, str):
        msg = f"Expected JSON object key, got {key!s} of type {token_type_name(key)} instead"
        raise MalformedDocumentError(msg, token=key, token_type=token_type_name(key), offset=offset)
    return TreeItem(key=key, value=_read_value(tokens, tokens.next_token()))


def _read_array(tokens: Tokenizer) -> list[Value]:
    array: list[Value] = []
    while True:
        token = tokens.next_token()
        if token is Delim.ARRAY_END:
            return array
        array.append(_read_value(tokens, token))


def _read_value(tokens: Tokenizer, token: Token) -> Value:
    """Turn an already-read token into a value, recursing into containers."""
    if token is Delim.OBJECT_START:
        return _read_branch(tokens)
    if token is Delim.ARRAY_START:
        return _read_array(tokens)
    if isinstance(token, Delim):
        # The tokenizer only lets closers through where they are legal, so
        # a closer here means a value was expected.
        msg = f"Expected JSON value, got delimiter {token!s}"
        raise MalformedDocumentError(msg, token=token, token_type="delimiter", offset=tokens.offset)
    return token
