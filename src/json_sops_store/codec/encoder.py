"""Encoder from the tree model back to JSON text.

Encoding happens in two passes:

1. ``encode_value`` renders a compact JSON string, walking branches and
   arrays in order and dropping every ``Comment`` (as a key or as an
   array element) on the way.
2. ``reindent`` rewrites that compact string with one member per line,
   nested by the configured indent unit.

Keeping the passes separate means the recursive walk never has to track
depth, and the reindent pass only ever touches whitespace.
"""

from __future__ import annotations

import json
import math

from json_sops_store.errors import InvalidIndentError, InvalidKeyTypeError, UnsupportedValueError
from json_sops_store.tree.nodes import Comment, TreeBranch, Value

__all__ = ["INDENT_TAB", "encode_branch", "encode_value", "indent_unit", "reindent"]

# Indent setting meaning "one tab per level".
INDENT_TAB = -1


def encode_value(value: Value) -> str:
    """Render any tree value as compact JSON.

    Raises:
        InvalidKeyTypeError:   A branch holds a key that is not str/Comment.
        UnsupportedValueError: A leaf has no JSON representation.
    """
    # TreeBranch subclasses list: check it first.
    if isinstance(value, TreeBranch):
        return _encode_branch(value)
    if isinstance(value, list):
        return _encode_array(value)
    return _encode_scalar(value)


def _encode_branch(branch: TreeBranch) -> str:
    members: list[str] = []
    for item in branch:
        if isinstance(item.key, Comment):
            continue
        if not isinstance(item.key, str):
            raise InvalidKeyTypeError(item.key)
        members.append(f"{_encode_scalar(item.key)}:{encode_value(item.value)}")
    return "{" + ",".join(members) + "}"


def _encode_array(array: list[Value]) -> str:
    elements = [encode_value(v) for v in array if not isinstance(v, Comment)]
    return "[" + ",".join(elements) + "]"


def _encode_scalar(value: Value) -> str:
    if isinstance(value, float) and not math.isfinite(value):
        raise UnsupportedValueError(value, "JSON has no representation for NaN or Infinity")
    if isinstance(value, Comment):
        raise UnsupportedValueError(value, "comments are only allowed inside branches and arrays")
    if value is not None and not isinstance(value, (str, int, float, bool)):
        raise UnsupportedValueError(value)
    return json.dumps(value, ensure_ascii=False)


def indent_unit(indent: int) -> str:
    """Return the whitespace used for one nesting level.

    Args:
        indent: ``INDENT_TAB`` (-1) for a tab, otherwise a number of spaces.

    Raises:
        InvalidIndentError: If ``indent`` is smaller than -1.
    """
    if indent < INDENT_TAB:
        raise InvalidIndentError(indent)
    if indent == INDENT_TAB:
        return "\t"
    return " " * indent


def reindent(text: str, indent: int = INDENT_TAB) -> str:
    """Reformat compact JSON with one member per line.

    Only whitespace outside strings changes: every object member and
    array element starts on its own line, keys are followed by ``": "``,
    and empty containers stay on one line (``{}`` / ``[]``). With an indent
    of 0 the newlines are kept but no leading whitespace is written.

    Args:
        text:   Syntactically valid JSON.
        indent: Indent setting, see ``indent_unit``.

    Returns:
        The reindented JSON, without a trailing newline.
    """
    unit = indent_unit(indent)
    out: list[str] = []
    depth = 0
    need_indent = False
    in_string = False
    escaped = False

    for ch in text:
        if in_string:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch in " \t\r\n":
            continue

        # Defer the newline after an opener until we know the container
        # is not empty.
        if need_indent and ch not in "]}":
            need_indent = False
            depth += 1
            out.append("\n" + unit * depth)

        if ch == '"':
            in_string = True
            out.append(ch)
        elif ch in "{[":
            need_indent = True
            out.append(ch)
        elif ch == ",":
            out.append(",\n" + unit * depth)
        elif ch == ":":
            out.append(": ")
        elif ch in "}]":
            if need_indent:
                need_indent = False
            else:
                depth -= 1
                out.append("\n" + unit * depth)
            out.append(ch)
        else:
            out.append(ch)

    return "".join(out)


def encode_branch(branch: TreeBranch, indent: int = INDENT_TAB) -> str:
    """Encode a branch and reindent the result."""
    return reindent(encode_value(branch), indent)
