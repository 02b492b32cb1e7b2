"""Round-trip assertions for tests that produce or consume JSON store files.

Provides the ``assert_json_round_trip`` fixture, registered through the
``json_sops_store`` pytest11 entry point. It loads a document with
``JSONStore.load_plain_file``, emits it, reloads the output and reports the
JSON Pointer of the first item whose key, order or value changed. Comments
are not written by the encoder, so they are skipped when comparing.
"""

from __future__ import annotations

from typing import Any

import pytest

from json_sops_store import INDENT_TAB, JSONStore, JSONStoreConfig
from json_sops_store.tree.nodes import Comment, TreeBranch, Value


def _first_divergence(left: Value, right: Value, path: str = "") -> str | None:
    """Return the JSON Pointer of the first place two trees differ, or None."""
    if isinstance(left, TreeBranch) and isinstance(right, TreeBranch):
        left_items = [i for i in left if not isinstance(i.key, Comment)]
        right_items = [i for i in right if not isinstance(i.key, Comment)]
        for idx, (a, b) in enumerate(zip(left_items, right_items)):
            if a.key != b.key:
                return f"{path}/{idx} (key {a.key!r} != {b.key!r})"
            found = _first_divergence(a.value, b.value, f"{path}/{a.key}")
            if found is not None:
                return found
        if len(left_items) != len(right_items):
            return f"{path} (item count {len(left_items)} != {len(right_items)})"
        return None
    if isinstance(left, TreeBranch) or isinstance(right, TreeBranch):
        return f"{path} (object vs non-object)"
    if isinstance(left, list) and isinstance(right, list):
        left_elems = [v for v in left if not isinstance(v, Comment)]
        right_elems = [v for v in right if not isinstance(v, Comment)]
        for idx, (a, b) in enumerate(zip(left_elems, right_elems)):
            found = _first_divergence(a, b, f"{path}/{idx}")
            if found is not None:
                return found
        if len(left_elems) != len(right_elems):
            return f"{path} (array length {len(left_elems)} != {len(right_elems)})"
        return None
    if type(left) is not type(right) or left != right:
        return f"{path} ({left!r} != {right!r})"
    return None


@pytest.fixture(scope="session")
def assert_json_round_trip() -> Any:
    """Fixture that returns a callable JSON round-trip asserter.

    The fixture is session-scoped because the returned callable is stateless
    (a fresh JSONStore is built per call).

    Usage in tests::

        def test_order_kept(assert_json_round_trip):
            assert_json_round_trip(b'{"b": 1, "a": [true, null]}')

        def test_exact_output(assert_json_round_trip):
            assert_json_round_trip(b'{"a":1}', expected=b'{\\n  "a": 1\\n}\\n', indent=2)

    Returns:
        A callable ``_assert(document, expected=None, indent=INDENT_TAB) -> bytes``
        returning the emitted bytes and raising ``AssertionError`` when the
        re-decoded tree differs from the original, or when the emitted bytes
        differ from ``expected``.
    """

    def _assert(
        document: bytes | str,
        expected: bytes | str | None = None,
        indent: int = INDENT_TAB,
    ) -> bytes:
        """Decode ``document``, emit it, decode the output and compare.

        Raises:
            AssertionError: With the JSON Pointer of the first divergence.
        """
        if isinstance(document, str):
            document = document.encode("utf-8")
        store = JSONStore(JSONStoreConfig(indent=indent))
        original = store.load_plain_file(document)
        emitted = store.emit_plain_file(original)
        reloaded = store.load_plain_file(emitted)

        divergence = _first_divergence(original[0], reloaded[0])
        if divergence is not None:
            raise AssertionError(
                f"JSON round trip changed the document at {divergence}\n"
                f"  input:   {document!r}\n"
                f"  emitted: {emitted!r}"
            )
        if expected is not None:
            if isinstance(expected, str):
                expected = expected.encode("utf-8")
            if emitted != expected:
                raise AssertionError(
                    f"JSON round trip output mismatch\n"
                    f"  emitted:  {emitted!r}\n"
                    f"  expected: {expected!r}"
                )
        return emitted

    return _assert
