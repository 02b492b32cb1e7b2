"""Store configuration for the JSON and JSON-binary formats.

Both configs are frozen (immutable) dataclasses; a store reads them once at
construction and never mutates them. ``StoresConfig.from_mapping`` builds
them from the ``stores:`` section of a tool configuration file.

The indent range is checked when a store encodes, not here: a config with
an unusable indent is still fine for decoding.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from json_sops_store.codec.encoder import INDENT_TAB

__all__ = ["JSONBinaryStoreConfig", "JSONStoreConfig", "StoresConfig"]


def _check_indent(indent: Any) -> None:
    # bool is an int subclass but never a meaningful width
    if isinstance(indent, bool) or not isinstance(indent, int):
        msg = f"indent must be an int, got {type(indent).__name__}"
        raise TypeError(msg)


@dataclass(frozen=True, slots=True)
class JSONStoreConfig:
    """Configuration for ``JSONStore``.

    Attributes:
        indent: Spaces per nesting level; ``INDENT_TAB`` (-1) for tabs.
    """

    indent: int = INDENT_TAB

    def __post_init__(self) -> None:
        _check_indent(self.indent)


@dataclass(frozen=True, slots=True)
class JSONBinaryStoreConfig:
    """Configuration for ``JSONBinaryStore``.

    Attributes:
        indent: Indent used for the encrypted JSON envelope.
    """

    indent: int = INDENT_TAB

    def __post_init__(self) -> None:
        _check_indent(self.indent)


@dataclass(frozen=True, slots=True)
class StoresConfig:
    """Per-format store settings."""

    json: JSONStoreConfig = field(default_factory=JSONStoreConfig)
    json_binary: JSONBinaryStoreConfig = field(default_factory=JSONBinaryStoreConfig)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> StoresConfig:
        """Build from a parsed ``stores:`` section.

        Example::

            StoresConfig.from_mapping({"json": {"indent": 2}})

        Unknown sections and keys are ignored; missing ones use defaults.
        """
        data = data or {}
        json_section = data.get("json") or {}
        binary_section = data.get("json_binary") or {}
        return cls(
            json=JSONStoreConfig(indent=json_section.get("indent", INDENT_TAB)),
            json_binary=JSONBinaryStoreConfig(indent=binary_section.get("indent", INDENT_TAB)),
        )
