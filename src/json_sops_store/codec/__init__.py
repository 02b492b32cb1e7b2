"""Codec subpackage: JSON bytes <-> tree model.

- Tokenizer / Delim: forward-only token stream with syntax validation
- decode_branch: bytes -> TreeBranch, order preserved
- encode_value / encode_branch / reindent: tree -> JSON text
"""

from json_sops_store.codec.decoder import decode_branch
from json_sops_store.codec.encoder import (
    INDENT_TAB,
    encode_branch,
    encode_value,
    indent_unit,
    reindent,
)
from json_sops_store.codec.tokens import Delim, Tokenizer

__all__ = [
    "INDENT_TAB",
    "Delim",
    "Tokenizer",
    "decode_branch",
    "encode_branch",
    "encode_value",
    "indent_unit",
    "reindent",
]
