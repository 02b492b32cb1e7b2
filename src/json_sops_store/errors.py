"""Exception hierarchy for json-sops-store.

Every error raised by the codec derives from ``StoreError`` and keeps the
offending context (token, key, configured value) as attributes so callers
can render a message without going back to the raw bytes.

Decode side:
- MalformedDocumentError: broken token stream (bad syntax, early EOF,
  non-string key).
- UnexpectedTokenError: document does not start with an object.

Metadata side:
- MetadataNotFoundError: valid document without the reserved key.
- LegacyFormatError: metadata written by SOPS 1.x (numeric version).
- MetadataDecodeError: metadata present but does not match its schema.

Encode side:
- InvalidKeyTypeError, InvalidIndentError, UnsupportedValueError.

Binary adapter:
- UnstructuredValueError, BinaryStoreEmitPlainError.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "BinaryStoreEmitPlainError",
    "EncodeError",
    "InvalidIndentError",
    "InvalidKeyTypeError",
    "LegacyFormatError",
    "MalformedDocumentError",
    "MetadataDecodeError",
    "MetadataNotFoundError",
    "StoreError",
    "UnexpectedTokenError",
    "UnstructuredValueError",
    "UnsupportedValueError",
]


class StoreError(Exception):
    """Base class for every error raised by json-sops-store."""


class MalformedDocumentError(StoreError, ValueError):
    """The input is not a well-formed JSON document.

    Attributes:
        token:      The offending token or character (``None`` at end of input).
        token_type: Type name of the offending token, e.g. ``"int"``.
        offset:     Character offset in the decoded text, or -1 when unknown.
    """

    def __init__(
        self,
        message: str,
        token: Any = None,
        token_type: str = "",
        offset: int = -1,
    ) -> None:
        super().__init__(message)
        self.token = token
        self.token_type = token_type
        self.offset = offset


class UnexpectedTokenError(MalformedDocumentError):
    """The first token of the document is not an object start."""

    def __init__(self, token: Any, token_type: str, offset: int = -1) -> None:
        msg = f"Expected JSON object start, got {token!r} of type {token_type} instead"
        super().__init__(msg, token=token, token_type=token_type, offset=offset)


class MetadataNotFoundError(StoreError):
    """The document is valid but holds no encryption metadata."""

    def __init__(self, key: str = "sops") -> None:
        super().__init__(f"sops metadata not found: the document has no {key!r} key")
        self.key = key


LEGACY_FORMAT_GUIDANCE = (
    "SOPS versions higher than 2.0.10 can not automatically decrypt JSON files "
    "created with SOPS 1.x. In order to be able to decrypt this file, you can "
    "either edit it manually and make sure the JSON value under `sops -> version` "
    "is a string and not a number, or you can rotate the file's key with any "
    "version of SOPS between 2.0 and 2.0.10 using `sops -r your_file.json`"
)


class LegacyFormatError(StoreError):
    """The metadata version is a number: the file was written by SOPS 1.x.

    Attributes:
        version: The numeric version value found in the file.
    """

    def __init__(self, version: Any) -> None:
        super().__init__(LEGACY_FORMAT_GUIDANCE)
        self.version = version


class MetadataDecodeError(StoreError):
    """The metadata entry exists but does not match the metadata schema.

    The underlying validation error is chained as ``__cause__``; its
    structured error list is copied to ``errors``.
    """

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(f"Error unmarshalling input json: {message}")
        self.errors = errors or []


class EncodeError(StoreError):
    """A tree could not be rendered back to JSON."""


class InvalidKeyTypeError(EncodeError, TypeError):
    """A tree item key is neither a string nor a comment."""

    def __init__(self, key: Any) -> None:
        super().__init__(
            f"Tree item keys must be strings, got {key!r} of type {type(key).__name__}"
        )
        self.key = key


class InvalidIndentError(EncodeError, ValueError):
    """The configured indentation is below the tab sentinel (-1)."""

    def __init__(self, indent: int) -> None:
        super().__init__(
            f"JSON Indentation parameter smaller than -1 is not accepted, got {indent}"
        )
        self.indent = indent


class UnsupportedValueError(EncodeError, TypeError):
    """A leaf value has no JSON representation."""

    def __init__(self, value: Any, reason: str = "") -> None:
        msg = f"Cannot encode value {value!r} of type {type(value).__name__}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
        self.value = value


class UnstructuredValueError(StoreError):
    """A binary payload has no structure to extract a single value from."""

    def __init__(self) -> None:
        super().__init__(
            "Binary files are not structured and extracting a single value is not possible"
        )


class BinaryStoreEmitPlainError(StoreError):
    """The tree handed to the binary adapter does not hold a binary payload."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"error emitting binary store: {reason}")
        self.reason = reason
