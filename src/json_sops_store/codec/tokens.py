"""Forward-only JSON tokenizer.

Produces one token at a time from a decoded JSON text:

- ``Delim`` members for ``{`` ``}`` ``[`` ``]``
- ``str`` for strings (keys and values alike)
- ``int`` / ``float`` for numbers
- ``True`` / ``False`` / ``None`` for the literals

Commas and colons never surface as tokens. A small state machine consumes
them and rejects anything out of place (missing colon, trailing comma,
mismatched close), so the decoder only ever sees a well-ordered stream.
"""

from __future__ import annotations

import re
from enum import Enum, auto
from json.decoder import JSONDecodeError, scanstring
from typing import Union

from json_sops_store.errors import MalformedDocumentError

__all__ = ["Delim", "Token", "Tokenizer", "token_type_name"]


class Delim(Enum):
    """Structural delimiters.

    A plain Enum rather than a StrEnum: a string token ``"{"`` must never
    compare equal to ``Delim.OBJECT_START``.
    """

    OBJECT_START = "{"
    OBJECT_END = "}"
    ARRAY_START = "["
    ARRAY_END = "]"

    def __str__(self) -> str:
        return self.value


Token = Union[Delim, str, int, float, bool, None]

# JSON number grammar (RFC 8259 section 6)
_NUMBER = re.compile(r"-?(?:0|[1-9][0-9]*)(\.[0-9]+)?([eE][-+]?[0-9]+)?")

_NUMBER_START = "-0123456789"

# Unpaired \uXXXX surrogate escapes; they have no UTF-8 encoding.
_LONE_SURROGATE = re.compile(r"[\ud800-\udfff]")

_WHITESPACE = " \t\n\r"

_LITERALS: dict[str, bool | None] = {"true": True, "false": False, "null": None}

_OPENERS = {"{": Delim.OBJECT_START, "[": Delim.ARRAY_START}
_CLOSERS = {"}": Delim.OBJECT_END, "]": Delim.ARRAY_END}
_MATCHING = {Delim.OBJECT_END: Delim.OBJECT_START, Delim.ARRAY_END: Delim.ARRAY_START}


class _State(Enum):
    """What the tokenizer accepts next."""

    VALUE = auto()  # a value, no close
    VALUE_OR_CLOSE = auto()  # just after "["
    KEY = auto()  # just after "," inside an object
    KEY_OR_CLOSE = auto()  # just after "{"
    COLON = auto()  # just after an object key
    COMMA_OR_CLOSE = auto()  # just after a complete member
    DONE = auto()  # top-level value complete


def token_type_name(token: Token) -> str:
    """Return a human-readable type name for a token."""
    if isinstance(token, Delim):
        return "delimiter"
    if token is None:
        return "null"
    return type(token).__name__


class Tokenizer:
    """Single forward pass over a JSON text.

    Example::

        tokens = Tokenizer('{"a": [1, true]}')
        tokens.next_token()  # Delim.OBJECT_START
        tokens.next_token()  # "a"
        tokens.next_token()  # Delim.ARRAY_START
        tokens.next_token()  # 1
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0
        self._stack: list[Delim] = []
        self._state = _State.VALUE

    @property
    def offset(self) -> int:
        """Character offset of the next unread character."""
        return self._pos

    @property
    def depth(self) -> int:
        """Number of containers currently open."""
        return len(self._stack)

    def next_token(self) -> Token:
        """Read and return the next token.

        Raises:
            MalformedDocumentError: On any syntax error, including end of
                input before the top-level value is complete.
        """
        ch = self._peek()
        if self._state is _State.DONE:
            self._fail("unexpected data after top-level value", ch)

        if self._state is _State.COLON:
            if ch != ":":
                self._fail("expected ':' after object key", ch)
            self._pos += 1
            self._state = _State.VALUE
            ch = self._peek()
        elif self._state is _State.COMMA_OR_CLOSE:
            if ch == ",":
                self._pos += 1
                in_object = self._stack[-1] is Delim.OBJECT_START
                self._state = _State.KEY if in_object else _State.VALUE
                ch = self._peek()
            elif ch not in _CLOSERS:
                self._fail("expected ',' or closing delimiter", ch)

        if ch in _CLOSERS:
            return self._close(_CLOSERS[ch])

        start = self._pos
        token = self._read_value(ch)
        if isinstance(token, Delim):
            self._stack.append(token)
            in_object = token is Delim.OBJECT_START
            self._state = _State.KEY_OR_CLOSE if in_object else _State.VALUE_OR_CLOSE
        elif self._state in (_State.KEY, _State.KEY_OR_CLOSE):
            # Non-string keys are handed back so the decoder can report them.
            if not isinstance(token, str):
                self._pos = start
                return token
            self._state = _State.COLON
        else:
            self._end_value()
        return token

    def finish(self) -> None:
        """Assert that only whitespace remains after the top-level value."""
        self._skip_whitespace()
        if self._pos < len(self._text):
            self._fail("unexpected data after top-level value", self._text[self._pos])

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _skip_whitespace(self) -> None:
        text = self._text
        while self._pos < len(text) and text[self._pos] in _WHITESPACE:
            self._pos += 1

    def _peek(self) -> str:
        self._skip_whitespace()
        if self._pos >= len(self._text):
            raise MalformedDocumentError(
                "unexpected end of JSON input", token=None, token_type="EOF", offset=self._pos
            )
        return self._text[self._pos]

    def _fail(self, reason: str, ch: str) -> None:
        msg = f"invalid character {ch!r} at offset {self._pos}: {reason}"
        raise MalformedDocumentError(msg, token=ch, token_type="character", offset=self._pos)

    def _end_value(self) -> None:
        self._state = _State.COMMA_OR_CLOSE if self._stack else _State.DONE

    def _close(self, delim: Delim) -> Delim:
        accepts_close = self._state in (
            _State.KEY_OR_CLOSE,
            _State.VALUE_OR_CLOSE,
            _State.COMMA_OR_CLOSE,
        )
        if not accepts_close or not self._stack or self._stack[-1] is not _MATCHING[delim]:
            self._fail(f"unexpected {delim}", delim.value)
        self._stack.pop()
        self._pos += 1
        self._end_value()
        return delim

    def _read_value(self, ch: str) -> Token:
        if ch in _OPENERS:
            self._pos += 1
            return _OPENERS[ch]
        if ch == '"':
            return self._read_string()
        if ch in _NUMBER_START:
            return self._read_number()
        for literal, value in _LITERALS.items():
            if self._text.startswith(literal, self._pos):
                self._pos += len(literal)
                return value
        self._fail("looking for beginning of value", ch)
        raise AssertionError("unreachable")

    def _read_string(self) -> str:
        try:
            value, end = scanstring(self._text, self._pos + 1, True)
        except JSONDecodeError as exc:
            raise MalformedDocumentError(
                f"invalid JSON string at offset {exc.pos}: {exc.msg}",
                token=self._text[self._pos : exc.pos + 1],
                token_type="str",
                offset=exc.pos,
            ) from exc
        self._pos = end
        # Unpaired surrogates become U+FFFD; decoded text is always valid UTF-8.
        return _LONE_SURROGATE.sub("\ufffd", value)

    def _read_number(self) -> int | float:
        match = _NUMBER.match(self._text, self._pos)
        if match is None:
            self._fail("invalid number literal", self._text[self._pos])
            raise AssertionError("unreachable")
        self._pos = match.end()
        literal = match.group()
        if match.group(1) or match.group(2):
            return float(literal)
        return int(literal)
