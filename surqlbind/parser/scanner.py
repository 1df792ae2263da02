"""Statement scanner for SurrealQL source text.

The scanner is a small automaton. In the ``CODE`` state it emits words,
numbers and symbols; strings, quoted identifiers and comments move it into a
dedicated state that consumes the whole region as one opaque token, so text
such as ``"DEFINE FUNCTION"`` inside a literal never looks like a header.
"""

from __future__ import annotations

import re
from bisect import bisect_right
from enum import Enum
from typing import Iterator, List

from ..errors import LexError
from ..logging import get_logger
from ..models import Position, Token, TokenKind

KEYWORDS = frozenset({"DEFINE", "FUNCTION"})
PUNCTUATION = frozenset("(),:{};")

_WORD = re.compile(r"\$?[A-Za-z_][A-Za-z0-9_]*(?:::[A-Za-z0-9_]+)*")
_NUMBER = re.compile(r"[0-9]+(?:\.[0-9]+)?[A-Za-z0-9_]*")

_STRING_QUOTES = frozenset("\"'")
_IDENT_QUOTES = {"`": "`", "⟨": "⟩"}

# Each pattern matches the remainder of a quoted region, closing quote included.
_QUOTED_REST = {
    '"': re.compile(r'(?:[^"\\]|\\.)*"', re.DOTALL),
    "'": re.compile(r"(?:[^'\\]|\\.)*'", re.DOTALL),
    "`": re.compile(r"(?:[^`\\]|\\.)*`", re.DOTALL),
    "⟨": re.compile(r"[^⟩]*⟩"),
}

logger = get_logger("scanner")


class ScanState(Enum):
    CODE = "code"
    STRING = "string"
    QUOTED_IDENT = "quoted-identifier"
    LINE_COMMENT = "line-comment"
    BLOCK_COMMENT = "block-comment"


class _LineIndex:
    """Maps string offsets to 1-based line/column pairs."""

    def __init__(self, text: str) -> None:
        self._starts: List[int] = [0]
        self._starts.extend(match.end() for match in re.finditer("\n", text))

    def position(self, offset: int) -> Position:
        line = bisect_right(self._starts, offset)
        return Position(offset, line, offset - self._starts[line - 1] + 1)


class Scanner:
    """Lazy token stream over one source text.

    Iterating the scanner starts a fresh pass each time, so a token stream
    can be consumed more than once.
    """

    def __init__(self, text: str, origin: str = "<string>") -> None:
        self.text = text
        self.origin = origin
        self._lines = _LineIndex(text)

    def __iter__(self) -> Iterator[Token]:
        return self._scan()

    def position(self, offset: int) -> Position:
        return self._lines.position(offset)

    def _token(self, kind: TokenKind, text: str, start: int, end: int) -> Token:
        return Token(kind=kind, text=text, position=self.position(start), end=end)

    def _scan(self) -> Iterator[Token]:
        text = self.text
        length = len(text)
        state = ScanState.CODE
        index = 0
        start = 0
        opener = ""
        count = 0

        while index < length:
            if state is ScanState.CODE:
                char = text[index]
                if char.isspace():
                    index += 1
                    continue
                start = index
                if text.startswith(("--", "//"), index):
                    state = ScanState.LINE_COMMENT
                    index += 2
                elif char == "#":
                    state = ScanState.LINE_COMMENT
                    index += 1
                elif text.startswith("/*", index):
                    state = ScanState.BLOCK_COMMENT
                    index += 2
                elif char in _STRING_QUOTES:
                    state = ScanState.STRING
                    opener = char
                    index += 1
                elif char in _IDENT_QUOTES:
                    state = ScanState.QUOTED_IDENT
                    opener = char
                    index += 1
                else:
                    token = self._code_token(index)
                    index = token.end
                    count += 1
                    yield token
                continue

            if state is ScanState.LINE_COMMENT:
                end = text.find("\n", index)
                if end == -1:
                    end = length
                count += 1
                yield self._token(TokenKind.COMMENT, text[index:end].strip(), start, end)
                index = end
            elif state is ScanState.BLOCK_COMMENT:
                end = text.find("*/", index)
                if end == -1:
                    raise LexError(
                        "unterminated block comment",
                        origin=self.origin,
                        position=self.position(start),
                    )
                count += 1
                yield self._token(TokenKind.COMMENT, text[index:end].strip(), start, end + 2)
                index = end + 2
            else:
                match = _QUOTED_REST[opener].match(text, index)
                if match is None:
                    what = "string literal" if state is ScanState.STRING else "quoted identifier"
                    raise LexError(
                        f"unterminated {what}",
                        origin=self.origin,
                        position=self.position(start),
                    )
                end = match.end()
                if state is ScanState.STRING:
                    token = self._token(TokenKind.STRING, text[start:end], start, end)
                else:
                    token = self._token(TokenKind.IDENTIFIER, text[start + 1 : end - 1], start, end)
                count += 1
                yield token
                index = end
            state = ScanState.CODE

        logger.debug("Scanned %d tokens from %s", count, self.origin)
        yield self._token(TokenKind.EOF, "", length, length)

    def _code_token(self, index: int) -> Token:
        text = self.text
        match = _WORD.match(text, index)
        if match:
            word = match.group()
            kind = TokenKind.KEYWORD if word.upper() in KEYWORDS else TokenKind.IDENTIFIER
            return self._token(kind, word, index, match.end())
        match = _NUMBER.match(text, index)
        if match:
            return self._token(TokenKind.NUMBER, match.group(), index, match.end())
        char = text[index]
        kind = TokenKind.PUNCTUATION if char in PUNCTUATION else TokenKind.OPERATOR
        return self._token(kind, char, index, index + 1)


__all__ = ["KEYWORDS", "PUNCTUATION", "ScanState", "Scanner"]
