"""Recognizes ``DEFINE FUNCTION`` headers in a token stream.

The parser moves through three states. ``SEEKING`` discards tokens until the
keywords ``DEFINE FUNCTION`` are followed by an ``fn::`` name.
``PARSING_PARAMS`` reads the ``name: type`` list up to the matching ``)``.
``SKIPPING_BODY`` counts braces from the first ``{`` until the depth returns
to zero. Everything else in the source is ignored.
"""

from __future__ import annotations

import re
from collections import deque
from enum import Enum
from typing import Deque, Iterator, List, Optional, Set, Tuple

from ..errors import MalformedHeaderError, UnterminatedBodyError
from ..logging import get_logger
from ..models import (
    NAMESPACE_MARKER,
    SEGMENT_SEPARATOR,
    FunctionSignature,
    Parameter,
    Position,
    Span,
    Token,
    TokenKind,
)
from .scanner import Scanner

logger = get_logger("parser")

_VARIABLE_SIGIL = "$"
_OPENERS = {"<": ">", "(": ")"}
_CLOSERS = frozenset(_OPENERS.values())
_PARAMETER_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")
_SYMBOL_KINDS = (TokenKind.PUNCTUATION, TokenKind.OPERATOR)


class ParserState(Enum):
    SEEKING = "seeking"
    PARSING_PARAMS = "parsing-params"
    SKIPPING_BODY = "skipping-body"


class _TokenStream:
    """Comment-free view over a token iterator with one token of lookahead.

    ``comments`` holds the comment texts that directly preceded the token most
    recently returned by :meth:`next`.
    """

    def __init__(self, tokens: Iterator[Token]) -> None:
        self._tokens = tokens
        self._buffer: Deque[Tuple[Token, Tuple[str, ...]]] = deque()
        self._eof: Optional[Token] = None
        self.comments: Tuple[str, ...] = ()

    def _pull(self) -> Tuple[Token, Tuple[str, ...]]:
        if self._eof is not None:
            return self._eof, ()
        comments: List[str] = []
        for token in self._tokens:
            if token.kind is TokenKind.COMMENT:
                comments.append(token.text)
                continue
            if token.kind is TokenKind.EOF:
                self._eof = token
            return token, tuple(comments)
        raise RuntimeError("token stream ended without an end-of-input token")

    def peek(self) -> Token:
        if not self._buffer:
            self._buffer.append(self._pull())
        return self._buffer[0][0]

    def next(self) -> Token:
        token, comments = self._buffer.popleft() if self._buffer else self._pull()
        self.comments = comments
        return token


def _describe(token: Token) -> str:
    if token.kind is TokenKind.EOF:
        return "end of input"
    return f"'{token.text}'"


def _is_function_name(token: Token) -> bool:
    if token.kind is not TokenKind.IDENTIFIER:
        return False
    return token.text == NAMESPACE_MARKER or token.text.startswith(
        NAMESPACE_MARKER + SEGMENT_SEPARATOR
    )


class HeaderParser:
    """Extracts function signatures from one scanned source."""

    def __init__(self, scanner: Scanner) -> None:
        self.scanner = scanner
        self.origin = scanner.origin
        self.state = ParserState.SEEKING

    def __iter__(self) -> Iterator[FunctionSignature]:
        return self._parse()

    def parse(self) -> List[FunctionSignature]:
        signatures = list(self)
        logger.debug("Found %d function(s) in %s", len(signatures), self.origin)
        return signatures

    def _malformed(self, message: str, position: Position) -> MalformedHeaderError:
        return MalformedHeaderError(message, origin=self.origin, position=position)

    def _parse(self) -> Iterator[FunctionSignature]:
        stream = _TokenStream(iter(self.scanner))
        self.state = ParserState.SEEKING
        while True:
            token = stream.next()
            if token.kind is TokenKind.EOF:
                return
            if not token.is_keyword("DEFINE") or not stream.peek().is_keyword("FUNCTION"):
                continue
            docs = stream.comments
            stream.next()
            if not _is_function_name(stream.peek()):
                continue
            signature = self._parse_function(stream, token, stream.next(), docs)
            logger.debug("Parsed %s from %s", signature.qualified_name, self.origin)
            yield signature
            self.state = ParserState.SEEKING

    def _parse_function(
        self,
        stream: _TokenStream,
        define: Token,
        name_token: Token,
        docs: Tuple[str, ...],
    ) -> FunctionSignature:
        segments = tuple(name_token.text.split(SEGMENT_SEPARATOR)[1:])
        if not segments:
            raise self._malformed(
                f"function name '{name_token.text}' has no segment after "
                f"'{NAMESPACE_MARKER}{SEGMENT_SEPARATOR}'",
                name_token.position,
            )

        opener = stream.next()
        if not opener.is_punct("("):
            raise self._malformed(
                f"expected '(' after {name_token.text}, found {_describe(opener)}",
                opener.position,
            )
        self.state = ParserState.PARSING_PARAMS
        params = self._parse_params(stream, opener)

        body_open = self._find_body(stream)
        self.state = ParserState.SKIPPING_BODY
        body_close = self._skip_body(stream, body_open)

        text = self.scanner.text
        body_span = Span(body_open.position, body_close.end_position)
        return FunctionSignature(
            name=segments,
            params=params,
            body_span=body_span,
            origin=self.origin,
            body=body_span.slice(text),
            statement=text[define.position.offset : body_close.end],
            comments=docs,
        )

    def _parse_params(self, stream: _TokenStream, opener: Token) -> Tuple[Parameter, ...]:
        if stream.peek().is_punct(")"):
            stream.next()
            return ()

        params: List[Parameter] = []
        seen: Set[str] = set()
        while True:
            name_token = stream.next()
            if name_token.kind is TokenKind.EOF:
                raise self._malformed("parameter list is never closed", opener.position)
            if name_token.is_punct(":"):
                raise self._malformed("parameter is missing its name", name_token.position)
            if name_token.kind not in (TokenKind.IDENTIFIER, TokenKind.KEYWORD):
                raise self._malformed(
                    f"expected parameter name, found {_describe(name_token)}",
                    name_token.position,
                )
            name = name_token.text
            if name.startswith(_VARIABLE_SIGIL):
                name = name[len(_VARIABLE_SIGIL) :]
            if not _PARAMETER_NAME.match(name):
                raise self._malformed(
                    f"parameter name '{name}' is not a plain identifier", name_token.position
                )

            colon = stream.next()
            if not colon.is_punct(":"):
                raise self._malformed(f"parameter '{name}' is missing its type", colon.position)
            kind, closer = self._read_type(stream, opener, name)
            if not kind:
                raise self._malformed(f"parameter '{name}' is missing its type", closer.position)
            if name in seen:
                raise self._malformed(f"parameter '{name}' is declared twice", name_token.position)
            seen.add(name)
            params.append(Parameter(name=name, kind=kind))
            if closer.is_punct(")"):
                return tuple(params)

    def _read_type(
        self, stream: _TokenStream, opener: Token, name: str
    ) -> Tuple[str, Token]:
        """Consume type text up to a top-level ``,`` or ``)``.

        The text is rebuilt from the type's tokens; any gap between two
        tokens (whitespace or comments) becomes a single space.
        """
        text = self.scanner.text
        closers: List[str] = []
        parts: List[str] = []
        previous: Optional[Token] = None
        while True:
            token = stream.peek()
            if token.kind is TokenKind.EOF or token.is_punct("{") or token.is_punct(";"):
                raise self._malformed("parameter list is never closed", opener.position)
            if not closers and (token.is_punct(",") or token.is_punct(")")):
                stream.next()
                break
            stream.next()
            if token.kind in _SYMBOL_KINDS:
                if token.text in _OPENERS:
                    closers.append(_OPENERS[token.text])
                elif token.text in _CLOSERS:
                    if not closers or token.text != closers[-1]:
                        raise self._malformed(
                            f"unbalanced '{token.text}' in the type of parameter '{name}'",
                            token.position,
                        )
                    closers.pop()
            if previous is not None and previous.end != token.position.offset:
                parts.append(" ")
            parts.append(text[token.position.offset : token.end])
            previous = token

        return "".join(parts), token

    def _find_body(self, stream: _TokenStream) -> Token:
        while True:
            token = stream.next()
            if token.is_punct("{"):
                return token
            if token.kind is TokenKind.EOF:
                raise UnterminatedBodyError(
                    "function body never opens", origin=self.origin, position=token.position
                )
            if token.is_punct(";"):
                raise self._malformed("function has no body", token.position)

    def _skip_body(self, stream: _TokenStream, body_open: Token) -> Token:
        depth = 1
        while True:
            token = stream.next()
            if token.kind is TokenKind.EOF:
                raise UnterminatedBodyError(
                    "function body is never closed",
                    origin=self.origin,
                    position=body_open.position,
                )
            if token.is_punct("{"):
                depth += 1
            elif token.is_punct("}"):
                depth -= 1
                if depth == 0:
                    return token


def parse_signatures(text: str, origin: str = "<string>") -> List[FunctionSignature]:
    """Return every function signature defined in ``text``."""
    return HeaderParser(Scanner(text, origin)).parse()


__all__ = ["HeaderParser", "ParserState", "parse_signatures"]
