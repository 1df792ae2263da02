"""Tests for surqlbind.parser.scanner."""

from __future__ import annotations

import pytest

from surqlbind.errors import LexError
from surqlbind.models import Position, TokenKind
from surqlbind.parser.scanner import Scanner


def _kinds(text: str) -> list[tuple[TokenKind, str]]:
    return [(token.kind, token.text) for token in Scanner(text)]


def test_keywords_inside_strings_are_opaque() -> None:
    tokens = _kinds('LET $x = "DEFINE FUNCTION fn::nope() {}";')

    assert (TokenKind.KEYWORD, "DEFINE") not in tokens
    assert tokens == [
        (TokenKind.IDENTIFIER, "LET"),
        (TokenKind.IDENTIFIER, "$x"),
        (TokenKind.OPERATOR, "="),
        (TokenKind.STRING, '"DEFINE FUNCTION fn::nope() {}"'),
        (TokenKind.PUNCTUATION, ";"),
        (TokenKind.EOF, ""),
    ]


def test_all_comment_styles_become_single_tokens() -> None:
    text = "-- DEFINE FUNCTION fn::a() {}\n// slash\n# hash\n/* DEFINE\n FUNCTION */"

    tokens = _kinds(text)

    assert tokens == [
        (TokenKind.COMMENT, "DEFINE FUNCTION fn::a() {}"),
        (TokenKind.COMMENT, "slash"),
        (TokenKind.COMMENT, "hash"),
        (TokenKind.COMMENT, "DEFINE\n FUNCTION"),
        (TokenKind.EOF, ""),
    ]


def test_qualified_names_are_one_identifier_and_keywords_ignore_case() -> None:
    tokens = _kinds("define Function fn::a::b::c(")

    assert tokens[:4] == [
        (TokenKind.KEYWORD, "define"),
        (TokenKind.KEYWORD, "Function"),
        (TokenKind.IDENTIFIER, "fn::a::b::c"),
        (TokenKind.PUNCTUATION, "("),
    ]


def test_escaped_quote_does_not_close_string() -> None:
    tokens = _kinds(r'"a \" DEFINE" FUNCTION')

    assert tokens[0] == (TokenKind.STRING, r'"a \" DEFINE"')
    assert tokens[1] == (TokenKind.KEYWORD, "FUNCTION")


def test_quoted_identifiers_are_unwrapped() -> None:
    tokens = _kinds("`my fn` ⟨other⟩")

    assert tokens[:2] == [
        (TokenKind.IDENTIFIER, "my fn"),
        (TokenKind.IDENTIFIER, "other"),
    ]


def test_type_symbols_and_numbers() -> None:
    tokens = _kinds("record<user> | 10")

    assert tokens == [
        (TokenKind.IDENTIFIER, "record"),
        (TokenKind.OPERATOR, "<"),
        (TokenKind.IDENTIFIER, "user"),
        (TokenKind.OPERATOR, ">"),
        (TokenKind.OPERATOR, "|"),
        (TokenKind.NUMBER, "10"),
        (TokenKind.EOF, ""),
    ]


def test_positions_track_lines_and_columns() -> None:
    tokens = list(Scanner("a\n  b"))

    assert tokens[0].position == Position(0, 1, 1)
    assert tokens[1].position == Position(4, 2, 3)
    assert tokens[-1].kind is TokenKind.EOF
    assert tokens[-1].position.offset == 5


def test_scanner_is_restartable() -> None:
    scanner = Scanner("DEFINE FUNCTION fn::a() { RETURN 1; };")

    assert list(scanner) == list(scanner)


def test_unterminated_string_reports_origin_and_position() -> None:
    scanner = Scanner('x = "abc', origin="broken.surql")

    with pytest.raises(LexError) as excinfo:
        list(scanner)

    assert excinfo.value.origin == "broken.surql"
    assert excinfo.value.position == Position(4, 1, 5)
    assert "unterminated string literal" in str(excinfo.value)
    assert str(excinfo.value).startswith("broken.surql:1:5:")


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("/* never closed", "unterminated block comment"),
        ("`ident", "unterminated quoted identifier"),
        ("'single", "unterminated string literal"),
    ],
)
def test_unterminated_regions_raise(text: str, message: str) -> None:
    with pytest.raises(LexError, match=message):
        list(Scanner(text))
