"""Unit tests for whylang.grammar.tokens — TokenType enum and Token dataclass."""
from __future__ import annotations

import pytest

from whylang.grammar.tokens import (
    KEYWORD_TYPES,
    KEYWORDS,
    OPERATORS,
    TRIVIA_TYPES,
    LexDiagnostic,
    LexErrorKind,
    Position,
    Token,
    TokenType,
)


def _tok(token_type: TokenType, value: object = None, line: int = 1, col: int = 1,
         offset: int = 0, length: int = 1) -> Token:
    return Token(token_type, value, Position(offset, line, col), length)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# TokenType enum membership
# ---------------------------------------------------------------------------


class TestTokenTypeEnum:
    def test_token_type_members_are_unique(self) -> None:
        values = [t.value for t in TokenType]
        assert len(values) == len(set(values))

    def test_every_keyword_type_has_a_default_spelling(self) -> None:
        assert set(KEYWORDS.values()) == set(KEYWORD_TYPES)

    def test_trivia_types(self) -> None:
        assert TRIVIA_TYPES == {TokenType.WHITESPACE, TokenType.COMMENT}

    def test_structural_tokens_exist(self) -> None:
        for ttype in (TokenType.EOF, TokenType.ERROR):
            assert isinstance(ttype, TokenType)


# ---------------------------------------------------------------------------
# KEYWORDS / OPERATORS tables
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("keyword, expected_type", [
    ("def", TokenType.DEF),
    ("extern", TokenType.EXTERN),
    ("if", TokenType.IF),
    ("then", TokenType.THEN),
    ("else", TokenType.ELSE),
    ("for", TokenType.FOR),
    ("in", TokenType.IN),
    ("var", TokenType.VAR),
    ("return", TokenType.RETURN),
    ("true", TokenType.TRUE),
    ("false", TokenType.FALSE),
])
def test_keywords_map_correct_type(keyword: str, expected_type: TokenType) -> None:
    assert KEYWORDS[keyword] is expected_type


def test_unknown_word_not_in_keywords() -> None:
    assert "foobar" not in KEYWORDS
    assert "If" not in KEYWORDS


def test_every_multi_char_operator_has_single_char_prefix_or_is_unique() -> None:
    # Longest match only matters where a shorter spelling is a prefix.
    for spelling in OPERATORS:
        if len(spelling) == 2 and spelling[0] in OPERATORS:
            assert OPERATORS[spelling] is not OPERATORS[spelling[0]]


def test_operator_table_has_no_value_bearing_types() -> None:
    assert TokenType.IDENTIFIER not in OPERATORS.values()
    assert TokenType.STRING not in OPERATORS.values()


# ---------------------------------------------------------------------------
# Token dataclass
# ---------------------------------------------------------------------------


class TestToken:
    def test_token_creation(self) -> None:
        tok = _tok(TokenType.IDENTIFIER, "hello", line=2, col=3, offset=7, length=5)
        assert tok.type is TokenType.IDENTIFIER
        assert tok.value == "hello"
        assert tok.line == 2
        assert tok.col == 3
        assert tok.offset == 7
        assert tok.end == 12

    def test_token_is_frozen(self) -> None:
        tok = _tok(TokenType.IDENTIFIER, "x")
        with pytest.raises((AttributeError, TypeError)):
            tok.value = "y"  # type: ignore[misc]

    def test_token_repr_format(self) -> None:
        r = repr(_tok(TokenType.IDENTIFIER, "name", line=3, col=5, offset=10, length=4))
        assert r == "Token(IDENTIFIER, 'name', 3:5)"

    def test_token_repr_without_value(self) -> None:
        assert repr(_tok(TokenType.DEF, line=1, col=1, length=3)) == "Token(DEF, 1:1)"

    def test_lexeme_slices_source(self) -> None:
        source = "def add(a)"
        tok = _tok(TokenType.IDENTIFIER, "add", offset=4, col=5, length=3)
        assert tok.lexeme(source) == "add"

    def test_token_equality_by_value(self) -> None:
        assert _tok(TokenType.IDENTIFIER, "x") == _tok(TokenType.IDENTIFIER, "x")

    def test_token_inequality_on_different_value(self) -> None:
        assert _tok(TokenType.IDENTIFIER, "x") != _tok(TokenType.IDENTIFIER, "y")

    def test_token_inequality_on_different_position(self) -> None:
        assert _tok(TokenType.PLUS, offset=0) != _tok(TokenType.PLUS, offset=1, col=2)

    def test_is_keyword(self) -> None:
        assert _tok(TokenType.IF, length=2).is_keyword is True
        assert _tok(TokenType.IDENTIFIER, "if").is_keyword is False
        assert _tok(TokenType.EQ, length=2).is_keyword is False
        assert _tok(TokenType.EOF, length=0).is_keyword is False

    def test_is_trivia_and_is_error(self) -> None:
        assert _tok(TokenType.COMMENT, length=2).is_trivia is True
        assert _tok(TokenType.IDENTIFIER, "x").is_trivia is False
        diagnostic = LexDiagnostic(LexErrorKind.UNRECOGNIZED_CHARACTER, "bad")
        assert _tok(TokenType.ERROR, diagnostic).is_error is True
        assert _tok(TokenType.PLUS).is_error is False


# ---------------------------------------------------------------------------
# Value payload contract
# ---------------------------------------------------------------------------


class TestValueContract:
    @pytest.mark.parametrize("token_type, value", [
        (TokenType.IDENTIFIER, "x"),
        (TokenType.INTEGER, 42),
        (TokenType.FLOAT, 4.2),
        (TokenType.STRING, ""),
        (TokenType.ERROR, LexDiagnostic(LexErrorKind.MALFORMED_NUMBER, "1.")),
    ])
    def test_value_bearing_types_accept_matching_payload(
        self, token_type: TokenType, value: object
    ) -> None:
        assert _tok(token_type, value).value == value

    @pytest.mark.parametrize("token_type", [
        TokenType.IDENTIFIER,
        TokenType.INTEGER,
        TokenType.FLOAT,
        TokenType.STRING,
        TokenType.ERROR,
    ])
    def test_value_bearing_types_require_a_value(self, token_type: TokenType) -> None:
        with pytest.raises(ValueError):
            _tok(token_type, None)

    @pytest.mark.parametrize("token_type", [TokenType.DEF, TokenType.PLUS, TokenType.EOF])
    def test_fixed_spelling_types_reject_a_value(self, token_type: TokenType) -> None:
        with pytest.raises(ValueError):
            _tok(token_type, "x")

    @pytest.mark.parametrize("token_type, value", [
        (TokenType.INTEGER, "42"),
        (TokenType.INTEGER, True),
        (TokenType.INTEGER, 1.0),
        (TokenType.FLOAT, 1),
        (TokenType.STRING, 3),
        (TokenType.ERROR, "oops"),
    ])
    def test_wrong_payload_type_is_rejected(self, token_type: TokenType, value: object) -> None:
        with pytest.raises(TypeError):
            _tok(token_type, value)

    def test_negative_length_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            _tok(TokenType.PLUS, length=-1)


def test_diagnostic_str() -> None:
    diagnostic = LexDiagnostic(LexErrorKind.UNTERMINATED_STRING, "Unterminated string literal")
    assert str(diagnostic) == "UNTERMINATED_STRING: Unterminated string literal"


def test_position_str() -> None:
    assert str(Position(offset=12, line=3, col=4)) == "3:4"
