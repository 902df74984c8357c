"""Token definitions for the WhyLang tokenizer.

Defines the complete token vocabulary produced by the WhyLang lexer.
Every keyword, operator, punctuation mark, literal kind and trivia kind
is represented as a member of the ``TokenType`` enum, and every scanned
token is represented by a ``Token`` dataclass that carries its type,
decoded value payload, start position and span length.

Value payloads
--------------
Only a handful of token types carry a value; for everything else the
``TokenType`` alone identifies the lexeme.

============  ==================
TokenType     ``Token.value``
============  ==================
IDENTIFIER    ``str`` (the name)
INTEGER       ``int``
FLOAT         ``float``
STRING        ``str`` (escapes decoded)
ERROR         ``LexDiagnostic``
(others)      ``None``
============  ==================
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Union


class TokenType(Enum):
    """Exhaustive enumeration of all WhyLang token types."""

    # -----------------------------------------------------------------
    # Value-bearing
    # -----------------------------------------------------------------
    IDENTIFIER = auto()
    INTEGER = auto()
    FLOAT = auto()
    STRING = auto()

    # -----------------------------------------------------------------
    # Keywords
    # -----------------------------------------------------------------
    DEF = auto()
    EXTERN = auto()
    IF = auto()
    THEN = auto()
    ELSE = auto()
    FOR = auto()
    IN = auto()
    VAR = auto()
    RETURN = auto()
    TRUE = auto()
    FALSE = auto()

    # -----------------------------------------------------------------
    # Arithmetic / assignment operators
    # -----------------------------------------------------------------
    PLUS = auto()      # +
    MINUS = auto()     # -
    STAR = auto()      # *
    SLASH = auto()     # /
    PERCENT = auto()   # %
    ASSIGN = auto()    # =

    # -----------------------------------------------------------------
    # Comparison / logical operators
    # -----------------------------------------------------------------
    EQ = auto()        # ==
    NEQ = auto()       # !=
    LT = auto()        # <
    GT = auto()        # >
    LTE = auto()       # <=
    GTE = auto()       # >=
    BANG = auto()      # !
    AND_AND = auto()   # &&
    OR_OR = auto()     # ||
    ARROW = auto()     # ->

    # -----------------------------------------------------------------
    # Punctuation
    # -----------------------------------------------------------------
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    COMMA = auto()
    SEMICOLON = auto()
    COLON = auto()
    DOT = auto()

    # -----------------------------------------------------------------
    # Trivia (only emitted when the lexer is configured to keep it)
    # -----------------------------------------------------------------
    WHITESPACE = auto()
    COMMENT = auto()

    # -----------------------------------------------------------------
    # Structure / errors
    # -----------------------------------------------------------------
    EOF = auto()
    ERROR = auto()


class LexErrorKind(Enum):
    """Category of a lexical error carried by an ``ERROR`` token."""

    UNRECOGNIZED_CHARACTER = auto()
    UNTERMINATED_STRING = auto()
    MALFORMED_NUMBER = auto()
    INVALID_ESCAPE = auto()
    UNTERMINATED_COMMENT = auto()


@dataclass(frozen=True, slots=True)
class LexDiagnostic:
    """Payload of an ``ERROR`` token.

    Parameters
    ----------
    kind:
        The error category.
    message:
        Human-readable description of the problem.
    """

    kind: LexErrorKind
    message: str

    def __str__(self) -> str:
        return f"{self.kind.name}: {self.message}"


TokenValue = Union[int, float, str, LexDiagnostic]

KEYWORD_TYPES: frozenset[TokenType] = frozenset({
    TokenType.DEF,
    TokenType.EXTERN,
    TokenType.IF,
    TokenType.THEN,
    TokenType.ELSE,
    TokenType.FOR,
    TokenType.IN,
    TokenType.VAR,
    TokenType.RETURN,
    TokenType.TRUE,
    TokenType.FALSE,
})

TRIVIA_TYPES: frozenset[TokenType] = frozenset({TokenType.WHITESPACE, TokenType.COMMENT})

# Expected payload class for each value-bearing token type.
VALUE_TYPES: dict[TokenType, type | tuple[type, ...]] = {
    TokenType.IDENTIFIER: str,
    TokenType.INTEGER: int,
    TokenType.FLOAT: float,
    TokenType.STRING: str,
    TokenType.ERROR: LexDiagnostic,
}

# Mapping from literal keyword text to its TokenType (case-sensitive).
KEYWORDS: dict[str, TokenType] = {
    "def": TokenType.DEF,
    "extern": TokenType.EXTERN,
    "if": TokenType.IF,
    "then": TokenType.THEN,
    "else": TokenType.ELSE,
    "for": TokenType.FOR,
    "in": TokenType.IN,
    "var": TokenType.VAR,
    "return": TokenType.RETURN,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
}

# Operator and punctuation spellings.  The lexer tries longer spellings
# first, so "==" always wins over "=" followed by "=".
OPERATORS: dict[str, TokenType] = {
    "==": TokenType.EQ,
    "!=": TokenType.NEQ,
    "<=": TokenType.LTE,
    ">=": TokenType.GTE,
    "&&": TokenType.AND_AND,
    "||": TokenType.OR_OR,
    "->": TokenType.ARROW,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "%": TokenType.PERCENT,
    "=": TokenType.ASSIGN,
    "<": TokenType.LT,
    ">": TokenType.GT,
    "!": TokenType.BANG,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    ":": TokenType.COLON,
    ".": TokenType.DOT,
}


@dataclass(frozen=True, slots=True)
class Position:
    """A location in the source text.

    Parameters
    ----------
    offset:
        0-based character offset from the start of the source string.
    line:
        1-based line number.
    col:
        1-based column number.
    """

    offset: int
    line: int
    col: int

    def __str__(self) -> str:
        return f"{self.line}:{self.col}"


@dataclass(frozen=True, slots=True)
class Token:
    """A single scanned token with source-location metadata.

    Parameters
    ----------
    type:
        The ``TokenType`` variant for this token.
    value:
        The decoded payload for value-bearing types, ``None`` otherwise.
    position:
        Where the first character of the token sits in the source.
    length:
        Number of source characters spanned by the token.

    Raises
    ------
    ValueError
        If ``value`` is missing for a value-bearing type, present for any
        other type, or ``length`` is negative.
    TypeError
        If ``value`` has the wrong Python type for ``type``.
    """

    type: TokenType
    value: TokenValue | None
    position: Position
    length: int

    def __post_init__(self) -> None:
        if self.length < 0:
            raise ValueError(f"Token length must be non-negative, got {self.length}")
        expected = VALUE_TYPES.get(self.type)
        if expected is None:
            if self.value is not None:
                raise ValueError(f"{self.type.name} tokens carry no value, got {self.value!r}")
            return
        if self.value is None:
            raise ValueError(f"{self.type.name} tokens require a value")
        # bool is an int subclass but never a valid INTEGER payload
        if isinstance(self.value, bool) or not isinstance(self.value, expected):
            raise TypeError(
                f"{self.type.name} token value must be {expected}, "
                f"got {type(self.value).__name__}"
            )

    def __repr__(self) -> str:
        if self.value is None:
            return f"Token({self.type.name}, {self.position})"
        return f"Token({self.type.name}, {self.value!r}, {self.position})"

    @property
    def offset(self) -> int:
        return self.position.offset

    @property
    def line(self) -> int:
        return self.position.line

    @property
    def col(self) -> int:
        return self.position.col

    @property
    def end(self) -> int:
        """0-based offset one past the last character of the token."""
        return self.position.offset + self.length

    @property
    def is_keyword(self) -> bool:
        """Return True if this token is any keyword."""
        return self.type in KEYWORD_TYPES

    @property
    def is_trivia(self) -> bool:
        return self.type in TRIVIA_TYPES

    @property
    def is_error(self) -> bool:
        return self.type is TokenType.ERROR

    def lexeme(self, source: str) -> str:
        """Return the exact source text spanned by this token.

        Parameters
        ----------
        source:
            The source string the token was scanned from.
        """
        return source[self.offset : self.end]
