"""WhyLang grammar module.

Exports the token model: token types, value payloads and the keyword
and operator tables.
"""
from __future__ import annotations

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
    TokenValue,
)

__all__ = [
    # Token model
    "TokenType",
    "TokenValue",
    "Token",
    "Position",
    # Error payloads
    "LexErrorKind",
    "LexDiagnostic",
    # Tables
    "KEYWORDS",
    "KEYWORD_TYPES",
    "OPERATORS",
    "TRIVIA_TYPES",
]
