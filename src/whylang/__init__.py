"""whylang — lexical tokenizer for the WhyLang language.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import whylang

    # Drain a source string into a token list (ends with EOF)
    tokens = whylang.tokenize('def greet(name) print("hi " + name)')

    # Or pull tokens one at a time, with lookahead
    lexer = whylang.Tokenizer("if x == 1.5 then y")
    lexer.peek().type        # TokenType.IF
    lexer.next_token().type  # TokenType.IF

    # Keyword tables and trivia handling are configuration
    config = whylang.LexerConfig(case_sensitive=False, emit_trivia=True)
    whylang.tokenize("IF x", config)

    whylang.__version__
    '0.1.0'
"""
from __future__ import annotations

from whylang.config import DEFAULT_CONFIG, ConfigError, LexerConfig, load_config
from whylang.grammar.tokens import (
    LexDiagnostic,
    LexErrorKind,
    Position,
    Token,
    TokenType,
    TokenValue,
)
from whylang.lexer.lexer import LexError, Tokenizer, iter_tokens, tokenize

__version__: str = "0.1.0"

__all__ = [
    "__version__",
    # Lexing
    "Tokenizer",
    "tokenize",
    "iter_tokens",
    "LexError",
    # Token model
    "Token",
    "TokenType",
    "TokenValue",
    "Position",
    "LexErrorKind",
    "LexDiagnostic",
    # Configuration
    "LexerConfig",
    "DEFAULT_CONFIG",
    "ConfigError",
    "load_config",
]
