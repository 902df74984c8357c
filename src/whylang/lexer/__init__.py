"""WhyLang lexer module.

Exports the ``Tokenizer`` class and the ``tokenize`` / ``iter_tokens``
convenience functions.
"""
from __future__ import annotations

from whylang.lexer.lexer import LexError, Tokenizer, iter_tokens, tokenize

__all__ = ["Tokenizer", "tokenize", "iter_tokens", "LexError"]
