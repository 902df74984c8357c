#!/usr/bin/env python3
"""Example: Quickstart — whylang

Minimal working example: tokenize a source string, stream tokens with
lookahead, and inspect lexical errors.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install whylang
"""
from __future__ import annotations

import whylang
from whylang import TokenType

SOURCE = '''
extern sqrt(x);

// Euclidean distance
def dist(x, y) sqrt(x * x + y * y);

if dist(3, 4.0) == 5 then print("ok") else print("bad\\n");
'''


def main() -> None:
    print(f"whylang version: {whylang.__version__}")

    # Step 1: Drain the whole token stream
    tokens = whylang.tokenize(SOURCE)
    print(f"Tokenized {len(tokens)} tokens")
    for token in tokens[:8]:
        print(f"  {token!r:40} lexeme={token.lexeme(SOURCE)!r}")

    # Step 2: Pull tokens one at a time with one token of lookahead
    lexer = whylang.Tokenizer(SOURCE)
    calls = 0
    while lexer.peek().type is not TokenType.EOF:
        token = lexer.next_token()
        if token.type is TokenType.IDENTIFIER and lexer.peek().type is TokenType.LPAREN:
            calls += 1
    print(f"Call-like identifiers: {calls}")

    # Step 3: Malformed input produces ERROR tokens, never exceptions
    for token in whylang.tokenize('x = 1.2.3 @ "unterminated'):
        if token.is_error:
            print(f"  error at {token.position}: {token.value}")


if __name__ == "__main__":
    main()
