"""WhyLang lexer: converts raw source text into a stream of tokens.

The lexer is a single-pass, pull-based character scanner.  Callers ask
for one token at a time with ``Tokenizer.next_token()`` (or iterate the
tokenizer) until an ``EOF`` token is produced; every token records its
start line, column and offset plus its span length so the exact lexeme
can be sliced back out of the source.

Comment styles supported:
    - ``//`` single-line comments (run to end of line)
    - ``/* ... */`` block comments (may span multiple lines)

Whitespace and comments are skipped unless ``LexerConfig.emit_trivia``
is set, in which case they are emitted as ``WHITESPACE`` and ``COMMENT``
tokens and the emitted spans tile the whole input.

String literals are double-quoted, may not contain a raw line break
(``\\n`` or ``\\r``) and support the backslash escapes ``\\n``, ``\\t``,
``\\r``, ``\\0``, ``\\\\``, ``\\"``, ``\\'`` and ``\\uXXXX``.

Numbers are integers or floats with an optional exponent (``-`` is an
operator, never part of the literal).

Malformed input never raises.  It produces an ``ERROR`` token whose
value is a ``LexDiagnostic`` and scanning resumes right after it.
"""
from __future__ import annotations

import logging
import re
from collections import deque
from collections.abc import Iterator
from typing import Final

from whylang.config import DEFAULT_CONFIG, LexerConfig
from whylang.grammar.tokens import (
    OPERATORS,
    LexDiagnostic,
    LexErrorKind,
    Position,
    Token,
    TokenType,
    TokenValue,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_IDENT_START: Final[re.Pattern[str]] = re.compile(r"[^\W\d]")
_IDENT_CONT: Final[re.Pattern[str]] = re.compile(r"\w")
_DIGIT: Final[re.Pattern[str]] = re.compile(r"[0-9]")
_HEX_DIGIT: Final[re.Pattern[str]] = re.compile(r"[0-9A-Fa-f]")

_ESCAPE_MAP: Final[dict[str, str]] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "\\": "\\",
    '"': '"',
    "'": "'",
}

# Operator spelling lengths, longest first.
_OPERATOR_LENGTHS: Final[tuple[int, ...]] = tuple(
    sorted({len(spelling) for spelling in OPERATORS}, reverse=True)
)


class LexError(Exception):
    """Raised by the strict ``tokenize`` helper on the first error token.

    The ``Tokenizer`` itself never raises; this exception exists for
    callers that prefer to fail fast.

    Parameters
    ----------
    message:
        Human-readable description of the problem.
    line:
        1-based line number where the error occurred.
    col:
        1-based column number where the error occurred.
    offset:
        0-based offset in the source where the error occurred.
    kind:
        The error category, when known.
    """

    def __init__(
        self,
        message: str,
        line: int,
        col: int,
        offset: int,
        kind: LexErrorKind | None = None,
    ) -> None:
        super().__init__(f"LexError at {line}:{col}: {message}")
        self.lex_message = message
        self.line = line
        self.col = col
        self.offset = offset
        self.kind = kind

    @classmethod
    def from_token(cls, token: Token) -> LexError:
        """Build a ``LexError`` from an ``ERROR`` token."""
        diagnostic = token.value
        if not isinstance(diagnostic, LexDiagnostic):
            raise ValueError(f"Expected an ERROR token, got {token!r}")
        return cls(diagnostic.message, token.line, token.col, token.offset, diagnostic.kind)


class Tokenizer:
    """Single-pass WhyLang tokenizer.

    Parameters
    ----------
    source:
        The complete, already decoded source text.  It is only read.
    config:
        Keyword table and trivia policy; defaults to ``DEFAULT_CONFIG``.
    """

    __slots__ = (
        "_source",
        "_config",
        "_pos",
        "_line",
        "_col",
        "_start",
        "_lookahead",
        "_eof",
        "_done",
    )

    def __init__(self, source: str, config: LexerConfig | None = None) -> None:
        self._source: str = source
        self._config: LexerConfig = config if config is not None else DEFAULT_CONFIG
        self._pos: int = 0
        self._line: int = 1
        self._col: int = 1
        self._start: Position = Position(0, 1, 1)
        self._lookahead: deque[Token] = deque()
        self._eof: Token | None = None
        self._done: bool = False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def source(self) -> str:
        return self._source

    @property
    def config(self) -> LexerConfig:
        return self._config

    @property
    def position(self) -> Position:
        """Current scan cursor.  Runs ahead of the caller while tokens are peeked."""
        return Position(self._pos, self._line, self._col)

    @property
    def exhausted(self) -> bool:
        """True once ``next_token()`` has returned the ``EOF`` token."""
        return self._done

    def next_token(self) -> Token:
        """Consume and return the next token.

        Once ``EOF`` has been returned every further call returns the same
        ``EOF`` token without advancing.
        """
        token = self._lookahead.popleft() if self._lookahead else self._scan()
        if token.type is TokenType.EOF:
            self._done = True
        return token

    def peek(self, n: int = 0) -> Token:
        """Return the token ``n`` positions ahead without consuming it.

        ``peek()`` (``n == 0``) is the token the next ``next_token()`` call
        will return.  Peeked tokens are scanned once and buffered, so
        repeated peeks are free of side effects.

        Raises
        ------
        ValueError
            If ``n`` is negative.
        """
        if n < 0:
            raise ValueError(f"Lookahead distance must be non-negative, got {n}")
        while len(self._lookahead) <= n:
            self._lookahead.append(self._scan())
        return self._lookahead[n]

    def tokenize(self) -> list[Token]:
        """Drain the remaining input and return the token list.

        Returns
        -------
        list[Token]
            Remaining tokens terminated by a single ``EOF`` token, or an
            empty list if ``EOF`` was already returned.
        """
        return list(self)

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        if self._done:
            raise StopIteration
        return self.next_token()

    # ------------------------------------------------------------------
    # Internal scanner
    # ------------------------------------------------------------------

    def _current(self) -> str:
        """Return the character at the current position without advancing."""
        return self._source[self._pos] if self._pos < len(self._source) else ""

    def _peek_char(self, offset: int = 1) -> str:
        """Return the character at ``pos + offset`` without advancing."""
        idx = self._pos + offset
        return self._source[idx] if idx < len(self._source) else ""

    def _at_end(self) -> bool:
        return self._pos >= len(self._source)

    def _advance(self) -> str:
        """Consume and return the current character, updating line/col."""
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _mark(self) -> None:
        """Record the start of the token about to be scanned."""
        self._start = Position(self._pos, self._line, self._col)

    def _make(self, token_type: TokenType, value: TokenValue | None = None) -> Token:
        """Build a token spanning from the last mark to the cursor."""
        return Token(
            type=token_type,
            value=value,
            position=self._start,
            length=self._pos - self._start.offset,
        )

    def _error(self, kind: LexErrorKind, message: str) -> Token:
        token = self._make(TokenType.ERROR, LexDiagnostic(kind, message))
        logger.debug("Lex error %s at %s: %s", kind.name, self._start, message)
        return token

    def _scan(self) -> Token:
        """Scan exactly one token, skipping trivia unless it is emitted."""
        if self._eof is not None:
            return self._eof
        emit_trivia = self._config.emit_trivia
        while True:
            self._mark()
            if self._at_end():
                self._eof = self._make(TokenType.EOF)
                return self._eof

            ch = self._current()

            if ch.isspace():
                while not self._at_end() and self._current().isspace():
                    self._advance()
                if emit_trivia:
                    return self._make(TokenType.WHITESPACE)
                continue

            if ch == "/" and self._peek_char() == "/":
                self._scan_line_comment()
                if emit_trivia:
                    return self._make(TokenType.COMMENT)
                continue

            if ch == "/" and self._peek_char() == "*":
                if not self._scan_block_comment():
                    return self._error(LexErrorKind.UNTERMINATED_COMMENT, "Unterminated block comment")
                if emit_trivia:
                    return self._make(TokenType.COMMENT)
                continue

            return self._scan_token(ch)

    def _scan_token(self, ch: str) -> Token:
        """Classify a significant token by its leading character."""
        if _DIGIT.match(ch):
            return self._scan_number()
        if _IDENT_START.match(ch):
            return self._scan_ident_or_keyword()
        if ch == '"':
            return self._scan_string()

        for size in _OPERATOR_LENGTHS:
            spelling = self._source[self._pos : self._pos + size]
            # Slicing shortens the candidate near end of input.
            if len(spelling) != size:
                continue
            token_type = OPERATORS.get(spelling)
            if token_type is not None:
                for _ in range(size):
                    self._advance()
                return self._make(token_type)

        self._advance()
        return self._error(LexErrorKind.UNRECOGNIZED_CHARACTER, f"Unexpected character {ch!r}")

    # ------------------------------------------------------------------
    # Token-specific scanners
    # ------------------------------------------------------------------

    def _scan_line_comment(self) -> None:
        """Consume a ``//`` comment up to, not including, the newline."""
        while not self._at_end() and self._current() != "\n":
            self._advance()

    def _scan_block_comment(self) -> bool:
        """Consume a ``/* ... */`` comment.  Returns False if it never closes."""
        self._advance()  # /
        self._advance()  # *
        while not self._at_end():
            if self._current() == "*" and self._peek_char() == "/":
                self._advance()
                self._advance()
                return True
            self._advance()
        return False

    def _consume_digits(self) -> None:
        while _DIGIT.match(self._current()):
            self._advance()

    def _malformed_number(self) -> Token:
        """Swallow the rest of a ``[0-9.]`` run and report it."""
        while _DIGIT.match(self._current()) or self._current() == ".":
            self._advance()
        lexeme = self._source[self._start.offset : self._pos]
        return self._error(LexErrorKind.MALFORMED_NUMBER, f"Malformed number literal {lexeme!r}")

    def _scan_number(self) -> Token:
        """Consume an integer or float literal."""
        is_float = False
        self._consume_digits()

        if self._current() == ".":
            if not _DIGIT.match(self._peek_char()):
                return self._malformed_number()
            self._advance()  # dot
            self._consume_digits()
            is_float = True
            if self._current() == ".":
                return self._malformed_number()

        # The exponent is only part of the literal when it is complete;
        # otherwise "e" starts the next token.
        if self._current() in ("e", "E"):
            ahead = 1
            if self._peek_char(ahead) in ("+", "-"):
                ahead += 1
            if _DIGIT.match(self._peek_char(ahead)):
                for _ in range(ahead):
                    self._advance()
                self._consume_digits()
                is_float = True
            if self._current() == ".":
                return self._malformed_number()

        text = self._source[self._start.offset : self._pos]
        if is_float:
            return self._make(TokenType.FLOAT, float(text))
        try:
            value = int(text)
        except ValueError:
            # int() refuses strings beyond sys.get_int_max_str_digits()
            return self._error(LexErrorKind.MALFORMED_NUMBER, "Integer literal has too many digits")
        return self._make(TokenType.INTEGER, value)

    def _scan_ident_or_keyword(self) -> Token:
        """Consume an identifier, then classify it as keyword or IDENTIFIER."""
        while _IDENT_CONT.match(self._current()):
            self._advance()
        word = self._source[self._start.offset : self._pos]
        keyword = self._config.lookup_keyword(word)
        if keyword is not None:
            return self._make(keyword)
        return self._make(TokenType.IDENTIFIER, word)

    def _scan_string(self) -> Token:
        """Consume a double-quoted string literal with backslash escape support."""
        self._advance()  # opening "
        buf: list[str] = []
        bad_escape: str | None = None
        while True:
            if self._at_end():
                return self._error(
                    LexErrorKind.UNTERMINATED_STRING,
                    "Unterminated string literal (end of input)",
                )
            ch = self._current()
            if ch == '"':
                self._advance()  # closing "
                if bad_escape is not None:
                    return self._error(
                        LexErrorKind.INVALID_ESCAPE,
                        f"Invalid escape sequence {bad_escape} in string literal",
                    )
                return self._make(TokenType.STRING, "".join(buf))
            if ch in ("\n", "\r"):
                return self._error(
                    LexErrorKind.UNTERMINATED_STRING,
                    "Unterminated string literal (newline in string)",
                )
            if ch != "\\":
                buf.append(self._advance())
                continue

            escape_start = self._pos
            self._advance()  # backslash
            esc = self._current()
            if esc in _ESCAPE_MAP:
                buf.append(_ESCAPE_MAP[esc])
                self._advance()
            elif esc == "u":
                decoded = self._scan_unicode_escape()
                if decoded is None:
                    bad_escape = bad_escape or self._source[escape_start : self._pos]
                else:
                    buf.append(decoded)
            elif esc in ("", "\n", "\r"):
                # Leave end of input / line breaks to the checks above.
                continue
            else:
                self._advance()
                bad_escape = bad_escape or "\\" + esc

    def _scan_unicode_escape(self) -> str | None:
        """Consume ``uXXXX`` after a backslash; ``None`` if the digits are short."""
        self._advance()  # u
        digits: list[str] = []
        while len(digits) < 4 and _HEX_DIGIT.match(self._current()):
            digits.append(self._advance())
        if len(digits) < 4:
            return None
        return chr(int("".join(digits), 16))


# ---------------------------------------------------------------------------
# Module-level convenience functions
# ---------------------------------------------------------------------------


def iter_tokens(source: str, config: LexerConfig | None = None) -> Iterator[Token]:
    """Lazily yield the tokens of ``source``, ending with ``EOF``."""
    yield from Tokenizer(source, config)


def tokenize(
    source: str,
    config: LexerConfig | None = None,
    *,
    strict: bool = False,
) -> list[Token]:
    """Tokenize a source string and return the complete token list.

    Parameters
    ----------
    source:
        WhyLang source text.
    config:
        Optional tokenizer configuration.
    strict:
        When ``True``, raise on the first ``ERROR`` token instead of
        returning it.

    Returns
    -------
    list[Token]
        All significant tokens (plus trivia when configured), terminated
        by ``EOF``.

    Raises
    ------
    LexError
        Only when ``strict`` is set and the source is lexically invalid.

    Example
    -------
    ::

        from whylang.lexer import tokenize
        tokens = tokenize("def add(a, b) a + b")
    """
    tokens: list[Token] = []
    for token in Tokenizer(source, config):
        if strict and token.is_error:
            raise LexError.from_token(token)
        tokens.append(token)
    return tokens
