"""Tokenizer configuration.

The keyword table and its case sensitivity are grammar-specific, so they
are passed to the tokenizer as configuration rather than hard-coded.  A
``LexerConfig`` is immutable and may be shared between any number of
tokenizer instances.

Configurations can be built in code or loaded from YAML::

    case_sensitive: false
    emit_trivia: true
    keywords:
      def: DEF
      fn: DEF
      extern: EXTERN

When ``keywords`` is given it replaces the default table entirely.  Each
value must name a keyword member of ``TokenType``.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from whylang.grammar.tokens import KEYWORD_TYPES, KEYWORDS, TokenType

logger = logging.getLogger(__name__)

_KNOWN_KEYS = frozenset({"keywords", "case_sensitive", "emit_trivia"})


class ConfigError(ValueError):
    """Raised when a tokenizer configuration is invalid."""


@dataclass(frozen=True)
class LexerConfig:
    """Immutable tokenizer settings.

    Parameters
    ----------
    keywords:
        Mapping from reserved word spelling to its keyword ``TokenType``.
    case_sensitive:
        When ``False``, identifiers are matched against the keyword table
        case-insensitively (``IF`` and ``If`` both become ``IF``).
    emit_trivia:
        When ``True``, whitespace and comments are emitted as
        ``WHITESPACE`` / ``COMMENT`` tokens instead of being skipped.
    """

    keywords: Mapping[str, TokenType] = field(default_factory=lambda: dict(KEYWORDS))
    case_sensitive: bool = True
    emit_trivia: bool = False

    def __post_init__(self) -> None:
        table: dict[str, TokenType] = {}
        for word, token_type in self.keywords.items():
            if not isinstance(word, str) or not word:
                raise ConfigError(f"Keyword spelling must be a non-empty string, got {word!r}")
            if not (word[0].isalpha() or word[0] == "_") or not all(
                ch.isalnum() or ch == "_" for ch in word
            ):
                raise ConfigError(f"Keyword {word!r} is not a valid identifier")
            if token_type not in KEYWORD_TYPES:
                raise ConfigError(
                    f"Keyword {word!r} maps to {token_type!r}, which is not a keyword token type"
                )
            key = word if self.case_sensitive else word.casefold()
            if key in table and table[key] is not token_type:
                raise ConfigError(
                    f"Keyword {word!r} conflicts with another spelling "
                    "when matched case-insensitively"
                )
            table[key] = token_type
        object.__setattr__(self, "keywords", MappingProxyType(table))

    def __hash__(self) -> int:
        # MappingProxyType is unhashable; hash a sorted snapshot of the table.
        entries = tuple(sorted((word, token_type.name) for word, token_type in self.keywords.items()))
        return hash((entries, self.case_sensitive, self.emit_trivia))

    def lookup_keyword(self, word: str) -> TokenType | None:
        """Return the keyword type for ``word``, or ``None`` for a plain identifier."""
        if not self.case_sensitive:
            word = word.casefold()
        return self.keywords.get(word)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LexerConfig:
        """Build a config from a plain mapping such as parsed YAML.

        Raises
        ------
        ConfigError
            On unknown keys, wrongly typed values or unknown token type names.
        """
        if not isinstance(data, Mapping):
            raise ConfigError(f"Config must be a mapping, got {type(data).__name__}")
        unknown = set(data) - _KNOWN_KEYS
        if unknown:
            raise ConfigError(f"Unknown config key(s): {', '.join(sorted(map(str, unknown)))}")

        kwargs: dict[str, Any] = {}
        for flag in ("case_sensitive", "emit_trivia"):
            if flag in data:
                if not isinstance(data[flag], bool):
                    raise ConfigError(f"{flag!r} must be true or false, got {data[flag]!r}")
                kwargs[flag] = data[flag]

        if "keywords" in data:
            raw = data["keywords"]
            if not isinstance(raw, Mapping):
                raise ConfigError("'keywords' must be a mapping of spelling to token type name")
            keywords: dict[str, TokenType] = {}
            for word, type_name in raw.items():
                try:
                    keywords[word] = TokenType[str(type_name).upper()]
                except KeyError:
                    raise ConfigError(
                        f"Keyword {word!r} maps to unknown token type {type_name!r}"
                    ) from None
            kwargs["keywords"] = keywords

        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, text: str) -> LexerConfig:
        """Build a config from YAML text.  Empty documents yield the defaults."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML config: {exc}") from exc
        return cls.from_dict(data or {})

    def to_dict(self) -> dict[str, Any]:
        """Return the plain-mapping form accepted by ``from_dict``."""
        return {
            "case_sensitive": self.case_sensitive,
            "emit_trivia": self.emit_trivia,
            "keywords": {word: tt.name for word, tt in self.keywords.items()},
        }


DEFAULT_CONFIG = LexerConfig()


def load_config(path: str | Path) -> LexerConfig:
    """Load a ``LexerConfig`` from a YAML file.

    Parameters
    ----------
    path:
        Path to a UTF-8 YAML file.

    Raises
    ------
    ConfigError
        If the file content is not a valid configuration.
    OSError
        If the file cannot be read.
    """
    path = Path(path)
    config = LexerConfig.from_yaml(path.read_text(encoding="utf-8"))
    logger.debug(
        "Loaded lexer config from %s (%d keywords, case_sensitive=%s, emit_trivia=%s)",
        path,
        len(config.keywords),
        config.case_sensitive,
        config.emit_trivia,
    )
    return config
