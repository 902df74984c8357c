"""CLI entry point for whylang.

Invoked as::

    whylang [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m whylang.cli.main

Commands
--------
tokens      Tokenize a source file and dump the token stream
version     Show version information
"""
from __future__ import annotations

import json
import logging
import math
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from whylang import LexerConfig, Token

console = Console()
err_console = Console(stderr=True)


def _read_source(path: str) -> str:
    """Read a source file, exiting on error."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        sys.exit(1)
    except UnicodeDecodeError as exc:
        err_console.print(f"[red]Error:[/red] {path} is not valid UTF-8: {exc}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {path}: {exc}")
        sys.exit(1)


def _load_config_or_exit(path: str | None, include_trivia: bool) -> "LexerConfig":
    """Load the lexer config, applying the --trivia override."""
    from dataclasses import replace

    from whylang import DEFAULT_CONFIG, ConfigError, load_config

    config = DEFAULT_CONFIG
    if path is not None:
        try:
            config = load_config(path)
        except ConfigError as exc:
            err_console.print(f"[red]Config error[/red] in {path}: {exc}")
            sys.exit(1)
        except OSError as exc:
            err_console.print(f"[red]Error:[/red] Cannot read {path}: {exc}")
            sys.exit(1)
    if include_trivia and not config.emit_trivia:
        config = replace(config, emit_trivia=True)
    return config


def _token_to_dict(token: "Token", source: str) -> dict[str, Any]:
    """Plain-data form of a token for JSON/YAML output."""
    value: Any = token.value
    if token.is_error:
        value = {"kind": token.value.kind.name, "message": token.value.message}  # type: ignore[union-attr]
    elif isinstance(value, float) and not math.isfinite(value):
        # JSON has no literal for these; emit "inf" / "nan" instead.
        value = str(value)
    return {
        "type": token.type.name,
        "value": value,
        "lexeme": token.lexeme(source),
        "line": token.line,
        "col": token.col,
        "offset": token.offset,
        "length": token.length,
    }


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="whylang")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """WhyLang toolkit: lexical tokenizer."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from whylang import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]whylang[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# tokens command
# ---------------------------------------------------------------------------


@cli.command(name="tokens")
@click.argument("file", type=click.Path(exists=False))
@click.option("--config", "config_path", default=None, help="YAML lexer config file")
@click.option("--trivia", is_flag=True, default=False, help="Include whitespace and comment tokens")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json", "yaml"], case_sensitive=False),
    default="table",
    help="Output format",
)
@click.option("--strict", is_flag=True, default=False, help="Exit with status 1 on any lexical error")
def tokens_command(
    file: str,
    config_path: str | None,
    trivia: bool,
    output_format: str,
    strict: bool,
) -> None:
    """Tokenize a source file and dump the token stream.

    FILE is the path to the UTF-8 source file to tokenize.
    """
    from whylang import Tokenizer

    source = _read_source(file)
    config = _load_config_or_exit(config_path, trivia)
    tokens = Tokenizer(source, config).tokenize()
    errors = [t for t in tokens if t.is_error]

    output_format = output_format.lower()
    if output_format == "json":
        text = json.dumps(
            [_token_to_dict(t, source) for t in tokens],
            indent=2,
            ensure_ascii=False,
            allow_nan=False,
        )
        click.echo(text)
    elif output_format == "yaml":
        text = yaml.safe_dump(
            [_token_to_dict(t, source) for t in tokens],
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )
        click.echo(text, nl=False)
    else:
        table = Table(title=f"Tokens: {file}")
        table.add_column("Location", min_width=8)
        table.add_column("Type", style="bold")
        table.add_column("Lexeme")
        table.add_column("Value")
        for token in tokens:
            color = "red" if token.is_error else ("dim" if token.is_trivia else "cyan")
            value = "" if token.value is None else str(token.value)
            table.add_row(
                f"{token.line}:{token.col}",
                f"[{color}]{token.type.name}[/{color}]",
                Text(token.lexeme(source)),
                Text(value),
            )
        console.print(table)
        console.print(
            f"\n[bold]{len(tokens)}[/bold] token(s), [bold]{len(errors)}[/bold] error(s)"
        )

    if errors:
        for token in errors:
            err_console.print(
                f"[red]Lex error[/red] in {file} at {token.position}: {escape(str(token.value))}"
            )
        if strict:
            sys.exit(1)


if __name__ == "__main__":
    cli()
