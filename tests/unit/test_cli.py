"""Unit tests for whylang.cli — the ``whylang`` command group."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from whylang.cli.main import cli


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def source_file(tmp_path: Path) -> Path:
    path = tmp_path / "sample.why"
    path.write_text('def f(x) x + 1.5; // trailing\nprint("hi")\n', encoding="utf-8")
    return path


@pytest.fixture()
def broken_file(tmp_path: Path) -> Path:
    path = tmp_path / "broken.why"
    path.write_text('x @ "open', encoding="utf-8")
    return path


class TestVersionCommand:
    def test_version_command(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert "whylang" in result.output
        assert "0.1.0" in result.output


class TestTokensCommand:
    def test_table_output(self, runner: CliRunner, source_file: Path) -> None:
        result = runner.invoke(cli, ["tokens", str(source_file)])
        assert result.exit_code == 0
        assert "DEF" in result.output
        assert "FLOAT" in result.output
        assert "EOF" in result.output
        assert "0 error(s)" in result.output

    def test_json_output(self, runner: CliRunner, source_file: Path) -> None:
        result = runner.invoke(cli, ["tokens", str(source_file), "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data[0] == {
            "type": "DEF",
            "value": None,
            "lexeme": "def",
            "line": 1,
            "col": 1,
            "offset": 0,
            "length": 3,
        }
        assert data[-1]["type"] == "EOF"
        assert {"type": "STRING", "value": "hi"}.items() <= next(
            d for d in data if d["type"] == "STRING"
        ).items()

    def test_yaml_output_with_trivia(self, runner: CliRunner, source_file: Path) -> None:
        result = runner.invoke(cli, ["tokens", str(source_file), "--format", "yaml", "--trivia"])
        assert result.exit_code == 0
        data = yaml.safe_load(result.stdout)
        types = [d["type"] for d in data]
        assert "COMMENT" in types
        assert "WHITESPACE" in types
        source = source_file.read_text(encoding="utf-8")
        assert "".join(d["lexeme"] for d in data) == source

    def test_errors_reported_without_strict(self, runner: CliRunner, broken_file: Path) -> None:
        result = runner.invoke(cli, ["tokens", str(broken_file), "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        errors = [d for d in data if d["type"] == "ERROR"]
        assert [e["value"]["kind"] for e in errors] == [
            "UNRECOGNIZED_CHARACTER",
            "UNTERMINATED_STRING",
        ]

    def test_strict_exits_non_zero(self, runner: CliRunner, broken_file: Path) -> None:
        result = runner.invoke(cli, ["tokens", str(broken_file), "--strict"])
        assert result.exit_code == 1
        assert "Lex error" in result.output

    def test_strict_clean_file_exits_zero(self, runner: CliRunner, source_file: Path) -> None:
        result = runner.invoke(cli, ["tokens", str(source_file), "--strict"])
        assert result.exit_code == 0

    def test_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["tokens", str(tmp_path / "nope.why")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_config_file(self, runner: CliRunner, tmp_path: Path) -> None:
        src = tmp_path / "cfg.why"
        src.write_text("FN f", encoding="utf-8")
        cfg = tmp_path / "lexer.yaml"
        cfg.write_text("case_sensitive: false\nkeywords:\n  fn: DEF\n", encoding="utf-8")
        result = runner.invoke(
            cli, ["tokens", str(src), "--config", str(cfg), "--format", "json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [d["type"] for d in data] == ["DEF", "IDENTIFIER", "EOF"]

    def test_bad_config_file(self, runner: CliRunner, tmp_path: Path, source_file: Path) -> None:
        cfg = tmp_path / "bad.yaml"
        cfg.write_text("keywords:\n  fn: NOPE\n", encoding="utf-8")
        result = runner.invoke(cli, ["tokens", str(source_file), "--config", str(cfg)])
        assert result.exit_code == 1
        assert "Config error" in result.output

    def test_verbose_flag_accepted(self, runner: CliRunner, broken_file: Path) -> None:
        result = runner.invoke(cli, ["--verbose", "tokens", str(broken_file), "--format", "json"])
        assert result.exit_code == 0

    def test_json_output_with_overflowing_float(self, runner: CliRunner, tmp_path: Path) -> None:
        src = tmp_path / "huge.why"
        src.write_text("1e999 2.5", encoding="utf-8")
        result = runner.invoke(cli, ["tokens", str(src), "--format", "json"])
        assert result.exit_code == 0
        assert "Infinity" not in result.stdout
        data = json.loads(result.stdout)
        assert [d["value"] for d in data] == ["inf", 2.5, None]
