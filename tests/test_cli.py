"""Tests for the CLI module: arg parsing, exit codes, output formats."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from plexer.cli import CliOptions, build_parser, main, resolve_options, tokenize_file
from plexer.errors import DefinitionError

from tests.conftest import CALC_TOML, make_calc


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    (tmp_path / "plexer.toml").write_text(CALC_TOML)
    return tmp_path


# ---------------------------------------------------------------------------
# Arg parsing via build_parser
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_input_only(self) -> None:
        ns = build_parser().parse_args(["in.txt"])
        assert ns.input == "in.txt"
        assert ns.output is None
        assert ns.config is None
        assert ns.skip == []

    def test_flags(self) -> None:
        ns = build_parser().parse_args(
            ["in.txt", "-o", "out.txt", "-c", "t.toml", "--skip", "A", "--skip", "B"]
        )
        assert ns.output == "out.txt"
        assert ns.config == "t.toml"
        assert ns.skip == ["A", "B"]

    def test_switches(self) -> None:
        ns = build_parser().parse_args(["in.txt", "--json", "--keep-going", "-v"])
        assert ns.json is True
        assert ns.keep_going is True
        assert ns.verbose is True


class TestResolveOptions:
    def test_config_skip_merged_with_cli(self, workdir: Path) -> None:
        (workdir / "plexer.toml").write_text(CALC_TOML + '\n[output]\nskip = ["WHITESPACE"]\n')
        src = workdir / "in.txt"
        ns = build_parser().parse_args([str(src), "--skip", "OPERATOR"])
        opts = resolve_options(ns)
        assert opts.skip == frozenset({"WHITESPACE", "OPERATOR"})

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        ns = build_parser().parse_args([str(tmp_path / "in.txt"), "-c", str(tmp_path / "no.toml")])
        with pytest.raises(DefinitionError, match="not found"):
            resolve_options(ns)


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class TestExitCodes:
    def test_success(self, workdir: Path, capsys) -> None:
        src = workdir / "ok.txt"
        src.write_text("x = 1")
        assert main([str(src)]) == 0
        out = capsys.readouterr().out
        assert out.splitlines()[0] == "1:1 IDENTIFIER 'x'"

    def test_unmatched_character_returns_1(self, workdir: Path, capsys) -> None:
        src = workdir / "bad.txt"
        src.write_text("x = (1)")
        assert main([str(src)]) == 1
        captured = capsys.readouterr()
        assert "unexpected character '('" in captured.err
        assert f"{src}:1:5" in captured.err
        # Tokens before the error are still written.
        assert len(captured.out.splitlines()) == 4

    def test_no_config_returns_2(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "in.txt"
        src.write_text("x")
        assert main([str(src)]) == 2
        assert "no [[token]] tables" in capsys.readouterr().err

    def test_bad_config_returns_2(self, workdir: Path) -> None:
        (workdir / "plexer.toml").write_text('[[token]]\nkind = "A"\nregex = "("\n')
        src = workdir / "in.txt"
        src.write_text("a")
        assert main([str(src)]) == 2

    def test_failing_builder_returns_2(self, tmp_path: Path, capsys) -> None:
        (tmp_path / "plexer.toml").write_text(
            '[[token]]\nkind = "DIGIT"\nchars = "ab"\nvalue = "int"\n'
        )
        src = tmp_path / "in.txt"
        src.write_text("a")
        assert main([str(src)]) == 2
        err = capsys.readouterr().err
        assert err.startswith("error: invalid literal for int()")
        assert "DIGIT" in err

    def test_missing_input_returns_2(self, workdir: Path, capsys) -> None:
        assert main([str(workdir / "missing.txt")]) == 2
        assert "cannot read" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class TestOutput:
    def test_skip(self, workdir: Path, capsys) -> None:
        src = workdir / "in.txt"
        src.write_text("a b")
        assert main([str(src), "--skip", "WHITESPACE"]) == 0
        assert capsys.readouterr().out.splitlines() == [
            "1:1 IDENTIFIER 'a'",
            "1:3 IDENTIFIER 'b'",
        ]

    def test_json(self, workdir: Path, capsys) -> None:
        src = workdir / "in.txt"
        src.write_text("n = 42")
        assert main([str(src), "--json", "--skip", "WHITESPACE"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [(d["kind"], d["value"]) for d in data] == [
            ("IDENTIFIER", "n"),
            ("OPERATOR", "="),
            ("NUMBER", 42),
        ]

    def test_output_file(self, workdir: Path) -> None:
        src = workdir / "in.txt"
        src.write_text("7")
        out = workdir / "tokens.txt"
        assert main([str(src), "-o", str(out)]) == 0
        assert out.read_text() == "1:1 NUMBER '7' -> 7\n"

    def test_explicit_config(self, tmp_path: Path, capsys) -> None:
        cfg = tmp_path / "words.toml"
        cfg.write_text("[[token]]\nkind = \"WORD\"\nregex = '[a-z]+'\n")
        src = tmp_path / "in.txt"
        src.write_text("hello")
        assert main([str(src), "--config", str(cfg)]) == 0
        assert capsys.readouterr().out == "1:1 WORD 'hello'\n"

    def test_keep_going_reports_every_error(self, workdir: Path, capsys) -> None:
        src = workdir / "in.txt"
        src.write_text("(a)\n[b]")
        assert main([str(src), "--keep-going"]) == 1
        captured = capsys.readouterr()
        assert captured.err.count("error: unexpected character") == 4
        assert "IDENTIFIER 'b'" in captured.out

    def test_stops_at_first_error_by_default(self, workdir: Path, capsys) -> None:
        src = workdir / "in.txt"
        src.write_text("(a)\n[b]")
        assert main([str(src)]) == 1
        captured = capsys.readouterr()
        assert captured.err.count("error: unexpected character") == 1
        assert captured.out == ""


class TestTokenizeFile:
    def test_basic(self, tmp_path: Path) -> None:
        src = tmp_path / "in.txt"
        src.write_text("a+b")
        opts = CliOptions(
            input_file=src,
            output_file=None,
            lexer=make_calc(),
            skip=frozenset(),
            json=False,
            keep_going=False,
        )
        tokens, errors, source = tokenize_file(opts)
        assert [t.text for t in tokens] == ["a", "+", "b"]
        assert errors == []
        assert source == "a+b"
