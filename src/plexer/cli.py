"""Command-line interface: tokenize a file with TOML-declared tokens."""

from __future__ import annotations

import argparse
import io
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from plexer.config import lexer_from_config, load_config, skipped_kinds
from plexer.debug import dump_json, dump_tokens
from plexer.errors import DefinitionError, LexError
from plexer.lexer import Lexer
from plexer.tokens import Token


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    lexer: Lexer
    skip: frozenset[str]
    json: bool
    keep_going: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="plexer",
        description="Tokenize a file with priority-ordered maximal-munch token definitions",
    )
    p.add_argument("input", help="Input file to tokenize")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        help="Token definitions (default: auto-discover plexer.toml)",
    )
    p.add_argument(
        "--skip",
        action="append",
        default=[],
        metavar="KIND",
        help="Token kind to leave out of the output (repeatable)",
    )
    p.add_argument("--json", action="store_true", help="Write tokens as JSON")
    p.add_argument(
        "--keep-going",
        action="store_true",
        help="Report every unmatched character instead of stopping at the first",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    return p


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    if config_path is not None and not config_path.is_file():
        raise DefinitionError(f"config file not found: {config_path}")
    config = load_config(config_path, input_dir)
    lexer = lexer_from_config(config)

    skip = set(skipped_kinds(config))
    skip.update(args.skip)

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        lexer=lexer,
        skip=frozenset(skip),
        json=args.json,
        keep_going=args.keep_going,
    )


def tokenize_file(options: CliOptions) -> tuple[list[Token], list[LexError], str]:
    """Read and tokenize the input file. Returns (tokens, errors, source)."""
    source = options.input_file.read_text(encoding="utf-8")
    if options.keep_going:
        stream = options.lexer.scan(source)
    else:
        stream = options.lexer.tokenize(source)

    tokens: list[Token] = []
    errors: list[LexError] = []
    for item in stream:
        if isinstance(item, LexError):
            errors.append(item)
        elif item.kind not in options.skip:
            tokens.append(item)
    return tokens, errors, source


def render(tokens: list[Token], as_json: bool) -> str:
    out = io.StringIO()
    if as_json:
        dump_json(tokens, file=out)
    else:
        dump_tokens(tokens, file=out)
    return out.getvalue()


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        options = resolve_options(args)
    except DefinitionError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        tokens, errors, _ = tokenize_file(options)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: cannot read {options.input_file}: {exc}", file=sys.stderr)
        return 2
    except ValueError as exc:
        # A config builder (int, float) rejected the text its pattern matched.
        notes = "; ".join(getattr(exc, "__notes__", []))
        print(f"error: {exc} ({notes})", file=sys.stderr)
        return 2

    text = render(tokens, options.json)
    if options.output_file:
        options.output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)

    for err in errors:
        print(err.format(str(options.input_file)), file=sys.stderr)

    return 1 if errors else 0


def main_entry() -> None:
    sys.exit(main())
