"""Human-readable and JSON token dumps."""

from __future__ import annotations

import json
import sys
from collections.abc import Iterable
from typing import Any, TextIO

from plexer.tokens import Token


def format_token(tok: Token) -> str:
    """One line: ``line:col KIND 'text'``, plus ``-> value`` when it differs."""
    start = tok.span.start
    line = f"{start.line}:{start.column} {tok.kind} {tok.text!r}"
    if tok.value is not None and tok.value != tok.text:
        line += f" -> {tok.value!r}"
    return line


def dump_tokens(tokens: Iterable[Token], *, file: TextIO = sys.stderr) -> None:
    """Print one line per token to *file*."""
    for tok in tokens:
        file.write(format_token(tok) + "\n")


def token_to_dict(tok: Token) -> dict[str, Any]:
    value = tok.value
    if not isinstance(value, (str, int, float, bool, type(None))):
        value = repr(value)
    return {
        "kind": tok.kind,
        "text": tok.text,
        "value": value,
        "line": tok.span.start.line,
        "column": tok.span.start.column,
        "offset": tok.span.start.offset,
        "length": tok.span.end.offset - tok.span.start.offset,
    }


def dump_json(tokens: Iterable[Token], *, file: TextIO = sys.stdout) -> None:
    """Write the tokens as a JSON array to *file*."""
    json.dump([token_to_dict(t) for t in tokens], file, ensure_ascii=False, indent=2)
    file.write("\n")
