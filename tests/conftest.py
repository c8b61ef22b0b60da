"""Shared test fixtures and helpers."""

from __future__ import annotations

import re

import pytest

from plexer.definitions import discard, token
from plexer.errors import LexError
from plexer.lexer import Lexer
from plexer.tokens import Token

# Operators, digit runs, identifiers and whitespace, in priority order.
CALC_TOML = r'''
[[token]]
kind = "OPERATOR"
chars = "+-*/="

[[token]]
kind = "NUMBER"
regex = '[0-9]+'
value = "int"

[[token]]
kind = "IDENTIFIER"
regex = '[a-zA-Z_$][a-zA-Z_$0-9]*'

[[token]]
kind = "WHITESPACE"
chars = [" ", "\n"]
value = "none"
'''


def make_calc() -> Lexer:
    return Lexer(
        [
            token("OPERATOR", ["+", "-", "*", "/", "="]),
            token("NUMBER", str.isdigit),
            token("IDENTIFIER", re.compile(r"[a-zA-Z_$][a-zA-Z_$0-9]*")),
            token("WHITESPACE", [" ", "\n"], build=discard),
        ]
    )


@pytest.fixture
def calc() -> Lexer:
    return make_calc()


@pytest.fixture
def lex(calc):
    """Return a helper that collects every item of a calc tokenization run."""

    def _lex(source: str) -> list[Token | LexError]:
        return list(calc.tokenize(source))

    return _lex


def assert_kinds(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token kinds match the expected list."""
    actual = [t.kind for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_texts(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the matched texts match the expected list."""
    actual = [t.text for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"
