"""Pattern-matching lexer: priority-ordered maximal-munch tokenization."""

from __future__ import annotations

__version__ = "0.1.0"

from plexer.definitions import Rule, TokenDefinition, definition, discard, rule, token
from plexer.engine import MatchCandidate, find_match
from plexer.errors import DefinitionError, LexError, PlexerError
from plexer.lexer import Lexer, LexerCursor, State, tokenize
from plexer.patterns import (
    Char,
    CharSet,
    Literal,
    Match,
    OneOf,
    Pattern,
    Predicate,
    Regex,
    as_pattern,
)
from plexer.tokens import Position, Span, Token

__all__ = [
    "Char",
    "CharSet",
    "DefinitionError",
    "LexError",
    "Lexer",
    "LexerCursor",
    "Literal",
    "Match",
    "MatchCandidate",
    "OneOf",
    "Pattern",
    "PlexerError",
    "Position",
    "Predicate",
    "Regex",
    "Rule",
    "Span",
    "State",
    "Token",
    "TokenDefinition",
    "as_pattern",
    "definition",
    "discard",
    "find_match",
    "rule",
    "token",
    "tokenize",
]
