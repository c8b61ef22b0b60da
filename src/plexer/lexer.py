"""Tokenization driver: a lazy cursor over the winning matches."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from enum import Enum, auto

from plexer.definitions import TokenDefinition
from plexer.engine import find_match
from plexer.errors import DefinitionError, LexError
from plexer.tokens import Position, Span, Token, position_at

logger = logging.getLogger(__name__)


class State(Enum):
    SCANNING = auto()
    DONE = auto()
    HALTED = auto()


class Lexer:
    """Immutable lexer configuration: token definitions in priority order.

    Safe to share between threads; every ``tokenize`` call gets its own cursor.
    """

    __slots__ = ("_definitions",)

    def __init__(self, definitions: Iterable[TokenDefinition]) -> None:
        defs = tuple(definitions)
        for d in defs:
            if not isinstance(d, TokenDefinition):
                raise DefinitionError(f"expected TokenDefinition, got {type(d).__name__}")
        self._definitions = defs

    @property
    def definitions(self) -> tuple[TokenDefinition, ...]:
        return self._definitions

    @property
    def kinds(self) -> list[str]:
        """Declared kinds, first occurrence order, without duplicates."""
        return list(dict.fromkeys(d.kind for d in self._definitions))

    def tokenize(self, source: str, offset: int = 0) -> LexerCursor:
        """Return a lazy cursor over *source*, starting at *offset*."""
        return LexerCursor(self, source, offset)

    def lex(self, source: str) -> list[Token]:
        """Tokenize all of *source* eagerly, raising the LexError if any."""
        tokens: list[Token] = []
        for item in self.tokenize(source):
            if isinstance(item, LexError):
                raise item
            tokens.append(item)
        return tokens

    def scan(self, source: str) -> Iterator[Token | LexError]:
        """Tokenize *source*, skipping one character past every error.

        Each error is yielded, then a fresh cursor resumes at the next
        character, so the stream covers the whole input.
        """
        offset = 0
        while offset < len(source):
            cursor = self.tokenize(source, offset)
            yield from cursor
            if cursor.state is State.DONE:
                return
            offset = cursor.position.offset + 1
            logger.debug("resuming scan at offset %d", offset)


class LexerCursor:
    """One tokenization pass over a source string.

    Pull items with ``pull()`` or by iterating. Each item is a Token, or a
    LexError that ends the stream. The cursor is single-use and not
    thread-safe.
    """

    def __init__(self, lexer: Lexer, source: str, offset: int = 0) -> None:
        if not 0 <= offset <= len(source):
            raise ValueError(f"offset {offset} outside source of length {len(source)}")
        self._definitions = lexer.definitions
        self._source = source
        self._pos = position_at(source, offset)
        self._state = State.SCANNING if offset < len(source) else State.DONE

    @property
    def state(self) -> State:
        return self._state

    @property
    def position(self) -> Position:
        """Current cursor position (the error position once halted)."""
        return self._pos

    @property
    def source(self) -> str:
        return self._source

    def pull(self) -> Token | LexError | None:
        """Produce the next item, or None once the stream has ended."""
        if self._state is not State.SCANNING:
            return None

        source = self._source
        start = self._pos
        candidate = find_match(self._definitions, source, start.offset)
        if candidate is None:
            self._state = State.HALTED
            logger.debug(
                "no token matches %r at %d:%d", source[start.offset], start.line, start.column
            )
            return LexError(start, source)

        text = source[start.offset : start.offset + candidate.length]
        try:
            value = candidate.rule.build(text)
        except Exception as exc:
            # Builder bugs are not lexical errors; stop and let them surface.
            self._state = State.HALTED
            exc.add_note(
                f"while building {candidate.definition.kind} token from {text!r} "
                f"at {start.line}:{start.column}"
            )
            raise

        end = start.advance(text)
        self._pos = end
        if end.offset >= len(source):
            self._state = State.DONE
        return Token(candidate.definition.kind, value, text, Span(start, end))

    def __iter__(self) -> LexerCursor:
        return self

    def __next__(self) -> Token | LexError:
        item = self.pull()
        if item is None:
            raise StopIteration
        return item


def tokenize(lexer: Lexer, source: str) -> list[Token]:
    """Convenience function: tokenize source text and return token list."""
    return lexer.lex(source)
