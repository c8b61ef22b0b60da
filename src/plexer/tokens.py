"""Token data structures and source positions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int

    def advance(self, text: str) -> Position:
        """Return the position reached after consuming *text* from here."""
        newlines = text.count("\n")
        if newlines:
            column = len(text) - text.rfind("\n")
        else:
            column = self.column + len(text)
        return Position(self.line + newlines, column, self.offset + len(text))


START = Position(1, 1, 0)


def position_at(source: str, offset: int) -> Position:
    """Compute the Position of *offset* within *source*."""
    return START.advance(source[:offset])


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A classified lexeme: kind tag, builder payload and the matched text."""

    kind: str
    value: Any
    text: str
    span: Span
