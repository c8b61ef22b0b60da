"""Error types with formatted source context."""

from __future__ import annotations

from plexer.tokens import Position

SNIPPET_LENGTH = 10


class PlexerError(Exception):
    """Base exception for all plexer errors."""


class DefinitionError(PlexerError):
    """Raised for an invalid token declaration or lexer configuration."""


class LexError(PlexerError):
    """No token definition matches the input at a position.

    Returned as the terminal item of a token stream, or raised by the eager
    helpers.
    """

    def __init__(self, position: Position, source: str) -> None:
        self.position = position
        self.source = source
        self.char = source[position.offset]
        self.snippet = _snippet(source, position.offset)
        self.message = f"unexpected character {self.char!r}"
        super().__init__(f"{self.message} at {position.line}:{position.column}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LexError):
            return NotImplemented
        return self.position == other.position and self.source == other.source

    def __hash__(self) -> int:
        return hash((self.position, self.source))

    def __repr__(self) -> str:
        return (
            f"LexError(char={self.char!r}, line={self.position.line}, "
            f"column={self.position.column}, offset={self.position.offset})"
        )

    def format(self, filename: str = "<input>") -> str:
        lines = self.source.splitlines(keepends=True)
        line_idx = self.position.line - 1
        col = self.position.column

        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].rstrip("\n").rstrip("\r")
        else:
            source_line = ""

        pad = " " * (col - 1)

        line_num = str(self.position.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{self.position.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}^"
        )


def _snippet(source: str, offset: int) -> str:
    """Up to SNIPPET_LENGTH characters from *offset*, cut at the first newline."""
    text = source[offset : offset + SNIPPET_LENGTH]
    head, sep, _ = text.partition("\n")
    if sep and not head:
        return "\n"
    return head
