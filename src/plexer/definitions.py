"""Token definitions: a kind plus ordered (pattern, builder) rules."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from plexer.errors import DefinitionError
from plexer.patterns import Pattern, as_pattern

Builder = Callable[[str], Any]


def identity(text: str) -> str:
    """Default builder: the payload is the matched text."""
    return text


def discard(text: str) -> None:
    """Builder for payload-less kinds such as whitespace."""
    return None


@dataclass(frozen=True, slots=True)
class Rule:
    """One pattern and the builder applied to the text it matches."""

    pattern: Pattern
    build: Builder = identity


@dataclass(frozen=True, slots=True)
class TokenDefinition:
    """All the ways to recognise one token kind.

    Priority is not stored here: it is the definition's index in the list
    handed to ``Lexer``.
    """

    kind: str
    rules: tuple[Rule, ...]

    def __post_init__(self) -> None:
        if not self.kind:
            raise DefinitionError("token kind cannot be empty")
        if not isinstance(self.rules, tuple):
            object.__setattr__(self, "rules", tuple(self.rules))
        if not self.rules:
            raise DefinitionError(f"token {self.kind} has no rules")

    def best_match(self, text: str, pos: int) -> tuple[int, Rule] | None:
        """Longest match of any rule at *pos*; the earliest rule wins a tie."""
        best_len = 0
        best_rule: Rule | None = None
        for r in self.rules:
            length = r.pattern.longest_prefix(text, pos)
            if length > best_len:
                best_len = length
                best_rule = r
        if best_rule is None:
            return None
        return best_len, best_rule


def rule(pattern: object, build: Builder | None = None) -> Rule:
    """Build a Rule from pattern shorthand (see ``as_pattern``)."""
    return Rule(as_pattern(pattern), build if build is not None else identity)


def token(kind: str, *patterns: object, build: Builder | None = None) -> TokenDefinition:
    """Declare a token kind whose patterns all share one builder.

    Example::

        token("OPERATOR", ["+", "-", "*", "/"])
        token("NUMBER", str.isdigit, build=int)
    """
    return TokenDefinition(kind, tuple(rule(p, build) for p in patterns))


def definition(kind: str, rules: Sequence[Rule | tuple[object, Builder]]) -> TokenDefinition:
    """Declare a token kind with a distinct builder per pattern."""
    built: list[Rule] = []
    for item in rules:
        if isinstance(item, Rule):
            built.append(item)
        else:
            pattern, build = item
            built.append(rule(pattern, build))
    return TokenDefinition(kind, tuple(built))
