"""String-matching predicates used by token definitions.

Every pattern answers one question: does a candidate substring match?
The engine asks it for contiguous non-empty prefixes of the unconsumed
input and keeps the longest accepted one (see ``Pattern.longest_prefix``).

| Pattern     | Accepts a candidate that...            |
|-------------|----------------------------------------|
| Char        | is exactly that character              |
| Literal     | is exactly that string                 |
| CharSet     | is one character of the set            |
| OneOf       | equals one of the strings              |
| Predicate   | makes the function return True (slow)  |
| Regex       | is fully matched by the expression     |

Patterns can also search a haystack: ``find``, ``rfind``, ``find_prefix`` and
``find_suffix`` return a ``Match`` or None.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from plexer.errors import DefinitionError


@dataclass(frozen=True, slots=True)
class Match:
    """A non-empty ``haystack[start:end]`` found by a pattern search."""

    haystack: str
    start: int
    end: int

    def __post_init__(self) -> None:
        if not 0 <= self.start < self.end <= len(self.haystack):
            raise ValueError(
                f"invalid match range {self.start}..{self.end} "
                f"in haystack of length {len(self.haystack)}"
            )

    def __len__(self) -> int:
        return self.end - self.start

    @property
    def text(self) -> str:
        return self.haystack[self.start : self.end]

    def __str__(self) -> str:
        return self.text


class Pattern:
    """Base class: subclasses implement ``matches``.

    The search methods are defined in terms of ``longest_prefix``; a match
    found at a start position is always the longest one there.
    """

    __slots__ = ()

    def matches(self, candidate: str) -> bool:
        raise NotImplementedError

    def longest_prefix(self, text: str, pos: int) -> int:
        """Length of the longest non-empty prefix of ``text[pos:]`` that matches.

        Returns 0 when no prefix matches. Lengths are tried from the longest
        down, so predicates need not be monotonic in length.
        """
        for end in range(len(text), pos, -1):
            if self.matches(text[pos:end]):
                return end - pos
        return 0

    def find(self, haystack: str) -> Match | None:
        """Leftmost match in *haystack*."""
        for start in range(len(haystack)):
            length = self.longest_prefix(haystack, start)
            if length:
                return Match(haystack, start, start + length)
        return None

    def rfind(self, haystack: str) -> Match | None:
        """Match with the rightmost start in *haystack*."""
        for start in range(len(haystack) - 1, -1, -1):
            length = self.longest_prefix(haystack, start)
            if length:
                return Match(haystack, start, start + length)
        return None

    def find_prefix(self, haystack: str) -> Match | None:
        """Longest match starting at the beginning of *haystack*."""
        length = self.longest_prefix(haystack, 0)
        return Match(haystack, 0, length) if length else None

    def find_suffix(self, haystack: str) -> Match | None:
        """Longest match ending at the end of *haystack*."""
        for start in range(len(haystack)):
            if self.matches(haystack[start:]):
                return Match(haystack, start, len(haystack))
        return None


class Char(Pattern):
    __slots__ = ("char",)

    def __init__(self, char: str) -> None:
        if len(char) != 1:
            raise DefinitionError(f"Char pattern needs exactly one character, got {char!r}")
        self.char = char

    def matches(self, candidate: str) -> bool:
        return candidate == self.char

    def longest_prefix(self, text: str, pos: int) -> int:
        return 1 if text.startswith(self.char, pos) else 0

    def find(self, haystack: str) -> Match | None:
        i = haystack.find(self.char)
        return Match(haystack, i, i + 1) if i >= 0 else None

    def rfind(self, haystack: str) -> Match | None:
        i = haystack.rfind(self.char)
        return Match(haystack, i, i + 1) if i >= 0 else None

    def find_suffix(self, haystack: str) -> Match | None:
        if haystack.endswith(self.char):
            return Match(haystack, len(haystack) - 1, len(haystack))
        return None

    def __repr__(self) -> str:
        return f"Char({self.char!r})"


class Literal(Pattern):
    __slots__ = ("string",)

    def __init__(self, string: str) -> None:
        if not string:
            raise DefinitionError("Literal pattern cannot be empty")
        self.string = string

    def matches(self, candidate: str) -> bool:
        return candidate == self.string

    def longest_prefix(self, text: str, pos: int) -> int:
        return len(self.string) if text.startswith(self.string, pos) else 0

    def find(self, haystack: str) -> Match | None:
        i = haystack.find(self.string)
        return Match(haystack, i, i + len(self.string)) if i >= 0 else None

    def rfind(self, haystack: str) -> Match | None:
        i = haystack.rfind(self.string)
        return Match(haystack, i, i + len(self.string)) if i >= 0 else None

    def find_suffix(self, haystack: str) -> Match | None:
        if haystack.endswith(self.string):
            return Match(haystack, len(haystack) - len(self.string), len(haystack))
        return None

    def __repr__(self) -> str:
        return f"Literal({self.string!r})"


class CharSet(Pattern):
    __slots__ = ("chars",)

    def __init__(self, chars: Iterable[str]) -> None:
        chars = frozenset(chars)
        if not chars:
            raise DefinitionError("CharSet pattern needs at least one character")
        for ch in chars:
            if len(ch) != 1:
                raise DefinitionError(f"CharSet members must be single characters, got {ch!r}")
        self.chars = chars

    def matches(self, candidate: str) -> bool:
        return candidate in self.chars

    def longest_prefix(self, text: str, pos: int) -> int:
        return 1 if pos < len(text) and text[pos] in self.chars else 0

    def find(self, haystack: str) -> Match | None:
        for i, ch in enumerate(haystack):
            if ch in self.chars:
                return Match(haystack, i, i + 1)
        return None

    def rfind(self, haystack: str) -> Match | None:
        for i in range(len(haystack) - 1, -1, -1):
            if haystack[i] in self.chars:
                return Match(haystack, i, i + 1)
        return None

    def find_suffix(self, haystack: str) -> Match | None:
        if haystack and haystack[-1] in self.chars:
            return Match(haystack, len(haystack) - 1, len(haystack))
        return None

    def __repr__(self) -> str:
        return f"CharSet({''.join(sorted(self.chars))!r})"


class OneOf(Pattern):
    __slots__ = ("strings",)

    def __init__(self, strings: Iterable[str]) -> None:
        # Longest first so the first hit is the longest prefix.
        strings = tuple(sorted(set(strings), key=len, reverse=True))
        if not strings:
            raise DefinitionError("OneOf pattern needs at least one string")
        if "" in strings:
            raise DefinitionError("OneOf pattern cannot contain an empty string")
        self.strings = strings

    def matches(self, candidate: str) -> bool:
        return candidate in self.strings

    def longest_prefix(self, text: str, pos: int) -> int:
        for s in self.strings:
            if text.startswith(s, pos):
                return len(s)
        return 0

    def find(self, haystack: str) -> Match | None:
        best: Match | None = None
        for s in self.strings:
            i = haystack.find(s)
            # Strictly less: at an equal start the longer string came first.
            if i >= 0 and (best is None or i < best.start):
                best = Match(haystack, i, i + len(s))
        return best

    def rfind(self, haystack: str) -> Match | None:
        best: Match | None = None
        for s in self.strings:
            i = haystack.rfind(s)
            if i >= 0 and (best is None or i > best.start):
                best = Match(haystack, i, i + len(s))
        return best

    def find_suffix(self, haystack: str) -> Match | None:
        for s in self.strings:
            if haystack.endswith(s):
                return Match(haystack, len(haystack) - len(s), len(haystack))
        return None

    def __repr__(self) -> str:
        return f"OneOf({list(self.strings)!r})"


class Predicate(Pattern):
    """Arbitrary boolean function over the candidate.

    Costs one call per candidate length; the function must be pure.
    """

    __slots__ = ("func",)

    def __init__(self, func: Callable[[str], bool]) -> None:
        self.func = func

    def matches(self, candidate: str) -> bool:
        return bool(self.func(candidate))

    def __repr__(self) -> str:
        name = getattr(self.func, "__name__", type(self.func).__name__)
        return f"Predicate({name})"


class Regex(Pattern):
    """Full match of a compiled regular expression against the candidate."""

    __slots__ = ("regex", "_prefilter")

    def __init__(self, pattern: str | re.Pattern[str], flags: int = 0) -> None:
        if isinstance(pattern, re.Pattern):
            if flags:
                raise DefinitionError("cannot pass flags with a compiled regex")
            self.regex = pattern
        else:
            try:
                self.regex = re.compile(pattern, flags)
            except re.error as exc:
                raise DefinitionError(f"invalid regex {pattern!r}: {exc}") from exc
        # Verbose comments can hide anything from the source scan.
        self._prefilter = not self.regex.flags & re.VERBOSE and _ignores_lookahead(
            self.regex.pattern
        )

    def matches(self, candidate: str) -> bool:
        return self.regex.fullmatch(candidate) is not None

    def longest_prefix(self, text: str, pos: int) -> int:
        # endpos truncates like a slice, so each attempt equals matches(rest[:end]).
        rest = text[pos:]
        # A prefix match on the truncated string is also one on the whole rest,
        # unless the regex can look past the end of its match.
        if self._prefilter and self.regex.match(rest) is None:
            return 0
        fullmatch = self.regex.fullmatch
        for end in range(len(rest), 0, -1):
            if fullmatch(rest, 0, end) is not None:
                return end
        return 0

    def __repr__(self) -> str:
        return f"Regex({self.regex.pattern!r})"


def _ignores_lookahead(source: str) -> bool:
    """False if *source* may use end anchors, word boundaries, lookahead or
    atomic/possessive matching. Errs on the side of False."""
    in_class = False
    prev_quantifier = False
    i = 0
    while i < len(source):
        ch = source[i]
        if ch == "\\":
            if not in_class and source[i + 1 : i + 2] in ("Z", "z", "b", "B"):
                return False
            i += 2
            prev_quantifier = False
            continue
        if in_class:
            if ch == "]":
                in_class = False
        elif ch == "[":
            in_class = True
            # A leading ] (or ^]) is a literal member.
            if source[i + 1 : i + 2] == "^":
                i += 1
            if source[i + 1 : i + 2] == "]":
                i += 1
        elif ch == "$":
            return False
        elif source.startswith(("(?=", "(?!", "(?>"), i):
            return False
        elif ch == "+" and prev_quantifier:
            return False
        prev_quantifier = not in_class and ch in "*+?}"
        i += 1
    return True


def as_pattern(obj: object) -> Pattern:
    """Coerce declaration shorthand into a Pattern.

    A one-character string becomes ``Char``, a longer one ``Literal``, a
    compiled regex ``Regex``, a collection of strings ``CharSet`` (all single
    characters) or ``OneOf``, and any other callable ``Predicate``.
    """
    if isinstance(obj, Pattern):
        return obj
    if isinstance(obj, str):
        if not obj:
            raise DefinitionError("empty string is not a valid pattern")
        return Char(obj) if len(obj) == 1 else Literal(obj)
    if isinstance(obj, re.Pattern):
        return Regex(obj)
    if isinstance(obj, (list, tuple, set, frozenset)):
        items = list(obj)
        if not all(isinstance(item, str) for item in items):
            raise DefinitionError(f"pattern collections may only hold strings: {obj!r}")
        if items and all(len(item) == 1 for item in items):
            return CharSet(items)
        return OneOf(items)
    if callable(obj):
        return Predicate(obj)
    raise DefinitionError(f"cannot use {type(obj).__name__} as a pattern")
