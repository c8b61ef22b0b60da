"""Maximal-munch matching with declaration-order tie-break."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from plexer.definitions import Rule, TokenDefinition


@dataclass(frozen=True, slots=True)
class MatchCandidate:
    """The winning definition at one position, valid for a single step."""

    priority: int
    length: int
    definition: TokenDefinition
    rule: Rule


def find_match(
    definitions: Sequence[TokenDefinition], text: str, pos: int
) -> MatchCandidate | None:
    """Pick the longest match at *pos*; the lowest index wins a length tie.

    Returns None when no definition matches a non-empty prefix. Must not be
    called at the end of *text*.
    """
    best: MatchCandidate | None = None
    for priority, defn in enumerate(definitions):
        hit = defn.best_match(text, pos)
        if hit is None:
            continue
        length, r = hit
        # Strictly greater: on a tie the earlier definition stays.
        if best is None or length > best.length:
            best = MatchCandidate(priority, length, defn, r)
    return best
