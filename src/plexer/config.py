"""Load token declarations from a TOML file.

Each ``[[token]]`` table declares one definition; file order is priority
order::

    [[token]]
    kind = "NUMBER"
    regex = "[0-9]+"
    value = "int"

    [[token]]
    kind = "WHITESPACE"
    chars = " \\n"
    value = "none"

    [output]
    skip = ["WHITESPACE"]
"""

from __future__ import annotations

import logging
import re
import tomllib
from pathlib import Path
from typing import Any

from plexer.definitions import Builder, Rule, TokenDefinition, discard, identity
from plexer.errors import DefinitionError
from plexer.lexer import Lexer
from plexer.patterns import Char, CharSet, Literal, OneOf, Pattern, Regex

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "plexer.toml"

BUILDERS: dict[str, Builder] = {
    "text": identity,
    "int": int,
    "float": float,
    "none": discard,
}

REGEX_FLAGS = {
    "ignorecase": re.IGNORECASE,
    "multiline": re.MULTILINE,
    "dotall": re.DOTALL,
    "verbose": re.VERBOSE,
}

# Recognised pattern keys, in the order their rules are created.
PATTERN_KEYS = ("char", "literal", "chars", "one_of", "regex")


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / DEFAULT_CONFIG_NAME

    if not path.is_file():
        logger.debug("no config file at %s", path)
        return {}

    logger.debug("loading config from %s", path)
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise DefinitionError(f"{path}: {exc}") from exc


def lexer_from_config(config: dict[str, Any]) -> Lexer:
    """Build a Lexer from the ``[[token]]`` tables of a loaded config."""
    entries = config.get("token", [])
    if not isinstance(entries, list) or not entries:
        raise DefinitionError("config declares no [[token]] tables")
    return Lexer(_definition(i, entry) for i, entry in enumerate(entries))


def skipped_kinds(config: dict[str, Any]) -> list[str]:
    """Kinds listed under ``[output] skip``."""
    output = config.get("output")
    if isinstance(output, dict):
        skip = output.get("skip")
        if isinstance(skip, list):
            return [str(k) for k in skip]
    return []


def _definition(index: int, entry: Any) -> TokenDefinition:
    where = f"token #{index + 1}"
    if not isinstance(entry, dict):
        raise DefinitionError(f"{where}: expected a table")

    kind = entry.get("kind")
    if not isinstance(kind, str) or not kind:
        raise DefinitionError(f"{where}: missing 'kind'")
    where = f"{where} ({kind})"

    value = entry.get("value", "text")
    build = BUILDERS.get(value) if isinstance(value, str) else None
    if build is None:
        names = ", ".join(BUILDERS)
        raise DefinitionError(f"{where}: unknown value {value!r} (expected one of {names})")

    flags = _regex_flags(where, entry.get("flags", []))

    unknown = set(entry) - {"kind", "value", "flags", *PATTERN_KEYS}
    if unknown:
        raise DefinitionError(f"{where}: unknown keys {sorted(unknown)}")

    rules: list[Rule] = []
    for key in PATTERN_KEYS:
        if key not in entry:
            continue
        try:
            for pattern in _patterns(key, entry[key], flags):
                rules.append(Rule(pattern, build))
        except DefinitionError as exc:
            raise DefinitionError(f"{where}: {exc}") from exc

    if not rules:
        keys = ", ".join(PATTERN_KEYS)
        raise DefinitionError(f"{where}: needs at least one of {keys}")
    return TokenDefinition(kind, tuple(rules))


def _patterns(key: str, raw: Any, flags: int) -> list[Pattern]:
    if key == "chars":
        # A string is a set of characters; a list is the same, spelled out.
        if isinstance(raw, str) or _is_str_list(raw):
            return [CharSet(raw)]
        raise DefinitionError("'chars' must be a string or a list of strings")

    if key == "one_of":
        if not _is_str_list(raw):
            raise DefinitionError("'one_of' must be a list of strings")
        return [OneOf(raw)]

    values = [raw] if isinstance(raw, str) else raw
    if not _is_str_list(values):
        raise DefinitionError(f"{key!r} must be a string or a list of strings")
    if key == "char":
        return [Char(v) for v in values]
    if key == "literal":
        return [Literal(v) for v in values]
    return [Regex(v, flags) for v in values]


def _regex_flags(where: str, names: Any) -> int:
    if isinstance(names, str):
        names = [names]
    if not _is_str_list(names):
        raise DefinitionError(f"{where}: 'flags' must be a list of strings")
    flags = 0
    for name in names:
        try:
            flags |= REGEX_FLAGS[name.lower()]
        except KeyError:
            raise DefinitionError(f"{where}: unknown regex flag {name!r}") from None
    return flags


def _is_str_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)
