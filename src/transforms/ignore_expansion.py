"""Ignore-list macro expansion.

Ignore lists may reference whole boss tiers (``+FullBoss``, ``+SemiBoss``)
and remove entries again (``-Name``). Expansion resolves these tokens
against the complete record set of a run, after loading finishes.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Sequence

from core.types import ModuleRecord

MACRO_PREFIX = "+"
REMOVAL_PREFIX = "-"


class IgnoreTokenKind(str, Enum):
    """Closed set of ignore token kinds."""

    LITERAL = "literal"
    REMOVAL = "removal"
    MACRO = "macro"


class IgnoreMacro(str, Enum):
    """Known boss-tier group macros."""

    FULL_BOSS = "FullBoss"
    SEMI_BOSS = "SemiBoss"


@dataclass(frozen=True)
class IgnoreToken:
    """One parsed ignore-list entry.

    Attributes:
        kind: Token kind.
        value: Module name for literals and removals, macro name for macros.
    """

    kind: IgnoreTokenKind
    value: str


def parse_ignore_token(raw_token: str) -> IgnoreToken:
    """Classify a raw ignore-list string.

    Args:
        raw_token: Entry from a descriptor's ``Ignore`` list.

    Returns:
        Parsed token.
    """
    if raw_token.startswith(MACRO_PREFIX):
        return IgnoreToken(IgnoreTokenKind.MACRO, raw_token[len(MACRO_PREFIX) :])
    if raw_token.startswith(REMOVAL_PREFIX):
        return IgnoreToken(IgnoreTokenKind.REMOVAL, raw_token[len(REMOVAL_PREFIX) :])
    return IgnoreToken(IgnoreTokenKind.LITERAL, raw_token)


def uses_macros(ignore: Sequence[str] | None) -> bool:
    """Return whether an ignore list contains at least one group macro."""
    return any(token.startswith(MACRO_PREFIX) for token in ignore or ())


def expand_ignore_list(
    ignore: Sequence[str],
    full_bosses: Sequence[str],
    semi_bosses: Sequence[str],
) -> list[str]:
    """Resolve an ignore list against boss-tier name lists.

    Args:
        ignore: Raw ignore tokens in descriptor order.
        full_bosses: Display names of all full-boss records.
        semi_bosses: Display names of all semi-boss records.

    Returns:
        Expanded list of module names.
    """
    macro_members = {
        IgnoreMacro.FULL_BOSS.value: full_bosses,
        IgnoreMacro.SEMI_BOSS.value: semi_bosses,
    }
    expanded: list[str] = []
    for token in map(parse_ignore_token, ignore):
        if token.kind is IgnoreTokenKind.MACRO:
            expanded.extend(macro_members.get(token.value, ()))
        elif token.kind is IgnoreTokenKind.REMOVAL:
            if token.value in expanded:
                expanded.remove(token.value)
        else:
            expanded.append(token.value)
    return expanded


def expand_ignore_lists(records: Iterable[ModuleRecord]) -> list[ModuleRecord]:
    """Expand macro-using ignore lists across a complete record set.

    Records without macros are returned unchanged.

    Args:
        records: Every record loaded in this run.

    Returns:
        Records in input order with ``ignore_processed`` set where needed.
    """
    materialized = list(records)
    full_bosses = [record.label for record in materialized if record.is_full_boss]
    semi_bosses = [record.label for record in materialized if record.is_semi_boss]
    expanded_records: list[ModuleRecord] = []
    for record in materialized:
        if record.ignore is not None and uses_macros(record.ignore):
            # Macro expansion needs the boss lists of the whole corpus.
            processed = expand_ignore_list(record.ignore, full_bosses, semi_bosses)
            record = replace(record, ignore_processed=tuple(processed))
        expanded_records.append(record)
    return expanded_records
