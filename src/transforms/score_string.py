"""Twitch-Plays score string parser.

Score strings are compact sums such as ``"5 + 2 T + 1 D"``. Each term is
either a base point value or a number paired with a rate code. This
module renders them as readable descriptions and skips malformed terms.
"""

from __future__ import annotations

import re

_IGNORED_MARKERS = re.compile(r"UN|(?<=\d)T")
_RATE_SUFFIXES = {
    "T": "per second",
    "D": "per deactivation",
    "PPA": "per action",
    "S": "per module",
}
_UNDECIDED_TERM = "TBD"
_MULTIPLIER_SUFFIX = "x"


def describe_score_string(score_string: str) -> str:
    """Render a score string as a human-readable description.

    Args:
        score_string: Compact Twitch-Plays score notation.

    Returns:
        Term descriptions joined with ``" + "``; empty when no term parses.
    """
    cleaned = _IGNORED_MARKERS.sub("", score_string)
    parts: list[str] = []
    for term in cleaned.split("+"):
        description = _describe_term(term)
        if description is not None:
            parts.append(description)
    return " + ".join(parts)


def _describe_term(term: str) -> str | None:
    """Describe one ``+``-separated term.

    Args:
        term: Raw term text.

    Returns:
        Description, or None when the term is blank, undecided, or malformed.
    """
    tokens = term.split()
    if not tokens or tokens == [_UNDECIDED_TERM]:
        return None
    if len(tokens) == 1:
        value = _parse_number(tokens[0])
        return None if value is None else _pluralize(value, "base point")
    if len(tokens) != 2:
        return None
    code, number_token = _split_rate_term(tokens[0], tokens[1])
    if code is None:
        return None
    value = _parse_number(number_token)
    if value is None:
        return None
    return f"{_pluralize(value, 'point')} {_RATE_SUFFIXES[code]}"


def _split_rate_term(first: str, second: str) -> tuple[str | None, str]:
    """Identify which of two tokens is the rate code."""
    if first in _RATE_SUFFIXES:
        return first, second
    if second in _RATE_SUFFIXES:
        return second, first
    return None, second


def _parse_number(token: str) -> float | None:
    if token.endswith(_MULTIPLIER_SUFFIX):
        token = token[: -len(_MULTIPLIER_SUFFIX)]
    try:
        return float(token)
    except ValueError:
        return None


def _pluralize(value: float, noun: str) -> str:
    suffix = "" if value == 1 else "s"
    return f"{_format_number(value)} {noun}{suffix}"


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)
