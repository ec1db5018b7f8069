"""Module descriptor parsing and serialization.

This module converts descriptor JSON objects into typed module records
and back. Keys the record does not model are kept in an ordered side
map so a parsed descriptor re-serializes to the same document.
"""

from __future__ import annotations

import json
import math
from decimal import Decimal
from typing import Any, Mapping

from core.errors import CatalogDescriptorError
from core.types import ModuleRecord, TimeModeInfo, TimeModeOrigin, TwitchPlaysInfo

_RECORD_KEYS = (
    "Name",
    "DisplayName",
    "ModuleID",
    "Author",
    "Contributors",
    "IsFullBoss",
    "IsSemiBoss",
    "Ignore",
    "TranslationOf",
    "TwitchPlays",
    "TimeMode",
)
_TWITCH_PLAYS_KEYS = ("ScoreString", "ScoreStringDescription")
_TIME_MODE_KEYS = ("Origin", "Score", "ScorePerModule")


def parse_descriptor_text(text: str, source: str) -> ModuleRecord:
    """Parse descriptor JSON text into a module record.

    Args:
        text: Raw descriptor file content.
        source: Descriptor file name used in error messages.

    Returns:
        Parsed module record.

    Raises:
        CatalogDescriptorError: If the text is not a valid descriptor.
    """
    try:
        payload = _decode_json(text)
    except json.JSONDecodeError as error:
        raise CatalogDescriptorError(
            f"Invalid JSON at line {error.lineno} column {error.colno}: {error.msg}"
        ) from error
    except RecursionError as error:
        raise CatalogDescriptorError("Invalid JSON: nesting is too deep to decode.") from error
    return parse_descriptor(payload, source)


def parse_descriptor(payload: object, source: str) -> ModuleRecord:
    """Validate a decoded descriptor object into a module record.

    Args:
        payload: Decoded JSON document.
        source: Descriptor file name used in error messages.

    Returns:
        Parsed module record.

    Raises:
        CatalogDescriptorError: If required fields are missing or mistyped.
    """
    root = _expect_object(payload, "descriptor root")
    name = _optional_string(root, "Name")
    if not name or not name.strip():
        raise CatalogDescriptorError(f"Descriptor {source} has no 'Name'.")
    return ModuleRecord(
        name=name,
        display_name=_optional_string(root, "DisplayName"),
        module_id=_optional_string(root, "ModuleID"),
        author=_optional_string(root, "Author"),
        contributors=_parse_contributors(root.get("Contributors")),
        is_full_boss=_optional_bool(root, "IsFullBoss"),
        is_semi_boss=_optional_bool(root, "IsSemiBoss"),
        ignore=_parse_ignore(root.get("Ignore")),
        translation_of=_optional_string(root, "TranslationOf"),
        twitch_plays=_parse_twitch_plays(root.get("TwitchPlays")),
        time_mode=_parse_time_mode(root.get("TimeMode")),
        extra_fields=_extra_fields(root, _RECORD_KEYS),
        field_order=tuple(root),
    )


def descriptor_to_json(record: ModuleRecord) -> dict[str, Any]:
    """Serialize the descriptor part of a record.

    Derived fields are left out; the result mirrors the source file.

    Args:
        record: Module record.

    Returns:
        JSON-compatible descriptor object.
    """
    typed: dict[str, Any] = {"Name": record.name}
    _put_if_set(typed, "DisplayName", record.display_name)
    _put_if_set(typed, "ModuleID", record.module_id)
    _put_if_set(typed, "Author", record.author)
    if record.contributors is not None:
        typed["Contributors"] = {role: list(names) for role, names in record.contributors.items()}
    _put_flag(typed, "IsFullBoss", record.is_full_boss, record.field_order)
    _put_flag(typed, "IsSemiBoss", record.is_semi_boss, record.field_order)
    if record.ignore is not None:
        typed["Ignore"] = list(record.ignore)
    _put_if_set(typed, "TranslationOf", record.translation_of)
    if record.twitch_plays is not None:
        typed["TwitchPlays"] = _twitch_plays_to_json(record.twitch_plays)
    if record.time_mode is not None:
        typed["TimeMode"] = _time_mode_to_json(record.time_mode)
    return _ordered(typed, record.extra_fields, record.field_order, _RECORD_KEYS)


def record_to_json(record: ModuleRecord) -> dict[str, Any]:
    """Serialize a record including its derived fields.

    Args:
        record: Module record after loader and assembler steps.

    Returns:
        JSON-compatible object as published in the catalog.
    """
    payload = descriptor_to_json(record)
    if record.file_name is not None and record.file_name != record.name:
        payload["FileName"] = record.file_name
    if record.ignore_processed is not None:
        payload["IgnoreProcessed"] = list(record.ignore_processed)
    if record.sheets is not None:
        payload["Sheets"] = list(record.sheets)
    if record.icon is not None:
        payload["X"] = record.icon.x
        payload["Y"] = record.icon.y
    return payload


def has_representation_drift(original_text: str, record: ModuleRecord) -> bool:
    """Return whether re-serializing a record changes the descriptor.

    Key order and values are compared; whitespace is not.

    Args:
        original_text: Raw descriptor file content.
        record: Record parsed from that content.

    Returns:
        True when the round trip is not faithful.
    """
    original = _decode_json(original_text)
    return _canonical_text(original) != _canonical_text(descriptor_to_json(record))


def _canonical_text(payload: object) -> str:
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def _decode_json(text: str) -> object:
    return json.loads(
        text.lstrip("\ufeff"),
        parse_constant=_reject_constant,
        parse_float=_parse_finite_float,
    )


def _reject_constant(name: str) -> object:
    raise CatalogDescriptorError(f"Invalid JSON constant '{name}': only finite numbers are allowed.")


def _parse_finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise CatalogDescriptorError(f"Invalid JSON number '{text}': value is out of range.")
    return value


def _parse_contributors(value: object) -> dict[str, tuple[str, ...]] | None:
    if value is None:
        return None
    contributors: dict[str, tuple[str, ...]] = {}
    for role, names in _expect_object(value, "Contributors").items():
        contributors[role] = tuple(_expect_string_list(names, f"Contributors.{role}"))
    return contributors


def _parse_ignore(value: object) -> tuple[str, ...] | None:
    if value is None:
        return None
    return tuple(_expect_string_list(value, "Ignore"))


def _parse_twitch_plays(value: object) -> TwitchPlaysInfo | None:
    if value is None:
        return None
    block = _expect_object(value, "TwitchPlays")
    return TwitchPlaysInfo(
        score_string=_optional_string(block, "ScoreString", "TwitchPlays."),
        score_string_description=_optional_string(block, "ScoreStringDescription", "TwitchPlays."),
        extra_fields=_extra_fields(block, _TWITCH_PLAYS_KEYS),
        field_order=tuple(block),
    )


def _parse_time_mode(value: object) -> TimeModeInfo | None:
    if value is None:
        return None
    block = _expect_object(value, "TimeMode")
    origin_value = _optional_string(block, "Origin", "TimeMode.")
    try:
        origin = TimeModeOrigin(origin_value) if origin_value is not None else None
    except ValueError as error:
        raise CatalogDescriptorError(
            f"Invalid 'TimeMode.Origin' value '{origin_value}'. "
            f"Expected one of {[item.value for item in TimeModeOrigin]}."
        ) from error
    return TimeModeInfo(
        origin=origin,
        score=_optional_decimal(block, "Score", "TimeMode."),
        score_per_module=_optional_decimal(block, "ScorePerModule", "TimeMode."),
        extra_fields=_extra_fields(block, _TIME_MODE_KEYS),
        field_order=tuple(block),
    )


def _twitch_plays_to_json(info: TwitchPlaysInfo) -> dict[str, Any]:
    typed: dict[str, Any] = {}
    _put_if_set(typed, "ScoreString", info.score_string)
    _put_if_set(typed, "ScoreStringDescription", info.score_string_description)
    return _ordered(typed, info.extra_fields, info.field_order, _TWITCH_PLAYS_KEYS)


def _time_mode_to_json(info: TimeModeInfo) -> dict[str, Any]:
    typed: dict[str, Any] = {}
    if info.origin is not None:
        typed["Origin"] = info.origin.value
    if info.score is not None:
        typed["Score"] = _decimal_to_json(info.score)
    if info.score_per_module is not None:
        typed["ScorePerModule"] = _decimal_to_json(info.score_per_module)
    return _ordered(typed, info.extra_fields, info.field_order, _TIME_MODE_KEYS)


def _ordered(
    typed: Mapping[str, Any],
    extra: Mapping[str, Any],
    field_order: tuple[str, ...],
    canonical_keys: tuple[str, ...],
) -> dict[str, Any]:
    """Merge typed and extra keys, keeping the descriptor's key order.

    Keys absent from the source follow in canonical order, then any
    remaining extra keys.
    """
    payload: dict[str, Any] = {}
    for key in field_order:
        if key in typed:
            payload[key] = typed[key]
        elif key in extra:
            payload[key] = extra[key]
    for key in canonical_keys:
        if key in typed and key not in payload:
            payload[key] = typed[key]
    for key, value in extra.items():
        payload.setdefault(key, value)
    return payload


def _extra_fields(block: Mapping[str, Any], known_keys: tuple[str, ...]) -> dict[str, Any]:
    return {key: value for key, value in block.items() if key not in known_keys}


def _put_if_set(payload: dict[str, Any], key: str, value: object) -> None:
    if value is not None:
        payload[key] = value


def _put_flag(payload: dict[str, Any], key: str, value: bool, field_order: tuple[str, ...]) -> None:
    if value or key in field_order:
        payload[key] = value


def _decimal_to_json(value: Decimal) -> int | float:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _expect_object(value: object, context: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise CatalogDescriptorError(
            f"Invalid {context}: expected JSON object, got {type(value).__name__}."
        )
    return value


def _expect_string_list(value: object, context: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise CatalogDescriptorError(f"Invalid '{context}': expected a list of strings.")
    return value


def _optional_string(block: Mapping[str, Any], key: str, prefix: str = "") -> str | None:
    value = block.get(key)
    if value is None or isinstance(value, str):
        return value
    raise CatalogDescriptorError(
        f"Invalid '{prefix}{key}': expected string, got {type(value).__name__}."
    )


def _optional_bool(block: Mapping[str, Any], key: str) -> bool:
    value = block.get(key, False)
    if not isinstance(value, bool):
        raise CatalogDescriptorError(f"Invalid '{key}': expected boolean, got {type(value).__name__}.")
    return value


def _optional_decimal(block: Mapping[str, Any], key: str, prefix: str) -> Decimal | None:
    value = block.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CatalogDescriptorError(
            f"Invalid '{prefix}{key}': expected number, got {type(value).__name__}."
        )
    number = Decimal(str(value))
    if not number.is_finite():
        raise CatalogDescriptorError(f"Invalid '{prefix}{key}': expected finite number, got {value}.")
    return number
