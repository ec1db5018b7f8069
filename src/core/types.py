"""Shared typed models.

This module defines immutable data models used by ingest, transforms,
assets, and store layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping


class TimeModeOrigin(str, Enum):
    """Where a module's Time-Mode score came from."""

    UNASSIGNED = "Unassigned"
    ASSIGNED = "Assigned"
    COMMUNITY = "Community"
    TWITCH_PLAYS = "TwitchPlays"


@dataclass(frozen=True)
class IconCoordinate:
    """Grid cell of an icon inside the atlas.

    Attributes:
        x: Zero-based column.
        y: Zero-based row.
    """

    x: int
    y: int


BLANK_ICON = IconCoordinate(0, 0)


@dataclass(frozen=True)
class TwitchPlaysInfo:
    """Twitch-Plays scoring block of a descriptor.

    Attributes:
        score_string: Compact score notation, e.g. ``"5 + 2 T"``.
        score_string_description: Human-readable rendering of the score string.
        extra_fields: Other keys of the block, kept verbatim.
        field_order: Key order of the block as read from the descriptor.
    """

    score_string: str | None = None
    score_string_description: str | None = None
    extra_fields: Mapping[str, Any] = field(default_factory=dict)
    field_order: tuple[str, ...] = ()


@dataclass(frozen=True)
class TimeModeInfo:
    """Time-Mode scoring block of a descriptor.

    Attributes:
        origin: Source of the resolved score.
        score: Points awarded for solving the module.
        score_per_module: Points per solved module for boss modules.
        extra_fields: Other keys of the block, kept verbatim.
        field_order: Key order of the block as read from the descriptor.
    """

    origin: TimeModeOrigin | None = None
    score: Decimal | None = None
    score_per_module: Decimal | None = None
    extra_fields: Mapping[str, Any] = field(default_factory=dict)
    field_order: tuple[str, ...] = ()


@dataclass(frozen=True)
class ModuleRecord:
    """Canonical module record built from one descriptor file.

    Attributes:
        name: Logical module name.
        display_name: Optional name shown to users instead of ``name``.
        module_id: Unique in-game identifier.
        author: Free-form author credit.
        contributors: Ordered role to contributor names mapping.
        is_full_boss: Whether the module is a full boss.
        is_semi_boss: Whether the module is a semi boss.
        ignore: Raw ignore tokens, or None when the descriptor has none.
        translation_of: Module id of the record this one translates.
        twitch_plays: Twitch-Plays scoring block.
        time_mode: Time-Mode scoring block.
        extra_fields: Every other descriptor key, kept verbatim and in order.
        field_order: Top-level key order as read from the descriptor.
        file_name: Descriptor file stem, set by the loader.
        ignore_processed: Ignore list with group macros resolved.
        sheets: Relative URLs of the module's manual documents.
        icon: Atlas cell of the module's icon.
    """

    name: str
    display_name: str | None = None
    module_id: str | None = None
    author: str | None = None
    contributors: Mapping[str, tuple[str, ...]] | None = None
    is_full_boss: bool = False
    is_semi_boss: bool = False
    ignore: tuple[str, ...] | None = None
    translation_of: str | None = None
    twitch_plays: TwitchPlaysInfo | None = None
    time_mode: TimeModeInfo | None = None
    extra_fields: Mapping[str, Any] = field(default_factory=dict)
    field_order: tuple[str, ...] = ()
    file_name: str | None = None
    ignore_processed: tuple[str, ...] | None = None
    sheets: tuple[str, ...] | None = None
    icon: IconCoordinate | None = None

    @property
    def label(self) -> str:
        """Name used for feed matching and ignore-list macros."""
        return self.display_name or self.name

    @property
    def resolved_file_name(self) -> str:
        """File stem, falling back to the logical name."""
        return self.file_name or self.name

    @property
    def is_translation(self) -> bool:
        """Whether this record translates another record."""
        return self.translation_of is not None


@dataclass(frozen=True)
class LoadedModule:
    """One successfully loaded descriptor.

    Attributes:
        record: Parsed and merged module record.
        source_name: Descriptor file name including extension.
        last_modified_utc: Descriptor modification time.
    """

    record: ModuleRecord
    source_name: str
    last_modified_utc: datetime


@dataclass(frozen=True)
class ModuleLoadResult:
    """Outcome of one loader pass.

    Attributes:
        modules: Loaded modules ordered by descriptor file name.
        errors: Human-readable per-file load errors.
    """

    modules: tuple[LoadedModule, ...]
    errors: tuple[str, ...]


@dataclass(frozen=True)
class FeedTable:
    """Rows of one external score feed.

    Attributes:
        name: Feed identifier used in logs.
        rows: Rows with lowercase field names and string values.
    """

    name: str
    rows: tuple[Mapping[str, str], ...] = ()


@dataclass(frozen=True)
class ScoreFeeds:
    """Both external score feeds for one pipeline run."""

    time_mode: FeedTable
    twitch_plays: FeedTable


@dataclass(frozen=True)
class IconAtlas:
    """Composited icon sprite sheet.

    Attributes:
        png_bytes: Lossless PNG encoding of the sheet.
        css_rule: Stylesheet rule embedding the sheet as a data URI.
        coordinates: Icon base name to grid cell.
    """

    png_bytes: bytes
    css_rule: str
    coordinates: Mapping[str, IconCoordinate]

    def contains(self, name: str) -> bool:
        """Return whether an icon with this base name exists."""
        return name in self.coordinates

    def coordinate_for(self, name: str) -> IconCoordinate:
        """Return the cell for ``name``, or the blank icon cell."""
        return self.coordinates.get(name, BLANK_ICON)


@dataclass(frozen=True)
class DocumentFile:
    """One manual document found in a document directory.

    Attributes:
        directory: Document directory name relative to the base dir.
        file_name: File name including extension.
        last_modified_utc: File modification time.
    """

    directory: str
    file_name: str
    last_modified_utc: datetime


@dataclass(frozen=True)
class CatalogSnapshot:
    """Immutable unit of publication.

    Attributes:
        modules: Final records of every loaded descriptor.
        modules_json: ``{"KtaneModules": [...]}`` payload for all records.
        module_info_js: Generated bootstrap script text.
        icon_sprite_png: Icon atlas PNG bytes.
        icon_sprite_css: Icon atlas CSS rule.
        last_modified_utc: Newest descriptor modification time, if any loaded.
        manuals_last_modified: HTML manual file name to ISO modification time.
        autogenerated_pdfs: HTML manual file name to its up-to-date PDF file name.
        load_errors: Per-file load errors of this run.
    """

    modules: tuple[ModuleRecord, ...]
    modules_json: Mapping[str, Any]
    module_info_js: str
    icon_sprite_png: bytes
    icon_sprite_css: str
    last_modified_utc: datetime | None
    manuals_last_modified: Mapping[str, str]
    autogenerated_pdfs: Mapping[str, str]
    load_errors: tuple[str, ...]
