"""Site presentation configuration.

This module loads the YAML file that defines document directories,
display columns, filters, selectables, and Souvenir annotations.
Values are validated into immutable models and embedded verbatim
in the generated bootstrap script.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, cast

import yaml

from core.errors import CatalogConfigError

_ROOT_KEYS = ("document_dirs", "displays", "filters", "selectables", "souvenir")


@dataclass(frozen=True)
class DocumentDirectory:
    """One directory of module manuals.

    Attributes:
        name: Directory name relative to the site base dir.
        original_icon: Icon URL for original manuals in this directory.
        extra_icon: Icon URL for embellished or translated manuals.
    """

    name: str
    original_icon: str
    extra_icon: str


DEFAULT_DOCUMENT_DIRS = (
    DocumentDirectory("HTML", "HTML/img/html_manual.png", "HTML/img/html_manual_embellished.png"),
    DocumentDirectory("PDF", "HTML/img/pdf_manual.png", "HTML/img/pdf_manual_embellished.png"),
)


@dataclass(frozen=True)
class SiteConfig:
    """Validated site presentation settings.

    Attributes:
        document_dirs: Ordered manual directories.
        displays: Identifiers of selectable display columns.
        filters: Filter definitions passed through to the page.
        selectables: Selectable definitions passed through to the page.
        souvenir: Souvenir status to tooltip/char annotation.
    """

    document_dirs: tuple[DocumentDirectory, ...] = DEFAULT_DOCUMENT_DIRS
    displays: tuple[str, ...] = ()
    filters: tuple[Mapping[str, Any], ...] = ()
    selectables: tuple[Mapping[str, Any], ...] = ()
    souvenir: Mapping[str, Mapping[str, str]] = field(default_factory=dict)

    def icon_dirs(self) -> list[str]:
        """Return original and extra icon URLs interleaved per directory."""
        icons: list[str] = []
        for directory in self.document_dirs:
            icons.extend((directory.original_icon, directory.extra_icon))
        return icons

    def document_dir_names(self) -> list[str]:
        """Return document directory names in configured order."""
        return [directory.name for directory in self.document_dirs]


def load_site_config(config_path: Path) -> SiteConfig:
    """Load site configuration from YAML.

    A missing file yields the default configuration.

    Args:
        config_path: Path to the YAML file.

    Returns:
        Validated site configuration.

    Raises:
        CatalogConfigError: If the file is unreadable or invalid.
    """
    if not config_path.exists():
        return SiteConfig()
    try:
        payload = cast(object, yaml.safe_load(config_path.read_text(encoding="utf-8")))
    except OSError as error:
        raise CatalogConfigError(
            f"Failed to read site config at {config_path}: {error}. Check file permissions."
        ) from error
    except yaml.YAMLError as error:
        raise CatalogConfigError(
            f"Failed to parse site config at {config_path}: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        return SiteConfig()
    return parse_site_config(payload)


def parse_site_config(payload: object) -> SiteConfig:
    """Validate a decoded site config payload.

    Args:
        payload: Decoded YAML document.

    Returns:
        Validated site configuration.

    Raises:
        CatalogConfigError: If any section has the wrong shape.
    """
    root = _expect_mapping(payload, "site config root")
    unknown_keys = sorted(set(root) - set(_ROOT_KEYS))
    if unknown_keys:
        raise CatalogConfigError(
            f"Unsupported site config keys: {unknown_keys}. Allowed keys: {list(_ROOT_KEYS)}."
        )
    document_dirs = DEFAULT_DOCUMENT_DIRS
    if "document_dirs" in root:
        document_dirs = tuple(
            _parse_document_dir(item, index)
            for index, item in enumerate(_expect_list(root["document_dirs"], "document_dirs"))
        )
    return SiteConfig(
        document_dirs=document_dirs,
        displays=tuple(
            _expect_string(item, f"displays[{index}]")
            for index, item in enumerate(_expect_list(root.get("displays", []), "displays"))
        ),
        filters=tuple(
            _expect_mapping(item, f"filters[{index}]")
            for index, item in enumerate(_expect_list(root.get("filters", []), "filters"))
        ),
        selectables=tuple(
            _expect_mapping(item, f"selectables[{index}]")
            for index, item in enumerate(_expect_list(root.get("selectables", []), "selectables"))
        ),
        souvenir=_parse_souvenir(root.get("souvenir", {})),
    )


def _parse_document_dir(value: object, index: int) -> DocumentDirectory:
    context = f"document_dirs[{index}]"
    mapping = _expect_mapping(value, context)
    name = _expect_string(mapping.get("name"), f"{context}.name")
    if not name.strip():
        raise CatalogConfigError(f"Invalid {context}.name: expected non-empty directory name.")
    return DocumentDirectory(
        name=name,
        original_icon=_expect_string(mapping.get("original_icon", ""), f"{context}.original_icon"),
        extra_icon=_expect_string(mapping.get("extra_icon", ""), f"{context}.extra_icon"),
    )


def _parse_souvenir(value: object) -> dict[str, dict[str, str]]:
    souvenir: dict[str, dict[str, str]] = {}
    for status, annotation in _expect_mapping(value, "souvenir").items():
        entry = _expect_mapping(annotation, f"souvenir.{status}")
        souvenir[status] = {
            "Tooltip": _expect_string(entry.get("tooltip", ""), f"souvenir.{status}.tooltip"),
            "Char": _expect_string(entry.get("char", ""), f"souvenir.{status}.char"),
        }
    return souvenir


def _expect_mapping(value: object, context: str) -> dict[str, Any]:
    if not isinstance(value, Mapping):
        raise CatalogConfigError(
            f"Invalid {context}: expected mapping, got {type(value).__name__}."
        )
    normalized: dict[str, Any] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            raise CatalogConfigError(
                f"Invalid {context}: expected string keys, got {type(key).__name__}."
            )
        normalized[key] = item
    return normalized


def _expect_list(value: object, context: str) -> list[object]:
    if not isinstance(value, list):
        raise CatalogConfigError(f"Invalid {context}: expected list, got {type(value).__name__}.")
    return value


def _expect_string(value: object, context: str) -> str:
    if not isinstance(value, str):
        raise CatalogConfigError(f"Invalid {context}: expected string, got {type(value).__name__}.")
    return value
