"""Catalog rebuild orchestration.

This module coordinates the icon atlas, score feeds, descriptor
loading, ignore-list expansion, and final assembly into one immutable
catalog snapshot. Nothing is published here; callers hand the finished
snapshot to the snapshot store.
"""

from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Sequence

from assets.document_index import DocumentIndex, scan_documents
from assets.icon_atlas import build_icon_atlas
from core.config import CatalogConfig
from core.constants import MODULES_JSON_ROOT_KEY
from core.errors import CatalogAssemblyError
from core.logging_config import get_logger
from core.site_config import SiteConfig, load_site_config
from core.types import (
    CatalogSnapshot,
    FeedTable,
    IconAtlas,
    ModuleLoadResult,
    ModuleRecord,
    ScoreFeeds,
)
from ingest.descriptor_codec import record_to_json
from ingest.feed_client import TIME_MODE_FEED, TWITCH_PLAYS_FEED, fetch_feed_table
from ingest.module_loader import load_module_catalog
from store.bootstrap_script import build_module_info_js
from transforms.ignore_expansion import expand_ignore_lists

_LOGGER = get_logger(__name__)

FeedFetcher = Callable[[str, str, float], FeedTable]


class CatalogPipelineRunner:
    """Single-use runner that assembles one catalog snapshot."""

    def __init__(
        self,
        config: CatalogConfig,
        site_config: SiteConfig | None = None,
        feed_fetcher: FeedFetcher = fetch_feed_table,
    ) -> None:
        """Create a runner.

        Args:
            config: Runtime configuration.
            site_config: Presentation settings; loaded from config when omitted.
            feed_fetcher: Callable returning a feed table for (name, url, timeout).
        """
        self._config = config
        self._site_config = site_config
        self._feed_fetcher = feed_fetcher

    def run(self) -> CatalogSnapshot:
        """Build a complete snapshot.

        Returns:
            Immutable snapshot ready for publication.

        Raises:
            CatalogAtlasError: If the icon atlas cannot be built.
            CatalogAssemblyError: If descriptors or contact info are unavailable.
            CatalogConfigError: If the site configuration is invalid.
        """
        site_config = self._site_config or load_site_config(self._config.site_config_path)
        with ThreadPoolExecutor(max_workers=3) as executor:
            atlas_future = executor.submit(build_icon_atlas, self._config.icon_dir)
            time_mode_future = executor.submit(
                self._feed_fetcher,
                TIME_MODE_FEED,
                self._config.time_mode_feed_url,
                self._config.feed_timeout_seconds,
            )
            tp_future = executor.submit(
                self._feed_fetcher,
                TWITCH_PLAYS_FEED,
                self._config.tp_feed_url,
                self._config.feed_timeout_seconds,
            )
            feeds = ScoreFeeds(time_mode=time_mode_future.result(), twitch_plays=tp_future.result())
            load_result = load_module_catalog(
                self._config.descriptor_dir,
                feeds,
                self._config.max_workers,
                self._config.consistency_check,
            )
            atlas = atlas_future.result()
        documents = scan_documents(self._config.base_dir, site_config.document_dirs)
        snapshot = assemble_snapshot(
            load_result,
            atlas,
            documents,
            site_config,
            read_contact_info(self._config.contact_info_path),
        )
        _LOGGER.info(
            "catalog_assembled",
            module_count=len(snapshot.modules),
            load_error_count=len(snapshot.load_errors),
            last_modified=snapshot.last_modified_utc.isoformat() if snapshot.last_modified_utc else None,
        )
        return snapshot


def assemble_snapshot(
    load_result: ModuleLoadResult,
    atlas: IconAtlas,
    documents: DocumentIndex,
    site_config: SiteConfig,
    contact_info: dict[str, Any],
) -> CatalogSnapshot:
    """Assemble loaded modules and assets into a snapshot.

    Args:
        load_result: Complete loader output of this run.
        atlas: Icon atlas of this run.
        documents: Manual document listing.
        site_config: Presentation settings.
        contact_info: Parsed contact information.

    Returns:
        Immutable catalog snapshot.
    """
    records = expand_ignore_lists(module.record for module in load_result.modules)
    records = attach_presentation(records, atlas, documents)
    all_json = [record_to_json(record) for record in records]
    page_json = [
        payload for record, payload in zip(records, all_json) if not record.is_translation
    ]
    last_modified = max(
        (module.last_modified_utc for module in load_result.modules),
        default=None,
    )
    return CatalogSnapshot(
        modules=tuple(records),
        modules_json={MODULES_JSON_ROOT_KEY: all_json},
        module_info_js=build_module_info_js(
            page_json, site_config, load_result.errors, contact_info
        ),
        icon_sprite_png=atlas.png_bytes,
        icon_sprite_css=atlas.css_rule,
        last_modified_utc=last_modified,
        manuals_last_modified=documents.manuals_last_modified(),
        autogenerated_pdfs=documents.autogenerated_pdfs(),
        load_errors=load_result.errors,
    )


def attach_presentation(
    records: Sequence[ModuleRecord],
    atlas: IconAtlas,
    documents: DocumentIndex,
) -> list[ModuleRecord]:
    """Set icon coordinates and sheet URLs on every record.

    Translations use their own icon when one exists, otherwise the icon
    of the record they translate. Only originals get sheet URLs.

    Args:
        records: Complete record set after ignore expansion.
        atlas: Icon atlas.
        documents: Manual document listing.

    Returns:
        Records in input order with presentation fields set.
    """
    by_module_id: dict[str, ModuleRecord] = {}
    for record in records:
        if record.module_id is not None:
            by_module_id.setdefault(record.module_id, record)
    names = [record.name for record in records]
    presented: list[ModuleRecord] = []
    for record in records:
        if record.is_translation:
            icon_name = record.resolved_file_name
            original = by_module_id.get(record.translation_of or "")
            if original is not None and not atlas.contains(icon_name):
                icon_name = original.resolved_file_name
            presented.append(replace(record, icon=atlas.coordinate_for(icon_name)))
            continue
        longer_names = [
            name for name in names if len(name) > len(record.name) and name.startswith(record.name)
        ]
        presented.append(
            replace(
                record,
                icon=atlas.coordinate_for(record.resolved_file_name),
                sheets=documents.sheet_urls(record.resolved_file_name, longer_names),
            )
        )
    return presented


def read_contact_info(contact_info_path: Path) -> dict[str, Any]:
    """Read the contact information document.

    Raises:
        CatalogAssemblyError: If the file is missing or not a JSON object.
    """
    try:
        payload = json.loads(contact_info_path.read_text(encoding="utf-8"))
    except OSError as error:
        raise CatalogAssemblyError(
            f"Failed to read contact info at {contact_info_path}: {error}. "
            "Add a ContactInfo.json object to the site base directory."
        ) from error
    except json.JSONDecodeError as error:
        raise CatalogAssemblyError(
            f"Failed to parse contact info at {contact_info_path}: {error.msg}."
        ) from error
    if not isinstance(payload, dict):
        raise CatalogAssemblyError(
            f"Invalid contact info at {contact_info_path}: expected JSON object at top level."
        )
    return payload
