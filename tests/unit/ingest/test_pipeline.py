"""Unit tests for catalog snapshot assembly."""

from __future__ import annotations

import json
import os
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

import pytest

from assets.document_index import DocumentIndex
from core.config import CatalogConfig
from core.errors import CatalogAssemblyError, CatalogAtlasError
from core.types import (
    BLANK_ICON,
    FeedTable,
    IconAtlas,
    IconCoordinate,
    LoadedModule,
    ModuleLoadResult,
    ModuleRecord,
)
from core.site_config import SiteConfig
from ingest.feed_client import TIME_MODE_FEED, TWITCH_PLAYS_FEED
from ingest.pipeline import (
    CatalogPipelineRunner,
    assemble_snapshot,
    attach_presentation,
    read_contact_info,
)

_FEED_ROWS = {
    TIME_MODE_FEED: ({"modulename": "forget me not", "resolvedscore": "", "communityscore": "9"},),
    TWITCH_PLAYS_FEED: ({"modulename": "simon's says", "tpscore": "5 + 2 T + 1 D"},),
}


def _fake_fetcher(feed_name: str, url: str, timeout: float) -> FeedTable:
    return FeedTable(name=feed_name, rows=_FEED_ROWS[feed_name])


def _atlas(**coordinates: IconCoordinate) -> IconAtlas:
    return IconAtlas(png_bytes=b"png", css_rule=".mod-icon{}", coordinates=coordinates)


def _by_name(records) -> dict[str, ModuleRecord]:
    return {record.name: record for record in records}


def test_attach_presentation_defaults_missing_icons_to_blank() -> None:
    """Records without an icon should point at the blank cell."""
    records = attach_presentation([ModuleRecord(name="A", file_name="A")], _atlas(), DocumentIndex())

    assert records[0].icon == BLANK_ICON
    assert records[0].sheets == ()


def test_attach_presentation_inherits_origin_icon_for_translations() -> None:
    """Translations without an icon should use their origin's icon."""
    records = [
        ModuleRecord(name="Orig", module_id="orig", file_name="Orig"),
        ModuleRecord(name="Trans", file_name="Trans", translation_of="orig"),
    ]

    presented = _by_name(attach_presentation(records, _atlas(Orig=IconCoordinate(4, 2)), DocumentIndex()))

    assert presented["Trans"].icon == IconCoordinate(4, 2)
    assert presented["Trans"].sheets is None


def test_attach_presentation_prefers_own_translation_icon() -> None:
    """Translations with their own icon should keep it."""
    records = [
        ModuleRecord(name="Orig", module_id="orig", file_name="Orig"),
        ModuleRecord(name="Trans", file_name="Trans", translation_of="orig"),
    ]
    atlas = _atlas(Orig=IconCoordinate(1, 0), Trans=IconCoordinate(2, 0))

    presented = _by_name(attach_presentation(records, atlas, DocumentIndex()))

    assert presented["Trans"].icon == IconCoordinate(2, 0)


def test_attach_presentation_skips_missing_translation_origin() -> None:
    """A translation of an unknown record should fall back to the blank icon."""
    records = [ModuleRecord(name="Trans", file_name="Trans", translation_of="missing")]

    presented = attach_presentation(records, _atlas(Other=IconCoordinate(1, 0)), DocumentIndex())

    assert presented[0].icon == BLANK_ICON


def test_assemble_snapshot_excludes_translations_from_page_list() -> None:
    """Only originals should be embedded in the bootstrap script."""
    stamp = datetime(2024, 1, 2, tzinfo=timezone.utc)
    load_result = ModuleLoadResult(
        modules=(
            LoadedModule(ModuleRecord(name="Orig", module_id="o", file_name="Orig"), "Orig.json", stamp),
            LoadedModule(
                ModuleRecord(name="Trans", file_name="Trans", translation_of="o"), "Trans.json", stamp
            ),
        ),
        errors=("Bad.json error: boom",),
    )

    snapshot = assemble_snapshot(load_result, _atlas(), DocumentIndex(), SiteConfig(), {})

    assert len(snapshot.modules_json["KtaneModules"]) == 2
    assert '"Trans"' not in snapshot.module_info_js
    assert "Bad.json error: boom" in snapshot.module_info_js
    assert snapshot.last_modified_utc == stamp


def test_assemble_snapshot_without_modules_has_no_timestamp() -> None:
    """An empty load should publish an empty catalog without a timestamp."""
    snapshot = assemble_snapshot(
        ModuleLoadResult(modules=(), errors=()), _atlas(), DocumentIndex(), SiteConfig(), {}
    )

    assert snapshot.last_modified_utc is None
    assert snapshot.modules_json == {"KtaneModules": []}


def test_runner_builds_snapshot_from_site(catalog_config: CatalogConfig) -> None:
    """The runner should merge feeds, icons, sheets, and ignore lists."""
    html = catalog_config.base_dir / "HTML" / "The Button.html"
    pdf = catalog_config.base_dir / "PDF" / "The Button.pdf"
    os.utime(html, (1_700_000_000, 1_700_000_000))
    os.utime(pdf, (1_700_000_100, 1_700_000_100))

    snapshot = CatalogPipelineRunner(catalog_config, feed_fetcher=_fake_fetcher).run()
    modules = {payload["Name"]: payload for payload in snapshot.modules_json["KtaneModules"]}

    assert len(modules) == 6
    assert snapshot.load_errors[0].startswith("Broken.json error: ")
    assert (modules["The Button"]["X"], modules["The Button"]["Y"]) == (2, 0)
    assert (modules["Der Knopf"]["X"], modules["Der Knopf"]["Y"]) == (2, 0)
    assert (modules["Forget Everything"]["X"], modules["Forget Everything"]["Y"]) == (0, 0)
    assert modules["The Button"]["Author"] == "Steel Crate Games, Timwi"
    assert modules["The Button"]["Sheets"] == [
        "HTML/The%20Button%20%28Embellished%20by%20Timwi%29.html",
        "HTML/The%20Button.html",
        "PDF/The%20Button.pdf",
    ]
    assert modules["Souvenir"]["IgnoreProcessed"] == [
        "Forget Everything",
        "Forget Me Not",
        "Turn The Keys",
    ]
    assert "IgnoreProcessed" not in modules["The Button"]
    assert modules["Forget Me Not"]["TimeMode"] == {"Origin": "Community", "Score": 10}
    assert modules["Simons Says"]["TwitchPlays"]["ScoreStringDescription"] == (
        "5 base points + 2 points per second + 1 point per deactivation"
    )
    assert snapshot.autogenerated_pdfs == {"The Button.html": "The Button.pdf"}
    assert set(snapshot.manuals_last_modified) == {
        "Forget Me Not.html",
        "The Button.html",
        "The Button (Embellished by Timwi).html",
    }
    assert snapshot.module_info_js.startswith("initializePage([")


def test_runner_raises_when_blank_icon_missing(catalog_config: CatalogConfig) -> None:
    """Atlas failures should abort the run."""
    (catalog_config.icon_dir / "blank.png").unlink()

    with pytest.raises(CatalogAtlasError):
        CatalogPipelineRunner(catalog_config, feed_fetcher=_fake_fetcher).run()


def test_runner_raises_when_contact_info_missing(catalog_config: CatalogConfig) -> None:
    """Missing contact info should abort final assembly."""
    catalog_config.contact_info_path.unlink()

    with pytest.raises(CatalogAssemblyError):
        CatalogPipelineRunner(catalog_config, feed_fetcher=_fake_fetcher).run()


def test_read_contact_info_rejects_non_objects(tmp_path: Path) -> None:
    """Contact info must be a JSON object."""
    path = tmp_path / "ContactInfo.json"
    path.write_text(json.dumps(["not", "an", "object"]), encoding="utf-8")

    with pytest.raises(CatalogAssemblyError):
        read_contact_info(path)


def test_runner_uses_explicit_site_config(catalog_config: CatalogConfig) -> None:
    """An explicit site config should override the YAML file."""
    config = replace(catalog_config, site_config_path=catalog_config.base_dir / "absent.yaml")

    snapshot = CatalogPipelineRunner(
        config, site_config=SiteConfig(displays=("only",)), feed_fetcher=_fake_fetcher
    ).run()

    assert '["only"]' in snapshot.module_info_js
