"""Integration tests for full catalog rebuilds."""

from __future__ import annotations

import json
import threading
from dataclasses import replace

import pytest

from core.config import CatalogConfig
from core.errors import CatalogAtlasError
from core.types import CatalogSnapshot, FeedTable
from module_catalog import ModuleCatalogService


def _empty_feeds(feed_name: str, url: str, timeout: float) -> FeedTable:
    return FeedTable(name=feed_name)


def test_rebuild_publishes_complete_snapshot(catalog_config: CatalogConfig) -> None:
    """Rebuild should load every valid descriptor and report the broken one."""
    service = ModuleCatalogService(catalog_config, feed_fetcher=_empty_feeds)

    snapshot = service.rebuild()

    assert service.current() is snapshot
    assert len(snapshot.modules) == 6
    assert len(snapshot.modules_json["KtaneModules"]) == 6
    assert len(snapshot.load_errors) == 1
    assert snapshot.load_errors[0].startswith("Broken.json error: ")
    assert all("X" in payload and "Y" in payload for payload in snapshot.modules_json["KtaneModules"])
    assert snapshot.icon_sprite_png.startswith(b"\x89PNG")
    assert snapshot.icon_sprite_css.startswith(".mod-icon{background-image:url(data:image/png;base64,")


def test_rebuild_is_idempotent_for_unchanged_inputs(catalog_config: CatalogConfig) -> None:
    """Two rebuilds over the same inputs should publish equal catalogs."""
    service = ModuleCatalogService(catalog_config, feed_fetcher=_empty_feeds)

    first = service.rebuild()
    second = service.rebuild()

    assert second is not first
    assert second.modules_json == first.modules_json
    assert second.module_info_js == first.module_info_js
    assert second.last_modified_utc == first.last_modified_utc


def test_failed_rebuild_keeps_previous_snapshot(catalog_config: CatalogConfig) -> None:
    """An atlas failure should leave the last good snapshot current."""
    service = ModuleCatalogService(catalog_config, feed_fetcher=_empty_feeds)
    previous = service.rebuild()
    (catalog_config.icon_dir / "blank.png").unlink()

    with pytest.raises(CatalogAtlasError):
        service.rebuild()

    assert service.current() is previous


def test_rebuild_tolerates_unreachable_feeds(catalog_config: CatalogConfig) -> None:
    """Unreachable feeds should degrade to empty tables."""
    config = replace(
        catalog_config,
        tp_feed_url="http://127.0.0.1:9/tp",
        time_mode_feed_url="http://127.0.0.1:9/time-mode",
        feed_timeout_seconds=1.0,
    )
    service = ModuleCatalogService(config)

    snapshot = service.rebuild()

    modules = {payload["Name"]: payload for payload in snapshot.modules_json["KtaneModules"]}
    assert "TimeMode" not in modules["Forget Me Not"]
    assert modules["Forget Everything"]["TimeMode"] == {"Score": 25}


def test_concurrent_readers_see_whole_snapshots(catalog_config: CatalogConfig) -> None:
    """Readers during rebuilds should see either nothing or a complete snapshot."""
    service = ModuleCatalogService(catalog_config, feed_fetcher=_empty_feeds)
    torn: list[CatalogSnapshot] = []
    stop = threading.Event()

    def read_loop() -> None:
        while not stop.is_set():
            snapshot = service.current()
            if snapshot is not None and len(snapshot.modules_json["KtaneModules"]) != 6:
                torn.append(snapshot)

    reader = threading.Thread(target=read_loop)
    reader.start()
    try:
        for _ in range(3):
            service.rebuild()
    finally:
        stop.set()
        reader.join()

    assert torn == []
    assert len(service.current().modules) == 6


def test_rebuild_isolates_unrepresentable_descriptors(catalog_config: CatalogConfig) -> None:
    """Non-finite numbers and runaway nesting should only cost their own file."""
    depth = 100_000
    (catalog_config.descriptor_dir / "Inf.json").write_text(
        '{"Name": "Inf", "TimeMode": {"Score": Infinity}}', encoding="utf-8"
    )
    (catalog_config.descriptor_dir / "Deep.json").write_text(
        '{"Name": "Deep", "Extra": ' + "[" * depth + "]" * depth + "}", encoding="utf-8"
    )
    service = ModuleCatalogService(catalog_config, feed_fetcher=_empty_feeds)

    snapshot = service.rebuild()

    assert service.current() is snapshot
    assert len(snapshot.modules) == 6
    assert sorted(error.split(" ", 1)[0] for error in snapshot.load_errors) == [
        "Broken.json",
        "Deep.json",
        "Inf.json",
    ]
    json.dumps(snapshot.modules_json, allow_nan=False)
