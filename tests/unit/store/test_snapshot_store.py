"""Unit tests for the current snapshot holder."""

from __future__ import annotations

from core.types import CatalogSnapshot
from store.snapshot_store import SnapshotStore


def _snapshot(module_info_js: str) -> CatalogSnapshot:
    return CatalogSnapshot(
        modules=(),
        modules_json={"KtaneModules": []},
        module_info_js=module_info_js,
        icon_sprite_png=b"",
        icon_sprite_css="",
        last_modified_utc=None,
        manuals_last_modified={},
        autogenerated_pdfs={},
        load_errors=(),
    )


def test_current_is_none_before_publish() -> None:
    """A fresh store should have no snapshot."""
    store = SnapshotStore()

    assert store.current() is None
    assert store.generation == 0


def test_publish_replaces_current_snapshot() -> None:
    """Publishing should swap the whole snapshot and count generations."""
    store = SnapshotStore()
    first = _snapshot("first")
    second = _snapshot("second")

    store.publish(first)
    store.publish(second)

    assert store.current() is second
    assert store.generation == 2
