"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Writable copy of the fixture site with generated icons."""
    from tests.fixture_paths import copy_site

    return copy_site(tmp_path)


@pytest.fixture
def catalog_config(site_root: Path, monkeypatch: pytest.MonkeyPatch):
    """Config pointing at the fixture site with two loader workers."""
    from core.config import CatalogConfig

    monkeypatch.setenv("CATALOG_BASE_DIR", str(site_root))
    monkeypatch.delenv("CATALOG_SITE_CONFIG", raising=False)
    return replace(CatalogConfig.from_env(), max_workers=2)
