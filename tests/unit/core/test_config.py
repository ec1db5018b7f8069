"""Unit tests for core config parsing."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from core.config import CatalogConfig
from core.constants import DEFAULT_TP_FEED_URL
from core.errors import CatalogConfigError


def test_from_env_reads_base_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Config should resolve site paths from the base directory."""
    monkeypatch.setenv("CATALOG_BASE_DIR", str(tmp_path))
    monkeypatch.delenv("CATALOG_SITE_CONFIG", raising=False)

    config = CatalogConfig.from_env()

    assert config.descriptor_dir == tmp_path.resolve() / "JSON"
    assert config.icon_dir == tmp_path.resolve() / "Icons"
    assert config.site_config_path == tmp_path.resolve() / "site.yaml"
    assert config.contact_info_path.name == "ContactInfo.json"


def test_from_env_uses_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Unset optional variables should fall back to defaults."""
    for variable in (
        "CATALOG_TP_FEED_URL",
        "CATALOG_FEED_TIMEOUT",
        "CATALOG_WORKERS",
        "CATALOG_CONSISTENCY_CHECK",
    ):
        monkeypatch.delenv(variable, raising=False)

    config = CatalogConfig.from_env()

    assert config.tp_feed_url == DEFAULT_TP_FEED_URL
    assert config.feed_timeout_seconds == 30.0
    assert config.max_workers == (os.cpu_count() or 1)
    assert config.consistency_check is False


def test_from_env_reads_flags_and_workers(monkeypatch: pytest.MonkeyPatch) -> None:
    """Explicit values should be parsed into typed fields."""
    monkeypatch.setenv("CATALOG_WORKERS", "3")
    monkeypatch.setenv("CATALOG_CONSISTENCY_CHECK", "Yes")
    monkeypatch.setenv("CATALOG_FEED_TIMEOUT", "2.5")

    config = CatalogConfig.from_env()

    assert config.max_workers == 3
    assert config.consistency_check is True
    assert config.feed_timeout_seconds == 2.5


@pytest.mark.parametrize(
    ("variable", "value"),
    [
        ("CATALOG_WORKERS", "many"),
        ("CATALOG_WORKERS", "0"),
        ("CATALOG_FEED_TIMEOUT", "soon"),
        ("CATALOG_FEED_TIMEOUT", "-1"),
        ("CATALOG_CONSISTENCY_CHECK", "maybe"),
    ],
)
def test_from_env_raises_for_invalid_values(
    monkeypatch: pytest.MonkeyPatch, variable: str, value: str
) -> None:
    """Config should fail fast on malformed environment values."""
    monkeypatch.setenv(variable, value)

    with pytest.raises(CatalogConfigError, match=variable):
        CatalogConfig.from_env()
