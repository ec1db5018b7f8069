"""Public SDK surface for the module catalog builder.

This module provides a stable import path for the serving layer.
It re-exports the service, configuration, and snapshot models.
"""

from __future__ import annotations

from core.config import CatalogConfig
from core.errors import (
    CatalogAssemblyError,
    CatalogAtlasError,
    CatalogConfigError,
    CatalogDescriptorError,
    CatalogError,
    CatalogFeedError,
)
from core.site_config import SiteConfig, load_site_config
from core.types import CatalogSnapshot, IconCoordinate, ModuleRecord
from store.catalog_service import ModuleCatalogService
from transforms.score_string import describe_score_string

__all__ = [
    "CatalogAssemblyError",
    "CatalogAtlasError",
    "CatalogConfig",
    "CatalogConfigError",
    "CatalogDescriptorError",
    "CatalogError",
    "CatalogFeedError",
    "CatalogSnapshot",
    "IconCoordinate",
    "ModuleCatalogService",
    "ModuleRecord",
    "SiteConfig",
    "describe_score_string",
    "load_site_config",
]
