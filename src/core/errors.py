"""Catalog exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base exception for all catalog build failures."""


class CatalogConfigError(CatalogError):
    """Raised for invalid runtime or site configuration."""


class CatalogDescriptorError(CatalogError):
    """Raised when a single module descriptor cannot be loaded."""


class CatalogFeedError(CatalogError):
    """Raised when an external score feed cannot be fetched or read."""


class CatalogAtlasError(CatalogError):
    """Raised when the icon atlas cannot be built."""


class CatalogAssemblyError(CatalogError):
    """Raised when final snapshot assembly fails."""
