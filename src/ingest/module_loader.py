"""Module descriptor loading.

This module reads every descriptor file in parallel, validates it,
merges external feed data, and fills loader-derived fields. A broken
descriptor is reported in the run's error list and never stops the
remaining files from loading.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping, Sequence

from core.constants import DESCRIPTOR_GLOB
from core.errors import CatalogAssemblyError, CatalogDescriptorError
from core.logging_config import get_logger
from core.types import LoadedModule, ModuleLoadResult, ModuleRecord, ScoreFeeds
from ingest.descriptor_codec import has_representation_drift, parse_descriptor_text
from transforms.feed_merge import merge_score_feeds

_LOGGER = get_logger(__name__)


def load_module_catalog(
    descriptor_dir: Path,
    feeds: ScoreFeeds,
    max_workers: int,
    consistency_check: bool = False,
) -> ModuleLoadResult:
    """Load all descriptors of a directory.

    Args:
        descriptor_dir: Directory with one JSON descriptor per module.
        feeds: External score feeds to merge into each record.
        max_workers: Number of parallel loader threads.
        consistency_check: Report descriptors that do not round-trip.

    Returns:
        Loaded modules ordered by file name, plus per-file errors.

    Raises:
        CatalogAssemblyError: If the descriptor directory does not exist.
    """
    descriptor_files = list_descriptor_files(descriptor_dir)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        outcomes = list(
            executor.map(
                lambda path: _load_or_error(path, feeds, consistency_check),
                descriptor_files,
            )
        )
    modules = tuple(outcome for outcome in outcomes if isinstance(outcome, LoadedModule))
    errors = tuple(outcome for outcome in outcomes if isinstance(outcome, str))
    _LOGGER.info(
        "descriptors_loaded",
        descriptor_dir=str(descriptor_dir),
        loaded=len(modules),
        failed=len(errors),
    )
    return ModuleLoadResult(modules=modules, errors=errors)


def list_descriptor_files(descriptor_dir: Path) -> list[Path]:
    """List descriptor files sorted by name.

    Raises:
        CatalogAssemblyError: If the directory does not exist.
    """
    if not descriptor_dir.is_dir():
        raise CatalogAssemblyError(
            f"Descriptor directory not found at {descriptor_dir}. "
            "Point CATALOG_BASE_DIR at a site root containing it."
        )
    return sorted(path for path in descriptor_dir.glob(DESCRIPTOR_GLOB) if path.is_file())


def load_descriptor(path: Path, feeds: ScoreFeeds, consistency_check: bool = False) -> LoadedModule:
    """Load, merge, and finish one descriptor.

    Args:
        path: Descriptor file path.
        feeds: External score feeds.
        consistency_check: Report representation drift for this file.

    Returns:
        Loaded module with derived fields set.

    Raises:
        CatalogDescriptorError: If the descriptor is invalid.
        OSError: If the file cannot be read.
    """
    text = path.read_text(encoding="utf-8")
    last_modified = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
    record = parse_descriptor_text(text, path.name)
    if consistency_check and has_representation_drift(text, record):
        _LOGGER.warning("descriptor_representation_drift", file=path.name)
    record = merge_score_feeds(record, feeds)
    record = _apply_file_fields(record, path.stem)
    return LoadedModule(record=record, source_name=path.name, last_modified_utc=last_modified)


def format_contributors(contributors: Mapping[str, Sequence[str]]) -> str:
    """Format contributors as a comma-separated list of distinct names.

    Args:
        contributors: Role to names mapping in descriptor order.

    Returns:
        Names in first-seen order joined with ``", "``.
    """
    names: list[str] = []
    for role_names in contributors.values():
        for name in role_names:
            if name not in names:
                names.append(name)
    return ", ".join(names)


def _load_or_error(path: Path, feeds: ScoreFeeds, consistency_check: bool) -> LoadedModule | str:
    """Load one descriptor, converting failures into an error line."""
    try:
        return load_descriptor(path, feeds, consistency_check)
    except (CatalogDescriptorError, OSError, ValueError) as error:
        _LOGGER.warning("descriptor_load_failed", file=path.name, error=str(error))
        return f"{path.name} error: {error}"


def _apply_file_fields(record: ModuleRecord, file_stem: str) -> ModuleRecord:
    author = record.author
    if not author and record.contributors is not None:
        author = format_contributors(record.contributors)
    return replace(record, file_name=file_stem, author=author)
