"""Module catalog service.

This module exposes the rebuild operation used by the serving layer,
file watchers, and repository pull hooks, plus read access to the
currently published snapshot.
"""

from __future__ import annotations

import threading

from core.config import CatalogConfig
from core.errors import CatalogError
from core.logging_config import get_logger
from core.site_config import SiteConfig
from core.types import CatalogSnapshot
from ingest.feed_client import fetch_feed_table
from ingest.pipeline import CatalogPipelineRunner, FeedFetcher
from store.snapshot_store import SnapshotStore

_LOGGER = get_logger(__name__)


class ModuleCatalogService:
    """Primary entry point for catalog rebuilds and reads."""

    def __init__(
        self,
        config: CatalogConfig | None = None,
        site_config: SiteConfig | None = None,
        feed_fetcher: FeedFetcher = fetch_feed_table,
    ) -> None:
        """Create the service.

        Args:
            config: Optional runtime configuration; read from env when omitted.
            site_config: Optional presentation settings; read from YAML when omitted.
            feed_fetcher: Callable returning a feed table for (name, url, timeout).
        """
        self._config = config or CatalogConfig.from_env()
        self._site_config = site_config
        self._feed_fetcher = feed_fetcher
        self._store = SnapshotStore()
        self._rebuild_lock = threading.Lock()

    @property
    def config(self) -> CatalogConfig:
        """Runtime configuration used for rebuilds."""
        return self._config

    def current(self) -> CatalogSnapshot | None:
        """Return the published snapshot, or None before the first rebuild."""
        return self._store.current()

    def rebuild(self) -> CatalogSnapshot:
        """Rebuild the catalog and publish it.

        Runs are serialized. A failed run leaves the previous snapshot current.

        Returns:
            The newly published snapshot.

        Raises:
            CatalogError: If the atlas, site config, or final assembly fails.
        """
        with self._rebuild_lock:
            runner = CatalogPipelineRunner(self._config, self._site_config, self._feed_fetcher)
            try:
                snapshot = runner.run()
            except CatalogError as error:
                _LOGGER.error(
                    "catalog_rebuild_failed",
                    error=str(error),
                    error_type=type(error).__name__,
                    kept_previous=self._store.current() is not None,
                )
                raise
            self._store.publish(snapshot)
            return snapshot
