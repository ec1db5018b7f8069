"""Current catalog snapshot holder.

This module owns the single mutable reference of the system: the
snapshot currently served. Snapshots are immutable and fully built
before publication, so readers always see a complete catalog.
"""

from __future__ import annotations

import threading

from core.logging_config import get_logger
from core.types import CatalogSnapshot

_LOGGER = get_logger(__name__)


class SnapshotStore:
    """Atomically swappable handle to the current snapshot."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._current: CatalogSnapshot | None = None
        self._generation = 0

    def current(self) -> CatalogSnapshot | None:
        """Return the published snapshot, or None before the first rebuild."""
        with self._lock:
            return self._current

    @property
    def generation(self) -> int:
        """Number of snapshots published so far."""
        with self._lock:
            return self._generation

    def publish(self, snapshot: CatalogSnapshot) -> None:
        """Replace the current snapshot.

        Args:
            snapshot: Fully assembled snapshot.
        """
        with self._lock:
            self._current = snapshot
            self._generation += 1
            generation = self._generation
        _LOGGER.info(
            "snapshot_published",
            generation=generation,
            module_count=len(snapshot.modules),
            load_error_count=len(snapshot.load_errors),
        )
