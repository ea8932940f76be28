"""
Frecency Tracker - Engine Facade for Hosts

Owns one ranking store, its persisted location, and the exclusion filter.
This is what editor hooks and services call; they decide *when* to record,
save, and load.

Usage:
    from frecency import FrecencyConfig, FrecencyTracker

    tracker = FrecencyTracker.from_config(FrecencyConfig.from_env())
    tracker.install()
    tracker.load()

    tracker.record_access('/src/api/routes.py')
    tracker.list_ranked_with_score(limit=10)

    tracker.save()
"""

import logging
import threading
from typing import List, Optional, Tuple

from . import codec
from .backends import open_backend
from .config import FrecencyConfig
from .exclusion import ExclusionFilter
from .store import RankingStore

logger = logging.getLogger(__name__)


class FrecencyTracker:
    """
    Ranked access history with persistence and exclusion.

    Every operation runs under one re-entrant lock, so a tracker may be
    shared by threads of one process (e.g. a threaded HTTP server).
    """

    def __init__(self, backend, exclusion: Optional[ExclusionFilter] = None,
                 aging_threshold: Optional[float] = None,
                 aging_multiplier: Optional[float] = None):
        """
        Initialize with an empty store.

        Args:
            backend: FileBackend / RedisBackend holding the persisted image
            exclusion: Filter consulted before every record (optional)
            aging_threshold: Store aging threshold (store default if None)
            aging_multiplier: Store aging multiplier (store default if None)
        """
        self.backend = backend
        self.exclusion = exclusion if exclusion is not None else ExclusionFilter()
        self._store_options = {
            k: v for k, v in (('aging_threshold', aging_threshold),
                              ('aging_multiplier', aging_multiplier))
            if v is not None
        }
        self.store = RankingStore(**self._store_options)
        self.lock = threading.RLock()

    @classmethod
    def from_config(cls, config: FrecencyConfig) -> 'FrecencyTracker':
        config.validate()
        return cls(
            open_backend(config.history_location),
            exclusion=ExclusionFilter(config.exclude_patterns),
            **config.store_options,
        )

    # =========================================================================
    # Recording
    # =========================================================================

    def record_access(self, resource_id: str) -> bool:
        """
        Record an access unless the id is excluded.

        Returns:
            True if recorded, False if the exclusion filter rejected it

        Raises:
            InvalidIdentifier: resource_id is empty or not a string
        """
        if isinstance(resource_id, str) and self.exclusion.is_excluded(resource_id):
            logger.debug("excluded %s", resource_id)
            return False
        with self.lock:
            self.store.record_access(resource_id)
        return True

    def remove(self, resource_id: str) -> bool:
        with self.lock:
            return self.store.remove(resource_id)

    def reset(self) -> None:
        with self.lock:
            self.store.reset()
        logger.info("history reset")

    # =========================================================================
    # Queries
    # =========================================================================

    def list_ranked(self, limit: Optional[int] = None) -> List[str]:
        with self.lock:
            return self.store.list_ranked(limit)

    def list_ranked_with_score(self, limit: Optional[int] = None) -> List[Tuple[str, float]]:
        with self.lock:
            return self.store.list_ranked_with_score(limit)

    def __len__(self) -> int:
        return len(self.store)

    # =========================================================================
    # Persistence
    # =========================================================================

    def save(self) -> None:
        """Write the whole store to the backend."""
        with self.lock:
            data = codec.encode(self.store)
            self.backend.write(data)
            count = len(self.store)
        logger.info("saved %d entries to %s", count, self.backend.location)

    def load(self) -> None:
        """
        Replace the in-memory store with the persisted one.

        A missing image yields an empty store. On CorruptPersistedState or
        PersistenceIOFailure the current store is left untouched.
        """
        with self.lock:
            data = self.backend.read()
            if data is None:
                store = RankingStore(**self._store_options)
                logger.info("no history at %s, starting empty", self.backend.location)
            else:
                store = codec.decode(data, **self._store_options)
                logger.info("loaded %d entries from %s", len(store), self.backend.location)
            self.store = store

    def install(self) -> bool:
        """
        Create an empty persisted image if none exists.

        Returns:
            True if an image was created
        """
        with self.lock:
            if self.backend.exists():
                return False
            self.backend.write(codec.encode(RankingStore(**self._store_options)))
        logger.info("created empty history at %s", self.backend.location)
        return True
