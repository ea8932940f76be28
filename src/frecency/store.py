"""
Frecency Ranking Store - Ordered Resource Histories

Keeps one entry per resource id, always sorted by descending score.
Every mutation re-sorts before returning, so readers never see an
unsorted store.

Usage:
    from frecency.store import RankingStore

    store = RankingStore()
    store.record_access('/src/api/routes.py')
    store.list_ranked()              # ['/src/api/routes.py']
    store.list_ranked_with_score()   # [('/src/api/routes.py', 1.0)]
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from . import scorer
from .errors import InvalidIdentifier
from .scorer import AccessHistory

logger = logging.getLogger(__name__)


DEFAULT_AGING_THRESHOLD = 9000.0
DEFAULT_AGING_MULTIPLIER = 0.99

# Entries whose decayed accumulator falls below this are evicted
EVICTION_FLOOR = 1.0


@dataclass
class Entry:
    """One tracked resource."""
    resource_id: str
    history: AccessHistory

    @property
    def score(self) -> float:
        return scorer.score(self.history)


def validate_identifier(resource_id) -> str:
    """Reject ids that are not non-blank strings."""
    if not isinstance(resource_id, str) or not resource_id.strip():
        raise InvalidIdentifier(resource_id)
    return resource_id


class RankingStore:
    """
    Ranked collection of resource histories.

    Aging is triggered by total accumulator mass rather than by a clock:
    once an access would push the sum of all ranks past
    `aging_threshold`, every rank is multiplied by `aging_multiplier`
    and entries that drop below 1 are evicted.
    """

    def __init__(self, aging_threshold: float = DEFAULT_AGING_THRESHOLD,
                 aging_multiplier: float = DEFAULT_AGING_MULTIPLIER):
        """
        Initialize an empty store.

        Args:
            aging_threshold: Total rank above which an aging pass runs (> 0)
            aging_multiplier: Decay applied to every rank by aging, in (0, 1)
        """
        if not aging_threshold > 0:
            raise ValueError(f"aging_threshold must be > 0, got {aging_threshold}")
        if not 0 < aging_multiplier < 1:
            raise ValueError(f"aging_multiplier must be in (0, 1), got {aging_multiplier}")

        self.aging_threshold = float(aging_threshold)
        self.aging_multiplier = float(aging_multiplier)
        self._entries: List[Entry] = []
        self._index: Dict[str, Entry] = {}

    @classmethod
    def from_entries(cls, pairs: Iterable[Tuple[str, AccessHistory]],
                     **options) -> 'RankingStore':
        """
        Build a store from ordered (resource_id, history) pairs.

        Order is kept for equal scores; the result is sorted.
        Raises ValueError on duplicate ids.
        """
        store = cls(**options)
        for resource_id, history in pairs:
            validate_identifier(resource_id)
            if resource_id in store._index:
                raise ValueError(f"duplicate resource id: {resource_id!r}")
            entry = Entry(resource_id, history)
            store._entries.append(entry)
            store._index[resource_id] = entry
        store._sort()
        return store

    # =========================================================================
    # Mutation
    # =========================================================================

    def record_access(self, resource_id: str) -> None:
        """
        Record one access to a resource and re-rank.

        The touched entry is placed ahead of untouched entries with an
        equal score. May trigger an aging pass.

        Raises:
            InvalidIdentifier: resource_id is empty or not a string
                (the store is left unchanged)
        """
        validate_identifier(resource_id)

        # Age before adding so the access being recorded is never evicted
        if self.total_rank() + scorer.UNIT_WEIGHT > self.aging_threshold:
            self.age()

        entry = self._index.get(resource_id)
        if entry is None:
            entry = Entry(resource_id, scorer.update(scorer.empty_history()))
            self._index[resource_id] = entry
            logger.debug("tracking new resource %s", resource_id)
        else:
            self._entries.remove(entry)
            entry.history = scorer.update(entry.history)
        self._entries.insert(0, entry)
        self._sort()

    def age(self) -> List[str]:
        """
        Decay every entry and evict the ones that fall below the floor.

        Runs unconditionally when called directly. `record_access` looks
        ahead: it ages before adding the unit weight, as soon as total + 1
        would exceed the threshold, so the entry being recorded is never
        evicted by the pass it triggers. One pass shrinks the mass by the
        multiplier only, so with thresholds below 1 / (1 - multiplier) the
        mass can briefly sit up to one unit above the threshold.

        Returns:
            Ids of evicted entries, in their previous rank order
        """
        survivors = []
        evicted = []
        for entry in self._entries:
            entry.history = scorer.decay(entry.history, self.aging_multiplier)
            if entry.history.rank < EVICTION_FLOOR:
                evicted.append(entry.resource_id)
                del self._index[entry.resource_id]
            else:
                survivors.append(entry)
        self._entries = survivors

        logger.info("aged %d entries by %s, evicted %d",
                    len(survivors) + len(evicted), self.aging_multiplier, len(evicted))
        return evicted

    def remove(self, resource_id: str) -> bool:
        """Forget a single resource. Returns True if it was tracked."""
        entry = self._index.pop(resource_id, None)
        if entry is None:
            return False
        self._entries.remove(entry)
        return True

    def reset(self) -> None:
        """Drop every entry."""
        self._entries = []
        self._index = {}

    def _sort(self):
        # list.sort is stable, so equal scores keep their current order
        self._entries.sort(key=lambda e: e.score, reverse=True)

    # =========================================================================
    # Queries
    # =========================================================================

    def list_ranked(self, limit: Optional[int] = None) -> List[str]:
        """Resource ids, highest score first."""
        return [e.resource_id for e in self._entries[:limit]]

    def list_ranked_with_score(self, limit: Optional[int] = None) -> List[Tuple[str, float]]:
        """(resource_id, score) pairs, highest score first. Scores are recomputed."""
        return [(e.resource_id, scorer.score(e.history)) for e in self._entries[:limit]]

    def entries(self) -> List[Tuple[str, AccessHistory]]:
        """Snapshot of (resource_id, history) pairs in rank order."""
        return [(e.resource_id, e.history) for e in self._entries]

    def score_of(self, resource_id: str) -> Optional[float]:
        """Current score of a resource, or None if it is not tracked."""
        entry = self._index.get(resource_id)
        return entry.score if entry else None

    def total_rank(self) -> float:
        """Sum of all raw accumulators."""
        return sum(e.history.rank for e in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, resource_id) -> bool:
        return resource_id in self._index

    def __iter__(self) -> Iterator[Tuple[str, AccessHistory]]:
        return iter(self.entries())
