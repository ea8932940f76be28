"""
Frecency - Rank Files by Frequency and Recency

Tracks which files are accessed and keeps them ordered by a combined
frecency score, persisted across sessions.

Components:
- scorer: access history accumulator and score
- store: ranked collection with mass-triggered aging
- codec / backends: deterministic image format, atomic file or Redis storage
- exclusion: regex filter for ids that are never recorded
- tracker: the facade hosts call

Usage:
    from frecency import FrecencyConfig, FrecencyTracker

    tracker = FrecencyTracker.from_config(FrecencyConfig.from_env())
    tracker.load()
    tracker.record_access('/src/api/routes.py')
    tracker.save()
"""

from .config import FrecencyConfig
from .errors import (
    CorruptPersistedState,
    FrecencyError,
    InvalidIdentifier,
    PersistenceIOFailure,
)
from .exclusion import ExclusionFilter, is_excluded
from .scorer import AccessHistory
from .store import RankingStore
from .tracker import FrecencyTracker

__all__ = [
    'AccessHistory',
    'CorruptPersistedState',
    'ExclusionFilter',
    'FrecencyConfig',
    'FrecencyError',
    'FrecencyTracker',
    'InvalidIdentifier',
    'PersistenceIOFailure',
    'RankingStore',
    'is_excluded',
]
