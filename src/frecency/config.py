"""
Frecency Configuration

Recognized options:
- history_location: path or redis:// URL of the persisted image
- exclude_patterns: regexes for ids that are never recorded
- aging_threshold: total rank that triggers an aging pass
- aging_multiplier: decay applied by each aging pass, in (0, 1)

`FrecencyConfig.from_env()` reads them from FRECENCY_* environment variables.
"""

import os
import re
from dataclasses import dataclass, field
from typing import List

from .store import DEFAULT_AGING_MULTIPLIER, DEFAULT_AGING_THRESHOLD

DEFAULT_HISTORY_LOCATION = os.path.join('~', '.frecency', 'history.json')


@dataclass
class FrecencyConfig:
    """Engine configuration."""
    history_location: str = DEFAULT_HISTORY_LOCATION
    exclude_patterns: List[str] = field(default_factory=list)
    aging_threshold: float = DEFAULT_AGING_THRESHOLD
    aging_multiplier: float = DEFAULT_AGING_MULTIPLIER

    def validate(self) -> 'FrecencyConfig':
        """Raise ValueError on out-of-range options; return self."""
        if not self.history_location:
            raise ValueError("history_location must not be empty")
        if not self.aging_threshold > 0:
            raise ValueError(f"aging_threshold must be > 0, got {self.aging_threshold}")
        if not 0 < self.aging_multiplier < 1:
            raise ValueError(f"aging_multiplier must be in (0, 1), got {self.aging_multiplier}")
        for pattern in self.exclude_patterns:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"invalid exclude pattern {pattern!r}: {e}") from e
        return self

    @property
    def store_options(self) -> dict:
        return {
            'aging_threshold': self.aging_threshold,
            'aging_multiplier': self.aging_multiplier,
        }

    @classmethod
    def from_env(cls, environ=None) -> 'FrecencyConfig':
        """
        Build a config from environment variables.

        FRECENCY_HISTORY           history_location
        FRECENCY_EXCLUDE           patterns, one per line
        FRECENCY_AGING_THRESHOLD   aging_threshold
        FRECENCY_AGING_MULTIPLIER  aging_multiplier
        """
        env = os.environ if environ is None else environ

        raw_patterns = env.get('FRECENCY_EXCLUDE', '')
        patterns = [p.strip() for p in raw_patterns.splitlines() if p.strip()]

        return cls(
            history_location=env.get('FRECENCY_HISTORY', DEFAULT_HISTORY_LOCATION),
            exclude_patterns=patterns,
            aging_threshold=float(env.get('FRECENCY_AGING_THRESHOLD', DEFAULT_AGING_THRESHOLD)),
            aging_multiplier=float(env.get('FRECENCY_AGING_MULTIPLIER', DEFAULT_AGING_MULTIPLIER)),
        ).validate()
