"""
Frecency Scorer - Access History and Rank

A resource's history is a single accumulator: every access adds a unit
weight, and the aging pass multiplies every accumulator down. Recency is
therefore carried by the accumulator itself (old accesses have been
decayed more often than new ones), so no timestamp is stored.

All functions here are pure.
"""

from dataclasses import dataclass


# Weight added to the accumulator by one access
UNIT_WEIGHT = 1.0


@dataclass(frozen=True)
class AccessHistory:
    """Accumulated, decayed visit weight of one resource."""
    rank: float = 0.0

    def __post_init__(self):
        if self.rank < 0:
            raise ValueError(f"rank must be >= 0, got {self.rank}")


def empty_history() -> AccessHistory:
    """History of a resource that has never been accessed."""
    return AccessHistory(0.0)


def update(history: AccessHistory) -> AccessHistory:
    """
    Return the history after one more access right now.

    Not idempotent: calling it twice records two accesses.
    """
    return AccessHistory(history.rank + UNIT_WEIGHT)


def decay(history: AccessHistory, multiplier: float) -> AccessHistory:
    """Scale the accumulator by the aging multiplier."""
    return AccessHistory(history.rank * multiplier)


def score(history: AccessHistory) -> float:
    """
    Rank of a history. Higher is more relevant.

    Monotonic in the accumulator, defined for zero, cheap enough to call
    once per entry on every listing.
    """
    return history.rank
