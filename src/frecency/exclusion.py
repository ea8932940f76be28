"""
Frecency Exclusion Filter

Decides which resource ids must never be recorded. A pattern excludes an
id if it matches anywhere in it (re.search semantics).
"""

import re
from typing import Iterable, List, Union

PatternLike = Union[str, re.Pattern]


def is_excluded(resource_id: str, patterns: Iterable[PatternLike]) -> bool:
    """True if at least one pattern matches anywhere in resource_id."""
    return any(re.search(p, resource_id) for p in patterns)


class ExclusionFilter:
    """Compiled pattern set, built once from configuration."""

    def __init__(self, patterns: Iterable[PatternLike] = ()):
        # re.error for a malformed pattern surfaces here, at config time
        self.patterns: List[re.Pattern] = [re.compile(p) for p in patterns]

    def is_excluded(self, resource_id: str) -> bool:
        return is_excluded(resource_id, self.patterns)

    __call__ = is_excluded

    def __bool__(self) -> bool:
        return bool(self.patterns)

    def __repr__(self) -> str:
        return f"ExclusionFilter({[p.pattern for p in self.patterns]!r})"
