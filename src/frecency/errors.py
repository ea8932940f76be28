"""
Frecency Errors

Every failure the engine can report is one of these. The score model and
the exclusion filter are total and never raise.
"""


class FrecencyError(Exception):
    """Base class for all frecency engine errors."""


class InvalidIdentifier(FrecencyError):
    """Resource id is empty, blank, or not a string."""

    def __init__(self, resource_id):
        self.resource_id = resource_id
        super().__init__(f"invalid resource identifier: {resource_id!r}")


class CorruptPersistedState(FrecencyError):
    """Persisted image is malformed, truncated, or of an unknown version."""


class PersistenceIOFailure(FrecencyError):
    """Underlying read/write of the persisted image failed."""

    def __init__(self, location: str, reason: str):
        self.location = location
        self.reason = reason
        super().__init__(f"{location}: {reason}")
