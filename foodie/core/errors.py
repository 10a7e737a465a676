"""Error types raised by the data-access layer."""

from __future__ import annotations


class RepositoryError(Exception):
    """Base class for failures surfaced by repository operations."""


class PoolExhausted(RepositoryError):
    """No pooled connection could be obtained within the retry budget."""

    def __init__(self, attempts: int, cause: BaseException | None = None) -> None:
        super().__init__(f"Failed to retrieve a connection from the pool after {attempts} attempts")
        self.attempts = attempts
        self.cause = cause


class AcquisitionCancelled(RepositoryError):
    """The caller cancelled while connection acquisition was backing off."""


class StorageFailure(RepositoryError):
    """A statement failed to execute or its rows could not be decoded."""

    def __init__(self, operation: str, cause: BaseException) -> None:
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause


class NormalizationSkip(Exception):
    """A single external place record is malformed and must be skipped."""

    def __init__(self, reason: str, place_id: str | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.place_id = place_id


class PlacesApiError(Exception):
    """The external places search API could not be queried."""
