"""Exceptions raised by the record store and its storage adapters."""

from medis.domain.models import Classification


class MedisError(Exception):
    """Base class for all medis errors."""


class SubmissionRejected(MedisError):
    """A submission failed business validation; nothing was stored."""

    def __init__(self, message: str, classification: Classification) -> None:
        super().__init__(message)
        self.classification = classification


class RecordNotFoundError(MedisError):
    """No record with the given identifier exists in the store."""

    def __init__(self, record_id: str) -> None:
        super().__init__(f"No record with id {record_id!r}")
        self.record_id = record_id


class StorageError(MedisError):
    """Durable storage could not be read or written."""
