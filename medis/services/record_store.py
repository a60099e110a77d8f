"""
Record store: the single owner of the in-memory list of health records.

The store reads durable storage once via `load()` and writes the whole list
back after every mutation. If that write fails the in-memory list is left
as it was. Records are identified by a synthetic `record_id` assigned at
creation, never by list position, so a filtered view can always be mapped
back to the underlying record.
"""

import uuid
from datetime import UTC, datetime
from typing import Protocol

import structlog

from medis.domain.errors import RecordNotFoundError, SubmissionRejected
from medis.domain.models import (
    Classification,
    FitnessPolicy,
    HealthRecord,
    RecordSubmission,
)
from medis.domain.result import Result
from medis.services.classifier import DEFAULT_POLICY, classify, requires_note

logger = structlog.get_logger(__name__)


class RecordStorage(Protocol):
    """
    Durable storage for the full record list.

    Implementations read and write the whole collection at once; there are
    no partial writes.
    """

    def load(self) -> list[HealthRecord]: ...

    def save_all(self, records: list[HealthRecord]) -> None: ...


class RecordStore:
    """Ordered collection of health records backed by a `RecordStorage`."""

    def __init__(self, storage: RecordStorage, policy: FitnessPolicy = DEFAULT_POLICY) -> None:
        self.storage = storage
        self.policy = FitnessPolicy(policy)
        self.logger = logger.bind(component="record_store", policy=self.policy.value)
        self._records: list[HealthRecord] = []

    @property
    def records(self) -> tuple[HealthRecord, ...]:
        """Snapshot of all records in insertion order."""
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def load(self) -> "RecordStore":
        """Replace the in-memory list with the contents of durable storage."""
        self._records = list(self.storage.load())
        self.logger.info("records_loaded", count=len(self._records))
        return self

    def save_all(self) -> None:
        """Overwrite durable storage with the in-memory list."""
        self._commit(list(self._records))

    def _commit(self, records: list[HealthRecord]) -> None:
        # Memory only follows a successful write.
        self.storage.save_all(records)
        self._records = records
        self.logger.debug("records_saved", count=len(records))

    def get(self, record_id: str) -> HealthRecord:
        return self._records[self._index_of(record_id)]

    def submit(self, submission: RecordSubmission) -> Result[HealthRecord, SubmissionRejected]:
        """
        Classify and store a new record.

        A FIT WITH NOTE verdict without a note is rejected: the result carries
        a `SubmissionRejected` and neither the list nor storage is touched.
        """
        built = self._build_record(submission)
        if built.is_err():
            return built

        record = built.unwrap()
        self._commit([*self._records, record])
        self.logger.info(
            "record_submitted",
            record_id=record.record_id,
            bp_stage=record.bp_stage.value,
            fitness=record.fitness.value,
        )
        return Result.ok(record)

    def update(
        self, record_id: str, submission: RecordSubmission
    ) -> Result[HealthRecord, SubmissionRejected]:
        """
        Replace a record in place, keeping its id and position.

        The edited record is classified afresh; no other record is touched.
        """
        index = self._index_of(record_id)
        built = self._build_record(submission, record_id=record_id)
        if built.is_err():
            return built

        record = built.unwrap()
        records = list(self._records)
        records[index] = record
        self._commit(records)
        self.logger.info(
            "record_updated",
            record_id=record_id,
            bp_stage=record.bp_stage.value,
            fitness=record.fitness.value,
        )
        return Result.ok(record)

    def remove(self, record_id: str) -> HealthRecord:
        """Delete one record by id and return it."""
        records = list(self._records)
        record = records.pop(self._index_of(record_id))
        self._commit(records)
        self.logger.info("record_removed", record_id=record_id)
        return record

    def clear(self) -> int:
        """Delete every record. Returns how many were removed."""
        removed = len(self._records)
        self._commit([])
        self.logger.info("records_cleared", count=removed)
        return removed

    def _index_of(self, record_id: str) -> int:
        for index, record in enumerate(self._records):
            if record.record_id == record_id:
                return index
        raise RecordNotFoundError(record_id)

    def _build_record(
        self, submission: RecordSubmission, record_id: str | None = None
    ) -> Result[HealthRecord, SubmissionRejected]:
        classification = classify(submission.reading, self.policy)
        note = submission.note.strip()

        if requires_note(classification.fitness) and not note:
            self.logger.warning(
                "submission_rejected",
                reason="note_required",
                fitness=classification.fitness.value,
                record_id=record_id,
            )
            return Result.err(
                SubmissionRejected(
                    f"A note is required for status {classification.fitness.value}",
                    classification,
                )
            )

        fields = submission.model_dump(exclude={"reading", "note"})
        return Result.ok(
            HealthRecord(
                **fields,
                record_id=record_id or uuid.uuid4().hex,
                reading=submission.reading,
                recorded_at=datetime.now(UTC),
                bp_stage=classification.bp_stage,
                fitness=classification.fitness,
                color=classification.bp_color,
                note=self._stored_note(classification, note),
            )
        )

    def _stored_note(self, classification: Classification, note: str) -> str:
        # Under the tiered policy only the note-requiring verdict keeps its note.
        if self.policy is FitnessPolicy.TIERED and not requires_note(classification.fitness):
            return ""
        return note
