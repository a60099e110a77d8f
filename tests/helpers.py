"""Test doubles and builders shared by the unit tests."""

from __future__ import annotations

from medis.domain.errors import StorageError
from medis.domain.models import HealthRecord, VitalReading


class MemoryStorage:
    """RecordStorage fake that keeps a copy of the last saved list."""

    def __init__(self, records: list[HealthRecord] | None = None) -> None:
        self.saved: list[HealthRecord] = list(records or [])
        self.save_count = 0

    def load(self) -> list[HealthRecord]:
        return list(self.saved)

    def save_all(self, records: list[HealthRecord]) -> None:
        self.saved = list(records)
        self.save_count += 1


class FailingStorage(MemoryStorage):
    """Loads normally but refuses every write."""

    def save_all(self, records: list[HealthRecord]) -> None:
        raise StorageError("Cannot write records.json: disk full")


def reading(
    systolic: int = 115,
    diastolic: int = 75,
    pulse: int = 80,
    spo2: float = 98.0,
    temperature: float = 36.6,
) -> VitalReading:
    return VitalReading(
        systolic=systolic,
        diastolic=diastolic,
        pulse=pulse,
        spo2=spo2,
        temperature=temperature,
    )
