"""Domain models, errors and the Result type."""

from .errors import MedisError, RecordNotFoundError, StorageError, SubmissionRejected
from .models import (
    BloodPressureStage,
    Classification,
    FitnessPolicy,
    FitnessVerdict,
    HealthRecord,
    RecordSubmission,
    VitalReading,
)
from .result import Result

__all__ = [
    "BloodPressureStage",
    "Classification",
    "FitnessPolicy",
    "FitnessVerdict",
    "HealthRecord",
    "MedisError",
    "RecordNotFoundError",
    "RecordSubmission",
    "Result",
    "StorageError",
    "SubmissionRejected",
    "VitalReading",
]
