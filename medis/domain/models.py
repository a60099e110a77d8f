"""
Domain models for employee health checks.

These models represent the core business concepts and are framework-agnostic.
They use Pydantic for validation; classification logic lives in
`medis.services.classifier` and never inside the models themselves.
"""

import uuid
from datetime import UTC, date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BloodPressureStage(str, Enum):
    """Blood-pressure stages, least severe first."""

    NORMAL = "Normal"
    PREHYPERTENSION = "Prehypertension"
    HYPERTENSION_STAGE_1 = "Hypertension Stage 1"
    HYPERTENSION_STAGE_2 = "Hypertension Stage 2"


class FitnessVerdict(str, Enum):
    """Fitness-for-duty verdicts, least severe first."""

    FIT = "FIT"
    FIT_WITH_NOTE = "FIT WITH NOTE"
    UNFIT = "UNFIT"

    @property
    def severity(self) -> int:
        return list(FitnessVerdict).index(self)


class FitnessPolicy(str, Enum):
    """Named versions of the fitness rules."""

    TIERED = "tiered"  # FIT / FIT WITH NOTE / UNFIT, note required for the middle tier
    SIMPLE = "simple"  # FIT / UNFIT against a single normal band


class VitalReading(BaseModel):
    """The five raw vital signs of one check. Presence is validated, range is not."""

    model_config = ConfigDict(frozen=True)

    systolic: int = Field(description="Systolic pressure in mmHg")
    diastolic: int = Field(description="Diastolic pressure in mmHg")
    pulse: int = Field(description="Pulse rate in bpm")
    spo2: float = Field(description="Blood-oxygen saturation in percent")
    temperature: float = Field(description="Body temperature in degrees Celsius")


class Classification(BaseModel):
    """Derived labels for a reading. Recomputed on demand, never stored on its own."""

    model_config = ConfigDict(frozen=True)

    bp_stage: BloodPressureStage
    fitness: FitnessVerdict
    bp_color: str
    fitness_color: str
    policy: FitnessPolicy


class RecordSubmission(BaseModel):
    """Form payload for a new or edited health record."""

    name: str = Field(min_length=1)
    badge_number: str = Field(min_length=1, description="Employee badge number")
    age: int = Field(ge=0)
    position: str = Field(min_length=1)
    supervisor: str = Field(min_length=1)
    department: str = Field(min_length=1)
    check_date: date
    reading: VitalReading
    note: str = ""

    @field_validator("name", "badge_number", "position", "supervisor", "department")
    @classmethod
    def strip_required_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field must not be blank")
        return v


class HealthRecord(BaseModel):
    """
    A persisted check: identity fields, the reading and its frozen classification.

    `bp_stage`, `fitness` and `color` are computed once when the record is
    submitted or edited. They are not recomputed when the record is loaded,
    so records keep the labels of the rules they were created under.
    """

    model_config = ConfigDict(frozen=True)

    record_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str
    badge_number: str
    age: int
    position: str
    supervisor: str
    department: str
    check_date: date
    recorded_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    reading: VitalReading
    bp_stage: BloodPressureStage
    fitness: FitnessVerdict
    color: str
    note: str = ""
