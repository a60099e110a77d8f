"""
Vitals classification: blood-pressure staging and fitness-for-duty verdicts.

Everything here is a pure function of its numeric inputs. Any finite input,
including negative or out-of-band values, falls through to some label; the
classifier never raises.

Two fitness policies exist and are never blended:
- TIERED: each parameter scores FIT / FIT WITH NOTE / UNFIT, worst tier wins.
- SIMPLE: FIT only if every parameter sits inside a single normal band.
"""

from collections.abc import Callable

import structlog

from medis.domain.models import (
    BloodPressureStage,
    Classification,
    FitnessPolicy,
    FitnessVerdict,
    VitalReading,
)

logger = structlog.get_logger(__name__)

RGB = tuple[int, int, int]

DEFAULT_POLICY = FitnessPolicy.TIERED

_STAGE_COLORS: dict[BloodPressureStage, str] = {
    BloodPressureStage.NORMAL: "green",
    BloodPressureStage.PREHYPERTENSION: "yellow",
    BloodPressureStage.HYPERTENSION_STAGE_1: "orange",
    BloodPressureStage.HYPERTENSION_STAGE_2: "red",
}

_STAGE_FILLS: dict[BloodPressureStage, RGB] = {
    BloodPressureStage.NORMAL: (187, 247, 208),
    BloodPressureStage.PREHYPERTENSION: (254, 240, 138),
    BloodPressureStage.HYPERTENSION_STAGE_1: (253, 186, 116),
    BloodPressureStage.HYPERTENSION_STAGE_2: (252, 165, 165),
}

_VERDICT_COLORS: dict[FitnessVerdict, str] = {
    FitnessVerdict.FIT: "green",
    FitnessVerdict.FIT_WITH_NOTE: "orange",
    FitnessVerdict.UNFIT: "red",
}

_VERDICT_FILLS: dict[FitnessVerdict, RGB] = {
    FitnessVerdict.FIT: (187, 247, 208),
    FitnessVerdict.FIT_WITH_NOTE: (253, 186, 116),
    FitnessVerdict.UNFIT: (252, 165, 165),
}


def classify_blood_pressure(systolic: float, diastolic: float) -> BloodPressureStage:
    """
    Stage a blood-pressure pair.

    Bands are tested least severe first and each band is an OR across the two
    pressures, so the first band either pressure falls into wins. A pair such
    as 145/85 is Prehypertension even though systolic alone is Stage 1.
    """
    if systolic < 120 and diastolic < 80:
        return BloodPressureStage.NORMAL
    if 120 <= systolic <= 139 or 80 <= diastolic <= 89:
        return BloodPressureStage.PREHYPERTENSION
    if 140 <= systolic <= 159 or 90 <= diastolic <= 99:
        return BloodPressureStage.HYPERTENSION_STAGE_1
    return BloodPressureStage.HYPERTENSION_STAGE_2


def bp_stage_color(stage: BloodPressureStage) -> str:
    """Display color tag for a stage."""
    return _STAGE_COLORS[stage]


def stage_fill_rgb(stage: BloodPressureStage) -> RGB:
    return _STAGE_FILLS[stage]


def fitness_color(verdict: FitnessVerdict) -> str:
    """Display color tag for a verdict."""
    return _VERDICT_COLORS[verdict]


def verdict_fill_rgb(verdict: FitnessVerdict) -> RGB:
    return _VERDICT_FILLS[verdict]


# Tiered policy: one scorer per parameter


def _bp_tier(systolic: float, diastolic: float) -> FitnessVerdict:
    if systolic >= 150 or diastolic >= 100:
        return FitnessVerdict.UNFIT
    if 130 <= systolic < 150 or 90 <= diastolic < 100:
        return FitnessVerdict.FIT_WITH_NOTE
    return FitnessVerdict.FIT


def _pulse_tier(pulse: float) -> FitnessVerdict:
    if pulse > 130:
        return FitnessVerdict.UNFIT
    if 100 <= pulse <= 130:
        return FitnessVerdict.FIT_WITH_NOTE
    return FitnessVerdict.FIT


def _spo2_tier(spo2: float) -> FitnessVerdict:
    if spo2 < 92:
        return FitnessVerdict.UNFIT
    if spo2 < 95:
        return FitnessVerdict.FIT_WITH_NOTE
    return FitnessVerdict.FIT


def _temperature_tier(temperature: float) -> FitnessVerdict:
    if temperature >= 38:
        return FitnessVerdict.UNFIT
    if temperature >= 37.5:
        return FitnessVerdict.FIT_WITH_NOTE
    return FitnessVerdict.FIT


def assess_parameters(reading: VitalReading) -> dict[str, FitnessVerdict]:
    """Per-parameter tiers under the tiered policy, keyed by parameter name."""
    return {
        "blood_pressure": _bp_tier(reading.systolic, reading.diastolic),
        "pulse": _pulse_tier(reading.pulse),
        "spo2": _spo2_tier(reading.spo2),
        "temperature": _temperature_tier(reading.temperature),
    }


def _tiered_verdict(reading: VitalReading) -> FitnessVerdict:
    tiers = assess_parameters(reading).values()
    if FitnessVerdict.UNFIT in tiers:
        return FitnessVerdict.UNFIT
    if FitnessVerdict.FIT_WITH_NOTE in tiers:
        return FitnessVerdict.FIT_WITH_NOTE
    return FitnessVerdict.FIT


def _simple_verdict(reading: VitalReading) -> FitnessVerdict:
    within_normal = (
        reading.systolic < 140
        and reading.diastolic < 90
        and 60 <= reading.pulse <= 100
        and reading.spo2 >= 95
        and 36 <= reading.temperature <= 37.5
    )
    return FitnessVerdict.FIT if within_normal else FitnessVerdict.UNFIT


_POLICIES: dict[FitnessPolicy, Callable[[VitalReading], FitnessVerdict]] = {
    FitnessPolicy.TIERED: _tiered_verdict,
    FitnessPolicy.SIMPLE: _simple_verdict,
}


def classify_fitness(
    reading: VitalReading, policy: FitnessPolicy = DEFAULT_POLICY
) -> FitnessVerdict:
    """Overall fitness verdict for a reading under the named policy."""
    return _POLICIES[FitnessPolicy(policy)](reading)


def requires_note(verdict: FitnessVerdict) -> bool:
    """Whether a submission with this verdict must carry a free-text note."""
    return verdict is FitnessVerdict.FIT_WITH_NOTE


def classify(reading: VitalReading, policy: FitnessPolicy = DEFAULT_POLICY) -> Classification:
    """Stage and verdict for a reading, with their display colors."""
    stage = classify_blood_pressure(reading.systolic, reading.diastolic)
    verdict = classify_fitness(reading, policy)
    logger.debug(
        "reading_classified",
        policy=FitnessPolicy(policy).value,
        bp_stage=stage.value,
        fitness=verdict.value,
    )
    return Classification(
        bp_stage=stage,
        fitness=verdict,
        bp_color=bp_stage_color(stage),
        fitness_color=fitness_color(verdict),
        policy=policy,
    )
