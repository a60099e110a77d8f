"""
Tests for the vitals classifier.

Covers:
- Blood-pressure staging, including the least-severe-first tie-break
- Tiered and simple fitness policies and their boundaries
- Display palettes
- Determinism of classify()
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from helpers import reading
from medis.domain.models import BloodPressureStage, FitnessPolicy, FitnessVerdict
from medis.services.classifier import (
    assess_parameters,
    bp_stage_color,
    classify,
    classify_blood_pressure,
    classify_fitness,
    fitness_color,
    requires_note,
    stage_fill_rgb,
    verdict_fill_rgb,
)

finite = st.floats(min_value=-1000, max_value=1000, allow_nan=False, allow_infinity=False)


class TestBloodPressureStage:
    @given(systolic=st.integers(min_value=0, max_value=119), diastolic=st.integers(0, 79))
    def test_below_both_limits_is_normal(self, systolic: int, diastolic: int) -> None:
        assert classify_blood_pressure(systolic, diastolic) is BloodPressureStage.NORMAL

    @given(systolic=st.integers(min_value=160, max_value=300), diastolic=st.integers(0, 79))
    def test_high_systolic_with_normal_diastolic_is_stage_2(
        self, systolic: int, diastolic: int
    ) -> None:
        assert classify_blood_pressure(systolic, diastolic) is BloodPressureStage.HYPERTENSION_STAGE_2

    @given(systolic=st.integers(min_value=0, max_value=119), diastolic=st.integers(100, 200))
    def test_high_diastolic_with_normal_systolic_is_stage_2(
        self, systolic: int, diastolic: int
    ) -> None:
        assert classify_blood_pressure(systolic, diastolic) is BloodPressureStage.HYPERTENSION_STAGE_2

    def test_systolic_120_alone_is_prehypertension(self) -> None:
        assert classify_blood_pressure(120, 70) is BloodPressureStage.PREHYPERTENSION

    def test_stage_1_systolic_with_normal_diastolic(self) -> None:
        assert classify_blood_pressure(145, 70) is BloodPressureStage.HYPERTENSION_STAGE_1

    def test_less_severe_band_wins_when_pressures_disagree(self) -> None:
        # systolic is Stage 1, diastolic is Prehypertension: Prehypertension is tested first
        assert classify_blood_pressure(145, 85) is BloodPressureStage.PREHYPERTENSION
        # systolic is Stage 2, diastolic is Stage 1
        assert classify_blood_pressure(170, 95) is BloodPressureStage.HYPERTENSION_STAGE_1

    @pytest.mark.parametrize(
        ("systolic", "diastolic", "expected"),
        [
            (119, 79, BloodPressureStage.NORMAL),
            (119, 80, BloodPressureStage.PREHYPERTENSION),
            (139, 70, BloodPressureStage.PREHYPERTENSION),
            (140, 70, BloodPressureStage.HYPERTENSION_STAGE_1),
            (110, 90, BloodPressureStage.HYPERTENSION_STAGE_1),
            (159, 99, BloodPressureStage.HYPERTENSION_STAGE_1),
            (160, 70, BloodPressureStage.HYPERTENSION_STAGE_2),
            (110, 100, BloodPressureStage.HYPERTENSION_STAGE_2),
        ],
    )
    def test_band_edges(
        self, systolic: int, diastolic: int, expected: BloodPressureStage
    ) -> None:
        assert classify_blood_pressure(systolic, diastolic) is expected

    def test_values_between_integer_bands_fall_through_to_stage_2(self) -> None:
        assert classify_blood_pressure(139.5, 70) is BloodPressureStage.HYPERTENSION_STAGE_2

    def test_negative_systolic_with_normal_diastolic_is_normal(self) -> None:
        assert classify_blood_pressure(-10, 70) is BloodPressureStage.NORMAL

    @given(systolic=finite, diastolic=finite)
    def test_any_finite_input_gets_a_stage(self, systolic: float, diastolic: float) -> None:
        assert isinstance(classify_blood_pressure(systolic, diastolic), BloodPressureStage)


class TestTieredPolicy:
    def test_all_within_fit_limits_is_fit(self) -> None:
        assert classify_fitness(reading(), FitnessPolicy.TIERED) is FitnessVerdict.FIT

    def test_single_note_parameter_gives_fit_with_note(self) -> None:
        r = reading(systolic=135, diastolic=70, pulse=80, spo2=97, temperature=36.8)

        assert assess_parameters(r) == {
            "blood_pressure": FitnessVerdict.FIT_WITH_NOTE,
            "pulse": FitnessVerdict.FIT,
            "spo2": FitnessVerdict.FIT,
            "temperature": FitnessVerdict.FIT,
        }
        assert classify_fitness(r, FitnessPolicy.TIERED) is FitnessVerdict.FIT_WITH_NOTE

    def test_any_unfit_parameter_dominates(self) -> None:
        r = reading(systolic=135, pulse=110, temperature=38.2)
        assert classify_fitness(r, FitnessPolicy.TIERED) is FitnessVerdict.UNFIT

    @pytest.mark.parametrize(
        ("overrides", "expected"),
        [
            ({"systolic": 129, "diastolic": 89}, FitnessVerdict.FIT),
            ({"systolic": 130}, FitnessVerdict.FIT_WITH_NOTE),
            ({"diastolic": 90}, FitnessVerdict.FIT_WITH_NOTE),
            ({"systolic": 149, "diastolic": 99}, FitnessVerdict.FIT_WITH_NOTE),
            ({"systolic": 150}, FitnessVerdict.UNFIT),
            ({"diastolic": 100}, FitnessVerdict.UNFIT),
            ({"pulse": 99}, FitnessVerdict.FIT),
            ({"pulse": 100}, FitnessVerdict.FIT_WITH_NOTE),
            ({"pulse": 130}, FitnessVerdict.FIT_WITH_NOTE),
            ({"pulse": 131}, FitnessVerdict.UNFIT),
            ({"spo2": 95}, FitnessVerdict.FIT),
            ({"spo2": 94.9}, FitnessVerdict.FIT_WITH_NOTE),
            ({"spo2": 92}, FitnessVerdict.FIT_WITH_NOTE),
            ({"spo2": 91.9}, FitnessVerdict.UNFIT),
            ({"temperature": 37.4}, FitnessVerdict.FIT),
            ({"temperature": 37.5}, FitnessVerdict.FIT_WITH_NOTE),
            ({"temperature": 37.9}, FitnessVerdict.FIT_WITH_NOTE),
            ({"temperature": 38.0}, FitnessVerdict.UNFIT),
        ],
    )
    def test_parameter_boundaries(self, overrides: dict, expected: FitnessVerdict) -> None:
        assert classify_fitness(reading(**overrides), FitnessPolicy.TIERED) is expected

    @given(
        systolic=st.integers(0, 250),
        diastolic=st.integers(0, 150),
        pulse=st.integers(0, 220),
        spo2=st.floats(50, 100),
        temperature=st.floats(33, 43),
    )
    def test_verdict_is_worst_parameter_tier(
        self, systolic: int, diastolic: int, pulse: int, spo2: float, temperature: float
    ) -> None:
        r = reading(systolic, diastolic, pulse, spo2, temperature)
        worst = max(assess_parameters(r).values(), key=lambda v: v.severity)
        assert classify_fitness(r, FitnessPolicy.TIERED) is worst


class TestSimplePolicy:
    def test_normal_band_is_fit(self) -> None:
        assert classify_fitness(reading(), FitnessPolicy.SIMPLE) is FitnessVerdict.FIT

    @pytest.mark.parametrize(
        ("overrides", "expected"),
        [
            ({"systolic": 139, "diastolic": 89}, FitnessVerdict.FIT),
            ({"systolic": 140}, FitnessVerdict.UNFIT),
            ({"diastolic": 90}, FitnessVerdict.UNFIT),
            ({"pulse": 60}, FitnessVerdict.FIT),
            ({"pulse": 100}, FitnessVerdict.FIT),
            ({"pulse": 59}, FitnessVerdict.UNFIT),
            ({"pulse": 101}, FitnessVerdict.UNFIT),
            ({"spo2": 94.9}, FitnessVerdict.UNFIT),
            ({"temperature": 36.0}, FitnessVerdict.FIT),
            ({"temperature": 37.5}, FitnessVerdict.FIT),
            ({"temperature": 35.9}, FitnessVerdict.UNFIT),
            ({"temperature": 37.6}, FitnessVerdict.UNFIT),
        ],
    )
    def test_band_edges(self, overrides: dict, expected: FitnessVerdict) -> None:
        assert classify_fitness(reading(**overrides), FitnessPolicy.SIMPLE) is expected

    @given(
        systolic=st.integers(0, 250),
        diastolic=st.integers(0, 150),
        pulse=st.integers(0, 220),
        spo2=st.floats(50, 100),
        temperature=st.floats(33, 43),
    )
    def test_never_yields_note_tier(
        self, systolic: int, diastolic: int, pulse: int, spo2: float, temperature: float
    ) -> None:
        r = reading(systolic, diastolic, pulse, spo2, temperature)
        assert classify_fitness(r, FitnessPolicy.SIMPLE) is not FitnessVerdict.FIT_WITH_NOTE

    def test_policies_disagree_on_tiered_note_band(self) -> None:
        # pulse 58 is FIT under the tiered rules but outside the simple normal band
        r = reading(pulse=58)
        assert classify_fitness(r, FitnessPolicy.TIERED) is FitnessVerdict.FIT
        assert classify_fitness(r, FitnessPolicy.SIMPLE) is FitnessVerdict.UNFIT


class TestPalettesAndClassify:
    def test_stage_colors(self) -> None:
        assert [bp_stage_color(s) for s in BloodPressureStage] == [
            "green",
            "yellow",
            "orange",
            "red",
        ]
        assert stage_fill_rgb(BloodPressureStage.PREHYPERTENSION) == (254, 240, 138)

    def test_verdict_colors(self) -> None:
        assert [fitness_color(v) for v in FitnessVerdict] == ["green", "orange", "red"]
        assert verdict_fill_rgb(FitnessVerdict.UNFIT) == (252, 165, 165)

    def test_only_middle_tier_requires_note(self) -> None:
        assert [requires_note(v) for v in FitnessVerdict] == [False, True, False]

    def test_classify_combines_stage_verdict_and_colors(self) -> None:
        result = classify(reading(systolic=135, diastolic=70), FitnessPolicy.TIERED)

        assert result.bp_stage is BloodPressureStage.PREHYPERTENSION
        assert result.fitness is FitnessVerdict.FIT_WITH_NOTE
        assert result.bp_color == "yellow"
        assert result.fitness_color == "orange"
        assert result.policy is FitnessPolicy.TIERED

    def test_classify_accepts_policy_name(self) -> None:
        assert classify(reading(pulse=58), "simple").fitness is FitnessVerdict.UNFIT  # type: ignore[arg-type]

    @given(systolic=st.integers(0, 250), diastolic=st.integers(0, 150))
    def test_classify_is_deterministic(self, systolic: int, diastolic: int) -> None:
        r = reading(systolic=systolic, diastolic=diastolic)
        assert classify(r) == classify(r)
