"""
Core services for the application.

This package contains the vitals classifier, the record store and the
report selection logic.
"""

from .classifier import (
    assess_parameters,
    bp_stage_color,
    classify,
    classify_blood_pressure,
    classify_fitness,
    fitness_color,
    requires_note,
)
from .record_store import RecordStorage, RecordStore
from .report_filter import (
    ReportSelection,
    ReportStatistics,
    parse_week_label,
    select_records,
    simple_week_number,
    summarize,
    week_label,
)

__all__ = [
    "RecordStorage",
    "RecordStore",
    "ReportSelection",
    "ReportStatistics",
    "assess_parameters",
    "bp_stage_color",
    "classify",
    "classify_blood_pressure",
    "classify_fitness",
    "fitness_color",
    "parse_week_label",
    "requires_note",
    "select_records",
    "simple_week_number",
    "summarize",
    "week_label",
]
