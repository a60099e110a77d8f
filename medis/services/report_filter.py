"""
Report selection: daily and weekly filters plus summary statistics.

Weeks use a simplified numbering, not ISO-8601: week = ceil(day_of_year / 7)
with Jan 1 as day 1. Every year starts at week 1 on Jan 1 and early-January
dates never roll back into the previous year. Existing exports depend on this
numbering, so it is kept as is.
"""

import math
import re
from collections.abc import Iterable
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Literal

from pydantic import BaseModel, Field, computed_field, model_validator

from medis.domain.models import FitnessVerdict, HealthRecord

ReportKind = Literal["daily", "weekly", "all"]

_WEEK_LABEL = re.compile(r"^(\d{4})-W(\d{1,2})$")


def simple_week_number(day: date) -> int:
    """Week of the year, counting 7-day blocks from Jan 1."""
    day_of_year = day.timetuple().tm_yday
    return math.ceil(day_of_year / 7)


def week_label(day: date) -> str:
    """Label such as ``2024-W01`` for the week containing `day`."""
    return f"{day.year}-W{simple_week_number(day):02d}"


def parse_week_label(label: str) -> tuple[int, int]:
    """Parse ``YYYY-Www`` (or unpadded ``YYYY-Ww``) into ``(year, week)``."""
    match = _WEEK_LABEL.match(label.strip())
    if not match:
        raise ValueError(f"Invalid week label {label!r}, expected YYYY-Www")
    year, week = int(match.group(1)), int(match.group(2))
    if not 1 <= week <= 53:
        raise ValueError(f"Week {week} out of range in {label!r}")
    return year, week


def daily_records(records: Iterable[HealthRecord], day: date) -> list[HealthRecord]:
    return [r for r in records if r.check_date == day]


def weekly_records(records: Iterable[HealthRecord], year: int, week: int) -> list[HealthRecord]:
    return [
        r
        for r in records
        if r.check_date.year == year and simple_week_number(r.check_date) == week
    ]


class ReportSelection(BaseModel):
    """Which records a report covers."""

    kind: ReportKind = "daily"
    day: date | None = None
    week: str | None = Field(default=None, description="Week label, e.g. 2024-W01")

    @model_validator(mode="after")
    def check_kind_arguments(self) -> "ReportSelection":
        if self.kind == "daily" and self.day is None:
            raise ValueError("a daily report needs a day")
        if self.kind == "weekly":
            if self.week is None:
                raise ValueError("a weekly report needs a week label")
            parse_week_label(self.week)
        return self

    @classmethod
    def for_day(cls, day: date) -> "ReportSelection":
        return cls(kind="daily", day=day)

    @classmethod
    def for_week(cls, label: str) -> "ReportSelection":
        return cls(kind="weekly", week=label)

    @classmethod
    def everything(cls) -> "ReportSelection":
        return cls(kind="all")


def _selected_day(selection: ReportSelection) -> date:
    if selection.day is None:
        raise ValueError("a daily report needs a day")
    return selection.day


def _selected_week(selection: ReportSelection) -> tuple[int, int]:
    if selection.week is None:
        raise ValueError("a weekly report needs a week label")
    return parse_week_label(selection.week)


def select_records(
    records: Iterable[HealthRecord], selection: ReportSelection
) -> list[HealthRecord]:
    """Records covered by `selection`, in store order."""
    if selection.kind == "all":
        return list(records)
    if selection.kind == "daily":
        return daily_records(records, _selected_day(selection))
    year, week = _selected_week(selection)
    return weekly_records(records, year, week)


def report_title(selection: ReportSelection, prefix: str = "Employee Health Report") -> str:
    if selection.kind == "all":
        return f"{prefix} - All Records"
    if selection.kind == "daily":
        return f"Daily {prefix} - {_selected_day(selection).strftime('%d/%m/%Y')}"
    year, week = _selected_week(selection)
    return f"Weekly {prefix} - {year}-W{week:02d}"


def report_filename(selection: ReportSelection, printed_on: date) -> str:
    """PDF file name (with extension) for a report printed on `printed_on`."""
    if selection.kind == "all":
        stem = f"health-report-all-{printed_on.isoformat()}"
    elif selection.kind == "daily":
        stem = f"health-report-daily-{_selected_day(selection).isoformat()}"
    else:
        year, week = _selected_week(selection)
        stem = f"health-report-weekly-{year}-W{week:02d}"
    return f"{stem}.pdf"


class ReportStatistics(BaseModel):
    """Verdict counts for a set of records."""

    total: int = Field(ge=0)
    fit: int = Field(ge=0)
    fit_with_note: int = Field(ge=0)
    unfit: int = Field(ge=0)

    def _percentage(self, count: int) -> float:
        if self.total == 0:
            return 0.0
        # half-up, so 1 of 16 reads 6.3 and not 6.2
        percent = Decimal(count) * 100 / Decimal(self.total)
        return float(percent.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def fit_percentage(self) -> float:
        return self._percentage(self.fit)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def fit_with_note_percentage(self) -> float:
        return self._percentage(self.fit_with_note)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def unfit_percentage(self) -> float:
        return self._percentage(self.unfit)


def summarize(records: Iterable[HealthRecord]) -> ReportStatistics:
    """Count frozen verdicts; labels are never recomputed here."""
    records = list(records)
    return ReportStatistics(
        total=len(records),
        fit=sum(1 for r in records if r.fitness is FitnessVerdict.FIT),
        fit_with_note=sum(1 for r in records if r.fitness is FitnessVerdict.FIT_WITH_NOTE),
        unfit=sum(1 for r in records if r.fitness is FitnessVerdict.UNFIT),
    )
