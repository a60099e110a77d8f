"""Rich console rendering of health records and report statistics."""

from collections.abc import Sequence

from rich.table import Table
from rich.text import Text

from medis.domain.models import Classification, FitnessVerdict, HealthRecord
from medis.services.classifier import bp_stage_color, fitness_color
from medis.services.report_filter import ReportStatistics

# Display color tags -> rich color names
RICH_COLORS = {
    "green": "green",
    "yellow": "yellow",
    "orange": "dark_orange",
    "red": "red",
}


def _styled(label: str, tag: str, bold: bool = False) -> Text:
    style = RICH_COLORS.get(tag, "default")
    return Text(label, style=f"bold {style}" if bold else style)


def render_records_table(records: Sequence[HealthRecord], title: str | None = None) -> Table:
    """Table of records with stage and verdict cells colored by severity."""
    table = Table(title=title, show_lines=False, header_style="bold blue")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Name")
    table.add_column("Badge No.")
    table.add_column("Dept")
    table.add_column("Date")
    table.add_column("BP", justify="right")
    table.add_column("Pulse", justify="right")
    table.add_column("SpO2", justify="right")
    table.add_column("Temp", justify="right")
    table.add_column("BP Status")
    table.add_column("Fitness")
    table.add_column("Note")

    for record in records:
        reading = record.reading
        table.add_row(
            record.record_id[:8],
            record.name,
            record.badge_number,
            record.department,
            record.check_date.isoformat(),
            f"{reading.systolic}/{reading.diastolic}",
            str(reading.pulse),
            f"{reading.spo2:g}%",
            f"{reading.temperature:g}°C",
            _styled(record.bp_stage.value, record.color),
            _styled(record.fitness.value, fitness_color(record.fitness), bold=True),
            record.note or "-",
        )
    return table


def render_statistics(stats: ReportStatistics) -> Text:
    text = Text(f"Total: {stats.total}  ")
    text.append(f"FIT: {stats.fit} ({stats.fit_percentage}%)  ", style="green")
    text.append(
        f"FIT WITH NOTE: {stats.fit_with_note} ({stats.fit_with_note_percentage}%)  ",
        style=RICH_COLORS["orange"],
    )
    text.append(f"UNFIT: {stats.unfit} ({stats.unfit_percentage}%)", style="red")
    return text


def render_classification(
    classification: Classification, parameters: dict[str, FitnessVerdict] | None = None
) -> Table:
    """Two-column preview of a classification and, optionally, per-parameter tiers."""
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Policy", classification.policy.value)
    table.add_row(
        "BP Status",
        _styled(classification.bp_stage.value, bp_stage_color(classification.bp_stage)),
    )
    table.add_row(
        "Fitness",
        _styled(classification.fitness.value, classification.fitness_color, bold=True),
    )
    for name, tier in (parameters or {}).items():
        table.add_row(f"  {name.replace('_', ' ')}", _styled(tier.value, fitness_color(tier)))
    return table
