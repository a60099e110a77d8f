"""
PDF export of health records using reportlab.

Layout: landscape A4, a title, the print date, one table row per record and
a summary line. The BP Status cell is derived from the stored pressures and
the Fitness cell shows the frozen verdict; both are filled with the
severity palette of their label.
"""

import io
import os
from collections.abc import Sequence
from datetime import date
from pathlib import Path
from xml.sax.saxutils import escape

import structlog
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from medis.domain.models import HealthRecord
from medis.services.classifier import (
    RGB,
    classify_blood_pressure,
    stage_fill_rgb,
    verdict_fill_rgb,
)
from medis.services.report_filter import (
    ReportSelection,
    report_title,
    select_records,
    summarize,
)

logger = structlog.get_logger(__name__)

REPORT_COLUMNS = [
    "Name",
    "Badge No.",
    "Age",
    "Position",
    "Supervisor",
    "Department",
    "Systolic",
    "Diastolic",
    "Pulse",
    "SpO2",
    "Temp",
    "Date",
    "BP Status",
    "Fitness",
    "Note",
]
BP_STATUS_COLUMN = REPORT_COLUMNS.index("BP Status")
FITNESS_COLUMN = REPORT_COLUMNS.index("Fitness")
NOTE_COLUMN = REPORT_COLUMNS.index("Note")

# Notes wrap inside this width; every other column is sized to its content.
NOTE_WIDTH = 60 * mm
NOTE_STYLE = ParagraphStyle("ReportNote", fontName="Helvetica", fontSize=7, leading=8.5)

HEADER_FILL: RGB = (59, 130, 246)


def _color(rgb: RGB) -> colors.Color:
    r, g, b = rgb
    return colors.Color(r / 255, g / 255, b / 255)


def _format_number(value: float) -> str:
    # 97.0 -> "97", 36.8 -> "36.8"
    return f"{value:g}"


def record_row(record: HealthRecord) -> list[str]:
    """One table row in `REPORT_COLUMNS` order."""
    reading = record.reading
    return [
        record.name,
        record.badge_number,
        str(record.age),
        record.position,
        record.supervisor,
        record.department,
        str(reading.systolic),
        str(reading.diastolic),
        str(reading.pulse),
        f"{_format_number(reading.spo2)}%",
        f"{_format_number(reading.temperature)}°C",
        record.check_date.isoformat(),
        classify_blood_pressure(reading.systolic, reading.diastolic).value,
        record.fitness.value,
        record.note or "-",
    ]


def table_rows(records: Sequence[HealthRecord]) -> list[list[str | Paragraph]]:
    """Header plus one row per record, with the note as a wrapping paragraph."""
    rows: list[list[str | Paragraph]] = [list(REPORT_COLUMNS)]
    for record in records:
        cells = record_row(record)
        note = Paragraph(escape(cells[NOTE_COLUMN]), NOTE_STYLE)
        rows.append([*cells[:NOTE_COLUMN], note, *cells[NOTE_COLUMN + 1 :]])
    return rows


def _table_style(records: Sequence[HealthRecord]) -> TableStyle:
    commands: list[tuple] = [
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 7),
        ("BACKGROUND", (0, 0), (-1, 0), _color(HEADER_FILL)),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ]
    for row, record in enumerate(records, start=1):
        stage = classify_blood_pressure(record.reading.systolic, record.reading.diastolic)
        bp_cell = (BP_STATUS_COLUMN, row)
        fit_cell = (FITNESS_COLUMN, row)
        commands.append(("BACKGROUND", bp_cell, bp_cell, _color(stage_fill_rgb(stage))))
        commands.append(("BACKGROUND", fit_cell, fit_cell, _color(verdict_fill_rgb(record.fitness))))
        commands.append(("FONTNAME", fit_cell, fit_cell, "Helvetica-Bold"))
    return TableStyle(commands)


def build_report_pdf(
    records: Sequence[HealthRecord],
    selection: ReportSelection,
    printed_on: date | None = None,
    title_prefix: str = "Employee Health Report",
) -> bytes:
    """
    Render the records covered by `selection` as a PDF document.

    Args:
        records: All records; `selection` picks the ones to print.
        selection: Daily, weekly or all-records selection.
        printed_on: Date shown as the print date (defaults to today).
        title_prefix: Report name used in the title.

    Returns:
        The PDF file contents.
    """
    printed_on = printed_on or date.today()
    selected = select_records(records, selection)
    stats = summarize(selected)

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=landscape(A4),
        leftMargin=10 * mm,
        rightMargin=10 * mm,
        topMargin=12 * mm,
        bottomMargin=10 * mm,
        title=report_title(selection, title_prefix),
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "ReportTitle",
        parent=styles["Heading1"],
        fontSize=18,
        spaceAfter=6,
    )
    small_style = ParagraphStyle(
        "ReportSmall",
        parent=styles["Normal"],
        fontSize=10,
        spaceAfter=8,
    )

    elements = [
        Paragraph(report_title(selection, title_prefix), title_style),
        Paragraph(f"Printed: {printed_on.strftime('%d/%m/%Y')}", small_style),
        Spacer(1, 4),
    ]

    widths: list[float | None] = [None] * len(REPORT_COLUMNS)
    widths[NOTE_COLUMN] = NOTE_WIDTH
    table = Table(table_rows(selected), colWidths=widths, repeatRows=1)
    table.setStyle(_table_style(selected))
    elements.append(table)
    elements.append(Spacer(1, 8))
    elements.append(
        Paragraph(
            f"Total: {stats.total} | FIT: {stats.fit} ({stats.fit_percentage}%) | "
            f"FIT WITH NOTE: {stats.fit_with_note} ({stats.fit_with_note_percentage}%) | "
            f"UNFIT: {stats.unfit} ({stats.unfit_percentage}%)",
            small_style,
        )
    )

    doc.build(elements)
    logger.info("report_rendered", kind=selection.kind, rows=len(selected))
    return buffer.getvalue()


def write_report_pdf(
    path: str | os.PathLike[str],
    records: Sequence[HealthRecord],
    selection: ReportSelection,
    printed_on: date | None = None,
    title_prefix: str = "Employee Health Report",
) -> Path:
    """Write the report to `path`, creating parent directories. Returns the path."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(build_report_pdf(records, selection, printed_on, title_prefix))
    logger.info("report_exported", path=str(out), kind=selection.kind)
    return out
