from .report import (
    NOTE_COLUMN,
    NOTE_WIDTH,
    REPORT_COLUMNS,
    build_report_pdf,
    record_row,
    table_rows,
    write_report_pdf,
)

__all__ = [
    "NOTE_COLUMN",
    "NOTE_WIDTH",
    "REPORT_COLUMNS",
    "build_report_pdf",
    "record_row",
    "table_rows",
    "write_report_pdf",
]
