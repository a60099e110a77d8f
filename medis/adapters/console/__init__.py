from .table import render_classification, render_records_table, render_statistics

__all__ = ["render_classification", "render_records_table", "render_statistics"]
