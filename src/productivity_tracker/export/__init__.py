"""Tabular export of the session log."""

from productivity_tracker.export.csv_writer import HEADERS, render_csv, write_csv

__all__ = ["HEADERS", "render_csv", "write_csv"]
