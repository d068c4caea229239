"""Output sinks for finished CDR reports."""

from .naming import csv_file_name, workbook_file_name
from .writers import write_csv_reports, write_outputs, write_workbook

__all__ = [
    "csv_file_name",
    "workbook_file_name",
    "write_csv_reports",
    "write_outputs",
    "write_workbook",
]
