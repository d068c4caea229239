"""Output file and sheet naming."""

import re

REPORT_FILE_SUFFIXES = {
    "report": "reports",
    "summary": "summary_reports",
    "max_calls": "max_calls_reports",
    "max_duration": "max_duration_reports",
    "max_stay": "max_stay_reports",
}

SHEET_NAMES = tuple(REPORT_FILE_SUFFIXES)

_UNSAFE_RE = re.compile(r"[^A-Za-z0-9._-]+")


def safe_stem(value: str) -> str:
    """File-name-safe version of an identifier or operator name."""
    return _UNSAFE_RE.sub("_", (value or "").strip()).strip("_") or "unknown"


def csv_file_name(identifier: str, table: str) -> str:
    """`{cdr}_summary_reports.csv` style name for one table."""
    return f"{safe_stem(identifier)}_{REPORT_FILE_SUFFIXES[table]}.csv"


def workbook_file_name(identifier: str, operator: str) -> str:
    return f"{safe_stem(identifier)}_{safe_stem(operator)}_all_reports.xlsx"
