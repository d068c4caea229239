"""Persist a CDRReport as CSV files or as one multi-sheet workbook."""

import logging
from pathlib import Path
from typing import Dict, List, Union

import pandas as pd

from cdr_filter.analysis.reports import CDRReport
from cdr_filter.outputs.naming import SHEET_NAMES, csv_file_name, workbook_file_name

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def write_csv_reports(report: CDRReport, output_dir: PathLike) -> Dict[str, Path]:
    """Write each table to `{cdr}_<table>_reports.csv`; returns table -> path."""
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    written: Dict[str, Path] = {}
    for table, df in report.tables().items():
        path = out / csv_file_name(report.identifier, table)
        df.write_csv(path)
        written[table] = path
    logger.info(f"Wrote {len(written)} CSV reports for {report.identifier} to {out}")
    return written


def write_workbook(report: CDRReport, output_dir: PathLike) -> Path:
    """Write every table as a sheet of `{cdr}_{operator}_all_reports.xlsx`."""
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    path = out / workbook_file_name(report.identifier, report.operator)
    tables = report.tables()
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet in SHEET_NAMES:
            df = tables[sheet]
            pdf = pd.DataFrame({c: df[c].to_list() for c in df.columns}, columns=df.columns)
            pdf.to_excel(writer, sheet_name=sheet, index=False)
    logger.info(f"Wrote workbook {path}")
    return path


def write_outputs(report: CDRReport, output_dir: PathLike, fmt: str = "csv") -> List[Path]:
    """Dispatch to the sinks selected by fmt (csv, xlsx or both)."""
    paths: List[Path] = []
    if fmt in ("csv", "both"):
        paths.extend(write_csv_reports(report, output_dir).values())
    if fmt in ("xlsx", "both"):
        paths.append(write_workbook(report, output_dir))
    if not paths:
        raise ValueError(f"Unsupported output format: {fmt}")
    return paths
