import openpyxl
import polars as pl
import pytest

import main
from cdr_filter import CDRProcessor
from cdr_filter.outputs import csv_file_name, workbook_file_name, write_csv_reports, write_outputs, write_workbook

REPORT_FILES = [
    "9876543210_reports.csv",
    "9876543210_summary_reports.csv",
    "9876543210_max_calls_reports.csv",
    "9876543210_max_duration_reports.csv",
    "9876543210_max_stay_reports.csv",
]


@pytest.fixture
def report(reference, jio_text, rows_of):
    return CDRProcessor(reference).process_stream(rows_of(jio_text), "jio", crime="FIR-7")


def test_file_names():
    assert csv_file_name("9876543210", "max_stay") == "9876543210_max_stay_reports.csv"
    assert workbook_file_name("9876543210", "jio") == "9876543210_jio_all_reports.xlsx"
    assert csv_file_name("98/76", "report") == "98_76_reports.csv"


def test_csv_sink_writes_every_table(report, tmp_path):
    written = write_csv_reports(report, tmp_path / "filtered")

    assert sorted(p.name for p in written.values()) == sorted(REPORT_FILES)
    rows = pl.read_csv(written["report"], infer_schema_length=0)
    assert rows.columns == report.report.columns
    assert rows.height == 4
    calls = pl.read_csv(written["max_calls"])
    assert calls["Total Calls"].to_list() == report.max_calls["Total Calls"].to_list()
    durations = pl.read_csv(written["summary"], infer_schema_length=0)["Total Duration"].to_list()
    assert durations and all(v.isdigit() for v in durations)


def test_workbook_sink_has_one_sheet_per_table(report, tmp_path):
    path = write_workbook(report, tmp_path)

    assert path.name == "9876543210_jio_all_reports.xlsx"
    wb = openpyxl.load_workbook(path, read_only=True)
    assert wb.sheetnames == ["report", "summary", "max_calls", "max_duration", "max_stay"]
    header = next(wb["report"].iter_rows(min_row=1, max_row=1, values_only=True))
    assert list(header) == report.report.columns
    wb.close()


def test_unknown_format_rejected(report, tmp_path):
    with pytest.raises(ValueError):
        write_outputs(report, tmp_path, "parquet")


def test_cli_end_to_end(tmp_path, make_cdr, monkeypatch):
    for key in ("OPERATOR", "FORMAT", "OUTPUT_DIR", "CELLS", "LRN"):
        monkeypatch.delenv(f"CDR_{key}", raising=False)
    cdr = tmp_path / "upload.csv"
    cdr.write_text(make_cdr(), encoding="utf-8")
    cells = tmp_path / "cells.csv"
    cells.write_text("CGI,Address,Latitude,Longitude\n404-86-100-1,MG Road,12.9,77.6\n", encoding="utf-8")
    lrn = tmp_path / "LRN.csv"
    lrn.write_text("LRN,TSP,Circle\n1234,Airtel,Karnataka\n", encoding="utf-8")
    out = tmp_path / "out"

    code = main.main([
        str(cdr), "--operator", "jio", "--crime", "FIR-7",
        "--cells", str(cells), "--lrn", str(lrn),
        "--output-dir", str(out), "--format", "both",
    ])

    assert code == 0
    names = sorted(p.name for p in out.iterdir())
    assert names == sorted(REPORT_FILES + ["9876543210_jio_all_reports.xlsx"])
    summary = pl.read_csv(out / "9876543210_summary_reports.csv", infer_schema_length=0)
    assert "Airtel" in summary["Provider"].to_list()


def test_cli_fatal_error_writes_nothing(tmp_path):
    cdr = tmp_path / "truncated.csv"
    cdr.write_text('"Input Value : 9876543210"\n', encoding="utf-8")
    out = tmp_path / "out"

    code = main.main([str(cdr), "--output-dir", str(out)])

    assert code == 1
    assert not out.exists() or not any(out.iterdir())
