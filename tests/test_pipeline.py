import polars as pl
import pytest
from polars.testing import assert_frame_equal

from cdr_filter import CDRProcessor, HeaderNotFoundError, MissingColumnError
from cdr_filter.config import CANONICAL_HEADER, Field
from cdr_filter.enrichment import ReferenceData

# --- End-to-end runs over in-memory exports ---


@pytest.fixture
def processor(reference):
    return CDRProcessor(reference)


def test_every_data_row_becomes_one_canonical_row(processor, jio_text, rows_of, subject):
    report = processor.process_stream(rows_of(jio_text), "jio", crime="FIR-7")

    assert report.identifier == subject
    assert report.operator == "jio"
    assert report.report.columns == list(CANONICAL_HEADER)
    assert report.report.height == 4
    assert report.stats.rows_read == 4
    assert report.stats.rows_emitted == 4
    assert report.stats.rows_dropped == 0
    assert report.report["CdrNo"].unique().to_list() == [subject]
    assert report.report["Crime"].unique().to_list() == ["FIR-7"]
    assert report.report["B Party"].to_list() == ["9123456789", "9123456789", "9000000001", "9123456789"]


def test_enrichment_and_reports_end_to_end(processor, jio_text, rows_of):
    report = processor.process_stream(rows_of(jio_text), "jio")
    first = report.report.row(0, named=True)

    assert first["First Cell ID"] == "404861001"
    assert first["First Cell ID Address"] == "MG Road Tower"
    assert first["Lat-Long-Azimuth (First CellID)"] == "12.97, 77.64, 120"
    assert first["Last Cell ID Address"] == "Ring Road Tower"
    assert first["B Party Provider"] == "Airtel"
    assert first["Call Type"] == "CALL_OUT"
    assert first["Type"] == "Phone"

    top = report.max_calls.row(0, named=True)
    assert (top["B Party"], top["Total Calls"], top["Provider"]) == ("9123456789", 3, "Airtel")
    assert report.max_calls.row(1, named=True)["Provider"] == "Unknown"

    stay = report.max_stay.row(0, named=True)
    assert stay["Cell ID"] == "404861001"
    assert stay["Total Calls"] == 3
    assert stay["First Call"] == "2024-01-01 09:00:00"
    assert stay["Last Call"] == "2024-01-03 08:00:00"
    assert stay["Days"] == "3"
    assert stay["Roaming"] == "Unknown"

    summary = report.summary.filter(pl.col("B Party") == "9123456789").row(0, named=True)
    assert summary["Total Calls"] == 3
    assert summary["Out Calls"] == 2
    assert summary["In Calls"] == 1
    assert summary["Roam Calls"] == 1
    assert summary["Total Duration"] == 30
    assert summary["Total Days"] == 3
    assert summary["Total CellIds"] == 3


def test_ranking_is_monotonic(processor, jio_text, rows_of):
    report = processor.process_stream(rows_of(jio_text), "jio")
    calls = report.max_calls["Total Calls"].to_list()
    assert all(a >= b for a, b in zip(calls, calls[1:]))


def test_rerun_is_identical(processor, jio_text, rows_of):
    first = processor.process_stream(rows_of(jio_text), "jio", crime="FIR-7")
    second = processor.process_stream(rows_of(jio_text), "jio", crime="FIR-7")
    for name, df in first.tables().items():
        assert_frame_equal(df, second.tables()[name])


def test_malformed_rows_are_dropped_and_counted(processor, make_cdr, rows_of, jio_rows):
    rows = jio_rows + ["", "1,2,3", jio_rows[0] + ",,", '"This is system generated CDR"']
    report = processor.process_stream(rows_of(make_cdr(rows)), "jio")

    assert report.stats.rows_read == 8
    assert report.stats.rows_emitted == 5
    assert report.stats.rows_dropped == 3
    assert dict(report.stats.drops) == {"blank": 1, "field_count": 1, "trailer": 1}
    assert report.report.height == report.stats.rows_emitted


def test_parse_errors_from_reader_are_dropped(processor, jio_text, rows_of):
    rows = list(rows_of(jio_text))
    rows.insert(4, None)
    report = processor.process_stream(iter(rows), "jio")
    assert report.stats.drops["parse_error"] == 1
    assert report.report.height == 4


def test_identifier_from_filename(processor, make_cdr, tmp_path):
    path = tmp_path / "9876543210.csv"
    path.write_text(make_cdr(banner=False), encoding="utf-8")

    report = processor.process_file(str(path), "jio")
    assert report.identifier == "9876543210"
    assert report.report["CdrNo"].unique().to_list() == ["9876543210"]


def test_truncated_file_fails_without_output(processor, rows_of):
    with pytest.raises(HeaderNotFoundError, match="no header"):
        processor.process_stream(rows_of('"Input Value : 9876543210"\n'), "jio")


def test_missing_cell_column_fails(processor, rows_of):
    text = "Call Date,First Cell ID,Duration\n02/01/2024,1,10\n"
    with pytest.raises(MissingColumnError):
        processor.process_stream(rows_of(text), "vi", source_name="9876543210.csv")


def test_unknown_operator_is_rejected(processor, jio_text, rows_of):
    with pytest.raises(KeyError, match="Unknown operator profile"):
        processor.process_stream(rows_of(jio_text), "mtnl")


def test_airtel_keeps_source_values_over_reference(reference, rows_of):
    text = (
        "Mobile No : 9876543210\n"
        "Target No,Call Date,Call Time,B Party No,Call Type,Dur(s),First CGI,Last CGI,"
        "First Cell ID Address,LRN No,LRN TSP-LSA\n"
        "9876543210,02/01/2024,10:00:00,919123456789,OUT,30,404-86-100-1,404-86-100-2,"
        "Source Address,1234,Vodafone\n"
    )
    report = CDRProcessor(reference).process_stream(rows_of(text), "airtel")
    row = report.report.row(0, named=True)

    assert row["B Party"] == "9123456789"
    assert row["First Cell ID Address"] == "Source Address"
    assert row["B Party Provider"] == "Vodafone"
    # blanks are still filled
    assert row["Sub City (First CellID)"] == "Indiranagar"
    assert row["B Party Circle"] == "Karnataka"
    assert row["Operator"] == "Airtel"


def test_alias_overrides_from_reference(rows_of):
    reference = ReferenceData.build(
        header_aliases={"other party": "B Party"},
        call_type_codes={"VOICE_MO": "CALL_OUT"},
    )
    text = (
        "MSISDN : 9876543210\n"
        "Call Date,Other Party,Call Type,First Cell ID,Last Cell ID\n"
        "02/01/2024,9123456789,voice_mo,1,2\n"
    )
    report = CDRProcessor(reference).process_stream(rows_of(text), "vi")
    row = report.report.row(0)

    assert row[Field.B_PARTY] == "9123456789"
    assert row[Field.CALL_TYPE] == "CALL_OUT"


def test_process_many_isolates_failures(processor, make_cdr, tmp_path):
    good = tmp_path / "good.csv"
    good.write_text(make_cdr(), encoding="utf-8")
    bad = tmp_path / "bad.csv"
    bad.write_text("just,some,text\n", encoding="utf-8")

    reports, failures = processor.process_many([str(good), str(bad)], "jio", workers=2)

    assert list(reports) == [str(good)]
    assert isinstance(failures[str(bad)], HeaderNotFoundError)


def test_parallel_runs_do_not_share_state(processor, make_cdr, tmp_path):
    paths = []
    for i in range(3):
        path = tmp_path / f"cdr_{i}.csv"
        path.write_text(make_cdr(), encoding="utf-8")
        paths.append(str(path))

    reports, failures = processor.process_many(paths, "jio", workers=3)

    assert not failures
    baseline = reports[paths[0]]
    for path in paths[1:]:
        assert_frame_equal(reports[path].summary, baseline.summary)
        assert reports[path].stats.rows_emitted == 4
