"""Assemble the ranked and summary tables of a finished CDR run."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import polars as pl

from cdr_filter.analysis.aggregates import AggregationEngine, CellAggregate
from cdr_filter.config.canonical import CANONICAL_HEADER
from cdr_filter.transforms.utils import parse_iso_date

UNKNOWN = "Unknown"
UNKNOWN_SPAN = "unknown"

REPORT_SCHEMA: Dict[str, pl.DataType] = {name: pl.Utf8 for name in CANONICAL_HEADER}

SUMMARY_SCHEMA: Dict[str, pl.DataType] = {
    "CdrNo": pl.Utf8,
    "B Party": pl.Utf8,
    "B Party SDR": pl.Utf8,
    "Provider": pl.Utf8,
    "Type": pl.Utf8,
    "Total Calls": pl.Int64,
    "Out Calls": pl.Int64,
    "In Calls": pl.Int64,
    "Out Sms": pl.Int64,
    "In Sms": pl.Int64,
    "Other Calls": pl.Int64,
    "Roam Calls": pl.Int64,
    "Roam Sms": pl.Int64,
    "Total Duration": pl.Int64,
    "Total Days": pl.Int64,
    "Total CellIds": pl.Int64,
    "Total Imei": pl.Int64,
    "Total Imsi": pl.Int64,
    "First Call": pl.Utf8,
    "Last Call": pl.Utf8,
}

MAX_CALLS_SCHEMA: Dict[str, pl.DataType] = {
    "CdrNo": pl.Utf8,
    "B Party": pl.Utf8,
    "B Party SDR": pl.Utf8,
    "Total Calls": pl.Int64,
    "Provider": pl.Utf8,
}

MAX_DURATION_SCHEMA: Dict[str, pl.DataType] = {
    "CdrNo": pl.Utf8,
    "B Party": pl.Utf8,
    "B Party SDR": pl.Utf8,
    "Total Duration": pl.Int64,
    "Provider": pl.Utf8,
}

MAX_STAY_SCHEMA: Dict[str, pl.DataType] = {
    "CdrNo": pl.Utf8,
    "Cell ID": pl.Utf8,
    "Total Calls": pl.Int64,
    "Days": pl.Utf8,
    "Tower Address": pl.Utf8,
    "Latitude": pl.Utf8,
    "Longitude": pl.Utf8,
    "Azimuth": pl.Utf8,
    "Roaming": pl.Utf8,
    "First Call": pl.Utf8,
    "Last Call": pl.Utf8,
}


@dataclass
class RunStats:
    rows_read: int = 0
    rows_emitted: int = 0
    drops: Counter = field(default_factory=Counter)

    @property
    def rows_dropped(self) -> int:
        return sum(self.drops.values())

    def drop(self, reason: str) -> None:
        self.drops[reason] += 1


@dataclass
class CDRReport:
    """Everything a run produces; sinks only read from it."""

    identifier: str
    operator: str
    report: pl.DataFrame
    summary: pl.DataFrame
    max_calls: pl.DataFrame
    max_duration: pl.DataFrame
    max_stay: pl.DataFrame
    stats: RunStats = field(default_factory=RunStats)

    def tables(self) -> Dict[str, pl.DataFrame]:
        """Tables keyed by their sheet/file name, in output order."""
        return {
            "report": self.report,
            "summary": self.summary,
            "max_calls": self.max_calls,
            "max_duration": self.max_duration,
            "max_stay": self.max_stay,
        }


def whole_seconds(seconds: float) -> int:
    """Durations are reported as whole seconds."""
    return int(round(seconds))


def day_span(first_call: str, last_call: str) -> str:
    """Inclusive number of calendar days between two timestamps."""
    first = parse_iso_date(first_call)
    last = parse_iso_date(last_call)
    if first is None or last is None:
        return UNKNOWN_SPAN
    return str((last - first).days + 1)


def _frame(rows: List[tuple], schema: Dict[str, pl.DataType]) -> pl.DataFrame:
    return pl.DataFrame(rows, schema=schema, orient="row")


def build_summary(identifier: str, engine: AggregationEngine) -> pl.DataFrame:
    rows = [
        (
            identifier,
            p.party,
            p.sdr,
            p.provider,
            p.type,
            p.total,
            p.out_calls,
            p.in_calls,
            p.out_sms,
            p.in_sms,
            p.other,
            p.roam_calls,
            p.roam_sms,
            whole_seconds(p.total_duration),
            len(p.days),
            len(p.cells),
            len(p.imeis),
            len(p.imsis),
            p.first_call,
            p.last_call,
        )
        for p in engine.parties.values()
    ]
    return _frame(rows, SUMMARY_SCHEMA)


def build_max_calls(identifier: str, engine: AggregationEngine) -> pl.DataFrame:
    rows = [
        (identifier, p.party, p.sdr, p.total, p.provider or UNKNOWN)
        for p in engine.parties.values()
    ]
    return _frame(rows, MAX_CALLS_SCHEMA).sort(
        ["Total Calls", "B Party"], descending=[True, False]
    )


def build_max_duration(identifier: str, engine: AggregationEngine) -> pl.DataFrame:
    rows = [
        (identifier, p.party, p.sdr, whole_seconds(p.total_duration), p.provider or UNKNOWN)
        for p in engine.parties.values()
    ]
    return _frame(rows, MAX_DURATION_SCHEMA).sort(
        ["Total Duration", "B Party"], descending=[True, False]
    )


def _stay_row(identifier: str, c: CellAggregate) -> tuple:
    return (
        identifier,
        c.cell_id,
        c.calls,
        day_span(c.first_call, c.last_call),
        c.address or UNKNOWN,
        c.latitude or "0",
        c.longitude or "0",
        c.azimuth or "0",
        c.roaming or UNKNOWN,
        c.first_call,
        c.last_call,
    )


def build_max_stay(identifier: str, engine: AggregationEngine) -> pl.DataFrame:
    rows = [_stay_row(identifier, c) for c in engine.cells.values()]
    return _frame(rows, MAX_STAY_SCHEMA).sort(
        ["Total Calls", "Cell ID"], descending=[True, False]
    )


def assemble_report(
    identifier: str,
    operator: str,
    records: Sequence[List[str]],
    engine: AggregationEngine,
    stats: RunStats,
) -> CDRReport:
    """Derive every output table from the final aggregate state."""
    return CDRReport(
        identifier=identifier,
        operator=operator,
        report=_frame([tuple(r) for r in records], REPORT_SCHEMA),
        summary=build_summary(identifier, engine),
        max_calls=build_max_calls(identifier, engine),
        max_duration=build_max_duration(identifier, engine),
        max_stay=build_max_stay(identifier, engine),
        stats=stats,
    )
