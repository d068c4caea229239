"""Aggregation and report assembly."""

from .aggregates import AggregationEngine, CellAggregate, PartyAggregate, classify_direction
from .reports import CDRReport, RunStats, assemble_report, day_span

__all__ = [
    "AggregationEngine",
    "CellAggregate",
    "PartyAggregate",
    "classify_direction",
    "CDRReport",
    "RunStats",
    "assemble_report",
    "day_span",
]
