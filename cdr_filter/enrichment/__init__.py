"""Reference data loading and record enrichment."""

from .lookup import EnrichmentHits, enrich_row, find_cell, find_lrn
from .reference import CellInfo, LRNInfo, ReferenceData, load_cells, load_lrn

__all__ = [
    "EnrichmentHits",
    "enrich_row",
    "find_cell",
    "find_lrn",
    "CellInfo",
    "LRNInfo",
    "ReferenceData",
    "load_cells",
    "load_lrn",
]
