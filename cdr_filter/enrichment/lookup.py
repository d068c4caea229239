"""Fill cell geography and B party routing fields from the reference tables."""

from dataclasses import dataclass
from typing import List, Optional

from cdr_filter.config.canonical import Field
from cdr_filter.enrichment.reference import CellInfo, LRNInfo, ReferenceData, cell_keys
from cdr_filter.transforms.normalizer import NormalizedRow
from cdr_filter.transforms.utils import digits


@dataclass
class EnrichmentHits:
    first_cell: bool = False
    last_cell: bool = False
    lrn: bool = False


def find_cell(reference: ReferenceData, *ids: str) -> Optional[CellInfo]:
    """First table hit over the raw, separator-free and digits-only forms of ids."""
    for cell_id in ids:
        for key in cell_keys(cell_id):
            info = reference.cells.get(key)
            if info is not None:
                return info
    return None


def find_lrn(reference: ReferenceData, lrn: str) -> Optional[LRNInfo]:
    key = digits(lrn)
    return reference.lrn.get(key) if key else None


def _put(record: List[str], target: Field, value: str, overwrite: bool) -> None:
    # A blank reference value never erases source data
    if not value:
        return
    if overwrite or not record[target]:
        record[target] = value


def enrich_row(row: NormalizedRow, reference: ReferenceData, overwrite: bool) -> EnrichmentHits:
    """Apply cell and LRN lookups to row.record in place.

    overwrite=True lets a hit replace values copied from the source;
    overwrite=False only fills blanks. Misses leave the record untouched.
    """
    record = row.record
    hits = EnrichmentHits()

    first = find_cell(reference, row.first_cell_raw, record[Field.FIRST_CELL_ID])
    if first is not None:
        hits.first_cell = True
        _put(record, Field.FIRST_CELL_ADDRESS, first.address, overwrite)
        _put(record, Field.SUB_CITY, first.sub_city, overwrite)
        _put(record, Field.MAIN_CITY, first.main_city, overwrite)
        _put(record, Field.LAT_LONG_AZIMUTH, first.lat_long_azimuth, overwrite)

    last = find_cell(reference, row.last_cell_raw, record[Field.LAST_CELL_ID])
    if last is not None:
        hits.last_cell = True
        _put(record, Field.LAST_CELL_ADDRESS, last.address, overwrite)

    routing = find_lrn(reference, record[Field.LRN])
    if routing is not None:
        hits.lrn = True
        _put(record, Field.B_PARTY_PROVIDER, routing.provider, overwrite)
        _put(record, Field.B_PARTY_CIRCLE, routing.circle, overwrite)
        _put(record, Field.B_PARTY_OPERATOR, routing.operator, overwrite)

    return hits
