"""Static reference tables: cell towers, LRN routing, externalized aliases.

Everything here is loaded once and frozen. A ReferenceData instance is safe
to share between concurrent runs.
"""

import logging
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Sequence, Tuple

import pandas as pd
import polars as pl

from cdr_filter.config.canonical import (
    CALL_IN,
    CALL_OUT,
    CANONICAL_HEADER,
    SMS_IN,
    SMS_OUT,
)
from cdr_filter.readers.csv_reader import CSVReader, detect_delimiter, detect_encoding
from cdr_filter.transforms.utils import clean_cell_id, digits, normalize_header, strip_quotes

logger = logging.getLogger(__name__)

SQLITE_SUFFIXES = (".db", ".sqlite", ".sqlite3")
CELL_TABLE = "cellids"

CELL_COLUMNS: Dict[str, Tuple[str, ...]] = {
    "cell_id": ("cgi", "cell id", "cellid", "cell_id"),
    "address": ("address", "tower address", "site address"),
    "sub_city": ("subcity", "sub city"),
    "main_city": ("maincity", "main city", "city"),
    "latitude": ("latitude", "lat"),
    "longitude": ("longitude", "lon", "long"),
    "azimuth": ("azimuth", "azm", "az"),
}

LRN_COLUMNS: Dict[str, Tuple[str, ...]] = {
    "lrn": ("lrn", "lrn no", "lrn number", "lrn_no"),
    "provider": ("tsp", "provider", "tsp-lsa"),
    "circle": ("circle", "lsa"),
}

_CANONICAL_BY_NORM = {normalize_header(name): name for name in CANONICAL_HEADER}
_CALL_TYPES = {CALL_IN, CALL_OUT, SMS_IN, SMS_OUT}


@dataclass(frozen=True)
class CellInfo:
    address: str = ""
    sub_city: str = ""
    main_city: str = ""
    latitude: str = ""
    longitude: str = ""
    azimuth: str = ""

    @property
    def lat_long_azimuth(self) -> str:
        if not self.latitude or not self.longitude:
            return ""
        if self.azimuth:
            return f"{self.latitude}, {self.longitude}, {self.azimuth}"
        return f"{self.latitude}, {self.longitude}"


@dataclass(frozen=True)
class LRNInfo:
    provider: str = ""
    circle: str = ""
    operator: str = ""


def _freeze(mapping: Optional[Mapping]) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class ReferenceData:
    """Immutable lookup tables injected into every pipeline run."""

    cells: Mapping[str, CellInfo] = field(default_factory=lambda: MappingProxyType({}))
    lrn: Mapping[str, LRNInfo] = field(default_factory=lambda: MappingProxyType({}))
    header_aliases: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    call_type_codes: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def build(
        cls,
        cells: Optional[Mapping[str, CellInfo]] = None,
        lrn: Optional[Mapping[str, LRNInfo]] = None,
        header_aliases: Optional[Mapping[str, str]] = None,
        call_type_codes: Optional[Mapping[str, str]] = None,
    ) -> "ReferenceData":
        """Index plain id -> info mappings under every lookup key form."""
        cell_index: Dict[str, CellInfo] = {}
        for raw_id, info in (cells or {}).items():
            for key in cell_keys(raw_id):
                cell_index.setdefault(key, info)
        lrn_index: Dict[str, LRNInfo] = {}
        for raw_lrn, info in (lrn or {}).items():
            key = digits(raw_lrn)
            if key:
                lrn_index.setdefault(key, info)
        aliases = {normalize_header(k): v for k, v in (header_aliases or {}).items()}
        codes = {" ".join(k.upper().split()): v for k, v in (call_type_codes or {}).items()}
        return cls(_freeze(cell_index), _freeze(lrn_index), _freeze(aliases), _freeze(codes))

    @classmethod
    def load(
        cls,
        cells: Optional[str] = None,
        lrn: Optional[str] = None,
        headers: Optional[str] = None,
        call_types: Optional[str] = None,
    ) -> "ReferenceData":
        """Load every configured reference file; None paths are skipped."""
        cell_table = load_cells(cells) if cells else {}
        lrn_table = load_lrn(lrn) if lrn else {}
        aliases: Dict[str, str] = load_header_aliases(headers) if headers else {}
        codes: Dict[str, str] = {}
        if call_types:
            type_aliases, codes = load_call_types(call_types)
            aliases.update(type_aliases)
        ref = cls.build(cell_table, lrn_table, aliases, codes)
        logger.info(
            f"Reference data: {len(cell_table)} cells, {len(lrn_table)} LRN entries, "
            f"{len(aliases)} header aliases, {len(codes)} call type codes"
        )
        return ref


def cell_keys(cell_id: str) -> Tuple[str, ...]:
    """Lookup keys for a cell id in order: raw, separator-free, digits-only."""
    raw = strip_quotes(cell_id)
    keys = []
    for key in (raw, clean_cell_id(raw), digits(raw)):
        if key and key not in keys:
            keys.append(key)
    return tuple(keys)


def _match_column(columns: Sequence[str], candidates: Sequence[str]) -> Optional[str]:
    by_norm = {}
    for c in columns:
        by_norm.setdefault(normalize_header(c), c)
    for candidate in candidates:
        if candidate in by_norm:
            return by_norm[candidate]
    return None


def _select_columns(
    df: pl.DataFrame, wanted: Mapping[str, Sequence[str]], required: Sequence[str], source: str
) -> pl.DataFrame:
    """Project df onto the wanted columns, matching headers case/space-insensitively."""
    exprs = []
    for target, candidates in wanted.items():
        col = _match_column(df.columns, candidates)
        if col is None:
            if target in required:
                raise ValueError(f"{source}: no {target} column (expected one of {list(candidates)})")
            exprs.append(pl.lit("").alias(target))
            continue
        exprs.append(
            pl.col(col).cast(pl.Utf8).fill_null("").str.strip_chars().alias(target)
        )
    return df.select(exprs)


def _read_table_csv(path: str) -> pl.DataFrame:
    encoding = detect_encoding(path)
    with open(path, "r", encoding=encoding, errors="replace", newline="") as f:
        separator = detect_delimiter(f.read(4096))
    return pl.read_csv(
        path,
        separator=separator,
        infer_schema_length=0,
        encoding="utf8-lossy",
        truncate_ragged_lines=True,
    )


def _read_table_sqlite(path: str) -> pl.DataFrame:
    conn = sqlite3.connect(f"file:{Path(path).as_posix()}?mode=ro", uri=True)
    try:
        pdf = pd.read_sql_query(f"SELECT * FROM {CELL_TABLE}", conn)
    finally:
        conn.close()
    pdf = pdf.fillna("").astype(str)
    return pl.DataFrame({c: pdf[c].tolist() for c in pdf.columns}, schema={c: pl.Utf8 for c in pdf.columns})


def load_cells(path: str) -> Dict[str, CellInfo]:
    """Cell tower table from CSV or from the `cellids` table of a SQLite file."""
    if Path(path).suffix.lower() in SQLITE_SUFFIXES:
        df = _read_table_sqlite(path)
    else:
        df = _read_table_csv(path)
    df = _select_columns(df, CELL_COLUMNS, ("cell_id",), path)

    cells: Dict[str, CellInfo] = {}
    for row in df.iter_rows(named=True):
        cell_id = row.pop("cell_id")
        if not cell_id or cell_id in cells:
            continue
        cells[cell_id] = CellInfo(**row)
    logger.debug(f"Loaded {len(cells)} cells from {path}")
    return cells


def load_lrn(path: str) -> Dict[str, LRNInfo]:
    """LRN routing table; operator mirrors provider."""
    df = _select_columns(_read_table_csv(path), LRN_COLUMNS, ("lrn", "provider"), path)
    table: Dict[str, LRNInfo] = {}
    for lrn, provider, circle in df.iter_rows():
        key = digits(lrn)
        if not key or key in table:
            continue
        table[key] = LRNInfo(provider=provider, circle=circle, operator=provider)
    logger.debug(f"Loaded {len(table)} LRN entries from {path}")
    return table


def _read_small_csv(path: str):
    for row in CSVReader().read_rows(path):
        if not row:
            continue
        cells = [strip_quotes(c) for c in row]
        if any(cells):
            yield cells


def load_header_aliases(path: str) -> Dict[str, str]:
    """Alias file rows are (alias, canonical) pairs in either order."""
    aliases: Dict[str, str] = {}
    for cells in _read_small_csv(path):
        if len(cells) < 2:
            continue
        a, b = cells[0], cells[1]
        if normalize_header(b) in _CANONICAL_BY_NORM:
            alias, canonical = a, _CANONICAL_BY_NORM[normalize_header(b)]
        elif normalize_header(a) in _CANONICAL_BY_NORM:
            alias, canonical = b, _CANONICAL_BY_NORM[normalize_header(a)]
        else:
            logger.debug(f"Skipping alias row without a canonical field: {cells}")
            continue
        if alias:
            aliases[normalize_header(alias)] = canonical
    return aliases


def load_call_types(path: str) -> Tuple[Dict[str, str], Dict[str, str]]:
    """Return (header aliases, call type codes) from a call type file.

    One-column rows name extra headers for the Call Type field; two-column
    rows map an operator code to CALL_IN, CALL_OUT, SMS_IN or SMS_OUT.
    """
    aliases: Dict[str, str] = {}
    codes: Dict[str, str] = {}
    for cells in _read_small_csv(path):
        values = [c for c in cells if c]
        if len(values) == 1:
            aliases[normalize_header(values[0])] = "Call Type"
        elif len(values) >= 2:
            target = values[1].strip().upper()
            if target in _CALL_TYPES:
                codes[values[0].strip().upper()] = target
            else:
                logger.debug(f"Skipping call type row with unknown target: {values}")
    return aliases, codes
