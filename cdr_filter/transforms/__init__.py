"""Row-level transformations: header scan, column resolution, normalization."""

from .columns import ColumnMapping, resolve_columns
from .header import HeaderScan, locate_header
from .normalizer import NormalizedRow, RunContext, normalize_row

__all__ = [
    "ColumnMapping",
    "resolve_columns",
    "HeaderScan",
    "locate_header",
    "NormalizedRow",
    "RunContext",
    "normalize_row",
]
