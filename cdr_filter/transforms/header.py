"""Locate the tabular header row and the subject number of a CDR export."""

import logging
import os
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from cdr_filter.config.profiles import OperatorProfile
from cdr_filter.errors import HeaderNotFoundError, IdentifierNotFoundError
from cdr_filter.readers.base import RawRow
from cdr_filter.transforms.utils import extract_identifier, normalize_header

logger = logging.getLogger(__name__)

SOURCE_BANNER = "banner"
SOURCE_COLUMN = "column"
SOURCE_FILENAME = "filename"


@dataclass
class HeaderScan:
    """Result of scanning the head of a CDR stream.

    pending_rows holds data rows that were read ahead while looking for the
    identifier column; they must be processed before the rest of the stream.
    """

    header: List[str]
    identifier: str
    identifier_source: str
    preamble_rows: int = 0
    pending_rows: List[RawRow] = field(default_factory=list)


def is_header_row(row: RawRow, profile: OperatorProfile) -> bool:
    if not row:
        return False
    cells = {normalize_header(c) for c in row}
    return all(any(marker in cells for marker in group) for group in profile.header_markers)


def match_banner(row: RawRow, profile: OperatorProfile) -> str:
    """Identifier captured by the profile banner pattern, or ""."""
    if not row:
        return ""
    m = profile.banner_pattern.search(" ".join(row))
    return m.group(1) if m else ""


def _identifier_column(header: List[str], profile: OperatorProfile) -> Optional[int]:
    for i, cell in enumerate(header):
        name = normalize_header(cell)
        if name and any(h in name for h in profile.identifier_headers):
            return i
    return None


def _is_blank(row: RawRow) -> bool:
    return not row or all(not (c or "").strip() for c in row)


def locate_header(
    rows: Iterator[RawRow], profile: OperatorProfile, source_name: Optional[str] = None
) -> HeaderScan:
    """Consume rows up to and including the header and resolve the identifier.

    Fallback order for the identifier: banner text before the header, the
    profile's identifier column in the first data row, then the digits of
    the source file name.
    """
    banner_id = ""
    preamble = 0
    header: Optional[List[str]] = None

    for row in rows:
        if is_header_row(row, profile):
            header = list(row)
            break
        preamble += 1
        if not banner_id:
            banner_id = match_banner(row, profile)

    if header is None:
        raise HeaderNotFoundError()

    if banner_id:
        logger.debug(f"Identifier {banner_id} taken from banner")
        return HeaderScan(header, banner_id, SOURCE_BANNER, preamble)

    pending: List[RawRow] = []
    idx = _identifier_column(header, profile) if profile.identifier_headers else None
    if idx is not None:
        for row in rows:
            pending.append(row)
            if not _is_blank(row):
                value = row[idx] if idx < len(row) else ""
                column_id = extract_identifier(value)
                if column_id:
                    logger.debug(f"Identifier {column_id} taken from column '{header[idx]}'")
                    return HeaderScan(header, column_id, SOURCE_COLUMN, preamble, pending)
                break

    stem = os.path.splitext(os.path.basename(source_name or ""))[0]
    file_id = extract_identifier(stem)
    if file_id:
        logger.debug(f"Identifier {file_id} taken from file name '{stem}'")
        return HeaderScan(header, file_id, SOURCE_FILENAME, preamble, pending)

    raise IdentifierNotFoundError()
