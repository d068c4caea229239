"""Resolve source header cells to canonical field positions."""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from cdr_filter.config.canonical import CANONICAL_HEADER, FIELD_BY_NAME, Field
from cdr_filter.config.profiles import OperatorProfile
from cdr_filter.errors import MissingColumnError
from cdr_filter.transforms.utils import normalize_header

logger = logging.getLogger(__name__)

# Lower rank wins; equal ranks fall back to the leftmost column
RANK_ALIAS = 0
RANK_HEURISTIC = 1
RANK_IDENTITY = 2

_TOKEN_RE = re.compile(r"[a-z0-9]+")

_IDENTITY = {normalize_header(name): FIELD_BY_NAME[name] for name in CANONICAL_HEADER}

# Filled from the run context or by the mandatory cell columns
_RESERVED = {Field.CDR_NO, Field.CRIME, Field.FIRST_CELL_ID, Field.LAST_CELL_ID}


@dataclass
class ColumnMapping:
    """Winning source column for each canonical field of one header."""

    columns: List[Tuple[int, Field]]
    first_cell: int
    last_cell: int
    calling: Optional[int] = None
    called: Optional[int] = None
    party_candidates: List[int] = field(default_factory=list)
    unmapped: List[str] = field(default_factory=list)
    width: int = 0

    def index_of(self, f: Field) -> Optional[int]:
        for idx, target in self.columns:
            if target == f:
                return idx
        return None


def is_party_header(name: str) -> bool:
    """Header naming the correspondent number, e.g. "B Party Mobile No"."""
    name = name.replace("_", " ")
    if "b party" not in name and "bparty" not in name:
        return False
    if "no" in _TOKEN_RE.findall(name):
        return True
    return any(t in name for t in ("number", "mobile", "phone"))


def _find(names: Sequence[str], synonyms: Sequence[str]) -> Optional[int]:
    for synonym in synonyms:
        for i, name in enumerate(names):
            if name == synonym:
                return i
    return None


def _classify(name: str, profile: OperatorProfile) -> Optional[Tuple[Field, int]]:
    alias = profile.header_aliases.get(name)
    if alias is not None:
        target = FIELD_BY_NAME.get(alias)
        if target is None:
            logger.warning(f"Alias '{name}' points at unknown field '{alias}'")
            return None
        return target, RANK_ALIAS
    if is_party_header(name):
        return Field.B_PARTY, RANK_HEURISTIC
    if name in _IDENTITY:
        return _IDENTITY[name], RANK_IDENTITY
    return None


def resolve_columns(header: Sequence[str], profile: OperatorProfile) -> ColumnMapping:
    """Build the source index -> canonical field mapping for a header row.

    Raises MissingColumnError when either mandatory cell id column is absent.
    """
    names = [normalize_header(h) for h in header]

    first_cell = _find(names, profile.first_cell_headers)
    if first_cell is None:
        raise MissingColumnError(
            f"Missing mandatory column First Cell ID (expected one of {list(profile.first_cell_headers)})"
        )
    last_cell = _find(names, profile.last_cell_headers)
    if last_cell is None:
        raise MissingColumnError(
            f"Missing mandatory column Last Cell ID (expected one of {list(profile.last_cell_headers)})"
        )

    calling = _find(names, profile.calling_headers)
    called = _find(names, profile.called_headers)
    consumed = {first_cell, last_cell, calling, called}

    best: Dict[Field, Tuple[int, int]] = {}
    party: List[Tuple[int, int]] = []
    unmapped: List[str] = []

    for i, name in enumerate(names):
        if i in consumed or not name:
            continue
        hit = _classify(name, profile)
        if hit is None:
            if not any(h in name for h in profile.identifier_headers):
                unmapped.append(header[i])
            continue
        target, rank = hit
        if target in _RESERVED:
            continue
        if target == Field.B_PARTY:
            party.append((rank, i))
            continue
        current = best.get(target)
        if current is None or (rank, i) < current:
            best[target] = (rank, i)

    columns = sorted(((i, target) for target, (_, i) in best.items()), key=lambda p: p[0])
    mapping = ColumnMapping(
        columns=columns,
        first_cell=first_cell,
        last_cell=last_cell,
        calling=calling,
        called=called,
        party_candidates=[i for _, i in sorted(party)],
        unmapped=unmapped,
        width=len(header),
    )
    logger.debug(
        f"Resolved {len(columns)} columns for {profile.name}; "
        f"party candidates={mapping.party_candidates}, unmapped={len(unmapped)}"
    )
    return mapping
