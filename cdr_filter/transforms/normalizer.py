"""Turn one raw CDR row into a canonical record."""

from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence

from cdr_filter.config.canonical import Field, new_record
from cdr_filter.config.profiles import OperatorProfile
from cdr_filter.transforms.columns import ColumnMapping
from cdr_filter.transforms.utils import (
    clean_cell_id,
    normalize_date,
    normalize_time,
    same_number,
    split_date_time,
    strip_quotes,
    trailing_digits,
)


@dataclass(frozen=True)
class RunContext:
    """Per-run values stamped on every record."""

    identifier: str
    crime: str
    profile: OperatorProfile

    @property
    def operator(self) -> str:
        return self.profile.display_name


@dataclass
class NormalizedRow:
    record: List[str]
    first_cell_raw: str
    last_cell_raw: str


def canonical_call_type(value: str, codes: Mapping[str, str]) -> str:
    key = " ".join(value.upper().split())
    return codes.get(key, key)


def expand_subscription(value: str, types: Mapping[str, str]) -> str:
    return types.get(value.strip().lower(), value)


def service_type(call_type: str) -> str:
    if not call_type:
        return ""
    return "SMS" if "SMS" in call_type else "Phone"


def _cell(raw: Sequence[str], idx: Optional[int]) -> str:
    if idx is None or idx >= len(raw):
        return ""
    return strip_quotes(raw[idx])


def select_party(raw: Sequence[str], mapping: ColumnMapping, identifier: str) -> str:
    """Pick the correspondent number of a row.

    With calling and called columns present, the side that is not the subject
    wins; when neither matches, called is preferred over calling. A value that
    is the subject itself defers to the B Party candidate columns and is only
    kept when none of them holds another number.
    """
    calling = _cell(raw, mapping.calling)
    called = _cell(raw, mapping.called)

    if same_number(calling, identifier) and called:
        return called
    if same_number(called, identifier) and calling:
        return calling

    party = called or calling
    if party and not same_number(party, identifier):
        return party

    candidates = [_cell(raw, i) for i in mapping.party_candidates]
    for value in candidates:
        if value and not same_number(value, identifier):
            return value
    if party:
        return party
    for value in candidates:
        if value:
            return value
    return ""


def normalize_row(raw: Sequence[str], mapping: ColumnMapping, context: RunContext) -> NormalizedRow:
    """Build the canonical record for raw; never raises on bad values."""
    profile = context.profile
    record = new_record()

    for idx, target in mapping.columns:
        record[target] = _cell(raw, idx)

    first_raw = _cell(raw, mapping.first_cell)
    last_raw = _cell(raw, mapping.last_cell)
    record[Field.FIRST_CELL_ID] = clean_cell_id(first_raw, profile.cell_id_digits_only)
    record[Field.LAST_CELL_ID] = clean_cell_id(last_raw, profile.cell_id_digits_only)

    date_value = record[Field.DATE]
    if not record[Field.TIME]:
        record[Field.TIME] = split_date_time(date_value)[1]
    record[Field.DATE] = normalize_date(date_value, profile.dayfirst)
    record[Field.TIME] = normalize_time(record[Field.TIME])

    record[Field.CALL_TYPE] = canonical_call_type(record[Field.CALL_TYPE], profile.call_type_codes)
    record[Field.TYPE] = expand_subscription(record[Field.TYPE], profile.subscription_types)
    if profile.infer_service_type and not record[Field.TYPE]:
        record[Field.TYPE] = service_type(record[Field.CALL_TYPE])

    party = select_party(raw, mapping, context.identifier)
    if profile.party_digits_only and len(trailing_digits(party)) == 10:
        party = trailing_digits(party)
    record[Field.B_PARTY] = party

    record[Field.CDR_NO] = context.identifier
    record[Field.CRIME] = context.crime
    if not record[Field.OPERATOR]:
        record[Field.OPERATOR] = context.operator

    return NormalizedRow(record, first_raw, last_raw)
