"""Running per-party and per-cell statistics for one CDR run."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set

from cdr_filter.config.canonical import (
    BLANK_PARTY,
    CALL_IN,
    CALL_OUT,
    SMS_IN,
    SMS_OUT,
    Field,
)
from cdr_filter.transforms.utils import parse_duration, parse_iso_date

DIRECTION_OUT_CALL = "out_calls"
DIRECTION_IN_CALL = "in_calls"
DIRECTION_OUT_SMS = "out_sms"
DIRECTION_IN_SMS = "in_sms"
DIRECTION_OTHER = "other"

_EXACT_DIRECTIONS = {
    CALL_OUT: DIRECTION_OUT_CALL,
    CALL_IN: DIRECTION_IN_CALL,
    SMS_OUT: DIRECTION_OUT_SMS,
    SMS_IN: DIRECTION_IN_SMS,
}


def classify_direction(call_type: str) -> str:
    direction = _EXACT_DIRECTIONS.get(call_type)
    if direction:
        return direction
    if "SMS" in call_type:
        return DIRECTION_OUT_SMS if call_type.endswith("OUT") else DIRECTION_IN_SMS
    return DIRECTION_OTHER


def timestamp_of(record: Sequence[str]) -> Optional[str]:
    """ISO-sortable "date time" string, or None without a YYYY-MM-DD date."""
    date = record[Field.DATE]
    if parse_iso_date(date) is None:
        return None
    time = record[Field.TIME]
    return f"{date} {time}" if time else date


def split_lat_long_azimuth(value: str):
    parts = [p.strip() for p in value.split(",")] if value else []
    lat = parts[0] if len(parts) >= 2 else ""
    lon = parts[1] if len(parts) >= 2 else ""
    az = parts[2] if len(parts) >= 3 else ""
    return lat, lon, az


def widen_span(agg, ts: Optional[str]) -> None:
    """Stretch agg.first_call/agg.last_call to cover ts (lexicographic order)."""
    if ts is None:
        return
    if not agg.first_call or ts < agg.first_call:
        agg.first_call = ts
    if not agg.last_call or ts > agg.last_call:
        agg.last_call = ts


@dataclass
class PartyAggregate:
    party: str
    sdr: str = ""
    provider: str = ""
    type: str = ""
    total: int = 0
    out_calls: int = 0
    in_calls: int = 0
    out_sms: int = 0
    in_sms: int = 0
    other: int = 0
    roam_calls: int = 0
    roam_sms: int = 0
    total_duration: float = 0.0
    days: Set[str] = field(default_factory=set)
    cells: Set[str] = field(default_factory=set)
    imeis: Set[str] = field(default_factory=set)
    imsis: Set[str] = field(default_factory=set)
    first_call: str = ""
    last_call: str = ""


@dataclass
class CellAggregate:
    cell_id: str
    calls: int = 0
    address: str = ""
    latitude: str = ""
    longitude: str = ""
    azimuth: str = ""
    roaming: str = ""
    first_call: str = ""
    last_call: str = ""


class AggregationEngine:
    """Folds every emitted canonical record into party and cell aggregates.

    Records must be fed in file order: first-seen attributes and the
    earliest/latest timestamps depend on it. One engine per run.
    """

    def __init__(self):
        self.parties: Dict[str, PartyAggregate] = {}
        self.cells: Dict[str, CellAggregate] = {}
        self.records = 0

    def update(self, record: List[str]) -> None:
        self.records += 1
        ts = timestamp_of(record)
        self._update_party(record, ts)
        self._update_cell(record, ts)

    def _update_party(self, record: List[str], ts: Optional[str]) -> None:
        key = record[Field.B_PARTY] or BLANK_PARTY
        agg = self.parties.get(key)
        if agg is None:
            agg = PartyAggregate(
                party=key,
                sdr=record[Field.B_PARTY_OPERATOR],
                provider=record[Field.B_PARTY_PROVIDER],
                type=record[Field.TYPE],
            )
            self.parties[key] = agg

        call_type = record[Field.CALL_TYPE]
        agg.total += 1
        direction = classify_direction(call_type)
        setattr(agg, direction, getattr(agg, direction) + 1)

        if record[Field.ROAMING]:
            if "SMS" in call_type:
                agg.roam_sms += 1
            else:
                agg.roam_calls += 1

        agg.total_duration += parse_duration(record[Field.DURATION])

        if record[Field.DATE]:
            agg.days.add(record[Field.DATE])
        for cell_field in (Field.FIRST_CELL_ID, Field.LAST_CELL_ID):
            if record[cell_field]:
                agg.cells.add(record[cell_field])
        if record[Field.IMEI]:
            agg.imeis.add(record[Field.IMEI])
        if record[Field.IMSI]:
            agg.imsis.add(record[Field.IMSI])

        widen_span(agg, ts)

    def _update_cell(self, record: List[str], ts: Optional[str]) -> None:
        cell_id = record[Field.FIRST_CELL_ID]
        if not cell_id:
            return
        agg = self.cells.get(cell_id)
        if agg is None:
            lat, lon, az = split_lat_long_azimuth(record[Field.LAT_LONG_AZIMUTH])
            agg = CellAggregate(
                cell_id=cell_id,
                address=record[Field.FIRST_CELL_ADDRESS],
                latitude=lat,
                longitude=lon,
                azimuth=az,
                roaming=record[Field.ROAMING],
            )
            self.cells[cell_id] = agg
        agg.calls += 1
        widen_span(agg, ts)
