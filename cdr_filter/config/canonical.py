"""Canonical 26-column layout shared by every operator profile."""

from enum import IntEnum
from typing import List


class Field(IntEnum):
    """Positions of the canonical record. Keep in sync with CANONICAL_HEADER."""

    CDR_NO = 0
    B_PARTY = 1
    DATE = 2
    TIME = 3
    DURATION = 4
    CALL_TYPE = 5
    FIRST_CELL_ID = 6
    FIRST_CELL_ADDRESS = 7
    LAST_CELL_ID = 8
    LAST_CELL_ADDRESS = 9
    IMEI = 10
    IMSI = 11
    ROAMING = 12
    MAIN_CITY = 13
    SUB_CITY = 14
    LAT_LONG_AZIMUTH = 15
    CRIME = 16
    CIRCLE = 17
    OPERATOR = 18
    LRN = 19
    CALL_FORWARD = 20
    B_PARTY_PROVIDER = 21
    B_PARTY_CIRCLE = 22
    B_PARTY_OPERATOR = 23
    TYPE = 24
    IMEI_MANUFACTURER = 25


CANONICAL_HEADER = (
    "CdrNo",
    "B Party",
    "Date",
    "Time",
    "Duration",
    "Call Type",
    "First Cell ID",
    "First Cell ID Address",
    "Last Cell ID",
    "Last Cell ID Address",
    "IMEI",
    "IMSI",
    "Roaming",
    "Main City(First CellID)",
    "Sub City (First CellID)",
    "Lat-Long-Azimuth (First CellID)",
    "Crime",
    "Circle",
    "Operator",
    "LRN",
    "CallForward",
    "B Party Provider",
    "B Party Circle",
    "B Party Operator",
    "Type",
    "IMEI Manufacturer",
)

FIELD_COUNT = len(CANONICAL_HEADER)

# name -> Field, used only while resolving columns and loading alias files
FIELD_BY_NAME = {name: Field(i) for i, name in enumerate(CANONICAL_HEADER)}

# Canonical call types produced by the per-operator code tables
CALL_IN = "CALL_IN"
CALL_OUT = "CALL_OUT"
SMS_IN = "SMS_IN"
SMS_OUT = "SMS_OUT"

BLANK_PARTY = "(blank)"


def new_record() -> List[str]:
    """Return a fully allocated canonical record (all fields empty)."""
    return [""] * FIELD_COUNT
