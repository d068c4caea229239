import io
from typing import List

import pytest

from cdr_filter.enrichment import CellInfo, LRNInfo, ReferenceData
from cdr_filter.readers import CSVReader

SUBJECT = "9876543210"

JIO_HEADER = (
    "Call Date,Call Time,Calling Party Telephone Number,Called Party Telephone Number,"
    "Call Type,Dur(s),First CGI,Last CGI,IMEI,IMSI,Roaming Circle Name,LRN Called No"
)

JIO_ROWS = [
    f"02/01/2024,10:00:00,{SUBJECT},9123456789,A_OUT,10,404-86-100-1,404-86-100-2,IMEI1,IMSI1,,1234",
    f"01/01/2024,09:00:00,9123456789,{SUBJECT},A_IN,20,404-86-100-1,404-86-100-1,IMEI1,IMSI1,Delhi,1234",
    f"03/01/2024,08:00:00,{SUBJECT},9000000001,A2P_SMSOUT,5,404-86-100-1,404-86-100-3,IMEI2,IMSI1,,5678",
    f"03/01/2024,11:30:00,{SUBJECT},9123456789,A_OUT,0,404-86-200-9,404-86-200-9,IMEI1,IMSI1,,1234",
]


def make_jio_cdr(rows: List[str] = None, banner: bool = True) -> str:
    lines = []
    if banner:
        lines.append(f'"Input Value : {SUBJECT}"')
        lines.append('"Report generated for law enforcement"')
    lines.append(JIO_HEADER)
    lines.extend(JIO_ROWS if rows is None else rows)
    return "\n".join(lines) + "\n"


def read_text(text: str):
    return CSVReader().read_rows(io.StringIO(text))


@pytest.fixture
def subject() -> str:
    return SUBJECT


@pytest.fixture
def make_cdr():
    return make_jio_cdr


@pytest.fixture
def rows_of():
    return read_text


@pytest.fixture
def jio_rows() -> List[str]:
    return list(JIO_ROWS)


@pytest.fixture
def jio_text() -> str:
    return make_jio_cdr()


@pytest.fixture
def reference() -> ReferenceData:
    return ReferenceData.build(
        cells={
            "404-86-100-1": CellInfo(
                address="MG Road Tower",
                sub_city="Indiranagar",
                main_city="Bengaluru",
                latitude="12.97",
                longitude="77.64",
                azimuth="120",
            ),
            "404861002": CellInfo(address="Ring Road Tower", latitude="12.90", longitude="77.60"),
        },
        lrn={"1234": LRNInfo(provider="Airtel", circle="Karnataka", operator="Airtel")},
    )
