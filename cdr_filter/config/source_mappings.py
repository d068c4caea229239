"""Header synonym tables for the different operator exports.

Keys are normalized header text (lowercase, trimmed, single spaces), values
are canonical field names from ``canonical.CANONICAL_HEADER``.
"""

# Shared by every operator
COMMON_HEADER_MAP = {
    "b party no": "B Party",
    "b party number": "B Party",
    "date": "Date",
    "call date": "Date",
    "time": "Time",
    "call time": "Time",
    "dur(s)": "Duration",
    "duration": "Duration",
    "duration(sec)": "Duration",
    "call duration": "Duration",
    "call type": "Call Type",
    "imei": "IMEI",
    "imsi": "IMSI",
    "circle": "Circle",
    "operator": "Operator",
    "lrn": "LRN",
    "lrn no": "LRN",
    "lrn called no": "LRN",
    "call forward": "CallForward",
    "call forwarding": "CallForward",
    "call fwd no": "CallForward",
    "call fow no": "CallForward",
    "b party provider": "B Party Provider",
    "b party circle": "B Party Circle",
    "b party operator": "B Party Operator",
    "service type": "Type",
    "crime": "Crime",
}

JIO_HEADER_MAP = {
    **COMMON_HEADER_MAP,
    "roaming circle name": "Roaming",
}

AIRTEL_HEADER_MAP = {
    **COMMON_HEADER_MAP,
    "roam nw": "Roaming",
    "roaming circle name": "Roaming",
    "lrn tsp-lsa": "B Party Provider",
    "imei manufacturer": "IMEI Manufacturer",
}

VI_HEADER_MAP = {
    **COMMON_HEADER_MAP,
    "call initiation time": "Time",
    "first bts location": "First Cell ID Address",
    "last bts location": "Last Cell ID Address",
    "roaming network": "Roaming",
    "lrn b party number": "LRN",
}

BSNL_HEADER_MAP = {
    **COMMON_HEADER_MAP,
    "call_date": "Date",
    "call_initiation_time": "Time",
    "call_duration": "Duration",
    "other_party_no": "B Party",
    "call_type": "Call Type",
    "roaming circle": "Roaming",
    "lrn_b_party_no": "LRN",
    "call_forward": "CallForward",
    "service_type": "Type",
}

# Mandatory first/last cell columns, resolved outside the alias tables
JIO_FIRST_CELL_HEADERS = ("first cgi", "first cell id")
JIO_LAST_CELL_HEADERS = ("last cgi", "last cell id")
AIRTEL_FIRST_CELL_HEADERS = ("first cgi", "first cell id")
AIRTEL_LAST_CELL_HEADERS = ("last cgi", "last cell id")
VI_FIRST_CELL_HEADERS = ("first cell global id", "first cgi", "first cell id")
VI_LAST_CELL_HEADERS = ("last cell global id", "last cgi", "last cell id")
BSNL_FIRST_CELL_HEADERS = ("first_cell_id", "first cell id", "first cgi")
BSNL_LAST_CELL_HEADERS = ("last_cell_id", "last cell id", "last cgi")

CALLING_PARTY_HEADERS = ("calling party telephone number", "calling number", "calling no")
CALLED_PARTY_HEADERS = ("called party telephone number", "called number", "called no")

# Columns that carry the subject number in the data rows themselves
JIO_IDENTIFIER_HEADERS = ("input value",)
VI_IDENTIFIER_HEADERS = ("msisdn", "msisdn number")
BSNL_IDENTIFIER_HEADERS = ("search value",)

# Footer lines some exports append after the data
TRAILER_MARKERS = ("this is system", "system generated")
