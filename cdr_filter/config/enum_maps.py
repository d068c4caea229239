"""Enum mappings for standardizing categorical CDR values."""

from .canonical import CALL_IN, CALL_OUT, SMS_IN, SMS_OUT

# GSM style codes seen across several operators
BASE_CALL_TYPE_MAP = {
    "CALL_IN": CALL_IN,
    "CALL_OUT": CALL_OUT,
    "SMS_IN": SMS_IN,
    "SMS_OUT": SMS_OUT,
    "MOC": CALL_OUT,
    "MTC": CALL_IN,
    "SMSMO": SMS_OUT,
    "SMSMT": SMS_IN,
}

JIO_CALL_TYPE_MAP = {
    **BASE_CALL_TYPE_MAP,
    "A_IN": CALL_IN,
    "A_OUT": CALL_OUT,
    "A2P_SMSIN": SMS_IN,
    "P2P_SMSIN": SMS_IN,
    "A2P_SMSOUT": SMS_OUT,
    "P2P_SMSOUT": SMS_OUT,
}

AIRTEL_CALL_TYPE_MAP = {
    **BASE_CALL_TYPE_MAP,
    "IN": CALL_IN,
    "A_IN": CALL_IN,
    "OUT": CALL_OUT,
    "A_OUT": CALL_OUT,
    "SMT": SMS_IN,
    "SMO": SMS_OUT,
}

# VI and BSNL share the spelled-out codes
SPELLED_CALL_TYPE_MAP = {
    **BASE_CALL_TYPE_MAP,
    "IN": CALL_IN,
    "OUT": CALL_OUT,
    "INCOMING": CALL_IN,
    "OUTGOING": CALL_OUT,
    "IN SMS": SMS_IN,
    "OUT SMS": SMS_OUT,
    "SMS IN": SMS_IN,
    "SMS OUT": SMS_OUT,
}

SUBSCRIPTION_TYPE_MAP = {
    "pre": "Prepaid",
    "prepaid": "Prepaid",
    "post": "Postpaid",
    "postpaid": "Postpaid",
}
