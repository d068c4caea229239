"""Common string helpers for CDR normalization."""

import math
import re
import unicodedata
from datetime import date, datetime
from typing import Optional, Tuple

_SPACE_RE = re.compile(r"\s+")
_INVISIBLE_RE = re.compile(r"[\u200b\u200c\u200d\ufeff\xa0]+")
_NON_DIGIT_RE = re.compile(r"\D")
_CELL_SEPARATOR_RE = re.compile(r"[\s\-:/.]")
_IDENTIFIER_RE = re.compile(r"\d{8,15}")
_HMS_RE = re.compile(r"^(?:(\d+):)?(\d{1,2}):(\d{1,2}(?:\.\d+)?)$")
_DATE_TIME_RE = re.compile(
    r"^(.+?)(?:T|\s+)(\d{1,2}:\d{2}(?::\d{2})?(?:\.\d+)?(?:\s*[AaPp][Mm])?)(?:Z|[+-]\d{2}:?\d{2})?$"
)
_DAY_MON_YEAR_RE = re.compile(r"^\d{1,2} [A-Za-z]{3} \d{4}$")

QUOTE_CHARS = "\"' \t"

SIGNIFICANT_DIGITS = 10

# Day-first layouts come first; Indian exports write dd/mm/yyyy
_DAYFIRST_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d-%m-%Y",
    "%d/%m/%Y",
    "%d.%m.%Y",
    "%d.%m.%y",
    "%Y.%m.%d",
    "%d-%b-%Y",
    "%d-%b-%y",
    "%d %b %Y",
    "%d/%m/%y",
    "%d-%m-%y",
    "%Y%m%d",
)
_MONTHFIRST_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m-%d-%Y",
    "%m/%d/%Y",
    "%m.%d.%Y",
    "%m.%d.%y",
    "%Y.%m.%d",
    "%b-%d-%Y",
    "%d-%b-%Y",
    "%d %b %Y",
    "%m/%d/%y",
    "%m-%d-%y",
    "%Y%m%d",
)
_TIME_FORMATS = ("%H:%M:%S", "%H:%M", "%H%M%S", "%I:%M:%S %p", "%I:%M %p", "%H:%M:%S.%f")


def normalize_header(s: Optional[str]) -> str:
    """Lowercase, trim and collapse whitespace so header variants compare equal."""
    s = unicodedata.normalize("NFKC", s or "")
    s = _INVISIBLE_RE.sub(" ", s)
    return _SPACE_RE.sub(" ", s.strip().lower())


def strip_quotes(value: Optional[str]) -> str:
    return (value or "").strip(QUOTE_CHARS)


def digits(value: Optional[str]) -> str:
    return _NON_DIGIT_RE.sub("", value or "")


def trailing_digits(value: Optional[str], n: int = SIGNIFICANT_DIGITS) -> str:
    """Last n digits of value (all digits when there are fewer)."""
    d = digits(value)
    return d[-n:] if len(d) > n else d


def same_number(a: Optional[str], b: Optional[str]) -> bool:
    """Compare two phone numbers on their trailing significant digits."""
    ta, tb = trailing_digits(a), trailing_digits(b)
    return bool(ta) and ta == tb


def clean_cell_id(value: Optional[str], digits_only: bool = False) -> str:
    """Strip separators from a cell global id ("404-86-123-4567" -> "404861234567")."""
    value = strip_quotes(value)
    if digits_only:
        return digits(value)
    return _CELL_SEPARATOR_RE.sub("", value)


def extract_identifier(text: Optional[str]) -> str:
    """First 8-15 digit run in text, else every digit in it."""
    m = _IDENTIFIER_RE.search(text or "")
    if m:
        return m.group(0)
    return digits(text)


def split_date_time(value: Optional[str]) -> Tuple[str, str]:
    """Split "2024-01-02 10:05:00" or "2024-01-02T10:05:00" into date and time.

    The time part is empty when the value does not end in a clock time.
    """
    s = strip_quotes(value)
    m = _DATE_TIME_RE.match(s)
    if not m:
        return s, ""
    return m.group(1).strip(), m.group(2)


def normalize_date(value: Optional[str], dayfirst: bool = True) -> str:
    """Return YYYY-MM-DD when the value parses, otherwise the trimmed input."""
    s = strip_quotes(value)
    if not s:
        return ""
    candidate, time_part = split_date_time(s)
    if not time_part and " " in candidate and not _DAY_MON_YEAR_RE.match(candidate):
        candidate = candidate.split(" ", 1)[0]

    formats = _DAYFIRST_DATE_FORMATS if dayfirst else _MONTHFIRST_DATE_FORMATS
    for fmt in formats:
        try:
            return datetime.strptime(candidate, fmt).date().isoformat()
        except ValueError:
            continue
    return s


def normalize_time(value: Optional[str]) -> str:
    """Return HH:MM:SS when the value parses, otherwise the trimmed input."""
    s = strip_quotes(value)
    if not s:
        return ""
    for fmt in _TIME_FORMATS:
        try:
            return datetime.strptime(s, fmt).strftime("%H:%M:%S")
        except ValueError:
            continue
    return s


def parse_duration(value: Optional[str]) -> float:
    """Seconds for "35", "35.0" or "[H:]M:S"; anything else counts as 0."""
    s = strip_quotes(value)
    if not s:
        return 0.0
    try:
        seconds = float(s)
    except ValueError:
        m = _HMS_RE.match(s)
        if not m:
            return 0.0
        hours, minutes, secs = m.groups()
        seconds = int(hours or 0) * 3600 + int(minutes) * 60 + float(secs)
    if not math.isfinite(seconds):
        return 0.0
    return seconds


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """Calendar date from the leading YYYY-MM-DD of a timestamp string."""
    try:
        return date.fromisoformat((value or "")[:10])
    except ValueError:
        return None
