"""Operator profiles: everything that differs between operator exports."""

import re
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Pattern, Tuple

from . import enum_maps, source_mappings as sm


def _frozen(mapping: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class OperatorProfile:
    """Strategy object that parameterizes the generic CDR pipeline.

    header_markers is a tuple of marker groups: a row is the header row when
    every group has at least one cell whose normalized text equals one of the
    group's markers.

    enrichment_overwrite decides whether a reference-table hit replaces a
    non-blank value copied from the source (True) or only fills blanks (False).
    """

    name: str
    display_name: str
    banner_pattern: Pattern[str]
    header_markers: Tuple[Tuple[str, ...], ...]
    header_aliases: Mapping[str, str]
    call_type_codes: Mapping[str, str]
    first_cell_headers: Tuple[str, ...]
    last_cell_headers: Tuple[str, ...]
    calling_headers: Tuple[str, ...] = sm.CALLING_PARTY_HEADERS
    called_headers: Tuple[str, ...] = sm.CALLED_PARTY_HEADERS
    identifier_headers: Tuple[str, ...] = ()
    skip_row_markers: Tuple[str, ...] = sm.TRAILER_MARKERS
    subscription_types: Mapping[str, str] = field(
        default_factory=lambda: _frozen(enum_maps.SUBSCRIPTION_TYPE_MAP)
    )
    cell_id_digits_only: bool = False
    party_digits_only: bool = False
    enrichment_overwrite: bool = True
    infer_service_type: bool = False
    dayfirst: bool = True

    def with_overrides(
        self,
        header_aliases: Optional[Mapping[str, str]] = None,
        call_type_codes: Optional[Mapping[str, str]] = None,
    ) -> "OperatorProfile":
        """Return a copy with externally loaded alias tables layered on top."""
        aliases: Dict[str, str] = dict(self.header_aliases)
        codes: Dict[str, str] = dict(self.call_type_codes)
        if header_aliases:
            aliases.update(header_aliases)
        if call_type_codes:
            codes.update(call_type_codes)
        return replace(self, header_aliases=_frozen(aliases), call_type_codes=_frozen(codes))


JIO = OperatorProfile(
    name="jio",
    display_name="Jio",
    banner_pattern=re.compile(r"(?i)input value[^0-9]*([0-9]{8,15})"),
    header_markers=(sm.JIO_FIRST_CELL_HEADERS, sm.JIO_LAST_CELL_HEADERS),
    header_aliases=_frozen(sm.JIO_HEADER_MAP),
    call_type_codes=_frozen(enum_maps.JIO_CALL_TYPE_MAP),
    first_cell_headers=sm.JIO_FIRST_CELL_HEADERS,
    last_cell_headers=sm.JIO_LAST_CELL_HEADERS,
    identifier_headers=sm.JIO_IDENTIFIER_HEADERS,
    cell_id_digits_only=True,
    enrichment_overwrite=True,
    infer_service_type=True,
)

AIRTEL = OperatorProfile(
    name="airtel",
    display_name="Airtel",
    banner_pattern=re.compile(r"(?i)mobile no[^0-9]*([0-9]{8,15})"),
    header_markers=(("target no",),),
    header_aliases=_frozen(sm.AIRTEL_HEADER_MAP),
    call_type_codes=_frozen(enum_maps.AIRTEL_CALL_TYPE_MAP),
    first_cell_headers=sm.AIRTEL_FIRST_CELL_HEADERS,
    last_cell_headers=sm.AIRTEL_LAST_CELL_HEADERS,
    party_digits_only=True,
    enrichment_overwrite=False,
)

VI = OperatorProfile(
    name="vi",
    display_name="Vi",
    banner_pattern=re.compile(r"(?i)msisdn[^0-9]*([0-9]{8,15})"),
    header_markers=(("call date",),),
    header_aliases=_frozen(sm.VI_HEADER_MAP),
    call_type_codes=_frozen(enum_maps.SPELLED_CALL_TYPE_MAP),
    first_cell_headers=sm.VI_FIRST_CELL_HEADERS,
    last_cell_headers=sm.VI_LAST_CELL_HEADERS,
    identifier_headers=sm.VI_IDENTIFIER_HEADERS,
    party_digits_only=True,
)

BSNL = OperatorProfile(
    name="bsnl",
    display_name="BSNL",
    banner_pattern=re.compile(r"(?i)search\s*value[^0-9]*([0-9]{8,15})"),
    header_markers=(("call_date",),),
    header_aliases=_frozen(sm.BSNL_HEADER_MAP),
    call_type_codes=_frozen(enum_maps.SPELLED_CALL_TYPE_MAP),
    first_cell_headers=sm.BSNL_FIRST_CELL_HEADERS,
    last_cell_headers=sm.BSNL_LAST_CELL_HEADERS,
    identifier_headers=sm.BSNL_IDENTIFIER_HEADERS,
    party_digits_only=True,
)

PROFILES: Mapping[str, OperatorProfile] = MappingProxyType(
    {p.name: p for p in (JIO, AIRTEL, VI, BSNL)}
)


def get_profile(name: str) -> OperatorProfile:
    """Look up a profile by operator name (case-insensitive)."""
    key = (name or "").strip().lower()
    try:
        return PROFILES[key]
    except KeyError:
        raise KeyError(
            f"Unknown operator profile '{name}'. Available: {sorted(PROFILES)}"
        ) from None
