"""Configuration: canonical schema, operator profiles, runtime settings."""

from .canonical import CANONICAL_HEADER, FIELD_COUNT, Field, new_record
from .profiles import PROFILES, OperatorProfile, get_profile
from .settings import DEFAULT_SETTINGS, diag_enabled, load_settings

__all__ = [
    "CANONICAL_HEADER",
    "FIELD_COUNT",
    "Field",
    "new_record",
    "PROFILES",
    "OperatorProfile",
    "get_profile",
    "DEFAULT_SETTINGS",
    "diag_enabled",
    "load_settings",
]
