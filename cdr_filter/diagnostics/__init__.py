"""Diagnostics package: optional, opt-in via env switches."""

from .metrics import log_drops, log_lookup_rates, log_unmapped_headers

__all__ = [
    "log_drops",
    "log_lookup_rates",
    "log_unmapped_headers",
]
