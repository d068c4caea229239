"""Diagnostics helpers (opt-in via CDR_DIAG).

Keep diagnostics separate from core logic. Never mutate inputs.
Failures are logged as errors and do not raise.
"""

import logging
from typing import Mapping

from cdr_filter.config.settings import diag_enabled

logger = logging.getLogger(__name__)


def log_unmapped_headers(source: str, unmapped) -> None:
    """Log header cells that no alias, heuristic or canonical name matched."""
    if not diag_enabled():
        return
    try:
        if unmapped:
            logger.info(f"CDR diag [{source}]: {len(unmapped)} unmapped headers: {list(unmapped)}")
        else:
            logger.info(f"CDR diag [{source}]: every header mapped")
    except Exception as e:
        logger.error(f"log_unmapped_headers failed: {e}", exc_info=True)


def log_lookup_rates(source: str, hits: Mapping[str, int], rows: int) -> None:
    """Log the share of emitted rows that hit each reference table."""
    if not diag_enabled():
        return
    try:
        rates = {
            name: f"{count}/{rows} ({(count / rows * 100) if rows else 0.0:.1f}%)"
            for name, count in hits.items()
        }
        logger.info(f"CDR diag [{source}]: lookup hits {rates}")
    except Exception as e:
        logger.error(f"log_lookup_rates failed: {e}", exc_info=True)


def log_drops(source: str, drops: Mapping[str, int]) -> None:
    """Log dropped-row counts by reason."""
    if not diag_enabled():
        return
    try:
        total = sum(drops.values())
        logger.info(f"CDR diag [{source}]: dropped {total} rows by reason {dict(drops)}")
    except Exception as e:
        logger.error(f"log_drops failed: {e}", exc_info=True)
