"""Main CDR processing pipeline."""

import itertools
import logging
import os
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .analysis import AggregationEngine, CDRReport, RunStats, assemble_report
from .config.profiles import OperatorProfile, get_profile
from .diagnostics import log_drops, log_lookup_rates, log_unmapped_headers
from .enrichment import ReferenceData, enrich_row
from .readers import RawRow, registry as reader_registry
from .transforms import ColumnMapping, RunContext, locate_header, normalize_row, resolve_columns

logger = logging.getLogger(__name__)

DROP_PARSE_ERROR = "parse_error"
DROP_BLANK = "blank"
DROP_TRAILER = "trailer"
DROP_FIELD_COUNT = "field_count"


def reject_reason(raw: RawRow, mapping: ColumnMapping, profile: OperatorProfile) -> Optional[str]:
    """Why a data row cannot be normalized, or None when it is usable.

    A row wider than the header is accepted when its extra cells are blank.
    """
    if raw is None:
        return DROP_PARSE_ERROR
    if not any((c or "").strip() for c in raw):
        return DROP_BLANK
    text = " ".join(raw).lower()
    if any(marker in text for marker in profile.skip_row_markers):
        return DROP_TRAILER
    if len(raw) < mapping.width:
        return DROP_FIELD_COUNT
    if len(raw) > mapping.width and any(c.strip() for c in raw[mapping.width:]):
        return DROP_FIELD_COUNT
    return None


class CDRProcessor:
    """Runs CDR exports through header scan, normalization, enrichment and aggregation.

    The processor holds only immutable reference data, so one instance can
    serve concurrent runs; each run owns its own aggregation state.
    """

    def __init__(self, reference: Optional[ReferenceData] = None, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.reference = reference or ReferenceData()
        self.reader_registry = reader_registry

    def profile_for(self, operator: str) -> OperatorProfile:
        """Operator profile with the loaded alias overrides layered on top."""
        return get_profile(operator).with_overrides(
            header_aliases=self.reference.header_aliases,
            call_type_codes=self.reference.call_type_codes,
        )

    def process_file(self, path: str, operator: str, crime: str = "") -> CDRReport:
        """Process one CDR export from disk."""
        path = os.fspath(path)
        reader_cls = self.reader_registry.detect_reader(path)
        reader = reader_cls(self.config.get("reader"))
        logger.info(f"Processing {path} as {operator}")
        return self.process_stream(reader.read_rows(path), operator, crime, source_name=path)

    def process_stream(
        self,
        rows: Iterable[RawRow],
        operator: str,
        crime: str = "",
        source_name: Optional[str] = None,
    ) -> CDRReport:
        """Process an already opened row stream.

        Raises HeaderNotFoundError, IdentifierNotFoundError or
        MissingColumnError before any record is produced.
        """
        profile = self.profile_for(operator)
        source = source_name or "<stream>"
        rows = iter(rows)

        scan = locate_header(rows, profile, source_name)
        mapping = resolve_columns(scan.header, profile)
        context = RunContext(identifier=scan.identifier, crime=crime or "", profile=profile)
        log_unmapped_headers(source, mapping.unmapped)

        engine = AggregationEngine()
        stats = RunStats()
        hits: Counter = Counter(first_cell=0, last_cell=0, lrn=0)
        records: List[List[str]] = []

        for raw in itertools.chain(scan.pending_rows, rows):
            stats.rows_read += 1
            reason = reject_reason(raw, mapping, profile)
            if reason:
                stats.drop(reason)
                logger.debug(f"{source}: dropped data row {stats.rows_read} ({reason})")
                continue

            row = normalize_row(raw, mapping, context)
            found = enrich_row(row, self.reference, profile.enrichment_overwrite)
            hits["first_cell"] += found.first_cell
            hits["last_cell"] += found.last_cell
            hits["lrn"] += found.lrn

            engine.update(row.record)
            records.append(row.record)
            stats.rows_emitted += 1

        report = assemble_report(scan.identifier, profile.name, records, engine, stats)
        logger.info(
            f"{source}: CdrNo={scan.identifier} ({scan.identifier_source}), "
            f"rows read={stats.rows_read}, emitted={stats.rows_emitted}, dropped={stats.rows_dropped}, "
            f"parties={len(engine.parties)}, cells={len(engine.cells)}"
        )
        log_lookup_rates(source, hits, stats.rows_emitted)
        log_drops(source, stats.drops)
        return report

    def process_many(
        self, paths: Sequence[str], operator: str, crime: str = "", workers: int = 1
    ) -> Tuple[Dict[str, CDRReport], Dict[str, Exception]]:
        """Process several files, optionally in parallel.

        A file that fails is logged and returned in the failures map; the
        other files are unaffected.
        """
        reports: Dict[str, CDRReport] = {}
        failures: Dict[str, Exception] = {}

        def run(path: str) -> CDRReport:
            return self.process_file(path, operator, crime)

        with ThreadPoolExecutor(max_workers=max(1, int(workers))) as pool:
            futures = {path: pool.submit(run, path) for path in paths}
            for path, future in futures.items():
                try:
                    reports[path] = future.result()
                except Exception as e:
                    logger.error(f"Failed to process {path}: {e}")
                    failures[path] = e
        return reports, failures
