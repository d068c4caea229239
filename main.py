#!/usr/bin/env python3
"""
Command line entry point for the CDR filter pipeline.

Normalizes one or more operator CDR exports, enriches them from the cell and
LRN reference tables and writes the row-level and summary reports.
"""

import argparse
import logging
from typing import Dict, List, Optional

from cdr_filter import CDRProcessor, ReferenceData
from cdr_filter.config import PROFILES, load_settings
from cdr_filter.errors import CDRFormatError
from cdr_filter.outputs import write_outputs

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="CDR normalization and reporting")
    parser.add_argument("inputs", nargs="+", help="CDR export files (CSV or semicolon text)")
    parser.add_argument(
        "--operator", choices=sorted(PROFILES), help="Operator profile (default: jio)"
    )
    parser.add_argument("--crime", type=str, help="Case label stamped on every row")
    parser.add_argument("--cells", type=str, help="Cell tower table (CSV or SQLite)")
    parser.add_argument("--lrn", type=str, help="LRN routing table (CSV)")
    parser.add_argument("--headers", type=str, help="Extra header aliases (Headers.csv)")
    parser.add_argument("--call-types", dest="call_types", type=str, help="Call type aliases (Call_types.csv)")
    parser.add_argument("--output-dir", dest="output_dir", type=str, help="Directory for the reports")
    parser.add_argument("--format", choices=["csv", "xlsx", "both"], help="Output format")
    parser.add_argument("--workers", type=int, help="Files processed in parallel")
    parser.add_argument("--config", type=str, help="Configuration file path (JSON format)")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    return parser


def run(inputs: List[str], settings: Dict) -> int:
    """Process every input with the given settings; returns the exit code."""
    reference = ReferenceData.load(
        cells=settings["cells"],
        lrn=settings["lrn"],
        headers=settings["headers"],
        call_types=settings["call_types"],
    )
    processor = CDRProcessor(reference)
    reports, failures = processor.process_many(
        inputs, settings["operator"], settings["crime"], workers=settings["workers"]
    )

    for path, report in reports.items():
        written = write_outputs(report, settings["output_dir"], settings["format"])
        logger.info(f"{path}: {len(written)} output files for CdrNo {report.identifier}")

    for path, error in failures.items():
        if isinstance(error, CDRFormatError):
            logger.error(f"{path}: {error}")
        else:
            logger.error(f"{path}: unexpected failure: {error!r}")

    return 1 if failures else 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        settings = load_settings(args.config, vars(args))
        logger.info(
            f"Operator={settings['operator']}, inputs={len(args.inputs)}, "
            f"output={settings['output_dir']} ({settings['format']})"
        )
        return run(args.inputs, settings)
    except (OSError, ValueError, KeyError) as e:
        logger.error(f"Application failed: {e}")
        return 1


if __name__ == "__main__":
    exit(main())
