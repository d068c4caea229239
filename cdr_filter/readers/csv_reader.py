"""Delimited text reader for operator CDR exports."""

import csv
import io
import itertools
import logging
import os
from typing import IO, Iterator, Optional

import chardet

from .base import BaseReader, RawRow, Source

logger = logging.getLogger(__name__)

ENCODING_SAMPLE_BYTES = 50_000
DELIMITER_SAMPLE_CHARS = 20_000
CANDIDATE_DELIMITERS = ",;"


def detect_encoding(path: str) -> str:
    """Guess the file encoding from a leading byte sample."""
    with open(path, "rb") as f:
        sample = f.read(ENCODING_SAMPLE_BYTES)
    if not sample:
        return "utf-8"

    result = chardet.detect(sample)
    encoding = result.get("encoding") or "utf-8"
    confidence = result.get("confidence") or 0.0

    # Exports are mostly ASCII/UTF-8; low confidence usually means a short sample
    if confidence < 0.7:
        for candidate in ("utf-8", "cp1252", "latin-1"):
            try:
                sample.decode(candidate)
                return candidate
            except UnicodeDecodeError:
                continue
    return encoding


def detect_delimiter(sample: str) -> str:
    """Pick ',' or ';' for the sample text."""
    if not sample:
        return ","
    try:
        return csv.Sniffer().sniff(sample, delimiters=CANDIDATE_DELIMITERS).delimiter
    except csv.Error:
        lines = sample.splitlines()[:50]
        counts = {c: sum(line.count(c) for line in lines) for c in CANDIDATE_DELIMITERS}
        best = max(counts, key=counts.get)
        return best if counts[best] > 0 else ","


class CSVReader(BaseReader):
    """Reader for comma- or semicolon-separated CDR exports."""

    def read_rows(self, source: Source) -> Iterator[RawRow]:
        if isinstance(source, (str, os.PathLike)):
            path = os.fspath(source)
            encoding = self.config.get("encoding") or detect_encoding(path)
            logger.debug(f"Reading {path} as {encoding}")
            with open(path, "r", encoding=encoding, errors="replace", newline="") as f:
                yield from self._iter_records(f)
        else:
            yield from self._iter_records(source)

    def _iter_records(self, stream: IO[str]) -> Iterator[RawRow]:
        head = stream.read(DELIMITER_SAMPLE_CHARS)
        if head and not head.endswith(("\n", "\r")):
            head += stream.readline()
        delimiter: Optional[str] = self.config.get("delimiter") or detect_delimiter(head)

        lines = itertools.chain(io.StringIO(head, newline=""), stream)
        reader = csv.reader(lines, delimiter=delimiter)
        while True:
            try:
                row = next(reader)
            except StopIteration:
                return
            except csv.Error as e:
                logger.debug(f"Unparsable record near line {reader.line_num}: {e}")
                yield None
                continue
            yield row
