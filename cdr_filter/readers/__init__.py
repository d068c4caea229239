"""Raw row readers for CDR exports."""

from .base import BaseReader, RawRow, ReaderRegistry
from .csv_reader import CSVReader, detect_delimiter, detect_encoding

__all__ = [
    "BaseReader",
    "RawRow",
    "ReaderRegistry",
    "CSVReader",
    "detect_delimiter",
    "detect_encoding",
]

# Built-in readers; every operator export is delimited text
registry = ReaderRegistry()
registry.register("csv", CSVReader)
registry.register("txt", CSVReader)
