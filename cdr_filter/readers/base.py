"""Base reader interface and registry."""

import os
from abc import ABC, abstractmethod
from typing import IO, Any, Dict, Iterator, List, Optional, Type, Union

RawRow = Optional[List[str]]
Source = Union[str, "os.PathLike[str]", IO[str]]


class BaseReader(ABC):
    """Base interface for raw row readers.

    Readers yield one list of strings per physical record, or None for a
    record the underlying parser rejected. They never stop on a bad record.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}

    @abstractmethod
    def read_rows(self, source: Source) -> Iterator[RawRow]:
        """Stream raw rows from a path or an open text stream."""


class ReaderRegistry:
    """Registry for file readers keyed by file extension."""

    def __init__(self):
        self._readers: Dict[str, Type[BaseReader]] = {}

    def register(self, file_type: str, reader_class: Type[BaseReader]):
        """Register a reader for specific file type."""
        self._readers[file_type.lower().lstrip(".")] = reader_class

    def get_reader(self, file_type: str) -> Optional[Type[BaseReader]]:
        """Get reader for file type."""
        return self._readers.get(file_type.lower().lstrip("."))

    def detect_reader(self, path: str, default: str = "csv") -> Type[BaseReader]:
        """Pick a reader from the extension; operators ship CSV under many names."""
        ext = os.path.splitext(os.path.basename(str(path)))[1]
        reader = self.get_reader(ext) if ext else None
        if reader is None:
            reader = self._readers[default]
        return reader
