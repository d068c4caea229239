"""CDR normalization, enrichment and reporting pipeline."""

from .analysis import CDRReport, RunStats
from .config import PROFILES, OperatorProfile, get_profile
from .enrichment import ReferenceData
from .errors import CDRFormatError, HeaderNotFoundError, IdentifierNotFoundError, MissingColumnError
from .processor import CDRProcessor
from .readers import CSVReader, ReaderRegistry

__all__ = [
    "CDRProcessor",
    "CDRReport",
    "RunStats",
    "PROFILES",
    "OperatorProfile",
    "get_profile",
    "ReferenceData",
    "CDRFormatError",
    "HeaderNotFoundError",
    "IdentifierNotFoundError",
    "MissingColumnError",
    "CSVReader",
    "ReaderRegistry",
]
