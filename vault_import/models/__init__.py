"""Domain models for the credential CSV import tool."""

from .config_models import DEFAULT_KEYWORDS, DatabaseConfig, ImportConfig
from .credential import CandidateRecord, CredentialRecord
from .field_mapping import IGNORED, TARGET_FIELDS, FieldMapping, MappingError
from .processing_result import ImportResult, ProcessingResult
from .raw_table import RawTable

__all__ = [
    # Configuration models
    "DEFAULT_KEYWORDS",
    "DatabaseConfig",
    "ImportConfig",
    # Pipeline models
    "CandidateRecord",
    "CredentialRecord",
    "FieldMapping",
    "IGNORED",
    "MappingError",
    "RawTable",
    "TARGET_FIELDS",
    # Results
    "ImportResult",
    "ProcessingResult",
]
