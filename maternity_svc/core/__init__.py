"""
Core module for configuration, logging, errors and shared utilities.

This module provides:
- Settings: Application configuration via pydantic-settings
- Exceptions: Domain-specific exception classes with HTTP status codes
- Datetime utilities: UTC-first datetime handling
- Identifiers: Time-ordered ids

Dependency-injection functions live in core.dependencies and are not
re-exported here, since they import the repository and service layers.
"""
from maternity_svc.core.config import settings, Settings
from maternity_svc.core.exceptions import (
    MaternityServiceError,
    PatientNotFoundError,
    DuplicatePatientError,
    RecordNotFoundError,
    InvalidRecordDataError,
    ValidationError,
    PersistenceError,
    setup_exception_handlers,
)
from maternity_svc.core.datetime_utils import (
    utc_now,
    to_utc,
    parse_datetime,
    format_iso,
)
from maternity_svc.core.identifiers import new_id, id_sort_key

__all__ = [
    # Settings
    "settings",
    "Settings",
    # Exceptions
    "MaternityServiceError",
    "PatientNotFoundError",
    "DuplicatePatientError",
    "RecordNotFoundError",
    "InvalidRecordDataError",
    "ValidationError",
    "PersistenceError",
    "setup_exception_handlers",
    # Datetime utilities
    "utc_now",
    "to_utc",
    "parse_datetime",
    "format_iso",
    # Identifiers
    "new_id",
    "id_sort_key",
]
