"""
Error taxonomy and backend error normalization.
"""

from .exceptions import AdapterError, AdbcError, ConfigError
from .normalize import (
    NOT_FOUND_SQLSTATE,
    ErrorShape,
    StructuredBackendError,
    classify_error,
    normalize_error,
)
from .status import Status

__all__ = [
    "AdapterError",
    "AdbcError",
    "ConfigError",
    "ErrorShape",
    "NOT_FOUND_SQLSTATE",
    "Status",
    "StructuredBackendError",
    "classify_error",
    "normalize_error",
]
