"""
snowadapter public package initialization.

Exposes the Snowflake driver entry point together with the option
vocabulary and the portable error taxonomy.
"""

from .config import AuthType, ValidatedOptions, configure, keys, options_from_env  # noqa: F401
from .driver import (
    BuildInfo,
    InfoCode,
    SnowflakeConnection,
    SnowflakeDatabase,
    SnowflakeDriver,
    load_build_info,
)  # noqa: F401
from .errors import AdapterError, AdbcError, ConfigError, Status, normalize_error  # noqa: F401

__all__ = [
    "AdapterError",
    "AdbcError",
    "AuthType",
    "BuildInfo",
    "ConfigError",
    "InfoCode",
    "SnowflakeConnection",
    "SnowflakeDatabase",
    "SnowflakeDriver",
    "Status",
    "ValidatedOptions",
    "configure",
    "keys",
    "load_build_info",
    "normalize_error",
    "options_from_env",
]
