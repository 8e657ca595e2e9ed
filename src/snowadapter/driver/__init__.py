"""
Driver, database and connection handles for Snowflake.
"""

from .base import (
    SUPPORTED_INFO_CODES,
    UNKNOWN_VERSION,
    BuildInfo,
    DriverBase,
    DriverImplBase,
    InfoCode,
    load_build_info,
)
from .snowflake import DRIVER_NAME, VENDOR_NAME, SnowflakeConnection, SnowflakeDatabase, SnowflakeDriver

__all__ = [
    "BuildInfo",
    "DRIVER_NAME",
    "DriverBase",
    "DriverImplBase",
    "InfoCode",
    "SUPPORTED_INFO_CODES",
    "SnowflakeConnection",
    "SnowflakeDatabase",
    "SnowflakeDriver",
    "UNKNOWN_VERSION",
    "VENDOR_NAME",
    "load_build_info",
]
