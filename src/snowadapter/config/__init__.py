"""
Option vocabulary and validation for the Snowflake adapter.
"""

from . import keys
from .durations import parse_duration
from .keys import DEFAULT_AUTH_TYPE, AuthType
from .registry import OPTION_SPECS, ValidatedOptions, configure, options_from_env

__all__ = [
    "AuthType",
    "DEFAULT_AUTH_TYPE",
    "OPTION_SPECS",
    "ValidatedOptions",
    "configure",
    "keys",
    "options_from_env",
    "parse_duration",
]
