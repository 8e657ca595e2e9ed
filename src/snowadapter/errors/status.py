"""
Portable status codes shared by every adapter.
"""

from __future__ import annotations

from enum import IntEnum


class Status(IntEnum):
    """
    Backend-independent outcome classes. Values match the ADBC status codes.
    """

    OK = 0
    UNKNOWN = 1
    NOT_IMPLEMENTED = 2
    NOT_FOUND = 3
    ALREADY_EXISTS = 4
    INVALID_ARGUMENT = 5
    INVALID_STATE = 6
    INVALID_DATA = 7
    INTEGRITY = 8
    INTERNAL = 9
    IO = 10
    CANCELLED = 11
    TIMEOUT = 12
    UNAUTHENTICATED = 13
    UNAUTHORIZED = 14
