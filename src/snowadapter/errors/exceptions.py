"""
Exception hierarchy for snowadapter.
"""

from __future__ import annotations

from typing import Optional

from .status import Status

SQLSTATE_WIDTH = 5


class AdapterError(RuntimeError):
    """Base error for adapter-related failures."""


class ConfigError(AdapterError):
    """
    Raised when an option set is invalid. Detected locally, before any backend call.
    """

    def __init__(self, message: str, *, key: str | None = None) -> None:
        self.key = key
        super().__init__(message)


class AdbcError(AdapterError):
    """
    Backend failure normalized onto the portable taxonomy.

    ``vendor_code`` and ``sqlstate`` stay ``None`` when the source error does
    not expose them, so a real code of ``0`` is never confused with "absent".
    """

    def __init__(
        self,
        message: str,
        *,
        status: Status = Status.UNKNOWN,
        vendor_code: Optional[int] = None,
        sqlstate: Optional[str] = None,
    ) -> None:
        self.status = Status(status)
        self.message = message
        self.vendor_code = vendor_code
        self.sqlstate = sqlstate[:SQLSTATE_WIDTH] if sqlstate else None
        super().__init__(message)

    def with_status(self, status: Status) -> "AdbcError":
        """
        Return a copy classified as ``status``; message and vendor fields are kept.
        """

        retagged = AdbcError(
            self.message,
            status=status,
            vendor_code=self.vendor_code,
            sqlstate=self.sqlstate,
        )
        retagged.__cause__ = self.__cause__
        return retagged

    def __repr__(self) -> str:
        return (
            f"AdbcError(status={self.status.name}, message={self.message!r}, "
            f"vendor_code={self.vendor_code!r}, sqlstate={self.sqlstate!r})"
        )
